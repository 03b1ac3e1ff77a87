"""
COVID-19 Country Data Service

Entry point used by the dashboard (and any other caller). Owns the store, the
upstream client, the refresh queue and the scheduler, and exposes the read and
refresh operations. Construct one instance per process.

Reads always answer from persisted state; refreshes run in the background and
are never awaited by the caller.
"""

from typing import Dict, Iterable, Optional

from .color_scale import get_legend
from .config.constants import SCHEDULER_INTERVAL_SECONDS
from .config.logging_config import get_logger
from .config.settings import Settings
from .name_normalizer import normalize_country_name, normalize_country_names
from .readers import get_batch_from_db, get_country_from_db
from .refresh_queue import RefreshQueue
from .scheduler import RefreshScheduler
from .store import CountryStore
from .time_series import build_country_time_series
from .upstream_client import UpstreamClient

logger = get_logger(__name__)


class CovidService:
    """
    Facade over the refresh pipeline.

    Args:
        store: Country store
        client: Upstream client; only needed when ``queue`` is not given
        queue: Refresh queue; built from ``store`` and ``client`` when omitted
        scheduler: Scheduler; built from ``store`` and ``queue`` when omitted
    """

    def __init__(
        self,
        store: CountryStore,
        client: Optional[UpstreamClient] = None,
        queue: Optional[RefreshQueue] = None,
        scheduler: Optional[RefreshScheduler] = None,
    ):
        self.store = store
        self.client = client or UpstreamClient()
        self.queue = queue or RefreshQueue(store, fetch=self.client.fetch_country)
        self.scheduler = scheduler or RefreshScheduler(store, self.queue)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CovidService":
        """Wire a service from environment settings."""
        settings = settings or Settings.from_env()
        store = CountryStore(settings.database_url)
        client = UpstreamClient(api_key=settings.api_key, base_url=settings.api_url)
        queue = RefreshQueue(
            store, fetch=client.fetch_country, gap_seconds=settings.refresh_gap_seconds
        )
        return cls(store, client=client, queue=queue)

    def get_country_from_db(self, country: str) -> Dict:
        """Persisted snapshot for one country. Does not trigger a refresh."""
        return get_country_from_db(self.store, normalize_country_name(country))

    def get_batch_from_db(self, countries: Iterable[str]) -> Dict:
        """Persisted snapshots for several countries, colored by the batch maximum."""
        return get_batch_from_db(self.store, normalize_country_names(countries))

    def refresh_countries(self, countries: Iterable[str]) -> None:
        """Queue a background refresh and return immediately."""
        try:
            self.queue.enqueue(normalize_country_names(countries))
        except Exception:
            logger.exception("Background refresh could not be queued")

    def get_country_time_series(self, country: str) -> Dict:
        """Daily case/death series and summary stats from the stored raw payload."""
        return build_country_time_series(self.store, normalize_country_name(country))

    def start_covid_scheduler(self, interval_seconds: float = SCHEDULER_INTERVAL_SECONDS) -> bool:
        """Start periodic refresh of every known country (no-op if already started)."""
        return self.scheduler.start(interval_seconds)

    def get_legend(self, max_value: Optional[float] = None) -> Dict:
        return get_legend(max_value)

    def seed(self, countries: Iterable[str]) -> Dict:
        """Start a background refresh for a list of countries."""
        names = normalize_country_names(countries)
        if not names:
            raise ValueError("countries list is required")
        self.refresh_countries(names)
        return {"message": "Seed started", "count": len(names)}

    def status(self) -> Dict:
        """Number of stored countries and the latest refresh time."""
        return self.store.status()

    def shutdown(self) -> None:
        self.scheduler.stop()
