"""
Persistent Country Store

SQLAlchemy-backed store holding one record per canonical country name.
Records cross the module boundary as plain dicts with the camelCase field
names the dashboard and frontend consume.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Float, String, Text, create_engine, func, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from .config.constants import COUNTRY_TABLE_NAME, DEFAULT_DATABASE_URL
from .config.logging_config import get_logger

logger = get_logger(__name__)

# record dict key -> model attribute
FIELD_COLUMNS = {
    "country": "country",
    "casesTotal": "cases_total",
    "deathsTotal": "deaths_total",
    "hasData": "has_data",
    "lastError": "last_error",
    "raw": "raw",
    "updatedAt": "updated_at",
    "createdAt": "created_at",
}


def utc_now() -> datetime:
    """Return current UTC datetime (aware)."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from backends without timezone support."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Base(DeclarativeBase):
    pass


class CovidCountry(Base):
    """Latest known totals and raw provider payload for one country."""

    __tablename__ = COUNTRY_TABLE_NAME

    country: Mapped[str] = mapped_column(String(255), primary_key=True)
    cases_total: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    deaths_total: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    has_data: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    raw: Mapped[Optional[Any]] = mapped_column(JSON(none_as_null=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        record = {key: getattr(self, attr) for key, attr in FIELD_COLUMNS.items()}
        record["updatedAt"] = as_utc(record["updatedAt"])
        record["createdAt"] = as_utc(record["createdAt"])
        return record


class CountryStore:
    """
    Key-value style store over the ``covid_countries`` table.

    Each operation runs in its own session, so one store can be shared by the
    refresh worker thread and readers.
    """

    def __init__(self, database_url: str = DEFAULT_DATABASE_URL, engine=None):
        self.engine = engine or _create_engine(database_url)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        Base.metadata.create_all(self.engine)
        logger.info(f"Country store ready at {self.engine.url.render_as_string()}")

    def find_by_key(self, country: str) -> Optional[Dict[str, Any]]:
        """Return the record for ``country`` or None."""
        with self._session_factory() as session:
            row = session.get(CovidCountry, country)
            return row.to_dict() if row is not None else None

    def find_many(self, countries: Iterable[str]) -> List[Dict[str, Any]]:
        """Return the records for every name in ``countries`` that exists."""
        names = list(countries)
        if not names:
            return []
        with self._session_factory() as session:
            rows = session.scalars(select(CovidCountry).where(CovidCountry.country.in_(names)))
            return [row.to_dict() for row in rows]

    def upsert(self, country: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create the record for ``country`` or overwrite the given fields.

        Args:
            country: Canonical country name (the key)
            fields: Record fields to set, keyed by camelCase name

        Returns:
            The stored record
        """
        unknown = set(fields) - set(FIELD_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown record fields: {sorted(unknown)}")

        with self._session_factory() as session, session.begin():
            row = session.get(CovidCountry, country)
            if row is None:
                row = CovidCountry(country=country, has_data=False, created_at=utc_now())
                session.add(row)
            for key, value in fields.items():
                if key in ("country", "createdAt"):
                    continue
                setattr(row, FIELD_COLUMNS[key], value)
            if "updatedAt" not in fields:
                row.updated_at = utc_now()
            return row.to_dict()

    def distinct_keys(self) -> List[str]:
        """Every canonical country name ever persisted."""
        with self._session_factory() as session:
            return list(session.scalars(select(CovidCountry.country).distinct()))

    def status(self) -> Dict[str, Any]:
        """Record count and the most recent refresh timestamp."""
        with self._session_factory() as session:
            count = session.scalar(select(func.count()).select_from(CovidCountry))
            last_updated = session.scalar(select(func.max(CovidCountry.updated_at)))
            return {"count": count or 0, "lastUpdatedAt": as_utc(last_updated)}


def _create_engine(database_url: str):
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection so every thread sees the same in-memory database
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)
