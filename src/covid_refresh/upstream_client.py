"""
Upstream COVID-19 API Client

Fetches the raw per-country payload from the API Ninjas covid19 endpoint.
Transient network failures are retried with exponential backoff; HTTP error
statuses and missing credentials are not.
"""

import os
import time
from typing import Any, Callable, Optional

import requests

from .config.constants import (
    API_KEY_ENV_VAR,
    API_KEY_HEADER,
    API_URL,
    MAX_RETRIES,
    REQUEST_TIMEOUT_SECONDS,
    RETRY_BACKOFF_FACTOR,
    RETRY_BASE_DELAY_SECONDS,
)
from .config.logging_config import get_logger
from .exceptions import ConfigError, UpstreamError, UpstreamTransientError

logger = get_logger(__name__)

# DNS failures, connection resets and timeouts all surface as one of these
TRANSIENT_EXCEPTIONS = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)

# ConnectionError subclasses that a retry will not fix
NON_RETRYABLE_EXCEPTIONS = (requests.exceptions.SSLError, requests.exceptions.ProxyError)


class UpstreamClient:
    """HTTP client for a single-country fetch from the data provider."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = API_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        max_attempts: int = MAX_RETRIES,
        base_delay: float = RETRY_BASE_DELAY_SECONDS,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.session = session or requests.Session()
        self.sleep = sleep

    def _resolve_api_key(self) -> str:
        api_key = self.api_key or os.getenv(API_KEY_ENV_VAR)
        if not api_key:
            raise ConfigError(f"Missing {API_KEY_ENV_VAR} in environment")
        return api_key

    def retry_delay(self, attempt: int) -> float:
        """Delay in seconds after failed ``attempt`` (1-based): 0.5, 1.5, 4.5, ..."""
        return self.base_delay * RETRY_BACKOFF_FACTOR ** (attempt - 1)

    def fetch_country(self, country_name: str) -> Any:
        """
        Fetch the raw provider payload for one canonical country name.

        Args:
            country_name: Canonical country name, sent as the ``country`` parameter

        Returns:
            Decoded JSON payload (normally a list of regional records)

        Raises:
            ConfigError: If no API key is configured
            UpstreamError: If the provider answers with an error status or invalid JSON
            UpstreamTransientError: If every attempt failed at the network layer
        """
        api_key = self._resolve_api_key()

        last_error = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                logger.info(f"Attempt {attempt}/{self.max_attempts} fetching {country_name}")
                response = self.session.get(
                    self.base_url,
                    params={"country": country_name},
                    headers={API_KEY_HEADER: api_key},
                    timeout=self.timeout,
                )
                response.raise_for_status()
                return response.json()

            except NON_RETRYABLE_EXCEPTIONS as e:
                logger.error(f"Request for {country_name} failed: {e}")
                raise UpstreamError(f"Failed to fetch {country_name}: {e}") from e

            except TRANSIENT_EXCEPTIONS as e:
                last_error = e
                logger.warning(f"Attempt {attempt} failed for {country_name}: {e}")
                if attempt == self.max_attempts:
                    break
                delay = self.retry_delay(attempt)
                logger.info(f"Retrying {country_name} in {delay:.1f}s...")
                self.sleep(delay)

            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                logger.error(f"Provider returned an error for {country_name}: {e}")
                raise UpstreamError(f"Failed to fetch {country_name}: {e}", status=status) from e

            except ValueError as e:
                logger.error(f"Failed to parse provider response for {country_name}: {e}")
                raise UpstreamError(f"Invalid JSON for {country_name}: {e}") from e

            except requests.exceptions.RequestException as e:
                logger.error(f"Request for {country_name} failed: {e}")
                raise UpstreamError(f"Failed to fetch {country_name}: {e}") from e

        logger.error(f"Giving up on {country_name} after {self.max_attempts} attempts")
        raise UpstreamTransientError(
            f"Failed to fetch {country_name} after {self.max_attempts} attempts: {last_error}"
        ) from last_error
