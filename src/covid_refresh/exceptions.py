"""
Exception types raised by the refresh pipeline.

A provider answering with no matching record is not an error: it is shaped
into a record with ``hasData=False``.
"""

from typing import Optional


class CovidRefreshError(Exception):
    """Base class for errors raised by this package."""


class ConfigError(CovidRefreshError):
    """Required configuration (e.g. the provider API key) is missing or invalid."""


class UpstreamError(CovidRefreshError):
    """The data provider request failed and will not be retried."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

    def __str__(self) -> str:
        message = super().__str__()
        if self.status is not None:
            return f"{message} (status={self.status})"
        return message


class UpstreamTransientError(UpstreamError):
    """Network-layer failure that persisted through every retry attempt."""
