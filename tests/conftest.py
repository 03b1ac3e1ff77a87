"""Shared fixtures for the covid_refresh test suite."""

import pytest

from covid_refresh.store import CountryStore


@pytest.fixture
def store():
    """Fresh in-memory store per test."""
    return CountryStore("sqlite://")


@pytest.fixture
def regional_payload():
    """Provider payload with two provinces and no country-wide aggregate."""
    return [
        {
            "country": "Canada",
            "region": "Ontario",
            "cases": {
                "2023-01-01": {"total": 100, "new": 3},
                "2023-01-02": {"total": 104, "new": 4},
            },
            "deaths": {
                "2023-01-01": {"total": 10, "new": 1},
            },
        },
        {
            "country": "Canada",
            "region": "Quebec",
            "cases": {
                "2023-01-01": {"total": 80, "new": 5},
                "2023-01-03": {"total": 90, "new": 10},
            },
            "deaths": {
                "2023-01-01": {"total": 12, "new": 2},
            },
        },
    ]


@pytest.fixture
def totals_payload():
    """Provider payload carrying plain totals, one of them the 'All' aggregate."""
    return [
        {"country": "Canada", "region": "Ontario", "cases": {"total": 500}, "deaths": {"total": 5}},
        {"country": "Canada", "region": "All", "cases": {"total": 1200}, "deaths": {"total": 30}},
        {"country": "Canada", "region": "Quebec", "cases": {"total": 700}, "deaths": {"total": 25}},
    ]
