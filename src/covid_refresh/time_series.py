"""
COVID-19 Time Series Aggregation Module

Rebuilds daily case and death series for one country from the raw provider
payload kept on its stored record, and summarizes them.

Each provider sub-record carries ``cases`` and ``deaths`` dictionaries keyed by
ISO date, each value ``{"total": ..., "new": ...}``. When no country-wide
aggregate sub-record exists the regions are folded together: cumulative totals
take the maximum per date (so overlapping regional totals are not double
counted) while daily new values are summed.
"""

from typing import Any, Dict, List, Optional

import pandas as pd

from .config.logging_config import get_logger
from .data_shaper import is_aggregate_record

logger = get_logger(__name__)

METRICS = ("cases", "deaths")


def _as_number(value: Any):
    value = float(value)
    return int(value) if value.is_integer() else value


def _series_rows(items: List[Dict], metric: str) -> List[Dict]:
    rows = []
    for item in items:
        block = item.get(metric) if isinstance(item, dict) else None
        if not isinstance(block, dict):
            continue
        for date, point in block.items():
            if not isinstance(point, dict):
                continue
            rows.append({"date": str(date), "total": point.get("total"), "new": point.get("new")})
    return rows


def aggregate_series(items: List[Dict], metric: str) -> List[Dict]:
    """
    Fold the ``metric`` series of every sub-record into one daily series.

    Args:
        items: Provider sub-records used as the data source
        metric: ``"cases"`` or ``"deaths"``

    Returns:
        Points ``{"date", "total", "new"}`` sorted ascending by date
    """
    rows = _series_rows(items, metric)
    if not rows:
        return []

    df = pd.DataFrame(rows, columns=["date", "total", "new"])
    df["total"] = pd.to_numeric(df["total"], errors="coerce").fillna(0)
    df["new"] = pd.to_numeric(df["new"], errors="coerce").fillna(0)

    daily = (
        df.groupby("date", sort=True)
        .agg(total=("total", "max"), new=("new", "sum"))
        .reset_index()
    )
    daily["total"] = daily["total"].clip(lower=0)

    return [
        {"date": row.date, "total": _as_number(row.total), "new": _as_number(row.new)}
        for row in daily.itertuples(index=False)
    ]


def compute_series_stats(points: List[Dict]) -> Optional[Dict]:
    """
    Summary statistics for one aggregated series.

    Returns:
        ``startDate``, ``endDate``, ``total`` (last cumulative value), ``peakNew``
        and ``peakDate`` (first point with the highest daily value), or None for
        an empty series
    """
    if not points:
        return None

    peak = points[0]
    for point in points[1:]:
        if point["new"] > peak["new"]:
            peak = point

    return {
        "startDate": points[0]["date"],
        "endDate": points[-1]["date"],
        "total": points[-1]["total"],
        "peakNew": peak["new"],
        "peakDate": peak["date"],
    }


def combine_stats(cases_stats: Optional[Dict], deaths_stats: Optional[Dict]) -> Dict:
    """Merge per-metric stats; date range prefers the cases series."""
    cases_stats = cases_stats or {}
    deaths_stats = deaths_stats or {}
    return {
        "totalCases": cases_stats.get("total"),
        "totalDeaths": deaths_stats.get("total"),
        "startDate": cases_stats.get("startDate") or deaths_stats.get("startDate"),
        "endDate": cases_stats.get("endDate") or deaths_stats.get("endDate"),
        "peakDailyCases": cases_stats.get("peakNew"),
        "peakCasesDate": cases_stats.get("peakDate"),
        "peakDailyDeaths": deaths_stats.get("peakNew"),
        "peakDeathsDate": deaths_stats.get("peakDate"),
    }


def empty_time_series(country: str) -> Dict:
    return {"country": country, "series": {"cases": [], "deaths": []}, "stats": None}


def build_time_series(country: str, raw: Any) -> Dict:
    """
    Build the time series response from a raw provider payload.

    Args:
        country: Country name reported in the response
        raw: Stored raw payload (a list of sub-records)

    Returns:
        ``{"country", "series": {"cases", "deaths"}, "stats"}``
    """
    if not isinstance(raw, list) or not raw:
        return empty_time_series(country)

    aggregate = next((item for item in raw if is_aggregate_record(item)), None)
    sources = [aggregate] if aggregate is not None else raw

    series = {metric: aggregate_series(sources, metric) for metric in METRICS}
    stats = combine_stats(
        compute_series_stats(series["cases"]), compute_series_stats(series["deaths"])
    )

    logger.debug(
        f"Built time series for {country}: {len(series['cases'])} case points, "
        f"{len(series['deaths'])} death points"
    )
    return {"country": country, "series": series, "stats": stats}


def build_country_time_series(store, country: str) -> Dict:
    """
    Time series for a stored country.

    A country that was never fetched, or whose payload has no history, yields
    empty series and ``stats=None``.
    """
    record = store.find_by_key(country)
    if record is None:
        return empty_time_series(country)
    return build_time_series(record["country"], record.get("raw"))
