"""
COVID-19 Payload Shaping Module

Turns a raw provider payload - usually a list of regional sub-records - into a
normalized per-country totals record.
"""

from typing import Any, Dict, List, Optional

import numpy as np

from .config.constants import AGGREGATE_REGION_LABEL, REGION_KEYS


def coerce_number(value: Any) -> Optional[float]:
    """
    Coerce a provider value to a finite float.

    Numeric strings are accepted; None, booleans, non-numeric strings and
    non-finite numbers become None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if np.isfinite(number) else None


def region_label(item: Any) -> str:
    """Lower-cased region/province/state label of a sub-record ("" if none)."""
    if not isinstance(item, dict):
        return ""
    for key in REGION_KEYS:
        if item.get(key):
            return str(item[key]).strip().lower()
    return ""


def is_aggregate_record(item: Any) -> bool:
    """True when the sub-record is the country-wide aggregate (region "All")."""
    return region_label(item) == AGGREGATE_REGION_LABEL


def _metric_total(item: Any, metric: str) -> Optional[float]:
    if not isinstance(item, dict):
        return None
    block = item.get(metric)
    if not isinstance(block, dict):
        return None
    return coerce_number(block.get("total"))


def pick_best_aggregate(items: Optional[List[Dict]]) -> Optional[Dict]:
    """
    Select the sub-record that best represents the whole country.

    The explicit aggregate wins; otherwise the sub-record with the largest
    ``cases.total``, ties going to the first one seen.
    """
    if not items:
        return None
    if len(items) == 1:
        return items[0]

    for item in items:
        if is_aggregate_record(item):
            return item

    best = items[0]
    best_total = _metric_total(best, "cases") or 0
    for item in items[1:]:
        total = _metric_total(item, "cases") or 0
        if total > best_total:
            best, best_total = item, total
    return best


def empty_record(country_name: str) -> Dict:
    """Shaped record for a country with no known totals."""
    return {
        "country": country_name,
        "casesTotal": None,
        "deathsTotal": None,
        "hasData": False,
    }


def shape_country_data(country_name: str, payload: Any) -> Dict:
    """
    Shape a raw provider payload into a per-country totals record.

    Args:
        country_name: Canonical country name the payload was fetched for
        payload: Decoded provider response (list of sub-records or one record)

    Returns:
        Dictionary with ``country``, ``casesTotal``, ``deathsTotal`` and ``hasData``
    """
    best = pick_best_aggregate(payload) if isinstance(payload, list) else payload
    if not best or not isinstance(best, dict):
        return empty_record(country_name)

    cases_total = _metric_total(best, "cases")
    deaths_total = _metric_total(best, "deaths")
    return {
        "country": country_name,
        "casesTotal": cases_total,
        "deathsTotal": deaths_total,
        "hasData": cases_total is not None or deaths_total is not None,
    }
