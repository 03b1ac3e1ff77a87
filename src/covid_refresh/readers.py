"""
Store-backed readers for single-country and batch views.

Readers answer only from persisted state. A country that has never been
fetched is reported as a zero-value record, not an error.
"""

import math
from typing import Dict, Iterable, Optional

from .color_scale import value_to_color_hex
from .config.constants import DEFAULT_GREY_HEX


def record_to_dto(record: Optional[Dict], country: str = "") -> Dict:
    """
    Convert a stored record into the response shape.

    ``colorHex`` starts as the default grey; batch reads recolor it relative
    to the batch maximum.
    """
    if not record:
        return {
            "country": country,
            "casesTotal": None,
            "deathsTotal": None,
            "colorHex": DEFAULT_GREY_HEX,
            "hasData": False,
        }
    return {
        "country": record["country"],
        "casesTotal": record.get("casesTotal"),
        "deathsTotal": record.get("deathsTotal"),
        "colorHex": DEFAULT_GREY_HEX,
        "hasData": bool(record.get("hasData")),
    }


def get_country_from_db(store, country: str) -> Dict:
    """Snapshot for one canonical country name."""
    return record_to_dto(store.find_by_key(country), country)


def max_cases_total(results: Iterable[Dict]) -> float:
    """Largest finite ``casesTotal`` among the results, or 0 when none has data."""
    max_value = 0
    for result in results:
        value = result.get("casesTotal")
        if value is not None and math.isfinite(value) and value > max_value:
            max_value = value
    return max_value


def get_batch_from_db(store, countries: Iterable[str]) -> Dict:
    """
    Snapshots for several countries, colored relative to the batch maximum.

    Args:
        store: Country store
        countries: Canonical country names; duplicates are collapsed

    Returns:
        ``{"maxValue": number, "results": [dto, ...]}`` in request order
    """
    names = list(dict.fromkeys(countries or []))
    by_name = {record["country"]: record for record in store.find_many(names)}

    results = [record_to_dto(by_name.get(name), name) for name in names]
    max_value = max_cases_total(results)
    for result in results:
        result["colorHex"] = value_to_color_hex(result["casesTotal"], max_value)

    return {"maxValue": max_value, "results": results}
