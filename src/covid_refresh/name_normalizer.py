"""
Country Name Normalization Module

Maps user-supplied and map-label spellings of country names to the canonical
names the data provider expects. The canonical name is also the persistence
key, so every entry point normalizes before reading or enqueueing.
"""

from typing import Iterable, List, Optional

from .config.constants import COUNTRY_ALIASES
from .config.logging_config import get_logger

logger = get_logger(__name__)


def normalize_country_name(name: Optional[str]) -> str:
    """
    Normalize a single country name.

    Args:
        name: Country name as supplied by the caller

    Returns:
        Canonical provider name, or the trimmed input (case preserved) when no
        alias matches
    """
    raw = (name or "").strip()
    return COUNTRY_ALIASES.get(raw.lower(), raw)


def normalize_country_names(names: Optional[Iterable[str]]) -> List[str]:
    """
    Normalize a list of country names, dropping blanks and collapsing aliases.

    Args:
        names: Country names as supplied by the caller

    Returns:
        Canonical names in first-seen order without duplicates; non-string
        entries are skipped
    """
    seen = set()
    canonical = []
    for name in names or []:
        if not isinstance(name, str):
            logger.warning(f"Skipping non-string country name: {name!r}")
            continue
        normalized = normalize_country_name(name)
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        canonical.append(normalized)

    logger.debug(f"Normalized {len(canonical)} country names")
    return canonical
