"""Utility exports."""

from .date_parser import (
    DateRange,
    find_single_date,
    newest_first_key,
    normalize_date,
    parse_date_range,
)
from .helpers import (
    clamp01,
    compact_key,
    deduplicate_by_key,
    normalize_url,
    normalize_whitespace,
    skill_key,
)
from .logger import get_logger

__all__ = [
    "get_logger",
    "normalize_url",
    "normalize_whitespace",
    "compact_key",
    "skill_key",
    "deduplicate_by_key",
    "clamp01",
    "DateRange",
    "normalize_date",
    "parse_date_range",
    "find_single_date",
    "newest_first_key",
]
