"""Parse and normalize CV date ranges ("Jan 2020 - Present", "2020-2022", "03/2020-03/2022")."""

import re
from datetime import date
from typing import NamedTuple, Optional

_MONTHS = [
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
]

MONTH_PATTERN = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
PRESENT_PATTERN = r"(?:present|current|now|today|ongoing)"
RANGE_SEPARATOR = r"\s*(?:-|–|—|\bto\b|\buntil\b|\btill\b)\s*"

# Canonicalizable single dates: "Jan 2020", "03/2020", "2020-03", "2020"
DATE_TOKEN_PATTERN = (
    rf"(?:\b{MONTH_PATTERN}\s+(?:19|20)\d{{2}}"
    r"|\b\d{1,2}/(?:19|20)\d{2}"
    r"|\b(?:19|20)\d{2}[-/.]\d{1,2}(?!\d)"
    r"|\b(?:19|20)\d{2})"
)

DATE_RANGE_RE = re.compile(
    rf"(?P<start>{DATE_TOKEN_PATTERN}){RANGE_SEPARATOR}"
    rf"(?P<end>{DATE_TOKEN_PATTERN}|\b{PRESENT_PATTERN}\b)(?!\d)",
    re.IGNORECASE,
)

# Word + year tokens we cannot canonicalize ("Summer 2019 - Fall 2020")
LOOSE_DATE_RANGE_RE = re.compile(
    rf"(?P<start>\b[A-Za-z]+\.?\s+(?:19|20)\d{{2}}|\b(?:19|20)\d{{2}}){RANGE_SEPARATOR}"
    rf"(?P<end>\b[A-Za-z]+\.?\s+(?:19|20)\d{{2}}|\b(?:19|20)\d{{2}})",
    re.IGNORECASE,
)

SINGLE_DATE_RE = re.compile(rf"{DATE_TOKEN_PATTERN}(?!\d)", re.IGNORECASE)
_PRESENT_RE = re.compile(rf"^{PRESENT_PATTERN}$", re.IGNORECASE)
_YEAR_RE = re.compile(r"(?:19|20)\d{2}")


class DateRange(NamedTuple):
    """A parsed date range; start/end are canonical unless parsed is False."""

    start: Optional[str]
    end: Optional[str]
    current: bool
    parsed: bool
    raw: str


def is_present(token: str) -> bool:
    return bool(_PRESENT_RE.match((token or "").strip()))


def normalize_date(token: str) -> Optional[str]:
    """
    Normalize one date token to "YYYY-MM" (month known) or "YYYY" (year only).
    Returns None if the token is not a recognized date.
    """
    if not token:
        return None
    text = token.strip().rstrip(".").strip()

    m = re.fullmatch(r"(\d{1,2})/(\d{4})", text)
    if m:
        return _year_month(int(m.group(2)), int(m.group(1)))

    m = re.fullmatch(r"(\d{4})[-/.](\d{1,2})", text)
    if m:
        return _year_month(int(m.group(1)), int(m.group(2)))

    m = re.fullmatch(r"([A-Za-z]+)\.?\s+(\d{4})", text)
    if m:
        try:
            month = _month_num(m.group(1))
        except KeyError:
            return None
        return _year_month(int(m.group(2)), month)

    if re.fullmatch(r"(?:19|20)\d{2}", text):
        return text
    return None


def parse_date_range(text: str) -> Optional[DateRange]:
    """
    Find the first date range in text.
    Recognized formats are canonicalized; a range we can only partly read
    ("Summer 2019 - Fall 2020") is returned raw with parsed=False and current=False.
    """
    if not text:
        return None
    m = DATE_RANGE_RE.search(text)
    if m:
        start = normalize_date(m.group("start"))
        end_raw = m.group("end")
        current = is_present(end_raw)
        end = None if current else normalize_date(end_raw)
        if start and (current or end):
            return DateRange(start, end, current, True, m.group(0))
        return DateRange(m.group("start").strip(), end_raw.strip(), False, False, m.group(0))

    m = LOOSE_DATE_RANGE_RE.search(text)
    if m:
        return DateRange(m.group("start").strip(), m.group("end").strip(), False, False, m.group(0))
    return None


def find_single_date(text: str) -> Optional[str]:
    """Return the last canonicalizable date in text (e.g. a graduation date)."""
    found = None
    for m in SINGLE_DATE_RE.finditer(text or ""):
        value = normalize_date(m.group(0))
        if value:
            found = value
    return found


def date_sort_value(value: Optional[str]) -> Optional[int]:
    """
    Comparable integer for a canonical or raw date (year * 100 + month, month 0 when unknown).
    Raw text falls back to the first year it contains.
    """
    if not value:
        return None
    canonical = normalize_date(value)
    if canonical:
        parts = canonical.split("-")
        month = int(parts[1]) if len(parts) > 1 else 0
        return int(parts[0]) * 100 + month
    m = _YEAR_RE.search(value)
    return int(m.group(0)) * 100 if m else None


def newest_first_key(end_date: Optional[str], current: bool) -> tuple:
    """Sort key: current entries first, then undated, then end date descending."""
    if current:
        return (0, 0)
    value = date_sort_value(end_date)
    if value is None:
        return (1, 0)
    return (2, -value)


def months_between(start: Optional[str], end: Optional[str], as_of: Optional[date] = None) -> int:
    """Whole months from start to end (or as_of when end is None). 0 if start is unknown."""
    start_value = date_sort_value(start)
    if start_value is None:
        return 0
    if end:
        end_value = date_sort_value(end)
        if end_value is None:
            return 0
    else:
        today = as_of or date.today()
        end_value = today.year * 100 + today.month
    start_months = (start_value // 100) * 12 + max(start_value % 100, 1)
    end_months = (end_value // 100) * 12 + max(end_value % 100, 1)
    return max(0, end_months - start_months)


def _year_month(year: int, month: int) -> Optional[str]:
    if not 1 <= month <= 12:
        return None
    return f"{year:04d}-{month:02d}"


def _month_num(mon_str: str) -> int:
    s = mon_str.lower()[:3]
    for i, m in enumerate(_MONTHS, 1):
        if s == m:
            return i
    raise KeyError(mon_str)
