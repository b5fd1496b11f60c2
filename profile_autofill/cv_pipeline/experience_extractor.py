"""Work experience extraction: entry grouping, title/company split, date ranges, achievements."""

import re
from typing import List, Optional, Tuple

from profile_autofill.cv_pipeline.text_normalizer import is_bullet, strip_bullet
from profile_autofill.schemas.profile import WorkExperience
from profile_autofill.services.pattern_library import PatternLibrary
from profile_autofill.utils.date_parser import DateRange, newest_first_key, parse_date_range
from profile_autofill.utils.helpers import clamp01, normalize_whitespace

TITLE_KEYWORD_CONFIDENCE = 0.85
TITLE_CONFIDENCE = 0.7
COMPANY_INDICATOR_CONFIDENCE = 0.85
COMPANY_CONFIDENCE = 0.75
DATE_CONFIDENCE = 0.9
UNPARSED_DATE_CONFIDENCE = 0.4
EXPECTED_ENTRY_FIELDS = 3

# Lines above a date-only line that may belong to the same entry header
MAX_HEADER_LINES = 2
MAX_HEADER_WORDS = 10

# Ordered: " at " binds tighter than pipes and dashes, commas last
_TITLE_COMPANY_SEPARATORS = (
    re.compile(r"\s+at\s+", re.IGNORECASE),
    re.compile(r"\s*@\s*"),
    re.compile(r"\s*\|\s*"),
    re.compile(r"\s+[-–—]\s+"),
    re.compile(r"\s*,\s*"),
)
_EDGE_PUNCTUATION = " ,|-–—()[]:;"


def _words(text: str) -> List[str]:
    return re.findall(r"[a-z0-9]+", text.lower())


def has_company_indicator(text: str, library: PatternLibrary) -> bool:
    return any(w in library.company_indicators for w in _words(text))


def has_title_keyword(text: str, library: PatternLibrary) -> bool:
    return any(w in library.job_title_keywords for w in _words(text))


def is_achievement(line: str, library: PatternLibrary) -> bool:
    """Bulleted lines and lines opening with an achievement verb."""
    if is_bullet(line):
        return True
    words = _words(line)
    return bool(words) and words[0] in library.achievement_verbs


def _find_range(line: str) -> Optional[DateRange]:
    return parse_date_range(line)


def _without_range(line: str, date_range: DateRange) -> str:
    return normalize_whitespace(line.replace(date_range.raw, " ")).strip(_EDGE_PUNCTUATION)


def _is_date_only(line: str) -> bool:
    date_range = _find_range(line)
    return date_range is not None and not _without_range(line, date_range)


def split_entries(block: List[str], library: PatternLibrary) -> List[List[str]]:
    """
    Split one blank-line block into entries at repeated date ranges. A date-only
    line pulls the short non-bullet lines right above it into its entry.
    """
    date_lines = [i for i, line in enumerate(block) if _find_range(line) and not is_bullet(line)]
    if len(date_lines) <= 1:
        return [block]

    starts: List[int] = []
    for idx in date_lines:
        start = idx
        if _is_date_only(block[idx]):
            floor = starts[-1] + 1 if starts else 0
            while (
                start - 1 >= floor
                and idx - (start - 1) <= MAX_HEADER_LINES
                and not is_achievement(block[start - 1], library)
                and not _find_range(block[start - 1])
                and len(block[start - 1].split()) <= MAX_HEADER_WORDS
            ):
                start -= 1
        if not starts or start > starts[-1]:
            starts.append(start)
    starts[0] = 0
    return [block[s:e] for s, e in zip(starts, starts[1:] + [len(block)])]


def looks_reversed(first: str, second: str, library: PatternLibrary) -> bool:
    """True for "Company, Title" order."""
    if has_title_keyword(second, library) and not has_title_keyword(first, library):
        return True
    return (
        has_company_indicator(first, library)
        and not has_title_keyword(first, library)
        and not has_company_indicator(second, library)
    )


def split_title_company(text: str, library: PatternLibrary) -> Tuple[Optional[str], Optional[str]]:
    """Split "Title at Company", "Title | Company", "Title - Company" or "Title, Company"; swap when reversed."""
    text = text.strip(_EDGE_PUNCTUATION)
    if not text:
        return None, None
    for separator in _TITLE_COMPANY_SEPARATORS:
        parts = [p.strip(_EDGE_PUNCTUATION) for p in separator.split(text) if p.strip(_EDGE_PUNCTUATION)]
        if len(parts) >= 2:
            first, second = parts[0], parts[1]
            if looks_reversed(first, second, library):
                first, second = second, first
            return first, second
    if has_company_indicator(text, library) and not has_title_keyword(text, library):
        return None, text
    return text, None


def _title_and_company(header_lines: List[str], library: PatternLibrary) -> Tuple[Optional[str], Optional[str]]:
    if not header_lines:
        return None, None
    if len(header_lines) == 1:
        return split_title_company(header_lines[0], library)
    first, second = header_lines[0], header_lines[1]
    if looks_reversed(first, second, library):
        first, second = second, first
    title, company = split_title_company(first, library)
    if company is None:
        company = second.strip(_EDGE_PUNCTUATION) or None
    return title, company


def parse_entry(lines: List[str], library: PatternLibrary) -> Optional[WorkExperience]:
    """One WorkExperience from an entry's lines, or None without a title plus a company or date."""
    date_idx = next((i for i, line in enumerate(lines) if _find_range(line) and not is_bullet(line)), None)
    date_range = _find_range(lines[date_idx]) if date_idx is not None else None

    if date_idx is not None:
        before = [l for l in lines[:date_idx] if not is_achievement(l, library)][-MAX_HEADER_LINES:]
        remainder = _without_range(lines[date_idx], date_range)
        header_lines = before if len(before) >= MAX_HEADER_LINES else before + ([remainder] if remainder else [])
        body_start = date_idx + 1
        # "2020 - 2022" on its own line above "Engineer at Acme"
        if not header_lines and body_start < len(lines) and not is_achievement(lines[body_start], library):
            header_lines = [lines[body_start]]
            body_start += 1
    else:
        header_lines = [lines[0]]
        body_start = 1
        if (
            len(lines) > 1
            and split_title_company(lines[0], library)[1] is None
            and not is_achievement(lines[1], library)
            and len(lines[1].split()) <= MAX_HEADER_WORDS
        ):
            header_lines.append(lines[1])
            body_start = 2

    title, company = _title_and_company(header_lines, library)
    if not title or not (company or date_range):
        return None

    achievements: List[str] = []
    description: List[str] = []
    for line in lines[body_start:]:
        if is_achievement(line, library):
            achievements.append(strip_bullet(line))
        else:
            description.append(line)

    scores = [TITLE_KEYWORD_CONFIDENCE if has_title_keyword(title, library) else TITLE_CONFIDENCE]
    if company:
        scores.append(COMPANY_INDICATOR_CONFIDENCE if has_company_indicator(company, library) else COMPANY_CONFIDENCE)
    if date_range:
        scores.append(DATE_CONFIDENCE if date_range.parsed else UNPARSED_DATE_CONFIDENCE)
    mean = sum(scores) / len(scores)
    confidence = mean * len(scores) / EXPECTED_ENTRY_FIELDS

    return WorkExperience(
        job_title=title,
        company=company,
        start_date=date_range.start if date_range else None,
        end_date=date_range.end if date_range else None,
        current=date_range.current if date_range else False,
        description="\n".join(description),
        achievements=achievements,
        confidence=clamp01(confidence),
    )


def sort_newest_first(entries: List[WorkExperience]) -> List[WorkExperience]:
    """Current entries first, then undated, then by end date descending. Stable for equal keys."""
    return sorted(entries, key=lambda e: newest_first_key(e.end_date, e.current))


def parse_experience_block(block: List[str], library: PatternLibrary) -> List[WorkExperience]:
    """Entries of one blank-line block, in document order."""
    entries = (parse_entry(lines, library) for lines in split_entries(block, library))
    return [entry for entry in entries if entry is not None]

