"""Education extraction: degree keywords plus capitalized-phrase heuristics for institutions."""

import re
from typing import List, Optional, Tuple

from profile_autofill.cv_pipeline.text_normalizer import strip_bullet
from profile_autofill.schemas.profile import Education
from profile_autofill.services.pattern_library import PatternCategory, PatternLibrary, PatternMatch
from profile_autofill.utils.date_parser import SINGLE_DATE_RE, find_single_date, newest_first_key, parse_date_range
from profile_autofill.utils.helpers import clamp01, normalize_whitespace

INSTITUTION_KEYWORD_CONFIDENCE = 0.85
INSTITUTION_GUESS_CONFIDENCE = 0.6
DATE_CONFIDENCE = 0.8
UNPARSED_DATE_CONFIDENCE = 0.4
EXPECTED_ENTRY_FIELDS = 3

_SEGMENT_SPLIT_RE = re.compile(r"\s*(?:,|;|\||\s[-–—]\s|\(|\))\s*")
_FIELD_OF_STUDY_RE = re.compile(r"^\s*[,:]?\s*(?:in|of)\s+(?P<field>[^,|;(\n]+)", re.IGNORECASE)
_FIELD_STOP_RE = re.compile(r"\s+[-–—]\s+|\s+(?:at|from)\s+|\d", re.IGNORECASE)


def _degree_match(line: str, library: PatternLibrary) -> Optional[PatternMatch]:
    return library.best(PatternCategory.DEGREE, line)


def split_entries(block: List[str], library: PatternLibrary) -> List[List[str]]:
    """A block holds several entries when it has several degree lines; each degree line opens one."""
    entries: List[List[str]] = []
    current: List[str] = []
    current_has_degree = False
    for line in block:
        has_degree = _degree_match(line, library) is not None
        if has_degree and current_has_degree:
            entries.append(current)
            current, current_has_degree = [], False
        current.append(line)
        current_has_degree = current_has_degree or has_degree
    if current:
        entries.append(current)
    return entries


def _field_of_study(line: str, degree: PatternMatch, library: PatternLibrary) -> Optional[str]:
    """Text after the degree: "in Computer Science", or a bare phrase that is not the institution."""
    rest = line[degree.end:]
    m = _FIELD_OF_STUDY_RE.match(rest)
    if m:
        candidate = m.group("field")
    else:
        candidate = _SEGMENT_SPLIT_RE.split(rest.strip(" ,:-–—"), maxsplit=1)[0]
    candidate = _FIELD_STOP_RE.split(candidate, maxsplit=1)[0]
    candidate = normalize_whitespace(candidate).strip(" ,.:;-")
    if not candidate or not candidate[:1].isupper():
        return None
    if any(kw in candidate.lower() for kw in library.institution_keywords):
        return None
    return candidate


def _institution(lines: List[str], library: PatternLibrary) -> Tuple[Optional[str], float]:
    """Segment naming a university/college/...; else the first capitalized segment that is not a degree or date."""
    segments = []
    for line in lines:
        segments.extend(s for s in _SEGMENT_SPLIT_RE.split(strip_bullet(line)) if s and s.strip())
    for segment in segments:
        lower = segment.lower()
        if any(kw in lower for kw in library.institution_keywords):
            degree = _degree_match(segment, library)
            if degree and degree.start == 0:
                continue
            return normalize_whitespace(segment).strip(" .,"), INSTITUTION_KEYWORD_CONFIDENCE
    for segment in segments:
        text = normalize_whitespace(segment).strip(" .,")
        if not text or not text[:1].isupper():
            continue
        if _degree_match(text, library) or SINGLE_DATE_RE.search(text) or re.search(r"\d", text):
            continue
        if library.best(PatternCategory.HONORS, text) or library.best(PatternCategory.GPA, text):
            continue
        return text, INSTITUTION_GUESS_CONFIDENCE
    return None, 0.0


def parse_entry(lines: List[str], library: PatternLibrary) -> Optional[Education]:
    """One Education from an entry's lines, or None when neither degree nor institution is found."""
    text = "\n".join(lines)
    degree_line = next((l for l in lines if _degree_match(l, library)), None)
    degree = _degree_match(degree_line, library) if degree_line else None

    field_of_study = _field_of_study(degree_line, degree, library) if degree else None
    institution, institution_confidence = _institution(lines, library)
    if field_of_study and institution == field_of_study:
        institution, institution_confidence = None, 0.0
    if degree is None and institution is None:
        return None

    graduation_date = None
    date_confidence = 0.0
    date_range = parse_date_range(text)
    if date_range:
        graduation_date = None if date_range.current else date_range.end
        date_confidence = DATE_CONFIDENCE if date_range.parsed else UNPARSED_DATE_CONFIDENCE
    else:
        graduation_date = find_single_date(text)
        date_confidence = DATE_CONFIDENCE if graduation_date else 0.0

    gpa = library.best(PatternCategory.GPA, text)
    honors = library.best(PatternCategory.HONORS, text)

    scores = [s for s in (degree.confidence if degree else 0.0, institution_confidence, date_confidence) if s > 0]
    mean = sum(scores) / len(scores)
    confidence = mean * len(scores) / EXPECTED_ENTRY_FIELDS

    return Education(
        degree=degree.value if degree else None,
        institution=institution,
        graduation_date=graduation_date,
        field_of_study=field_of_study,
        gpa=gpa.value if gpa else None,
        honors=honors.value if honors else None,
        confidence=clamp01(confidence),
    )


def parse_education_block(block: List[str], library: PatternLibrary) -> List[Education]:
    entries = (parse_entry(lines, library) for lines in split_entries(block, library))
    return [entry for entry in entries if entry is not None]


def sort_education(entries: List[Education]) -> List[Education]:
    """Newest graduation first; undated entries first. Stable for equal keys."""
    return sorted(entries, key=lambda e: newest_first_key(e.graduation_date, False))

