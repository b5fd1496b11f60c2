"""Personal info extraction: contact patterns in the header zone, whole-document fallback, name heuristic."""

import re
from typing import Dict, List, Optional, Tuple

from profile_autofill.cv_pipeline.text_normalizer import HEADER_ZONE, Section, detect_section_header
from profile_autofill.schemas.profile import Address, PersonalInfo
from profile_autofill.services.pattern_library import PatternCategory, PatternLibrary, PatternMatch
from profile_autofill.utils.helpers import to_title_case

NAME_TITLE_CASE_CONFIDENCE = 0.7
NAME_UPPER_CASE_CONFIDENCE = 0.6
NAME_SCAN_LINES = 5

_HONORIFICS = ("mr", "mrs", "ms", "miss", "dr", "prof")
_NOT_NAMES = ("curriculum vitae", "resume", "résumé", "cv", "contact", "contact information")
_NAME_WORD_RE = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ][A-Za-zÀ-ÖØ-öø-ÿ'’.-]*$")
_FIELD_SEPARATORS_RE = re.compile(r"\s*(?:\||•|·|,|\s-\s|\s–\s)\s*")
_STRUCTURED = (
    PatternCategory.EMAIL,
    PatternCategory.PHONE,
    PatternCategory.LINKEDIN_URL,
    PatternCategory.PORTFOLIO_URL,
)


def _first(library: PatternLibrary, category: PatternCategory, zone: str, document: str) -> Optional[PatternMatch]:
    """Best match in the header zone; the whole document only if the zone has none."""
    return library.best(category, zone) or library.best(category, document)


def guess_name(lines: List[str], library: PatternLibrary) -> Optional[Tuple[str, str, float]]:
    """
    (first, last, confidence) from the first name-like line among the first few lines:
    not a section header, no structured pattern, 2 to 4 alphabetic words.
    """
    for line in [l for l in lines if l.strip()][:NAME_SCAN_LINES]:
        if detect_section_header(line, library):
            continue
        candidate = _FIELD_SEPARATORS_RE.split(line.strip())[0].strip()
        if not candidate or candidate.lower() in _NOT_NAMES or re.search(r"[\d@/:]", candidate):
            continue
        if any(library.best(category, candidate) for category in _STRUCTURED):
            continue
        words = candidate.split()
        while words and words[0].lower().rstrip(".") in _HONORIFICS:
            words = words[1:]
        if not 2 <= len(words) <= 4 or not all(_NAME_WORD_RE.match(w) for w in words):
            continue
        if any(w.lower() in library.job_title_keywords for w in words):
            continue
        if all(w[:1].isupper() and not w.isupper() for w in words if len(w) > 1):
            confidence = NAME_TITLE_CASE_CONFIDENCE
        elif all(w.isupper() for w in words):
            confidence = NAME_UPPER_CASE_CONFIDENCE
            words = to_title_case(" ".join(words)).split()
        else:
            continue
        return words[0], words[-1], confidence
    return None


def _address(zone: str, library: PatternLibrary, confidence: Dict[str, float]) -> Address:
    """Address sub-fields are read from the header zone only; body text is full of place names."""
    values: Dict[str, Optional[str]] = {}

    street = library.best(PatternCategory.STREET, zone)
    if street:
        values["street"] = street.value
        confidence["personal_info.address.street"] = street.confidence

    postal = library.best(PatternCategory.POSTAL_CODE, zone)
    if postal:
        values["postal_code"] = postal.value
        confidence["personal_info.address.postal_code"] = postal.confidence

    country = library.best(PatternCategory.COUNTRY, zone)
    if country:
        values["country"] = country.value
        confidence["personal_info.address.country"] = country.confidence

    # "Name, Name" is everywhere; only trust it on an address-looking line
    scan = zone
    if street:
        scan = zone[:street.start] + " " * (street.end - street.start) + zone[street.end:]
    city_state = None
    for pm in library.find_all(PatternCategory.CITY_STATE, scan):
        line = scan[scan.rfind("\n", 0, pm.start) + 1:].split("\n", 1)[0]
        state = pm.value.split(", ", 1)[1]
        if (
            re.fullmatch(r"[A-Z]{2}", state)
            or library.best(PatternCategory.POSTAL_CODE, line)
            or library.best(PatternCategory.COUNTRY, line)
        ):
            if city_state is None or pm.confidence >= city_state.confidence:
                city_state = pm
    if city_state:
        city, state = city_state.value.split(", ", 1)
        values["city"] = city
        confidence["personal_info.address.city"] = city_state.confidence
        values["state"] = state
        confidence["personal_info.address.state"] = city_state.confidence

    return Address(**values)


def extract_personal_info(
    sections: List[Section],
    document: str,
    library: PatternLibrary,
) -> Tuple[PersonalInfo, Dict[str, float]]:
    """Return personal info and per-field confidences keyed by field path."""
    header_lines: List[str] = []
    for section in sections:
        if section.kind == HEADER_ZONE:
            header_lines.extend(section.lines)
    zone = "\n".join(header_lines)
    confidence: Dict[str, float] = {}
    values: Dict[str, object] = {}

    name = guess_name(header_lines or document.split("\n"), library)
    if name:
        values["first_name"], values["last_name"], name_confidence = name
        confidence["personal_info.first_name"] = name_confidence
        confidence["personal_info.last_name"] = name_confidence

    for field, category in (
        ("email", PatternCategory.EMAIL),
        ("phone", PatternCategory.PHONE),
        ("linkedin_url", PatternCategory.LINKEDIN_URL),
        ("portfolio_url", PatternCategory.PORTFOLIO_URL),
    ):
        pm = _first(library, category, zone, document)
        if pm:
            values[field] = pm.value
            confidence[f"personal_info.{field}"] = pm.confidence

    values["address"] = _address(zone, library, confidence)
    return PersonalInfo(**values), confidence
