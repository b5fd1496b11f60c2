"""CV skill extraction: skills/languages section tokens plus a vocabulary scan of description text."""

import re
from typing import Dict, Iterable, List, Tuple

from profile_autofill.cv_pipeline.text_normalizer import Section, strip_bullet
from profile_autofill.schemas.profile import Skill, SkillCategory
from profile_autofill.services.pattern_library import PatternLibrary
from profile_autofill.utils.helpers import normalize_whitespace, skill_key

KNOWN_TOKEN_CONFIDENCE = 0.9
UNKNOWN_TOKEN_CONFIDENCE = 0.7
SCAN_CONFIDENCE = 0.6
MIN_LETTER_RATIO = 0.5
MAX_SKILL_CHARS = 50
MAX_SKILL_WORDS = 5

SCANNED_SECTIONS = ("experience", "education", "summary", "projects", "certifications")

_TOKEN_SPLIT_RE = re.compile(r"\s*(?:,|;|\||•|·|▪|\s/\s|\t)\s*")
_LABEL_PREFIX_RE = re.compile(r"^[A-Za-z][A-Za-z &/-]{0,30}:\s*")
_PARENTHETICAL_RE = re.compile(r"\([^)]*\)")
_PROFICIENCY_RE = re.compile(
    r"\s*[-–:]\s*(?:native|fluent|proficient|professional|conversational|intermediate|basic|"
    r"beginner|advanced|bilingual|working|elementary|limited|full).*$|"
    r"\s+(?:native|fluent|bilingual)(?:\s+speaker)?\s*$",
    re.IGNORECASE,
)


def _tokens(line: str, strip_label: bool = True) -> List[str]:
    line = strip_bullet(line)
    if strip_label:
        line = _LABEL_PREFIX_RE.sub("", line)
    return [t for t in _TOKEN_SPLIT_RE.split(line) if t and t.strip()]


def _clean_token(token: str) -> str:
    token = _PARENTHETICAL_RE.sub(" ", token)
    return normalize_whitespace(token).strip(" -–:").rstrip(".")


def is_valid_skill(token: str, library: PatternLibrary) -> bool:
    """Length 2-50 (single letters only when known), mostly letters, a few words, not a stop-word."""
    if not token or len(token) > MAX_SKILL_CHARS or len(token.split()) > MAX_SKILL_WORDS:
        return False
    if token.lower() in library.skill_stopwords:
        return False
    if len(token) < 2 and library.lookup_skill(token) is None:
        return False
    letters = sum(1 for c in token if c.isalpha())
    return letters / len(token) >= MIN_LETTER_RATIO


def _resolve(token: str, library: PatternLibrary, default: SkillCategory) -> Tuple[Skill, float]:
    known = library.lookup_skill(token)
    if known:
        name, category = known
        return Skill(name=name, category=category), KNOWN_TOKEN_CONFIDENCE
    return Skill(name=token, category=default), UNKNOWN_TOKEN_CONFIDENCE


def section_skills(lines: Iterable[str], library: PatternLibrary) -> List[Tuple[Skill, float]]:
    """Tokens of a skills section; unknown tokens are kept as written and tagged technical."""
    found = []
    for line in lines:
        for raw in _tokens(line):
            token = _clean_token(raw)
            if is_valid_skill(token, library):
                found.append(_resolve(token, library, SkillCategory.TECHNICAL))
    return found


def language_skills(lines: Iterable[str], library: PatternLibrary) -> List[Tuple[Skill, float]]:
    """Tokens of a languages section with proficiency notes removed, tagged as languages."""
    found = []
    for line in lines:
        for raw in _tokens(line, strip_label=False):
            token = _clean_token(_PROFICIENCY_RE.sub("", _PARENTHETICAL_RE.sub(" ", raw)))
            if is_valid_skill(token, library):
                found.append(_resolve(token, library, SkillCategory.LANGUAGE))
    return found


def _scan_pattern(name: str) -> str:
    return r"(?<![A-Za-z0-9])" + re.escape(name) + r"(?![A-Za-z0-9+#])"


def scan_known_skills(text: str, library: PatternLibrary) -> List[Tuple[Skill, float]]:
    """Known vocabulary in free text. Ambiguous words match only in their exact casing; single letters never."""
    if not text:
        return []
    hits: List[Tuple[int, Skill]] = []
    for name, category in library.known_skills():
        if len(name) < 2:
            continue
        flags = 0 if name in library.ambiguous_skills else re.IGNORECASE
        m = re.search(_scan_pattern(name), text, flags)
        if m:
            hits.append((m.start(), Skill(name=name, category=category)))
    hits.sort(key=lambda h: h[0])
    return [(skill, SCAN_CONFIDENCE) for _, skill in hits]


def merge_skill_candidates(candidates: Iterable[Tuple[Skill, float]]) -> Tuple[List[Skill], Dict[str, float]]:
    """
    Deduplicate by case-insensitive, whitespace-normalized name. The first spelling wins,
    the highest confidence is kept. Returns skills sorted by name and confidence per key.
    """
    chosen: Dict[str, Skill] = {}
    confidence: Dict[str, float] = {}
    for skill, score in candidates:
        key = skill_key(skill.name)
        if not key:
            continue
        if key not in chosen:
            chosen[key] = skill
        confidence[key] = max(confidence.get(key, 0.0), score)
    ordered = sorted(chosen, key=lambda k: (k, chosen[k].name))
    return [chosen[k] for k in ordered], {k: confidence[k] for k in ordered}


def extract_skills(sections: List[Section], library: PatternLibrary) -> Tuple[List[Skill], List[float]]:
    """Skills from dedicated sections first, then the description scan. Returns (skills, confidences)."""
    candidates: List[Tuple[Skill, float]] = []
    for section in sections:
        if section.kind == "skills":
            candidates.extend(section_skills(section.lines, library))
        elif section.kind == "languages":
            candidates.extend(language_skills(section.lines, library))
    scanned = "\n".join(s.text for s in sections if s.kind in SCANNED_SECTIONS)
    candidates.extend(scan_known_skills(scanned, library))

    skills, confidence = merge_skill_candidates(candidates)
    return skills, [confidence[skill_key(s.name)] for s in skills]