"""Normalize CV text and segment it into sections keyed by the nearest preceding header."""

import re
import unicodedata
from dataclasses import dataclass
from typing import List, Optional, Tuple

from profile_autofill.config import MAX_CV_TEXT_CHARS
from profile_autofill.services.pattern_library import PatternLibrary

HEADER_ZONE = "header"

MAX_HEADER_WORDS = 6
MAX_HEADER_CHARS = 50

ENTRY_SECTIONS = frozenset({"experience", "education"})
ENTRY_SUB_LABELS = frozenset({"skills", "projects", "awards", "certifications", "languages"})

_INLINE_HEADER_RE = re.compile(r"^(?P<header>[A-Za-z][A-Za-z &/]{1,40}):\s*(?P<rest>\S.*)$")
BULLET_RE = re.compile(r"^\s*(?:[-*•·▪●◦‣–—>]|\d{1,2}[.)])\s+")


@dataclass(frozen=True)
class Section:
    """A run of lines under one header. Blank lines are kept as "" to delimit entries."""

    kind: str
    header: Optional[str]
    lines: Tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def normalize_text(text: str, max_chars: int = MAX_CV_TEXT_CHARS) -> str:
    """NFC-normalize, unify newlines, collapse spaces, strip lines, squeeze blank runs to one blank line."""
    if not text or not text.strip():
        return ""
    text = unicodedata.normalize("NFC", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\xa0", " ").replace("\u200b", "")
    text = re.sub(r"[ \t\f\v]+", " ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = re.sub(r"\n{3,}", "\n\n", text).strip()
    if len(text) > max_chars:
        text = text[:max_chars].rsplit("\n", 1)[0]
    return text


def _header_key(line: str) -> str:
    key = line.lower().replace("&", " and ")
    key = re.sub(r"[^a-z ]+", " ", key)
    return re.sub(r"\s+", " ", key).strip()


def detect_section_header(line: str, library: PatternLibrary) -> Optional[str]:
    """
    Section kind if the line looks like a header: short, no digits or '@',
    capitalized or upper-case, and in the header vocabulary.
    """
    candidate = line.strip().rstrip(":").strip()
    if not candidate or len(candidate) > MAX_HEADER_CHARS or len(candidate.split()) > MAX_HEADER_WORDS:
        return None
    if re.search(r"[\d@]", candidate) or not candidate[:1].isupper():
        return None
    return library.section_kind(_header_key(candidate))


def is_bullet(line: str) -> bool:
    return bool(BULLET_RE.match(line))


def strip_bullet(line: str) -> str:
    return BULLET_RE.sub("", line, count=1).strip()


def _opens_inline_section(found: str, kind: str, previous: str) -> bool:
    """
    Inside an entry section a "Label: ..." line usually belongs to the entry
    ("Technologies: Python"). It only starts a new section after a blank line,
    and never for labels that describe an entry.
    """
    if kind == "skills":
        return False
    if kind not in ENTRY_SECTIONS:
        return True
    return not previous and found not in ENTRY_SUB_LABELS


def segment(text: str, library: PatternLibrary) -> List[Section]:
    """
    Partition normalized text into sections. Lines before the first header form the
    header zone. "Skills: Python, SQL" opens a section and keeps the remainder as content.
    """
    sections: List[Section] = []
    kind, header, lines = HEADER_ZONE, None, []
    previous = ""

    for line in text.split("\n"):
        found = detect_section_header(line, library)
        rest = None
        if found is None:
            m = _INLINE_HEADER_RE.match(line)
            if m:
                found = detect_section_header(m.group("header"), library)
                if found and _opens_inline_section(found, kind, previous):
                    rest = m.group("rest")
                else:
                    found = None
        previous = line
        if found is None:
            lines.append(line)
            continue
        sections.append(Section(kind, header, tuple(lines)))
        kind, header, lines = found, line, ([rest] if rest else [])

    sections.append(Section(kind, header, tuple(lines)))
    return sections


def sections_of(sections: List[Section], kind: str) -> List[Section]:
    return [s for s in sections if s.kind == kind]


def split_blocks(lines: Tuple[str, ...]) -> List[List[str]]:
    """Group lines into blank-line separated blocks."""
    blocks: List[List[str]] = []
    current: List[str] = []
    for line in lines:
        if line.strip():
            current.append(line)
        elif current:
            blocks.append(current)
            current = []
    if current:
        blocks.append(current)
    return blocks


def section_blocks(sections: List[Section]) -> List[List[str]]:
    """Blank-line blocks of several sections, in document order."""
    return [block for section in sections for block in split_blocks(section.lines)]
