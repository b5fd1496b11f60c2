"""Helper utilities shared by the classifiers, the CV pipeline and the merger."""

import re
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")

EMAIL_PATTERN = r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and re.fullmatch(EMAIL_PATTERN, value.strip()) is not None


def normalize_url(url: str) -> str:
    """Normalize a profile URL: add https:// when missing, strip fragments and trailing slashes."""
    if not url:
        return ""
    url = url.strip().rstrip(".,;)")
    if "#" in url:
        url = url.split("#")[0]
    if not re.match(r"^https?://", url, re.IGNORECASE):
        url = "https://" + url
    return url.rstrip("/")


def normalize_whitespace(text: Optional[str]) -> str:
    """Collapse runs of whitespace to single spaces and strip."""
    return re.sub(r"\s+", " ", text or "").strip()


def compact_key(text: Optional[str]) -> str:
    """Lowercase alphanumerics only: "First_Name" and "first-name" both become "firstname"."""
    return re.sub(r"[^a-z0-9]", "", (text or "").lower())


def skill_key(name: Optional[str]) -> str:
    """Deduplication key for skills: case-insensitive and whitespace-normalized."""
    return normalize_whitespace(name).casefold()


def deduplicate_by_key(items: Iterable[T], key: Callable[[T], str]) -> List[T]:
    """Keep the first item for each non-empty key. Does not mutate the input."""
    seen: set[str] = set()
    result: List[T] = []
    for item in items:
        k = key(item)
        if k and k not in seen:
            seen.add(k)
            result.append(item)
    return result


def clamp01(value: float) -> float:
    """Clamp a confidence into [0, 1]."""
    return max(0.0, min(1.0, float(value)))


def to_title_case(text: str) -> str:
    """Title-case an ALL CAPS or lowercase name while keeping inner apostrophes and hyphens."""
    return " ".join(
        "-".join(part[:1].upper() + part[1:].lower() for part in word.split("-"))
        for word in text.split()
    )
