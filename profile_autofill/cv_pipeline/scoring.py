"""Category confidence: mean match confidence scaled by the share of expected sub-fields found."""

from typing import Dict, Iterable, List, Sequence

from profile_autofill.utils.helpers import clamp01

PERSONAL_INFO_EXPECTED = ("personal_info.first_name", "personal_info.email", "personal_info.phone")


def category_confidence(match_confidences: Sequence[float], found: int, expected: int) -> float:
    """0.0 for an empty category; otherwise mean(match confidences) * found / expected."""
    if not match_confidences or expected <= 0:
        return 0.0
    mean = sum(match_confidences) / len(match_confidences)
    return clamp01(mean * min(found, expected) / expected)


def personal_info_confidence(field_confidence: Dict[str, float]) -> float:
    """Expected sub-fields are name, email and phone; other contact fields only feed the mean."""
    scores: List[float] = [v for k, v in field_confidence.items() if k.startswith("personal_info.")]
    found = sum(1 for key in PERSONAL_INFO_EXPECTED if key in field_confidence)
    return category_confidence(scores, found, len(PERSONAL_INFO_EXPECTED))


def entries_confidence(entry_confidences: Iterable[float]) -> float:
    """Entries already carry their own sub-field penalty; the category is their mean."""
    values = list(entry_confidences)
    return category_confidence(values, 1, 1)


def skills_confidence(skill_confidences: Iterable[float]) -> float:
    values = list(skill_confidences)
    return category_confidence(values, 1, 1)
