"""Multi-strategy form field classifier: descriptors in, one FieldMapping per descriptor out."""

from typing import Hashable, List, Optional, Sequence, Set

from profile_autofill.classification.strategies import BaseFieldStrategy, combine_scores, default_strategies
from profile_autofill.config import ACCEPTANCE_THRESHOLD
from profile_autofill.schemas.field_descriptor import FieldDescriptor, FieldKind
from profile_autofill.schemas.field_mapping import FIELD_TYPE_ORDER, FieldMapping, FieldType
from profile_autofill.schemas.profile import StoredProfile
from profile_autofill.services.pattern_library import PatternLibrary, get_pattern_library
from profile_autofill.services.profile_mapper import profile_value_for
from profile_autofill.utils.helpers import clamp01
from profile_autofill.utils.logger import get_logger

logger = get_logger(__name__)

_TIE_EPSILON = 1e-9


def pick_field_type(scores: dict, assigned: Set[Hashable]) -> Optional[FieldType]:
    """
    Best-scoring field type. Ties go to a type not yet assigned in this scan,
    then to the earlier-declared type.
    """
    candidates = {ft: v for ft, v in scores.items() if ft != FieldType.UNMAPPED and v > 0}
    if not candidates:
        return None
    best = max(candidates.values())
    tied = [ft for ft, v in candidates.items() if best - v < _TIE_EPSILON]
    tied.sort(key=lambda ft: (ft in assigned, FIELD_TYPE_ORDER[ft]))
    return tied[0]


class FormFieldClassifier:
    """Runs the strategies over each descriptor. Holds no state between classify calls."""

    def __init__(
        self,
        strategies: Optional[Sequence[BaseFieldStrategy]] = None,
        threshold: float = ACCEPTANCE_THRESHOLD,
        pattern_library: Optional[PatternLibrary] = None,
    ) -> None:
        self._strategies = tuple(strategies) if strategies is not None else tuple(default_strategies())
        self._threshold = threshold
        self._library = pattern_library or get_pattern_library()

    def classify(
        self,
        descriptors: Sequence[FieldDescriptor],
        profile: Optional[StoredProfile] = None,
    ) -> List[FieldMapping]:
        """
        Classify descriptors in order. A descriptor whose best confidence is below the
        threshold (or that is a file input) is returned as unmapped with no value.
        """
        vocabulary = self._library.field_vocabulary
        assigned: Set[Hashable] = set()
        mappings: List[FieldMapping] = []

        for descriptor in descriptors:
            if descriptor.kind == FieldKind.FILE:
                mappings.append(FieldMapping(descriptor=descriptor))
                continue
            scores = combine_scores(descriptor, self._strategies, vocabulary)
            field_type = pick_field_type(scores, assigned)
            confidence = clamp01(scores.get(field_type, 0.0)) if field_type else 0.0
            if field_type is None or confidence < self._threshold:
                mappings.append(FieldMapping(descriptor=descriptor, confidence=confidence))
                continue
            assigned.add(field_type)
            mappings.append(
                FieldMapping(
                    descriptor=descriptor,
                    field_type=field_type,
                    confidence=confidence,
                    resolved_value=profile_value_for(field_type, profile),
                )
            )

        mapped = sum(1 for m in mappings if m.field_type != FieldType.UNMAPPED)
        logger.info(
            "Field classification finished: descriptors=%s mapped=%s unmapped=%s",
            len(mappings),
            mapped,
            len(mappings) - mapped,
        )
        return mappings


def classify(
    descriptors: Sequence[FieldDescriptor],
    pattern_library: Optional[PatternLibrary] = None,
    profile: Optional[StoredProfile] = None,
    threshold: float = ACCEPTANCE_THRESHOLD,
    strategies: Optional[Sequence[BaseFieldStrategy]] = None,
) -> List[FieldMapping]:
    """Classify form descriptors into profile field types (see FormFieldClassifier)."""
    classifier = FormFieldClassifier(strategies=strategies, threshold=threshold, pattern_library=pattern_library)
    return classifier.classify(descriptors, profile=profile)
