"""Independent scoring strategies for form field classification.

Each strategy maps one descriptor to {target: confidence} over a vocabulary
(field types for form fields, upload kinds for file inputs). The classifier
combines them by per-target maximum.
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Tuple

from rapidfuzz import fuzz

from profile_autofill.schemas.field_descriptor import FieldDescriptor, FieldKind
from profile_autofill.schemas.field_mapping import FieldType
from profile_autofill.services.pattern_library import Vocabulary
from profile_autofill.services.text_cleaner import normalize_label
from profile_autofill.utils.helpers import compact_key

Scores = Dict[Hashable, float]
Span = Tuple[int, int]

ATTRIBUTE_EXACT = 0.95
ATTRIBUTE_WORDS = 0.85
ATTRIBUTE_SUBSTRING = 0.8
LABEL_EXACT = 0.75
LABEL_CONTAINS = 0.65
LABEL_FUZZY = 0.55
CONTEXT_SINGLE = 0.4
CONTEXT_MULTIPLE = 0.45
TYPE_INFERENCE = 0.6

# Substring matches on compacted attributes need a token long enough to be unambiguous
MIN_SUBSTRING_TOKEN = 6
FUZZY_RATIO = 85
LARGE_TEXTAREA_ROWS = 5
LARGE_TEXTAREA_MAXLENGTH = 1000


def split_words(value: str) -> List[str]:
    """Split an attribute into lower-case words: "applicantEmail_2" -> ["applicant", "email", "2"]."""
    if not value:
        return []
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", value)
    return [w for w in re.split(r"[^A-Za-z0-9]+", value.lower()) if w]


def word_runs(words: List[str], token: str) -> List[Span]:
    """Spans of consecutive words that concatenate to token ("first", "name" -> "firstname")."""
    spans: List[Span] = []
    for i in range(len(words)):
        acc = ""
        for j in range(i, len(words)):
            acc += words[j]
            if acc == token:
                spans.append((i, j + 1))
            if len(acc) >= len(token):
                break
    return spans


def drop_covered(hits: List[Tuple[Hashable, Span]]) -> List[Tuple[Hashable, Span]]:
    """Drop hits whose words lie inside a longer hit ("address" inside "email address")."""
    return [
        (target, (start, end))
        for target, (start, end) in hits
        if not any(s <= start and end <= e and e - s > end - start for _, (s, e) in hits)
    ]


def _keep_max(scores: Scores, target: Hashable, value: float) -> None:
    if value > scores.get(target, 0.0):
        scores[target] = value


class BaseFieldStrategy(ABC):
    """Abstract base for one classification signal. Strategies hold no per-call state."""

    name = "base"

    @abstractmethod
    def score(self, descriptor: FieldDescriptor, vocabulary: Mapping[Hashable, Vocabulary]) -> Scores:
        """Return {target: confidence} for targets this signal supports."""
        pass


class AttributeStrategy(BaseFieldStrategy):
    """name / id / placeholder (and the declared input type) against attribute tokens."""

    name = "attribute"

    def __init__(self, type_targets: Optional[Mapping[FieldKind, Hashable]] = None) -> None:
        self._type_targets = dict(type_targets) if type_targets is not None else {
            FieldKind.EMAIL: FieldType.EMAIL,
            FieldKind.TEL: FieldType.PHONE,
        }

    def score(self, descriptor: FieldDescriptor, vocabulary: Mapping[Hashable, Vocabulary]) -> Scores:
        scores: Scores = {}
        for value in (descriptor.name, descriptor.id, descriptor.placeholder):
            if not value:
                continue
            compact = compact_key(value)
            words = split_words(value)
            word_hits: List[Tuple[Hashable, Span]] = []
            for target, vocab in vocabulary.items():
                for token in vocab.attribute_tokens:
                    if compact == token:
                        _keep_max(scores, target, ATTRIBUTE_EXACT)
                        continue
                    spans = word_runs(words, token)
                    if spans:
                        word_hits.extend((target, span) for span in spans)
                    elif len(token) >= MIN_SUBSTRING_TOKEN and token in compact:
                        _keep_max(scores, target, ATTRIBUTE_SUBSTRING)
            for target, _ in drop_covered(word_hits):
                _keep_max(scores, target, ATTRIBUTE_WORDS)

        declared = self._type_targets.get(descriptor.kind)
        if declared is not None and declared in vocabulary:
            _keep_max(scores, declared, ATTRIBUTE_WORDS)
        return scores


class LabelStrategy(BaseFieldStrategy):
    """Label / aria-label text against synonyms: exact, phrase containment, then fuzzy."""

    name = "label"

    def score(self, descriptor: FieldDescriptor, vocabulary: Mapping[Hashable, Vocabulary]) -> Scores:
        scores: Scores = {}
        labels = [normalize_label(t) for t in (descriptor.label_text, descriptor.aria_label)]
        for label in filter(None, labels):
            padded = f" {label} "
            for target, vocab in vocabulary.items():
                for synonym in vocab.label_synonyms:
                    if label == synonym:
                        _keep_max(scores, target, LABEL_EXACT)
                    elif f" {synonym} " in padded:
                        _keep_max(scores, target, LABEL_CONTAINS)
                    elif fuzz.ratio(label, synonym) >= FUZZY_RATIO:
                        _keep_max(scores, target, LABEL_FUZZY)
        return scores


class ContextStrategy(BaseFieldStrategy):
    """Keywords in nearby text. Weak signal: fills gaps and breaks ties."""

    name = "context"

    def score(self, descriptor: FieldDescriptor, vocabulary: Mapping[Hashable, Vocabulary]) -> Scores:
        context = normalize_label(descriptor.surrounding_text)
        if not context:
            return {}
        padded = f" {context} "
        scores: Scores = {}
        for target, vocab in vocabulary.items():
            hits = sum(1 for kw in vocab.context_keywords if f" {kw} " in padded)
            if hits:
                scores[target] = CONTEXT_MULTIPLE if hits > 1 else CONTEXT_SINGLE
        return scores


class TypeInferenceStrategy(BaseFieldStrategy):
    """Fixed contribution from the input type or textarea size, independent of naming."""

    name = "type_inference"

    _KIND_TARGETS = {
        FieldKind.EMAIL: (FieldType.EMAIL,),
        FieldKind.TEL: (FieldType.PHONE,),
        FieldKind.URL: (FieldType.PORTFOLIO_URL,),
    }

    def score(self, descriptor: FieldDescriptor, vocabulary: Mapping[Hashable, Vocabulary]) -> Scores:
        targets: Iterable[Hashable] = self._KIND_TARGETS.get(descriptor.kind, ())
        if descriptor.kind == FieldKind.TEXTAREA and is_large_textarea(descriptor):
            targets = (FieldType.COVER_LETTER, FieldType.RESUME_TEXT)
        return {t: TYPE_INFERENCE for t in targets if t in vocabulary}


def is_large_textarea(descriptor: FieldDescriptor) -> bool:
    """A textarea is large unless its rows or maxlength say otherwise."""
    if descriptor.rows is not None and descriptor.rows < LARGE_TEXTAREA_ROWS:
        return False
    if descriptor.max_length is not None and descriptor.max_length < LARGE_TEXTAREA_MAXLENGTH:
        return False
    return True


def default_strategies() -> List[BaseFieldStrategy]:
    return [AttributeStrategy(), LabelStrategy(), ContextStrategy(), TypeInferenceStrategy()]


def upload_strategies() -> List[BaseFieldStrategy]:
    """Upload labeling reuses the naming strategies; input type says nothing about purpose."""
    return [AttributeStrategy(type_targets={}), LabelStrategy(), ContextStrategy()]


def combine_scores(
    descriptor: FieldDescriptor,
    strategies: Iterable[BaseFieldStrategy],
    vocabulary: Mapping[Hashable, Vocabulary],
) -> Scores:
    """Per-target maximum across strategies (correlated signals must not add up)."""
    combined: Scores = {}
    for strategy in strategies:
        for target, value in strategy.score(descriptor, vocabulary).items():
            _keep_max(combined, target, max(0.0, min(1.0, value)))
    return combined
