import pytest

from profile_autofill.classification.field_classifier import FormFieldClassifier, classify, pick_field_type
from profile_autofill.classification.strategies import (
    AttributeStrategy,
    BaseFieldStrategy,
    ContextStrategy,
    LabelStrategy,
    TypeInferenceStrategy,
    combine_scores,
    split_words,
    word_runs,
)
from profile_autofill.schemas.field_descriptor import FieldDescriptor, FieldKind
from profile_autofill.schemas.field_mapping import FieldType
from profile_autofill.schemas.profile import Address, PersonalInfo, StoredProfile
from profile_autofill.services.pattern_library import get_pattern_library


class FixedStrategy(BaseFieldStrategy):
    """Returns the same scores for every descriptor"""

    name = "fixed"

    def __init__(self, scores):
        self._scores = scores

    def score(self, descriptor, vocabulary):
        return dict(self._scores)


@pytest.fixture
def profile():
    return StoredProfile(
        personal_info=PersonalInfo(
            first_name="Jane",
            last_name="Doe",
            email="jane@example.com",
            address=Address(city="Springfield"),
        ),
        cover_letter="Dear hiring manager",
    )


class TestStrategies:
    """Individual scoring signals"""

    def test_split_words(self):
        assert split_words("applicantEmail_2") == ["applicant", "email", "2"]

    def test_attribute_exact_and_words(self):
        vocabulary = get_pattern_library().field_vocabulary
        assert AttributeStrategy().score(FieldDescriptor(name="email"), vocabulary)[FieldType.EMAIL] == 0.95
        scores = AttributeStrategy().score(FieldDescriptor(name="applicant_first_name"), vocabulary)
        assert scores[FieldType.FIRST_NAME] == 0.85

    def test_longer_token_covers_its_sub_token(self):
        vocabulary = get_pattern_library().field_vocabulary
        scores = AttributeStrategy().score(FieldDescriptor(name="confirm_email_address"), vocabulary)
        assert scores[FieldType.EMAIL] == 0.85
        assert FieldType.ADDRESS_LINE not in scores

    def test_word_runs(self):
        assert word_runs(["home", "address", "address"], "address") == [(1, 2), (2, 3)]
        assert word_runs(["first", "name"], "firstname") == [(0, 2)]
        assert word_runs(["firstname"], "first") == []

    def test_label_fuzzy_match(self):
        vocabulary = get_pattern_library().field_vocabulary
        scores = LabelStrategy().score(FieldDescriptor(label_text="Telephon"), vocabulary)
        assert scores[FieldType.PHONE] == 0.55

    def test_context_is_weak(self):
        vocabulary = get_pattern_library().field_vocabulary
        scores = ContextStrategy().score(FieldDescriptor(surrounding_text="Where can we call you?"), vocabulary)
        assert scores[FieldType.PHONE] == 0.4

    def test_type_inference_for_large_textarea(self):
        vocabulary = get_pattern_library().field_vocabulary
        scores = TypeInferenceStrategy().score(FieldDescriptor(kind=FieldKind.TEXTAREA, rows=10), vocabulary)
        assert scores == {FieldType.COVER_LETTER: 0.6, FieldType.RESUME_TEXT: 0.6}
        small = FieldDescriptor(kind=FieldKind.TEXTAREA, rows=2)
        assert TypeInferenceStrategy().score(small, vocabulary) == {}

    def test_scores_combine_by_maximum(self):
        descriptor = FieldDescriptor(name="x")
        strategies = [FixedStrategy({FieldType.CITY: 0.3}), FixedStrategy({FieldType.CITY: 0.4})]
        assert combine_scores(descriptor, strategies, {FieldType.CITY: None}) == {FieldType.CITY: 0.4}


class TestClassify:
    """Classification of descriptor lists"""

    def test_email_by_name(self):
        mapping = classify([FieldDescriptor(name="email")])[0]
        assert mapping.field_type == FieldType.EMAIL
        assert mapping.confidence >= 0.8

    def test_second_email_field_is_not_an_address(self):
        mappings = classify([
            FieldDescriptor(kind=FieldKind.EMAIL, name="email"),
            FieldDescriptor(kind=FieldKind.EMAIL, name="confirm_email_address"),
        ])
        assert [m.field_type for m in mappings] == [FieldType.EMAIL, FieldType.EMAIL]
        assert mappings[1].confidence == pytest.approx(0.85)

    def test_email_by_input_type(self):
        mapping = classify([FieldDescriptor(kind=FieldKind.EMAIL, name="contact")])[0]
        assert mapping.field_type == FieldType.EMAIL
        assert mapping.confidence >= 0.8

    def test_label_only(self):
        mapping = classify([FieldDescriptor(label_text="Last Name")])[0]
        assert mapping.field_type == FieldType.LAST_NAME
        assert mapping.confidence == pytest.approx(0.75)

    def test_cover_letter_textarea(self):
        descriptor = FieldDescriptor(kind=FieldKind.TEXTAREA, rows=10, label_text="Cover Letter")
        assert classify([descriptor])[0].field_type == FieldType.COVER_LETTER

    def test_threshold_boundary(self):
        at_threshold = classify([FieldDescriptor(name="x")], strategies=[FixedStrategy({FieldType.CITY: 0.5})])[0]
        assert at_threshold.field_type == FieldType.CITY

        below = classify([FieldDescriptor(name="x")], strategies=[FixedStrategy({FieldType.CITY: 0.499})])[0]
        assert below.field_type == FieldType.UNMAPPED
        assert below.confidence == pytest.approx(0.499)
        assert below.resolved_value is None

    def test_tie_prefers_unassigned_then_declaration_order(self):
        strategy = FixedStrategy({FieldType.LAST_NAME: 0.8, FieldType.FIRST_NAME: 0.8})
        mappings = classify([FieldDescriptor(name="a"), FieldDescriptor(name="b")], strategies=[strategy])
        assert [m.field_type for m in mappings] == [FieldType.FIRST_NAME, FieldType.LAST_NAME]

    def test_pick_field_type_without_scores(self):
        assert pick_field_type({}, set()) is None

    def test_file_inputs_left_unmapped(self):
        mapping = classify([FieldDescriptor(kind=FieldKind.FILE, name="email")])[0]
        assert mapping.field_type == FieldType.UNMAPPED
        assert mapping.confidence == 0.0

    def test_unrelated_field_unmapped(self):
        mapping = classify([FieldDescriptor(name="favorite_color", label_text="Favorite color")])[0]
        assert mapping.field_type == FieldType.UNMAPPED

    def test_resolved_values_from_profile(self, profile):
        descriptors = [
            FieldDescriptor(name="firstName", position=0),
            FieldDescriptor(name="city", position=1),
            FieldDescriptor(name="phone", position=2),
            FieldDescriptor(kind=FieldKind.TEXTAREA, name="coverLetter", position=3),
        ]
        mappings = FormFieldClassifier().classify(descriptors, profile=profile)
        assert [m.resolved_value for m in mappings] == ["Jane", "Springfield", None, "Dear hiring manager"]
        assert mappings[2].field_type == FieldType.PHONE

    def test_output_order_matches_input(self):
        descriptors = [FieldDescriptor(name="email", position=0), FieldDescriptor(name="lastName", position=1)]
        mappings = classify(descriptors)
        assert [m.descriptor for m in mappings] == descriptors
