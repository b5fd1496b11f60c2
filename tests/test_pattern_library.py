import pytest

from profile_autofill.schemas.field_mapping import FieldType
from profile_autofill.schemas.profile import SkillCategory
from profile_autofill.services.pattern_library import PatternCategory, get_pattern_library


@pytest.fixture
def library():
    return get_pattern_library()


class TestPatternRules:
    """Rule table matching and normalization"""

    def test_email_lowercased(self, library):
        assert library.best(PatternCategory.EMAIL, "Mail: Jane.Doe@Example.com").value == "jane.doe@example.com"

    def test_ties_go_to_last_occurrence(self, library):
        assert library.best(PatternCategory.EMAIL, "a@x.com or b@y.com").value == "b@y.com"

    def test_higher_confidence_beats_position(self, library):
        match = library.best(PatternCategory.PHONE, "(555) 123-4567 or 555-9876")
        assert match.value == "(555) 123-4567"
        assert match.confidence == pytest.approx(0.85)

    def test_find_all_in_document_order(self, library):
        values = [m.value for m in library.find_all(PatternCategory.EMAIL, "b@y.com then a@x.com")]
        assert values == ["b@y.com", "a@x.com"]

    def test_linkedin_normalized(self, library):
        match = library.best(PatternCategory.LINKEDIN_URL, "www.linkedin.com/in/jane-doe/")
        assert match.value == "https://www.linkedin.com/in/jane-doe"

    def test_portfolio_excludes_linkedin(self, library):
        assert library.best(PatternCategory.PORTFOLIO_URL, "https://linkedin.com/in/jane") is None
        assert library.best(PatternCategory.PORTFOLIO_URL, "github.com/janedoe").value == "https://github.com/janedoe"

    def test_degree_abbreviations(self, library):
        assert library.best(PatternCategory.DEGREE, "MBA, Wharton").value == "Master of Business Administration"
        assert library.best(PatternCategory.DEGREE, "Bachelor of Science").value == "Bachelor of Science"
        assert library.best(PatternCategory.DEGREE, "fluent in ms word") is None

    def test_gpa_out_of_range_rejected(self, library):
        assert library.best(PatternCategory.GPA, "GPA 4.5") is None
        assert library.best(PatternCategory.GPA, "GPA: 3.9").value == "3.9"

    def test_rules_are_grouped_by_category(self, library):
        assert all(r.category == PatternCategory.PHONE for r in library.rules(PatternCategory.PHONE))
        assert len(library.rules(PatternCategory.PHONE)) == 2


class TestVocabularies:
    """Read-only vocabularies"""

    def test_field_vocabulary_covers_every_field_type(self, library):
        assert set(library.field_vocabulary) == set(FieldType) - {FieldType.UNMAPPED}

    def test_tables_are_read_only(self, library):
        with pytest.raises(TypeError):
            library.field_vocabulary[FieldType.EMAIL] = None

    def test_vocabularies_cannot_be_reassigned(self, library):
        with pytest.raises(AttributeError):
            library.field_vocabulary = {}
        with pytest.raises(AttributeError):
            library.company_indicators = ()
        with pytest.raises(AttributeError):
            library.extra_vocabulary = ()

    def test_section_kind(self, library):
        assert library.section_kind("work experience") == "experience"
        assert library.section_kind("hobbies") == "interests"
        assert library.section_kind("jane doe") is None

    def test_lookup_skill_with_alias(self, library):
        assert library.lookup_skill("golang") == ("Go", SkillCategory.TECHNICAL)
        assert library.lookup_skill(" python ") == ("Python", SkillCategory.TECHNICAL)
        assert library.lookup_skill("Spanish") == ("Spanish", SkillCategory.LANGUAGE)
        assert library.lookup_skill("Underwater Welding") is None
