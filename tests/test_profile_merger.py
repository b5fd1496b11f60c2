from datetime import date

import pytest

from profile_autofill.schemas.profile import (
    Address,
    Education,
    ExtractedProfileData,
    PersonalInfo,
    Skill,
    StoredProfile,
    WorkExperience,
)
from profile_autofill.services.profile_merger import is_edited, is_stale, merge_profiles, normalize_edited_paths

AS_OF = date(2024, 1, 1)


@pytest.fixture
def existing():
    return StoredProfile(
        personal_info=PersonalInfo(
            first_name="Janet",
            last_name="Doe",
            email="janet@old.example",
            phone="555-0000",
            address=Address(city="Boston", state="MA"),
        ),
        current_title="Analyst",
        experience_summary="1 years of experience at companies including OldCo",
        work_experience=[
            WorkExperience(job_title="Analyst", company="OldCo", start_date="2015", end_date="2016"),
            WorkExperience(job_title="Analyst II", company="OldCo", start_date="2016", end_date="2018"),
        ],
        education=[Education(degree="Bachelor of Arts", institution="Old College", graduation_date="2014")],
        skills=[Skill(name="python"), Skill(name="Excel")],
        cover_letter="Hello",
        document_fingerprint="doc-1",
    )


@pytest.fixture
def extracted():
    return ExtractedProfileData(
        personal_info=PersonalInfo(
            first_name="Jane",
            last_name="Doe",
            email="jane@new.example",
            address=Address(city="Seattle", state="WA"),
        ),
        work_experience=[
            WorkExperience(
                job_title="Engineer", company="Globex", start_date="2021-01", current=True, confidence=0.8
            ),
            WorkExperience(job_title="Developer", company="Initech", start_date="2019", end_date="2020", confidence=0.8),
        ],
        education=[Education(degree="Master of Science", institution="State University", graduation_date="2019",
                             confidence=0.8)],
        skills=[Skill(name="Python"), Skill(name="Docker")],
        confidence={"personal_info": 0.8, "work_experience": 0.8, "education": 0.8, "skills": 0.9},
        field_confidence={
            "personal_info.first_name": 0.7,
            "personal_info.last_name": 0.7,
            "personal_info.email": 0.95,
            "personal_info.address.city": 0.7,
            "personal_info.address.state": 0.7,
        },
        fingerprint="doc-1",
    )


class TestEditedPaths:
    def test_camel_case_paths(self):
        assert normalize_edited_paths(["personalInfo.firstName", "workExperience"]) == frozenset(
            {"personal_info.first_name", "work_experience"}
        )

    def test_only_a_non_current_document_is_stale(self, extracted):
        assert not is_stale(extracted, None)
        assert not is_stale(extracted, "doc-1")
        assert is_stale(extracted, "doc-2")

    def test_ancestor_covers_children(self):
        edited = frozenset({"personal_info.address"})
        assert is_edited("personal_info.address.city", edited)
        assert not is_edited("personal_info.email", edited)


class TestMergeProfiles:
    """Merging extraction results into the stored profile"""

    def test_edited_email_preserved(self, extracted, existing):
        merged = merge_profiles(extracted, existing, {"personalInfo.email"}, as_of=AS_OF)
        assert merged.personal_info.email == existing.personal_info.email
        assert merged.personal_info.first_name == "Jane"

    def test_unedited_scalars_replaced(self, extracted, existing):
        merged = merge_profiles(extracted, existing, as_of=AS_OF)
        assert merged.personal_info.email == "jane@new.example"
        assert merged.personal_info.address.city == "Seattle"

    def test_missing_values_keep_existing(self, extracted, existing):
        merged = merge_profiles(extracted, existing, as_of=AS_OF)
        assert merged.personal_info.phone == "555-0000"
        assert merged.cover_letter == "Hello"

    def test_ancestor_path_protects_section(self, extracted, existing):
        merged = merge_profiles(extracted, existing, {"personal_info.address"}, as_of=AS_OF)
        assert merged.personal_info.address == existing.personal_info.address
        assert merged.personal_info.email == "jane@new.example"

    def test_zero_confidence_value_ignored(self, extracted, existing):
        field_confidence = dict(extracted.field_confidence, **{"personal_info.email": 0.0})
        low = extracted.model_copy(update={"field_confidence": field_confidence})
        merged = merge_profiles(low, existing, as_of=AS_OF)
        assert merged.personal_info.email == existing.personal_info.email

    def test_skills_union_keeps_existing_spelling(self, extracted, existing):
        merged = merge_profiles(extracted, existing, as_of=AS_OF)
        assert [s.name for s in merged.skills] == ["python", "Excel", "Docker"]

    def test_edited_skills_verbatim(self, extracted, existing):
        merged = merge_profiles(extracted, existing, {"skills"}, as_of=AS_OF)
        assert merged.skills == existing.skills

    def test_skills_capped(self, extracted, existing):
        many = existing.model_copy(update={"skills": [Skill(name=f"Skill {i}") for i in range(50)]})
        merged = merge_profiles(extracted, many, as_of=AS_OF)
        assert len(merged.skills) == 50
        assert "Docker" not in [s.name for s in merged.skills]

    def test_sections_replaced_wholesale(self, extracted, existing):
        merged = merge_profiles(extracted, existing, as_of=AS_OF)
        assert [w.company for w in merged.work_experience] == ["Globex", "Initech"]
        assert merged.education == extracted.education
        assert merged.current_title == "Engineer"
        assert merged.experience_summary == "4 years of experience at companies including Globex, Initech"

    def test_edited_section_kept_verbatim(self, extracted, existing):
        merged = merge_profiles(extracted, existing, {"work_experience.0.job_title"}, as_of=AS_OF)
        assert merged.work_experience == existing.work_experience
        assert merged.current_title == "Analyst"
        assert merged.education == extracted.education

    def test_empty_extraction_keeps_existing_newest_first(self, extracted, existing):
        empty = extracted.model_copy(update={"work_experience": [], "education": []})
        merged = merge_profiles(empty, existing, as_of=AS_OF)
        assert [w.end_date for w in merged.work_experience] == ["2018", "2016"]
        assert merged.experience_summary == existing.experience_summary

    def test_stale_result_ignored(self, extracted, existing):
        stale = extracted.model_copy(update={"fingerprint": "doc-0"})
        merged = merge_profiles(stale, existing, as_of=AS_OF, current_fingerprint="doc-1")
        assert merged == existing
        assert merged is not existing

    def test_stale_result_without_existing_profile(self, extracted):
        merged = merge_profiles(extracted, None, as_of=AS_OF, current_fingerprint="doc-2")
        assert merged == StoredProfile()

    def test_new_document_replaces_values(self, extracted, existing):
        new_document = extracted.model_copy(update={"fingerprint": "doc-2"})
        for current in (None, "doc-2"):
            merged = merge_profiles(new_document, existing, as_of=AS_OF, current_fingerprint=current)
            assert merged.personal_info.email == "jane@new.example"
            assert merged.document_fingerprint == "doc-2"

    def test_inputs_not_mutated(self, extracted, existing):
        before = (existing.model_dump(), extracted.model_dump())
        merge_profiles(extracted, existing, {"skills"}, as_of=AS_OF)
        assert (existing.model_dump(), extracted.model_dump()) == before

    def test_no_existing_profile(self, extracted):
        merged = merge_profiles(extracted, None, as_of=AS_OF)
        assert merged.personal_info == extracted.personal_info
        assert merged.document_fingerprint == "doc-1"
