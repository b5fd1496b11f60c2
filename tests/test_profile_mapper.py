from datetime import date

from profile_autofill.cv_pipeline.cv_extractor import extract
from profile_autofill.schemas.field_mapping import FieldType
from profile_autofill.schemas.profile import Address, PersonalInfo, Skill, StoredProfile, WorkExperience
from profile_autofill.services.profile_mapper import (
    build_experience_summary,
    derive_current_title,
    profile_value_for,
    to_stored_profile,
    validate_profile,
)


class TestProfileMapper:
    """Extraction results to stored profile and back to field values"""

    def test_experience_summary(self):
        work = [WorkExperience(job_title="Engineer", company="Acme", start_date="2020-01", end_date="2022-07")]
        assert build_experience_summary(work) == "2.5 years of experience at companies including Acme"

    def test_summary_lists_at_most_three_companies(self):
        work = [
            WorkExperience(job_title="Dev", company=name, start_date="2020", end_date="2021")
            for name in ("A", "B", "C", "D")
        ]
        assert build_experience_summary(work).endswith("including A, B, C")

    def test_summary_for_current_role(self):
        work = [WorkExperience(job_title="Engineer", company="Globex", start_date="2021-01", current=True)]
        assert build_experience_summary(work, as_of=date(2023, 1, 1)) == (
            "2 years of experience at companies including Globex"
        )

    def test_no_work_history(self):
        assert build_experience_summary([]) is None
        assert derive_current_title([]) is None

    def test_current_title_prefers_current_entry(self):
        work = [
            WorkExperience(job_title="Consultant", end_date="2023"),
            WorkExperience(job_title="Founder", current=True),
        ]
        assert derive_current_title(work) == "Founder"

    def test_to_stored_profile(self, sample_cv_text):
        extracted = extract(sample_cv_text, fingerprint="doc-1")
        profile = to_stored_profile(extracted, as_of=date(2024, 1, 1))
        assert profile.current_title == "Senior Software Engineer"
        assert profile.experience_summary.startswith("5 years of experience")
        assert profile.document_fingerprint == "doc-1"
        assert profile.skills == extracted.skills

    def test_profile_value_for(self):
        profile = StoredProfile(
            personal_info=PersonalInfo(first_name="Jane", address=Address(postal_code="94105")),
            resume_text="",
        )
        assert profile_value_for(FieldType.FIRST_NAME, profile) == "Jane"
        assert profile_value_for(FieldType.POSTAL_CODE, profile) == "94105"
        assert profile_value_for(FieldType.RESUME_TEXT, profile) is None
        assert profile_value_for(FieldType.UNMAPPED, profile) is None
        assert profile_value_for(FieldType.EMAIL, None) is None


class TestValidateProfile:
    def test_invalid_email_is_error(self):
        result = validate_profile(StoredProfile(personal_info=PersonalInfo(email="not-an-email")))
        assert result.is_valid is False
        assert "Invalid email format" in result.errors

    def test_warnings_do_not_block(self):
        profile = StoredProfile(
            personal_info=PersonalInfo(email="jane@example.com", phone="12", linkedin_url="linkedin"),
        )
        result = validate_profile(profile)
        assert result.is_valid is True
        assert "Phone number format may be invalid" in result.warnings
        assert "LinkedIn URL format may be invalid" in result.warnings
        assert "First name not extracted" in result.warnings
        assert "No skills extracted" in result.warnings

    def test_complete_profile_is_clean(self):
        profile = StoredProfile(
            personal_info=PersonalInfo(
                first_name="Jane",
                last_name="Doe",
                email="jane@example.com",
                phone="+1 415 555 0134",
                linkedin_url="https://linkedin.com/in/janedoe",
            ),
            skills=[Skill(name="Python")],
        )
        result = validate_profile(profile)
        assert (result.is_valid, result.errors, result.warnings) == (True, [], [])
