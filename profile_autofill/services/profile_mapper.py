"""Map extraction results onto the stored profile shape and read fill values back out of it."""

import re
from datetime import date
from typing import List, Optional
from urllib.parse import urlparse

from profile_autofill.schemas.field_mapping import FieldType
from profile_autofill.schemas.profile import (
    ExtractedProfileData,
    StoredProfile,
    ValidationResult,
    WorkExperience,
)
from profile_autofill.utils.date_parser import months_between
from profile_autofill.utils.helpers import is_valid_email
from profile_autofill.utils.logger import get_logger

logger = get_logger(__name__)

SUMMARY_MAX_COMPANIES = 3


def derive_current_title(work_experience: List[WorkExperience]) -> Optional[str]:
    """Title of the current position, else of the newest entry."""
    for entry in work_experience:
        if entry.current and entry.job_title:
            return entry.job_title
    for entry in work_experience:
        if entry.job_title:
            return entry.job_title
    return None


def total_experience_years(work_experience: List[WorkExperience], as_of: Optional[date] = None) -> float:
    """Sum of entry durations in years, one decimal. Current entries run to as_of (default today)."""
    months = 0
    for entry in work_experience:
        end = None if entry.current else entry.end_date
        months += months_between(entry.start_date, end, as_of)
    return round(months / 12, 1)


def build_experience_summary(work_experience: List[WorkExperience], as_of: Optional[date] = None) -> Optional[str]:
    """
    One-line summary, e.g. "3.5 years of experience at companies including Acme Corp, Globex".
    Returns None when there is no work history.
    """
    if not work_experience:
        return None
    years = total_experience_years(work_experience, as_of)
    years_text = f"{years:g}"
    summary = f"{years_text} years of experience"
    companies = list(dict.fromkeys(e.company for e in work_experience if e.company))
    if companies:
        summary += " at companies including " + ", ".join(companies[:SUMMARY_MAX_COMPANIES])
    return summary


def to_stored_profile(extracted: ExtractedProfileData, as_of: Optional[date] = None) -> StoredProfile:
    """Fresh StoredProfile from an extraction (first upload, nothing to merge with)."""
    return StoredProfile(
        personal_info=extracted.personal_info,
        current_title=derive_current_title(extracted.work_experience),
        experience_summary=build_experience_summary(extracted.work_experience, as_of),
        work_experience=list(extracted.work_experience),
        education=list(extracted.education),
        skills=list(extracted.skills),
        document_fingerprint=extracted.fingerprint,
    )


def profile_value_for(field_type: FieldType, profile: Optional[StoredProfile]) -> Optional[str]:
    """Value a form field of this type should be filled with, or None."""
    if profile is None or field_type == FieldType.UNMAPPED:
        return None
    info = profile.personal_info
    address = info.address
    values = {
        FieldType.FIRST_NAME: info.first_name,
        FieldType.LAST_NAME: info.last_name,
        FieldType.EMAIL: info.email,
        FieldType.PHONE: info.phone,
        FieldType.ADDRESS_LINE: address.street,
        FieldType.CITY: address.city,
        FieldType.STATE: address.state,
        FieldType.POSTAL_CODE: address.postal_code,
        FieldType.COUNTRY: address.country,
        FieldType.LINKEDIN_URL: info.linkedin_url,
        FieldType.PORTFOLIO_URL: info.portfolio_url,
        FieldType.COVER_LETTER: profile.cover_letter,
        FieldType.RESUME_TEXT: profile.resume_text,
    }
    return values.get(field_type) or None


def _is_valid_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and "." in parsed.netloc


def validate_profile(profile: StoredProfile) -> ValidationResult:
    """Errors block saving (malformed email); warnings only flag likely extraction gaps."""
    errors: List[str] = []
    warnings: List[str] = []
    info = profile.personal_info

    if info.email and not is_valid_email(info.email):
        errors.append("Invalid email format")
    if info.phone:
        digits = re.sub(r"\D", "", info.phone)
        if not 7 <= len(digits) <= 15:
            warnings.append("Phone number format may be invalid")
    if not info.first_name:
        warnings.append("First name not extracted")
    if not info.last_name:
        warnings.append("Last name not extracted")
    if info.linkedin_url and not _is_valid_url(info.linkedin_url):
        warnings.append("LinkedIn URL format may be invalid")
    if info.portfolio_url and not _is_valid_url(info.portfolio_url):
        warnings.append("Portfolio URL format may be invalid")
    if not profile.skills:
        warnings.append("No skills extracted")

    if errors or warnings:
        logger.info("Profile validation: errors=%s warnings=%s", len(errors), len(warnings))
    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
