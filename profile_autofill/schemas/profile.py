"""Profile data extracted from CV text and the stored profile it is merged into."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from profile_autofill.config import FOUND_THRESHOLD, MAX_CV_FILE_SIZE_BYTES

CATEGORIES = ("personal_info", "work_experience", "education", "skills")


class Address(BaseModel):
    model_config = ConfigDict(frozen=True)

    street: Optional[str] = Field(default=None, description="Street line")
    city: Optional[str] = Field(default=None, description="City")
    state: Optional[str] = Field(default=None, description="State, province or region")
    postal_code: Optional[str] = Field(default=None, description="ZIP / postal code")
    country: Optional[str] = Field(default=None, description="Country")

    def is_empty(self) -> bool:
        return not any((self.street, self.city, self.state, self.postal_code, self.country))


class PersonalInfo(BaseModel):
    """Contact details; every sub-field is optional."""

    model_config = ConfigDict(frozen=True)

    first_name: Optional[str] = Field(default=None, description="Given name")
    last_name: Optional[str] = Field(default=None, description="Family name")
    email: Optional[str] = Field(default=None, description="Email address, lower-cased")
    phone: Optional[str] = Field(default=None, description="Phone number as written, whitespace-normalized")
    address: Address = Field(default_factory=Address, description="Postal address")
    linkedin_url: Optional[str] = Field(default=None, description="LinkedIn profile URL")
    portfolio_url: Optional[str] = Field(default=None, description="Portfolio / personal site URL")


class WorkExperience(BaseModel):
    """One job entry. Dates are "YYYY-MM" / "YYYY", or raw text when unparseable."""

    model_config = ConfigDict(frozen=True)

    job_title: Optional[str] = Field(default=None, description="Job title")
    company: Optional[str] = Field(default=None, description="Employer")
    start_date: Optional[str] = Field(default=None, description="Start date")
    end_date: Optional[str] = Field(default=None, description="End date; None when current")
    current: bool = Field(default=False, description="True for an ongoing position")
    description: str = Field(default="", description="Free-text description lines")
    achievements: List[str] = Field(default_factory=list, description="Bulleted achievements, in order")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Per-entry confidence")


class Education(BaseModel):
    model_config = ConfigDict(frozen=True)

    degree: Optional[str] = Field(default=None, description="Degree, normalized (e.g. Bachelor of Science)")
    institution: Optional[str] = Field(default=None, description="School or university")
    graduation_date: Optional[str] = Field(default=None, description="Graduation date")
    field_of_study: Optional[str] = Field(default=None, description="Major / field of study")
    gpa: Optional[str] = Field(default=None, description="GPA as written (e.g. 3.8 or 3.8/4.0)")
    honors: Optional[str] = Field(default=None, description="Honors (cum laude, Dean's List, ...)")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Per-entry confidence")


class SkillCategory(str, Enum):
    TECHNICAL = "technical"
    SOFT = "soft"
    LANGUAGE = "language"


class Skill(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Skill as written (canonical casing when known)")
    category: SkillCategory = Field(default=SkillCategory.TECHNICAL)


class ExtractionErrorKind(str, Enum):
    """Explicit result states; never raised as exceptions."""

    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    FORMAT_NOT_SUPPORTED = "FORMAT_NOT_SUPPORTED"
    TIMEOUT = "TIMEOUT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"

    @property
    def user_message(self) -> str:
        return USER_MESSAGES[self]


USER_MESSAGES = {
    ExtractionErrorKind.EXTRACTION_FAILED: (
        "Part of your CV could not be read. Please check the details below and fill in anything missing."
    ),
    ExtractionErrorKind.INSUFFICIENT_DATA: (
        "We found very little in your CV. Please enter your details manually or upload a more complete CV."
    ),
    ExtractionErrorKind.FORMAT_NOT_SUPPORTED: "Please upload a PDF, Word or plain-text document.",
    ExtractionErrorKind.TIMEOUT: (
        "Your CV is taking too long to process. Some details may be missing; please review them."
    ),
    ExtractionErrorKind.FILE_TOO_LARGE: (
        f"Your CV file is too large. Please upload a file smaller than {MAX_CV_FILE_SIZE_BYTES // (1024 * 1024)}MB."
    ),
}


class ExtractionIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ExtractionErrorKind
    category: Optional[str] = Field(default=None, description="Affected category, None for the whole run")
    message: str = Field(default="", description="Technical detail for logs")

    @computed_field
    @property
    def user_message(self) -> str:
        """Text to show the user for this kind of problem."""
        return self.kind.user_message


def _empty_confidence() -> Dict[str, float]:
    return {c: 0.0 for c in CATEGORIES}


class ExtractedProfileData(BaseModel):
    """Result of one CV extraction run. Created fresh per run, never mutated after return."""

    model_config = ConfigDict(frozen=True)

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    work_experience: List[WorkExperience] = Field(default_factory=list, description="Newest first")
    education: List[Education] = Field(default_factory=list, description="Newest first")
    skills: List[Skill] = Field(default_factory=list, description="Deduplicated, sorted by name")
    confidence: Dict[str, float] = Field(
        default_factory=_empty_confidence, description="Category name -> confidence in [0, 1]"
    )
    field_confidence: Dict[str, float] = Field(
        default_factory=dict, description="Field path (e.g. personal_info.email) -> confidence"
    )
    sections_found: List[str] = Field(default_factory=list, description="Section kinds detected, in order")
    errors: List[ExtractionIssue] = Field(default_factory=list)
    incomplete: bool = Field(default=False, description="True when the run stopped on its time budget")
    fingerprint: Optional[str] = Field(default=None, description="Fingerprint of the source document")

    def found(self, category: str, threshold: float = FOUND_THRESHOLD) -> bool:
        """True when the category's confidence reaches the 'found' threshold."""
        return self.confidence.get(category, 0.0) >= threshold

    def has_error(self, kind: ExtractionErrorKind) -> bool:
        return any(issue.kind == kind for issue in self.errors)

    @property
    def skill_names(self) -> List[str]:
        return [s.name for s in self.skills]


class StoredProfile(BaseModel):
    """The persisted profile the autofill reads from. Serialization is the storage layer's concern."""

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    current_title: Optional[str] = Field(default=None, description="Current or most recent job title")
    experience_summary: Optional[str] = Field(default=None, description="One-line experience summary")
    work_experience: List[WorkExperience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    cover_letter: Optional[str] = Field(default=None, description="Default cover letter text")
    resume_text: Optional[str] = Field(default=None, description="Plain-text resume for paste fields")
    document_fingerprint: Optional[str] = Field(default=None, description="Fingerprint of the current CV")
    autofill_enabled: bool = Field(default=True)


class ValidationResult(BaseModel):
    is_valid: bool = Field(default=True)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
