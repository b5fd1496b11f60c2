"""Schema exports."""

from .field_descriptor import DocumentMetadata, FieldDescriptor, FieldKind
from .field_mapping import FieldMapping, FieldType, FileUploadMapping, UploadKind
from .profile import (
    Address,
    Education,
    ExtractedProfileData,
    ExtractionErrorKind,
    ExtractionIssue,
    PersonalInfo,
    Skill,
    SkillCategory,
    StoredProfile,
    ValidationResult,
    WorkExperience,
)

__all__ = [
    "FieldKind",
    "FieldDescriptor",
    "DocumentMetadata",
    "FieldType",
    "FieldMapping",
    "UploadKind",
    "FileUploadMapping",
    "Address",
    "PersonalInfo",
    "WorkExperience",
    "Education",
    "SkillCategory",
    "Skill",
    "ExtractionErrorKind",
    "ExtractionIssue",
    "ExtractedProfileData",
    "StoredProfile",
    "ValidationResult",
]
