"""Classifier outputs: one mapping per descriptor."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from profile_autofill.schemas.field_descriptor import FieldDescriptor


class FieldType(str, Enum):
    """Semantic profile field types. Declaration order is the tie-break order."""

    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    EMAIL = "email"
    PHONE = "phone"
    ADDRESS_LINE = "address_line"
    CITY = "city"
    STATE = "state"
    POSTAL_CODE = "postal_code"
    COUNTRY = "country"
    LINKEDIN_URL = "linkedin_url"
    PORTFOLIO_URL = "portfolio_url"
    COVER_LETTER = "cover_letter"
    RESUME_TEXT = "resume_text"
    UNMAPPED = "unmapped"


FIELD_TYPE_ORDER = {ft: i for i, ft in enumerate(FieldType)}


class UploadKind(str, Enum):
    CV_RESUME = "cv_resume"
    COVER_LETTER = "cover_letter"
    PORTFOLIO = "portfolio"
    OTHER = "other"


UPLOAD_KIND_ORDER = {kind: i for i, kind in enumerate(UploadKind)}


class FieldMapping(BaseModel):
    """Classification of one descriptor. resolved_value is None whenever unmapped."""

    model_config = ConfigDict(frozen=True)

    descriptor: FieldDescriptor
    field_type: FieldType = Field(default=FieldType.UNMAPPED)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    resolved_value: Optional[str] = Field(default=None, description="Profile value to fill, if any")


class FileUploadMapping(BaseModel):
    """Semantic label and compatibility verdict for one file input."""

    model_config = ConfigDict(frozen=True)

    descriptor: FieldDescriptor
    upload_kind: UploadKind = Field(default=UploadKind.OTHER)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    compatibility_ok: bool = Field(..., description="Document satisfies accept and size constraints")
    incompatibility_reason: Optional[str] = Field(default=None, description="Why compatibility failed")
