"""Immutable snapshots of form elements, decoupled from any live page object."""

from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldKind(str, Enum):
    """Classifiable form element kinds."""

    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    URL = "url"
    TEXTAREA = "textarea"
    SELECT = "select"
    FILE = "file"


class FieldDescriptor(BaseModel):
    """Classifiable attributes of one form element, produced fresh per scan."""

    model_config = ConfigDict(frozen=True)

    kind: FieldKind = Field(default=FieldKind.TEXT, description="Element kind (input type or tag)")
    name: str = Field(default="", description="name attribute")
    id: str = Field(default="", description="id attribute")
    placeholder: str = Field(default="", description="placeholder attribute")
    label_text: str = Field(default="", description="Associated <label> text, cleaned")
    aria_label: str = Field(default="", description="aria-label / aria-labelledby text")
    surrounding_text: str = Field(default="", description="Nearby text nodes, cleaned")
    rows: Optional[int] = Field(default=None, description="textarea rows")
    max_length: Optional[int] = Field(default=None, description="maxlength attribute")
    accepted_types: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="File inputs: lower-cased accept entries (MIME types, wildcards or .ext)",
    )
    max_size_bytes: Optional[int] = Field(default=None, description="File inputs: size limit if declared")
    position: int = Field(default=0, description="Index of the element in scan order")


class DocumentMetadata(BaseModel):
    """Stored document facts used for file-upload compatibility checks."""

    model_config = ConfigDict(frozen=True)

    mime_type: str = Field(..., description="MIME type of the stored document")
    size_bytes: int = Field(..., ge=0, description="Document size in bytes")
    file_name: Optional[str] = Field(default=None, description="Original file name")
    fingerprint: Optional[str] = Field(default=None, description="SHA-256 of the document bytes")
