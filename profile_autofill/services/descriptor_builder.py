"""Build immutable FieldDescriptors from raw element snapshots supplied by the page scanner."""

import re
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional

from profile_autofill.schemas.field_descriptor import FieldDescriptor, FieldKind
from profile_autofill.services.text_cleaner import clean_fragment
from profile_autofill.utils.logger import get_logger

logger = get_logger(__name__)

_INPUT_KINDS = {
    "": FieldKind.TEXT,
    "text": FieldKind.TEXT,
    "search": FieldKind.TEXT,
    "email": FieldKind.EMAIL,
    "tel": FieldKind.TEL,
    "url": FieldKind.URL,
    "file": FieldKind.FILE,
}

_SIZE_ATTRIBUTES = ("data-max-size", "data-maxsize", "max-size", "max_size_bytes")

_SIZE_TEXT_RE = re.compile(
    r"(?:max(?:imum)?|up\s+to|limit|no\s+larger\s+than)\s*(?:file\s+size)?\s*(?:of|is)?\s*:?\s*"
    r"(\d+(?:\.\d+)?)\s*(kb|mb|gb)\b"
    r"|(\d+(?:\.\d+)?)\s*(kb|mb|gb)\s+(?:max(?:imum)?|limit)\b",
    re.IGNORECASE,
)
_UNIT_BYTES = {"kb": 1024, "mb": 1024 * 1024, "gb": 1024 * 1024 * 1024}


def _text(raw: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = raw.get(key)
        if value:
            return str(value)
    return ""


def _int_or_none(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _flag(raw: Mapping[str, Any], key: str) -> bool:
    value = raw.get(key)
    if isinstance(value, str):
        return value.strip().lower() not in ("", "false", "0", "no")
    return bool(value)


def resolve_kind(raw: Mapping[str, Any]) -> Optional[FieldKind]:
    """Map tag/type to a FieldKind. Returns None for elements that are never filled (buttons, checkboxes...)."""
    tag = _text(raw, "tag", "tag_name").lower() or "input"
    if tag == "textarea":
        return FieldKind.TEXTAREA
    if tag == "select":
        return FieldKind.SELECT
    if tag != "input":
        return None
    return _INPUT_KINDS.get(_text(raw, "type").lower().strip())


def is_fillable(raw: Mapping[str, Any], kind: Optional[FieldKind]) -> bool:
    """Visible, enabled and writable. File inputs are often visually hidden behind a button, so visibility is not required for them."""
    if kind is None:
        return False
    if _flag(raw, "disabled") or _flag(raw, "readonly"):
        return False
    if kind != FieldKind.FILE and (_flag(raw, "hidden") or raw.get("visible") is False):
        return False
    return True


def parse_accept_attribute(value: Optional[str]) -> FrozenSet[str]:
    """Split an accept attribute into lower-cased entries: ".pdf, Application/PDF" -> {".pdf", "application/pdf"}."""
    if not value:
        return frozenset()
    return frozenset(t.strip().lower() for t in str(value).split(",") if t.strip())


def extract_max_file_size(raw: Mapping[str, Any], context: str = "") -> Optional[int]:
    """
    Size limit in bytes: first from data attributes (bytes), then from phrases in nearby
    text like "max 5MB", "up to 10 MB", "limit: 500KB", "2 MB maximum".
    """
    for key in _SIZE_ATTRIBUTES:
        size = _int_or_none(raw.get(key))
        if size is not None and size > 0:
            return size
    m = _SIZE_TEXT_RE.search(context or "")
    if not m:
        return None
    number = m.group(1) or m.group(3)
    unit = (m.group(2) or m.group(4)).lower()
    return int(float(number) * _UNIT_BYTES[unit])


def build_descriptor(raw: Mapping[str, Any], position: int = 0) -> Optional[FieldDescriptor]:
    """
    Snapshot one raw element. Returns None when the element is not fillable.
    Label and context fragments are cleaned of markup before classification.
    """
    kind = resolve_kind(raw)
    if not is_fillable(raw, kind):
        return None

    surrounding = clean_fragment(_text(raw, "context", "surrounding_text", "nearby_text"))
    accepted: FrozenSet[str] = frozenset()
    max_size = None
    if kind == FieldKind.FILE:
        accepted = parse_accept_attribute(_text(raw, "accept"))
        max_size = extract_max_file_size(raw, surrounding)

    return FieldDescriptor(
        kind=kind,
        name=_text(raw, "name").strip(),
        id=_text(raw, "id").strip(),
        placeholder=clean_fragment(_text(raw, "placeholder")),
        label_text=clean_fragment(_text(raw, "label", "label_text")),
        aria_label=clean_fragment(_text(raw, "aria_label", "aria-label", "aria_labelledby")),
        surrounding_text=surrounding,
        rows=_int_or_none(raw.get("rows")),
        max_length=_int_or_none(raw.get("maxlength", raw.get("max_length"))),
        accepted_types=accepted,
        max_size_bytes=max_size,
        position=position,
    )


def build_descriptors(raw_elements: Iterable[Mapping[str, Any]]) -> List[FieldDescriptor]:
    """Build descriptors in scan order, skipping elements that cannot be filled."""
    descriptors: List[FieldDescriptor] = []
    skipped = 0
    for raw in raw_elements:
        descriptor = build_descriptor(raw, position=len(descriptors))
        if descriptor is None:
            skipped += 1
            continue
        descriptors.append(descriptor)
    logger.info("Descriptor scan finished: fillable=%s skipped=%s", len(descriptors), skipped)
    return descriptors
