"""File upload matcher: semantic upload kind plus accept/size compatibility for each file input."""

from typing import List, Optional, Sequence, Tuple

from profile_autofill.classification.strategies import BaseFieldStrategy, combine_scores, upload_strategies
from profile_autofill.config import ACCEPTANCE_THRESHOLD, EXTENSION_MIME_TYPES
from profile_autofill.schemas.field_descriptor import DocumentMetadata, FieldDescriptor, FieldKind
from profile_autofill.schemas.field_mapping import UPLOAD_KIND_ORDER, FileUploadMapping, UploadKind
from profile_autofill.services.pattern_library import PatternLibrary, get_pattern_library
from profile_autofill.utils.helpers import clamp01
from profile_autofill.utils.logger import get_logger

logger = get_logger(__name__)


def _accepts(entry: str, mime_type: str, file_name: str) -> bool:
    if entry in ("*", "*/*") or entry == mime_type:
        return True
    if entry.endswith("/*"):
        return mime_type.startswith(entry[:-1])
    if entry.startswith("."):
        return EXTENSION_MIME_TYPES.get(entry) == mime_type or (bool(file_name) and file_name.endswith(entry))
    return False


def check_compatibility(descriptor: FieldDescriptor, document: DocumentMetadata) -> Tuple[bool, Optional[str]]:
    """
    (ok, reason). The MIME type must be accepted (or nothing declared) and the size
    must not exceed max_size_bytes (or no limit declared).
    """
    reasons = []
    mime_type = document.mime_type.strip().lower()
    file_name = (document.file_name or "").strip().lower()
    accepted = descriptor.accepted_types
    if accepted and not any(_accepts(entry, mime_type, file_name) for entry in accepted):
        reasons.append(f"Document type {mime_type} is not accepted (accepts: {', '.join(sorted(accepted))})")
    limit = descriptor.max_size_bytes
    if limit is not None and document.size_bytes > limit:
        reasons.append(f"Document size {document.size_bytes} bytes exceeds the limit of {limit} bytes")
    if reasons:
        return False, "; ".join(reasons)
    return True, None


def pick_upload_kind(scores: dict) -> Tuple[UploadKind, float]:
    """A specific kind beats the generic one; 'other' with 0.0 when nothing matched."""
    specific = {k: v for k, v in scores.items() if k != UploadKind.OTHER and v > 0}
    if not specific:
        return UploadKind.OTHER, clamp01(scores.get(UploadKind.OTHER, 0.0))
    kind = min(specific, key=lambda k: (-specific[k], UPLOAD_KIND_ORDER[k]))
    return kind, clamp01(specific[kind])


def match_uploads(
    descriptors: Sequence[FieldDescriptor],
    candidate_document: DocumentMetadata,
    pattern_library: Optional[PatternLibrary] = None,
    strategies: Optional[Sequence[BaseFieldStrategy]] = None,
) -> List[FileUploadMapping]:
    """One FileUploadMapping per file descriptor, in input order. Incompatible mappings are still returned."""
    library = pattern_library or get_pattern_library()
    active = tuple(strategies) if strategies is not None else tuple(upload_strategies())
    mappings: List[FileUploadMapping] = []
    for descriptor in descriptors:
        if descriptor.kind != FieldKind.FILE:
            continue
        scores = combine_scores(descriptor, active, library.upload_vocabulary)
        kind, confidence = pick_upload_kind(scores)
        ok, reason = check_compatibility(descriptor, candidate_document)
        mappings.append(
            FileUploadMapping(
                descriptor=descriptor,
                upload_kind=kind,
                confidence=confidence,
                compatibility_ok=ok,
                incompatibility_reason=reason,
            )
        )
        if not ok and kind == UploadKind.CV_RESUME:
            logger.warning("CV upload field %s skipped: %s", descriptor.name or descriptor.id or descriptor.position, reason)

    logger.info(
        "Upload matching finished: file_fields=%s cv_targets=%s",
        len(mappings),
        len(cv_upload_targets(mappings)),
    )
    return mappings


def cv_upload_targets(
    mappings: Sequence[FileUploadMapping],
    threshold: float = ACCEPTANCE_THRESHOLD,
) -> List[FileUploadMapping]:
    """Every compatible CV/resume field above the threshold; forms often repeat the resume field."""
    return [
        m for m in mappings
        if m.upload_kind == UploadKind.CV_RESUME and m.compatibility_ok and m.confidence >= threshold
    ]
