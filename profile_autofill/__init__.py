"""Local heuristic CV extraction and job-application form mapping."""

from .classification import classify, match_uploads
from .cv_pipeline import ExtractionCoordinator, document_fingerprint, extract, extract_async, validate_document
from .services import build_descriptors, merge_profiles, to_stored_profile, validate_profile

__version__ = "0.1.0"

__all__ = [
    "build_descriptors",
    "classify",
    "match_uploads",
    "extract",
    "extract_async",
    "validate_document",
    "ExtractionCoordinator",
    "document_fingerprint",
    "merge_profiles",
    "to_stored_profile",
    "validate_profile",
]
