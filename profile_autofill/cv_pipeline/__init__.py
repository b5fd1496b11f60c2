"""CV pipeline: text normalization, section segmentation, heuristic extraction, coordination."""

from .cv_extractor import extract, extract_async, is_supported_document_type, validate_document
from .extraction_cache import ExtractionCoordinator, document_fingerprint
from .text_normalizer import Section, normalize_text, segment

__all__ = [
    "extract",
    "extract_async",
    "is_supported_document_type",
    "validate_document",
    "ExtractionCoordinator",
    "document_fingerprint",
    "Section",
    "normalize_text",
    "segment",
]
