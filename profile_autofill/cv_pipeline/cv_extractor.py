"""Heuristic extraction of a structured profile from plain CV text."""

import asyncio
import time
from functools import partial
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple

from profile_autofill.config import (
    EXTRACTION_MAX_CHUNKS,
    EXTRACTION_TIMEOUT_SECONDS,
    MAX_CV_FILE_SIZE_BYTES,
    MIN_CV_TEXT_LENGTH,
    MIN_CV_WORD_COUNT,
    SUPPORTED_DOCUMENT_TYPES,
)
from profile_autofill.cv_pipeline.cv_skill_extractor import extract_skills
from profile_autofill.cv_pipeline.education_extractor import parse_education_block, sort_education
from profile_autofill.cv_pipeline.experience_extractor import parse_experience_block, sort_newest_first
from profile_autofill.cv_pipeline.personal_info import extract_personal_info
from profile_autofill.cv_pipeline.scoring import entries_confidence, personal_info_confidence, skills_confidence
from profile_autofill.cv_pipeline.text_normalizer import (
    HEADER_ZONE,
    Section,
    normalize_text,
    section_blocks,
    sections_of,
    segment,
)
from profile_autofill.schemas.field_descriptor import DocumentMetadata
from profile_autofill.schemas.profile import (
    CATEGORIES,
    Education,
    ExtractedProfileData,
    ExtractionErrorKind,
    ExtractionIssue,
    PersonalInfo,
    Skill,
    WorkExperience,
)
from profile_autofill.services.pattern_library import PatternLibrary, get_pattern_library
from profile_autofill.utils.logger import get_logger

logger = get_logger(__name__)

Stage = Tuple[Optional[str], Callable[[], None]]


def normalize_document_type(document_type: Optional[str]) -> Optional[str]:
    """".PDF" -> "pdf"; MIME types are lower-cased as they are."""
    if document_type is None:
        return None
    return document_type.strip().lower().lstrip(".")


def is_supported_document_type(document_type: Optional[str]) -> bool:
    """Unknown (None) types are accepted; the caller already has plain text."""
    normalized = normalize_document_type(document_type)
    return normalized is None or normalized in SUPPORTED_DOCUMENT_TYPES


def validate_document(
    document: DocumentMetadata,
    max_size_bytes: int = MAX_CV_FILE_SIZE_BYTES,
) -> Optional[ExtractionIssue]:
    """
    Check a stored document before its text is extracted. Returns FILE_TOO_LARGE or
    FORMAT_NOT_SUPPORTED, or None when the document can be processed. The type passes
    when either the MIME type or the file extension is supported.
    """
    if document.size_bytes > max_size_bytes:
        size_mb = document.size_bytes / (1024 * 1024)
        logger.warning("CV document rejected: %.1fMB exceeds %s bytes", size_mb, max_size_bytes)
        return ExtractionIssue(
            kind=ExtractionErrorKind.FILE_TOO_LARGE,
            message=f"File size {size_mb:.1f}MB exceeds the {max_size_bytes} byte limit",
        )
    extension = None
    if document.file_name and "." in document.file_name:
        extension = document.file_name.rsplit(".", 1)[1]
    if not (
        normalize_document_type(document.mime_type) in SUPPORTED_DOCUMENT_TYPES
        or normalize_document_type(extension) in SUPPORTED_DOCUMENT_TYPES
    ):
        logger.warning("CV document rejected: unsupported type %s", document.mime_type)
        return ExtractionIssue(
            kind=ExtractionErrorKind.FORMAT_NOT_SUPPORTED,
            message=f"Unsupported document type: {document.mime_type}",
        )
    return None


class _ExtractionRun:
    """
    Mutable state of one extraction. The run is a sequence of small stages: one per
    category, plus one per blank-line block of the experience and education sections.
    The sync and async entry points only differ in how they step through the stages.
    """

    def __init__(self, text: str, library: PatternLibrary, fingerprint: Optional[str]) -> None:
        self.raw_text = text or ""
        self.library = library
        self.fingerprint = fingerprint
        self.text = ""
        self.sections: List[Section] = []
        self.personal_info = PersonalInfo()
        self.work_experience: List[WorkExperience] = []
        self.education: List[Education] = []
        self.skills: List[Skill] = []
        self.confidence: Dict[str, float] = {c: 0.0 for c in CATEGORIES}
        self.field_confidence: Dict[str, float] = {}
        self.errors: List[ExtractionIssue] = []
        self.incomplete = False
        self.failed: Set[str] = set()

    def stages(self) -> Iterator[Stage]:
        """Lazily: block stages depend on the sections found by the first stage."""
        yield None, self._prepare
        yield "personal_info", self._personal_info
        yield from self._entry_stages("work_experience", "experience", parse_experience_block, self._finish_work)
        yield from self._entry_stages("education", "education", parse_education_block, self._finish_education)
        yield "skills", self._skills

    def _entry_stages(self, category: str, kind: str, parse_block, finish) -> Iterator[Stage]:
        found: list = []
        for block in section_blocks(sections_of(self.sections, kind)):
            yield category, partial(self._parse_block, parse_block, block, found)
        yield category, partial(finish, found)

    def _parse_block(self, parse_block, block: List[str], found: list) -> None:
        found.extend(parse_block(block, self.library))

    def _prepare(self) -> None:
        self.text = normalize_text(self.raw_text)
        if len(self.text) < MIN_CV_TEXT_LENGTH or len(self.text.split()) < MIN_CV_WORD_COUNT:
            self.add_issue(
                ExtractionErrorKind.INSUFFICIENT_DATA,
                message=f"CV text too short ({len(self.text)} chars, {len(self.text.split())} words)",
            )
        self.sections = segment(self.text, self.library) if self.text else []

    def _personal_info(self) -> None:
        self.personal_info, field_confidence = extract_personal_info(self.sections, self.text, self.library)
        self.field_confidence.update(field_confidence)
        self.confidence["personal_info"] = personal_info_confidence(field_confidence)

    def _finish_work(self, found: List[WorkExperience]) -> None:
        self.work_experience = sort_newest_first(found)
        self.confidence["work_experience"] = entries_confidence(e.confidence for e in self.work_experience)

    def _finish_education(self, found: List[Education]) -> None:
        self.education = sort_education(found)
        self.confidence["education"] = entries_confidence(e.confidence for e in self.education)

    def _skills(self) -> None:
        self.skills, scores = extract_skills(self.sections, self.library)
        self.confidence["skills"] = skills_confidence(scores)

    def add_issue(self, kind: ExtractionErrorKind, category: Optional[str] = None, message: str = "") -> None:
        self.errors.append(ExtractionIssue(kind=kind, category=category, message=message))

    def run_stage(self, category: Optional[str], stage: Callable[[], None]) -> None:
        """
        Run one stage. A failing category is recorded once and left empty; its later
        stages are skipped and the other categories still run.
        """
        if category is None:
            stage()
            return
        if category in self.failed:
            return
        try:
            stage()
        except Exception as e:
            logger.exception("CV extraction of %s failed: %s", category, e)
            self.failed.add(category)
            self.confidence[category] = 0.0
            self.add_issue(ExtractionErrorKind.EXTRACTION_FAILED, category=category, message=str(e))

    def finish(self) -> ExtractedProfileData:
        if (
            not self.incomplete
            and not any(self.confidence.values())
            and not any(i.kind == ExtractionErrorKind.INSUFFICIENT_DATA for i in self.errors)
        ):
            self.add_issue(ExtractionErrorKind.INSUFFICIENT_DATA, message="No recognizable CV structure")
        result = ExtractedProfileData(
            personal_info=self.personal_info,
            work_experience=self.work_experience,
            education=self.education,
            skills=self.skills,
            confidence=self.confidence,
            field_confidence=self.field_confidence,
            sections_found=[s.kind for s in self.sections if s.kind != HEADER_ZONE],
            errors=self.errors,
            incomplete=self.incomplete,
            fingerprint=self.fingerprint,
        )
        logger.info(
            "CV extraction finished: sections=%s experience=%s education=%s skills=%s errors=%s incomplete=%s",
            len(result.sections_found),
            len(result.work_experience),
            len(result.education),
            len(result.skills),
            [i.kind.value for i in result.errors],
            result.incomplete,
        )
        return result


def _unsupported(document_type: str, fingerprint: Optional[str]) -> ExtractedProfileData:
    logger.warning("Unsupported document type for CV extraction: %s", document_type)
    return ExtractedProfileData(
        errors=[ExtractionIssue(
            kind=ExtractionErrorKind.FORMAT_NOT_SUPPORTED,
            message=f"Unsupported document type: {document_type}",
        )],
        fingerprint=fingerprint,
    )


def extract(
    text: str,
    pattern_library: Optional[PatternLibrary] = None,
    document_type: Optional[str] = None,
    fingerprint: Optional[str] = None,
) -> ExtractedProfileData:
    """
    Extract personal info, work experience, education and skills from CV text.
    Deterministic: identical input gives an equal result. Never raises for bad
    input; problems are reported in `errors`.
    """
    if not is_supported_document_type(document_type):
        return _unsupported(document_type, fingerprint)
    run = _ExtractionRun(text, pattern_library or get_pattern_library(), fingerprint)
    for category, stage in run.stages():
        run.run_stage(category, stage)
    return run.finish()


async def extract_async(
    text: str,
    pattern_library: Optional[PatternLibrary] = None,
    document_type: Optional[str] = None,
    fingerprint: Optional[str] = None,
    timeout_seconds: float = EXTRACTION_TIMEOUT_SECONDS,
    max_chunks: int = EXTRACTION_MAX_CHUNKS,
) -> ExtractedProfileData:
    """
    Same result as extract(), one stage per chunk with a yield to the event loop
    between chunks. When the wall-clock or chunk budget runs out, the category in
    progress and the remaining ones are left empty and the result is flagged
    incomplete with a TIMEOUT issue. Cancellation propagates as asyncio.CancelledError.
    """
    if not is_supported_document_type(document_type):
        return _unsupported(document_type, fingerprint)
    run = _ExtractionRun(text, pattern_library or get_pattern_library(), fingerprint)
    started = time.monotonic()
    for chunk, (category, stage) in enumerate(run.stages()):
        elapsed = time.monotonic() - started
        if chunk >= max_chunks or elapsed > timeout_seconds:
            run.incomplete = True
            run.add_issue(
                ExtractionErrorKind.TIMEOUT,
                category=category,
                message=f"Budget exhausted after {chunk} chunks in {elapsed:.2f}s",
            )
            logger.warning("CV extraction stopped early at %s after %.2fs", category or "normalization", elapsed)
            break
        run.run_stage(category, stage)
        await asyncio.sleep(0)
    return run.finish()
