"""One in-flight extraction per document, cached per fingerprint, invalidated on a new CV."""

import asyncio
import hashlib
from typing import Dict, Optional, Union

from profile_autofill.cv_pipeline.cv_extractor import extract_async
from profile_autofill.schemas.profile import ExtractedProfileData
from profile_autofill.services.pattern_library import PatternLibrary, get_pattern_library
from profile_autofill.utils.logger import get_logger

logger = get_logger(__name__)


def document_fingerprint(content: Union[bytes, str]) -> str:
    """SHA-256 hex digest of the document bytes (text is hashed as UTF-8)."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


class ExtractionCoordinator:
    """
    Coordinates extraction runs for the current CV.

    - A second request for a fingerprint already being extracted awaits the same task.
    - Finished, complete results are cached per fingerprint.
    - Registering a new fingerprint cancels and forgets work tied to any other one.
    - Abandoned runs cache nothing; their callers get None.
    """

    def __init__(self, pattern_library: Optional[PatternLibrary] = None, extractor=extract_async) -> None:
        self._library = pattern_library or get_pattern_library()
        self._extractor = extractor
        self._current: Optional[str] = None
        self._in_flight: Dict[str, asyncio.Task] = {}
        self._results: Dict[str, ExtractedProfileData] = {}

    @property
    def current_fingerprint(self) -> Optional[str]:
        return self._current

    def is_current(self, fingerprint: Optional[str]) -> bool:
        return fingerprint is not None and fingerprint == self._current

    def is_in_flight(self, fingerprint: str) -> bool:
        return fingerprint in self._in_flight

    def cached(self, fingerprint: str) -> Optional[ExtractedProfileData]:
        return self._results.get(fingerprint)

    def register_document(self, fingerprint: str) -> None:
        """Make fingerprint the current document, dropping everything tied to other documents."""
        if fingerprint == self._current:
            return
        for other in [fp for fp in self._in_flight if fp != fingerprint]:
            logger.info("Cancelling extraction for superseded document %s", other[:12])
            self._in_flight.pop(other).cancel()
        for other in [fp for fp in self._results if fp != fingerprint]:
            del self._results[other]
        self._current = fingerprint

    def abandon(self, fingerprint: Optional[str] = None) -> None:
        """Cancel in-flight work for one fingerprint, or all of it (host context torn down)."""
        targets = [fingerprint] if fingerprint is not None else list(self._in_flight)
        for fp in targets:
            task = self._in_flight.pop(fp, None)
            if task is not None:
                logger.info("Abandoning extraction for document %s", fp[:12])
                task.cancel()

    async def _run(self, text: str, fingerprint: str, document_type: Optional[str]) -> ExtractedProfileData:
        task = asyncio.current_task()
        try:
            result = await self._extractor(
                text,
                pattern_library=self._library,
                document_type=document_type,
                fingerprint=fingerprint,
            )
        finally:
            if self._in_flight.get(fingerprint) is task:
                del self._in_flight[fingerprint]
        if not result.incomplete and self.is_current(fingerprint):
            self._results[fingerprint] = result
        return result

    async def extract(
        self,
        text: str,
        fingerprint: Optional[str] = None,
        document_type: Optional[str] = None,
    ) -> Optional[ExtractedProfileData]:
        """
        Extract text as the current document. Returns the cached result when there is one,
        joins an in-flight run for the same fingerprint otherwise, and returns None when
        the run is cancelled by abandon() or by a newer document.
        """
        fingerprint = fingerprint or document_fingerprint(text)
        self.register_document(fingerprint)

        cached = self._results.get(fingerprint)
        if cached is not None:
            return cached

        task = self._in_flight.get(fingerprint)
        if task is None:
            task = asyncio.ensure_future(self._run(text, fingerprint, document_type))
            self._in_flight[fingerprint] = task
        else:
            logger.debug("Joining in-flight extraction for document %s", fingerprint[:12])

        # A cancelled waiter must not cancel the shared run
        await asyncio.wait({task})
        if task.cancelled():
            return None
        return task.result()
