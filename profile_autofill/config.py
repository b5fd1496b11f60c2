"""Configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env

# Logging
LOG_LEVEL: str = os.getenv("AUTOFILL_LOG_LEVEL", "INFO").upper()

# Confidence thresholds
ACCEPTANCE_THRESHOLD: float = float(os.getenv("AUTOFILL_ACCEPTANCE_THRESHOLD", "0.5"))
FOUND_THRESHOLD: float = float(os.getenv("AUTOFILL_FOUND_THRESHOLD", "0.5"))

# CV text limits
MIN_CV_TEXT_LENGTH: int = int(os.getenv("AUTOFILL_MIN_CV_TEXT_LENGTH", "50"))
MIN_CV_WORD_COUNT: int = int(os.getenv("AUTOFILL_MIN_CV_WORD_COUNT", "10"))
MAX_CV_TEXT_CHARS: int = int(os.getenv("AUTOFILL_MAX_CV_TEXT_CHARS", "50000"))
MAX_CV_FILE_SIZE_BYTES: int = int(os.getenv("AUTOFILL_MAX_CV_FILE_SIZE_BYTES", str(5 * 1024 * 1024)))

# Chunked extraction budget
EXTRACTION_TIMEOUT_SECONDS: float = float(os.getenv("AUTOFILL_EXTRACTION_TIMEOUT_SECONDS", "15.0"))
EXTRACTION_MAX_CHUNKS: int = int(os.getenv("AUTOFILL_EXTRACTION_MAX_CHUNKS", "500"))

# Merge limits
MAX_MERGED_SKILLS: int = int(os.getenv("AUTOFILL_MAX_MERGED_SKILLS", "50"))

# Document types the extractor has patterns for (extension or MIME type)
SUPPORTED_DOCUMENT_TYPES: frozenset = frozenset({
    "pdf",
    "docx",
    "doc",
    "txt",
    "text",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
})

# File extension -> MIME type, used when an accept attribute lists extensions
EXTENSION_MIME_TYPES: dict = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
    ".rtf": "application/rtf",
    ".odt": "application/vnd.oasis.opendocument.text",
}
