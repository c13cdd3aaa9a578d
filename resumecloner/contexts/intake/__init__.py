"""
Intake Context

Responsibilities:
- Validates uploaded resume images and PDFs
- Sends uploads to the extraction provider and maps results onto ResumeDocument
- Runs the session controller (current document, view state, error recovery)

Owns: Upload rules, extraction prompt and mapping, session state
Never: Decides layout or draws output
"""

from resumecloner.contexts.intake.exceptions import (
    ExtractionFailureError,
    FileTooLargeError,
    UnsupportedFormatError,
)
from resumecloner.contexts.intake.extraction import (
    ResumeExtractor,
    extract_json_payload,
    map_extraction_result,
)
from resumecloner.contexts.intake.session import ResumeSession, View
from resumecloner.contexts.intake.upload import MAX_UPLOAD_BYTES, Upload, read_upload, validate_upload

__all__ = [
    # Uploads
    "Upload",
    "read_upload",
    "validate_upload",
    "MAX_UPLOAD_BYTES",
    # Extraction
    "ResumeExtractor",
    "extract_json_payload",
    "map_extraction_result",
    # Session
    "ResumeSession",
    "View",
    # Errors
    "UnsupportedFormatError",
    "FileTooLargeError",
    "ExtractionFailureError",
]
