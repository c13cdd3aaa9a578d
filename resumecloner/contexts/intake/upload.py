"""
Upload validation.

Uploads are checked for media type and size before anything is sent to the
extraction service.
"""

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from resumecloner.contexts.intake.exceptions import FileTooLargeError, UnsupportedFormatError

MAX_UPLOAD_BYTES = 20 * 1024 * 1024
PDF_MEDIA_TYPE = "application/pdf"


@dataclass(frozen=True)
class Upload:
    """An uploaded resume file: raw bytes plus its declared media type."""

    payload: bytes
    media_type: str
    filename: str = ""

    @property
    def size(self) -> int:
        return len(self.payload)


def is_supported_media_type(media_type: str) -> bool:
    """Any image type, or PDF."""
    media_type = (media_type or "").lower()
    return media_type.startswith("image/") or media_type == PDF_MEDIA_TYPE


def validate_upload(upload: Upload, max_bytes: int = MAX_UPLOAD_BYTES) -> Upload:
    """
    Reject uploads the extraction service cannot take.

    Raises:
        UnsupportedFormatError: If the media type is neither image/* nor PDF
        FileTooLargeError: If the payload exceeds max_bytes
    """
    if not is_supported_media_type(upload.media_type):
        raise UnsupportedFormatError(upload.media_type)
    if upload.size > max_bytes:
        raise FileTooLargeError(upload.size, max_bytes)
    return upload


def read_upload(path: Path) -> Upload:
    """Load a file from disk as an Upload, guessing its media type from the suffix."""
    path = Path(path)
    media_type, _ = mimetypes.guess_type(path.name)
    return Upload(payload=path.read_bytes(), media_type=media_type or "application/octet-stream", filename=path.name)
