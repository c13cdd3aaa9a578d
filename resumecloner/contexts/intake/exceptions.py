"""Custom exceptions for intake context."""


class UnsupportedFormatError(ValueError):
    """
    Exception raised when an upload is neither an image nor a PDF.

    Attributes:
        media_type: The declared media type of the upload
        user_message: Message suitable for display to the user
    """

    user_message = "Unsupported file format. Please upload an Image or PDF."

    def __init__(self, media_type: str):
        self.media_type = media_type
        self.message = f"Unsupported media type: {media_type!r}"
        super().__init__(self.message)


class FileTooLargeError(ValueError):
    """
    Exception raised when an upload exceeds the size cap.

    Attributes:
        size: Upload size in bytes
        limit: Maximum accepted size in bytes
        user_message: Message suitable for display to the user
    """

    user_message = "File size too large. Please upload a file under 20MB."

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        self.message = f"Upload is {size} bytes, limit is {limit} bytes"
        super().__init__(self.message)


class ExtractionFailureError(RuntimeError):
    """
    Exception raised when the extraction service fails or returns unparseable content.

    Attributes:
        message: Error description
        raw_text: Raw service response, when one was received
        user_message: Message suitable for display to the user
    """

    user_message = "Failed to analyze resume. Please try again."

    def __init__(self, message: str, raw_text: str = None):
        self.message = message
        self.raw_text = raw_text
        super().__init__(message)
