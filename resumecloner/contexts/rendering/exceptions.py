"""Custom exceptions for rendering context."""


class RenderCaptureError(RuntimeError):
    """
    Exception raised when rasterizing a rendered surface, encoding the PDF or writing it fails.

    No partial output is written when this is raised.

    Attributes:
        message: Error description
        user_message: Message suitable for display to the user
    """

    user_message = "PDF export failed. Please try again."

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DocxExportError(RuntimeError):
    """
    Exception raised when building or saving the DOCX flow document fails.

    Attributes:
        message: Error description
        user_message: Message suitable for display to the user
    """

    user_message = "Failed to generate Word document. Please try again."

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
