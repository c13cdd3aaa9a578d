"""Custom exceptions for templating context."""

from typing import List, Optional


class TemplateNotFoundError(KeyError):
    """
    Exception raised when a template id does not resolve in the catalog.

    Attributes:
        template_id: The id that was looked up
        available: Ids present in the catalog
    """

    def __init__(self, template_id: str, available: Optional[List[str]] = None):
        self.template_id = template_id
        self.available = available or []

        message = f"Template not found: {template_id!r}"
        if self.available:
            message += f". Available templates: {', '.join(self.available)}"
        self.message = message

        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class InvalidDraftFormatError(ValueError):
    """
    Exception raised when an imported draft is not a resume document.

    A draft must be a JSON object with a 'personalInfo' object and a 'sections' list.

    Attributes:
        message: Error description
        user_message: Message suitable for display to the user
    """

    user_message = "Could not load draft. Please ensure it's a valid ResumeCloner JSON file."

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
