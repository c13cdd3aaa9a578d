"""
Resume Session

Application controller owning the single current ResumeDocument and the view
state around it (home, template gallery, editor). Every failure is recovered
here, at the boundary that detects it:

- format/size rejections happen before any provider call and leave the
  session on the home view without entering the processing state
- extraction failures revert to an empty document on the home view
- draft import failures leave the document and view untouched
- export failures leave the document untouched and raise an alert
"""

from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from resumecloner.contexts.intake.exceptions import (
    ExtractionFailureError,
    FileTooLargeError,
    UnsupportedFormatError,
)
from resumecloner.contexts.intake.extraction import ResumeExtractor
from resumecloner.contexts.intake.logger import _log_error, _log_info, _log_warning
from resumecloner.contexts.intake.upload import Upload, validate_upload
from resumecloner.contexts.rendering.docx_generator import export_docx
from resumecloner.contexts.rendering.exceptions import DocxExportError, RenderCaptureError
from resumecloner.contexts.rendering.layout_engine import LayoutEngine
from resumecloner.contexts.rendering.paginator import export_pdf
from resumecloner.contexts.rendering.preview import render_preview_html
from resumecloner.contexts.rendering.visual_tree import RenderedSurface
from resumecloner.contexts.templating.draft import deserialize, export_draft
from resumecloner.contexts.templating.exceptions import InvalidDraftFormatError
from resumecloner.contexts.templating.resume_data_structure import (
    ResumeDocument,
    document_for_template,
    empty_document,
)
from resumecloner.contexts.templating.template_registry import TemplateRegistry, get_registry
from resumecloner.utils.llm import ExtractionProvider

BUSY_MESSAGE = "A resume is already being processed."


class View(str, Enum):
    HOME = "home"
    TEMPLATES = "templates"
    EDITOR = "editor"


class ResumeSession:
    """
    Holds the current document and view state for one user session.

    Attributes:
        document: Current resume document (replaced, never mutated)
        view: Current view
        processing: True while an extraction call is in flight
        error: User-facing message from the last failed upload or import
        alert: User-facing message from the last failed export
    """

    def __init__(
        self,
        provider: ExtractionProvider = None,
        registry: TemplateRegistry = None,
        extractor: ResumeExtractor = None,
    ):
        self.registry = registry or get_registry()
        self.extractor = extractor or ResumeExtractor(provider=provider, registry=self.registry)
        self.layout_engine = LayoutEngine(self.registry)

        self.document: ResumeDocument = empty_document()
        self.view = View.HOME
        self.processing = False
        self.error: Optional[str] = None
        self.alert: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.view == View.EDITOR

    def reset(self) -> None:
        """Back to the home view with an empty document."""
        self.document = empty_document()
        self.view = View.HOME
        self.processing = False
        self.error = None
        self.alert = None

    # Intake

    def upload(self, upload: Upload) -> bool:
        """
        Extract a resume from an uploaded image or PDF and open it in the editor.

        Returns:
            True when the editor now holds the extracted document
        """
        if self.processing:
            _log_warning("Upload rejected: extraction already in progress")
            self.error = BUSY_MESSAGE
            return False

        try:
            validate_upload(upload)
        except (UnsupportedFormatError, FileTooLargeError) as e:
            _log_warning(f"Upload rejected: {e}")
            self.error = e.user_message
            self.view = View.HOME
            return False

        self.error = None
        self.processing = True
        try:
            self.document = self.extractor.extract(upload)
        except ExtractionFailureError as e:
            _log_error(f"Extraction aborted: {e}")
            self.document = empty_document()
            self.view = View.HOME
            self.error = e.user_message
            return False
        finally:
            self.processing = False

        self.view = View.EDITOR
        return True

    def import_draft(self, text: str) -> bool:
        """
        Replace the document with a JSON draft and open the editor.

        A failed import keeps the current document and view.
        """
        if self.processing:
            _log_warning("Draft import rejected: extraction in progress")
            self.error = BUSY_MESSAGE
            return False

        try:
            document = deserialize(text, registry=self.registry)
        except InvalidDraftFormatError as e:
            _log_error(f"Draft import failed: {e}")
            self.error = e.user_message
            return False

        self.document = document
        self.error = None
        self.view = View.EDITOR
        _log_info(f"Draft imported: {document.personal_info.full_name or '(unnamed)'}")
        return True

    # Templates

    def browse_templates(self) -> None:
        self.view = View.TEMPLATES

    def select_template(self, template_id: str) -> None:
        """Start a fresh document styled for the chosen template."""
        self.document = document_for_template(template_id, registry=self.registry)
        self.error = None
        self.view = View.EDITOR

    # Editing

    def edit(self, operation: Callable[..., ResumeDocument], *args, **kwargs) -> ResumeDocument:
        """
        Apply an editing operation (see templating.editing) to the current document.

        Example:
            session.edit(update_personal_info, full_name="Jane Doe")
        """
        self.document = operation(self.document, *args, **kwargs)
        return self.document

    # Output

    def surface(self) -> RenderedSurface:
        return self.layout_engine.layout(self.document)

    def preview_html(self) -> str:
        return render_preview_html(self.surface())

    def export_draft(self, output_dir: Path) -> Path:
        return export_draft(self.document, output_dir)

    def export_pdf(self, output_dir: Path, scale: float = None) -> Optional[Path]:
        """Write the PDF export; on capture or write failure set alert and return None."""
        self.alert = None
        try:
            return export_pdf(self.surface(), output_dir, scale=scale, registry=self.registry)
        except RenderCaptureError as e:
            _log_error(f"PDF export failed: {e}")
            self.alert = e.user_message
            return None

    def export_docx(self, output_dir: Path) -> Optional[Path]:
        """Write the DOCX export; on failure set alert and return None."""
        self.alert = None
        try:
            return export_docx(self.document, output_dir, registry=self.registry)
        except DocxExportError as e:
            _log_error(f"DOCX export failed: {e}")
            self.alert = e.user_message
            return None
