"""
Rendering Context

Responsibilities:
- Lays a resume document out into a positioned visual tree (RenderedSurface)
- Renders the HTML preview of a surface
- Captures a surface to a raster image and paginates it into an A4 PDF
- Rebuilds the document as an editable DOCX from the same layout plan

Owns: Visual tree, raster capture, PDF pagination, DOCX generation
Never: Edits the document or decides template/layout rules
"""

from resumecloner.contexts.rendering.docx_generator import build_docx, export_docx
from resumecloner.contexts.rendering.exceptions import DocxExportError, RenderCaptureError
from resumecloner.contexts.rendering.layout_engine import LayoutEngine
from resumecloner.contexts.rendering.paginator import PagePlacement, export_pdf, paginate
from resumecloner.contexts.rendering.preview import export_preview, render_preview_html
from resumecloner.contexts.rendering.rasterizer import capture_surface, presentation_stripped
from resumecloner.contexts.rendering.visual_tree import RenderedSurface

__all__ = [
    # Layout
    "LayoutEngine",
    "RenderedSurface",
    # Preview
    "render_preview_html",
    "export_preview",
    # PDF
    "capture_surface",
    "presentation_stripped",
    "paginate",
    "PagePlacement",
    "export_pdf",
    "RenderCaptureError",
    # DOCX
    "build_docx",
    "export_docx",
    "DocxExportError",
]
