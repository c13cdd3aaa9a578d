"""
Raster Paginator

Slices a captured full-height image into A4 pages and writes the PDF with
reportlab. Every page draws the same full image shifted up by the height
already consumed, so page breaks are hard cuts at fixed intervals.

Examples:
    >>> len(paginate(794, 1123))      # exactly one page
    1
    >>> len(paginate(794, 1123 * 2.3))
    3
"""

import math
import os
import time
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from resumecloner.contexts.rendering.exceptions import RenderCaptureError
from resumecloner.contexts.rendering.logger import _log_error, log_export_result, log_export_start
from resumecloner.contexts.rendering.rasterizer import capture_surface
from resumecloner.contexts.rendering.visual_tree import RenderedSurface
from resumecloner.contexts.templating.template_registry import TemplateRegistry
from resumecloner.utils.pdf_processing import page_count
from resumecloner.utils.text_processing import export_basename

load_dotenv()

PDF_JPEG_QUALITY = int(os.getenv("PDF_JPEG_QUALITY", "95"))

A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0

# Up to 1.05 page heights still export as a single page
SINGLE_PAGE_TOLERANCE = 0.05

# Rounding slack when the image is an exact multiple of the page height
PAGE_EPSILON_MM = 0.01


@dataclass(frozen=True)
class PagePlacement:
    """
    Where the full image is drawn on one page.

    Attributes:
        page_index: 0-based page number
        offset_mm: Vertical offset of the image top from the page top (0, -297, ...)
        height_mm: Drawn image height (image width always spans the page)
    """

    page_index: int
    offset_mm: float
    height_mm: float


def paginate(width: float, height: float, tolerance: float = SINGLE_PAGE_TOLERANCE) -> List[PagePlacement]:
    """
    Compute page placements for an image of width x height (any unit).

    The image is scaled to A4 width. Within tolerance of one page height it is
    stretched onto exactly one page; otherwise it is drawn once per page at
    offsets 0, -297, -594 mm until its full height is covered.

    Raises:
        ValueError: If width or height is not positive
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image size must be positive, got {width}x{height}")

    image_height_mm = height * A4_WIDTH_MM / width
    if image_height_mm <= A4_HEIGHT_MM * (1 + tolerance) + PAGE_EPSILON_MM:
        return [PagePlacement(0, 0.0, A4_HEIGHT_MM)]

    pages = max(1, math.ceil((image_height_mm - PAGE_EPSILON_MM) / A4_HEIGHT_MM))
    return [PagePlacement(index, -index * A4_HEIGHT_MM, image_height_mm) for index in range(pages)]


def write_pdf(image: Image.Image, placements: List[PagePlacement], quality: int = None) -> bytes:
    """
    Build an A4 PDF drawing image once per placement.

    The image is JPEG-encoded once and shared by every page.
    """
    if quality is None:
        quality = PDF_JPEG_QUALITY

    jpeg = BytesIO()
    image.convert("RGB").save(jpeg, format="JPEG", quality=quality)
    jpeg.seek(0)
    reader = ImageReader(jpeg)

    buffer = BytesIO()
    page_width, page_height = A4
    pdf = canvas.Canvas(buffer, pagesize=A4)
    for placement in placements:
        drawn_height = placement.height_mm * mm
        bottom = page_height - placement.offset_mm * mm - drawn_height
        pdf.drawImage(reader, 0, bottom, width=page_width, height=drawn_height)
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def pdf_filename(full_name: str) -> str:
    """<Full_Name>.pdf, or Resume.pdf for a blank name."""
    return f"{export_basename(full_name)}.pdf"


def export_pdf(
    surface: RenderedSurface,
    output_dir: Path,
    full_name: str = None,
    scale: float = None,
    registry: TemplateRegistry = None,
) -> Path:
    """
    Capture, paginate and write the surface as <Full_Name>.pdf.

    The file is written only after the whole PDF has been built.

    Args:
        surface: Laid-out surface
        output_dir: Directory for the PDF
        full_name: Name used for the file (defaults to the surface's name)
        scale: Raster upscale factor
        registry: Registry providing the surface's font option

    Returns:
        Path to the written PDF

    Raises:
        RenderCaptureError: If capture, encoding or writing the file fails
    """
    start_time = time.time()
    name = surface.full_name if full_name is None else full_name
    output_dir = Path(output_dir)
    log_export_start("pdf", name or "(unnamed)", surface.template_id, output_dir)

    image = capture_surface(surface, scale=scale, registry=registry)
    placements = paginate(image.width, image.height)
    try:
        data = write_pdf(image, placements)
    except Exception as e:
        _log_error(f"PDF encoding failed: {e}")
        raise RenderCaptureError(f"Could not encode PDF: {e}") from e

    output_path = output_dir / pdf_filename(name)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)
    except OSError as e:
        _log_error(f"PDF write failed: {e}")
        raise RenderCaptureError(f"Could not write PDF to {output_path}: {e}") from e

    log_export_result("pdf", output_path, time.time() - start_time, pages=page_count(data))
    return output_path
