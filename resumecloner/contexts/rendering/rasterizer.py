"""
Raster capture of a RenderedSurface with Pillow.

capture_surface() strips the surface's on-screen decoration for the duration
of the capture (presentation_stripped) and draws every node at an upscale
factor for print sharpness. Any failure surfaces as RenderCaptureError, and
the decoration is restored either way.
"""

import math
import os
from contextlib import contextmanager

from dotenv import load_dotenv
from PIL import Image, ImageDraw

from resumecloner.contexts.rendering.exceptions import RenderCaptureError
from resumecloner.contexts.rendering.fonts import FontMeasurer
from resumecloner.contexts.rendering.logger import _log_debug, _log_error
from resumecloner.contexts.rendering.visual_tree import NodeKind, RenderedSurface, VisualNode
from resumecloner.contexts.templating.template_registry import TemplateRegistry, get_registry
from resumecloner.utils.images import cover_crop, load_image

load_dotenv()

RASTER_SCALE = float(os.getenv("RASTER_SCALE", "2.5"))

# Values that mean "no decoration"
STRIPPED_PRESENTATION = {
    "shadow": "none",
    "margin": "0",
    "transform": "none",
}
SHADOW_PADDING = 24
SHADOW_COLOR = "#d1d5db"


@contextmanager
def presentation_stripped(surface: RenderedSurface):
    """
    Temporarily clear the surface's shadow, margin and transform.

    The prior values are restored on exit, whether the body succeeded or raised.
    """
    saved = dict(surface.presentation)
    surface.presentation.update(STRIPPED_PRESENTATION)
    try:
        yield surface
    finally:
        surface.presentation.clear()
        surface.presentation.update(saved)


def _is_decorated(surface: RenderedSurface) -> bool:
    shadow = surface.presentation.get("shadow", "none")
    return bool(shadow) and shadow != "none"


def _box(node: VisualNode, scale: float):
    left, top = node.x * scale, node.y * scale
    right = max(left, (node.x + node.width) * scale - 1)
    bottom = max(top, (node.y + node.height) * scale - 1)
    return [left, top, right, bottom]


class SurfaceRasterizer:
    """Draws surface nodes onto a Pillow image."""

    def __init__(self, registry: TemplateRegistry = None):
        self.registry = registry or get_registry()

    def _draw_rect(self, draw: ImageDraw.ImageDraw, node: VisualNode, scale: float) -> None:
        if node.width <= 0 or node.height <= 0:
            return
        outline = node.border_color if node.border_width else None
        draw.rounded_rectangle(
            _box(node, scale),
            radius=node.radius * scale,
            fill=node.fill,
            outline=outline,
            width=max(1, round(node.border_width * scale)) if outline else 0,
        )

    def _draw_text(self, draw: ImageDraw.ImageDraw, node: VisualNode, measurer: FontMeasurer, scale: float) -> None:
        cursor = node.x * scale
        baseline = (node.y + node.baseline) * scale
        for span in node.spans:
            font = measurer.font(span.size, span.bold, span.italic, scale=scale)
            draw.text((cursor, baseline), span.text, font=font, fill=span.color, anchor="ls")
            cursor += font.getlength(span.text)

    def _draw_image(self, canvas: Image.Image, draw: ImageDraw.ImageDraw, node: VisualNode,
                    measurer: FontMeasurer, scale: float) -> None:
        size = max(1, round(node.width * scale))
        left, top = round(node.x * scale), round(node.y * scale)
        radius = node.radius * scale

        picture = load_image(node.image_uri)
        if picture is not None:
            mask = Image.new("L", (size, size), 0)
            ImageDraw.Draw(mask).rounded_rectangle([0, 0, size - 1, size - 1], radius=radius, fill=255)
            canvas.paste(cover_crop(picture, size, size), (left, top), mask)
            return

        draw.rounded_rectangle(
            [left, top, left + size - 1, top + size - 1],
            radius=radius, fill=node.fill, outline="#e5e7eb", width=max(1, round(scale)),
        )
        if node.placeholder:
            font = measurer.font(20, bold=True, scale=scale)
            draw.text((left + size / 2, top + size / 2), node.placeholder, font=font, fill="#d1d5db", anchor="mm")

    def rasterize(self, surface: RenderedSurface, scale: float = RASTER_SCALE) -> Image.Image:
        """Draw the surface (and any decoration still applied) at scale."""
        measurer = FontMeasurer(self.registry.font_option(surface.font_id))
        size = (math.ceil(surface.width * scale), math.ceil(surface.height * scale))
        canvas = Image.new("RGB", size, surface.background)
        draw = ImageDraw.Draw(canvas)

        for node in surface.nodes:
            if node.kind == NodeKind.RECT:
                self._draw_rect(draw, node, scale)
            elif node.kind == NodeKind.TEXT:
                self._draw_text(draw, node, measurer, scale)
            elif node.kind == NodeKind.IMAGE:
                self._draw_image(canvas, draw, node, measurer, scale)
            else:
                raise ValueError(f"Unknown node kind: {node.kind!r}")

        if _is_decorated(surface):
            padding = round(SHADOW_PADDING * scale)
            framed = Image.new("RGB", (canvas.width + 2 * padding, canvas.height + 2 * padding), "#ffffff")
            ImageDraw.Draw(framed).rectangle(
                [padding // 2, padding, framed.width - padding // 2, framed.height - 1], fill=SHADOW_COLOR
            )
            framed.paste(canvas, (padding, padding))
            return framed
        return canvas


def capture_surface(
    surface: RenderedSurface,
    scale: float = None,
    registry: TemplateRegistry = None,
) -> Image.Image:
    """
    Rasterize a surface for export, without its on-screen decoration.

    Args:
        surface: Laid-out surface
        scale: Upscale factor (defaults to RASTER_SCALE)
        registry: Registry providing the surface's font option

    Returns:
        RGB image of size (width * scale, height * scale)

    Raises:
        RenderCaptureError: If drawing fails for any reason
    """
    if scale is None:
        scale = RASTER_SCALE
    if scale <= 0:
        raise RenderCaptureError(f"Raster scale must be positive, got {scale}")

    try:
        with presentation_stripped(surface):
            image = SurfaceRasterizer(registry).rasterize(surface, scale)
    except Exception as e:
        _log_error(f"Capture failed: {e}")
        raise RenderCaptureError(f"Could not capture surface: {e}") from e

    _log_debug(f"Captured {surface.width}x{surface.height}px surface at {scale}x -> {image.width}x{image.height}")
    return image
