"""
HTML preview of a RenderedSurface.

Renders every node as an absolutely positioned element through a Jinja2
template, carrying the surface's presentation decoration (shadow, margin,
transform) on the page container.
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from resumecloner.contexts.rendering.logger import _log_info
from resumecloner.contexts.rendering.visual_tree import NodeKind, RenderedSurface
from resumecloner.utils.text_processing import export_basename

TEMPLATES_PATH = Path(__file__).parent / "templates"
PREVIEW_TEMPLATE = "preview.html.jinja"


def _px(value: float) -> str:
    return f"{value:.2f}px".replace(".00px", "px")


class PreviewRenderer:
    """
    Jinja2-backed HTML renderer for laid-out surfaces.
    """

    def __init__(self, templates_path: Path = None):
        if templates_path is None:
            templates_path = TEMPLATES_PATH

        self.env = Environment(
            loader=FileSystemLoader(str(templates_path)),
            autoescape=select_autoescape(["html", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["px"] = _px

    def render(self, surface: RenderedSurface, title: str = None) -> str:
        template = self.env.get_template(PREVIEW_TEMPLATE)
        return template.render(
            surface=surface,
            title=title or surface.full_name or "Resume",
            NodeKind=NodeKind,
        )


def render_preview_html(surface: RenderedSurface, title: str = None) -> str:
    """Standalone HTML document showing the surface as it would appear on screen."""
    return PreviewRenderer().render(surface, title=title)


def export_preview(surface: RenderedSurface, output_dir: Path) -> Path:
    """Write <Full_Name>_Preview.html into output_dir."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{export_basename(surface.full_name)}_Preview.html"
    path.write_text(render_preview_html(surface), encoding="utf-8")
    _log_info(f"Preview written: {path}")
    return path
