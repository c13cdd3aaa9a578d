"""
Positioned visual tree produced by the layout engine.

A RenderedSurface is a flat, paint-ordered list of absolutely positioned nodes
at A4 width (794 px at 96 DPI). It is the source for the HTML preview and for
raster capture. Its presentation dict holds the on-screen decoration (shadow,
margin, transform) that capture strips temporarily.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

A4_WIDTH_PX = 794
A4_HEIGHT_PX = 1123

DEFAULT_PRESENTATION = {
    "shadow": "0 25px 50px -12px rgba(0, 0, 0, 0.25)",
    "margin": "0 auto 80px",
    "transform": "scale(1)",
}


class NodeKind(str, Enum):
    RECT = "rect"
    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class TextSpan:
    """Uniformly styled text; size in px."""

    text: str
    size: float
    color: str
    bold: bool = False
    italic: bool = False


@dataclass(frozen=True)
class VisualNode:
    """
    One absolutely positioned node.

    RECT nodes carry fill/border; TEXT nodes one laid-out line of spans whose
    baseline sits at y + baseline; IMAGE nodes a data URI (or a placeholder
    letter when the URI is empty).
    """

    kind: NodeKind
    x: float
    y: float
    width: float
    height: float
    fill: Optional[str] = None
    border_color: Optional[str] = None
    border_width: float = 0
    radius: float = 0
    spans: Tuple[TextSpan, ...] = ()
    baseline: float = 0
    image_uri: str = ""
    placeholder: str = ""
    role: str = ""

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class RenderedSurface:
    """
    Laid-out resume, ready for preview or capture.

    Attributes:
        width: Surface width in px (A4 width)
        height: Content-determined height in px (at least one A4 page)
        background: Page background color
        nodes: Nodes in paint order
        font_id: Font option used for text
        font_css: CSS font stack for HTML output
        template_id: Template the surface was laid out with
        full_name: Person's name (export file naming)
        presentation: On-screen decoration; mutated only by rasterizer.presentation_stripped
    """

    width: int
    height: int
    background: str
    nodes: List[VisualNode]
    font_id: str
    font_css: str = ""
    template_id: str = ""
    full_name: str = ""
    presentation: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PRESENTATION))

    @property
    def page_ratio(self) -> float:
        """Content height in A4 page heights at this width."""
        return (self.height / self.width) / (A4_HEIGHT_PX / A4_WIDTH_PX)

    def text_nodes(self) -> List[VisualNode]:
        return [node for node in self.nodes if node.kind == NodeKind.TEXT]

    def find_text(self, needle: str) -> List[VisualNode]:
        """Text nodes whose line contains needle."""
        return [node for node in self.text_nodes() if needle in node.text]

    def nodes_with_role(self, role: str) -> List[VisualNode]:
        return [node for node in self.nodes if node.role == role]
