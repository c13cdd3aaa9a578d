"""
Layout Engine

Maps a ResumeDocument and its template onto a positioned visual tree
(RenderedSurface) at A4 width with content-determined height. The structural
decisions come from templating/layout_plan.py; this module only measures text
and positions nodes.

Units: the document's font sizes and spacings are used literally as px.
"""

import math
from typing import List, Optional, Sequence

from resumecloner.contexts.rendering.fonts import FontMeasurer
from resumecloner.contexts.rendering.logger import _log_debug
from resumecloner.contexts.rendering.visual_tree import (
    A4_HEIGHT_PX,
    A4_WIDTH_PX,
    NodeKind,
    RenderedSurface,
    TextSpan,
    VisualNode,
)
from resumecloner.contexts.templating.layout_plan import ColumnPlan, LayoutPlan, TitleStyle, plan_layout
from resumecloner.contexts.templating.resume_data_structure import ResumeDocument, SectionType
from resumecloner.contexts.templating.rich_text import LineKind, decode
from resumecloner.contexts.templating.template_registry import Structure, Template, TemplateRegistry, get_registry
from resumecloner.utils.text_processing import hex_to_rgb

PAGE_MARGIN = 48
COLUMN_TOP = 40
SIDEBAR_PADDING = 32
PROFILE_GAP = 32
BADGE_PADDING_X = 8
BADGE_PADDING_Y = 2
BADGE_GAP = 6
LIST_INDENT = 16
LINE_GAP = 6
LIST_GAP = 4

SEPARATOR_COLOR = "#9ca3af"
TITLE_COLOR = "#111827"
SOFT_TEXT_COLOR = "#4b5563"


def mix(color: str, other: str, amount: float) -> str:
    """Blend color toward other by amount (0 keeps color, 1 gives other)."""
    a, b = hex_to_rgb(color), hex_to_rgb(other)
    channels = (round(x + (y - x) * amount) for x, y in zip(a, b))
    return "#" + "".join(f"{c:02x}" for c in channels)


class _SurfaceBuilder:
    """Accumulates nodes for one layout pass."""

    def __init__(self, document: ResumeDocument, plan: LayoutPlan, measurer: FontMeasurer):
        self.doc = document
        self.info = document.personal_info
        self.plan = plan
        self.palette = plan.palette
        self.measurer = measurer
        self.nodes: List[VisualNode] = []
        self.underlays: List[VisualNode] = []

    # Primitives

    def rect(self, x, y, width, height, fill=None, border_color=None, border_width=0, radius=0, role=""):
        node = VisualNode(
            NodeKind.RECT, x, y, width, height,
            fill=fill, border_color=border_color, border_width=border_width, radius=radius, role=role,
        )
        self.nodes.append(node)
        return node

    def rule(self, x, y, width, thickness, color, role="rule") -> float:
        if thickness:
            self.rect(x, y, width, thickness, fill=color, role=role)
        return y + thickness

    def text(
        self,
        spans: Sequence[TextSpan],
        x: float,
        y: float,
        width: float,
        line_height: float = 1.2,
        align: str = "left",
        role: str = "",
    ) -> float:
        """Wrap spans into width and emit one TEXT node per line; returns the y below the block."""
        spans = [span for span in spans if span.text]
        if not spans:
            return y
        for line in self.measurer.wrap(spans, max(width, 1)):
            size = max(span.size for span in line)
            height = size * line_height
            line_width = self.measurer.line_width(line)
            if align == "center":
                line_x = x + (width - line_width) / 2
            elif align == "right":
                line_x = x + width - line_width
            else:
                line_x = x
            baseline = (height - size) / 2 + size * 0.8
            self.nodes.append(
                VisualNode(NodeKind.TEXT, line_x, y, line_width, height, spans=tuple(line), baseline=baseline, role=role)
            )
            y += height
        return y

    def profile(self, x, y, size) -> float:
        self.nodes.append(
            VisualNode(
                NodeKind.IMAGE, x, y, size, size,
                fill="#f9fafb", radius=12,
                image_uri=self.info.profile_picture, placeholder=self.info.initial or "?",
                role="profile",
            )
        )
        return y + size

    # Components

    def header_row(self, x, y, width, light=False, align="left") -> float:
        size = self.doc.name_font_size
        name_color = self.palette.header_text if light else self.palette.text
        spans = [TextSpan(self.info.full_name.upper(), size, name_color, bold=True)]
        if self.info.job_title:
            spans.append(TextSpan("  |  ", size, "#e5e7eb" if light else "#d1d5db"))
            spans.append(TextSpan(self.info.job_title.upper(), size, "#e5e7eb" if light else self.palette.muted))
        return self.text(spans, x, y, width, line_height=1.1, align=align, role="name")

    def contact_line(self, x, y, width, color, align="left") -> float:
        size = self.doc.contact_font_size
        spans = []
        for index, (_, value) in enumerate(self.info.contact_items()):
            if index:
                spans.append(TextSpan("   |   ", size, SEPARATOR_COLOR))
            spans.append(TextSpan(value, size, color))
        return self.text(spans, x, y, width, line_height=1.5, align=align, role="contact")

    def header_block(self, x, y, width, light=False, align="left", contact_gap=16, contact_color=None) -> float:
        """Name row and contact line on the left, profile picture on the right."""
        size = self.plan.profile_size
        text_width = width - size - PROFILE_GAP
        top = y
        y = self.header_row(x, y, text_width, light=light, align=align)
        if self.info.contact_items():
            color = contact_color or (self.palette.header_text if light else SOFT_TEXT_COLOR)
            y = self.contact_line(x, y + contact_gap, text_width, color, align=align)
        block_height = max(y - top, size)
        self.profile(x + width - size, top + (block_height - size) / 2, size)
        return top + block_height

    def rich_text(self, text, x, y, width, color, align="left", italic=False, role="body") -> float:
        """Lay out decoded rich text: plain paragraphs, bullet and ordered lines."""
        size = self.doc.body_font_size
        line_height = self.doc.line_height

        for index, line in enumerate(decode(text)):
            spans = [
                TextSpan(run.text, size, color, bold=run.bold, italic=run.italic or italic)
                for run in line.runs
            ]
            if line.kind == LineKind.PLAIN:
                if index:
                    y += LINE_GAP
                if not "".join(span.text for span in spans).strip():
                    y += size * line_height
                    continue
                y = self.text(spans, x, y, width, line_height, align=align, role=role)
                continue

            marker = TextSpan(line.marker, size, self.palette.accent, bold=line.kind == LineKind.ORDERED)
            if align == "center":
                y = self.text([marker, TextSpan(" ", size, color)] + spans, x, y, width, line_height, "center", role)
            else:
                indent = max(self.measurer.span_width(marker) + 8, LIST_INDENT)
                marker_bottom = self.text([marker], x, y, indent, line_height, role=role + "-marker")
                content_bottom = self.text(spans, x + indent, y, width - indent, line_height, role=role)
                y = max(marker_bottom, content_bottom)
            y += LIST_GAP
        return y

    def summary(self, x, y, width, color, align="left") -> float:
        if not self.info.summary.strip():
            return y
        if self.plan.summary_rule:
            end = self.rich_text(self.info.summary, x + 32, y, width - 32, color, italic=True, role="summary")
            self.rect(x, y, 8, end - y, fill=self.palette.accent, role="summary-rule")
        else:
            end = self.rich_text(
                self.info.summary, x, y, width, color, align=align, italic=self.plan.summary_italic, role="summary"
            )
        return end + self.doc.summary_bottom_spacing

    def column_body_color(self, column: ColumnPlan) -> str:
        if column.shaded:
            return self.palette.sidebar_muted
        return self.palette.text

    def section_title(self, title, column, x, y, width) -> float:
        treatment = self.plan.title_treatment(column)
        size = self.doc.section_header_font_size
        span = TextSpan(title.upper(), size, treatment.color, bold=True)

        if treatment.style == TitleStyle.DOT:
            height = size * 1.5
            self.rect(x, y + (height - 24) / 2, 8, 24, fill=treatment.marker_color, radius=4, role="title-marker")
            return self.text([span], x + 20, y, width - 20, 1.5, role="section-title")

        y = self.text([span], x, y, width, 1.5, role="section-title")
        if treatment.border_width:
            y = self.rule(x, y + treatment.padding_bottom, width, treatment.border_width, treatment.border_color)
        return y

    def badges(self, items, column, x, y, width) -> float:
        if not items:
            return y
        size = self.doc.contact_font_size
        fill = "#ffffff" if column.shaded else "#f9fafb"
        text_color = "#1f2937" if column.shaded else "#374151"
        height = size * 1.5 + 2 * BADGE_PADDING_Y

        rows, row, row_width = [], [], 0.0
        for item in items:
            badge_width = self.measurer.width(item.name, size) + 2 * BADGE_PADDING_X
            needed = badge_width + (BADGE_GAP if row else 0)
            if row and row_width + needed > width:
                rows.append((row, row_width))
                row, row_width, needed = [], 0.0, badge_width
            row.append((item, badge_width))
            row_width += needed
        rows.append((row, row_width))

        for row, row_width in rows:
            cursor = x + (width - row_width) / 2 if self.plan.center_body else x
            for item, badge_width in row:
                self.rect(cursor, y, badge_width, height, fill=fill, border_color="#f3f4f6", border_width=1,
                          radius=4, role="badge")
                self.text([TextSpan(item.name, size, text_color)], cursor + BADGE_PADDING_X, y + BADGE_PADDING_Y,
                          badge_width - 2 * BADGE_PADDING_X + 1, 1.5, role="badge-text")
                cursor += badge_width + BADGE_GAP
            y += height + BADGE_GAP
        return y - BADGE_GAP

    def detail_header(self, item, column, x, y, width) -> float:
        title_color = "#ffffff" if column.shaded and column.dark else TITLE_COLOR
        spans = [TextSpan(item.title, self.doc.role_font_size, title_color, bold=True)]
        if item.subtitle:
            spans.append(TextSpan("  |  ", self.doc.body_font_size, SEPARATOR_COLOR))
            spans.append(TextSpan(item.subtitle, self.doc.body_font_size, self.palette.accent, bold=True))
        date = TextSpan(item.date, self.doc.contact_font_size, self.palette.muted)

        if self.plan.center_body:
            y = self.text(spans, x, y, width, 1.3, align="center", role="item-title")
            if item.date:
                y = self.text([date], x, y, width, 1.4, align="center", role="item-date")
            return y + LIST_GAP

        date_bottom = y
        reserved = 0
        if item.date:
            reserved = self.measurer.span_width(date) + 16
            date_bottom = self.text([date], x, y, width, 1.4, align="right", role="item-date")
        title_bottom = self.text(spans, x, y, width - reserved, 1.3, role="item-title")
        return max(title_bottom, date_bottom) + LIST_GAP

    def detail_items(self, items, column, x, y, width) -> float:
        align = "center" if self.plan.center_body else "left"
        for index, item in enumerate(items):
            if index:
                y += self.doc.item_spacing
            y = self.detail_header(item, column, x, y, width)
            if item.description:
                y = self.rich_text(item.description, x, y + 4, width, self.column_body_color(column), align=align)
        return y

    def section(self, section, column, x, y, width) -> float:
        y = self.section_title(section.title, column, x, y, width)
        y += self.doc.section_title_margin
        if section.type == SectionType.TAG_LIST:
            y = self.badges(section.items, column, x, y, width)
        elif section.type == SectionType.DETAIL_LIST:
            y = self.detail_items(section.items, column, x, y, width)
        else:
            raise ValueError(f"Unsupported section type: {section.type!r}")
        return y + self.doc.module_spacing

    def sections(self, column: ColumnPlan, x, y, width) -> float:
        for section in column.sections:
            y = self.section(section, column, x, y, width)
        return y

    def columns(self, x, y, width) -> float:
        gap = self.plan.column_gap
        usable = width - gap * (len(self.plan.columns) - 1)
        bottom = y
        for column in self.plan.columns:
            column_width = usable * column.width_ratio
            bottom = max(bottom, self.sections(column, x, y, column_width))
            x += column_width + gap
        return bottom

    # Structures

    def classic(self) -> float:
        x, width = PAGE_MARGIN, A4_WIDTH_PX - 2 * PAGE_MARGIN
        align = self.plan.header_alignment
        y = self.header_block(x, self.doc.header_top_padding, width, align=align)
        y = self.rule(x, y + self.doc.header_bottom_padding, width,
                      self.plan.header_border_width, self.plan.header_border_color, role="header-rule")
        y += self.doc.header_content_spacing
        y = self.summary(x, y, width, self.palette.text, align=align)
        return self.sections(self.plan.columns[0], x, y, width) + PAGE_MARGIN

    def modern(self) -> float:
        x, width = PAGE_MARGIN, A4_WIDTH_PX - 2 * PAGE_MARGIN
        band_index = len(self.nodes)
        y = self.header_block(
            x, self.doc.header_top_padding, width, light=True, align=self.plan.header_alignment, contact_gap=24
        )
        y += self.doc.header_bottom_padding
        band = VisualNode(NodeKind.RECT, 0, 0, A4_WIDTH_PX, y, fill=self.palette.accent, role="header-band")
        self.nodes.insert(band_index, band)

        y += self.doc.header_content_spacing + COLUMN_TOP
        y = self.summary(x, y, width, SOFT_TEXT_COLOR)
        return self.sections(self.plan.columns[0], x, y, width) + PAGE_MARGIN

    def minimal(self) -> float:
        x, width = PAGE_MARGIN, A4_WIDTH_PX - 2 * PAGE_MARGIN
        y = PAGE_MARGIN + self.doc.header_top_padding
        if self.plan.header_alignment == "center":
            y = self.header_row(x, y, width, align="center")
            if self.info.contact_items():
                y = self.contact_line(x, y + 24, width, SEPARATOR_COLOR, align="center")
            size = self.plan.profile_size
            y = self.profile(x + (width - size) / 2, y + 24, size)
        else:
            y = self.header_block(x, y, width, contact_gap=24, contact_color=SEPARATOR_COLOR)
        y += self.doc.header_bottom_padding + self.doc.header_content_spacing
        y = self.summary(x, y, width, self.palette.muted, align="center" if self.plan.center_body else "left")
        return self.sections(self.plan.columns[0], x, y, width) + PAGE_MARGIN

    def sidebar(self) -> float:
        sidebar_col = self.plan.sidebar_column
        main_col = self.plan.header_column
        sidebar_width = A4_WIDTH_PX * sidebar_col.width_ratio
        main_width = A4_WIDTH_PX - sidebar_width
        left = self.plan.structure == Structure.SIDEBAR_LEFT
        sidebar_x = 0 if left else main_width
        main_x = sidebar_width if left else 0

        # Sidebar: profile, contact card, sidebar sections
        x = sidebar_x + SIDEBAR_PADDING
        width = sidebar_width - 2 * SIDEBAR_PADDING
        size = min(self.plan.profile_size, width)
        y = self.profile(x + (width - size) / 2, COLUMN_TOP + SIDEBAR_PADDING, size) + SIDEBAR_PADDING

        contacts = self.info.contact_items()
        if contacts:
            card_index = len(self.nodes)
            card_top = y
            y += 16
            for _, value in contacts:
                y = self.text([TextSpan(value, self.doc.contact_font_size, self.palette.sidebar_muted)],
                              x + 16, y, width - 32, 1.5, role="contact")
            y += 16
            card = VisualNode(NodeKind.RECT, x, card_top, width, y - card_top,
                              fill=mix(self.palette.sidebar_background, "#000000", 0.05), radius=12, role="contact-card")
            self.nodes.insert(card_index, card)
            y += SIDEBAR_PADDING
        sidebar_bottom = self.sections(sidebar_col, x, y, width) + PAGE_MARGIN

        # Main: header, contact line, summary, main sections
        x = main_x + PAGE_MARGIN
        width = main_width - 2 * PAGE_MARGIN
        y = self.header_row(x, COLUMN_TOP + self.doc.header_top_padding, width)
        y = self.rule(x, y + self.doc.header_bottom_padding, width,
                      self.plan.header_border_width, self.plan.header_border_color, role="header-rule")
        y += self.doc.header_content_spacing
        if contacts:
            y = self.contact_line(x, y, width, self.palette.muted) + 24
        y = self.summary(x, y, width, SOFT_TEXT_COLOR)
        main_bottom = self.sections(main_col, x, y, width) + PAGE_MARGIN

        self.underlays.append(
            VisualNode(NodeKind.RECT, sidebar_x, 0, sidebar_width, 0,
                       fill=self.palette.sidebar_background, role="sidebar-background")
        )
        return max(sidebar_bottom, main_bottom)

    def two_column_header(self) -> float:
        x, width = PAGE_MARGIN, A4_WIDTH_PX - 2 * PAGE_MARGIN
        y = self.header_block(x, self.doc.header_top_padding, width, contact_gap=24)
        y = self.rule(x, y + self.doc.header_bottom_padding, width,
                      self.plan.header_border_width, self.plan.header_border_color, role="header-rule")
        y += self.doc.header_content_spacing
        y = self.summary(x, y, width, self.palette.text)
        return self.columns(x, y, width) + PAGE_MARGIN

    def compact_grid(self) -> float:
        x, width = PAGE_MARGIN, A4_WIDTH_PX - 2 * PAGE_MARGIN
        y = self.header_block(x, SIDEBAR_PADDING + self.doc.header_top_padding, width)
        y += self.doc.header_bottom_padding
        y = self.rule(x, y, width, self.plan.header_border_width, self.plan.header_border_color, role="header-rule")
        y += self.doc.header_content_spacing
        y = self.summary(x, y, width, self.palette.text)
        return self.columns(x, y, width) + PAGE_MARGIN

    def build(self) -> float:
        builders = {
            Structure.CLASSIC: self.classic,
            Structure.MODERN: self.modern,
            Structure.MINIMAL: self.minimal,
            Structure.SIDEBAR_LEFT: self.sidebar,
            Structure.SIDEBAR_RIGHT: self.sidebar,
            Structure.TWO_COLUMN_HEADER: self.two_column_header,
            Structure.COMPACT_GRID: self.compact_grid,
        }
        try:
            builder = builders[self.plan.structure]
        except KeyError:
            raise ValueError(f"Unsupported structure: {self.plan.structure!r}") from None
        return builder()

    def finish(self, height: int) -> List[VisualNode]:
        """Paint-ordered nodes: full-height underlays first."""
        underlays = [
            VisualNode(node.kind, node.x, node.y, node.width, height, fill=node.fill, role=node.role)
            for node in self.underlays
        ]
        return underlays + self.nodes


class LayoutEngine:
    """
    Lays out documents on an A4-width surface.

    Example:
        engine = LayoutEngine()
        surface = engine.layout(document)
        html = render_preview_html(surface)
    """

    def __init__(self, registry: TemplateRegistry = None):
        self.registry = registry or get_registry()

    def layout(self, document: ResumeDocument, template: Optional[Template] = None) -> RenderedSurface:
        """
        Lay out a document.

        Args:
            document: Document to render
            template: Template override (defaults to the document's template, with fallback)

        Returns:
            RenderedSurface, at least one A4 page tall
        """
        plan = plan_layout(document, template, self.registry)
        font_option = self.registry.font_option(document.font_family)

        builder = _SurfaceBuilder(document, plan, FontMeasurer(font_option))
        bottom = builder.build()
        height = max(A4_HEIGHT_PX, math.ceil(bottom))

        _log_debug(
            f"Laid out {plan.template.id} ({plan.structure.value}): {len(builder.nodes)} nodes, {height}px"
        )
        return RenderedSurface(
            width=A4_WIDTH_PX,
            height=height,
            background=plan.palette.background,
            nodes=builder.finish(height),
            font_id=font_option.id,
            font_css=font_option.css,
            template_id=plan.template.id,
            full_name=document.personal_info.full_name,
        )
