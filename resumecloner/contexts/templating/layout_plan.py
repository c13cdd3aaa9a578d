"""
Layout Plan

Single pure mapping from (ResumeDocument, Template) to the per-structure layout
decisions: column split and ratios, section assignment, header treatment,
sidebar shading and dark-swatch detection, section title styling and palette.

Both renderers (rendering/layout_engine.py for screen and PDF,
rendering/docx_generator.py for DOCX) consume a LayoutPlan so the two targets
make the same structural choices.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from resumecloner.contexts.templating.resume_data_structure import Position, ResumeDocument, Section
from resumecloner.contexts.templating.template_registry import (
    Structure,
    Template,
    TemplateRegistry,
    get_registry,
)

DEFAULT_SIDEBAR_BG = "#f8fafc"
LIGHT_SWATCH_PREFIXES = ("#f", "#e")

SIDEBAR_RATIO = 0.32
TWO_COLUMN_MAIN_RATIO = 0.70


class ColumnRole(str, Enum):
    FULL = "full"
    MAIN = "main"
    SIDEBAR = "sidebar"
    LEFT = "left"
    RIGHT = "right"


class TitleStyle(str, Enum):
    UNDERLINE = "underline"
    DOT = "dot"
    SIDEBAR = "sidebar"
    PLAIN = "plain"


@dataclass(frozen=True)
class Palette:
    """Resolved colors for one document/template pair (all #rrggbb or #rgb)."""

    accent: str
    text: str
    muted: str
    background: str
    sidebar_background: str
    sidebar_text: str
    sidebar_muted: str
    header_text: str


@dataclass(frozen=True)
class TitleTreatment:
    """How a section title is drawn in a given column."""

    style: TitleStyle
    color: str
    border_color: Optional[str] = None
    border_width: int = 0
    marker_color: Optional[str] = None
    padding_bottom: int = 0


@dataclass(frozen=True)
class ColumnPlan:
    """
    One column of the body area.

    Attributes:
        role: Column role (full, main, sidebar, left, right)
        width_ratio: Share of the content width (ratios of a plan sum to 1)
        sections: Sections rendered in this column, in order
        shaded: Column carries the template sidebar background
        dark: Shaded background is a dark swatch (text flips light)
        carries_header: Name/title header is drawn at the top of this column
        carries_profile: Profile picture is drawn at the top of this column
        carries_contact_card: Contact block is drawn as a card in this column
    """

    role: ColumnRole
    width_ratio: float
    sections: Tuple[Section, ...]
    shaded: bool = False
    dark: bool = False
    carries_header: bool = False
    carries_profile: bool = False
    carries_contact_card: bool = False


@dataclass(frozen=True)
class LayoutPlan:
    """
    Structure-level layout decisions shared by every renderer.

    Attributes:
        structure: Template structure tag
        template: Resolved template
        header_alignment: "left" or "center"
        header_spans_page: Header sits above the columns (False: inside a column)
        header_band: Header is a full-bleed band in the accent color (modern)
        header_border_width: Rule under the header in px (0 for none)
        header_border_color: Color of that rule
        profile_size: Profile picture edge in px
        summary_rule: Summary gets an accent rule on its left edge (modern)
        summary_italic: Summary set in italics
        center_body: Body text centered (minimal with centered header)
        column_gap: Horizontal gap between columns in px
        columns: Body columns, left to right
        palette: Resolved colors
    """

    structure: Structure
    template: Template
    header_alignment: str
    header_spans_page: bool
    header_band: bool
    header_border_width: int
    header_border_color: Optional[str]
    profile_size: int
    summary_rule: bool
    summary_italic: bool
    center_body: bool
    column_gap: int
    columns: Tuple[ColumnPlan, ...]
    palette: Palette

    @property
    def is_multi_column(self) -> bool:
        return len(self.columns) > 1

    @property
    def header_column(self) -> Optional[ColumnPlan]:
        for column in self.columns:
            if column.carries_header:
                return column
        return None

    @property
    def sidebar_column(self) -> Optional[ColumnPlan]:
        for column in self.columns:
            if column.shaded:
                return column
        return None

    def title_treatment(self, column: ColumnPlan) -> TitleTreatment:
        """Section title styling for sections drawn in column."""
        palette = self.palette

        if self.structure in (Structure.CLASSIC, Structure.TWO_COLUMN_HEADER, Structure.COMPACT_GRID):
            return TitleTreatment(
                TitleStyle.UNDERLINE, palette.accent, palette.accent, border_width=2, padding_bottom=8
            )
        if self.structure == Structure.MODERN:
            return TitleTreatment(TitleStyle.DOT, palette.text, marker_color=palette.accent)
        if self.structure.has_sidebar:
            if column.shaded:
                return TitleTreatment(
                    TitleStyle.SIDEBAR,
                    palette.sidebar_text,
                    "#8c8ca6" if column.dark else "#cccccc",
                    border_width=1,
                    padding_bottom=10,
                )
            return TitleTreatment(
                TitleStyle.UNDERLINE, "#000000", palette.accent, border_width=3, padding_bottom=8
            )
        return TitleTreatment(TitleStyle.PLAIN, "#999999")


def is_dark_swatch(color: str) -> bool:
    """A background is dark unless its hex starts with a light-range prefix (#f, #e)."""
    return not (color or DEFAULT_SIDEBAR_BG).lower().startswith(LIGHT_SWATCH_PREFIXES)


def resolve_palette(document: ResumeDocument, template: Template) -> Palette:
    sidebar_background = template.colors.sidebar_bg or DEFAULT_SIDEBAR_BG
    dark = is_dark_swatch(sidebar_background)
    return Palette(
        accent=document.accent_color or template.colors.primary,
        text=template.colors.text,
        muted="#6b7280",
        background=template.colors.background or "#ffffff",
        sidebar_background=sidebar_background,
        sidebar_text="#ffffff" if dark else "#1f2937",
        sidebar_muted="#dddddd" if dark else "#4b5563",
        header_text="#ffffff",
    )


def _sidebar_columns(document: ResumeDocument, structure: Structure, dark: bool) -> Tuple[ColumnPlan, ...]:
    sidebar = ColumnPlan(
        role=ColumnRole.SIDEBAR,
        width_ratio=SIDEBAR_RATIO,
        sections=tuple(document.sections_at(Position.SIDEBAR)),
        shaded=True,
        dark=dark,
        carries_profile=True,
        carries_contact_card=True,
    )
    main = ColumnPlan(
        role=ColumnRole.MAIN,
        width_ratio=round(1 - SIDEBAR_RATIO, 2),
        sections=tuple(document.sections_at(Position.MAIN)),
        carries_header=True,
    )
    if structure == Structure.SIDEBAR_LEFT:
        return (sidebar, main)
    return (main, sidebar)


def _columns_for(document: ResumeDocument, structure: Structure, dark: bool) -> Tuple[ColumnPlan, ...]:
    if structure in (Structure.CLASSIC, Structure.MODERN, Structure.MINIMAL):
        return (ColumnPlan(ColumnRole.FULL, 1.0, document.sections),)

    if structure in (Structure.SIDEBAR_LEFT, Structure.SIDEBAR_RIGHT):
        return _sidebar_columns(document, structure, dark)

    if structure == Structure.TWO_COLUMN_HEADER:
        return (
            ColumnPlan(ColumnRole.MAIN, TWO_COLUMN_MAIN_RATIO, tuple(document.sections_at(Position.MAIN))),
            ColumnPlan(
                ColumnRole.SIDEBAR,
                round(1 - TWO_COLUMN_MAIN_RATIO, 2),
                tuple(document.sections_at(Position.SIDEBAR)),
            ),
        )

    if structure == Structure.COMPACT_GRID:
        # Alternates by index; declared positions are ignored.
        return (
            ColumnPlan(ColumnRole.LEFT, 0.5, document.sections[0::2]),
            ColumnPlan(ColumnRole.RIGHT, 0.5, document.sections[1::2]),
        )

    raise ValueError(f"Unsupported structure: {structure!r}")


HEADER_BORDERS = {
    Structure.CLASSIC: 4,
    Structure.COMPACT_GRID: 8,
    Structure.TWO_COLUMN_HEADER: 2,
    Structure.SIDEBAR_LEFT: 4,
    Structure.SIDEBAR_RIGHT: 4,
}

PROFILE_SIZES = {
    Structure.CLASSIC: 96,
    Structure.MODERN: 96,
    Structure.MINIMAL: 80,
    Structure.SIDEBAR_LEFT: 128,
    Structure.SIDEBAR_RIGHT: 128,
    Structure.TWO_COLUMN_HEADER: 96,
    Structure.COMPACT_GRID: 64,
}

COLUMN_GAPS = {
    Structure.TWO_COLUMN_HEADER: 48,
    Structure.COMPACT_GRID: 40,
}


def plan_layout(
    document: ResumeDocument,
    template: Template = None,
    registry: TemplateRegistry = None,
) -> LayoutPlan:
    """
    Compute the layout decisions for a document.

    Args:
        document: Document to lay out
        template: Template to use (defaults to the document's template, resolved
            with fallback to the default template)
        registry: Registry used to resolve the document's template

    Returns:
        LayoutPlan shared by the screen, PDF and DOCX renderers
    """
    if template is None:
        template = (registry or get_registry()).resolve(document.template_id)

    structure = template.structure
    palette = resolve_palette(document, template)
    dark = is_dark_swatch(palette.sidebar_background)

    alignment = template.header_alignment if template.header_alignment in ("left", "center") else "left"
    if structure.has_sidebar or structure in (Structure.TWO_COLUMN_HEADER, Structure.COMPACT_GRID):
        alignment = "left"

    border_width = HEADER_BORDERS.get(structure, 0)
    border_color = "#eeeeee" if structure == Structure.TWO_COLUMN_HEADER else palette.accent

    return LayoutPlan(
        structure=structure,
        template=template,
        header_alignment=alignment,
        header_spans_page=not structure.has_sidebar,
        header_band=structure == Structure.MODERN,
        header_border_width=border_width,
        header_border_color=border_color if border_width else None,
        profile_size=PROFILE_SIZES[structure],
        summary_rule=structure == Structure.MODERN,
        summary_italic=structure in (Structure.MODERN, Structure.MINIMAL),
        center_body=structure == Structure.MINIMAL and alignment == "center",
        column_gap=COLUMN_GAPS.get(structure, 0),
        columns=_columns_for(document, structure, dark),
        palette=palette,
    )
