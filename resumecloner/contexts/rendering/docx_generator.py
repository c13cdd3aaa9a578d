"""
Flow-Document Generator (DOCX)

Rebuilds the resume as paragraphs, tables and runs with python-docx. Works from
the same LayoutPlan as the layout engine, never from the visual tree:

- single-column structures become a paragraph sequence; modern puts its header
  in a single-cell table shaded with the accent color
- multi-column structures become a borderless one-row table using the plan's
  column ratios, with the sidebar cell shaded for sidebar-left/right

Pixel spacing converts to twips at a fixed 15 twips per px; font sizes map to
points directly. Rich text is decoded into bold/italic runs; bullet and ordered
lines are both written as literal "• " lines.
"""

import time
from io import BytesIO
from pathlib import Path
from typing import List

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Mm, Pt, RGBColor, Twips

from resumecloner.contexts.rendering.exceptions import DocxExportError
from resumecloner.contexts.rendering.logger import _log_debug, _log_error, log_export_result, log_export_start
from resumecloner.contexts.templating.layout_plan import ColumnPlan, LayoutPlan, TitleStyle, plan_layout
from resumecloner.contexts.templating.resume_data_structure import ResumeDocument, SectionType
from resumecloner.contexts.templating.rich_text import decode
from resumecloner.contexts.templating.template_registry import Template, TemplateRegistry, get_registry
from resumecloner.utils.images import load_image, png_bytes
from resumecloner.utils.text_processing import docx_hex, export_basename

PX_TO_TWIPS = 15
PAGE_MARGIN_TWIPS = 720
CELL_MARGIN_TWIPS = 200
HEADER_CELL_SIDE_TWIPS = 400
A4_WIDTH_TWIPS = 11906
CONTENT_WIDTH_TWIPS = A4_WIDTH_TWIPS - 2 * PAGE_MARGIN_TWIPS

TAG_SEPARATOR = "  •  "
CONTACT_SEPARATOR = "   |   "
HEADER_SEPARATOR = "  |  "
ITEM_SEPARATOR = "    |    "
BULLET = "• "

# Border widths are in eighths of a point; 1 px is 0.75 pt
EIGHTHS_PER_PX = 6

DOCX_SUFFIX = "_Resume.docx"

# Elements that must follow w:pBdr inside w:pPr
PBDR_SUCCESSORS = (
    "w:shd", "w:tabs", "w:suppressAutoHyphens", "w:kinsoku", "w:wordWrap", "w:overflowPunct",
    "w:topLinePunct", "w:autoSpaceDE", "w:autoSpaceDN", "w:bidi", "w:adjustRightInd", "w:snapToGrid",
    "w:spacing", "w:ind", "w:contextualSpacing", "w:mirrorIndents", "w:suppressOverlap", "w:jc",
    "w:textDirection", "w:textAlignment", "w:textboxTightWrap", "w:outlineLvl", "w:divId",
    "w:cnfStyle", "w:rPr", "w:sectPr", "w:pPrChange",
)


def twips(px: float) -> Twips:
    """Convert a pixel spacing parameter to twips."""
    return Twips(round(px * PX_TO_TWIPS))


def _rgb(color: str) -> RGBColor:
    return RGBColor.from_string(docx_hex(color))


# Low-level OOXML helpers


def set_paragraph_border(paragraph, side: str, color: str, size: int, space: int = 4) -> None:
    """Add a single-line border on one side of a paragraph."""
    pPr = paragraph._p.get_or_add_pPr()
    pBdr = pPr.find(qn("w:pBdr"))
    if pBdr is None:
        pBdr = OxmlElement("w:pBdr")
        pPr.insert_element_before(pBdr, *PBDR_SUCCESSORS)
    border = OxmlElement(f"w:{side}")
    border.set(qn("w:val"), "single")
    border.set(qn("w:sz"), str(size))
    border.set(qn("w:space"), str(space))
    border.set(qn("w:color"), docx_hex(color))
    pBdr.append(border)


def shade_cell(cell, color: str) -> None:
    """Fill a table cell with a solid color."""
    tcPr = cell._element.get_or_add_tcPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), docx_hex(color))
    tcPr.append(shd)


def set_cell_margins(cell, top: int, bottom: int, left: int, right: int) -> None:
    tcPr = cell._element.get_or_add_tcPr()
    margins = OxmlElement("w:tcMar")
    for side, value in (("top", top), ("bottom", bottom), ("left", left), ("right", right)):
        element = OxmlElement(f"w:{side}")
        element.set(qn("w:w"), str(int(value)))
        element.set(qn("w:type"), "dxa")
        margins.append(element)
    tcPr.append(margins)


def remove_table_borders(table) -> None:
    """Hide every table border, inside ones included."""
    tblPr = table._element.tblPr
    old_borders = tblPr.find(qn("w:tblBorders"))
    if old_borders is not None:
        tblPr.remove(old_borders)
    borders = OxmlElement("w:tblBorders")
    for name in ("top", "left", "bottom", "right", "insideH", "insideV"):
        border = OxmlElement(f"w:{name}")
        border.set(qn("w:val"), "nil")
        borders.append(border)
    tblPr.insert_element_before(borders, "w:shd", "w:tblLayout", "w:tblCellMar", "w:tblLook")


def set_column_widths(table, widths: List[int]) -> None:
    """Fix table grid and cell widths (in twips)."""
    table.autofit = False
    tblGrid = table._element.tblGrid
    for gridCol in list(tblGrid):
        tblGrid.remove(gridCol)
    for width in widths:
        gridCol = OxmlElement("w:gridCol")
        gridCol.set(qn("w:w"), str(width))
        tblGrid.append(gridCol)
    for row in table.rows:
        for cell, width in zip(row.cells, widths):
            cell.width = Twips(width)


def _drop_leading_empty_paragraph(cell) -> None:
    """Table cells start with an empty paragraph; drop it once real content exists."""
    paragraphs = cell.paragraphs
    if len(paragraphs) > 1 and not paragraphs[0].text and not paragraphs[0].runs:
        element = paragraphs[0]._element
        element.getparent().remove(element)


class DocxGenerator:
    """Builds one python-docx Document from a document and its layout plan."""

    def __init__(self, document: ResumeDocument, plan: LayoutPlan, font_name: str):
        self.doc = document
        self.info = document.personal_info
        self.plan = plan
        self.palette = plan.palette
        self.font_name = font_name

    # Paragraph helpers

    def run(self, paragraph, text, size, color, bold=False, italic=False):
        run = paragraph.add_run(text)
        run.font.name = self.font_name
        run.font.size = Pt(size)
        run.font.color.rgb = _rgb(color)
        run.font.bold = bold
        run.font.italic = italic
        return run

    def paragraph(self, container, before_px=0, after_px=0, align="left"):
        paragraph = container.add_paragraph()
        paragraph.paragraph_format.space_before = twips(before_px)
        paragraph.paragraph_format.space_after = twips(after_px)
        if align == "center":
            paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        elif align == "right":
            paragraph.alignment = WD_ALIGN_PARAGRAPH.RIGHT
        return paragraph

    def rich_paragraphs(self, container, text, color, align="left", italic=False) -> list:
        """One paragraph per decoded line; list lines get a literal bullet."""
        paragraphs = []
        size = self.doc.body_font_size
        for line in decode(text):
            paragraph = self.paragraph(container, align=align)
            paragraph.paragraph_format.line_spacing = self.doc.line_height
            if line.is_list_item:
                self.run(paragraph, BULLET, size, self.palette.accent)
            for run in line.runs:
                self.run(paragraph, run.text, size, color, bold=run.bold, italic=run.italic or italic)
            paragraphs.append(paragraph)
        return paragraphs

    # Blocks

    def profile_picture(self, container, align: str) -> None:
        image = load_image(self.info.profile_picture)
        if image is None:
            return
        paragraph = self.paragraph(container, after_px=8, align=align)
        paragraph.add_run().add_picture(BytesIO(png_bytes(image)), width=Mm(self.plan.profile_size * 25.4 / 96))

    def header(self, container, light=False, align=None) -> None:
        align = align or self.plan.header_alignment
        size = self.doc.name_font_size
        paragraph = self.paragraph(
            container, self.doc.header_top_padding, self.doc.header_bottom_padding, align=align
        )
        self.run(paragraph, self.info.full_name.upper(), size, "#ffffff" if light else self.palette.text, bold=True)
        if self.info.job_title:
            self.run(paragraph, HEADER_SEPARATOR, size, "#cccccc" if light else "#999999")
            self.run(paragraph, self.info.job_title.upper(), size, "#eeeeee" if light else "#666666")

        contact = self.contact_line(container, "#ffffff" if light else "#444444", align)
        last = contact or paragraph

        # Page-spanning headers rule off below the contacts, column headers below the name
        if self.plan.header_border_width:
            ruled = last if self.plan.header_spans_page else paragraph
            set_paragraph_border(
                ruled, "bottom", self.plan.header_border_color, self.plan.header_border_width * EIGHTHS_PER_PX
            )
        last.paragraph_format.space_after = twips(self.doc.header_content_spacing)

    def contact_line(self, container, color, align):
        values = [value for _, value in self.info.contact_items()]
        if not values:
            return None
        paragraph = self.paragraph(container, after_px=8, align=align)
        self.run(paragraph, CONTACT_SEPARATOR.join(values), self.doc.contact_font_size, color)
        return paragraph

    def contact_card(self, container, color) -> None:
        for _, value in self.info.contact_items():
            paragraph = self.paragraph(container, after_px=4)
            self.run(paragraph, value, self.doc.contact_font_size, color)
        if self.info.contact_items():
            container.paragraphs[-1].paragraph_format.space_after = twips(32)

    def summary(self, container) -> None:
        if not self.info.summary.strip():
            return
        align = "center" if self.plan.center_body else "left"
        paragraphs = self.rich_paragraphs(container, self.info.summary, "#333333", align=align, italic=True)
        if self.plan.summary_rule:
            for paragraph in paragraphs:
                set_paragraph_border(paragraph, "left", self.palette.accent, 8 * EIGHTHS_PER_PX, space=12)
        paragraphs[-1].paragraph_format.space_after = twips(self.doc.summary_bottom_spacing)

    def section_title(self, container, title, column: ColumnPlan) -> None:
        treatment = self.plan.title_treatment(column)
        paragraph = self.paragraph(container, after_px=self.doc.section_title_margin)
        if treatment.style == TitleStyle.DOT:
            self.run(paragraph, "▌ ", self.doc.section_header_font_size, treatment.marker_color)
        self.run(paragraph, title.upper(), self.doc.section_header_font_size, treatment.color, bold=True)
        if treatment.border_width:
            set_paragraph_border(
                paragraph, "bottom", treatment.border_color, treatment.border_width * EIGHTHS_PER_PX
            )

    def body_color(self, column: ColumnPlan) -> str:
        return self.palette.sidebar_muted if column.shaded else self.palette.text

    def detail_item(self, container, item, column: ColumnPlan, tab_position: int, first: bool) -> None:
        align = "center" if self.plan.center_body else "left"
        heading = self.paragraph(container, before_px=0 if first else self.doc.item_spacing, after_px=4, align=align)
        title_color = "#ffffff" if column.shaded and column.dark else "#111827"
        self.run(heading, item.title, self.doc.role_font_size, title_color, bold=True)
        if item.subtitle:
            self.run(heading, ITEM_SEPARATOR, self.doc.role_font_size * 0.75, "#bbbbbb")
            self.run(heading, item.subtitle, self.doc.body_font_size, self.palette.accent, bold=True)
        if item.date:
            if align == "center":
                heading = self.paragraph(container, after_px=4, align=align)
            else:
                heading.paragraph_format.tab_stops.add_tab_stop(Twips(tab_position), WD_TAB_ALIGNMENT.RIGHT)
                heading.add_run("\t")
            self.run(heading, item.date, self.doc.contact_font_size, "#888888", italic=True)
        if item.description:
            self.rich_paragraphs(container, item.description, self.body_color(column), align=align)

    def section(self, container, section, column: ColumnPlan, width_twips: int) -> None:
        self.section_title(container, section.title, column)
        if section.type == SectionType.TAG_LIST:
            paragraph = self.paragraph(container, align="center" if self.plan.center_body else "left")
            names = TAG_SEPARATOR.join(item.name for item in section.items)
            self.run(paragraph, names, self.doc.body_font_size, self.body_color(column))
        elif section.type == SectionType.DETAIL_LIST:
            for index, item in enumerate(section.items):
                self.detail_item(container, item, column, width_twips, first=index == 0)
        else:
            raise ValueError(f"Unsupported section type: {section.type!r}")
        container.paragraphs[-1].paragraph_format.space_after = twips(self.doc.module_spacing)

    def sections(self, container, column: ColumnPlan, width_twips: int) -> None:
        for section in column.sections:
            self.section(container, section, column, width_twips)

    # Layouts

    def header_band(self, document) -> None:
        table = document.add_table(rows=1, cols=1)
        remove_table_borders(table)
        set_column_widths(table, [CONTENT_WIDTH_TWIPS])
        cell = table.rows[0].cells[0]
        shade_cell(cell, self.palette.accent)
        set_cell_margins(
            cell,
            self.doc.header_top_padding * PX_TO_TWIPS,
            self.doc.header_bottom_padding * PX_TO_TWIPS,
            HEADER_CELL_SIDE_TWIPS,
            HEADER_CELL_SIDE_TWIPS,
        )
        self.profile_picture(cell, "right")
        self.header(cell, light=True)
        _drop_leading_empty_paragraph(cell)
        self.paragraph(document, after_px=self.doc.header_content_spacing)

    def single_column(self, document) -> None:
        column = self.plan.columns[0]
        if self.plan.header_band:
            self.header_band(document)
        else:
            self.profile_picture(document, "center" if self.plan.header_alignment == "center" else "right")
            self.header(document)
        self.summary(document)
        self.sections(document, column, CONTENT_WIDTH_TWIPS)

    def multi_column(self, document) -> None:
        if self.plan.header_spans_page:
            self.profile_picture(document, "right")
            self.header(document)
            self.summary(document)

        gap = self.plan.column_gap * PX_TO_TWIPS
        usable = CONTENT_WIDTH_TWIPS - gap * (len(self.plan.columns) - 1)
        widths = [round(usable * column.width_ratio) for column in self.plan.columns]

        table = document.add_table(rows=1, cols=len(self.plan.columns))
        remove_table_borders(table)
        set_column_widths(table, widths)

        for cell, column, width in zip(table.rows[0].cells, self.plan.columns, widths):
            if column.shaded:
                shade_cell(cell, self.palette.sidebar_background)
            set_cell_margins(cell, CELL_MARGIN_TWIPS, CELL_MARGIN_TWIPS, CELL_MARGIN_TWIPS, CELL_MARGIN_TWIPS)
            if column.carries_profile:
                self.profile_picture(cell, "center")
            if column.carries_contact_card:
                self.contact_card(cell, self.palette.sidebar_muted)
            if column.carries_header:
                self.header(cell)
                self.summary(cell)
            self.sections(cell, column, width - 2 * CELL_MARGIN_TWIPS)
            _drop_leading_empty_paragraph(cell)

    def build(self):
        document = Document()
        page = document.sections[0]
        page.page_width = Mm(210)
        page.page_height = Mm(297)
        for side in ("top_margin", "bottom_margin", "left_margin", "right_margin"):
            setattr(page, side, Twips(PAGE_MARGIN_TWIPS))

        normal = document.styles["Normal"]
        normal.font.name = self.font_name
        normal.font.size = Pt(self.doc.body_font_size)

        if self.plan.is_multi_column:
            self.multi_column(document)
        else:
            self.single_column(document)
        return document


def build_docx(document: ResumeDocument, template: Template = None, registry: TemplateRegistry = None):
    """
    Build the word-processor document for a resume.

    Args:
        document: Document to export
        template: Template override (defaults to the document's template, with fallback)
        registry: Registry for template and font lookup

    Returns:
        python-docx Document
    """
    registry = registry or get_registry()
    plan = plan_layout(document, template, registry)
    font_name = registry.font_option(document.font_family).docx_font
    _log_debug(f"Building DOCX: {plan.template.id} ({plan.structure.value}), {len(plan.columns)} column(s)")
    return DocxGenerator(document, plan, font_name).build()


def docx_filename(full_name: str) -> str:
    """<Full_Name>_Resume.docx"""
    return f"{export_basename(full_name)}{DOCX_SUFFIX}"


def export_docx(
    document: ResumeDocument,
    output_dir: Path,
    template: Template = None,
    registry: TemplateRegistry = None,
) -> Path:
    """
    Build and save <Full_Name>_Resume.docx into output_dir; returns its path.

    Raises:
        DocxExportError: If python-docx fails to build the document or the file cannot be written
    """
    start_time = time.time()
    output_dir = Path(output_dir)
    log_export_start("docx", document.personal_info.full_name or "(unnamed)", document.template_id, output_dir)

    output_path = output_dir / docx_filename(document.personal_info.full_name)
    try:
        built = build_docx(document, template=template, registry=registry)
        buffer = BytesIO()
        built.save(buffer)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(buffer.getvalue())
    except Exception as e:
        _log_error(f"DOCX export failed: {e}")
        raise DocxExportError(f"Could not write DOCX to {output_path}: {e}") from e

    log_export_result("docx", output_path, time.time() - start_time)
    return output_path
