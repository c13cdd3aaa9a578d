#!/usr/bin/env python3
"""
Resume Export CLI

Renders a JSON resume draft to PDF, DOCX or an HTML preview, and lists the
template catalog.

Commands:
    pdf       - Export a draft to a paginated A4 PDF
    docx      - Export a draft to an editable Word document
    preview   - Write the on-screen HTML preview of a draft
    templates - List the template catalog

Examples:\n

    export_resume.py pdf drafts/Jane_Doe_Draft.json                     # PDF with the draft's template

    export_resume.py pdf drafts/Jane_Doe_Draft.json --template t4       # Switch template first

    export_resume.py docx drafts/Jane_Doe_Draft.json -p spacing_tight   # Apply a style preset

    export_resume.py templates --structure sidebar-left                 # Filter the catalog
"""

import os
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from resumecloner.contexts.rendering import DocxExportError, LayoutEngine, RenderCaptureError, export_docx, export_pdf
from resumecloner.contexts.rendering.logger import setup_rendering_logger
from resumecloner.contexts.rendering.preview import export_preview
from resumecloner.contexts.templating import ResumeDocument, get_registry
from resumecloner.contexts.templating.config_resolver import apply_presets
from resumecloner.contexts.templating.draft import load_draft
from resumecloner.contexts.templating.editing import set_template
from resumecloner.contexts.templating.exceptions import InvalidDraftFormatError, TemplateNotFoundError
from resumecloner.utils.logger import session_log_dir

load_dotenv()
OUTPUT_PATH = Path(os.getenv("RESUMECLONER_OUTPUT_PATH", "outs/results"))


app = typer.Typer(
    help="Export resume drafts to PDF, DOCX and HTML preview",
    add_completion=False,
    invoke_without_command=True,
)

DraftArgument = Annotated[Path, typer.Argument(help="Path to a JSON resume draft", exists=True, dir_okay=False)]
TemplateOption = Annotated[
    Optional[str],
    typer.Option("--template", "-t", help="Template id to switch to before exporting (e.g., 't4')"),
]
PresetOption = Annotated[
    Optional[List[str]],
    typer.Option("--preset", "-p", help="Style preset to apply (repeatable, later overrides earlier)"),
]
OutputOption = Annotated[
    Optional[Path],
    typer.Option("--output-dir", "-o", help="Output directory (default: RESUMECLONER_OUTPUT_PATH)"),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def prepare_document(draft: Path, template: Optional[str], presets: Optional[List[str]]) -> ResumeDocument:
    """Load a draft and apply the template switch and presets, exiting on bad input."""
    try:
        document = load_draft(draft)
    except InvalidDraftFormatError as e:
        typer.secho(f"Error: {e.user_message}", fg=typer.colors.RED, err=True)
        typer.echo(f"  {e}", err=True)
        raise typer.Exit(code=1)

    if template:
        registry = get_registry()
        try:
            registry.lookup(template)
        except TemplateNotFoundError as e:
            typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        document = set_template(document, template, registry=registry)

    try:
        return apply_presets(document, presets or [])
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def announce(target: str, draft: Path, document: ResumeDocument) -> None:
    typer.secho(f"\nExporting {target}: {draft.name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Name: {document.personal_info.full_name or '(unnamed)'}")
    typer.echo(f"Template: {document.template_id}")
    typer.echo("")


@app.command("pdf")
def pdf_command(
    draft: DraftArgument,
    template: TemplateOption = None,
    preset: PresetOption = None,
    output_dir: OutputOption = None,
    scale: Annotated[
        Optional[float],
        typer.Option("--scale", "-s", help="Raster upscale factor (default: RASTER_SCALE)", min=0.5, max=6.0),
    ] = None,
):
    """
    Export a draft to a paginated A4 PDF.

    The laid-out page is rasterized and sliced into A4 pages; content within 5%
    of one page height is kept on a single page.

    Examples:\n

        $ export_resume.py pdf drafts/Jane_Doe_Draft.json

        $ export_resume.py pdf drafts/Jane_Doe_Draft.json --scale 3
    """
    setup_rendering_logger(session_log_dir("export"))
    document = prepare_document(draft, template, preset)
    announce("PDF", draft, document)

    surface = LayoutEngine().layout(document)
    try:
        output_path = export_pdf(surface, output_dir or OUTPUT_PATH, scale=scale)
    except RenderCaptureError as e:
        typer.secho(f"✗ {e.user_message}", fg=typer.colors.RED, bold=True, err=True)
        typer.echo(f"  {e}", err=True)
        raise typer.Exit(code=1)

    typer.secho("✓ PDF export succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  PDF: {output_path}\n")


@app.command("docx")
def docx_command(
    draft: DraftArgument,
    template: TemplateOption = None,
    preset: PresetOption = None,
    output_dir: OutputOption = None,
):
    """
    Export a draft to an editable Word document.

    Examples:\n

        $ export_resume.py docx drafts/Jane_Doe_Draft.json

        $ export_resume.py docx drafts/Jane_Doe_Draft.json -t t10 -p type_large
    """
    setup_rendering_logger(session_log_dir("export"))
    document = prepare_document(draft, template, preset)
    announce("DOCX", draft, document)

    try:
        output_path = export_docx(document, output_dir or OUTPUT_PATH)
    except DocxExportError as e:
        typer.secho(f"✗ {e.user_message}", fg=typer.colors.RED, bold=True, err=True)
        typer.echo(f"  {e}", err=True)
        raise typer.Exit(code=1)

    typer.secho("✓ DOCX export succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  DOCX: {output_path}\n")


@app.command("preview")
def preview_command(
    draft: DraftArgument,
    template: TemplateOption = None,
    preset: PresetOption = None,
    output_dir: OutputOption = None,
):
    """
    Write the HTML preview of a draft (open it in a browser).

    Examples:\n

        $ export_resume.py preview drafts/Jane_Doe_Draft.json -t t3
    """
    document = prepare_document(draft, template, preset)
    announce("preview", draft, document)

    output_path = export_preview(LayoutEngine().layout(document), output_dir or OUTPUT_PATH)
    typer.secho("✓ Preview written", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  HTML: {output_path}\n")


@app.command("templates")
def templates_command(
    structure: Annotated[
        Optional[str],
        typer.Option("--structure", help="Only templates with this layout structure (e.g., 'modern')"),
    ] = None,
):
    """
    List the template catalog.

    Examples:\n

        $ export_resume.py templates

        $ export_resume.py templates --structure compact-grid
    """
    registry = get_registry()
    templates = registry.filter_by_structure(structure) if structure else registry.templates
    if not templates:
        typer.secho(f"No templates with structure {structure!r}", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)

    typer.secho(f"\n{len(templates)} template(s)\n", bold=True)
    for template in templates:
        typer.secho(f"  {template.id:<4} {template.name}", fg=typer.colors.CYAN, bold=True, nl=False)
        typer.echo(f"  [{template.structure.value}, header {template.header_alignment}] {template.colors.primary}")
        typer.echo(f"       {template.description}")
    typer.echo("")


if __name__ == "__main__":
    app()
