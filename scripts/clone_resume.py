#!/usr/bin/env python3
"""
Resume Cloning CLI

Turns an existing resume (image or PDF) into an editable JSON draft through the
extraction service, or starts a fresh draft for a template.

Commands:
    extract - Extract an image/PDF resume into a JSON draft
    new     - Write a blank draft for a template

Examples:\n

    clone_resume.py extract scans/resume.png                 # Draft next to RESUMECLONER_OUTPUT_PATH

    clone_resume.py extract scans/resume.pdf -o drafts       # Custom output directory

    clone_resume.py new t4 --example                         # Sample content in template t4
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from resumecloner.contexts.intake import ResumeSession, read_upload
from resumecloner.contexts.intake.logger import setup_intake_logger
from resumecloner.contexts.templating import document_for_template, example_document, get_registry
from resumecloner.contexts.templating.draft import export_draft
from resumecloner.contexts.templating.logger import setup_templating_logger
from resumecloner.utils.llm import get_provider
from resumecloner.utils.logger import session_log_dir

load_dotenv()
OUTPUT_PATH = Path(os.getenv("RESUMECLONER_OUTPUT_PATH", "outs/results"))


app = typer.Typer(
    help="Clone resumes from images/PDFs into editable JSON drafts",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("extract")
def extract_command(
    source: Annotated[
        Path,
        typer.Argument(help="Resume image or PDF", exists=True, dir_okay=False),
    ],
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Output directory (default: RESUMECLONER_OUTPUT_PATH)"),
    ] = None,
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", help="Extraction provider: gemini, anthropic or openai (default: EXTRACTION_PROVIDER)"),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="Model name (default: provider-specific)"),
    ] = None,
):
    """
    Extract a resume image or PDF into a JSON draft.

    The upload is checked (image/* or PDF, at most 20MB) before any call to the
    extraction service.

    Examples:\n

        $ clone_resume.py extract scans/resume.png

        $ clone_resume.py extract scans/resume.pdf --model gemini-flash-latest
    """
    setup_intake_logger(session_log_dir("extract"), provider_name=provider, model=model)
    typer.secho(f"\nExtracting: {source.name}", fg=typer.colors.BLUE, bold=True)
    typer.echo("")

    upload = read_upload(source)
    try:
        extraction_provider = get_provider(provider_name=provider, model=model)
    except (ImportError, ValueError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    session = ResumeSession(provider=extraction_provider)
    if not session.upload(upload):
        typer.secho(f"✗ {session.error}", fg=typer.colors.RED, bold=True, err=True)
        raise typer.Exit(code=1)

    document = session.document
    output_path = session.export_draft(output_dir or OUTPUT_PATH)
    typer.secho("✓ Extraction succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Name: {document.personal_info.full_name or '(unnamed)'}")
    typer.echo(f"  Template: {document.template_id}")
    typer.echo(f"  Sections: {len(document.sections)}")
    typer.echo(f"  Draft: {output_path}\n")


@app.command("new")
def new_command(
    template_id: Annotated[
        str,
        typer.Argument(help="Template id (e.g., 't1'); unknown ids fall back to the first template"),
    ] = "t1",
    example: Annotated[
        bool,
        typer.Option("--example", "-e", help="Fill the draft with sample content"),
    ] = False,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Output directory (default: RESUMECLONER_OUTPUT_PATH)"),
    ] = None,
):
    """
    Write a fresh draft styled for a template.

    Examples:\n

        $ clone_resume.py new t7

        $ clone_resume.py new t12 --example -o drafts
    """
    setup_templating_logger(session_log_dir("new"), phase="draft-export")
    registry = get_registry()
    if example:
        document = example_document(template_id, registry=registry)
    else:
        document = document_for_template(template_id, registry=registry)

    output_path = export_draft(document, output_dir or OUTPUT_PATH)
    typer.secho(f"✓ Draft for template {document.template_id} written", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Draft: {output_path}\n")


if __name__ == "__main__":
    app()
