"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from resumecloner.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and rendering-specific context.

    Args:
        log_dir: Directory for this rendering session

    Returns:
        Path to log file

    Example:
        from resumecloner.contexts.rendering.logger import setup_rendering_logger

        log_file = setup_rendering_logger(log_dir)
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={
            "Raster scale": os.getenv("RASTER_SCALE", "2.5"),
            "PDF JPEG quality": os.getenv("PDF_JPEG_QUALITY", "95"),
        },
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_export_start(target: str, resume_name: str, template_id: str, output_dir: Path) -> None:
    """Log start of an export with context."""
    _log_info(f"Starting {target} export: {resume_name}")
    _log_debug(f"  Template: {template_id}")
    _log_debug(f"  Output directory: {output_dir}")


def log_export_result(target: str, output_path: Path, elapsed_time: float, pages: int = None) -> None:
    """
    Log a finished export.

    Args:
        target: "pdf" or "docx"
        output_path: Written file
        elapsed_time: Time taken to export
        pages: Page count, when known
    """
    page_note = f", {pages} page(s)" if pages is not None else ""
    _log_success(f"{target.upper()} export succeeded ({elapsed_time:.2f}s{page_note})")
    _log_debug(f"  File: {output_path}")
