"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from resumecloner.utils.llm import DEFAULT_MODELS, DEFAULT_PROVIDER, default_model
from resumecloner.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Path, provider_name: str = None, model: str = None) -> Path:
    """
    Setup logger for intake context.

    Args:
        log_dir: Directory for this intake session
        provider_name: Extraction provider, for provenance (default: EXTRACTION_PROVIDER)
        model: Model override, for provenance

    Returns:
        Path to log file
    """
    provider = (provider_name or os.getenv("EXTRACTION_PROVIDER", DEFAULT_PROVIDER)).lower()
    if model is None and provider in DEFAULT_MODELS:
        model = default_model(provider)
    return _setup_logger(
        context_name="intake",
        log_dir=log_dir,
        extra_provenance={
            "Extraction provider": provider,
            "Model": model or "unknown",
        },
    )


# Wrapper functions with automatic [intake] prefix


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level intake-specific logging helpers


def log_extraction_result(document, provider_name: str, elapsed_time: float) -> None:
    """
    Log a successful extraction with a summary of the mapped document.

    Args:
        document: ResumeDocument built from the extraction result
        provider_name: Provider that served the call (e.g., "gemini/gemini-flash-latest")
        elapsed_time: Time taken by the provider call and mapping
    """
    name = document.personal_info.full_name or "(unnamed)"
    item_count = sum(len(section.items) for section in document.sections)
    _log_success(f"Extracted {name} via {provider_name} ({elapsed_time:.2f}s)")
    _log_debug(f"  Template: {document.template_id}, font: {document.font_family}, accent: {document.accent_color}")
    _log_debug(f"  Sections: {len(document.sections)}, items: {item_count}")
