"""
Session logging built on loguru.

Each command run writes one log directory (outs/logs/<phase>_<timestamp>) holding
a <context>.log file with DEBUG detail, while the console shows INFO and above.
The file opens with a provenance block recording how the session was started.

Contexts wrap this module in contexts/{context}/logger.py and add their own
message prefix; library code never configures sinks itself.
"""

import os
import platform
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from resumecloner.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("RESUMECLONER_LOGS_PATH", "outs/logs"))
CONSOLE_LEVEL = os.getenv("RESUMECLONER_LOG_LEVEL", "INFO")

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {message}"
CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <7}</level> | <level>{message}</level>"

# Console colors per level; levels not listed keep loguru's defaults
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

RULE = "-" * 72


def package_version() -> str:
    try:
        return version("resumecloner")
    except PackageNotFoundError:
        return "unknown (not installed)"


def session_log_dir(phase: str) -> Path:
    """Fresh timestamped directory name for one command run, e.g. outs/logs/export_20251114_123456."""
    return LOGS_PATH / f"{phase}_{now()}"


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: dict = None,
    level_colors: dict = None,
    console_level: str = None,
) -> Path:
    """
    Route loguru output to a session log file and the console.

    Any previously configured sinks are removed, so calling this twice in one
    process moves logging to the new directory.

    Args:
        context_name: Log file stem ("render", "intake", "template")
        log_dir: Session directory, created when missing
        extra_provenance: Context settings recorded in the provenance block
        level_colors: Console color overrides, e.g. {"INFO": "<cyan>"}
        console_level: Minimum console level (defaults to RESUMECLONER_LOG_LEVEL)

    Returns:
        Path to the log file
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level or CONSOLE_LEVEL, colorize=True)

    log_provenance(context_name, extra_provenance)
    return log_file


def log_provenance(context_name: str, extra_context: dict = None) -> None:
    """Write the session header: tool version, invocation and environment, then context settings."""
    logger.info(RULE)
    logger.info(f"resumecloner {package_version()} [{context_name}]")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python {platform.python_version()} on {platform.system()} {platform.machine()}")
    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")
    logger.info(RULE)
