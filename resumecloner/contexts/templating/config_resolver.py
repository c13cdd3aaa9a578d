"""
Style Preset Resolution for Resume Documents

Applies named style presets to a ResumeDocument. Presets are composable and can
override each other, allowing flexible combination of spacing and type scales.

Examples:
    # Apply multiple presets (later overrides earlier)
    >>> apply_presets(document, ["spacing_tight", "type_large"])
"""

import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv
from omegaconf import OmegaConf

from resumecloner.contexts.templating import defaults
from resumecloner.contexts.templating.logger import _log_debug
from resumecloner.contexts.templating.resume_data_structure import ResumeDocument

load_dotenv()
RESUME_PRESETS_PATH = Path(os.getenv("RESUME_PRESETS_PATH", Path(__file__).parent / "presets.yaml"))


def load_resume_presets(config_path: Path = None) -> Dict[str, Any]:
    """
    Load presets.yaml and flatten to a single-level dict.

    Collapses nested structure: spacing.tight -> spacing_tight

    Args:
        config_path: Optional path to config file (defaults to RESUME_PRESETS_PATH)

    Returns:
        Flattened dict mapping preset names to style overrides
        Example: {"spacing_tight": {...}, "type_large": {...}}
    """
    if config_path is None:
        config_path = RESUME_PRESETS_PATH

    nested = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)

    flattened = {}
    for category, presets in nested.items():
        for name, config in presets.items():
            flattened[f"{category}_{name}"] = config

    return flattened


def apply_presets(
    document: ResumeDocument,
    preset_names: List[str],
    config_path: Path = None,
) -> ResumeDocument:
    """
    Apply named style presets to a document.

    Presets are applied in order, with later presets overriding earlier ones.
    Each preset's keys must be ResumeDocument style parameters.

    Args:
        document: Document to restyle
        preset_names: Preset names to apply (e.g., ["spacing_tight", "type_large"])
        config_path: Optional path to a presets file (defaults to RESUME_PRESETS_PATH)

    Returns:
        New document with presets applied

    Raises:
        ValueError: If a preset is not found or sets an unknown parameter
    """
    if not preset_names:
        return document

    presets_dict = load_resume_presets(config_path)

    style: Dict[str, Any] = {}
    for preset_name in preset_names:
        if preset_name not in presets_dict:
            available = list(presets_dict.keys())
            raise ValueError(f"Preset '{preset_name}' not found. Available presets: {available}")

        preset_config = presets_dict[preset_name]
        unknown = sorted(set(preset_config) - set(defaults.STYLE_FIELDS))
        if unknown:
            raise ValueError(f"Preset '{preset_name}' sets unknown style parameters: {unknown}")

        style.update(preset_config)
        _log_debug(f"Applied preset {preset_name}")

    return replace(document, **style)
