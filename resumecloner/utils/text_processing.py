"""
Text utilities shared across contexts.

- Export file naming
- Hex color validation and normalization
"""

import re

DEFAULT_EXPORT_NAME = "Resume"

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def export_basename(full_name: str) -> str:
    """
    Base file name for exports: whitespace runs collapsed to underscores.

    Blank names fall back to DEFAULT_EXPORT_NAME.

    Examples:
        >>> export_basename("Jane  Doe")
        'Jane_Doe'
        >>> export_basename("   ")
        'Resume'
    """
    name = (full_name or "").strip()
    if not name:
        return DEFAULT_EXPORT_NAME
    return re.sub(r"\s+", "_", name)


def is_hex_color(value: str) -> bool:
    """True for #rgb or #rrggbb."""
    return bool(value) and HEX_COLOR_PATTERN.match(value) is not None


def normalize_hex(value: str) -> str:
    """Expand #rgb to #rrggbb and lowercase. Raises ValueError on anything else."""
    if not is_hex_color(value):
        raise ValueError(f"Invalid hex color: {value!r}")
    digits = value[1:]
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return f"#{digits.lower()}"


def hex_to_rgb(value: str) -> tuple:
    digits = normalize_hex(value)[1:]
    return tuple(int(digits[i : i + 2], 16) for i in (0, 2, 4))


def docx_hex(value: str) -> str:
    """Word-processor color form: RRGGBB, uppercase, no leading '#'."""
    return normalize_hex(value)[1:].upper()
