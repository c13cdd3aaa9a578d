"""
Rich-text markup used inside free-text resume fields (summary, item descriptions).

Grammar:
- Inline: **bold** and _italic_ spans, non-nesting, matched non-greedily
- Line prefixes (on the trimmed line): bullet markers (•, -, * or a [ ]/[x]/[X]
  checkbox, followed by whitespace) and ordered markers (1. or 1) followed by
  whitespace)

The source text is the markup: there is no encode step. Every renderer decodes
with decode() so all targets see the same line/run structure.

Examples:
    >>> split_inline("**Led** team of _5_")
    [Run(text='Led', bold=True, italic=False), Run(text=' team of ', bold=False, italic=False),
     Run(text='5', bold=False, italic=True)]
    >>> classify_line("1. Launched Y").number
    1
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

INLINE_PATTERN = re.compile(r"(\*\*.*?\*\*|_.*?_)")
BULLET_PATTERN = re.compile(r"^(?:[•\-\*]|\[[ xX]\])\s+(.*)$")
ORDERED_PATTERN = re.compile(r"^(\d+)[.)]\s+(.*)$")
ORDERED_PREFIX_PATTERN = re.compile(r"^(\d+)[.)]\s")

BULLET_PREFIX = "• "

# Inserted when a bold/italic operation is applied to an empty selection
PLACEHOLDERS = {
    "bold": "bold text",
    "italic": "italic text",
}

INLINE_MARKERS = {
    "bold": "**",
    "italic": "_",
}


class LineKind(str, Enum):
    PLAIN = "plain"
    BULLET = "bullet"
    ORDERED = "ordered"


@dataclass(frozen=True)
class Run:
    """A span of text with uniform inline styling."""

    text: str
    bold: bool = False
    italic: bool = False


@dataclass(frozen=True)
class RichLine:
    """
    One decoded source line.

    Attributes:
        kind: plain, bullet or ordered
        content: Line text with any list marker stripped
        runs: Inline runs of content
        number: Ordered-list number (ordered lines only)
    """

    kind: LineKind
    content: str
    runs: Tuple[Run, ...] = ()
    number: Optional[int] = None

    @property
    def is_list_item(self) -> bool:
        return self.kind in (LineKind.BULLET, LineKind.ORDERED)

    @property
    def marker(self) -> str:
        """Display marker for the line ("•", "3." or "")."""
        if self.kind == LineKind.BULLET:
            return "•"
        if self.kind == LineKind.ORDERED:
            return f"{self.number}."
        return ""


@dataclass(frozen=True)
class FormatEdit:
    """Result of an editing-surface formatting operation."""

    text: str
    cursor: int


def split_inline(text: str) -> List[Run]:
    """
    Split text into bold, italic and plain runs.

    Order and every character outside the markers are preserved; empty
    fragments are dropped.
    """
    runs = []
    for part in INLINE_PATTERN.split(text):
        if not part:
            continue
        if len(part) >= 4 and part.startswith("**") and part.endswith("**"):
            runs.append(Run(part[2:-2], bold=True))
        elif len(part) >= 2 and part.startswith("_") and part.endswith("_"):
            runs.append(Run(part[1:-1], italic=True))
        else:
            runs.append(Run(part))
    return runs


def classify_line(line: str) -> RichLine:
    """Classify one source line as bullet, ordered or plain and split its content into runs."""
    trimmed = line.strip()

    match = BULLET_PATTERN.match(trimmed)
    if match:
        content = match.group(1)
        return RichLine(LineKind.BULLET, content, tuple(split_inline(content)))

    match = ORDERED_PATTERN.match(trimmed)
    if match:
        content = match.group(2)
        return RichLine(LineKind.ORDERED, content, tuple(split_inline(content)), int(match.group(1)))

    return RichLine(LineKind.PLAIN, line, tuple(split_inline(line)))


def decode(text: str) -> List[RichLine]:
    """
    Decode markup text into one RichLine per newline-delimited source line.

    Pure: decoding the same text twice yields equal results.
    """
    if not text:
        return []
    return [classify_line(line) for line in text.split("\n")]


def plain_text(text: str) -> str:
    """Markup stripped of inline markers and list prefixes, line structure kept."""
    lines = []
    for line in decode(text):
        body = "".join(run.text for run in line.runs)
        lines.append(f"{line.marker} {body}" if line.marker else body)
    return "\n".join(lines)


def _line_start(text: str, position: int) -> int:
    """Start offset of the line containing position."""
    return text.rfind("\n", 0, position) + 1


def insert_format(text: str, start: int, end: int, operation: str) -> FormatEdit:
    """
    Apply a formatting operation to a text selection.

    Args:
        text: Current field text
        start: Selection start offset
        end: Selection end offset (== start for a bare cursor)
        operation: "bold", "italic", "bullet" or "ordered"

    Returns:
        FormatEdit with the new text and cursor offset

    Raises:
        ValueError: If the operation is unknown
    """
    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))

    if operation in INLINE_MARKERS:
        marker = INLINE_MARKERS[operation]
        selected = text[start:end] or PLACEHOLDERS[operation]
        wrapped = f"{marker}{selected}{marker}"
        return FormatEdit(text[:start] + wrapped + text[end:], start + len(wrapped))

    if operation == "bullet":
        line_start = _line_start(text, start)
        new_text = text[:line_start] + BULLET_PREFIX + text[line_start:]
        return FormatEdit(new_text, start + len(BULLET_PREFIX))

    if operation == "ordered":
        line_start = _line_start(text, start)
        number = 1
        # Blank lines between the cursor and the last numbered line are skipped
        previous_line = text[:line_start].strip().split("\n")[-1].strip()
        match = ORDERED_PREFIX_PATTERN.match(previous_line)
        if match:
            number = int(match.group(1)) + 1
        prefix = f"{number}. "
        new_text = text[:line_start] + prefix + text[line_start:]
        return FormatEdit(new_text, start + len(prefix))

    raise ValueError(f"Unknown format operation: {operation!r}")
