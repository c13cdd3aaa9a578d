"""
Font loading and text measurement with Pillow.

Font files come from the catalog's raster file names (DejaVu families) and are
looked up on the system font path; when a file is missing Pillow's bundled
scalable default font is used instead so layout still works.
"""

import re
from functools import lru_cache
from typing import List, Sequence

from PIL import ImageFont

from resumecloner.contexts.rendering.logger import _log_warning
from resumecloner.contexts.rendering.visual_tree import TextSpan
from resumecloner.contexts.templating.template_registry import FontOption

# Measure at a larger size and scale down for sub-pixel widths
MEASURE_SCALE = 4

TOKEN_PATTERN = re.compile(r"\S+\s*|\s+")

_missing_reported = set()


def _style_key(bold: bool, italic: bool) -> str:
    if bold and italic:
        return "bold_italic"
    if bold:
        return "bold"
    if italic:
        return "italic"
    return "regular"


@lru_cache(maxsize=512)
def load_font(file_name: str, size: int):
    """Load a TrueType font at an integer pixel size, falling back to Pillow's default font."""
    size = max(1, int(size))
    try:
        return ImageFont.truetype(file_name, size)
    except OSError:
        if file_name not in _missing_reported:
            _missing_reported.add(file_name)
            _log_warning(f"Font file {file_name} not found, using Pillow default font")
        return ImageFont.load_default(size=size)


class FontMeasurer:
    """Measures and wraps styled text for one font option."""

    def __init__(self, font_option: FontOption):
        self.font_option = font_option

    def font(self, size: float, bold: bool = False, italic: bool = False, scale: float = 1.0):
        file_name = self.font_option.raster_files[_style_key(bold, italic)]
        return load_font(file_name, round(size * scale))

    def width(self, text: str, size: float, bold: bool = False, italic: bool = False) -> float:
        if not text:
            return 0.0
        font = self.font(size, bold, italic, scale=MEASURE_SCALE)
        return font.getlength(text) / MEASURE_SCALE

    def span_width(self, span: TextSpan) -> float:
        return self.width(span.text, span.size, span.bold, span.italic)

    def line_width(self, spans: Sequence[TextSpan]) -> float:
        return sum(self.span_width(span) for span in spans)

    def _split_token(self, token: str, span: TextSpan, max_width: float) -> List[str]:
        """Break a token wider than max_width into character chunks."""
        chunks, current = [], ""
        for char in token:
            candidate = current + char
            if current and self.width(candidate, span.size, span.bold, span.italic) > max_width:
                chunks.append(current)
                current = char
            else:
                current = candidate
        if current:
            chunks.append(current)
        return chunks

    def wrap(self, spans: Sequence[TextSpan], max_width: float) -> List[List[TextSpan]]:
        """
        Greedy word wrap of styled spans into lines no wider than max_width.

        Whitespace at the start of a wrapped line is dropped; words wider than a
        whole line are broken between characters.

        Returns:
            Lines, each a list of spans (adjacent fragments of one span merged)
        """
        lines: List[List[TextSpan]] = [[]]
        used = 0.0

        def push(fragment: str, span: TextSpan):
            line = lines[-1]
            if line and line[-1].text and _same_style(line[-1], span):
                previous = line[-1]
                line[-1] = TextSpan(previous.text + fragment, span.size, span.color, span.bold, span.italic)
            else:
                line.append(TextSpan(fragment, span.size, span.color, span.bold, span.italic))

        for span in spans:
            for token in TOKEN_PATTERN.findall(span.text):
                token_width = self.width(token, span.size, span.bold, span.italic)
                if used + token_width <= max_width or token.isspace():
                    if token.isspace() and not lines[-1]:
                        continue
                    push(token, span)
                    used += token_width
                    continue

                word = token.rstrip()
                if lines[-1] and used + self.width(word, span.size, span.bold, span.italic) <= max_width:
                    push(word, span)
                    used = max_width
                    continue

                pieces = [token]
                if token_width > max_width:
                    pieces = self._split_token(token, span, max_width)
                for piece in pieces:
                    piece_width = self.width(piece, span.size, span.bold, span.italic)
                    if lines[-1] and used + piece_width > max_width:
                        lines.append([])
                        used = 0.0
                    push(piece, span)
                    used += piece_width

        return [_rstrip_line(line) for line in lines if line]


def _same_style(a: TextSpan, b: TextSpan) -> bool:
    return (a.size, a.color, a.bold, a.italic) == (b.size, b.color, b.bold, b.italic)


def _rstrip_line(line: List[TextSpan]) -> List[TextSpan]:
    if line and line[-1].text != line[-1].text.rstrip():
        last = line[-1]
        stripped = last.text.rstrip()
        line = line[:-1] + ([TextSpan(stripped, last.size, last.color, last.bold, last.italic)] if stripped else [])
    return line
