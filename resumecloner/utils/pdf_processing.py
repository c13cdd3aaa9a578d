"""
PDF inspection helpers.

Helper functions:
    page_count: Quick page count without full extraction.
    page_sizes_mm: Media box of every page, in millimetres.
"""

from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple, Union

from PyPDF2 import PdfReader

POINTS_PER_MM = 72 / 25.4


def _reader(source: Union[Path, bytes]) -> PdfReader:
    if isinstance(source, (bytes, bytearray)):
        return PdfReader(BytesIO(source))
    return PdfReader(str(source))


def page_count(source: Union[Path, bytes]) -> Optional[int]:
    """Get page count from a PDF path or PDF bytes, or None if unreadable."""
    try:
        return len(_reader(source).pages)
    except Exception:
        return None


def page_sizes_mm(source: Union[Path, bytes]) -> List[Tuple[float, float]]:
    """(width, height) of each page in millimetres."""
    sizes = []
    for page in _reader(source).pages:
        box = page.mediabox
        sizes.append((float(box.width) / POINTS_PER_MM, float(box.height) / POINTS_PER_MM))
    return sizes
