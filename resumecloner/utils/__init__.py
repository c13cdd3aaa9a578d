"""
Shared utilities for ResumeCloner.

Common functionality used across contexts:
- Logging setup
- Id generation
- Text, color and file-name helpers
- Embedded image and PDF helpers
- Extraction provider access
"""

from resumecloner.utils.ids import IdGenerator, RandomIdGenerator, SequentialIdGenerator
from resumecloner.utils.pdf_processing import page_count, page_sizes_mm
from resumecloner.utils.text_processing import export_basename
from resumecloner.utils.timestamp import now, today

__all__ = [
    "IdGenerator",
    "RandomIdGenerator",
    "SequentialIdGenerator",
    "export_basename",
    "page_count",
    "page_sizes_mm",
    "now",
    "today",
]
