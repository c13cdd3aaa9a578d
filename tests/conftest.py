"""Shared fixtures: a stub extraction provider, sample extraction responses and documents."""

import copy
import json
from io import BytesIO

import pytest
from PIL import Image

from resumecloner.utils.llm import ExtractionResponse

EXTRACTION_RESULT = {
    "personalInfo": {
        "fullName": "Jane Doe",
        "jobTitle": "Engineer",
        "email": "jane@example.com",
        "summary": "Builds **reliable** systems.",
    },
    "sections": [
        {
            "title": "Experience",
            "type": "detail-list",
            "position": "main",
            "items": [
                {
                    "title": "Engineer",
                    "subtitle": "Acme Corp",
                    "date": "2020-2023",
                    "description": "**Led** team of _5_\n• Shipped X\n1. Launched Y",
                }
            ],
        },
        {"title": "Skills", "type": "tag-list", "position": "sidebar", "items": [{"name": "Go"}, {"title": "Rust"}]},
    ],
    "visualAnalysis": {
        "structure": "sidebar-left",
        "headerAlignment": "left",
        "fontStyle": "sans",
        "accentColor": "#4338ca",
    },
}


def make_png(size=(8, 8), color="#336699") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


class StubProvider:
    """Extraction provider double: returns a canned response or raises, and records calls."""

    name = "stub/test"

    def __init__(self, text: str = None, error: Exception = None):
        self.text = json.dumps(EXTRACTION_RESULT) if text is None else text
        self.error = error
        self.calls = []

    def extract(self, payload: bytes, media_type: str, prompt: str) -> ExtractionResponse:
        self.calls.append((len(payload), media_type))
        if self.error is not None:
            raise self.error
        return ExtractionResponse(text=self.text, model="stub")


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def provider_factory():
    """StubProvider class, for tests that need a custom response or error."""
    return StubProvider


@pytest.fixture
def extraction_result():
    return copy.deepcopy(EXTRACTION_RESULT)


@pytest.fixture
def long_document():
    """Sample resume with enough experience entries to run past two pages."""
    from dataclasses import replace

    from resumecloner.contexts.templating.draft import example_document
    from resumecloner.contexts.templating.resume_data_structure import DetailItem

    document = example_document("t1")
    experience = document.sections[0]
    description = "\n".join(f"• Delivered outcome number {n} across several product teams" for n in range(6))
    items = tuple(
        DetailItem(id=f"job{n}", title=f"Role {n}", subtitle="Company", date="2015-2020", description=description)
        for n in range(14)
    )
    return replace(document, sections=(replace(experience, items=items),) + document.sections[1:])
