"""Unit tests for extraction response parsing and result mapping."""

import json

import pytest

from resumecloner.contexts.intake.exceptions import (
    ExtractionFailureError,
    FileTooLargeError,
    UnsupportedFormatError,
)
from resumecloner.contexts.intake.extraction import (
    ResumeExtractor,
    extract_json_payload,
    map_extraction_result,
    parse_extraction_response,
)
from resumecloner.contexts.intake.upload import MAX_UPLOAD_BYTES, Upload, is_supported_media_type, validate_upload
from resumecloner.contexts.templating.resume_data_structure import DetailItem, Position, SectionType, SkillItem
from resumecloner.contexts.templating.rich_text import LineKind, decode
from resumecloner.utils.ids import SequentialIdGenerator

PAYLOAD = '{"personalInfo": {"fullName": "Jane"}, "sections": []}'


# Payload extraction


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    [
        f"```json\n{PAYLOAD}\n```",
        f"Sure! Here it is:\n```json {PAYLOAD} ```\nAnything else?",
        f"```\n{PAYLOAD}\n```",
        f"The result is {PAYLOAD} as requested.",
        PAYLOAD,
    ],
)
def test_extract_json_payload_forms(text):
    """Test fenced, bare-fenced and unfenced responses."""
    assert json.loads(extract_json_payload(text)) == json.loads(PAYLOAD)


@pytest.mark.unit
def test_extract_json_payload_keeps_outermost_braces():
    """Test that nested objects are not cut at the first closing brace."""
    text = 'x {"a": {"b": {"c": 1}}} y'
    assert extract_json_payload(text) == '{"a": {"b": {"c": 1}}}'


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "   ", "no json here", "[1, 2]", "{broken"])
def test_parse_extraction_response_failures(text):
    """Test that empty, non-JSON or non-object responses fail."""
    with pytest.raises(ExtractionFailureError):
        parse_extraction_response(text)


# Mapping


@pytest.mark.unit
def test_map_full_result(extraction_result):
    """Test mapping of a complete extraction result."""
    document = map_extraction_result(
        extraction_result, source_image_url="data:image/png;base64,AAAA", id_generator=SequentialIdGenerator()
    )

    assert document.personal_info.full_name == "Jane Doe"
    assert document.template_id == "t4"
    assert document.accent_color == "#4338ca"
    assert document.font_family == "sans"
    assert document.source_image_url == "data:image/png;base64,AAAA"

    experience, skills = document.sections
    assert experience.items[0] == DetailItem(
        id="id1",
        title="Engineer",
        subtitle="Acme Corp",
        date="2020-2023",
        description="**Led** team of _5_\n• Shipped X\n1. Launched Y",
    )
    assert skills.position == Position.SIDEBAR
    assert [item.name for item in skills.items] == ["Go", "Rust"]


@pytest.mark.unit
def test_map_uses_extraction_style(extraction_result):
    """Test that extracted documents get the extraction spacing defaults."""
    document = map_extraction_result(extraction_result)

    assert document.header_top_padding == 20
    assert document.header_bottom_padding == 24
    assert document.section_title_margin == 12
    assert document.module_spacing == 24
    assert document.name_font_size == 24


@pytest.mark.unit
def test_map_missing_fields_get_defaults():
    """Test that missing or null fields become defaults, never None."""
    data = {
        "personalInfo": {"fullName": None, "email": None},
        "sections": [
            {"items": [{}, {"title": None, "date": None}]},
            {"type": "tag-list", "items": [{}, {"title": "Rust"}]},
            None,
        ],
    }
    document = map_extraction_result(data)

    info = document.personal_info
    for value in (info.full_name, info.job_title, info.email, info.phone, info.summary, info.website):
        assert value == ""

    detail, tags, fallback = document.sections
    assert detail.type == SectionType.DETAIL_LIST
    assert detail.position == Position.MAIN
    assert detail.title == "Section"
    assert [item.title for item in detail.items] == ["Title", "Title"]
    assert all(item.subtitle == "" and item.date == "" and item.description == "" for item in detail.items)

    assert [item.name for item in tags.items] == ["Skill", "Rust"]
    assert all(isinstance(item, SkillItem) for item in tags.items)
    assert fallback.items == ()

    assert document.template_id == "t1"
    assert document.accent_color == "#1e3a8a"
    assert document.font_family == "sans"
    assert document.source_image_url is None


@pytest.mark.unit
def test_map_empty_result():
    """Test that an empty object maps to an empty document on the default template."""
    document = map_extraction_result({})
    assert document.sections == ()
    assert document.template_id == "t1"


@pytest.mark.unit
def test_map_invalid_hints_fall_back(extraction_result):
    """Test unusable visual hints: unknown structure, bad color, unknown font."""
    extraction_result["visualAnalysis"] = {
        "structure": "zigzag",
        "fontStyle": "gothic",
        "accentColor": "light blue",
    }
    extraction_result["sections"][0]["type"] = "timeline"
    extraction_result["sections"][0]["position"] = "footer"

    document = map_extraction_result(extraction_result)

    assert document.template_id == "t1"
    assert document.accent_color == "#1e3a8a"
    assert document.font_family == "sans"
    assert document.sections[0].type == SectionType.DETAIL_LIST
    assert document.sections[0].position == Position.MAIN


@pytest.mark.unit
def test_map_serif_hint(extraction_result):
    extraction_result["visualAnalysis"] = {"structure": "minimal", "fontStyle": "serif", "headerAlignment": "center"}
    document = map_extraction_result(extraction_result)

    assert document.template_id == "t3"
    assert document.font_family == "serif"
    assert document.accent_color == "#4b5563"


@pytest.mark.unit
def test_extracted_description_decodes(extraction_result):
    """Test the mapped description decodes to bold, italic, bullet and ordered parts."""
    document = map_extraction_result(extraction_result)
    lines = decode(document.sections[0].items[0].description)

    assert [(run.text, run.bold, run.italic) for run in lines[0].runs] == [
        ("Led", True, False),
        (" team of ", False, False),
        ("5", False, True),
    ]
    assert lines[1].kind == LineKind.BULLET and lines[1].content == "Shipped X"
    assert lines[2].kind == LineKind.ORDERED and lines[2].marker == "1."


# Uploads and the extractor


@pytest.mark.unit
@pytest.mark.parametrize(
    "media_type, supported",
    [("image/png", True), ("image/jpeg", True), ("application/pdf", True), ("text/plain", False), ("", False)],
)
def test_supported_media_types(media_type, supported):
    assert is_supported_media_type(media_type) is supported


@pytest.mark.unit
def test_validate_upload_limits():
    """Test size cap boundaries."""
    validate_upload(Upload(b"x" * MAX_UPLOAD_BYTES, "image/png"))
    with pytest.raises(FileTooLargeError):
        validate_upload(Upload(b"x" * (MAX_UPLOAD_BYTES + 1), "image/png"))
    with pytest.raises(UnsupportedFormatError):
        validate_upload(Upload(b"x", "application/zip"))


@pytest.mark.unit
def test_extractor_calls_provider(stub_provider, png_bytes):
    """Test a successful extraction keeps the upload as a data URI."""
    document = ResumeExtractor(provider=stub_provider).extract(Upload(png_bytes, "image/png", "cv.png"))

    assert stub_provider.calls == [(len(png_bytes), "image/png")]
    assert document.personal_info.full_name == "Jane Doe"
    assert document.source_image_url.startswith("data:image/png;base64,")


@pytest.mark.unit
def test_extractor_rejects_before_provider_call(stub_provider):
    """Test that invalid uploads never reach the provider."""
    extractor = ResumeExtractor(provider=stub_provider)
    with pytest.raises(UnsupportedFormatError):
        extractor.extract(Upload(b"PK", "application/zip"))
    assert stub_provider.calls == []


@pytest.mark.unit
def test_extractor_wraps_provider_errors(provider_factory, png_bytes):
    """Test that provider failures surface as ExtractionFailureError."""
    extractor = ResumeExtractor(provider=provider_factory(error=ConnectionError("offline")))
    with pytest.raises(ExtractionFailureError):
        extractor.extract(Upload(png_bytes, "image/png"))


@pytest.mark.unit
def test_extractor_malformed_output(provider_factory, png_bytes):
    provider = provider_factory(text="I could not read this resume, sorry.")
    with pytest.raises(ExtractionFailureError) as excinfo:
        ResumeExtractor(provider=provider).extract(Upload(png_bytes, "image/png"))
    assert excinfo.value.raw_text == "I could not read this resume, sorry."
