"""Unit tests for JSON draft serialization."""

import json

import pytest

from resumecloner.contexts.templating.draft import (
    deserialize,
    draft_filename,
    example_document,
    export_draft,
    from_dict,
    load_draft,
    serialize,
    to_dict,
)
from resumecloner.contexts.templating.editing import add_item, update_item, update_personal_info
from resumecloner.contexts.templating.exceptions import InvalidDraftFormatError
from resumecloner.contexts.templating.layout_plan import plan_layout
from resumecloner.contexts.templating.resume_data_structure import (
    DetailItem,
    ResumeDocument,
    Section,
    SectionType,
    SkillItem,
    empty_document,
)
from resumecloner.utils.ids import SequentialIdGenerator


@pytest.mark.unit
def test_round_trip_example_document():
    """Test that serialize then deserialize gives an equal document."""
    document = example_document("t4")
    assert deserialize(serialize(document)) == document


@pytest.mark.unit
def test_round_trip_edited_document():
    """Test round-trip of a document with unicode text and a source image."""
    document = update_personal_info(empty_document(), full_name="Zoë Ørsted", summary="**Bold** _it_\n• one")
    document = add_item(document, "1", SequentialIdGenerator("x"))
    document = update_item(document, "1", "x1", description="1. first\n2) second")

    restored = deserialize(serialize(document))
    assert restored == document
    assert "Zoë Ørsted" in serialize(document)


@pytest.mark.unit
def test_round_trip_keeps_source_image():
    from dataclasses import replace

    document = replace(empty_document(), source_image_url="data:image/png;base64,AAAA")
    assert deserialize(serialize(document)).source_image_url == "data:image/png;base64,AAAA"


@pytest.mark.unit
def test_draft_keys_are_camel_case():
    """Test the draft field names."""
    data = to_dict(example_document())

    assert set(data["personalInfo"]) >= {"fullName", "jobTitle", "dateOfBirth", "profilePicture"}
    assert data["nameFontSize"] == 24
    assert data["lineHeight"] == 1.5
    assert data["sections"][0]["type"] == "detail-list"
    assert "sourceImageUrl" not in data


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[]",
        json.dumps({"sections": []}),
        json.dumps({"personalInfo": {}}),
        json.dumps({"personalInfo": "Jane", "sections": []}),
        json.dumps({"personalInfo": {}, "sections": [{"type": "pie-chart"}]}),
        json.dumps({"personalInfo": {}, "sections": [], "accentColor": "green"}),
    ],
)
def test_invalid_drafts_raise(text):
    """Test that malformed drafts raise InvalidDraftFormatError."""
    with pytest.raises(InvalidDraftFormatError) as excinfo:
        deserialize(text)
    assert excinfo.value.user_message


@pytest.mark.unit
def test_minimal_draft_gets_defaults():
    """Test that a draft with only the required keys is filled with defaults."""
    document = from_dict(
        {"personalInfo": {"fullName": "Jane"}, "sections": [{"title": "Work", "items": [{"title": "Dev"}]}]},
        id_generator=SequentialIdGenerator("g"),
    )

    assert document.personal_info.full_name == "Jane"
    assert document.personal_info.email == ""
    assert document.template_id == "t1"
    assert document.accent_color == "#1e3a8a"
    assert document.body_font_size == 10
    section = document.sections[0]
    assert section.id == "g1"
    assert section.type.value == "detail-list"
    assert section.position.value == "main"
    assert section.items[0].id == "g2"


@pytest.mark.unit
def test_unknown_template_in_draft_is_kept():
    """Test that an unregistered templateId survives import and is resolved only when planned."""
    document = deserialize(json.dumps({"personalInfo": {}, "sections": [], "templateId": "t404"}))

    assert document.template_id == "t404"
    assert document.accent_color == "#1e3a8a"
    assert plan_layout(document).template.id == "t1"


@pytest.mark.unit
def test_non_string_template_id_raises():
    with pytest.raises(InvalidDraftFormatError):
        deserialize(json.dumps({"personalInfo": {}, "sections": [], "templateId": 4}))


@pytest.mark.unit
@pytest.mark.parametrize(
    "document",
    [
        ResumeDocument(template_id="custom"),
        ResumeDocument(template_id="", font_family=""),
        ResumeDocument(
            sections=(
                Section(id="", type=SectionType.DETAIL_LIST, items=(DetailItem(id=""),)),
                Section(id="0", type=SectionType.TAG_LIST, items=(SkillItem(id=""), SkillItem(id="0"))),
            )
        ),
        ResumeDocument(name_font_size=0, line_height=0.0, source_image_url=""),
    ],
    ids=["unregistered-template", "blank-template-and-font", "blank-ids", "zero-style"],
)
def test_round_trip_edge_documents(document):
    """Test that documents with unusual but valid values come back equal."""
    assert deserialize(serialize(document), id_generator=SequentialIdGenerator("new")) == document


@pytest.mark.unit
def test_duplicate_ids_are_replaced():
    """Test that duplicate section ids in a draft get fresh ids."""
    data = {
        "personalInfo": {},
        "sections": [{"id": "s", "type": "tag-list"}, {"id": "s", "type": "tag-list"}],
    }
    document = from_dict(data, id_generator=SequentialIdGenerator("new"))
    assert [s.id for s in document.sections] == ["s", "new1"]


@pytest.mark.unit
def test_export_and_load_draft(tmp_path):
    """Test draft files on disk."""
    document = example_document()
    path = export_draft(document, tmp_path)

    assert path.name == "Alex_Morgan_Draft.json"
    assert load_draft(path) == document


@pytest.mark.unit
def test_draft_filename_for_blank_name():
    assert draft_filename(empty_document()) == "Resume_Draft.json"
