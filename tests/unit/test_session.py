"""Unit tests for the ResumeSession controller and its error recovery."""

import json

import pytest

from resumecloner.contexts.intake.session import ResumeSession, View
from resumecloner.contexts.intake.upload import Upload
from resumecloner.contexts.templating.draft import serialize
from resumecloner.contexts.templating.editing import update_personal_info
from resumecloner.contexts.templating.resume_data_structure import empty_document


@pytest.mark.unit
def test_new_session_state():
    session = ResumeSession(provider=object())

    assert session.view == View.HOME
    assert session.document == empty_document()
    assert not session.processing
    assert session.error is None


@pytest.mark.unit
def test_oversized_upload_rejected_without_provider_call(stub_provider):
    """Test that a 25MB image fails validation before any network call."""
    session = ResumeSession(provider=stub_provider)
    upload = Upload(b"\0" * (25 * 1024 * 1024), "image/png", "huge.png")

    assert session.upload(upload) is False
    assert stub_provider.calls == []
    assert session.view == View.HOME
    assert not session.processing
    assert "20MB" in session.error


@pytest.mark.unit
def test_unsupported_upload_rejected(stub_provider):
    session = ResumeSession(provider=stub_provider)

    assert session.upload(Upload(b"hello", "text/plain", "notes.txt")) is False
    assert stub_provider.calls == []
    assert "Unsupported file format" in session.error


@pytest.mark.unit
def test_successful_upload_opens_editor(stub_provider, png_bytes):
    session = ResumeSession(provider=stub_provider)

    assert session.upload(Upload(png_bytes, "image/png", "cv.png")) is True
    assert session.view == View.EDITOR
    assert session.has_data
    assert session.document.personal_info.full_name == "Jane Doe"
    assert session.error is None
    assert not session.processing


@pytest.mark.unit
def test_extraction_failure_reverts_to_empty_document(provider_factory, png_bytes):
    """Test that a failed extraction aborts the session back to home."""
    session = ResumeSession(provider=provider_factory(error=RuntimeError("503")))
    session.edit(update_personal_info, full_name="Someone")

    assert session.upload(Upload(png_bytes, "image/png")) is False
    assert session.document == empty_document()
    assert session.view == View.HOME
    assert session.error
    assert not session.processing


@pytest.mark.unit
def test_unparseable_extraction_reverts(provider_factory, png_bytes):
    session = ResumeSession(provider=provider_factory(text="```json\n{not json\n```"))

    assert session.upload(Upload(png_bytes, "image/png")) is False
    assert session.view == View.HOME
    assert session.error == "Failed to analyze resume. Please try again."


@pytest.mark.unit
def test_upload_rejected_while_processing(stub_provider, png_bytes):
    session = ResumeSession(provider=stub_provider)
    session.processing = True

    assert session.upload(Upload(png_bytes, "image/png")) is False
    assert session.import_draft(serialize(empty_document())) is False
    assert stub_provider.calls == []


@pytest.mark.unit
def test_import_draft_opens_editor():
    session = ResumeSession(provider=object())
    draft = serialize(update_personal_info(empty_document(), full_name="Jane Doe"))

    assert session.import_draft(draft) is True
    assert session.view == View.EDITOR
    assert session.document.personal_info.full_name == "Jane Doe"


@pytest.mark.unit
@pytest.mark.parametrize("text", ["{oops", json.dumps({"sections": []})])
def test_failed_import_leaves_session_untouched(text):
    """Test that a bad draft keeps the current document and view."""
    session = ResumeSession(provider=object())
    session.select_template("t5")
    document = session.document

    assert session.import_draft(text) is False
    assert session.document is document
    assert session.view == View.EDITOR
    assert session.error.startswith("Could not load draft")


@pytest.mark.unit
def test_select_template():
    session = ResumeSession(provider=object())
    session.browse_templates()
    assert session.view == View.TEMPLATES

    session.select_template("t8")
    assert session.view == View.EDITOR
    assert session.document.template_id == "t8"
    assert session.document.accent_color == "#0f172a"
    assert [s.title for s in session.document.sections] == ["Experience", "Education", "Skills"]


@pytest.mark.unit
def test_edit_and_reset():
    session = ResumeSession(provider=object())
    session.select_template("t2")
    session.edit(update_personal_info, full_name="Jane Doe")
    assert session.document.personal_info.full_name == "Jane Doe"

    session.reset()
    assert session.view == View.HOME
    assert session.document == empty_document()
