"""
Integration tests for the HTML preview.
"""

import pytest

from resumecloner.contexts.intake.session import ResumeSession
from resumecloner.contexts.rendering.layout_engine import LayoutEngine
from resumecloner.contexts.rendering.preview import export_preview, render_preview_html
from resumecloner.contexts.templating.draft import example_document
from resumecloner.contexts.templating.editing import update_personal_info


@pytest.mark.integration
def test_preview_page():
    surface = LayoutEngine().layout(example_document("t4"))
    html = render_preview_html(surface)

    assert 'data-template="t4"' in html
    assert "<title>Alex Morgan</title>" in html
    assert "ALEX MORGAN" in html
    assert "width: 794px;" in html
    assert "box-shadow: 0 25px 50px" in html
    assert "sidebar-background" in html


@pytest.mark.integration
def test_preview_escapes_text():
    document = update_personal_info(example_document("t1"), full_name="<Jane & Co>")
    html = render_preview_html(LayoutEngine().layout(document))

    assert "&lt;JANE &amp; CO&gt;" in html
    assert "<JANE" not in html


@pytest.mark.integration
def test_preview_placeholder_initial():
    html = render_preview_html(LayoutEngine().layout(example_document("t3")))
    assert "placeholder" in html
    assert ">A</div>" in html


@pytest.mark.integration
def test_export_preview(tmp_path):
    path = export_preview(LayoutEngine().layout(example_document("t2")), tmp_path)

    assert path.name == "Alex_Morgan_Preview.html"
    assert "header-band" in path.read_text(encoding="utf-8")


@pytest.mark.integration
def test_session_preview_follows_edits():
    """Test that the session preview reflects the current document."""
    session = ResumeSession(provider=object())
    session.select_template("t5")
    session.edit(update_personal_info, full_name="Jane Doe")

    html = session.preview_html()
    assert 'data-template="t5"' in html
    assert "JANE DOE" in html
