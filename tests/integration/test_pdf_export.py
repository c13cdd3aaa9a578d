"""
Integration tests for raster capture and PDF export - real Pillow, reportlab and PyPDF2.
"""

import math

import pytest

from resumecloner.contexts.intake.session import ResumeSession
from resumecloner.contexts.rendering.exceptions import RenderCaptureError
from resumecloner.contexts.rendering.layout_engine import LayoutEngine
from resumecloner.contexts.rendering.paginator import export_pdf, paginate
from resumecloner.contexts.rendering.rasterizer import SurfaceRasterizer, capture_surface, presentation_stripped
from resumecloner.contexts.rendering.visual_tree import A4_HEIGHT_PX, A4_WIDTH_PX, DEFAULT_PRESENTATION
from resumecloner.contexts.templating.draft import example_document
from resumecloner.contexts.templating.editing import update_personal_info
from resumecloner.contexts.templating.resume_data_structure import empty_document
from resumecloner.utils import page_count, page_sizes_mm


@pytest.fixture
def surface():
    return LayoutEngine().layout(example_document("t4"))


@pytest.mark.integration
def test_capture_size(surface):
    image = capture_surface(surface, scale=1.5)
    assert image.size == (math.ceil(surface.width * 1.5), math.ceil(surface.height * 1.5))
    assert image.mode == "RGB"


@pytest.mark.integration
def test_capture_has_no_shadow_frame(surface):
    """Test that decoration is stripped during capture and restored after."""
    decorated = SurfaceRasterizer().rasterize(surface, scale=1)
    captured = capture_surface(surface, scale=1)

    assert decorated.width > captured.width
    assert captured.size == (surface.width, surface.height)
    assert surface.presentation == DEFAULT_PRESENTATION


@pytest.mark.integration
def test_capture_paints_sidebar(surface):
    image = capture_surface(surface, scale=1)
    assert image.getpixel((5, image.height - 5)) == (0x1E, 0x1B, 0x4B)
    assert image.getpixel((image.width - 5, image.height - 5)) == (255, 255, 255)


@pytest.mark.integration
@pytest.mark.parametrize("scale", [0, -1])
def test_capture_rejects_bad_scale(surface, scale):
    with pytest.raises(RenderCaptureError):
        capture_surface(surface, scale=scale)


@pytest.mark.integration
def test_presentation_restored_after_failure(surface, monkeypatch):
    """Test that a failing capture still restores shadow, margin and transform."""
    seen = {}

    def explode(self, surface, scale):
        seen.update(surface.presentation)
        raise MemoryError("canvas too large")

    monkeypatch.setattr(SurfaceRasterizer, "rasterize", explode)

    with pytest.raises(RenderCaptureError):
        capture_surface(surface, scale=1)
    assert seen["shadow"] == "none"
    assert surface.presentation == DEFAULT_PRESENTATION


@pytest.mark.integration
def test_presentation_stripped_restores_custom_values(surface):
    surface.presentation["transform"] = "scale(0.8)"
    with presentation_stripped(surface):
        assert surface.presentation["transform"] == "none"
    assert surface.presentation["transform"] == "scale(0.8)"


@pytest.mark.integration
def test_single_page_pdf(tmp_path):
    """Test that an A4-height surface exports as one A4 page named after the person."""
    document = update_personal_info(empty_document(), full_name="Jane Doe")
    surface = LayoutEngine().layout(document)
    assert surface.height == A4_HEIGHT_PX

    path = export_pdf(surface, tmp_path, scale=1)

    assert path == tmp_path / "Jane_Doe.pdf"
    assert page_count(path) == 1
    assert page_count(path.read_bytes()) == 1
    assert page_count(b"not a pdf") is None
    (width, height), = page_sizes_mm(path)
    assert width == pytest.approx(210, abs=0.5)
    assert height == pytest.approx(297, abs=0.5)


@pytest.mark.integration
def test_multi_page_pdf(long_document, tmp_path):
    """Test that a tall surface is sliced into the expected number of pages."""
    surface = LayoutEngine().layout(long_document)
    path = export_pdf(surface, tmp_path, scale=1)

    expected = len(paginate(surface.width, surface.height))
    assert expected >= 2
    assert page_count(path) == expected


@pytest.mark.integration
def test_unnamed_pdf(tmp_path):
    surface = LayoutEngine().layout(empty_document())
    assert export_pdf(surface, tmp_path, scale=1).name == "Resume.pdf"


@pytest.mark.integration
def test_failed_export_writes_nothing(surface, tmp_path, monkeypatch):
    def explode(self, surface, scale):
        raise OSError("font cache unavailable")

    monkeypatch.setattr(SurfaceRasterizer, "rasterize", explode)

    with pytest.raises(RenderCaptureError):
        export_pdf(surface, tmp_path, scale=1)
    assert list(tmp_path.iterdir()) == []


@pytest.mark.integration
def test_unwritable_location_raises_capture_error(surface, tmp_path):
    """Test that a failed file write is reported as a capture error."""
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")

    with pytest.raises(RenderCaptureError):
        export_pdf(surface, blocker / "out", scale=1)


@pytest.mark.integration
def test_session_pdf_write_failure_sets_alert(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    session = ResumeSession(provider=object())
    session.select_template("t1")

    assert session.export_pdf(blocker / "out", scale=1) is None
    assert session.alert == RenderCaptureError.user_message


@pytest.mark.integration
def test_session_pdf_failure_sets_alert(tmp_path, monkeypatch):
    """Test that a failed session export leaves the document and sets an alert."""
    session = ResumeSession(provider=object())
    session.select_template("t1")
    document = session.document

    def explode(self, surface, scale):
        raise RuntimeError("boom")

    monkeypatch.setattr(SurfaceRasterizer, "rasterize", explode)

    assert session.export_pdf(tmp_path, scale=1) is None
    assert session.alert == RenderCaptureError.user_message
    assert session.document is document


@pytest.mark.integration
def test_session_pdf_export(tmp_path):
    session = ResumeSession(provider=object())
    session.select_template("t6")

    path = session.export_pdf(tmp_path, scale=1)

    assert path.exists()
    assert session.alert is None
    assert page_count(path) >= 1
    assert session.surface().width == A4_WIDTH_PX
