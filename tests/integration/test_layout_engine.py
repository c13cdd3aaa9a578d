"""
Integration tests for the layout engine - real font measurement with Pillow.
"""

from dataclasses import replace

import pytest

from resumecloner.contexts.rendering.layout_engine import LayoutEngine
from resumecloner.contexts.rendering.visual_tree import A4_HEIGHT_PX, A4_WIDTH_PX, NodeKind
from resumecloner.contexts.templating.draft import example_document
from resumecloner.contexts.templating.editing import update_personal_info
from resumecloner.contexts.templating.resume_data_structure import empty_document
from resumecloner.contexts.templating.template_registry import get_registry


@pytest.mark.integration
@pytest.mark.parametrize("template_id", ["t1", "t2", "t3", "t4", "t5", "t6", "t11"])
def test_layout_every_structure(template_id):
    """Test that each structure lays out the sample at A4 width."""
    surface = LayoutEngine().layout(example_document(template_id))

    assert surface.width == A4_WIDTH_PX
    assert surface.height >= A4_HEIGHT_PX
    assert surface.template_id == template_id
    assert surface.full_name == "Alex Morgan"
    assert surface.find_text("ALEX")
    assert surface.find_text("EXPERIENCE")
    assert surface.nodes_with_role("profile")


@pytest.mark.integration
@pytest.mark.parametrize("template_id", ["t1", "t4", "t6", "t11"])
def test_text_stays_on_the_page(template_id):
    surface = LayoutEngine().layout(example_document(template_id))
    for node in surface.text_nodes():
        assert node.x >= -1
        assert node.x + node.width <= surface.width + 1


@pytest.mark.integration
@pytest.mark.parametrize("template_id, left", [("t4", True), ("t5", False)])
def test_sidebar_background_spans_surface(template_id, left):
    """Test the sidebar underlay is painted first and covers the full height."""
    surface = LayoutEngine().layout(example_document(template_id))
    background = surface.nodes[0]

    assert background.role == "sidebar-background"
    assert background.height == surface.height
    assert background.width == pytest.approx(A4_WIDTH_PX * 0.32)
    if left:
        assert background.x == 0
    else:
        assert background.x + background.width == pytest.approx(A4_WIDTH_PX)


@pytest.mark.integration
def test_modern_header_band():
    surface = LayoutEngine().layout(example_document("t2"))
    (band,) = surface.nodes_with_role("header-band")

    assert band.x == 0 and band.y == 0
    assert band.width == A4_WIDTH_PX
    assert band.fill == get_registry().lookup("t2").colors.primary
    name = surface.find_text("ALEX")[0]
    assert name.y < band.bottom


@pytest.mark.integration
def test_empty_document_is_one_page():
    surface = LayoutEngine().layout(empty_document())
    assert surface.height == A4_HEIGHT_PX
    assert surface.page_ratio == pytest.approx(1.0)


@pytest.mark.integration
def test_long_document_grows_surface(long_document):
    surface = LayoutEngine().layout(long_document)
    assert surface.height > A4_HEIGHT_PX * 1.5


@pytest.mark.integration
def test_profile_placeholder_initial():
    """Test that a missing picture becomes a placeholder with the name's initial."""
    surface = LayoutEngine().layout(example_document("t1"))
    (profile,) = surface.nodes_with_role("profile")

    assert profile.kind == NodeKind.IMAGE
    assert profile.image_uri == ""
    assert profile.placeholder == "A"


@pytest.mark.integration
def test_rich_text_markers():
    """Test that bullet and ordered lines get markers in the accent color."""
    document = example_document("t1")
    experience = document.sections[0]
    item = replace(experience.items[0], description="• First point\n2. Second point")
    document = replace(document, sections=(replace(experience, items=(item,)),))

    surface = LayoutEngine().layout(document)
    markers = surface.nodes_with_role("body-marker")

    assert [node.text for node in markers] == ["•", "2."]
    assert all(node.spans[0].color == document.accent_color for node in markers)
    assert surface.find_text("First point")


@pytest.mark.integration
def test_template_override():
    """Test that an explicit template wins over the document's template id."""
    registry = get_registry()
    document = update_personal_info(example_document("t1"), summary="")
    surface = LayoutEngine().layout(document, template=registry.lookup("t8"))

    assert surface.template_id == "t8"
    assert surface.nodes[0].role == "sidebar-background"
