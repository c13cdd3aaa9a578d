"""Unit tests for TemplateRegistry class."""

import pytest

from resumecloner.contexts.templating.exceptions import TemplateNotFoundError
from resumecloner.contexts.templating.template_registry import Structure, TemplateRegistry, get_registry


@pytest.fixture(scope="module")
def registry():
    return TemplateRegistry()


@pytest.mark.unit
def test_registry_loads_catalog(registry):
    """Test that the bundled catalog loads every template and font."""
    assert len(registry.templates) == 20
    assert [font.id for font in registry.fonts] == ["sans", "serif", "modern", "classic"]
    assert registry.default_template.id == "t1"
    assert registry.default_font.id == "sans"


@pytest.mark.unit
def test_template_ids_unique(registry):
    """Test that catalog ids are unique."""
    ids = [template.id for template in registry.templates]
    assert len(ids) == len(set(ids))


@pytest.mark.unit
def test_description_with_commas_survives(registry):
    """Test that descriptions containing commas load whole."""
    assert registry.lookup("t1").description == "Deep blue tones for finance, law and other professional fields."


@pytest.mark.unit
def test_lookup(registry):
    """Test direct lookup of a known template."""
    template = registry.lookup("t4")

    assert template.name == "Tech Sidebar"
    assert template.structure == Structure.SIDEBAR_LEFT
    assert template.colors.sidebar_bg == "#1e1b4b"


@pytest.mark.unit
def test_lookup_unknown_raises(registry):
    """Test that strict lookup raises for an unknown id."""
    with pytest.raises(TemplateNotFoundError) as excinfo:
        registry.lookup("t999")
    assert excinfo.value.template_id == "t999"
    assert "t1" in excinfo.value.available


@pytest.mark.unit
def test_resolve_unknown_falls_back_to_first(registry):
    """Test that resolving an unknown id returns the first catalog entry without raising."""
    assert registry.resolve("does-not-exist").id == registry.templates[0].id
    assert registry.resolve("t7").id == "t7"


@pytest.mark.unit
def test_filter_by_structure(registry):
    """Test structure filtering keeps catalog order."""
    modern = registry.filter_by_structure("modern")
    assert [t.id for t in modern] == ["t2", "t12", "t13", "t14", "t19"]
    assert [t.id for t in registry.filter_by_structure(Structure.COMPACT_GRID)] == ["t11"]


@pytest.mark.unit
def test_filter_by_unknown_structure_is_empty(registry):
    """Test that an unknown structure tag matches nothing."""
    assert registry.filter_by_structure("triangle") == []


@pytest.mark.unit
def test_best_match_prefers_font(registry):
    """Test that best_match picks the first candidate with a matching body font."""
    assert registry.best_match("classic", font_style="serif").id == "t17"
    assert registry.best_match("classic", font_style="sans").id == "t1"


@pytest.mark.unit
def test_best_match_prefers_alignment(registry):
    """Test that header alignment narrows candidates when given."""
    assert registry.best_match("modern", font_style="modern", header_alignment="center").id == "t12"
    assert registry.best_match("minimal", font_style="serif", header_alignment="left").id == "t9"


@pytest.mark.unit
def test_best_match_unknown_structure_uses_classic(registry):
    """Test fallback to classic templates for an unknown structure."""
    assert registry.best_match("hexagonal").structure == Structure.CLASSIC
    assert registry.best_match(None).id == "t1"


@pytest.mark.unit
def test_best_match_without_font_match(registry):
    """Test that candidates without a matching font yield the first candidate."""
    assert registry.best_match("compact-grid", font_style="serif").id == "t11"


@pytest.mark.unit
def test_font_option_fallback(registry):
    """Test that unknown font ids fall back to the default font."""
    assert registry.font_option("serif").docx_font == "Times New Roman"
    assert registry.font_option("comic").id == "sans"
    assert registry.has_font("modern")
    assert not registry.has_font("comic")


@pytest.mark.unit
def test_sidebar_structures():
    """Test sidebar detection on structure tags."""
    assert Structure.SIDEBAR_LEFT.has_sidebar
    assert Structure.SIDEBAR_RIGHT.has_sidebar
    assert not Structure.TWO_COLUMN_HEADER.has_sidebar


@pytest.mark.unit
def test_get_registry_is_shared():
    """Test that the process-wide registry is cached."""
    assert get_registry() is get_registry()
