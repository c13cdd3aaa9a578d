"""
Template Registry

Fixed catalog of visual templates and font options, loaded once from catalog.yaml.
Templates are read-only reference data: each declares a layout structure tag,
a color palette, a font pair and a header alignment.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from omegaconf import OmegaConf

from resumecloner.contexts.templating.exceptions import TemplateNotFoundError
from resumecloner.contexts.templating.logger import log_template_fallback

CATALOG_PATH = Path(__file__).parent / "catalog.yaml"


class Structure(str, Enum):
    """Layout algorithm identifier declared by a template."""

    CLASSIC = "classic"
    MODERN = "modern"
    MINIMAL = "minimal"
    SIDEBAR_LEFT = "sidebar-left"
    SIDEBAR_RIGHT = "sidebar-right"
    TWO_COLUMN_HEADER = "two-column-header"
    COMPACT_GRID = "compact-grid"

    @property
    def has_sidebar(self) -> bool:
        return self in (Structure.SIDEBAR_LEFT, Structure.SIDEBAR_RIGHT)


@dataclass(frozen=True)
class TemplateColors:
    primary: str
    secondary: str
    text: str
    background: str
    sidebar_bg: Optional[str] = None


@dataclass(frozen=True)
class TemplateFonts:
    body: str
    headings: str


@dataclass(frozen=True)
class Template:
    """
    A named visual template.

    Attributes:
        id: Unique id in the catalog (e.g. "t1")
        name: Display name
        description: One-line description for template pickers
        structure: Layout structure tag
        header_alignment: "left" or "center"
        colors: Color palette
        fonts: Body/heading font option ids
    """

    id: str
    name: str
    description: str
    structure: Structure
    colors: TemplateColors
    fonts: TemplateFonts
    header_alignment: str = "left"


@dataclass(frozen=True)
class FontOption:
    """
    A selectable document font.

    Attributes:
        id: Font option id referenced by ResumeDocument.font_family
        name: Display name
        css: CSS font stack for HTML previews
        docx_font: Font name written into word-processor runs
        raster_files: Font file names for rasterization keyed by
            "regular", "bold", "italic", "bold_italic"
    """

    id: str
    name: str
    css: str
    docx_font: str
    raster_files: Dict[str, str]


def _template_from_dict(data: Dict) -> Template:
    colors = data["colors"]
    return Template(
        id=data["id"],
        name=data["name"],
        description=data.get("description", ""),
        structure=Structure(data["structure"]),
        header_alignment=data.get("header_alignment") or "left",
        colors=TemplateColors(
            primary=colors["primary"],
            secondary=colors["secondary"],
            text=colors["text"],
            background=colors["background"],
            sidebar_bg=colors.get("sidebar_bg"),
        ),
        fonts=TemplateFonts(body=data["fonts"]["body"], headings=data["fonts"]["headings"]),
    )


def _font_from_dict(data: Dict) -> FontOption:
    return FontOption(
        id=data["id"],
        name=data["name"],
        css=data["css"],
        docx_font=data["docx_font"],
        raster_files=dict(data["raster"]),
    )


class TemplateRegistry:
    """
    Read-only catalog of templates and font options.

    The catalog is fixed when the registry is created; there are no mutation
    operations. The first catalog entry is the default template, the first font
    option the default font.
    """

    def __init__(self, catalog_path: Path = None):
        """
        Load the catalog.

        Args:
            catalog_path: YAML catalog file. Defaults to catalog.yaml beside this module.
        """
        if catalog_path is None:
            catalog_path = CATALOG_PATH

        self.catalog_path = Path(catalog_path)
        catalog = OmegaConf.to_container(OmegaConf.load(self.catalog_path), resolve=True)

        self._templates: List[Template] = [_template_from_dict(t) for t in catalog["templates"]]
        self._by_id: Dict[str, Template] = {t.id: t for t in self._templates}
        self._fonts: List[FontOption] = [_font_from_dict(f) for f in catalog["fonts"]]
        self._fonts_by_id: Dict[str, FontOption] = {f.id: f for f in self._fonts}

        if not self._templates:
            raise ValueError(f"Template catalog is empty: {self.catalog_path}")
        if not self._fonts:
            raise ValueError(f"Font catalog is empty: {self.catalog_path}")

    @property
    def templates(self) -> List[Template]:
        """All templates in catalog order."""
        return list(self._templates)

    @property
    def fonts(self) -> List[FontOption]:
        """All font options in catalog order."""
        return list(self._fonts)

    @property
    def default_template(self) -> Template:
        return self._templates[0]

    @property
    def default_font(self) -> FontOption:
        return self._fonts[0]

    def lookup(self, template_id: str) -> Template:
        """
        Get a template by id.

        Raises:
            TemplateNotFoundError: If the id is not in the catalog
        """
        try:
            return self._by_id[template_id]
        except KeyError:
            raise TemplateNotFoundError(template_id, list(self._by_id)) from None

    def contains(self, template_id: str) -> bool:
        return template_id in self._by_id

    def resolve(self, template_id: str) -> Template:
        """Get a template by id, falling back to the default template when unknown."""
        try:
            return self.lookup(template_id)
        except TemplateNotFoundError:
            log_template_fallback(template_id, self.default_template.id)
            return self.default_template

    def filter_by_structure(self, structure) -> List[Template]:
        """Templates declaring the given structure tag, in catalog order (possibly empty)."""
        try:
            structure = Structure(structure)
        except ValueError:
            return []
        return [t for t in self._templates if t.structure == structure]

    def best_match(
        self,
        structure: Optional[str],
        font_style: Optional[str] = None,
        header_alignment: Optional[str] = None,
    ) -> Template:
        """
        Pick the template closest to a detected visual style.

        Candidates are the templates with the requested structure; when there are
        none, the classic templates; when those are missing too, the default
        template. Among candidates, prefer one whose body font matches font_style
        (and header_alignment, when given).

        Args:
            structure: Detected layout structure tag
            font_style: Detected font style ("sans", "serif", ...)
            header_alignment: Detected header alignment ("left" or "center")

        Returns:
            The best matching template (never raises)
        """
        candidates = self.filter_by_structure(structure) if structure else []
        if not candidates:
            candidates = self.filter_by_structure(Structure.CLASSIC)
        if not candidates:
            return self.default_template

        def font_matches(template: Template) -> bool:
            return bool(font_style) and font_style in template.fonts.body

        if header_alignment:
            for template in candidates:
                if font_matches(template) and template.header_alignment == header_alignment:
                    return template
        for template in candidates:
            if font_matches(template):
                return template
        return candidates[0]

    def font_option(self, font_id: str) -> FontOption:
        """Get a font option by id, falling back to the default font."""
        return self._fonts_by_id.get(font_id, self.default_font)

    def has_font(self, font_id: str) -> bool:
        return font_id in self._fonts_by_id


@lru_cache(maxsize=1)
def get_registry() -> TemplateRegistry:
    """Process-wide registry loaded from the bundled catalog."""
    return TemplateRegistry()
