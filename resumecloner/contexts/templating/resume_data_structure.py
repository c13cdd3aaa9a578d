"""
Resume Document Structure

Defines the canonical in-memory representation of a resume for ResumeCloner.
This structure is the interface between the Templating, Rendering and Intake contexts.

Templating owns:
- The document model and its invariants
- Editing operations (editing.py) and draft serialization (draft.py)

Rendering projects ResumeDocument instances onto the screen, PDF and DOCX targets.
Intake builds ResumeDocument instances from extraction results.

All classes are frozen: every edit produces a new document value.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, List, Optional, Tuple, Type, Union

from resumecloner.contexts.templating import defaults
from resumecloner.contexts.templating.template_registry import TemplateRegistry, get_registry
from resumecloner.utils.text_processing import is_hex_color


class SectionType(str, Enum):
    """Content shape of a section; determines its item variant."""

    DETAIL_LIST = "detail-list"
    TAG_LIST = "tag-list"


class Position(str, Enum):
    """Column placement hint for sidebar-aware structures."""

    MAIN = "main"
    SIDEBAR = "sidebar"


@dataclass(frozen=True)
class PersonalInfo:
    """
    Identity and contact block of a resume.

    Attributes:
        full_name: Person's name (drives export file names)
        job_title: Headline role
        email, phone, location, website, date_of_birth: Contact fields
        summary: Rich-text profile paragraph
        profile_picture: Image data URI, or "" for none
    """

    full_name: str = ""
    job_title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    website: str = ""
    date_of_birth: str = ""
    summary: str = ""
    profile_picture: str = ""

    def contact_items(self) -> List[Tuple[str, str]]:
        """
        Non-empty contact fields in display order.

        Returns:
            List of (field_name, value) in the order email, phone, location,
            date_of_birth, website
        """
        order = ("email", "phone", "location", "date_of_birth", "website")
        return [(name, getattr(self, name)) for name in order if getattr(self, name)]

    @property
    def initial(self) -> str:
        """First letter of the name, used as a profile picture placeholder."""
        name = self.full_name.strip()
        return name[0].upper() if name else ""


@dataclass(frozen=True)
class DetailItem:
    """Structured entry of a detail-list section (a job, a degree, ...)."""

    id: str
    title: str = ""
    subtitle: str = ""
    date: str = ""
    description: str = ""


@dataclass(frozen=True)
class SkillItem:
    """Label of a tag-list section, rendered as a badge."""

    id: str
    name: str = ""


Item = Union[DetailItem, SkillItem]

ITEM_CLASSES: Dict[SectionType, Type] = {
    SectionType.DETAIL_LIST: DetailItem,
    SectionType.TAG_LIST: SkillItem,
}


def item_class(section_type) -> Type:
    """
    Item variant for a section type.

    Raises:
        ValueError: If section_type is not a known SectionType
    """
    return ITEM_CLASSES[SectionType(section_type)]


@dataclass(frozen=True)
class Section:
    """
    A named, typed, ordered group of resume items.

    Attributes:
        id: Unique within the document
        type: Content shape; every item must be of the matching variant
        title: Display title
        position: Column placement hint
        items: Items in render order
    """

    id: str
    type: SectionType
    title: str = ""
    position: Position = Position.MAIN
    items: Tuple[Item, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "type", SectionType(self.type))
        object.__setattr__(self, "position", Position(self.position))
        object.__setattr__(self, "items", tuple(self.items))

        expected = item_class(self.type)
        seen = set()
        for item in self.items:
            if not isinstance(item, expected):
                raise ValueError(
                    f"Section {self.id!r} of type {self.type.value} cannot hold {type(item).__name__}"
                )
            if item.id in seen:
                raise ValueError(f"Duplicate item id {item.id!r} in section {self.id!r}")
            seen.add(item.id)

    def item_index(self, item_id: str) -> Optional[int]:
        for index, item in enumerate(self.items):
            if item.id == item_id:
                return index
        return None


@dataclass(frozen=True)
class ResumeDocument:
    """
    Aggregate root: personal info, ordered sections, template choice and style.

    Font sizes are in pt; paddings, margins and spacings in px; line_height is a
    multiplier. template_id is resolved against the template registry wherever
    it is consumed (unknown ids fall back to the default template).

    Invariants (checked on construction):
        - accent_color is a #rgb or #rrggbb hex color
        - every size and spacing parameter is non-negative
        - section ids are unique in the document
        - item ids are unique within their section
    """

    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    sections: Tuple[Section, ...] = ()
    template_id: str = defaults.DEFAULT_TEMPLATE_ID
    accent_color: str = defaults.DEFAULT_ACCENT_COLOR
    font_family: str = defaults.DEFAULT_FONT_FAMILY
    name_font_size: float = defaults.DEFAULT_STYLE["name_font_size"]
    section_header_font_size: float = defaults.DEFAULT_STYLE["section_header_font_size"]
    role_font_size: float = defaults.DEFAULT_STYLE["role_font_size"]
    body_font_size: float = defaults.DEFAULT_STYLE["body_font_size"]
    contact_font_size: float = defaults.DEFAULT_STYLE["contact_font_size"]
    header_top_padding: float = defaults.DEFAULT_STYLE["header_top_padding"]
    header_bottom_padding: float = defaults.DEFAULT_STYLE["header_bottom_padding"]
    header_content_spacing: float = defaults.DEFAULT_STYLE["header_content_spacing"]
    summary_bottom_spacing: float = defaults.DEFAULT_STYLE["summary_bottom_spacing"]
    section_title_margin: float = defaults.DEFAULT_STYLE["section_title_margin"]
    module_spacing: float = defaults.DEFAULT_STYLE["module_spacing"]
    item_spacing: float = defaults.DEFAULT_STYLE["item_spacing"]
    line_height: float = defaults.DEFAULT_STYLE["line_height"]
    source_image_url: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "sections", tuple(self.sections))

        if not is_hex_color(self.accent_color):
            raise ValueError(f"accent_color must be a hex color, got {self.accent_color!r}")

        for name in defaults.STYLE_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value!r}")

        seen = set()
        for section in self.sections:
            if section.id in seen:
                raise ValueError(f"Duplicate section id {section.id!r}")
            seen.add(section.id)

    @property
    def style(self) -> Dict[str, float]:
        """Size/spacing parameters keyed by field name."""
        return {name: getattr(self, name) for name in defaults.STYLE_FIELDS}

    def section(self, section_id: str) -> Optional[Section]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def sections_at(self, position) -> List[Section]:
        """Sections with the given position, in document order."""
        position = Position(position)
        return [s for s in self.sections if s.position == position]


DOCUMENT_FIELDS = tuple(f.name for f in fields(ResumeDocument))


def _default_sections() -> Tuple[Section, ...]:
    return tuple(
        Section(id=section_id, type=section_type, title=title, position=position)
        for section_id, section_type, title, position in defaults.DEFAULT_SECTIONS
    )


def empty_document() -> ResumeDocument:
    """Blank document: default template and style with three empty placeholder sections."""
    return ResumeDocument(sections=_default_sections())


def document_for_template(template_id: str, registry: TemplateRegistry = None) -> ResumeDocument:
    """
    Blank document for a chosen template, accented with the template's primary color.

    Unknown template ids fall back to the default template.
    """
    registry = registry or get_registry()
    template = registry.resolve(template_id)
    return ResumeDocument(
        sections=_default_sections(),
        template_id=template.id,
        accent_color=template.colors.primary,
    )
