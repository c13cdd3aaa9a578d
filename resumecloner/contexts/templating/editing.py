"""
Editing operations on ResumeDocument.

Every operation is a pure function returning a new document; the input is never
modified. Unknown ids are no-ops, unknown field names raise ValueError.

Examples:
    >>> doc = empty_document()
    >>> doc = add_item(doc, "3", SequentialIdGenerator("s"))
    >>> doc.section("3").items[0].name
    'New Skill'
"""

from dataclasses import fields, replace
from typing import Any, Dict

from resumecloner.contexts.templating import defaults
from resumecloner.contexts.templating.resume_data_structure import (
    DetailItem,
    PersonalInfo,
    Position,
    ResumeDocument,
    Section,
    SectionType,
    SkillItem,
    item_class,
)
from resumecloner.contexts.templating.template_registry import TemplateRegistry, get_registry
from resumecloner.utils.ids import IdGenerator, default_id_generator

UP = "up"
DOWN = "down"

PERSONAL_INFO_FIELDS = frozenset(f.name for f in fields(PersonalInfo))
SECTION_FIELDS = frozenset({"title", "position", "type"})
ITEM_FIELDS = {
    SectionType.DETAIL_LIST: frozenset({"title", "subtitle", "date", "description"}),
    SectionType.TAG_LIST: frozenset({"name"}),
}


def _check_fields(changes: Dict[str, Any], allowed, owner: str) -> None:
    unknown = sorted(set(changes) - set(allowed))
    if unknown:
        raise ValueError(f"Unknown {owner} field(s): {', '.join(unknown)}")


def _swap(sequence: tuple, index: int, direction: str) -> tuple:
    """Swap element index with its neighbor; out-of-range moves return the input unchanged."""
    if direction not in (UP, DOWN):
        raise ValueError(f"Direction must be {UP!r} or {DOWN!r}, got {direction!r}")

    target = index - 1 if direction == UP else index + 1
    if not 0 <= index < len(sequence) or not 0 <= target < len(sequence):
        return sequence

    items = list(sequence)
    items[index], items[target] = items[target], items[index]
    return tuple(items)


def _replace_section(document: ResumeDocument, section: Section) -> ResumeDocument:
    sections = tuple(section if s.id == section.id else s for s in document.sections)
    return replace(document, sections=sections)


def convert_item(item, section_type: SectionType, id_generator: IdGenerator = default_id_generator):
    """
    Convert an item to the variant of section_type, keeping its id.

    A DetailItem becomes a SkillItem named after its title and vice versa.
    """
    target = item_class(section_type)
    if isinstance(item, target):
        return item
    if target is SkillItem:
        return SkillItem(id=item.id or id_generator(), name=item.title)
    return DetailItem(id=item.id or id_generator(), title=item.name)


# Personal info and style


def update_personal_info(document: ResumeDocument, **changes) -> ResumeDocument:
    """Set one or more PersonalInfo fields."""
    _check_fields(changes, PERSONAL_INFO_FIELDS, "personal info")
    return replace(document, personal_info=replace(document.personal_info, **changes))


def update_style(document: ResumeDocument, **changes) -> ResumeDocument:
    """Set size/spacing parameters, accent_color or font_family."""
    allowed = set(defaults.STYLE_FIELDS) | {"accent_color", "font_family"}
    _check_fields(changes, allowed, "style")
    return replace(document, **changes)


def set_template(
    document: ResumeDocument, template_id: str, registry: TemplateRegistry = None
) -> ResumeDocument:
    """
    Switch template; the accent color resets to the template's primary color.

    Unknown template ids fall back to the default template.
    """
    registry = registry or get_registry()
    template = registry.resolve(template_id)
    return replace(document, template_id=template.id, accent_color=template.colors.primary)


def set_font_family(
    document: ResumeDocument, font_id: str, registry: TemplateRegistry = None
) -> ResumeDocument:
    registry = registry or get_registry()
    if not registry.has_font(font_id):
        raise ValueError(f"Unknown font option: {font_id!r}")
    return replace(document, font_family=font_id)


# Sections


def add_section(
    document: ResumeDocument,
    section_type=SectionType.DETAIL_LIST,
    title: str = defaults.NEW_SECTION_TITLE,
    position=Position.MAIN,
    id_generator: IdGenerator = default_id_generator,
) -> ResumeDocument:
    """Append an empty section with a fresh id."""
    section_id = id_generator()
    while document.section(section_id) is not None:
        section_id = id_generator()
    section = Section(id=section_id, type=section_type, title=title, position=position)
    return replace(document, sections=document.sections + (section,))


def update_section(
    document: ResumeDocument,
    section_id: str,
    id_generator: IdGenerator = default_id_generator,
    **changes,
) -> ResumeDocument:
    """
    Update a section's title, position or type.

    Changing the type converts existing items to the new variant.
    """
    _check_fields(changes, SECTION_FIELDS, "section")
    section = document.section(section_id)
    if section is None:
        return document

    if "type" in changes:
        new_type = SectionType(changes["type"])
        changes["items"] = tuple(convert_item(item, new_type, id_generator) for item in section.items)

    return _replace_section(document, replace(section, **changes))


def remove_section(document: ResumeDocument, section_id: str) -> ResumeDocument:
    sections = tuple(s for s in document.sections if s.id != section_id)
    if len(sections) == len(document.sections):
        return document
    return replace(document, sections=sections)


def move_section(document: ResumeDocument, index: int, direction: str) -> ResumeDocument:
    """Swap the section at index with its neighbor above ("up") or below ("down")."""
    sections = _swap(document.sections, index, direction)
    if sections is document.sections:
        return document
    return replace(document, sections=sections)


# Items


def add_item(
    document: ResumeDocument,
    section_id: str,
    id_generator: IdGenerator = default_id_generator,
) -> ResumeDocument:
    """
    Append a placeholder item to a section.

    tag-list sections get SkillItem("New Skill"); detail-list sections get a
    DetailItem titled "Title" with the other fields empty.
    """
    section = document.section(section_id)
    if section is None:
        return document

    item_id = id_generator()
    while section.item_index(item_id) is not None:
        item_id = id_generator()

    if section.type == SectionType.TAG_LIST:
        item = SkillItem(id=item_id, name=defaults.NEW_SKILL_NAME)
    elif section.type == SectionType.DETAIL_LIST:
        item = DetailItem(id=item_id, title=defaults.NEW_ITEM_TITLE)
    else:
        raise ValueError(f"Unsupported section type: {section.type!r}")

    return _replace_section(document, replace(section, items=section.items + (item,)))


def update_item(document: ResumeDocument, section_id: str, item_id: str, **changes) -> ResumeDocument:
    """Set fields of one item; allowed fields depend on the section type."""
    section = document.section(section_id)
    if section is None:
        return document
    _check_fields(changes, ITEM_FIELDS[section.type], f"{section.type.value} item")

    index = section.item_index(item_id)
    if index is None:
        return document

    items = list(section.items)
    items[index] = replace(items[index], **changes)
    return _replace_section(document, replace(section, items=tuple(items)))


def remove_item(document: ResumeDocument, section_id: str, item_id: str) -> ResumeDocument:
    section = document.section(section_id)
    if section is None or section.item_index(item_id) is None:
        return document
    items = tuple(item for item in section.items if item.id != item_id)
    return _replace_section(document, replace(section, items=items))


def move_item(document: ResumeDocument, section_id: str, index: int, direction: str) -> ResumeDocument:
    """Swap the item at index with its neighbor above ("up") or below ("down")."""
    section = document.section(section_id)
    if section is None:
        return document
    items = _swap(section.items, index, direction)
    if items is section.items:
        return document
    return _replace_section(document, replace(section, items=items))
