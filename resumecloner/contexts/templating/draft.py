"""
Draft serialization for ResumeDocument.

A draft is the whole document as indented JSON with camelCase keys
(personalInfo, fullName, templateId, accentColor, ...). serialize() and
deserialize() round-trip to an equal document.

Import validates minimally: the top level must be an object holding a
personalInfo object and a sections list. Missing ids are generated and missing
style parameters take their defaults. Ids and templateId are kept as written.
An unknown templateId is resolved to the default template where it is used:
here for the accent color when accentColor is absent, and later in layout.
"""

import json
from pathlib import Path
from typing import Any, Dict

from resumecloner.contexts.templating import defaults
from resumecloner.contexts.templating.exceptions import InvalidDraftFormatError
from resumecloner.contexts.templating.logger import _log_info, log_draft_loaded
from resumecloner.contexts.templating.resume_data_structure import (
    DetailItem,
    PersonalInfo,
    ResumeDocument,
    Section,
    SectionType,
    SkillItem,
)
from resumecloner.contexts.templating.template_registry import TemplateRegistry, get_registry
from resumecloner.utils.ids import IdGenerator, default_id_generator
from resumecloner.utils.text_processing import export_basename

DRAFT_SUFFIX = "_Draft.json"


def to_camel(name: str) -> str:
    """
    Convert a snake_case field name to camelCase.

    Examples:
        >>> to_camel("section_header_font_size")
        'sectionHeaderFontSize'
    """
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


PERSONAL_INFO_KEYS = {
    name: to_camel(name)
    for name in (
        "full_name",
        "job_title",
        "email",
        "phone",
        "location",
        "website",
        "date_of_birth",
        "summary",
        "profile_picture",
    )
}
STYLE_KEYS = {name: to_camel(name) for name in defaults.STYLE_FIELDS}


def _item_to_dict(item) -> Dict[str, Any]:
    if isinstance(item, SkillItem):
        return {"id": item.id, "name": item.name}
    if isinstance(item, DetailItem):
        return {
            "id": item.id,
            "title": item.title,
            "subtitle": item.subtitle,
            "date": item.date,
            "description": item.description,
        }
    raise TypeError(f"Unsupported item type: {type(item).__name__}")


def to_dict(document: ResumeDocument) -> Dict[str, Any]:
    """Draft (camelCase) dict form of a document."""
    data = {
        "personalInfo": {
            key: getattr(document.personal_info, name) for name, key in PERSONAL_INFO_KEYS.items()
        },
        "sections": [
            {
                "id": section.id,
                "type": section.type.value,
                "title": section.title,
                "position": section.position.value,
                "items": [_item_to_dict(item) for item in section.items],
            }
            for section in document.sections
        ],
        "templateId": document.template_id,
        "accentColor": document.accent_color,
        "fontFamily": document.font_family,
    }
    for name, key in STYLE_KEYS.items():
        data[key] = getattr(document, name)
    if document.source_image_url is not None:
        data["sourceImageUrl"] = document.source_image_url
    return data


def serialize(document: ResumeDocument) -> str:
    """Indented JSON draft of a document."""
    return json.dumps(to_dict(document), indent=2, ensure_ascii=False)


def _text(value) -> str:
    return "" if value is None else value


def _given(data: Dict[str, Any], key: str, default):
    """Value stored under key, or default when it is missing or null."""
    value = data.get(key)
    return default if value is None else value


def _item_from_dict(data: Dict[str, Any], section_type: SectionType, item_id: str):
    if section_type == SectionType.TAG_LIST:
        return SkillItem(id=item_id, name=_text(data.get("name")))
    if section_type == SectionType.DETAIL_LIST:
        return DetailItem(
            id=item_id,
            title=_text(data.get("title")),
            subtitle=_text(data.get("subtitle")),
            date=_text(data.get("date")),
            description=_text(data.get("description")),
        )
    raise ValueError(f"Unsupported section type: {section_type!r}")


def _section_from_dict(data: Dict[str, Any], section_id: str, id_generator: IdGenerator) -> Section:
    if not isinstance(data, dict):
        raise InvalidDraftFormatError(f"Section must be an object, got {type(data).__name__}")

    section_type = SectionType(data.get("type") or SectionType.DETAIL_LIST)
    items = []
    seen = set()
    for item_data in data.get("items") or []:
        if not isinstance(item_data, dict):
            raise InvalidDraftFormatError(f"Item must be an object, got {type(item_data).__name__}")
        item_id = item_data.get("id")
        if item_id is None:
            item_id = id_generator()
        while item_id in seen:
            item_id = id_generator()
        seen.add(item_id)
        items.append(_item_from_dict(item_data, section_type, item_id))

    return Section(
        id=section_id,
        type=section_type,
        title=_text(data.get("title")),
        position=data.get("position") or "main",
        items=tuple(items),
    )


def from_dict(
    data: Any,
    registry: TemplateRegistry = None,
    id_generator: IdGenerator = default_id_generator,
) -> ResumeDocument:
    """
    Build a document from its draft dict form.

    Raises:
        InvalidDraftFormatError: If personalInfo/sections are missing or a value
            breaks a document invariant
    """
    if not isinstance(data, dict):
        raise InvalidDraftFormatError("Draft must be a JSON object")
    if not isinstance(data.get("personalInfo"), dict):
        raise InvalidDraftFormatError("Draft is missing the 'personalInfo' object")
    if not isinstance(data.get("sections"), list):
        raise InvalidDraftFormatError("Draft is missing the 'sections' list")

    registry = registry or get_registry()
    template_id = _given(data, "templateId", registry.default_template.id)
    if not isinstance(template_id, str):
        raise InvalidDraftFormatError(f"templateId must be a string, got {type(template_id).__name__}")
    template = registry.resolve(template_id)

    info = data["personalInfo"]
    personal_info = PersonalInfo(
        **{name: _text(info.get(key)) for name, key in PERSONAL_INFO_KEYS.items()}
    )

    try:
        sections = []
        seen = set()
        for section_data in data["sections"]:
            section_id = section_data.get("id") if isinstance(section_data, dict) else None
            if section_id is None:
                section_id = id_generator()
            while section_id in seen:
                section_id = id_generator()
            seen.add(section_id)
            sections.append(_section_from_dict(section_data, section_id, id_generator))

        style = {
            name: data[key] if data.get(key) is not None else defaults.DEFAULT_STYLE[name]
            for name, key in STYLE_KEYS.items()
        }

        return ResumeDocument(
            personal_info=personal_info,
            sections=tuple(sections),
            template_id=template_id,
            accent_color=data.get("accentColor") or template.colors.primary,
            font_family=_given(data, "fontFamily", defaults.DEFAULT_FONT_FAMILY),
            source_image_url=data.get("sourceImageUrl"),
            **style,
        )
    except InvalidDraftFormatError:
        raise
    except (ValueError, TypeError) as e:
        raise InvalidDraftFormatError(f"Draft breaks the document model: {e}") from e


def deserialize(
    text: str,
    registry: TemplateRegistry = None,
    id_generator: IdGenerator = default_id_generator,
) -> ResumeDocument:
    """
    Parse a JSON draft.

    Raises:
        InvalidDraftFormatError: If the text is not JSON or not a resume draft
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidDraftFormatError(f"Draft is not valid JSON: {e}") from e
    return from_dict(data, registry=registry, id_generator=id_generator)


def draft_filename(document: ResumeDocument) -> str:
    """<Full_Name>_Draft.json"""
    return f"{export_basename(document.personal_info.full_name)}{DRAFT_SUFFIX}"


def export_draft(document: ResumeDocument, output_dir: Path) -> Path:
    """Write the document draft into output_dir and return its path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / draft_filename(document)
    path.write_text(serialize(document), encoding="utf-8")
    _log_info(f"Draft written: {path}")
    return path


def load_draft(path: Path, registry: TemplateRegistry = None) -> ResumeDocument:
    """
    Read a draft file.

    Raises:
        InvalidDraftFormatError: If the file content is not a resume draft
    """
    document = deserialize(Path(path).read_text(encoding="utf-8"), registry=registry)
    log_draft_loaded(document)
    return document


def example_document(template_id: str = None, registry: TemplateRegistry = None) -> ResumeDocument:
    """
    Sample resume, optionally restyled for a template (its primary color as accent).
    """
    data = defaults.get_example_data()
    if template_id is not None:
        registry = registry or get_registry()
        template = registry.resolve(template_id)
        data["templateId"] = template.id
        data["accentColor"] = template.colors.primary
    return from_dict(data, registry=registry)
