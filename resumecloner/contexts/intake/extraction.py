"""
Resume extraction: uploaded image/PDF -> ResumeDocument.

The provider call is a black box returning text. This module owns the prompt,
digs the JSON payload out of the response and maps it onto the document model
with every missing field replaced by its default.
"""

import json
import re
import time
from typing import Any, Dict

from resumecloner.contexts.intake.exceptions import ExtractionFailureError
from resumecloner.contexts.intake.logger import _log_debug, _log_error, _log_info, log_extraction_result
from resumecloner.contexts.intake.upload import Upload, validate_upload
from resumecloner.contexts.templating import defaults
from resumecloner.contexts.templating.draft import PERSONAL_INFO_KEYS
from resumecloner.contexts.templating.resume_data_structure import (
    DetailItem,
    PersonalInfo,
    Position,
    ResumeDocument,
    Section,
    SectionType,
    SkillItem,
)
from resumecloner.contexts.templating.template_registry import TemplateRegistry, get_registry
from resumecloner.utils.ids import IdGenerator, default_id_generator
from resumecloner.utils.images import to_data_uri
from resumecloner.utils.llm import ExtractionProvider, get_provider
from resumecloner.utils.text_processing import is_hex_color

# =============================================================================
# PROMPT
# =============================================================================

EXTRACTION_PROMPT = """\
You are an expert high-fidelity Resume Transcription and Design Analyst.
Your goal is to "CLONE" the provided resume (Image or PDF) by extracting ALL content perfectly and identifying its visual DNA.

CRITICAL: Return ONLY raw JSON. Do not include any conversational text.
Transcribe precisely, capturing all text. Identify the dominant color and layout structure.
For the sections, map them to 'detail-list' (for experience/edu) or 'tag-list' (for skills/hobbies).

Use exactly this shape:
{
  "personalInfo": {"fullName": "", "jobTitle": "", "email": "", "phone": "", "location": "",
                   "summary": "", "website": "", "dateOfBirth": ""},
  "sections": [
    {"title": "", "type": "detail-list | tag-list", "position": "main | sidebar",
     "items": [{"name": "", "title": "", "subtitle": "", "date": "", "description": ""}]}
  ],
  "visualAnalysis": {
    "structure": "classic | modern | minimal | sidebar-left | sidebar-right | two-column-header | compact-grid",
    "headerAlignment": "left | center",
    "fontStyle": "sans | serif",
    "accentColor": "#rrggbb"
  }
}

In descriptions and the summary, mark bold text as **text**, italic text as _text_,
bullet lines with "• " and numbered lines with "1. "."""

# =============================================================================
# RESPONSE PARSING
# =============================================================================

JSON_FENCE_PATTERN = re.compile(r"```json\s*([\s\S]*?)\s*```")
CODE_FENCE_PATTERN = re.compile(r"```\s*([\s\S]*?)\s*```")


def extract_json_payload(text: str) -> str:
    """
    Pull the JSON document out of a model response.

    Handles, in order: a ```json fence, a bare ``` fence, and unfenced text
    whose outermost {...} pair holds the payload. Anything else is returned
    stripped, for the JSON parser to reject.

    Examples:
        >>> extract_json_payload('```json\\n{"a": 1}\\n```')
        '{"a": 1}'
        >>> extract_json_payload('Here you go: {"a": {"b": 2}} done')
        '{"a": {"b": 2}}'
    """
    match = JSON_FENCE_PATTERN.search(text)
    if match and match.group(1):
        return match.group(1).strip()

    match = CODE_FENCE_PATTERN.search(text)
    if match and match.group(1):
        return match.group(1).strip()

    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        return text[first : last + 1].strip()
    return text.strip()


def parse_extraction_response(text: str) -> Dict[str, Any]:
    """
    Parse a model response into the raw extraction dict.

    Raises:
        ExtractionFailureError: If the response is empty, not JSON, or not an object
    """
    if not text or not text.strip():
        raise ExtractionFailureError("Extraction service returned an empty response", raw_text=text)
    try:
        data = json.loads(extract_json_payload(text))
    except json.JSONDecodeError as e:
        raise ExtractionFailureError(f"Could not parse extraction result: {e}", raw_text=text) from e
    if not isinstance(data, dict):
        raise ExtractionFailureError("Extraction result is not a JSON object", raw_text=text)
    return data


# =============================================================================
# MAPPING
# =============================================================================


def _text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _dict(value) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value) -> list:
    return value if isinstance(value, list) else []


def _section_type(value) -> SectionType:
    try:
        return SectionType(value)
    except ValueError:
        return SectionType.DETAIL_LIST


def _position(value) -> Position:
    try:
        return Position(value)
    except ValueError:
        return Position.MAIN


def _map_item(data: Dict[str, Any], section_type: SectionType, id_generator: IdGenerator):
    if section_type == SectionType.TAG_LIST:
        name = _text(data.get("name")) or _text(data.get("title")) or defaults.FALLBACK_SKILL_NAME
        return SkillItem(id=id_generator(), name=name)
    if section_type == SectionType.DETAIL_LIST:
        return DetailItem(
            id=id_generator(),
            title=_text(data.get("title")) or defaults.FALLBACK_ITEM_TITLE,
            subtitle=_text(data.get("subtitle")),
            date=_text(data.get("date")),
            description=_text(data.get("description")),
        )
    raise ValueError(f"Unsupported section type: {section_type!r}")


def _map_section(data: Dict[str, Any], id_generator: IdGenerator) -> Section:
    section_type = _section_type(data.get("type"))
    items = tuple(_map_item(_dict(item), section_type, id_generator) for item in _list(data.get("items")))
    return Section(
        id=id_generator(),
        type=section_type,
        title=_text(data.get("title")) or defaults.FALLBACK_SECTION_TITLE,
        position=_position(data.get("position")),
        items=items,
    )


def map_extraction_result(
    data: Dict[str, Any],
    source_image_url: str = None,
    registry: TemplateRegistry = None,
    id_generator: IdGenerator = default_id_generator,
) -> ResumeDocument:
    """
    Map a raw extraction dict onto a ResumeDocument.

    Every missing or null field gets its default, so nothing None reaches the
    document: personal info fields become "", sections default to a
    'detail-list' in 'main' titled "Section", detail items to the title "Title",
    skills to their title or "Skill". The template is the registry's best match
    for the detected structure, font style and header alignment; the accent
    color falls back to the template primary and the font to 'sans'. Style
    parameters use the extraction defaults.

    Args:
        data: Parsed extraction result
        source_image_url: Data URI of the original upload
        registry: Template registry
        id_generator: Source of fresh section and item ids

    Returns:
        New ResumeDocument
    """
    registry = registry or get_registry()

    info = _dict(data.get("personalInfo"))
    personal_info = PersonalInfo(**{name: _text(info.get(key)) for name, key in PERSONAL_INFO_KEYS.items()})
    sections = tuple(_map_section(_dict(section), id_generator) for section in _list(data.get("sections")))

    visual = _dict(data.get("visualAnalysis"))
    font_style = _text(visual.get("fontStyle")) or defaults.DEFAULT_FONT_FAMILY
    template = registry.best_match(
        _text(visual.get("structure")) or "classic",
        font_style=font_style,
        header_alignment=_text(visual.get("headerAlignment")) or None,
    )
    accent = _text(visual.get("accentColor")).strip()
    if not is_hex_color(accent):
        accent = template.colors.primary

    return ResumeDocument(
        personal_info=personal_info,
        sections=sections,
        template_id=template.id,
        accent_color=accent,
        font_family=font_style if registry.has_font(font_style) else defaults.DEFAULT_FONT_FAMILY,
        source_image_url=source_image_url,
        **defaults.EXTRACTION_STYLE,
    )


# =============================================================================
# EXTRACTOR
# =============================================================================


class ResumeExtractor:
    """
    Runs one upload through the extraction provider and maps the result.

    The provider is created lazily on first use, so validation failures never
    touch the network or need credentials.
    """

    def __init__(
        self,
        provider: ExtractionProvider = None,
        registry: TemplateRegistry = None,
        id_generator: IdGenerator = default_id_generator,
    ):
        self._provider = provider
        self.registry = registry
        self.id_generator = id_generator

    @property
    def provider(self) -> ExtractionProvider:
        if self._provider is None:
            self._provider = get_provider()
        return self._provider

    def extract(self, upload: Upload) -> ResumeDocument:
        """
        Extract a document from an upload.

        Raises:
            UnsupportedFormatError: If the upload is neither an image nor a PDF
            FileTooLargeError: If the upload exceeds the size cap
            ExtractionFailureError: If the provider call or result parsing fails
        """
        validate_upload(upload)

        start_time = time.time()
        _log_info(f"Extracting {upload.filename or 'upload'} ({upload.media_type}, {upload.size} bytes)")
        try:
            response = self.provider.extract(upload.payload, upload.media_type, EXTRACTION_PROMPT)
        except Exception as e:
            _log_error(f"Extraction call failed: {e}")
            raise ExtractionFailureError(f"Extraction service call failed: {e}") from e

        _log_debug(f"Response: {len(response.text)} characters from {response.model}")
        data = parse_extraction_response(response.text)
        try:
            document = map_extraction_result(
                data,
                source_image_url=to_data_uri(upload.payload, upload.media_type),
                registry=self.registry,
                id_generator=self.id_generator,
            )
        except (ValueError, TypeError) as e:
            _log_error(f"Extraction result does not fit the document model: {e}")
            raise ExtractionFailureError(f"Could not map extraction result: {e}", raw_text=response.text) from e

        log_extraction_result(document, getattr(self.provider, "name", "provider"), time.time() - start_time)
        return document
