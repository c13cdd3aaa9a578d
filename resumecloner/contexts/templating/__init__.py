"""
Templating Context

Responsibilities:
- Manages the resume document model (personal info, typed sections, items, style)
- Owns the template and font catalog
- Decodes the rich-text markup used in free-text fields
- Serializes documents to and from JSON drafts
- Decides per-structure layout (LayoutPlan) for every renderer

Owns: Resume document model, template catalog, rich-text grammar, layout decisions
Never: Draws pixels or writes PDF/DOCX files
"""

from resumecloner.contexts.templating.draft import deserialize, example_document, serialize
from resumecloner.contexts.templating.layout_plan import LayoutPlan, plan_layout
from resumecloner.contexts.templating.resume_data_structure import (
    DetailItem,
    PersonalInfo,
    Position,
    ResumeDocument,
    Section,
    SectionType,
    SkillItem,
    document_for_template,
    empty_document,
)
from resumecloner.contexts.templating.template_registry import (
    Structure,
    Template,
    TemplateRegistry,
    get_registry,
)

__all__ = [
    # Data structure classes
    "ResumeDocument",
    "PersonalInfo",
    "Section",
    "SectionType",
    "Position",
    "DetailItem",
    "SkillItem",
    "empty_document",
    "document_for_template",
    "example_document",
    # Templates and layout
    "Template",
    "Structure",
    "TemplateRegistry",
    "get_registry",
    "LayoutPlan",
    "plan_layout",
    # Drafts
    "serialize",
    "deserialize",
]
