"""
Default values for ResumeCloner documents.

Provides shared defaults used by:
- resume_data_structure.py (empty and per-template documents)
- intake/extraction.py (filling fields missing from an extraction result)
- editing.py (placeholder content for new sections and items)

Style keys are ResumeDocument field names.
"""

from typing import Any, Dict, List

DEFAULT_TEMPLATE_ID = "t1"
DEFAULT_ACCENT_COLOR = "#1e3a8a"
DEFAULT_FONT_FAMILY = "sans"

# Style parameters for a blank document (font sizes in pt, spacing in px)
DEFAULT_STYLE = {
    "name_font_size": 24,
    "section_header_font_size": 16,
    "role_font_size": 13,
    "body_font_size": 10,
    "contact_font_size": 9,
    "header_top_padding": 0,
    "header_bottom_padding": 16,
    "header_content_spacing": 24,
    "summary_bottom_spacing": 32,
    "section_title_margin": 16,
    "module_spacing": 32,
    "item_spacing": 16,
    "line_height": 1.5,
}

# Style parameters applied to documents built from an extraction result
EXTRACTION_STYLE = {
    "name_font_size": 24,
    "section_header_font_size": 16,
    "role_font_size": 13,
    "body_font_size": 10,
    "contact_font_size": 9,
    "header_top_padding": 20,
    "header_bottom_padding": 24,
    "header_content_spacing": 24,
    "summary_bottom_spacing": 32,
    "section_title_margin": 12,
    "module_spacing": 24,
    "item_spacing": 16,
    "line_height": 1.5,
}

STYLE_FIELDS = tuple(DEFAULT_STYLE)

# Placeholders for content created by editing operations
NEW_SECTION_TITLE = "New Section"
NEW_SKILL_NAME = "New Skill"
NEW_ITEM_TITLE = "Title"

# Fallbacks for fields missing from an extraction result
FALLBACK_SECTION_TITLE = "Section"
FALLBACK_ITEM_TITLE = "Title"
FALLBACK_SKILL_NAME = "Skill"

# Sections of a freshly created document: (id, type, title, position)
DEFAULT_SECTIONS = (
    ("1", "detail-list", "Experience", "main"),
    ("2", "detail-list", "Education", "main"),
    ("3", "tag-list", "Skills", "sidebar"),
)


def get_example_data() -> Dict[str, Any]:
    """
    Get the sample resume used for template previews, in draft (camelCase) form.

    Style parameters are omitted; draft import fills them from DEFAULT_STYLE.

    Returns:
        Fresh dict; callers may modify it freely
    """
    sections: List[Dict[str, Any]] = [
        {
            "id": "exp",
            "title": "Experience",
            "type": "detail-list",
            "position": "main",
            "items": [
                {
                    "id": "e1",
                    "title": "Senior Product Manager",
                    "subtitle": "Northwind Media",
                    "date": "2021 - Present",
                    "description": (
                        "Owned recommendation strategy for the core video feed, lifting retention by **15%**.\n"
                        "• Launched a new social module that reached 5M users in its first month\n"
                        "• Mentored _five_ junior product managers and set up a shared review process"
                    ),
                },
                {
                    "id": "e2",
                    "title": "Product Manager",
                    "subtitle": "Contoso Delivery",
                    "date": "2018 - 2021",
                    "description": (
                        "Reworked the dispatch system, cutting average delivery time by 8%.\n"
                        "Raised coupon conversion by 20% through customer segmentation."
                    ),
                },
            ],
        },
        {
            "id": "edu",
            "title": "Education",
            "type": "detail-list",
            "position": "main",
            "items": [
                {
                    "id": "ed1",
                    "title": "M.S. Computer Science",
                    "subtitle": "State University",
                    "date": "2015 - 2018",
                    "description": "Research focus: machine learning and human-computer interaction.",
                },
            ],
        },
        {
            "id": "skills",
            "title": "Skills",
            "type": "tag-list",
            "position": "sidebar",
            "items": [
                {"id": "s1", "name": "Figma"},
                {"id": "s2", "name": "SQL"},
                {"id": "s3", "name": "Python"},
                {"id": "s4", "name": "Agile"},
                {"id": "s5", "name": "Public Speaking"},
            ],
        },
    ]

    return {
        "personalInfo": {
            "fullName": "Alex Morgan",
            "jobTitle": "Senior Product Manager",
            "email": "alex.morgan@example.com",
            "phone": "+1 555-0100",
            "location": "Seattle, WA",
            "website": "alexmorgan.design",
            "dateOfBirth": "March 15, 1992",
            "summary": (
                "Product manager with 8 years of experience shipping consumer products at scale. "
                "Strong in user research, system design and cross-team delivery."
            ),
            "profilePicture": "",
        },
        "sections": sections,
        "templateId": DEFAULT_TEMPLATE_ID,
        "accentColor": DEFAULT_ACCENT_COLOR,
        "fontFamily": DEFAULT_FONT_FAMILY,
    }
