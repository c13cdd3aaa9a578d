"""
ResumeCloner - structured resume cloning and multi-target rendering

Turns an uploaded resume (image or PDF) or a JSON draft into a structured resume
document and renders it as an on-screen preview, a rasterized A4 PDF and an
editable DOCX file.

Architecture:
- Intake Context: Upload validation, extraction service boundary, session control
- Templating Context: Resume document model, rich-text grammar, template catalog, layout decisions
- Rendering Context: Screen layout, raster capture and pagination, DOCX generation
"""

__version__ = "0.1.0"
