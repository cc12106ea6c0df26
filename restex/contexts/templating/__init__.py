"""
Templating Context

Responsibilities:
- Owns the canonical resume representation (ResumeModel)
- Sanitizes untrusted text for LaTeX
- Compiles ResumeModel into an ATS-friendly LaTeX document
- Projects ResumeModel into plain text
- Reads generated LaTeX back for round-trip validation

Owns: Resume representation, LaTeX template system, model -> LaTeX / plain text
Never: Interprets raw LLM output (see the intake context)

The pipeline orchestration lives in restex.contexts.templating.converter and is
imported from there directly, since it depends on the intake context.
"""

from restex.contexts.templating.latex_generator import compile_document
from restex.contexts.templating.latex_parser import parse_latex
from restex.contexts.templating.plaintext_formatter import project_plaintext
from restex.contexts.templating.resume_data_structure import (
    Contact,
    ContactKind,
    Education,
    Experience,
    Project,
    ResumeModel,
)
from restex.contexts.templating.sanitizer import escape, neutralize_commands, unescape

__all__ = [
    # Model -> artifacts
    "compile_document",
    "project_plaintext",
    "parse_latex",
    # Sanitizer
    "escape",
    "unescape",
    "neutralize_commands",
    # Data structure classes
    "ResumeModel",
    "Contact",
    "ContactKind",
    "Education",
    "Experience",
    "Project",
]
