"""
Intake Context

Responsibilities:
- Cleans raw LLM resume JSON (empty values, placeholder sentinels, runaway nesting)
- Detects which known raw shape the input uses
- Normalizes every shape into the canonical ResumeModel

Owns: Raw input defects and schema variation
Never: Produces LaTeX or plain text
"""

from restex.contexts.intake.cleaner import clean, is_empty_value
from restex.contexts.intake.exceptions import MalformedInputError, OversizedInputError
from restex.contexts.intake.normalizer import (
    ResumeShape,
    SourceView,
    detect_shape,
    flatten_skills,
    normalize,
    resolve_sources,
)

__all__ = [
    # Cleaning
    "clean",
    "is_empty_value",
    # Normalization
    "normalize",
    "detect_shape",
    "resolve_sources",
    "flatten_skills",
    "ResumeShape",
    "SourceView",
    # Errors
    "MalformedInputError",
    "OversizedInputError",
]
