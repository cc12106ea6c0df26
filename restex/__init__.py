"""
restex - Resume Structured data to TeX

Compiles loosely-typed, LLM-produced resume JSON into an ATS-friendly LaTeX
document and a plain-text rendition of the same content.

Architecture:
- Intake Context: Cleaning and normalization of raw resume JSON into the canonical model
- Templating Context: Sanitization, LaTeX compilation, plain-text projection and read-back
"""

__version__ = "0.1.0"
