"""
Templating Registries

Centralized registry for loading and caching the document templates.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound

from restex.contexts.templating.sanitizer import escape

load_dotenv()
DEFAULT_TEMPLATES_PATH = Path(__file__).resolve().parent / "template"
TEMPLATES_PATH = Path(os.getenv("RESTEX_TEMPLATES_PATH", str(DEFAULT_TEMPLATES_PATH)))


class LatexFragment(str):
    """
    LaTeX that has already been rendered from a template.

    The environment's finalize hook passes fragments through untouched; any
    other interpolated value is sanitized.
    """


def finalize_value(value: Any) -> str:
    """Sanitize every interpolated value that is not a rendered fragment."""
    if isinstance(value, LatexFragment):
        return value
    if value is None:
        return ""
    return escape(str(value))


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for LaTeX generation.

    Templates are stored in restex/contexts/templating/template/:
    - types/{section}/template.tex.jinja: one per resume section
    - structure/{name}.tex.jinja: preamble and document skeleton

    They use custom delimiters to avoid conflicts with LaTeX syntax:
    - Variable: <<< var >>>
    - Block: <%% block %%>
    - Comment: <# comment #>
    """

    def __init__(self, templates_path: Optional[Path] = None):
        """
        Initialize the template registry.

        Args:
            templates_path: Base template directory. Defaults to
                            RESTEX_TEMPLATES_PATH from environment, else the packaged templates
        """
        if templates_path is None:
            templates_path = TEMPLATES_PATH

        self.templates_path = Path(templates_path)
        self._cache: Dict[str, Template] = {}

        # Create Jinja2 environment with custom delimiters to avoid LaTeX conflicts
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            # Every interpolation goes through the sanitizer
            finalize=finalize_value,
            autoescape=False,
            # Custom delimiters to avoid LaTeX brace conflicts
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            # Block tags on their own line leave no trace in the output
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def get_template(self, template_name: str) -> Template:
        """
        Get a template by name, loading and caching it if necessary.

        Args:
            template_name: Relative path below the templates directory
                           (e.g., 'types/experience/template.tex.jinja')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        if template_name in self._cache:
            return self._cache[template_name]

        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template '{template_name}' not found under {self.templates_path}"
            ) from e

        self._cache[template_name] = template
        return template

    def get_section_template(self, section: str) -> Template:
        """Template for one resume section (e.g., 'experience')."""
        return self.get_template(f"types/{section}/template.tex.jinja")

    def get_structure_template(self, name: str) -> Template:
        """Template for a document-level piece ('preamble' or 'document')."""
        return self.get_template(f"structure/{name}.tex.jinja")

    def get_template_path(self, template_name: str) -> Path:
        return self.templates_path / template_name

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, template_name: str) -> bool:
        return template_name in self._cache
