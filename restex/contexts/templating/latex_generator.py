"""
LaTeX Generator

Compiles a ResumeModel into a complete single-column LaTeX document.

Every user-supplied value reaches the output through a template interpolation,
and every interpolation passes through the sanitizer (see registries.finalize_value).
Rendered sections are wrapped in LatexFragment so they are not sanitized twice.

Documents are compiled from printable_model(model): values the sanitizer
would empty are dropped first, so every line ending in \\\\ carries text and
every itemize has at least one item.
"""

from dataclasses import replace
from functools import lru_cache
from typing import Any, Dict, Iterable, Optional, Tuple

from jinja2 import TemplateError
from omegaconf import OmegaConf

from restex.contexts.templating.exceptions import TemplateRenderError
from restex.contexts.templating.logger import _log_debug
from restex.contexts.templating.registries import LatexFragment, TemplateRegistry
from restex.contexts.templating.resume_data_structure import ResumeModel
from restex.contexts.templating.sanitizer import escape
from restex.utils.settings import get_settings
from restex.utils.text_processing import set_max_consecutive_blank_lines


def _printable(value: str) -> str:
    return value if escape(value) else ""


def _printable_items(items: Iterable[str]) -> Tuple[str, ...]:
    return tuple(item for item in items if escape(item))


def printable_model(model: ResumeModel) -> ResumeModel:
    """
    The model with every value that sanitizes to nothing removed.

    Scalars become "", list items and contacts are dropped. Fields the
    document does not render (experience tags, project links) are kept as is.

    Example:
        >>> printable_model(ResumeModel(name="Ada", skills=("\\\\bar", "Go"))).skills
        ('Go',)
    """
    return ResumeModel(
        name=_printable(model.name),
        title=_printable(model.title),
        location=_printable(model.location),
        contacts=tuple(contact for contact in model.contacts if escape(contact.value)),
        education=tuple(
            replace(
                entry,
                degree=_printable(entry.degree),
                institution=_printable(entry.institution),
                location=_printable(entry.location),
                dates=_printable(entry.dates),
                details=_printable_items(entry.details),
            )
            for entry in model.education
        ),
        experience=tuple(
            replace(
                entry,
                position=_printable(entry.position),
                company=_printable(entry.company),
                location=_printable(entry.location),
                dates=_printable(entry.dates),
                highlights=_printable_items(entry.highlights),
            )
            for entry in model.experience
        ),
        skills=_printable_items(model.skills),
        projects=tuple(
            replace(
                project,
                name=_printable(project.name),
                description=_printable(project.description),
                technologies=_printable_items(project.technologies),
            )
            for project in model.projects
        ),
    )


class ResumeToLaTeXConverter:
    """Converts a ResumeModel to LaTeX, one template per section."""

    def __init__(self, template_registry: Optional[TemplateRegistry] = None):
        self.template_registry = template_registry or TemplateRegistry()

    def _render(self, template_name: str, **context: Any) -> LatexFragment:
        template = self.template_registry.get_template(template_name)
        try:
            rendered = template.render(**context)
        except TemplateError as e:
            raise TemplateRenderError(
                "Failed to render LaTeX template",
                template_name=template_name,
                template_path=self.template_registry.get_template_path(template_name),
                original_error=e,
            ) from e
        return LatexFragment(rendered)

    def _render_section(self, section: str, **context: Any) -> LatexFragment:
        return self._render(f"types/{section}/template.tex.jinja", **context)

    def generate_preamble(self) -> LatexFragment:
        """Static preamble; only paper size and margins come from settings."""
        document_settings = get_settings().document
        margins: Dict[str, Any] = OmegaConf.to_container(document_settings.margins, resolve=True)
        return self._render(
            "structure/preamble.tex.jinja",
            paper=document_settings.paper,
            margins=margins,
        )

    def generate_header(self, model: ResumeModel) -> LatexFragment:
        """Centered name plus the location and contact line."""
        return self._render_section(
            "header", name=model.name, contact_values=model.contact_values()
        )

    def convert_profile(self, model: ResumeModel) -> LatexFragment:
        return self._render_section("profile", title=model.title)

    def convert_experience(self, model: ResumeModel) -> LatexFragment:
        return self._render_section("experience", entries=model.experience)

    def convert_education(self, model: ResumeModel) -> LatexFragment:
        return self._render_section("education", entries=model.education)

    def convert_skills(self, model: ResumeModel) -> LatexFragment:
        return self._render_section("skills", skills=model.skills)

    def convert_projects(self, model: ResumeModel) -> LatexFragment:
        return self._render_section("projects", entries=model.projects)

    def generate_document(self, model: ResumeModel) -> str:
        """
        Generate the complete LaTeX document.

        Section order is fixed: Profile, Experience, Education, Skills, Projects.
        A section whose backing field is empty is left out entirely, header included.

        Args:
            model: Normalized resume

        Returns:
            LaTeX source, byte-identical for equal models

        Raises:
            TypeError: If model is not a ResumeModel
            TemplateRenderError: If a template fails to render
        """
        if not isinstance(model, ResumeModel):
            raise TypeError(
                f"compile_document expects a ResumeModel, got {type(model).__name__}; "
                "normalize raw input first"
            )
        model = printable_model(model)

        sections = []
        if model.title:
            sections.append(self.convert_profile(model))
        if model.experience:
            sections.append(self.convert_experience(model))
        if model.education:
            sections.append(self.convert_education(model))
        if model.skills:
            sections.append(self.convert_skills(model))
        if model.projects:
            sections.append(self.convert_projects(model))

        _log_debug(f"Rendering document with {len(sections)} optional sections")

        document = self._render(
            "structure/document.tex.jinja",
            preamble=self.generate_preamble(),
            header=self.generate_header(model),
            sections=sections,
        )
        return set_max_consecutive_blank_lines(str(document))


@lru_cache(maxsize=1)
def _default_converter() -> ResumeToLaTeXConverter:
    return ResumeToLaTeXConverter()


def compile_document(model: ResumeModel) -> str:
    """
    Compile a ResumeModel into LaTeX source.

    Example:
        >>> latex = compile_document(ResumeModel(name="Ada Lovelace"))
        >>> "{\\\\Huge \\\\scshape {Ada Lovelace}}" in latex
        True
    """
    return _default_converter().generate_document(model)
