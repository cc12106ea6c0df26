"""
Plain-Text Formatter

Projects a ResumeModel into the line-oriented plain text used for ATS scoring
and as the fallback download.

Layout:
    NAME
    <blank>
    TITLE
    location | contact | contact

    EXPERIENCE
    position, company, location (dates)
    • highlight
    Tags: tag, tag

    EDUCATION / SKILLS / PROJECTS follow the same pattern.

Values are written verbatim (no LaTeX escaping). Empty sections are left out.
"""

from typing import List

from restex.contexts.templating.resume_data_structure import (
    Education,
    Experience,
    Project,
    ResumeModel,
)
from restex.contexts.templating.sanitizer import rendered_text

BULLET = "•"
CONTACT_SEPARATOR = " | "
LIST_SEPARATOR = ", "


def _entry_heading(*parts: str, dates: str = "") -> str:
    """'a, b, c (dates)' from the non-empty parts."""
    heading = LIST_SEPARATOR.join(part for part in parts if part)
    if dates:
        heading = f"{heading} ({dates})" if heading else f"({dates})"
    return heading


def format_experience(entry: Experience) -> List[str]:
    lines = [_entry_heading(entry.position, entry.company, entry.location, dates=entry.dates)]
    lines.extend(f"{BULLET} {highlight}" for highlight in entry.highlights)
    if entry.tags:
        lines.append(f"Tags: {LIST_SEPARATOR.join(entry.tags)}")
    return lines


def format_education(entry: Education) -> List[str]:
    lines = [_entry_heading(entry.degree, entry.institution, entry.location, dates=entry.dates)]
    lines.extend(f"{BULLET} {detail}" for detail in entry.details)
    return lines


def format_project(project: Project) -> List[str]:
    if project.name and project.description:
        lines = [f"{project.name}: {project.description}"]
    else:
        lines = [project.name or project.description]
    if project.technologies:
        lines.append(f"Technologies: {LIST_SEPARATOR.join(project.technologies)}")
    if project.link:
        lines.append(f"Link: {project.link}")
    return lines


def project_plaintext(model: ResumeModel) -> str:
    """
    Render a ResumeModel as plain text.

    The name is written the way the compiled document shows it, so both
    artifacts always carry the same name.

    Args:
        model: Normalized resume

    Returns:
        Plain text ending with a single newline

    Raises:
        TypeError: If model is not a ResumeModel
    """
    if not isinstance(model, ResumeModel):
        raise TypeError(f"project_plaintext expects a ResumeModel, got {type(model).__name__}")

    identity = [rendered_text(model.name), ""]
    if model.title:
        identity.append(model.title)
    contact_values = model.contact_values()
    if contact_values:
        identity.append(CONTACT_SEPARATOR.join(contact_values))

    blocks = ["\n".join(identity).rstrip("\n")]

    if model.experience:
        lines = ["EXPERIENCE"]
        for entry in model.experience:
            lines.extend(format_experience(entry))
        blocks.append("\n".join(lines))

    if model.education:
        lines = ["EDUCATION"]
        for entry in model.education:
            lines.extend(format_education(entry))
        blocks.append("\n".join(lines))

    if model.skills:
        blocks.append(f"SKILLS\n{LIST_SEPARATOR.join(model.skills)}")

    if model.projects:
        lines = ["PROJECTS"]
        for project in model.projects:
            lines.extend(format_project(project))
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks) + "\n"
