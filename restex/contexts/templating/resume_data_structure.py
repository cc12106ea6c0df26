"""
Resume Data Structure

Canonical, immutable representation of a resume. This structure is the
interface between the Intake context (which builds it from raw LLM JSON) and
the Templating context (which compiles and projects it).

Every scalar defaults to "" and every sequence to an empty tuple, so consumers
can iterate unconditionally. Instances are never mutated after construction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ContactKind(str, Enum):
    """Contact channels, in canonical emission order."""

    EMAIL = "email"
    PHONE = "phone"
    LINKEDIN = "linkedin"
    GITHUB = "github"
    WEBSITE = "website"

    @classmethod
    def ordered(cls) -> Tuple["ContactKind", ...]:
        return (cls.EMAIL, cls.PHONE, cls.LINKEDIN, cls.GITHUB, cls.WEBSITE)


@dataclass(frozen=True)
class Contact:
    kind: ContactKind
    value: str


@dataclass(frozen=True)
class Education:
    """
    Single education entry.

    Attributes:
        degree: Degree name (e.g., "BSc Computer Science")
        institution: School or university
        location: Free-form location string
        dates: Free-form date range as written by the source
        details: Coursework, honors, GPA and similar one-liners
    """

    degree: str = ""
    institution: str = ""
    location: str = ""
    dates: str = ""
    details: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Experience:
    """
    Single work experience entry.

    Attributes:
        position: Job title
        company: Employer
        location: Free-form location string
        dates: Free-form date range as written by the source
        highlights: Achievement bullets
        tags: Technology or keyword tags attached to the role
    """

    position: str = ""
    company: str = ""
    location: str = ""
    dates: str = ""
    highlights: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Project:
    """
    Single project entry.

    The link is carried for the plain-text rendition only; the typeset
    document does not render it.
    """

    name: str = ""
    description: str = ""
    technologies: Tuple[str, ...] = ()
    link: str = ""


@dataclass(frozen=True)
class ResumeModel:
    """
    Normalized resume consumed by the compiler and the plain-text projector.

    Attributes:
        name: Full name
        title: Professional title, rendered as the profile block
        location: Location shown in the header
        contacts: Contact entries in the order normalization produced them
        education: Education entries
        experience: Work experience entries
        skills: Flat skill list (category labels are not kept)
        projects: Project entries
    """

    name: str = ""
    title: str = ""
    location: str = ""
    contacts: Tuple[Contact, ...] = ()
    education: Tuple[Education, ...] = ()
    experience: Tuple[Experience, ...] = ()
    skills: Tuple[str, ...] = ()
    projects: Tuple[Project, ...] = ()

    def contact_values(self) -> Tuple[str, ...]:
        """Header line items: location first (when present), then contact values."""
        values = tuple(contact.value for contact in self.contacts)
        return ((self.location,) + values) if self.location else values

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the flat raw shape accepted by the normalizer.

        normalize(model.to_dict()) reproduces the model exactly.
        """
        return {
            "name": self.name,
            "title": self.title,
            "location": self.location,
            "contacts": [
                {"type": contact.kind.value, "value": contact.value}
                for contact in self.contacts
            ],
            "education": [
                {
                    "degree": edu.degree,
                    "institution": edu.institution,
                    "location": edu.location,
                    "dates": edu.dates,
                    "details": list(edu.details),
                }
                for edu in self.education
            ],
            "experience": [
                {
                    "position": exp.position,
                    "company": exp.company,
                    "location": exp.location,
                    "dates": exp.dates,
                    "highlights": list(exp.highlights),
                    "tags": list(exp.tags),
                }
                for exp in self.experience
            ],
            "skills": list(self.skills),
            "projects": [
                {
                    "name": proj.name,
                    "description": proj.description,
                    "technologies": list(proj.technologies),
                    "link": proj.link,
                }
                for proj in self.projects
            ],
        }


def infer_contact_kind(value: str) -> Optional[ContactKind]:
    """
    Guess the contact kind from a bare value.

    Returns None for values that look like neither a handle, an address nor a
    number (typically a location).

    Example:
        >>> infer_contact_kind("ada@example.com")
        <ContactKind.EMAIL: 'email'>
        >>> infer_contact_kind("London, UK") is None
        True
    """
    lowered = value.lower()
    if "@" in value and "/" not in value:
        return ContactKind.EMAIL
    if "linkedin" in lowered:
        return ContactKind.LINKEDIN
    if "github" in lowered:
        return ContactKind.GITHUB
    if lowered.startswith(("http://", "https://", "www.")):
        return ContactKind.WEBSITE
    digits = sum(char.isdigit() for char in value)
    if digits >= 7 and all(char.isdigit() or char in " +-().x" for char in lowered):
        return ContactKind.PHONE
    if " " not in value and "." in value.strip(".") and "," not in value:
        return ContactKind.WEBSITE
    return None
