"""
LaTeX Parser

Reads a document produced by the LaTeX generator back into a ResumeModel.

The parser only understands the generator's own layout. It exists to validate
round trips: compile -> parse must lose nothing except what the sanitizer
strips and the fields the document does not render (experience tags, project
links).

Contact kinds are not written to the document, they are inferred from the values.
"""

import re
from typing import Callable, Dict, List, Optional, Tuple

from restex.contexts.templating.exceptions import DocumentParseError
from restex.contexts.templating.latex_patterns import (
    DocumentPatterns,
    LinePatterns,
    SectionNames,
)
from restex.contexts.templating.logger import _log_debug
from restex.contexts.templating.resume_data_structure import (
    Contact,
    ContactKind,
    Education,
    Experience,
    Project,
    ResumeModel,
    infer_contact_kind,
)
from restex.contexts.templating.sanitizer import unescape

# Layout-only lines carrying no data
SKIPPED_LINE = re.compile(r"^\s*(?:%.*|\\vspace\*?\{[^}]*\})?\s*$")

HEADER_RE = re.compile(LinePatterns.HEADER)
NAME_RE = re.compile(LinePatterns.NAME)
CONTACT_LINE_RE = re.compile(LinePatterns.CONTACT_LINE)
TITLE_RE = re.compile(LinePatterns.TITLE)
EXPERIENCE_HEAD_RE = re.compile(LinePatterns.EXPERIENCE_HEAD)
EXPERIENCE_ROLE_RE = re.compile(LinePatterns.EXPERIENCE_ROLE)
EDUCATION_HEAD_RE = re.compile(LinePatterns.EDUCATION_HEAD)
EDUCATION_DEGREE_RE = re.compile(LinePatterns.EDUCATION_DEGREE)
ITEM_RE = re.compile(LinePatterns.ITEM)
SKILLS_RE = re.compile(LinePatterns.SKILLS)
PROJECT_NAME_RE = re.compile(LinePatterns.PROJECT_NAME)
PROJECT_BODY_RE = re.compile(LinePatterns.PROJECT_BODY)


class _LineCursor:
    """Forward-only view over the data-carrying lines of a document body."""

    def __init__(self, body: str, first_line_number: int):
        self.lines: List[Tuple[int, str]] = [
            (first_line_number + offset, line.rstrip())
            for offset, line in enumerate(body.split("\n"))
            if not SKIPPED_LINE.match(line)
        ]
        self.pos = 0

    def peek(self) -> Optional[str]:
        return self.lines[self.pos][1] if self.pos < len(self.lines) else None

    def advance(self) -> str:
        line = self.lines[self.pos][1]
        self.pos += 1
        return line

    def expect(self, pattern: re.Pattern, what: str) -> re.Match:
        line = self.peek()
        match = pattern.match(line) if line is not None else None
        if match is None:
            raise self.error(f"Expected {what}")
        self.advance()
        return match

    def accept(self, pattern: re.Pattern) -> Optional[re.Match]:
        line = self.peek()
        match = pattern.match(line) if line is not None else None
        if match is not None:
            self.advance()
        return match

    def error(self, message: str) -> DocumentParseError:
        if self.pos < len(self.lines):
            line_number, line = self.lines[self.pos]
            return DocumentParseError(message, line_number=line_number, line=line)
        return DocumentParseError(f"{message} (reached end of document)")


def _split_list(escaped: str) -> Tuple[str, ...]:
    return tuple(unescape(item) for item in escaped.split(DocumentPatterns.LIST_SEPARATOR))


class LaTeXToResumeConverter:
    """Converts generated LaTeX back to a ResumeModel."""

    def __init__(self):
        self._section_parsers: Dict[str, Callable[[_LineCursor], Dict[str, object]]] = {
            SectionNames.PROFILE: self.parse_profile,
            SectionNames.EXPERIENCE: self.parse_experience,
            SectionNames.EDUCATION: self.parse_education,
            SectionNames.SKILLS: self.parse_skills,
            SectionNames.PROJECTS: self.parse_projects,
        }

    def parse_header(self, cursor: _LineCursor) -> Dict[str, object]:
        """Name, location and contacts from the centered block."""
        if cursor.peek() != DocumentPatterns.BEGIN_CENTER:
            raise cursor.error("Expected the centered header block")
        cursor.advance()

        name_line = cursor.accept(NAME_RE)
        name = unescape(name_line.group("name")) if name_line is not None else ""

        location = ""
        contacts: List[Contact] = []
        contact_line = cursor.accept(CONTACT_LINE_RE)
        if contact_line is not None:
            values = [
                unescape(part)
                for part in contact_line.group("contacts").split(DocumentPatterns.CONTACT_SEPARATOR)
            ]
            values = [value for value in values if value]
            if values and infer_contact_kind(values[0]) is None:
                location = values.pop(0)
            contacts = [
                Contact(kind=infer_contact_kind(value) or ContactKind.WEBSITE, value=value)
                for value in values
            ]

        if cursor.peek() != DocumentPatterns.END_CENTER:
            raise cursor.error("Expected the end of the header block")
        cursor.advance()

        return {"name": name, "location": location, "contacts": tuple(contacts)}

    def parse_profile(self, cursor: _LineCursor) -> Dict[str, object]:
        return {"title": unescape(cursor.expect(TITLE_RE, "the profile line").group("title"))}

    def _parse_items(self, cursor: _LineCursor) -> Tuple[str, ...]:
        line = cursor.peek()
        if line is None or not line.startswith(DocumentPatterns.BEGIN_ITEMIZE):
            return ()
        cursor.advance()

        items = []
        while cursor.peek() != DocumentPatterns.END_ITEMIZE:
            items.append(unescape(cursor.expect(ITEM_RE, "an \\item line").group("text")))
        cursor.advance()
        return tuple(items)

    def parse_experience(self, cursor: _LineCursor) -> Dict[str, object]:
        entries = []
        while True:
            head = cursor.accept(EXPERIENCE_HEAD_RE)
            if head is None:
                break
            role = cursor.expect(EXPERIENCE_ROLE_RE, "the position line")
            entries.append(
                Experience(
                    position=unescape(role.group("position")),
                    company=unescape(head.group("company")),
                    location=unescape(head.group("location")),
                    dates=unescape(role.group("dates")),
                    highlights=self._parse_items(cursor),
                )
            )
        return {"experience": tuple(entries)}

    def parse_education(self, cursor: _LineCursor) -> Dict[str, object]:
        entries = []
        while True:
            head = cursor.accept(EDUCATION_HEAD_RE)
            if head is None:
                break
            degree = cursor.expect(EDUCATION_DEGREE_RE, "the degree line")
            entries.append(
                Education(
                    degree=unescape(degree.group("degree")),
                    institution=unescape(head.group("institution")),
                    location=unescape(head.group("location")),
                    dates=unescape(degree.group("dates")),
                    details=self._parse_items(cursor),
                )
            )
        return {"education": tuple(entries)}

    def parse_skills(self, cursor: _LineCursor) -> Dict[str, object]:
        skills = cursor.expect(SKILLS_RE, "the skills line").group("skills")
        return {"skills": _split_list(skills)}

    def parse_projects(self, cursor: _LineCursor) -> Dict[str, object]:
        projects = []
        while True:
            head = cursor.accept(PROJECT_NAME_RE)
            if head is None:
                break

            description, technologies = "", ()
            line = cursor.peek()
            if line is not None and not HEADER_RE.match(line) and not PROJECT_NAME_RE.match(line):
                body = cursor.expect(PROJECT_BODY_RE, "the project description line")
                description = unescape(body.group("description"))
                if body.group("technologies") is not None:
                    technologies = _split_list(body.group("technologies"))

            projects.append(
                Project(name=unescape(head.group("name")), description=description, technologies=technologies)
            )
        return {"projects": tuple(projects)}

    def parse_document(self, latex_str: str) -> ResumeModel:
        """
        Parse a complete generated document.

        Args:
            latex_str: LaTeX source produced by compile_document

        Returns:
            ResumeModel with unescaped values

        Raises:
            DocumentParseError: If the source does not follow the generator's layout
        """
        begin = latex_str.find(DocumentPatterns.BEGIN_DOCUMENT)
        end = latex_str.rfind(DocumentPatterns.END_DOCUMENT)
        if begin == -1 or end == -1 or end < begin:
            raise DocumentParseError("LaTeX source has no document body")

        body_start = begin + len(DocumentPatterns.BEGIN_DOCUMENT)
        first_line_number = latex_str.count("\n", 0, body_start) + 1
        cursor = _LineCursor(latex_str[body_start:end], first_line_number)

        fields: Dict[str, object] = self.parse_header(cursor)

        while cursor.peek() is not None:
            header = cursor.expect(HEADER_RE, "a section header")
            section = header.group("title")
            if section not in self._section_parsers:
                raise cursor.error(f"Unknown section '{section}'")
            _log_debug(f"Parsing section {section}")
            fields.update(self._section_parsers[section](cursor))

        return ResumeModel(**fields)


def parse_latex(latex_str: str) -> ResumeModel:
    """Parse LaTeX produced by compile_document back into a ResumeModel."""
    return LaTeXToResumeConverter().parse_document(latex_str)
