"""
LaTeX Pattern Constants

Centralized LaTeX pattern strings used for sanitizing, generation and read-back.
Organized into frozen dataclasses by category for immutability and clear grouping.
"""

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet


@dataclass(frozen=True)
class CommandPolicy:
    """
    Which command-shaped tokens may survive in user text.

    DENYLIST and ALLOWLIST are separate concerns: denylisted commands are
    removed together with their arguments, the allowlist is the final filter
    for every other command token.
    """

    # File I/O, shell escape, macro definition and document structure
    DENYLIST: FrozenSet[str] = frozenset({
        # file access
        "input", "include", "includeonly", "InputIfFileExists", "openin", "openout",
        "read", "readline", "write", "immediate", "closein", "closeout", "newread",
        "newwrite", "lstinputlisting", "verbatiminput", "includegraphics",
        # shell escape
        "shell", "system", "ShellEscape", "directlua", "luaexec", "luadirect",
        "special", "pdfshellescape",
        # macro definition and expansion
        "def", "edef", "gdef", "xdef", "let", "futurelet", "newcommand",
        "renewcommand", "providecommand", "DeclareRobustCommand", "newenvironment",
        "renewenvironment", "catcode", "csname", "endcsname", "expandafter",
        "noexpand", "afterassignment", "makeatletter", "makeatother", "uppercase",
        "lowercase", "scantokens", "loop", "repeat",
        # document structure
        "documentclass", "usepackage", "RequirePackage", "begin", "end",
        "end@document", "endinput", "jobname",
    })

    # Cosmetic commands: bold, italic, emphasis, underline, list item, spacing, line break
    ALLOWLIST: FrozenSet[str] = frozenset({
        "textbf", "textit", "emph", "underline", "item", "hspace", "vspace",
        "quad", "newline", "linebreak",
    })

    # Escaped backslash, escaped space, escaped newline, escaped tab
    ALLOWED_CHAR_ESCAPES: FrozenSet[str] = frozenset({"\\", " ", "\n", "\t"})


@dataclass(frozen=True)
class EscapePatterns:
    """
    Reserved characters and their safe forms.

    The last three (pipe, angle brackets) are not special to LaTeX itself and
    are escaped so the document stays inert if piped through a shell toolchain.
    """

    # One escape form: \textxxx{} word forms or a backslash plus one reserved character
    TOKEN: str = r"\\text(?:backslash|asciicircum|asciitilde|bar|less|greater)\{\}|\\[{}$&%#_]"


ESCAPE_MAP: Dict[str, str] = {
    "\\": r"\textbackslash{}",
    "{": r"\{",
    "}": r"\}",
    "$": r"\$",
    "&": r"\&",
    "%": r"\%",
    "#": r"\#",
    "_": r"\_",
    "^": r"\textasciicircum{}",
    "~": r"\textasciitilde{}",
    "|": r"\textbar{}",
    "<": r"\textless{}",
    ">": r"\textgreater{}",
}
UNESCAPE_MAP: Dict[str, str] = {safe: char for char, safe in ESCAPE_MAP.items()}
RESERVED_CHARS: FrozenSet[str] = frozenset(ESCAPE_MAP)


@dataclass(frozen=True)
class DocumentPatterns:
    """
    Document-level LaTeX patterns.

    Used for document boundary detection and section splitting.
    """

    BEGIN_DOCUMENT: str = r"\begin{document}"
    END_DOCUMENT: str = r"\end{document}"
    BEGIN_CENTER: str = r"\begin{center}"
    END_CENTER: str = r"\end{center}"
    BEGIN_ITEMIZE: str = r"\begin{itemize}"
    END_ITEMIZE: str = r"\end{itemize}"
    CONTACT_SEPARATOR: str = r" $\cdot$ "
    LIST_SEPARATOR: str = ", "


@dataclass(frozen=True)
class SectionNames:
    """Section titles passed to the \\header command, in document order."""

    PROFILE: str = "Profile"
    EXPERIENCE: str = "Experience"
    EDUCATION: str = "Education"
    SKILLS: str = "Skills"
    PROJECTS: str = "Projects"


# Command token as seen by the neutralizer: a named command (optionally starred),
# a single-character escape, or a lone trailing backslash
COMMAND_TOKEN = re.compile(r"\\(?:(?P<name>[A-Za-z@]+)\*?|(?P<char>.)|$)", re.DOTALL)

# Stream number after \write18, \openout3 and similar
STREAM_NUMBER = re.compile(r"\s*=?\s*\d+")

ESCAPED_TOKEN = re.compile(EscapePatterns.TOKEN)

# One emitted unit for truncation: an escape form or any single character
EMITTED_UNIT = re.compile(EscapePatterns.TOKEN + r"|.", re.DOTALL)

# Text produced by escape(): no raw backslash, brace or newline outside escape forms
LEAF = r"(?:[^\\{}\n$&%#_^~|<>]|" + EscapePatterns.TOKEN + r")*"


@dataclass(frozen=True)
class LinePatterns:
    """
    Regexes for the lines the document templates emit, used by the read-back parser.

    Every capture group holds escaped text (LEAF).
    """

    HEADER: str = r"^\\header\{(?P<title>[A-Za-z]+)\}$"
    # Omitted when the name renders empty
    NAME: str = r"^\s*\{\\Huge \\scshape \{(?P<name>" + LEAF + r")\}\}\\\\$"
    CONTACT_LINE: str = r"^\s*(?P<contacts>" + LEAF + r"(?: \$\\cdot\$ " + LEAF + r")*)\\\\$"
    TITLE: str = r"^(?P<title>" + LEAF + r")\\\\$"
    EXPERIENCE_HEAD: str = r"^\\textbf\{(?P<company>" + LEAF + r")\} \\hfill (?P<location>" + LEAF + r")\\\\$"
    EXPERIENCE_ROLE: str = r"^\\textit\{(?P<position>" + LEAF + r")\} \\hfill (?P<dates>" + LEAF + r")\\\\$"
    EDUCATION_HEAD: str = r"^\\textbf\{(?P<institution>" + LEAF + r")\}\\hfill (?P<location>" + LEAF + r")\\\\$"
    EDUCATION_DEGREE: str = r"^(?P<degree>" + LEAF + r") \\hfill (?P<dates>" + LEAF + r")\\\\$"
    ITEM: str = r"^\s*\\item ?(?P<text>" + LEAF + r")$"
    SKILLS: str = r"^(?P<skills>" + LEAF + r")\\\\$"
    PROJECT_NAME: str = r"^\\textbf\{(?P<name>" + LEAF + r")\}\\\\$"
    PROJECT_BODY: str = (
        r"^(?P<description>" + LEAF + r"?)(?: ?\\textit\{\((?P<technologies>" + LEAF + r")\)\})?\\\\$"
    )
