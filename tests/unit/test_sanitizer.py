"""
Unit tests for LaTeX text sanitization.

Tests restex.contexts.templating.sanitizer.
"""

import pytest

from restex.contexts.templating.latex_patterns import ESCAPED_TOKEN, RESERVED_CHARS
from restex.contexts.templating.sanitizer import (
    escape,
    escape_reserved,
    neutralize_commands,
    rendered_text,
    unescape,
)

HOSTILE_INPUTS = [
    r"Led \immediate\write18{rm -rf /} team of 5",
    r"\input{/etc/passwd}",
    r"\include{secrets} and \openin5=file",
    r"\def\x{boom}\x",
    r"\newcommand{\pwn}[1]{#1}\pwn{a}",
    r"\begin{verbatim}raw\end{verbatim}",
    r"\documentclass{article}\usepackage{shellesc}",
    r"\csname input\endcsname{/etc/passwd}",
    "\\input{unterminated",
    "trailing backslash \\",
    r"\textbf{ok} \emph{fine} \unknown{gone}",
    "R&D: 50% of $1M_budget #1 ^ ~ | < > { }",
    "tab\tand\nnewline\x00control",
]


def _has_bare_reserved(text: str) -> bool:
    stripped = ESCAPED_TOKEN.sub("", text)
    return any(char in RESERVED_CHARS for char in stripped)


@pytest.mark.unit
class TestNeutralizeCommands:
    """Tests for neutralize_commands function."""

    def test_shell_escape_is_removed_with_arguments(self):
        """Test that write18 goes with its stream number and argument."""
        result = neutralize_commands(r"Led \immediate\write18{rm -rf /} team of 5")
        assert result == "Led  team of 5"

    def test_file_input_is_removed(self):
        """Test that input and its path argument are removed."""
        assert neutralize_commands(r"\input{/etc/passwd}Ada") == "Ada"

    def test_optional_and_multiple_arguments_are_removed(self):
        """Test that every argument group of a denylisted command goes."""
        assert neutralize_commands(r"\newcommand{\pwn}[1]{#1}after") == "after"

    def test_unbalanced_argument_swallows_rest(self):
        """Test that an unclosed argument removes the rest of the text."""
        assert neutralize_commands("keep \\input{/etc/passwd and more") == "keep "

    def test_allowlisted_commands_survive(self):
        """Test that cosmetic commands are kept."""
        assert neutralize_commands(r"\textbf{Bold} \emph{it}") == r"\textbf{Bold} \emph{it}"

    def test_unknown_commands_are_dropped(self):
        """Test that commands outside both lists lose their name."""
        assert neutralize_commands(r"\textbf{Bold} \foo move") == r"\textbf{Bold}  move"

    def test_starred_command(self):
        """Test starred forms of allowed and denied commands."""
        assert neutralize_commands(r"\vspace*{2pt}x") == r"\vspace*{2pt}x"
        assert neutralize_commands(r"\include*{x}y") == "y"

    def test_allowed_char_escapes_survive(self):
        """Test escaped backslash and escaped space."""
        assert neutralize_commands("a\\\\b") == "a\\\\b"
        assert neutralize_commands("a\\ b") == "a\\ b"

    def test_other_char_escapes_are_dropped(self):
        """Test that other single-character escapes are dropped."""
        assert neutralize_commands(r"R\&D") == "RD"
        assert neutralize_commands(r"100\%") == "100"

    def test_lone_trailing_backslash_is_dropped(self):
        """Test a backslash at the end of the text."""
        assert neutralize_commands("end\\") == "end"

    def test_plain_text_untouched(self):
        """Test text with no commands."""
        assert neutralize_commands("Plain text, no commands.") == "Plain text, no commands."


@pytest.mark.unit
class TestEscapeReserved:
    """Tests for escape_reserved function."""

    def test_reserved_characters(self):
        """Test the backslash-prefixed escape forms."""
        assert escape_reserved("R&D: 50% of $1M_budget") == r"R\&D: 50\% of \$1M\_budget"

    def test_word_forms(self):
        """Test the text-command escape forms."""
        assert escape_reserved("a^b~c") == r"a\textasciicircum{}b\textasciitilde{}c"
        assert escape_reserved("x|y<z>") == r"x\textbar{}y\textless{}z\textgreater{}"

    def test_backslash_and_braces(self):
        """Test backslash and braces together."""
        assert escape_reserved("\\{}") == r"\textbackslash{}\{\}"

    def test_whitespace_folds_and_controls_drop(self):
        """Test whitespace folding and control character removal."""
        assert escape_reserved("  a\n\n b\tc\x00d  ") == "a b cd"

    def test_single_pass(self):
        """Test that escape forms are not escaped again."""
        # The braces of \textbackslash{} are not re-escaped
        assert escape_reserved("\\") == r"\textbackslash{}"


@pytest.mark.unit
class TestEscape:
    """Tests for the full escape pipeline."""

    def test_ordinary_text_unchanged(self):
        """Test that ordinary text passes through."""
        assert escape("Senior Software Engineer") == "Senior Software Engineer"

    def test_empty_and_blank(self):
        """Test that blank input escapes to nothing."""
        assert escape("") == ""
        assert escape("   ") == ""

    def test_input_payload(self):
        """Test the file input payload."""
        assert escape(r"\input{/etc/passwd}Ada_Lovelace") == r"Ada\_Lovelace"

    def test_shell_escape_payload(self):
        """Test the shell escape payload."""
        assert escape(r"Led \immediate\write18{rm -rf /} team of 5") == "Led team of 5"

    def test_allowlisted_command_renders_literally(self):
        """Test that a kept command is printed, not run."""
        assert escape(r"\textbf{Bold}") == r"\textbackslash{}textbf\{Bold\}"

    @pytest.mark.parametrize("raw", HOSTILE_INPUTS)
    def test_no_bare_reserved_characters(self, raw):
        """Test that no reserved character is left bare."""
        assert not _has_bare_reserved(escape(raw))

    @pytest.mark.parametrize("raw", HOSTILE_INPUTS)
    def test_no_denylisted_command_invocable(self, raw):
        """Test that every backslash belongs to an escape form."""
        result = escape(raw)
        # Every backslash in the output starts an escape form
        assert result.count("\\") == len(ESCAPED_TOKEN.findall(result))

    @pytest.mark.parametrize("raw", HOSTILE_INPUTS)
    def test_single_line(self, raw):
        """Test that output never spans lines."""
        assert "\n" not in escape(raw)


@pytest.mark.unit
class TestTruncation:
    """Truncation caps the emitted length without splitting escape forms."""

    def test_short_text_untouched(self):
        """Test text at the cap."""
        assert escape("abc", max_length=3) == "abc"

    def test_cut_before_escape_form(self):
        """Test that the cut falls before an escape form that would not fit."""
        assert escape("a&b", max_length=2) == "a"

    def test_escape_form_kept_whole(self):
        """Test that an escape form that fits is kept whole."""
        assert escape("a&b", max_length=3) == r"a\&"

    def test_word_form_never_split(self):
        """Test that a word form is dropped rather than split."""
        result = escape("ab~~~~", max_length=10)
        assert result == "ab"
        assert not _has_bare_reserved(result)

    def test_trailing_space_is_stripped(self):
        """Test that the cut text has no trailing space."""
        assert escape("abc def", max_length=4) == "abc"

    @pytest.mark.parametrize("max_length", range(1, 40))
    def test_cap_and_safety_hold_for_every_length(self, max_length):
        """Test the length cap and escaping at every cap."""
        result = escape(r"R&D_50% {x} ~ ^ \textbf{y} | <z>", max_length=max_length)
        assert len(result) <= max_length
        assert not _has_bare_reserved(result)

    def test_default_cap_from_settings(self):
        """Test that the default cap comes from settings."""
        assert len(escape("x" * 5000)) == 1000


@pytest.mark.unit
class TestUnescape:
    """Tests for unescape and rendered_text."""

    def test_inverts_escape_reserved(self):
        """Test unescape on mixed escape forms."""
        assert unescape(r"R\&D \textasciitilde{}5\%") == "R&D ~5%"

    def test_inverts_every_reserved_character(self):
        """Test unescape over every reserved character."""
        raw = "\\ { } $ & % # _ ^ ~ | < >"
        assert unescape(escape_reserved(raw)) == raw

    def test_rendered_text_of_ordinary_text(self):
        """Test that ordinary text renders as itself."""
        assert rendered_text("Cut runtime by 40% ($2M)") == "Cut runtime by 40% ($2M)"

    def test_rendered_text_reflects_stripping(self):
        """Test that stripped commands are missing from the rendered text."""
        assert rendered_text(r"\input{x}Ada") == "Ada"
        assert rendered_text(r"\textbf{Bold}") == r"\textbf{Bold}"
        assert rendered_text(r"R\&D") == "RD"

    @pytest.mark.parametrize("raw", HOSTILE_INPUTS)
    def test_rendered_text_is_stable(self, raw):
        """Test that rendering twice equals rendering once."""
        once = rendered_text(raw)
        assert rendered_text(once) == once
