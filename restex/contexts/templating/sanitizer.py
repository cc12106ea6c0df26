"""
Text Sanitization for LaTeX Output

Turns untrusted text (LLM output, user edits) into an inert LaTeX leaf.

Phases, in this order:
1. neutralize_commands: strip denylisted command invocations with their
   arguments, drop any command not on the allowlist, drop single-character
   escapes other than \\\\, \\<space>, \\<newline> and \\<tab>
2. escape_reserved: replace every reserved character with its safe form
3. truncate to the configured emitted length, on escape-form boundaries

Phase 1 must see the raw text: phase 2 introduces backslashes of its own that
would otherwise be read as commands.
"""

import re
from typing import Optional

from restex.contexts.templating.latex_patterns import (
    COMMAND_TOKEN,
    EMITTED_UNIT,
    ESCAPE_MAP,
    ESCAPED_TOKEN,
    STREAM_NUMBER,
    UNESCAPE_MAP,
    CommandPolicy,
)
from restex.utils.settings import get_settings
from restex.utils.text_processing import extract_balanced_delimiters, fold_whitespace

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
ARGUMENT_DELIMITERS = {"{": "}", "[": "]"}


def _skip_arguments(text: str, pos: int) -> int:
    """
    Skip a denylisted command's stream number and attached argument groups.

    Returns the position just after the last group. An unbalanced group
    swallows the rest of the text.
    """
    number = STREAM_NUMBER.match(text, pos)
    if number:
        pos = number.end()

    while True:
        group_start = pos
        while group_start < len(text) and text[group_start] in " \t":
            group_start += 1

        if group_start >= len(text) or text[group_start] not in ARGUMENT_DELIMITERS:
            return pos

        open_char = text[group_start]
        try:
            _, pos = extract_balanced_delimiters(
                text, group_start + 1, open_char=open_char, close_char=ARGUMENT_DELIMITERS[open_char]
            )
        except ValueError:
            return len(text)


def neutralize_commands(text: str) -> str:
    """
    Remove every command invocation that could do more than cosmetic formatting.

    Example:
        >>> neutralize_commands(r"Led \\immediate\\write18{rm -rf /} team of 5")
        'Led  team of 5'
        >>> neutralize_commands(r"\\textbf{Bold} \\foo move")
        '\\\\textbf{Bold}  move'
    """
    pieces = []
    pos = 0

    while pos < len(text):
        match = COMMAND_TOKEN.search(text, pos)
        if match is None:
            pieces.append(text[pos:])
            break

        pieces.append(text[pos:match.start()])
        name = match.group("name")
        char = match.group("char")

        if name is not None:
            if name in CommandPolicy.DENYLIST:
                pos = _skip_arguments(text, match.end())
                continue
            if name in CommandPolicy.ALLOWLIST:
                pieces.append(match.group(0))
        elif char is not None and char in CommandPolicy.ALLOWED_CHAR_ESCAPES:
            pieces.append(match.group(0))

        pos = match.end()

    return "".join(pieces)


def escape_reserved(text: str) -> str:
    """
    Replace reserved characters with their safe forms in a single pass.

    Control characters are dropped and whitespace runs fold to one space, so a
    leaf can never open a blank line inside a command argument.

    Example:
        >>> escape_reserved("R&D: 50% of $1M_budget")
        'R\\\\&D: 50\\\\% of \\\\$1M\\\\_budget'
    """
    text = fold_whitespace(CONTROL_CHARS.sub("", text))
    return "".join(ESCAPE_MAP.get(char, char) for char in text)


def _truncate(escaped: str, max_length: int) -> str:
    if len(escaped) <= max_length:
        return escaped

    length = 0
    units = []
    for unit in EMITTED_UNIT.finditer(escaped):
        token = unit.group(0)
        if length + len(token) > max_length:
            break
        units.append(token)
        length += len(token)

    return "".join(units).rstrip()


def escape(raw: str, max_length: Optional[int] = None) -> str:
    """
    Sanitize one untrusted string for interpolation into LaTeX.

    Args:
        raw: Untrusted text
        max_length: Cap on the emitted length (default: sanitizer.max_field_length setting)

    Returns:
        Text with no invocable command and no unescaped reserved character

    Example:
        >>> escape(r"\\input{/etc/passwd}Ada_Lovelace")
        'Ada\\\\_Lovelace'
    """
    if not raw:
        return ""
    if max_length is None:
        max_length = get_settings().sanitizer.max_field_length

    return _truncate(escape_reserved(neutralize_commands(raw)), max_length)


def unescape(text: str) -> str:
    """
    Invert escape_reserved: turn safe forms back into the characters they stand for.

    Example:
        >>> unescape(r"R\\&D \\textasciitilde{}5\\%")
        'R&D ~5%'
    """
    return ESCAPED_TOKEN.sub(lambda match: UNESCAPE_MAP[match.group(0)], text)


def rendered_text(raw: str) -> str:
    """
    The text a reader of the compiled document sees for a raw value.

    Equal to raw for ordinary text; differs only where commands were stripped,
    whitespace was folded or the value was truncated.
    """
    return unescape(escape(raw))
