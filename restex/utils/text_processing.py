"""
Text processing utilities shared by the sanitizer, compiler and validation code.
"""

import difflib
import re
from typing import List, Tuple


def extract_balanced_delimiters(
    text: str,
    start_pos: int,
    open_char: str = '{',
    close_char: str = '}',
    escape_char: str = '\\'
) -> Tuple[str, int]:
    """
    Extract content between balanced delimiters, handling escaped characters.

    Assumes start_pos is just AFTER an opening delimiter. Counts nested delimiters
    to find the matching closing delimiter, skipping escaped characters.

    Args:
        text: Text containing delimited content
        start_pos: Position after the opening delimiter
        open_char: Opening delimiter character (default: '{')
        close_char: Closing delimiter character (default: '}')
        escape_char: Character used for escaping (default: '\\')

    Returns:
        (content, end_pos) where content excludes the delimiters and end_pos is
        the position after the closing delimiter

    Raises:
        ValueError: If delimiters are unmatched

    Example:
        >>> extract_balanced_delimiters("foo {bar {nested} baz} qux", 5)
        ('bar {nested} baz', 22)
    """
    depth = 1
    pos = start_pos

    while pos < len(text) and depth > 0:
        if text[pos] == escape_char:
            pos += 2
            continue
        elif text[pos] == open_char:
            depth += 1
        elif text[pos] == close_char:
            depth -= 1
        pos += 1

    if depth != 0:
        raise ValueError(
            f"Unmatched {open_char}{close_char} delimiters starting at position {start_pos}"
        )

    return text[start_pos:pos - 1], pos


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display with ellipsis if needed.

    Example:
        >>> truncate_display("this is a very long string", 10)
        'this is...'
    """
    return text if len(text) <= max_len else text[: max_len - 3] + "..."


def fold_whitespace(text: str) -> str:
    """Collapse every whitespace run (newlines included) to one space and strip."""
    return re.sub(r"\s+", " ", text).strip()


def set_max_consecutive_blank_lines(content: str, max_consecutive: int = 1) -> str:
    """
    Normalize consecutive blank lines to a maximum number.

    Args:
        content: The text content to normalize
        max_consecutive: Maximum number of consecutive blank lines to allow.
                        Use 0 to remove all blank lines (default: 1)

    Returns:
        Content with normalized blank lines

    Example:
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=1)
        'text\\n\\nmore'
    """
    if max_consecutive == 0:
        pattern = r'\n[ \t]*\n([ \t]*\n)*'
    else:
        pattern = r'\n[ \t]*\n([ \t]*\n)+'

    return re.sub(pattern, '\n' * (max_consecutive + 1), content)


def get_line_diff(
    expected: str,
    actual: str,
    context_lines: int = 2,
) -> Tuple[List[str], int]:
    """
    Compare two texts line by line, ignoring blank lines.

    Args:
        expected: Reference text
        actual: Text to check against the reference
        context_lines: Number of context lines around differences

    Returns:
        Tuple of (diff_lines, num_differences) where num_differences counts
        changed lines, not diff headers
    """
    lines1 = [line for line in expected.split('\n') if line.strip()]
    lines2 = [line for line in actual.split('\n') if line.strip()]

    if lines1 == lines2:
        return [], 0

    diff = list(difflib.unified_diff(
        lines1,
        lines2,
        fromfile="expected",
        tofile="actual",
        lineterm='',
        n=context_lines
    ))

    num_diffs = sum(
        1 for line in diff
        if line.startswith(('+', '-')) and not line.startswith(('---', '+++'))
    )
    return diff, num_diffs
