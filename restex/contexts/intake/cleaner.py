"""
Raw Resume Cleaning

Recursively strips empty and placeholder values from an LLM-produced JSON tree
before it reaches the normalizer.

Rules:
- Strings are trimmed; "" and empty sentinels ("Not provided") are absent
- Arrays drop absent elements and elements that cleaned to an empty container
- Objects drop keys whose cleaned value is absent or an empty container
- Numbers and booleans pass through unchanged
- Subtrees nested deeper than the configured limit are dropped

Cleaning is idempotent: clean(clean(x)) == clean(x).
"""

from typing import Any, Collection, Optional

from restex.contexts.intake.logger import _log_warning
from restex.utils.settings import get_empty_sentinels, get_settings


def is_empty_value(value: Any, sentinels: Optional[Collection[str]] = None) -> bool:
    """
    Check whether a value means "no data".

    Args:
        value: Any JSON value
        sentinels: Placeholder strings treated as empty (default: configured sentinels)

    Returns:
        True for None, whitespace-only strings, sentinel strings and empty containers
    """
    if sentinels is None:
        sentinels = get_empty_sentinels()

    if value is None:
        return True
    if isinstance(value, str):
        stripped = value.strip()
        return not stripped or stripped in sentinels
    if isinstance(value, (dict, list, tuple)):
        return len(value) == 0
    return False


def clean(node: Any, max_depth: Optional[int] = None) -> Any:
    """
    Remove empty and placeholder values from a JSON tree.

    Args:
        node: Deserialized JSON value (dict, list, str, number, bool or None)
        max_depth: Nesting limit (default: cleaning.max_depth setting)

    Returns:
        Cleaned copy of node, or None when node itself is absent

    Example:
        >>> clean({"name": " Ada ", "title": "Not provided", "skills": ["", "Go"]})
        {'name': 'Ada', 'skills': ['Go']}
    """
    if max_depth is None:
        max_depth = get_settings().cleaning.max_depth

    return _clean_node(node, 0, max_depth, get_empty_sentinels())


def _clean_node(node: Any, depth: int, max_depth: int, sentinels: Collection[str]) -> Any:
    if depth > max_depth:
        _log_warning(f"Dropping subtree nested deeper than {max_depth} levels")
        return None

    if isinstance(node, dict):
        cleaned = {}
        for key, value in node.items():
            cleaned_value = _clean_node(value, depth + 1, max_depth, sentinels)
            if not is_empty_value(cleaned_value, sentinels):
                cleaned[key] = cleaned_value
        return cleaned

    if isinstance(node, (list, tuple)):
        cleaned = []
        for item in node:
            cleaned_item = _clean_node(item, depth + 1, max_depth, sentinels)
            if not is_empty_value(cleaned_item, sentinels):
                cleaned.append(cleaned_item)
        return cleaned

    if isinstance(node, str):
        stripped = node.strip()
        return None if is_empty_value(stripped, sentinels) else stripped

    return node
