"""
Shared utilities for restex.

Common functionality used across contexts:
- Settings loading
- Logger setup
- Text processing
"""

from restex.utils.settings import get_empty_sentinels, get_settings, load_settings
from restex.utils.timestamp import now

__all__ = ["get_empty_sentinels", "get_settings", "load_settings", "now"]
