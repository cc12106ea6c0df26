"""Timestamp helpers for naming session directories."""

from datetime import datetime


def now() -> str:
    """Current local time as a sortable, path-safe string (20251114_123456)."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")
