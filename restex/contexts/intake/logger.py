"""
Intake context logger.

Provides logging interface for the intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[intake]"


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_shape_detected(shape_name: str, top_level_keys) -> None:
    """Log which raw shape the normalizer picked."""
    keys = ", ".join(sorted(str(key) for key in top_level_keys)) or "(none)"
    _log_debug(f"Detected {shape_name} shape (top-level keys: {keys})")


def log_normalization_summary(model) -> None:
    """Log section counts of a freshly built ResumeModel."""
    _log_debug(
        f"Normalized resume: {len(model.contacts)} contacts, "
        f"{len(model.experience)} experience, {len(model.education)} education, "
        f"{len(model.skills)} skills, {len(model.projects)} projects"
    )
