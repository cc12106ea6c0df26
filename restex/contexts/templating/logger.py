"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from restex.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[template]"


def setup_templating_logger(log_dir: Path, phase: str = "generate") -> Path:
    """
    Setup logger for templating context.

    Configures loguru with provenance tracking and templating-specific context.

    Args:
        log_dir: Directory for this templating session
        phase: Phase name for provenance ("generate" or "validate")

    Returns:
        Path to log file

    Example:
        from restex.contexts.templating.logger import setup_templating_logger, _log_info

        log_file = setup_templating_logger(log_dir, phase="generate")
        _log_info("Starting generation...")
    """
    return _setup_logger(
        context_name="template",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


# Wrapper functions with automatic [template] prefix


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [template] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [template] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_generation_start(resume_name: str, input_path: Path, log_file: Path) -> None:
    """Log start of generation with context."""
    _log_info(f"Starting to generate {resume_name}")
    _log_info(f"Log file: {log_file}")
    _log_debug(f"Source: {input_path}")


def log_roundtrip_result(roundtrip) -> None:
    """Log the outcome of a RoundtripResult."""
    if roundtrip.success:
        _log_success("Roundtrip validation passed (plaintext diffs: 0)")
    else:
        _log_error(f"Roundtrip validation failed (plaintext diffs: {roundtrip.num_diffs})")
        for line in roundtrip.diff_lines:
            logger.opt(raw=True).debug(f"{line}\n")


def log_generation_result(
    resume_name: str,
    result,  # ConversionResult
    elapsed_time: float,
) -> None:
    """
    Log generation result with output paths or the error.

    Args:
        resume_name: Resume identifier (output file stem)
        result: ConversionResult from generate_resume()
        elapsed_time: Time taken
    """
    if result.success:
        _log_success(f"{resume_name}: generate succeeded ({elapsed_time:.2f}s)")
        if result.latex_path:
            _log_info(f"  LaTeX: {result.latex_path}")
        if result.plaintext_path:
            _log_info(f"  Plain text: {result.plaintext_path}")
    else:
        _log_error(f"Failed to generate {resume_name} ({elapsed_time:.2f}s)")
        if result.error:
            _log_error(f"  Error: {result.error}")
