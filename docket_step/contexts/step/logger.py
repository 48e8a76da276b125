"""
Step context logger.

Provides logging interface for the step plugin with automatic [step] prefix.
"""

from pathlib import Path

from loguru import logger

from docket_step.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[step]"


def setup_step_logger(log_dir: Path, plugin_title: str, console: bool = True) -> Path:
    """
    Setup logger for a step run.

    Args:
        log_dir: Directory for this step session
        plugin_title: Plugin title for the provenance header
        console: Also log to stdout

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="step",
        log_dir=log_dir,
        extra_provenance={"Plugin": plugin_title},
        console=console,
    )


def _log_info(message: str) -> None:
    """Log info message with [step] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [step] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [step] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [step] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")
