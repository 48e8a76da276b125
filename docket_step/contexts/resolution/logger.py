"""
Resolution context logger.

Provides logging interface for resolution context with automatic [resolve] prefix.
All resolution modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[resolve]"


def _log_info(message: str) -> None:
    """Log info message with [resolve] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [resolve] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [resolve] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [resolve] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_descriptor(descriptor) -> None:
    """Log a resolved RenderJobDescriptor."""
    _log_info(f"Resolved docket job: {descriptor.output_path}")
    _log_debug(f"  Template: {descriptor.template_path}")
    _log_debug(f"  Format: {descriptor.mime_type}")
    _log_debug(f"  DPI: {descriptor.dots_per_inch}")
