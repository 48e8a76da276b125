"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[render]"


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(process_title: str, descriptor, scratch_dir: Path) -> None:
    """Log start of a docket render with context."""
    _log_info(f"Rendering docket for process: {process_title}")
    _log_debug(f"  Template: {descriptor.template_path}")
    _log_debug(f"  Format: {descriptor.mime_type} at {descriptor.dots_per_inch} DPI")
    _log_debug(f"  Scratch directory: {scratch_dir}")


def log_render_result(process_title: str, result, verbose: bool = False) -> None:
    """
    Log render result with diagnostics.

    Args:
        process_title: Process the docket was rendered for
        result: RenderResult from FopRenderer.render()
        verbose: Show all formatter warnings and output (default: False)
    """
    _log_success(f"{process_title}: docket written to {result.output_path} ({result.elapsed_s:.2f}s)")
    if result.page_count is not None:
        _log_debug(f"  Pages: {result.page_count}")

    if result.warnings:
        _log_warning(f"{len(result.warnings)} formatter warnings")
        warning_limit = len(result.warnings) if verbose else 3
        for i, warn in enumerate(result.warnings[:warning_limit], 1):
            _log_debug(f"  Warning {i}: {warn}")
        if len(result.warnings) > warning_limit:
            _log_debug(f"  ... and {len(result.warnings) - warning_limit} more warnings")

    if verbose and result.stdout:
        logger.opt(raw=True).debug(f"\n{'=' * 80}\nFORMATTER STDOUT:\n{'=' * 80}\n{result.stdout}\n")


def log_render_failure(process_title: str, error) -> None:
    """Log a RenderError, including the formatter's stderr when there is any."""
    _log_error(f"Rendering failed for process {process_title}: {error.message}")
    if error.command:
        _log_debug(f"  Command: {' '.join(str(part) for part in error.command)}")
    if error.returncode is not None:
        _log_error(f"  Exit code: {error.returncode}")
    # opt(raw=True) keeps multi-line formatter output unprefixed
    if error.stderr:
        logger.opt(raw=True).debug(f"\n{'=' * 80}\nFORMATTER STDERR:\n{'=' * 80}\n{error.stderr}\n")
