"""
Session logging for docket step runs.

A session is one invocation of the step (from the CLI or a host) and gets its
own directory with a single log file. The file opens with a provenance header
(command line, working directory, Python version, plugin title) so a docket
that comes out wrong can be traced back to the run that produced it.

Context-specific wrappers ([resolve], [render], [step]) live in
contexts/{context}/logger.py.
"""

import sys
from pathlib import Path

from loguru import logger

# Console colors per level; the file sink is uncolored
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: dict = None,
    level_colors: dict = None,
    console: bool = True,
) -> Path:
    """
    Start a logging session for a docket step run.

    Replaces any existing loguru sinks with a DEBUG file sink at
    log_dir/<context_name>.log and, unless console is False, an INFO sink on
    stdout. Hosts that embed the step usually pass console=False and keep
    their own console output.

    Args:
        context_name: Session kind, used as the log file name (e.g., "step")
        log_dir: Directory for this session, created if missing
        extra_provenance: Additional header lines (e.g., {"Plugin": title})
        level_colors: Console color overrides (e.g., {"INFO": "<cyan>"})
        console: Also log INFO and above to stdout

    Returns:
        Path to the session log file

    Example:
        log_file = setup_logger(
            context_name="step",
            log_dir=Path("outs/logs/step_20261019_123456"),
            extra_provenance={"Plugin": "intranda_step_save_docket_file"},
        )
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    colors = {**LEVEL_COLORS, **(level_colors or {})}
    for level_name, color in colors.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=LOG_FORMAT, level="DEBUG")

    if console:
        logger.add(sys.stdout, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: dict = None) -> None:
    """Write the session header: how the step was invoked, plus extra_context."""
    logger.info("=" * 80)
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
