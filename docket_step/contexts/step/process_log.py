"""
Process log for step outcomes.

The workflow engine shows a per-process journal to operators. Step outcomes are
appended to it as JSON Lines (one JSON object per line), so the file can be
tailed, filtered by process, or imported by the engine.

Usage:
    from docket_step.contexts.step.process_log import LogType, log_process_event

    log_process_event(
        process_id=17,
        log_type=LogType.INFO,
        message="Created docket file successfully for process Goethe_001.",
        source="intranda_step_save_docket_file",
    )
"""

import json
import os
from enum import Enum
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from docket_step.utils.timestamp import now_exact

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
PROCESS_LOG_FILE = Path(os.getenv("PROCESS_LOG_FILE", str(LOGS_PATH / "process_events.log")))


class LogType(str, Enum):
    """Severity of a process log entry, as shown in the workflow engine."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    DEBUG = "debug"


def log_process_event(
    process_id: int,
    log_type: LogType,
    message: str,
    source: str,
    log_file: Path = None,
    **extra_fields,
) -> None:
    """
    Append an entry to the process log.

    Args:
        process_id: Process the entry belongs to
        log_type: Entry severity
        message: Human-readable message shown to operators
        source: Who wrote the entry (e.g., the plugin title, "cli")
        log_file: Override PROCESS_LOG_FILE
        **extra_fields: Additional entry-specific fields (e.g., output_path)
    """
    log_file = Path(log_file) if log_file is not None else PROCESS_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "process_id": process_id,
        "log_type": LogType(log_type).value,
        "source": source,
        "message": message,
        **extra_fields,
    }

    with open(log_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event, default=str) + "\n")


def get_process_events(
    process_id: Optional[int] = None,
    log_type: Optional[LogType] = None,
    n: Optional[int] = None,
    log_file: Path = None,
) -> List[dict]:
    """
    Read entries back from the process log, optionally filtered.

    Args:
        process_id: Only entries for this process
        log_type: Only entries of this severity
        n: Only the last n matching entries
        log_file: Override PROCESS_LOG_FILE

    Returns:
        List of entry dicts (most recent last)
    """
    log_file = Path(log_file) if log_file is not None else PROCESS_LOG_FILE
    if not log_file.exists():
        return []

    wanted_type = LogType(log_type).value if log_type is not None else None
    events = []
    with open(log_file, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            event = json.loads(line)
            if process_id is not None and event.get("process_id") != process_id:
                continue
            if wanted_type is not None and event.get("log_type") != wanted_type:
                continue
            events.append(event)

    return events[-n:] if n else events
