"""
Step Context

Responsibilities:
- Implements the workflow engine's step plugin lifecycle (initialize, execute, run)
- Loads the plugin's YAML configuration
- Reports step outcomes to the process log

Owns: Host adapter, plugin configuration files, process log
Never: Contains resolution or rendering logic
"""

from docket_step.contexts.step.plugin import (
    PLUGIN_TITLE,
    PluginGuiType,
    PluginReturnValue,
    PluginType,
    SaveDocketFileStep,
)
from docket_step.contexts.step.process_log import LogType, get_process_events, log_process_event

__all__ = [
    "PLUGIN_TITLE",
    "PluginGuiType",
    "PluginReturnValue",
    "PluginType",
    "SaveDocketFileStep",
    "LogType",
    "get_process_events",
    "log_process_event",
]
