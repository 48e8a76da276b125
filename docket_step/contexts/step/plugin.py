"""
Save Docket File step plugin.

Adapter between the workflow engine's step lifecycle and the resolution and
rendering contexts. Holds no business logic of its own: initialize() loads and
validates configuration, run() resolves a fresh render job, renders it and
reports the outcome.

Example:
    step = SaveDocketFileStep()
    if step.initialize(process):
        step.execute()
"""

from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from docket_step.contexts.rendering.renderer import FopRenderer
from docket_step.contexts.resolution.config_resolver import ConfigResolver
from docket_step.contexts.resolution.exceptions import DocketStepError
from docket_step.contexts.resolution.job_data_structures import (
    ProcessContext,
    RenderJobConfig,
    RenderJobDescriptor,
)
from docket_step.contexts.step.logger import _log_error, _log_info, _log_success
from docket_step.contexts.step.plugin_config import load_render_job_config
from docket_step.contexts.step.process_log import LogType, log_process_event

PLUGIN_TITLE = "intranda_step_save_docket_file"


class PluginReturnValue(str, Enum):
    FINISH = "finish"
    ERROR = "error"
    WAIT = "wait"


class PluginGuiType(str, Enum):
    NONE = "none"
    PART = "part"
    FULL = "full"
    PART_AND_FULL = "part_and_full"


class PluginType(str, Enum):
    STEP = "step"


class SaveDocketFileStep:
    """
    Step plugin that writes a docket file for the step's process.

    Attributes:
        title: Plugin title, also used to locate the plugin config file
        resolver: ConfigResolver turning config + process into a render job
        renderer: Object with render(descriptor, process), normally a FopRenderer
        process_log: Callable writing process log entries (log_process_event signature)
        process: Process the step belongs to (set by initialize)
        config: Parsed configuration (set by initialize)
        loaded_configuration_successfully: Whether initialize() validated the config
    """

    title = PLUGIN_TITLE
    plugin_type = PluginType.STEP
    gui_type = PluginGuiType.NONE
    page_path = None
    interface_version = 0

    def __init__(
        self,
        resolver: ConfigResolver = None,
        renderer: Any = None,
        process_log: Callable[..., None] = log_process_event,
        config_path: Optional[Path] = None,
    ):
        self.resolver = resolver if resolver is not None else ConfigResolver()
        self.renderer = renderer if renderer is not None else FopRenderer()
        self.process_log = process_log
        self.config_path = config_path

        self.process: Optional[ProcessContext] = None
        self.config: Optional[RenderJobConfig] = None
        self.loaded_configuration_successfully = False

    def initialize(
        self,
        process: ProcessContext,
        config: Union[RenderJobConfig, Mapping[str, Any], None] = None,
    ) -> bool:
        """
        Load and validate configuration for a process.

        Args:
            process: Process this step runs for
            config: RenderJobConfig, raw config mapping, or None to read the
                    plugin's config file

        Returns:
            True if the configuration is usable
        """
        self.process = process
        self.loaded_configuration_successfully = False

        try:
            if config is None:
                config = load_render_job_config(self.title, self.config_path)
            elif not isinstance(config, RenderJobConfig):
                config = RenderJobConfig.from_dict(config)
            self.config = config
            self.resolver.validate(config)
        except FileNotFoundError as e:
            _log_error(f"{e} (Plugin: {self.title})")
            return False
        except DocketStepError as e:
            _log_error(f"Invalid configuration for plugin {self.title}: {e}")
            return False

        self.loaded_configuration_successfully = True
        _log_info(f"SaveDocketFile step plugin initialized for process {process.title}")
        return True

    def _report(self, log_type: LogType, message: str, **extra_fields) -> None:
        self.process_log(
            process_id=self.process.process_id,
            log_type=log_type,
            message=message,
            source=self.title,
            **extra_fields,
        )

    def resolve(self) -> RenderJobDescriptor:
        """Resolve a fresh render job for the current process and config."""
        return self.resolver.resolve(self.config, self.process)

    def run(self) -> PluginReturnValue:
        """
        Render the docket and report the outcome to the process log.

        Returns:
            PluginReturnValue.FINISH on success, PluginReturnValue.ERROR otherwise
        """
        if self.process is None:
            raise RuntimeError(f"Plugin {self.title} was run before initialize()")

        if not self.loaded_configuration_successfully:
            message = f'Could not execute plugin "{self.title}" due to insufficient configuration!'
            _log_error(message)
            self._report(LogType.ERROR, message)
            return PluginReturnValue.ERROR

        try:
            descriptor = self.resolve()
            result = self.renderer.render(descriptor, self.process)
        except DocketStepError as e:
            _log_error(f"Plugin {self.title} failed for process {self.process.title}: {e}")
            message = f'Could not execute plugin "{self.title}". Please read the log files for more details.'
            self._report(LogType.ERROR, message, error=e.message)
            return PluginReturnValue.ERROR

        message = f"Created docket file successfully for process {self.process.title}."
        _log_success(message)
        self._report(LogType.INFO, message, output_path=str(result.output_path))
        return PluginReturnValue.FINISH

    def execute(self) -> bool:
        """Run the step; True unless it ended in ERROR."""
        return self.run() != PluginReturnValue.ERROR

    def cancel(self) -> None:
        return None

    def finish(self) -> None:
        return None

    def validate(self) -> None:
        return None
