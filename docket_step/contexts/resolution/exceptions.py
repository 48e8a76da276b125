"""Exceptions raised while resolving and rendering a docket, with diagnostic context."""

from enum import Enum
from pathlib import Path
from typing import List, Optional, Union


class ConfigurationErrorReason(str, Enum):
    """Why the declarative configuration could not be turned into a render job."""

    MISSING_TEMPLATE = "missingTemplate"
    TEMPLATE_LOOKUP_FAILED = "templateLookupFailed"
    TEMPLATE_NOT_FOUND = "templateNotFound"
    UNSUPPORTED_FORMAT = "unsupportedFormat"
    MISSING_OUTPUT = "missingOutput"
    INVALID_CONFIG = "invalidConfig"


class ResolutionErrorReason(str, Enum):
    """Why a process-dependent value could not be resolved at execution time."""

    FOLDER_UNAVAILABLE = "folderUnavailable"


class DocketStepError(Exception):
    """
    Base exception for docket step failures.

    Attributes:
        message: Error description
        setting: Configuration option involved (e.g., 'template@name')
        path: File or directory involved
        cause: Underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        setting: Optional[str] = None,
        path: Optional[Union[str, Path]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.setting = setting
        self.path = path
        self.cause = cause

        parts = [message]

        if setting:
            parts.append(f"Setting: {setting}")
        if path:
            parts.append(f"Path: {path}")
        if cause is not None:
            parts.append(f"Caused by: {type(cause).__name__}: {cause}")

        super().__init__("\n".join(parts))


class ConfigurationError(DocketStepError):
    """
    Missing or invalid declarative settings, detected at initialization.

    Terminal for the step: no render is attempted.
    """

    def __init__(self, reason: ConfigurationErrorReason, message: str, **kwargs):
        self.reason = reason
        super().__init__(message, **kwargs)


class ResolutionError(DocketStepError):
    """Failure to resolve a folder role or other process-dependent value."""

    def __init__(self, reason: ResolutionErrorReason, message: str, **kwargs):
        self.reason = reason
        super().__init__(message, **kwargs)


class RenderError(DocketStepError):
    """
    Failure surfaced by the external formatter or while placing its output.

    Attributes:
        command: Formatter command line that was run
        returncode: Formatter exit code (None if it never ran)
        stdout: Captured formatter standard output
        stderr: Captured formatter standard error
    """

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
        **kwargs,
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message, **kwargs)


class DocketNotFoundError(LookupError):
    """Raised by the docket registry when no template matches a name or id."""

    pass
