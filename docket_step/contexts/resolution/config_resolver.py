"""
Docket Job Resolution

Turns declarative docket settings plus the live state of a process into a
RenderJobDescriptor: which XSLT template to use, where to write the output,
in which format and at which resolution.

Collaborators (docket registry, storage, folder lookup) are passed in, so
resolution holds no state between calls and every execution re-resolves.

Examples:
    >>> resolver = ConfigResolver(templates_root=Path("/opt/workflow/xslt"))
    >>> config = RenderJobConfig.from_dict({
    ...     "template": {"name": "docket-default"},
    ...     "output": {"filename": "{process}.pdf", "folder": "master"},
    ... })
    >>> descriptor = resolver.resolve(config, process)
    >>> descriptor.output_path
    PosixPath('/data/001/master/Goethe_001.pdf')
"""

import os
import re
import warnings
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv

from docket_step.contexts.resolution.defaults import (
    DEFAULT_DPI,
    FORMAT_MIME_TYPES,
    KNOWN_TOKENS,
    PROCESS_SUFFIX_TOKEN,
    PROCESS_TOKEN,
    SUFFIX_MIME_TYPES,
)
from docket_step.contexts.resolution.docket_registry import DocketRegistry
from docket_step.contexts.resolution.exceptions import (
    ConfigurationError,
    ConfigurationErrorReason,
    DocketNotFoundError,
    ResolutionError,
    ResolutionErrorReason,
)
from docket_step.contexts.resolution.job_data_structures import (
    ProcessContext,
    RenderJobConfig,
    RenderJobDescriptor,
)
from docket_step.contexts.resolution.logger import (
    _log_debug,
    _log_error,
    _log_info,
    _log_warning,
    log_descriptor,
)
from docket_step.utils.storage import LocalStorage

load_dotenv()
DOCKET_TEMPLATES_ROOT = Path(os.getenv("DOCKET_TEMPLATES_ROOT", "config/xslt"))

# All known tokens in one pattern so substituted text is never scanned again
PLACEHOLDER_PATTERN = re.compile(
    "|".join(re.escape(token) for token in KNOWN_TOKENS)
)

FolderLookup = Callable[[str], Path]


class PlaceholderWarning(UserWarning):
    """A placeholder could only be filled in a degraded way."""


def process_suffix(process_title: str) -> str:
    """
    Part of the process title after the first underscore.

    Falls back to the full title (with a PlaceholderWarning) when the title has
    no underscore.

    Examples:
        >>> process_suffix("B_000123")
        '000123'
        >>> process_suffix("B_000_123")
        '000_123'
    """
    if "_" not in process_title:
        message = (
            f"Process title '{process_title}' has no '_' separator; "
            f"{PROCESS_SUFFIX_TOKEN} falls back to the full title"
        )
        _log_warning(message)
        warnings.warn(message, PlaceholderWarning, stacklevel=2)
        return process_title

    return process_title.split("_", 1)[1]


def substitute_placeholders(pattern: str, process_title: str) -> str:
    """
    Fill {process} and {process_suffix} tokens in an output filename pattern.

    Afterwards no {process} or {process_suffix} token from the pattern is left.
    Unknown tokens such as {typo} are left as they are.

    Substitution is a single pass: replacement text is not re-scanned. The one
    case where a known token survives is a process title that itself contains
    one, e.g. title "{process_suffix}" with pattern "{process}.pdf" gives
    "{process_suffix}.pdf".

    Args:
        pattern: Filename pattern (e.g., 'EPN_{process_suffix}_0000.tif')
        process_title: Title of the process (e.g., 'X_42')

    Returns:
        Filename with tokens substituted (e.g., 'EPN_42_0000.tif')
    """
    suffix = None

    def _replace(match: re.Match) -> str:
        nonlocal suffix
        if match.group(0) == PROCESS_TOKEN:
            return process_title
        if suffix is None:
            suffix = process_suffix(process_title)
        return suffix

    return PLACEHOLDER_PATTERN.sub(_replace, pattern)


def resolve_output_format(config: RenderJobConfig) -> str:
    """
    Determine the output MIME type.

    An explicit output@format wins; otherwise the suffix of the output filename
    decides (.pdf, .tiff, .tif; case-insensitive).

    Raises:
        ConfigurationError: UNSUPPORTED_FORMAT for unknown formats or suffixes,
            MISSING_OUTPUT when there is neither a format nor a filename
    """
    if config.output_format is not None:
        mime_type = FORMAT_MIME_TYPES.get(str(config.output_format).strip().lower())
        if mime_type is None:
            supported = sorted(k for k in FORMAT_MIME_TYPES if "/" not in k)
            raise ConfigurationError(
                ConfigurationErrorReason.UNSUPPORTED_FORMAT,
                f"Unsupported output format '{config.output_format}'. Supported: {supported}",
                setting="output@format",
            )
        return mime_type

    if not config.output_filename:
        raise ConfigurationError(
            ConfigurationErrorReason.MISSING_OUTPUT,
            "No output file specified",
            setting="output@filename",
        )

    suffix = Path(config.output_filename).suffix.lower()
    mime_type = SUFFIX_MIME_TYPES.get(suffix)
    if mime_type is None:
        raise ConfigurationError(
            ConfigurationErrorReason.UNSUPPORTED_FORMAT,
            f"The output file '{config.output_filename}' has an invalid type. "
            f"Supported are {', '.join(SUFFIX_MIME_TYPES)}",
            setting="output@filename",
        )
    return mime_type


def resolve_resolution(config: RenderJobConfig, default_dpi: int = DEFAULT_DPI) -> int:
    """
    Configured dotsPerInch, or default_dpi when it is absent or not a positive integer.

    Never raises.
    """
    value = config.dots_per_inch

    if value is None:
        _log_info(f"DPI is not specified. Default ({default_dpi} DPI) is used.")
        return default_dpi

    dpi = None
    if isinstance(value, int) and not isinstance(value, bool):
        dpi = value
    elif isinstance(value, str) and value.strip().isdigit():
        dpi = int(value.strip())

    if dpi is None or dpi <= 0:
        _log_warning(f"Invalid dotsPerInch value '{value}'. Default ({default_dpi} DPI) is used.")
        return default_dpi

    return dpi


def _parse_template_id(value: Any) -> Optional[int]:
    """Template id as int; None for negative ids, which mean 'not set'."""
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    docket_id = int(value)
    return docket_id if docket_id >= 0 else None


class ConfigResolver:
    """
    Resolves RenderJobConfig + ProcessContext into a RenderJobDescriptor.

    Attributes:
        templates_root: Directory that relative template paths and catalog entries live in
        template_lookup: Docket registry used for template@name / template@id
        storage: Storage provider used to check template existence
        default_dpi: Resolution used when dotsPerInch is absent or invalid
    """

    def __init__(
        self,
        templates_root: Path = None,
        template_lookup: DocketRegistry = None,
        storage: LocalStorage = None,
        default_dpi: int = DEFAULT_DPI,
    ):
        if templates_root is None:
            templates_root = DOCKET_TEMPLATES_ROOT
        if template_lookup is None:
            template_lookup = DocketRegistry()
        if storage is None:
            storage = LocalStorage()

        self.templates_root = Path(templates_root)
        self.template_lookup = template_lookup
        self.storage = storage
        self.default_dpi = default_dpi

    def _lookup_template_file(self, config: RenderJobConfig) -> Optional[Path]:
        """Registry lookup for template@name / template@id; None if neither is set."""
        docket_id = None
        if config.template_name is None:
            try:
                docket_id = _parse_template_id(config.template_id)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    ConfigurationErrorReason.TEMPLATE_LOOKUP_FAILED,
                    f"Template id '{config.template_id}' is not an integer",
                    setting="template@id",
                    cause=e,
                ) from e
            if docket_id is None:
                return None

        try:
            if docket_id is None:
                setting = "template@name"
                describe = f"name '{config.template_name}'"
                docket = self.template_lookup.get_by_name(str(config.template_name))
            else:
                setting = "template@id"
                describe = f"id {docket_id}"
                docket = self.template_lookup.get_by_id(docket_id)
        except DocketNotFoundError as e:
            _log_error(f"Could not load docket file with {describe}")
            raise ConfigurationError(
                ConfigurationErrorReason.TEMPLATE_LOOKUP_FAILED,
                f"Could not load docket file with {describe}",
                setting=setting,
                cause=e,
            ) from e

        return self.templates_root / docket.file

    def resolve_template_path(self, config: RenderJobConfig) -> Path:
        """
        Find the XSLT template file for this config.

        Addressing modes are tried in order: template@file, template@name,
        template@id. A relative template@file is joined to templates_root, as
        are the file names returned by the docket registry.

        Raises:
            ConfigurationError: MISSING_TEMPLATE if no mode is populated,
                TEMPLATE_LOOKUP_FAILED if the registry lookup fails,
                TEMPLATE_NOT_FOUND if the file does not exist
        """
        populated = [
            name
            for name, value in (
                ("template@file", config.template_file),
                ("template@name", config.template_name),
                ("template@id", config.template_id),
            )
            if value is not None
        ]
        if len(populated) > 1:
            _log_warning(f"Several template settings given ({', '.join(populated)}); using {populated[0]}")

        if config.template_file is not None:
            setting = "template@file"
            template_path = Path(str(config.template_file)).expanduser()
            if not template_path.is_absolute():
                template_path = self.templates_root / template_path
        elif config.template_name is not None or config.template_id is not None:
            setting = populated[0]
            template_path = self._lookup_template_file(config)
        else:
            template_path = None

        if template_path is None:
            _log_error("Could not load docket file from configuration")
            raise ConfigurationError(
                ConfigurationErrorReason.MISSING_TEMPLATE,
                "No docket template configured (expected template@file, template@name or template@id)",
                setting="template",
            )

        if not self.storage.file_exists(template_path):
            _log_error(f"The specified docket file '{template_path}' does not exist")
            raise ConfigurationError(
                ConfigurationErrorReason.TEMPLATE_NOT_FOUND,
                "The specified docket file does not exist",
                setting=setting,
                path=template_path,
            )

        _log_debug(f"Using docket file '{template_path}'")
        return template_path

    def resolve_output_path(
        self,
        config: RenderJobConfig,
        process: ProcessContext,
        folder_lookup: FolderLookup = None,
    ) -> Path:
        """
        Absolute output path for this process.

        With output@folder, the folder role is looked up (default:
        process.get_configured_folder) and the substituted filename is joined to
        it. Without it, the substituted pattern is the path itself, taken
        relative to the working directory if it is not absolute. The path is not
        checked for existence; an existing file will be overwritten.

        Raises:
            ConfigurationError: MISSING_OUTPUT if no output filename is configured
            ResolutionError: FOLDER_UNAVAILABLE if the folder role cannot be resolved
        """
        if not config.output_filename:
            raise ConfigurationError(
                ConfigurationErrorReason.MISSING_OUTPUT,
                "No output file specified",
                setting="output@filename",
            )

        filename = substitute_placeholders(config.output_filename, process.title)

        if config.output_folder is None:
            return Path(filename).expanduser().absolute()

        if folder_lookup is None:
            folder_lookup = process.get_configured_folder

        try:
            directory = Path(folder_lookup(config.output_folder))
        except (LookupError, OSError, ValueError) as e:
            _log_error(f"Folder role '{config.output_folder}' unavailable for process {process.title}")
            raise ResolutionError(
                ResolutionErrorReason.FOLDER_UNAVAILABLE,
                f"Could not resolve folder '{config.output_folder}' for process {process.title}",
                setting="output@folder",
                cause=e,
            ) from e

        return directory / filename

    def validate(self, config: RenderJobConfig) -> None:
        """
        Check everything that does not depend on execution-time process state.

        Used at step initialization: template path, output setting, output format.

        Raises:
            ConfigurationError: On the first problem found
        """
        self.template_lookup.reload()
        self.resolve_template_path(config)
        if not config.output_filename:
            raise ConfigurationError(
                ConfigurationErrorReason.MISSING_OUTPUT,
                "No output file specified",
                setting="output@filename",
            )
        resolve_output_format(config)

    def resolve(
        self,
        config: RenderJobConfig,
        process: ProcessContext,
        folder_lookup: FolderLookup = None,
    ) -> RenderJobDescriptor:
        """
        Resolve a complete render job, stopping at the first failure.

        The docket catalog is re-read on every call, so catalog edits made
        between executions are picked up.

        Args:
            config: Declarative docket settings
            process: Process the docket is rendered for
            folder_lookup: Folder role -> directory (default: process.get_configured_folder)

        Returns:
            RenderJobDescriptor with all fields resolved

        Raises:
            ConfigurationError: Invalid or missing settings
            ResolutionError: Process-dependent values could not be resolved
        """
        self.template_lookup.reload()
        template_path = self.resolve_template_path(config)
        mime_type = resolve_output_format(config)
        dots_per_inch = resolve_resolution(config, self.default_dpi)
        output_path = self.resolve_output_path(config, process, folder_lookup)

        descriptor = RenderJobDescriptor(
            template_path=template_path,
            output_path=output_path,
            mime_type=mime_type,
            dots_per_inch=dots_per_inch,
        )
        log_descriptor(descriptor)
        return descriptor
