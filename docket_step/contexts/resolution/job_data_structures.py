"""
Data structures for a docket render job.

RenderJobConfig is what the plugin configuration says, ProcessContext is what the
workflow engine knows about the process, and RenderJobDescriptor is the fully
resolved job handed to the renderer.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from docket_step.contexts.resolution.exceptions import ConfigurationError, ConfigurationErrorReason


def _get_section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    section = data.get(key)
    return section if isinstance(section, Mapping) else {}


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


@dataclass(frozen=True)
class RenderJobConfig:
    """
    Declarative docket settings, read once when the step is initialized.

    Exactly one of template_file, template_name and template_id is expected to
    be populated. output_folder is optional: without it, output_filename is a
    full output path.

    Attributes:
        template_file: Path to the XSLT template (absolute or relative to the templates root)
        template_name: Name of a docket registered in the docket catalog
        template_id: Numeric id of a docket registered in the docket catalog
        output_format: Explicit format ('pdf', 'tiff', 'tif' or a MIME type)
        output_filename: Output filename pattern with {process} / {process_suffix} tokens
        output_folder: Folder role of the process to write into (e.g., 'master')
        dots_per_inch: Raw configured resolution, validated during resolution
    """

    template_file: Optional[str] = None
    template_name: Optional[str] = None
    template_id: Optional[Any] = None
    output_format: Optional[str] = None
    output_filename: Optional[str] = None
    output_folder: Optional[str] = None
    dots_per_inch: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RenderJobConfig":
        """
        Build a config from the plugin configuration mapping.

        Recognized options: template.file, template.name, template.id,
        output.format, output.filename (or legacy output.file), output.folder,
        dotsPerInch. A top-level 'config' key is unwrapped first.

        Examples:
            >>> RenderJobConfig.from_dict({
            ...     "template": {"name": "docket-default"},
            ...     "output": {"filename": "{process}.pdf", "folder": "master"},
            ... })

        Raises:
            ConfigurationError: If data is not a mapping
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                ConfigurationErrorReason.INVALID_CONFIG,
                f"Plugin configuration must be a mapping, got {type(data).__name__}",
            )

        if isinstance(data.get("config"), Mapping):
            data = data["config"]

        template = _get_section(data, "template")
        output = _get_section(data, "output")

        filename = _blank_to_none(output.get("filename"))
        if filename is None:
            filename = _blank_to_none(output.get("file"))

        return cls(
            template_file=_blank_to_none(template.get("file")),
            template_name=_blank_to_none(template.get("name")),
            template_id=_blank_to_none(template.get("id")),
            output_format=_blank_to_none(output.get("format")),
            output_filename=filename,
            output_folder=_blank_to_none(output.get("folder")),
            dots_per_inch=_blank_to_none(data.get("dotsPerInch")),
        )


@dataclass
class ProcessContext:
    """
    What the workflow engine exposes about the process a step belongs to.

    Attributes:
        title: Process title, often '<prefix>_<identifier>'
        process_id: Identifier used for logging and the process log
        folders: Folder role -> absolute storage path
        properties: Process properties, passed through to the docket XML
        metadata: Descriptive metadata, passed through to the docket XML
    """

    title: str
    process_id: int
    folders: Dict[str, Path] = field(default_factory=dict)
    properties: Dict[str, str] = field(default_factory=dict)
    metadata: Dict[str, str] = field(default_factory=dict)

    def get_configured_folder(self, role: str) -> Path:
        """
        Get the storage path configured for a folder role.

        Raises:
            LookupError: If the process has no folder for this role
        """
        if role not in self.folders:
            available = sorted(self.folders)
            raise LookupError(f"No folder configured for role '{role}'. Available roles: {available}")
        return Path(self.folders[role])


@dataclass(frozen=True)
class RenderJobDescriptor:
    """
    A fully resolved render job.

    Only built once the template file is known to exist and the output path
    holds no unresolved placeholder tokens.
    """

    template_path: Path
    output_path: Path
    mime_type: str
    dots_per_inch: int


@dataclass(frozen=True)
class DocketTemplate:
    """A docket registered in the catalog. file is relative to the templates root."""

    id: int
    name: str
    file: str
