"""
Resolution Context

Responsibilities:
- Reads declarative docket settings (template, output pattern, folder role, format, DPI)
- Looks up named dockets in the docket catalog
- Resolves settings plus live process state into a RenderJobDescriptor
- Defines the error taxonomy shared by all contexts

Owns: Config resolution, output path templating, docket catalog
Never: Runs the formatter or writes output files
"""

from docket_step.contexts.resolution.config_resolver import (
    ConfigResolver,
    PlaceholderWarning,
    resolve_output_format,
    resolve_resolution,
    substitute_placeholders,
)
from docket_step.contexts.resolution.docket_registry import DocketRegistry
from docket_step.contexts.resolution.exceptions import (
    ConfigurationError,
    ConfigurationErrorReason,
    DocketNotFoundError,
    DocketStepError,
    RenderError,
    ResolutionError,
    ResolutionErrorReason,
)
from docket_step.contexts.resolution.job_data_structures import (
    DocketTemplate,
    ProcessContext,
    RenderJobConfig,
    RenderJobDescriptor,
)

__all__ = [
    # Resolver and pure resolution helpers
    "ConfigResolver",
    "PlaceholderWarning",
    "resolve_output_format",
    "resolve_resolution",
    "substitute_placeholders",
    # Docket catalog
    "DocketRegistry",
    # Data structures
    "DocketTemplate",
    "ProcessContext",
    "RenderJobConfig",
    "RenderJobDescriptor",
    # Errors
    "ConfigurationError",
    "ConfigurationErrorReason",
    "DocketNotFoundError",
    "DocketStepError",
    "RenderError",
    "ResolutionError",
    "ResolutionErrorReason",
]
