"""
Rendering Context

Responsibilities:
- Serializes process data to the docket input XML
- Runs the FOP formatter (XSLT + PDF/TIFF output) in a scratch directory
- Places the finished docket at its output path without exposing partial files
- Reports formatter failures with diagnostic output

Owns: Formatter invocation, scratch files, output placement
Never: Decides which template, format or output path to use
"""

from docket_step.contexts.rendering.renderer import FopRenderer, RenderResult

__all__ = ["FopRenderer", "RenderResult"]
