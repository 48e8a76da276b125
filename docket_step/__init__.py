"""
docket_step - Save Docket File workflow step

Renders a docket (cover sheet / metadata summary) for a digitization process from
an XSLT template into a PDF or TIFF file, and reports the outcome to the
workflow engine.

Architecture:
- Resolution Context: Config resolution and output path templating
- Rendering Context: FOP formatter invocation and output placement
- Step Context: Workflow engine step plugin adapter and process log
"""

__version__ = "1.0.0"
