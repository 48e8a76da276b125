"""
Default values and format tables for docket resolution.

Shared by the config resolver (format and DPI resolution), the renderer
(formatter output flags) and the CLI.
"""

import os

from dotenv import load_dotenv

load_dotenv()

MIME_PDF = "application/pdf"
MIME_TIFF = "image/tiff"

# Resolution used when dotsPerInch is absent or invalid
DEFAULT_DPI = int(os.getenv("DOCKET_DEFAULT_DPI", "300"))

# Output filename suffix -> MIME type
SUFFIX_MIME_TYPES = {
    ".pdf": MIME_PDF,
    ".tiff": MIME_TIFF,
    ".tif": MIME_TIFF,
}

# Values accepted in the explicit output@format field
FORMAT_MIME_TYPES = {
    "pdf": MIME_PDF,
    "tiff": MIME_TIFF,
    "tif": MIME_TIFF,
    MIME_PDF: MIME_PDF,
    MIME_TIFF: MIME_TIFF,
}

# Formatter command line flag for each MIME type
FORMATTER_OUTPUT_FLAGS = {
    MIME_PDF: "-pdf",
    MIME_TIFF: "-tiff",
}

# Placeholder tokens understood in output filename patterns
PROCESS_TOKEN = "{process}"
PROCESS_SUFFIX_TOKEN = "{process_suffix}"
KNOWN_TOKENS = (PROCESS_TOKEN, PROCESS_SUFFIX_TOKEN)
