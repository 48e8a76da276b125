"""
Shared utilities for docket_step.

Common functionality used across contexts:
- Logger setup with provenance
- Storage provider
- Timestamps
"""

from docket_step.utils.storage import LocalStorage
from docket_step.utils.timestamp import now, now_exact

__all__ = ["LocalStorage", "now", "now_exact"]
