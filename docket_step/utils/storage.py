"""
Storage provider used by resolution and rendering.

Passed explicitly into ConfigResolver and FopRenderer so that tests can swap in
an in-memory implementation.
"""

import os
import shutil
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


class LocalStorage:
    """Local filesystem storage."""

    def file_exists(self, path: PathLike) -> bool:
        """True if path is an existing, readable regular file."""
        path = Path(path)
        return path.is_file() and os.access(path, os.R_OK)

    def copy_file(self, src: PathLike, dst: PathLike) -> Path:
        """
        Copy src over dst, replacing any existing file.

        The copy goes to a sibling temporary name first and is then renamed into
        place, so readers never observe a partially written dst.

        Returns:
            Path to the destination file
        """
        src = Path(src)
        dst = Path(dst)
        dst.parent.mkdir(parents=True, exist_ok=True)

        partial = dst.with_name(f".{dst.name}.partial")
        try:
            shutil.copy2(src, partial)
            os.replace(partial, dst)
        finally:
            if partial.exists():
                partial.unlink()

        return dst
