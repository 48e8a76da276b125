"""
Docket Rendering Module

Renders a resolved docket job with Apache FOP: the process is serialized to
XML, FOP applies the XSLT template and formats the result as PDF or TIFF into a
scratch directory, and the finished file is then copied to its final location.
"""

import os
import re
import shutil
import subprocess
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from docket_step.contexts.rendering.logger import (
    _log_debug,
    log_render_failure,
    log_render_result,
    log_render_start,
)
from docket_step.contexts.rendering.preparator import write_process_xml
from docket_step.contexts.resolution.defaults import FORMATTER_OUTPUT_FLAGS, MIME_PDF
from docket_step.contexts.resolution.exceptions import RenderError
from docket_step.contexts.resolution.job_data_structures import (
    ProcessContext,
    RenderJobDescriptor,
)
from docket_step.utils.pdf_processing import page_count
from docket_step.utils.storage import LocalStorage

load_dotenv()

FOP_COMMAND = os.getenv("FOP_COMMAND", "fop")
KEEP_RENDER_SCRATCH = os.getenv("KEEP_RENDER_SCRATCH", "false").lower() == "true"

# FOP reports non-fatal problems as "WARNING: ..." / "[WARN] ..." lines
WARNING_PATTERN = re.compile(r"^(?:WARNING:|\[WARN\])\s*(.+)$", re.MULTILINE)


@dataclass
class RenderResult:
    """
    Result of a successful docket render.

    Attributes:
        success: Always True; failures raise RenderError instead
        output_path: Final location of the rendered docket
        stdout: Standard output from the formatter
        stderr: Standard error from the formatter
        warnings: Warning lines parsed from formatter output
        page_count: Number of pages (PDF output only, None otherwise)
        elapsed_s: Wall time spent in the formatter and copy
    """

    success: bool
    output_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None
    elapsed_s: float = 0.0


def _parse_formatter_warnings(output: str) -> List[str]:
    """Collect warning messages from formatter output."""
    return [match.group(1).strip() for match in WARNING_PATTERN.finditer(output)]


class FopRenderer:
    """
    Runs the FOP command line formatter for a RenderJobDescriptor.

    Attributes:
        fop_command: Formatter executable (name on PATH or absolute path)
        storage: Storage provider used to place the finished file
        keep_scratch: Keep the scratch directory after rendering, for debugging
        timeout_s: Formatter timeout in seconds (None waits indefinitely)
    """

    def __init__(
        self,
        fop_command: str = FOP_COMMAND,
        storage: LocalStorage = None,
        keep_scratch: bool = KEEP_RENDER_SCRATCH,
        timeout_s: Optional[float] = None,
    ):
        self.fop_command = fop_command
        self.storage = storage if storage is not None else LocalStorage()
        self.keep_scratch = keep_scratch
        self.timeout_s = timeout_s

    def build_command(
        self, descriptor: RenderJobDescriptor, xml_path: Path, scratch_output: Path
    ) -> List[str]:
        """Formatter command line for one render."""
        output_flag = FORMATTER_OUTPUT_FLAGS.get(descriptor.mime_type)
        if output_flag is None:
            raise RenderError(f"Formatter cannot produce {descriptor.mime_type} output")

        return [
            self.fop_command,
            "-xml",
            str(xml_path),
            "-xsl",
            str(descriptor.template_path),
            "-dpi",
            str(descriptor.dots_per_inch),
            output_flag,
            str(scratch_output),
        ]

    def _run_formatter(self, cmd: List[str], scratch_output: Path) -> subprocess.CompletedProcess:
        executable = shutil.which(cmd[0])
        if executable is None:
            raise RenderError(f"Formatter '{cmd[0]}' not found", command=cmd)

        try:
            result = subprocess.run(
                [executable, *cmd[1:]],
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
                timeout=self.timeout_s,
            )
        except subprocess.TimeoutExpired as e:
            raise RenderError(
                f"Formatter timed out after {self.timeout_s}s", command=cmd, cause=e
            ) from e
        except OSError as e:
            raise RenderError(f"Could not run formatter '{cmd[0]}'", command=cmd, cause=e) from e

        if result.returncode != 0:
            raise RenderError(
                "Formatter exited with an error",
                command=cmd,
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        # FOP can exit cleanly without writing anything when the template yields no pages
        if not scratch_output.exists() or scratch_output.stat().st_size == 0:
            raise RenderError(
                "Formatter produced no output",
                command=cmd,
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
                path=scratch_output,
            )

        return result

    def render(self, descriptor: RenderJobDescriptor, process: ProcessContext) -> RenderResult:
        """
        Render the docket for a process.

        The output is first written inside a scratch directory and only copied
        to descriptor.output_path once the formatter has finished successfully,
        replacing any file already there.

        Args:
            descriptor: Resolved render job
            process: Process the docket describes

        Returns:
            RenderResult for the finished docket

        Raises:
            RenderError: If the formatter is missing or fails, or the output cannot be placed
        """
        scratch_dir = Path(tempfile.mkdtemp(prefix="docket_"))
        log_render_start(process.title, descriptor, scratch_dir)
        start_time = time.time()

        try:
            try:
                xml_path = write_process_xml(process, scratch_dir / "process.xml")
            except (OSError, ValueError) as e:
                raise RenderError(
                    "Could not write process data for the formatter",
                    path=scratch_dir / "process.xml",
                    cause=e,
                ) from e
            scratch_output = scratch_dir / descriptor.output_path.name
            cmd = self.build_command(descriptor, xml_path, scratch_output)

            completed = self._run_formatter(cmd, scratch_output)

            pages = page_count(scratch_output) if descriptor.mime_type == MIME_PDF else None

            try:
                final_path = self.storage.copy_file(scratch_output, descriptor.output_path)
            except OSError as e:
                raise RenderError(
                    "Could not write docket to its output location",
                    path=descriptor.output_path,
                    cause=e,
                ) from e
        except RenderError as e:
            log_render_failure(process.title, e)
            raise
        finally:
            if self.keep_scratch:
                _log_debug(f"Keeping scratch directory: {scratch_dir}")
            else:
                shutil.rmtree(scratch_dir, ignore_errors=True)

        result = RenderResult(
            success=True,
            output_path=final_path,
            stdout=completed.stdout,
            stderr=completed.stderr,
            warnings=_parse_formatter_warnings(completed.stdout + "\n" + completed.stderr),
            page_count=pages,
            elapsed_s=time.time() - start_time,
        )
        log_render_result(process.title, result)
        return result
