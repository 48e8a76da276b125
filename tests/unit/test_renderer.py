"""
Unit tests for FopRenderer, using a shell script in place of the FOP binary.
"""

import sys
import tempfile
from pathlib import Path

import pytest

from docket_step.contexts.rendering.renderer import FopRenderer, _parse_formatter_warnings
from docket_step.contexts.resolution.defaults import MIME_PDF, MIME_TIFF
from docket_step.contexts.resolution.exceptions import RenderError
from docket_step.contexts.resolution.job_data_structures import ProcessContext, RenderJobDescriptor

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="fake formatter is a POSIX shell script")

FAKE_FOP = """\
#!/bin/sh
out=""
while [ $# -gt 0 ]; do
  case "$1" in
    -pdf|-tiff) out="$2"; shift ;;
  esac
  shift
done
echo "WARNING: Font \\"Symbol,normal,700\\" not found. Substituting with \\"Symbol,normal,400\\"." >&2
printf '%s' "rendered docket" > "$out"
"""

FAILING_FOP = """\
#!/bin/sh
echo "SEVERE: Exception org.apache.fop.apps.FOPException: template error" >&2
exit 1
"""

SILENT_FOP = """\
#!/bin/sh
exit 0
"""


def make_formatter(directory: Path, script: str) -> str:
    path = directory / "fop"
    path.write_text(script)
    path.chmod(0o755)
    return str(path)


@pytest.fixture
def scratch_root(tmp_path, monkeypatch):
    root = tmp_path / "scratch"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


@pytest.fixture
def process():
    return ProcessContext(title="X_42", process_id=42)


@pytest.fixture
def descriptor(tmp_path):
    template = tmp_path / "docket.xsl"
    template.write_text("<xsl:stylesheet/>")
    return RenderJobDescriptor(
        template_path=template,
        output_path=tmp_path / "out" / "master" / "EPN_42_0000.tif",
        mime_type=MIME_TIFF,
        dots_per_inch=150,
    )


@pytest.mark.unit
def test_build_command(descriptor):
    renderer = FopRenderer(fop_command="fop")
    cmd = renderer.build_command(descriptor, Path("/s/process.xml"), Path("/s/EPN_42_0000.tif"))

    assert cmd == [
        "fop",
        "-xml",
        "/s/process.xml",
        "-xsl",
        str(descriptor.template_path),
        "-dpi",
        "150",
        "-tiff",
        "/s/EPN_42_0000.tif",
    ]


@pytest.mark.unit
def test_build_command_pdf(descriptor):
    pdf = RenderJobDescriptor(
        template_path=descriptor.template_path,
        output_path=Path("/out/x.pdf"),
        mime_type=MIME_PDF,
        dots_per_inch=300,
    )
    cmd = FopRenderer(fop_command="fop").build_command(pdf, Path("p.xml"), Path("x.pdf"))
    assert cmd[-2:] == ["-pdf", "x.pdf"]


@pytest.mark.unit
def test_render_success(tmp_path, scratch_root, descriptor, process):
    renderer = FopRenderer(fop_command=make_formatter(tmp_path, FAKE_FOP))

    result = renderer.render(descriptor, process)

    assert result.success
    assert result.output_path == descriptor.output_path
    assert descriptor.output_path.read_text() == "rendered docket"
    assert result.page_count is None
    assert len(result.warnings) == 1
    assert "Symbol,normal,700" in result.warnings[0]
    # Scratch directory removed
    assert list(scratch_root.iterdir()) == []


@pytest.mark.unit
def test_render_overwrites_existing_output(tmp_path, scratch_root, descriptor, process):
    descriptor.output_path.parent.mkdir(parents=True)
    descriptor.output_path.write_text("old docket")

    FopRenderer(fop_command=make_formatter(tmp_path, FAKE_FOP)).render(descriptor, process)

    assert descriptor.output_path.read_text() == "rendered docket"
    assert [p.name for p in descriptor.output_path.parent.iterdir()] == ["EPN_42_0000.tif"]


@pytest.mark.unit
def test_keep_scratch(tmp_path, scratch_root, descriptor, process):
    renderer = FopRenderer(fop_command=make_formatter(tmp_path, FAKE_FOP), keep_scratch=True)
    renderer.render(descriptor, process)

    (scratch_dir,) = list(scratch_root.iterdir())
    assert (scratch_dir / "process.xml").exists()
    assert (scratch_dir / "EPN_42_0000.tif").exists()


@pytest.mark.unit
def test_formatter_not_found(tmp_path, scratch_root, descriptor, process):
    renderer = FopRenderer(fop_command=str(tmp_path / "no-such-fop"))

    with pytest.raises(RenderError, match="not found"):
        renderer.render(descriptor, process)
    assert list(scratch_root.iterdir()) == []


@pytest.mark.unit
def test_formatter_failure_leaves_existing_output_alone(tmp_path, scratch_root, descriptor, process):
    descriptor.output_path.parent.mkdir(parents=True)
    descriptor.output_path.write_text("old docket")
    renderer = FopRenderer(fop_command=make_formatter(tmp_path, FAILING_FOP))

    with pytest.raises(RenderError) as exc_info:
        renderer.render(descriptor, process)

    error = exc_info.value
    assert error.returncode == 1
    assert "template error" in error.stderr
    assert "-tiff" in error.command
    assert descriptor.output_path.read_text() == "old docket"
    assert list(scratch_root.iterdir()) == []


@pytest.mark.unit
def test_formatter_without_output(tmp_path, scratch_root, descriptor, process):
    renderer = FopRenderer(fop_command=make_formatter(tmp_path, SILENT_FOP))

    with pytest.raises(RenderError, match="no output"):
        renderer.render(descriptor, process)
    assert not descriptor.output_path.exists()


@pytest.mark.unit
def test_unsupported_mime_type(tmp_path, scratch_root, descriptor, process):
    png = RenderJobDescriptor(
        template_path=descriptor.template_path,
        output_path=tmp_path / "x.png",
        mime_type="image/png",
        dots_per_inch=300,
    )
    with pytest.raises(RenderError, match="image/png"):
        FopRenderer(fop_command=make_formatter(tmp_path, FAKE_FOP)).render(png, process)


@pytest.mark.unit
def test_parse_formatter_warnings():
    output = (
        "Oct 19, 2026 2:33:01 PM org.apache.fop.events.LoggingEventListener processEvent\n"
        "WARNING: Line 1 of a paragraph overflows the available area.\n"
        "[WARN] FOUserAgent - Font not found\n"
        "INFO: Rendered page #1.\n"
    )
    assert _parse_formatter_warnings(output) == [
        "Line 1 of a paragraph overflows the available area.",
        "FOUserAgent - Font not found",
    ]


@pytest.mark.unit
def test_unserializable_process_data(tmp_path, scratch_root, descriptor):
    """Control characters in metadata fail the render before the formatter runs."""
    process = ProcessContext(title="X_42", process_id=42, metadata={"TitleDocMain": "bad\x01char"})
    renderer = FopRenderer(fop_command=make_formatter(tmp_path, FAKE_FOP))

    with pytest.raises(RenderError) as exc_info:
        renderer.render(descriptor, process)

    assert isinstance(exc_info.value.cause, ValueError)
    assert exc_info.value.returncode is None
    assert not descriptor.output_path.exists()
    assert list(scratch_root.iterdir()) == []


@pytest.mark.unit
def test_unreadable_pdf_has_no_page_count(tmp_path, scratch_root, descriptor, process):
    pdf = RenderJobDescriptor(
        template_path=descriptor.template_path,
        output_path=tmp_path / "out" / "X_42.pdf",
        mime_type=MIME_PDF,
        dots_per_inch=300,
    )
    result = FopRenderer(fop_command=make_formatter(tmp_path, FAKE_FOP)).render(pdf, process)

    # The fake formatter writes plain text, not a PDF
    assert result.success
    assert result.page_count is None
