#!/usr/bin/env python3
"""
Docket Step CLI

Resolves and runs the Save Docket File step for a process described on the
command line.

Commands:
    resolve  - Show the render job a config resolves to (nothing is written)
    run      - Initialize and execute the step (renders the docket)
    dockets  - List dockets in the docket catalog

Examples:\n

    save_docket.py resolve --title Goethe_001 --id 17 --folder master=/data/001/master

    save_docket.py run --title Goethe_001 --id 17 --folder master=/data/001/master

    save_docket.py run -c config/plugin_intranda_step_save_docket_file.yaml --title B_000123 --id 4 \\
        --folder master=/data/004/master --property Shelfmark="Cod. 12"

    save_docket.py dockets
"""

import os
from pathlib import Path
from typing import Dict, List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from docket_step.contexts.rendering import FopRenderer
from docket_step.contexts.resolution import (
    ConfigResolver,
    DocketNotFoundError,
    DocketRegistry,
    DocketStepError,
    ProcessContext,
)
from docket_step.contexts.step import PLUGIN_TITLE, SaveDocketFileStep
from docket_step.contexts.step.logger import setup_step_logger
from docket_step.contexts.step.plugin_config import load_render_job_config
from docket_step.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


app = typer.Typer(
    help="Resolve and run the Save Docket File workflow step",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def parse_pairs(pairs: Optional[List[str]], option: str) -> Dict[str, str]:
    """Parse repeated key=value options into a dict."""
    parsed = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{pair}'", param_hint=option)
        parsed[key.strip()] = value.strip()
    return parsed


def build_process(
    title: str,
    process_id: int,
    folders: Optional[List[str]],
    properties: Optional[List[str]],
    metadata: Optional[List[str]],
) -> ProcessContext:
    return ProcessContext(
        title=title,
        process_id=process_id,
        folders={role: Path(path) for role, path in parse_pairs(folders, "--folder").items()},
        properties=parse_pairs(properties, "--property"),
        metadata=parse_pairs(metadata, "--metadata"),
    )


def build_resolver(templates_root: Optional[Path], catalog: Optional[Path]) -> ConfigResolver:
    return ConfigResolver(templates_root=templates_root, template_lookup=DocketRegistry(catalog))


TitleOption = Annotated[str, typer.Option("--title", "-t", help="Process title")]
IdOption = Annotated[int, typer.Option("--id", help="Process id")]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help=f"Plugin config file (default: PLUGIN_CONFIG_DIR/plugin_{PLUGIN_TITLE}.yaml)",
    ),
]
FolderOption = Annotated[
    Optional[List[str]],
    typer.Option("--folder", "-f", help="Folder role of the process, as role=path (repeatable)"),
]
PropertyOption = Annotated[
    Optional[List[str]],
    typer.Option("--property", "-p", help="Process property, as name=value (repeatable)"),
]
MetadataOption = Annotated[
    Optional[List[str]],
    typer.Option("--metadata", "-m", help="Process metadata, as name=value (repeatable)"),
]
TemplatesRootOption = Annotated[
    Optional[Path],
    typer.Option("--templates-root", help="Docket template directory (default: DOCKET_TEMPLATES_ROOT)"),
]
CatalogOption = Annotated[
    Optional[Path],
    typer.Option("--catalog", help="Docket catalog YAML (default: DOCKET_CATALOG)"),
]


@app.command("resolve")
def resolve_command(
    title: TitleOption,
    process_id: IdOption = 0,
    config_path: ConfigOption = None,
    folders: FolderOption = None,
    templates_root: TemplatesRootOption = None,
    catalog: CatalogOption = None,
):
    """
    Show the render job the configuration resolves to for a process.

    Nothing is rendered or written.

    Examples:\n

        $ save_docket.py resolve --title Goethe_001 --folder master=/data/001/master
    """
    process = build_process(title, process_id, folders, None, None)
    resolver = build_resolver(templates_root, catalog)

    try:
        config = load_render_job_config(PLUGIN_TITLE, config_path)
        descriptor = resolver.resolve(config, process)
    except (FileNotFoundError, DocketStepError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\nResolved docket job for {title}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  Template: {descriptor.template_path}")
    typer.echo(f"  Output:   {descriptor.output_path}")
    typer.echo(f"  Format:   {descriptor.mime_type}")
    typer.echo(f"  DPI:      {descriptor.dots_per_inch}")
    typer.echo("")


@app.command("run")
def run_command(
    title: TitleOption,
    process_id: IdOption = 0,
    config_path: ConfigOption = None,
    folders: FolderOption = None,
    properties: PropertyOption = None,
    metadata: MetadataOption = None,
    templates_root: TemplatesRootOption = None,
    catalog: CatalogOption = None,
    keep_scratch: Annotated[
        bool,
        typer.Option("--keep-scratch", "-k", help="Keep the formatter scratch directory"),
    ] = False,
):
    """
    Initialize and execute the step: render the docket for a process.

    Examples:\n

        $ save_docket.py run --title Goethe_001 --id 17 --folder master=/data/001/master
    """
    log_dir = LOGS_PATH / f"step_{now()}"
    setup_step_logger(log_dir, PLUGIN_TITLE)

    process = build_process(title, process_id, folders, properties, metadata)
    step = SaveDocketFileStep(
        resolver=build_resolver(templates_root, catalog),
        renderer=FopRenderer(keep_scratch=keep_scratch),
        config_path=config_path,
    )

    typer.secho(f"\nRunning {PLUGIN_TITLE} for: {title}", fg=typer.colors.BLUE, bold=True)

    if not step.initialize(process):
        typer.secho("✗ Configuration could not be loaded", fg=typer.colors.RED, bold=True)

    success = step.execute()

    typer.echo("")
    if success:
        typer.secho("✓ Docket created", fg=typer.colors.GREEN, bold=True)
    else:
        typer.secho("✗ Docket could not be created", fg=typer.colors.RED, bold=True)
    typer.echo(f"  Log: {log_dir / 'step.log'}")
    typer.echo("")

    raise typer.Exit(code=0 if success else 1)


@app.command("dockets")
def dockets_command(catalog: CatalogOption = None):
    """List dockets registered in the docket catalog."""
    registry = DocketRegistry(catalog)

    try:
        dockets = registry.list_dockets()
    except DocketNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\n{len(dockets)} dockets in {registry.catalog_path}", fg=typer.colors.BLUE, bold=True)
    for docket in dockets:
        typer.echo(f"  {docket.id:>4}  {docket.name:<30} {docket.file}")
    typer.echo("")


if __name__ == "__main__":
    app()
