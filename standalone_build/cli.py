"""Thin CLI wrapper for standalone_build.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import logging
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from standalone_build import __version__
from standalone_build.config import Settings, get_settings, print_settings_json

app = typer.Typer(
    name="standalone-build",
    help="Standalone Build - cross-compile and checksum standalone executables",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"standalone-build version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Standalone Build - cross-compile and checksum standalone executables."""
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{escape(str(e))}")
        raise typer.Exit(code=1) from None

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


@app.command()
def config(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings: Settings = ctx.obj
    if json_output:
        console.print(print_settings_json(settings))
        return

    timeout_display = (
        str(settings.compile_timeout) if settings.compile_timeout else "(none)"
    )
    console.print("[bold]Effective Configuration:[/bold]")
    console.print()
    console.print("[bold]Paths:[/bold]")
    console.print(f"  Project root:        {settings.project_root}")
    console.print(f"  Entry:               {settings.entry_path}")
    console.print(f"  Dist directory:      {settings.dist_path}")
    console.print(f"  Manifest:            {settings.manifest_path}")
    console.print(f"  Cache directory:     {settings.cache_path}")
    console.print()
    console.print("[bold]Compiler:[/bold]")
    console.print(f"  Executable:          {settings.compiler}")
    console.print(f"  Artifact prefix:     {settings.artifact_prefix}")
    console.print(f"  Compile timeout:     {timeout_display}")
    console.print()
    console.print("[bold]Retry:[/bold]")
    console.print(f"  Max attempts:        {settings.max_attempts}")
    console.print(f"  Settle delay (s):    {settings.settle_delay}")
    console.print(f"  Log level:           {settings.log_level}")


@app.command()
def targets(ctx: typer.Context) -> None:
    """List the platform targets that will be built."""
    from standalone_build.builds.targets import default_targets

    settings: Settings = ctx.obj
    for target in default_targets(settings.artifact_prefix):
        console.print(f"{target.triple:<28} {target.file}")


@app.command()
def build(ctx: typer.Context) -> None:
    """Build every target and write the checksum manifest."""
    from standalone_build.builds.runner import BuildFailedError
    from standalone_build.builds.service import run

    settings: Settings = ctx.obj
    try:
        run(settings=settings, console=console)
    except BuildFailedError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None
    except OSError as e:
        console.print(f"[red]Failed to read build output: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    console.print(f"[green]Wrote {settings.manifest_path}[/green]")


@app.command()
def verify(ctx: typer.Context) -> None:
    """Verify built executables against the checksum manifest."""
    from standalone_build.builds.artifacts import ManifestFormatError, verify_manifest
    from standalone_build.types import ManifestEntryState

    settings: Settings = ctx.obj
    manifest_path = settings.manifest_path
    if not manifest_path.is_file():
        console.print(f"[red]Manifest not found: {manifest_path}[/red]")
        raise typer.Exit(code=1)

    try:
        statuses = verify_manifest(manifest_path)
    except ManifestFormatError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None
    except OSError as e:
        console.print(f"[red]Failed to read manifest: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    failed = 0
    for status in statuses:
        if status.state is ManifestEntryState.OK:
            console.print(f"{status.file}: [green]OK[/green]")
        else:
            failed += 1
            console.print(f"{status.file}: [red]{status.state.value.upper()}[/red]")

    if failed:
        console.print(f"[red]{failed} of {len(statuses)} entries failed[/red]")
        raise typer.Exit(code=1)
