"""Build service module.

This module provides the high-level build API:
- run(): build every target concurrently, print a summary, write the manifest
- render_summary(): the console table of results

The manifest is all-or-nothing: if any target fails, nothing is written.
"""

from __future__ import annotations

import concurrent.futures
import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from standalone_build.builds.artifacts import write_manifest
from standalone_build.builds.compiler import BunCompiler
from standalone_build.builds.runner import build_and_checksum
from standalone_build.builds.targets import default_targets
from standalone_build.config import get_settings

if TYPE_CHECKING:
    from standalone_build.builds.compiler import Compiler
    from standalone_build.config import Settings
    from standalone_build.types import BuildResult, BuildTarget

logger = logging.getLogger(__name__)


def compiler_from_settings(settings: Settings) -> BunCompiler:
    """Create the real compiler configured by settings."""
    return BunCompiler(
        cwd=settings.project_root,
        cache_dir=settings.cache_path,
        executable=settings.compiler,
        timeout=settings.compile_timeout,
    )


def render_summary(results: list[BuildResult]) -> Table:
    """Build the summary table shown after a successful run."""
    table = Table(title="Build results")
    table.add_column("triple")
    table.add_column("sha256")
    table.add_column("elapsed", justify="right")

    for result in results:
        table.add_row(result.triple, result.checksum, f"{result.elapsed_ms}ms")

    return table


def build_all(
    targets: list[BuildTarget],
    compiler: Compiler,
    settings: Settings,
) -> list[BuildResult]:
    """Build every target concurrently.

    Results are returned in target declaration order regardless of the
    order builds finish in.

    Raises:
        BuildFailedError: For the earliest-declared target that failed.
        OSError: If an output could not be read.
    """
    if not targets:
        return []

    dist_dir = settings.dist_path
    entry = settings.entry_path

    with concurrent.futures.ThreadPoolExecutor(
        max_workers=len(targets),
        thread_name_prefix="build",
    ) as executor:
        futures = [
            executor.submit(
                build_and_checksum,
                compiler,
                target,
                dist_dir,
                entry,
                max_attempts=settings.max_attempts,
                settle_delay=settings.settle_delay,
            )
            for target in targets
        ]

        done, _ = concurrent.futures.wait(
            futures, return_when=concurrent.futures.FIRST_EXCEPTION
        )

        for target, future in zip(targets, futures):
            if future not in done:
                continue
            error = future.exception()
            if error is not None:
                logger.error("Build for %s failed; aborting run", target.triple)
                raise error

        return [future.result() for future in futures]


def run(
    targets: list[BuildTarget] | None = None,
    compiler: Compiler | None = None,
    settings: Settings | None = None,
    console: Console | None = None,
) -> list[BuildResult]:
    """Build all targets, print a summary, and write the manifest.

    Args:
        targets: Targets to build; defaults to the configured platform list.
        compiler: Compiler to use; defaults to BunCompiler from settings.
        settings: Settings; loaded from the environment if not provided.
        console: Console for the summary table.

    Returns:
        Build results in target declaration order.

    Raises:
        BuildFailedError: If any target failed. No manifest is written.
        OSError: If an output could not be read. No manifest is written.
    """
    if settings is None:
        settings = get_settings()
    if targets is None:
        targets = default_targets(settings.artifact_prefix)
    if compiler is None:
        compiler = compiler_from_settings(settings)
    if console is None:
        console = Console()

    settings.dist_path.mkdir(parents=True, exist_ok=True)

    logger.info("Building %d targets into %s", len(targets), settings.dist_path)
    results = build_all(targets, compiler, settings)

    console.print(render_summary(results))
    write_manifest(results, settings.manifest_path)

    return results


__all__ = ["build_all", "compiler_from_settings", "render_summary", "run"]
