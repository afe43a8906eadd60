"""Build runner for a single platform target.

This module handles:
- Retrying compiler invocations up to a fixed number of attempts
- Waiting for the output to settle after the compiler's atomic rename
- Checksumming the artifact and timing the whole operation
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from standalone_build.builds.artifacts import compute_file_hash
from standalone_build.types import BuildResult, BuildTarget

if TYPE_CHECKING:
    from standalone_build.builds.compiler import Compiler

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_SETTLE_DELAY = 0.1


class BuildFailedError(Exception):
    """Raised when a target could not be compiled within the attempt limit."""

    def __init__(
        self,
        triple: str,
        cause: BaseException | None = None,
        code: str = "build_failed",
    ) -> None:
        message = f"Failed to build for platform {triple}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.triple = triple
        self.cause = cause
        self.code = code


def build_one(
    compiler: Compiler,
    triple: str,
    entry: Path,
    output_path: Path,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> None:
    """Compile one target, retrying immediately on failure.

    The compiler occasionally fails its atomic rename of the output into
    place, so failures are retried without delay. Any exception raised by
    the compiler counts as a failed attempt.

    Args:
        compiler: Compiler to invoke.
        triple: Compiler target identifier.
        entry: Entry source file.
        output_path: Where the executable is written.
        max_attempts: Total attempts before giving up.

    Raises:
        BuildFailedError: If every attempt failed.
    """
    last_error: Exception | None = None

    for attempt in range(1, max_attempts + 1):
        try:
            compiler.compile(triple, entry, output_path)
        except Exception as e:
            last_error = e
            logger.warning(
                "Compile for %s failed (attempt %d/%d): %s",
                triple,
                attempt,
                max_attempts,
                e,
            )
            continue

        if attempt > 1:
            logger.info("Compile for %s succeeded on attempt %d", triple, attempt)
        return

    raise BuildFailedError(triple, cause=last_error) from last_error


def build_and_checksum(
    compiler: Compiler,
    target: BuildTarget,
    dist_dir: Path,
    entry: Path,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    settle_delay: float = DEFAULT_SETTLE_DELAY,
) -> BuildResult:
    """Build one target and checksum the resulting executable.

    Args:
        compiler: Compiler to invoke.
        target: Target to build.
        dist_dir: Directory target.file is resolved against.
        entry: Entry source file.
        max_attempts: Total compile attempts before giving up.
        settle_delay: Seconds to wait before reading the output.

    Returns:
        BuildResult; elapsed time covers build, settle delay, read and hash.

    Raises:
        BuildFailedError: If the compile never succeeded.
        OSError: If the output cannot be read after a successful compile.
    """
    start = time.perf_counter_ns()

    outfile = (dist_dir / target.file).resolve()
    build_one(compiler, target.triple, entry, outfile, max_attempts=max_attempts)

    if settle_delay > 0:
        time.sleep(settle_delay)

    checksum = compute_file_hash(outfile)
    elapsed = time.perf_counter_ns() - start

    logger.info("Built %s -> %s (%s)", target.triple, target.file, checksum[:12])

    return BuildResult(
        triple=target.triple,
        file=target.file,
        checksum=checksum,
        elapsed_ns=elapsed,
    )


__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_SETTLE_DELAY",
    "BuildFailedError",
    "build_and_checksum",
    "build_one",
]
