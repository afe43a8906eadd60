"""Compiler invocation.

This module handles:
- The Compiler interface the orchestrator depends on
- Composing `bun build --compile` commands
- Executing the compiler with subprocess
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

# Environment variable the compiler reads its install cache location from
CACHE_DIR_ENV = "BUN_INSTALL_CACHE_DIR"

# Number of trailing stderr lines kept in error messages
STDERR_TAIL_LINES = 20


class CompileError(Exception):
    """Raised when a single compiler invocation fails."""

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        code: str = "compile_error",
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.code = code


class Compiler(Protocol):
    """Something that turns an entry source into a standalone executable."""

    def compile(self, triple: str, entry: Path, outfile: Path) -> None:
        """Compile entry for triple, writing the executable to outfile.

        Raises:
            CompileError: If the compile did not succeed.
        """
        ...


def compose_compile_command(
    triple: str,
    entry: Path,
    outfile: Path,
    executable: str = "bun",
) -> list[str]:
    """Compose the compile command for one target.

    Args:
        triple: Compiler target identifier.
        entry: Entry source file.
        outfile: Output executable path.
        executable: Compiler executable.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    return [
        executable,
        "build",
        "--compile",
        f"--target={triple}",
        str(entry),
        f"--outfile={outfile}",
    ]


def _stderr_tail(stderr: str | None) -> str:
    if not stderr:
        return ""
    lines = stderr.strip().splitlines()[-STDERR_TAIL_LINES:]
    return "\n".join(lines)


class BunCompiler:
    """Compiler backed by `bun build --compile`."""

    def __init__(
        self,
        cwd: Path,
        cache_dir: Path | None = None,
        executable: str = "bun",
        timeout: int | None = None,
    ) -> None:
        self.cwd = cwd
        self.cache_dir = cache_dir
        self.executable = executable
        self.timeout = timeout

    def environment(self) -> dict[str, str] | None:
        """Build the subprocess environment, or None to inherit ours."""
        if self.cache_dir is None:
            return None
        env = dict(os.environ)
        env[CACHE_DIR_ENV] = str(self.cache_dir)
        return env

    def compile(self, triple: str, entry: Path, outfile: Path) -> None:
        cmd = compose_compile_command(triple, entry, outfile, self.executable)
        cmd_str = shlex.join(cmd)
        logger.debug("Executing compile: %s (cwd=%s)", cmd_str, self.cwd)

        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
                env=self.environment(),
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise CompileError(
                f"Compile for {triple} timed out after {self.timeout}s",
                exit_code=-1,
                code="compile_timeout",
            ) from e
        except OSError as e:
            raise CompileError(
                f"Failed to execute compiler: {e}",
                code="execution_error",
            ) from e

        if result.returncode != 0:
            message = f"Compile for {triple} failed with exit code {result.returncode}"
            tail = _stderr_tail(result.stderr)
            if tail:
                message = f"{message}:\n{tail}"
            raise CompileError(
                message,
                exit_code=result.returncode,
                code="compile_failed",
            )


__all__ = [
    "CACHE_DIR_ENV",
    "BunCompiler",
    "CompileError",
    "Compiler",
    "compose_compile_command",
]
