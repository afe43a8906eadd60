"""Checksums and the sha256sums manifest.

This module handles:
- Computing SHA-256 checksums of build outputs
- Rendering and writing the manifest in `sha256sum` format
- Parsing and verifying an existing manifest
"""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Iterable
from pathlib import Path

from standalone_build.types import (
    BuildResult,
    ManifestEntryState,
    ManifestEntryStatus,
)

logger = logging.getLogger(__name__)

# Default chunk size for hashing
HASH_CHUNK_SIZE = 64 * 1024  # 64KB

# Two spaces between digest and file name, as written by sha256sum
MANIFEST_LINE_RE = re.compile(r"^(?P<checksum>[0-9a-f]{64})  (?P<file>\S+)$")


class ManifestFormatError(ValueError):
    """Raised when a manifest cannot be parsed."""

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        line: str | None = None,
    ) -> None:
        super().__init__(message)
        self.line_number = line_number
        self.line = line

    @classmethod
    def for_line(cls, line_number: int, line: str) -> ManifestFormatError:
        return cls(
            f"Malformed manifest line {line_number}: {line!r}",
            line_number=line_number,
            line=line,
        )


def compute_file_hash(
    file_path: Path,
    chunk_size: int = HASH_CHUNK_SIZE,
) -> str:
    """Compute SHA-256 hash of a file.

    Args:
        file_path: Path to the file.
        chunk_size: Size of chunks for streaming hash.

    Returns:
        SHA-256 hex digest.
    """
    sha256 = hashlib.sha256()
    with file_path.open("rb") as f:
        while chunk := f.read(chunk_size):
            sha256.update(chunk)
    return sha256.hexdigest()


def format_manifest_line(result: BuildResult) -> str:
    """Format one manifest line (without newline)."""
    return f"{result.checksum}  {result.file}"


def render_manifest(results: Iterable[BuildResult]) -> str:
    """Render the manifest text, one line per result in the given order."""
    lines = [format_manifest_line(r) for r in results]
    return "\n".join(lines) + "\n"


def write_manifest(
    results: list[BuildResult],
    output_path: Path,
) -> Path:
    """Write the manifest file.

    Args:
        results: Build results in declaration order.
        output_path: Output file path.

    Returns:
        Path to written manifest file.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_manifest(results), encoding="utf-8")

    logger.info("Wrote manifest with %d entries to %s", len(results), output_path)
    return output_path


def parse_manifest(text: str) -> list[tuple[str, str]]:
    """Parse manifest text into (checksum, file) pairs.

    Blank lines are ignored.

    Raises:
        ManifestFormatError: If a line is not `<sha256>  <file>`.
    """
    entries: list[tuple[str, str]] = []
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        match = MANIFEST_LINE_RE.match(line)
        if match is None:
            raise ManifestFormatError.for_line(number, line)
        entries.append((match.group("checksum"), match.group("file")))
    return entries


def verify_manifest(
    manifest_path: Path,
    root: Path | None = None,
) -> list[ManifestEntryStatus]:
    """Re-hash every file listed in a manifest.

    Args:
        manifest_path: Manifest to check.
        root: Directory file names are relative to. Defaults to the
              manifest's own directory.

    Returns:
        One status per manifest entry, in manifest order.

    Raises:
        ManifestFormatError: If the manifest is not UTF-8 or a line is malformed.
        OSError: If the manifest cannot be read.
    """
    if root is None:
        root = manifest_path.parent

    try:
        text = manifest_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ManifestFormatError(
            f"Manifest {manifest_path} is not valid UTF-8: {e}"
        ) from e

    entries = parse_manifest(text)
    statuses: list[ManifestEntryStatus] = []

    for expected, file in entries:
        path = root / file
        if not path.is_file():
            logger.warning("Manifest entry missing on disk: %s", file)
            statuses.append(
                ManifestEntryStatus(
                    file=file, expected=expected, state=ManifestEntryState.MISSING
                )
            )
            continue

        actual = compute_file_hash(path)
        state = (
            ManifestEntryState.OK if actual == expected else ManifestEntryState.MISMATCH
        )
        if state is ManifestEntryState.MISMATCH:
            logger.warning("Checksum mismatch for %s", file)
        statuses.append(
            ManifestEntryStatus(file=file, expected=expected, state=state, actual=actual)
        )

    return statuses


__all__ = [
    "HASH_CHUNK_SIZE",
    "MANIFEST_LINE_RE",
    "ManifestFormatError",
    "compute_file_hash",
    "format_manifest_line",
    "parse_manifest",
    "render_manifest",
    "verify_manifest",
    "write_manifest",
]
