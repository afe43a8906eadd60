"""Shared type definitions for standalone_build.

This module contains dataclasses and enums shared across subpackages
to avoid circular imports.
"""

from dataclasses import dataclass
from enum import Enum


class ManifestEntryState(str, Enum):
    """Outcome of checking one manifest line against the filesystem."""

    OK = "ok"
    MISMATCH = "mismatch"
    MISSING = "missing"


@dataclass(frozen=True)
class BuildTarget:
    """A platform to compile for.

    Attributes:
        triple: Compiler target identifier (OS, architecture, ABI variant).
        file: Output file name, relative to the dist directory.
    """

    triple: str
    file: str


@dataclass(frozen=True)
class BuildResult:
    """Outcome of one completed build."""

    triple: str
    file: str
    checksum: str
    elapsed_ns: int

    @property
    def elapsed_ms(self) -> int:
        return round(self.elapsed_ns / 1_000_000)


@dataclass(frozen=True)
class ManifestEntryStatus:
    """Verification status of a single manifest entry."""

    file: str
    expected: str
    state: ManifestEntryState
    actual: str | None = None


__all__ = [
    "BuildResult",
    "BuildTarget",
    "ManifestEntryState",
    "ManifestEntryStatus",
]
