"""Shared fixtures for standalone_build tests."""

import threading
from pathlib import Path

import pytest

from standalone_build.builds.compiler import CompileError
from standalone_build.config import Settings


class FakeCompiler:
    """Compiler double that writes deterministic output per triple.

    Args:
        failures: Number of leading failures per triple; ALWAYS never succeeds.
    """

    ALWAYS = -1

    def __init__(self, failures: dict[str, int] | None = None) -> None:
        self.failures = dict(failures or {})
        self.calls: list[tuple[str, Path, Path]] = []
        self._lock = threading.Lock()

    @staticmethod
    def content_for(triple: str) -> bytes:
        return f"executable for {triple}\n".encode()

    def attempts(self, triple: str) -> int:
        return sum(1 for call in self.calls if call[0] == triple)

    def compile(self, triple: str, entry: Path, outfile: Path) -> None:
        with self._lock:
            self.calls.append((triple, entry, outfile))
            remaining = self.failures.get(triple, 0)
            if remaining == self.ALWAYS:
                raise CompileError(f"rename failed for {triple}", code="compile_failed")
            if remaining > 0:
                self.failures[triple] = remaining - 1
                raise CompileError(f"rename failed for {triple}", code="compile_failed")

        outfile.parent.mkdir(parents=True, exist_ok=True)
        outfile.write_bytes(self.content_for(triple))

@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temporary project without a settle delay."""
    return Settings(project_root=tmp_path, settle_delay=0)

@pytest.fixture
def fake_compiler() -> FakeCompiler:
    """A compiler that always succeeds."""
    return FakeCompiler()

@pytest.fixture
def compiler_factory() -> type[FakeCompiler]:
    """The FakeCompiler class, for tests that script failures."""
    return FakeCompiler
