"""Platform target list.

The Windows x64 build uses the `baseline` runtime instead of the regular
one so the executable also runs under ARM emulation.
"""

from __future__ import annotations

from standalone_build.types import BuildTarget

# (triple, platform suffix) in manifest order
PLATFORMS: list[tuple[str, str]] = [
    ("bun-linux-arm64", "linux-arm64"),
    ("bun-linux-x64", "linux-x64"),
    ("bun-darwin-arm64", "macos-arm64"),
    ("bun-darwin-x64", "macos-x64"),
    ("bun-windows-x64-baseline", "windows-x64.exe"),
]


def default_targets(prefix: str = "tailwindcss") -> list[BuildTarget]:
    """Return the default build targets.

    Args:
        prefix: Executable name prefix, e.g. "tailwindcss".

    Returns:
        Targets in declaration order.
    """
    return [
        BuildTarget(triple=triple, file=f"./{prefix}-{suffix}")
        for triple, suffix in PLATFORMS
    ]


__all__ = ["PLATFORMS", "default_targets"]
