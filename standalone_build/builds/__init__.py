"""Build orchestration module.

This module handles:
- Invoking the compiler for each platform target
- Retrying transient compile failures
- Checksumming artifacts and writing the manifest
"""

from standalone_build.types import BuildResult, BuildTarget

__all__ = ["BuildResult", "BuildTarget"]

# Access submodules via standalone_build.builds.runner, etc.
