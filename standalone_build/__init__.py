"""Standalone Build - cross-compile a single-file executable for many platforms.

This package drives an external compiler once per platform target,
checksums each artifact, and writes a sha256sums.txt manifest.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
