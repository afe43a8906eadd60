"""Configuration settings for standalone_build.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: env vars > .env file > defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the
    STANDALONE_BUILD_ prefix. Relative paths resolve against project_root.
    """

    model_config = SettingsConfigDict(
        env_prefix="STANDALONE_BUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    project_root: Path = Field(
        default_factory=Path.cwd,
        description="Root of the project being compiled",
    )
    entry: Path = Field(
        default=Path("src/index.ts"),
        description="Entry source file passed to the compiler",
    )
    dist_dir: Path = Field(
        default=Path("dist"),
        description="Output directory for executables and the manifest",
    )
    manifest_name: str = Field(
        default="sha256sums.txt",
        description="File name of the checksum manifest inside dist_dir",
    )
    cache_dir: Path = Field(
        default=Path("node_modules/.bun-cache"),
        description="Install cache directory handed to the compiler",
    )

    # Compiler
    compiler: str = Field(
        default="bun",
        description="Compiler executable",
    )
    artifact_prefix: str = Field(
        default="tailwindcss",
        description="Prefix of every output executable name",
    )
    compile_timeout: int | None = Field(
        default=None,
        ge=1,
        description="Timeout for a single compile in seconds (None = no timeout)",
    )

    # Retry behavior
    max_attempts: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Compile attempts per target before giving up",
    )
    settle_delay: float = Field(
        default=0.1,
        ge=0,
        description="Seconds to wait after a build before reading the output",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    def resolve(self, path: Path) -> Path:
        """Resolve a configured path against the project root."""
        if path.is_absolute():
            return path
        return (self.project_root / path).resolve()

    @property
    def dist_path(self) -> Path:
        return self.resolve(self.dist_dir)

    @property
    def entry_path(self) -> Path:
        return self.resolve(self.entry)

    @property
    def cache_path(self) -> Path:
        return self.resolve(self.cache_dir)

    @property
    def manifest_path(self) -> Path:
        return self.dist_path / self.manifest_name


def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = ["Settings", "get_settings", "print_settings_json"]
