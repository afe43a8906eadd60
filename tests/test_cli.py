"""Smoke tests for the CLI.

These tests run the commands against a temporary project with a fake
compiler, so no real toolchain is needed.
"""

import os
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from standalone_build import __version__
from standalone_build.cli import app
from standalone_build.config import get_settings

runner = CliRunner()


@pytest.fixture
def project_env(tmp_path):
    """Point the settings at a temporary project."""
    with patch.dict(
        os.environ,
        {
            "STANDALONE_BUILD_PROJECT_ROOT": str(tmp_path),
            "STANDALONE_BUILD_SETTLE_DELAY": "0",
        },
    ):
        yield tmp_path


class TestCLIHelp:
    """Test CLI help and version commands."""

    def test_help_returns_zero(self) -> None:
        """CLI --help should return exit code 0."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Standalone Build" in result.stdout

    def test_version_flag(self) -> None:
        """CLI --version should print version and exit 0."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_no_args_shows_help(self) -> None:
        """CLI with no args should show help."""
        result = runner.invoke(app, [])
        assert "Usage:" in result.stdout


class TestCLIConfig:
    """Test CLI config command."""

    def test_config_command(self, project_env) -> None:
        """CLI config should show configuration."""
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Max attempts" in result.stdout

    def test_config_json(self, project_env) -> None:
        """CLI config --json should print the settings."""
        result = runner.invoke(app, ["config", "--json"])
        assert result.exit_code == 0
        assert "max_attempts" in result.stdout


class TestCLITargets:
    """Test CLI targets command."""

    def test_lists_targets(self, project_env) -> None:
        """Should list every default target."""
        result = runner.invoke(app, ["targets"])
        assert result.exit_code == 0
        assert "bun-darwin-x64" in result.stdout
        assert "tailwindcss-windows-x64.exe" in result.stdout


class TestCLIBuild:
    """Test CLI build and verify commands."""

    def test_build_then_verify(self, project_env, fake_compiler) -> None:
        """build should write the manifest and verify should accept it."""
        with patch(
            "standalone_build.builds.service.compiler_from_settings",
            return_value=fake_compiler,
        ):
            result = runner.invoke(app, ["build"])

        assert result.exit_code == 0
        manifest = project_env / "dist" / "sha256sums.txt"
        assert len(manifest.read_text(encoding="utf-8").splitlines()) == 5

        result = runner.invoke(app, ["verify"])
        assert result.exit_code == 0
        assert "OK" in result.stdout

    def test_build_failure_exits_nonzero(self, project_env, compiler_factory) -> None:
        """build should exit 1 when a target cannot be built."""
        compiler = compiler_factory({"bun-darwin-x64": compiler_factory.ALWAYS})
        with patch(
            "standalone_build.builds.service.compiler_from_settings",
            return_value=compiler,
        ):
            result = runner.invoke(app, ["build"])

        assert result.exit_code == 1
        assert "bun-darwin-x64" in result.stdout
        assert not (project_env / "dist" / "sha256sums.txt").exists()

    def test_verify_detects_tampering(self, project_env, fake_compiler) -> None:
        """verify should exit 1 when an artifact changed."""
        with patch(
            "standalone_build.builds.service.compiler_from_settings",
            return_value=fake_compiler,
        ):
            runner.invoke(app, ["build"])

        (project_env / "dist" / "tailwindcss-linux-x64").write_bytes(b"tampered")

        result = runner.invoke(app, ["verify"])
        assert result.exit_code == 1
        assert "MISMATCH" in result.stdout

    def test_verify_without_manifest(self, project_env) -> None:
        """verify should exit 1 when no manifest exists."""
        result = runner.invoke(app, ["verify"])
        assert result.exit_code == 1
        assert "Manifest not found" in result.stdout

    def test_verify_non_utf8_manifest(self, project_env) -> None:
        """verify should exit 1 on a manifest that is not UTF-8."""
        manifest = project_env / "dist" / "sha256sums.txt"
        manifest.parent.mkdir(parents=True)
        manifest.write_bytes(b"\xff\xfe garbage\n")

        result = runner.invoke(app, ["verify"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "UTF-8" in result.stdout

    def test_verify_unreadable_manifest(self, project_env) -> None:
        """verify should exit 1 when the manifest cannot be read."""
        manifest = project_env / "dist" / "sha256sums.txt"
        manifest.parent.mkdir(parents=True)
        manifest.write_text("", encoding="utf-8")

        with patch(
            "standalone_build.builds.artifacts.verify_manifest",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            result = runner.invoke(app, ["verify"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Failed to read manifest" in result.stdout


class TestCLISettings:
    """Test settings loading in the CLI callback."""

    def test_invalid_setting_exits_nonzero(self, project_env) -> None:
        """An invalid environment value should print an error and exit 1."""
        with patch.dict(os.environ, {"STANDALONE_BUILD_MAX_ATTEMPTS": "many"}):
            result = runner.invoke(app, ["targets"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid configuration" in result.stdout

    def test_settings_loaded_once(self, project_env) -> None:
        """Settings should be built once per command."""
        with patch("standalone_build.cli.get_settings", wraps=get_settings) as mock:
            result = runner.invoke(app, ["targets"])

        assert result.exit_code == 0
        assert mock.call_count == 1
