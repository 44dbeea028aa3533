"""Integration tests for PromoReel CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from promoreel.cli.app import app

runner = CliRunner()


@pytest.fixture
def no_keys(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("GEMINI_API_KEY", "")
    return tmp_path


@pytest.fixture
def with_keys(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test-0123456789")
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-test-0123456789")
    return tmp_path


class TestMainApp:
    def test_help_flag(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "promoreel" in result.output.lower()
        assert "wizard" in result.output

    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "promoreel version" in result.output


class TestWizardCommand:
    def test_help(self) -> None:
        result = runner.invoke(app, ["wizard", "--help"])
        assert result.exit_code == 0
        assert "--output-dir" in result.output

    def test_missing_anthropic_key_exits_with_error(self, no_keys: Path) -> None:
        result = runner.invoke(app, ["wizard"])
        assert result.exit_code == 1
        assert "ANTHROPIC_API_KEY" in result.output


class TestConfigCommand:
    def test_displays_settings(self, with_keys: Path) -> None:
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Video Generation" in result.output
        assert "sk-ant-test-0123456789" not in result.output

    def test_check_fails_without_keys(self, no_keys: Path) -> None:
        result = runner.invoke(app, ["config", "--check"])
        assert result.exit_code == 1
        assert "Missing required API keys" in result.output

    def test_check_passes_with_keys(self, with_keys: Path) -> None:
        result = runner.invoke(app, ["config", "--check"])
        assert result.exit_code == 0
        assert "All required configuration is present." in result.output

    def test_config_file_overrides(self, with_keys: Path) -> None:
        config_file = with_keys / "config.yaml"
        config_file.write_text("video:\n  resolution: 1080p\n")
        result = runner.invoke(app, ["config", "--config", str(config_file)])
        assert result.exit_code == 0
        assert "1080p" in result.output

    def test_invalid_config_file_exits(self, with_keys: Path) -> None:
        config_file = with_keys / "config.yaml"
        config_file.write_text("assets:\n  aspect_ratio: '9:16'\n")
        result = runner.invoke(app, ["config", "--config", str(config_file)])
        assert result.exit_code == 1
        assert "aspect_ratio" in result.output
