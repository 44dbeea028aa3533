"""Unit tests for CLI startup checks."""

from pathlib import Path

import pytest
import typer
from pydantic import SecretStr

from promoreel.cli.ui.setup import (
    load_settings_or_exit,
    missing_preloaded_images,
    require_idea_key,
    run_setup_check,
)
from promoreel.config.settings import APISettings, AssetSettings, Settings


def _settings_with_keys(
    anthropic: str = "", gemini: str = "", source: str = "data/image"
) -> Settings:
    s = Settings()
    s.api = APISettings.model_construct(
        anthropic_api_key=SecretStr(anthropic),
        gemini_api_key=SecretStr(gemini),
    )
    s.assets = AssetSettings(preloaded_source=source, preloaded_images=["0001.png", "0002.png"])
    return s


class TestRequireIdeaKey:
    def test_present(self) -> None:
        assert require_idea_key(_settings_with_keys(anthropic="sk-ant-test"))

    def test_missing(self) -> None:
        assert not require_idea_key(_settings_with_keys(gemini="gk-test"))


class TestMissingPreloadedImages:
    def test_lists_absent_files(self, image_dir: Path) -> None:
        (image_dir / "0002.png").unlink()
        assets = AssetSettings(
            preloaded_source=str(image_dir), preloaded_images=["0001.png", "0002.png"]
        )
        assert missing_preloaded_images(assets) == ["0002.png"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        assets = AssetSettings(
            preloaded_source=str(tmp_path / "none"), preloaded_images=["a.png"]
        )
        assert missing_preloaded_images(assets) == ["a.png"]

    def test_url_source_not_checked(self) -> None:
        assets = AssetSettings(preloaded_source="https://cdn.example.com/images")
        assert missing_preloaded_images(assets) is None


class TestRunSetupCheck:
    def test_all_present(self, image_dir: Path) -> None:
        settings = _settings_with_keys("sk-ant-test", "gk-test", source=str(image_dir))
        assert run_setup_check(settings)

    def test_missing_api_keys(self) -> None:
        assert not run_setup_check(_settings_with_keys())

    def test_missing_images_not_fatal(self, tmp_path: Path) -> None:
        settings = _settings_with_keys(
            "sk-ant-test", "gk-test", source=str(tmp_path / "missing")
        )
        assert run_setup_check(settings)

    def test_url_source(self) -> None:
        settings = _settings_with_keys(
            "sk-ant-test", "gk-test", source="https://cdn.example.com/images"
        )
        assert run_setup_check(settings)


class TestLoadSettingsOrExit:
    def test_bad_config_exits(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.yaml"
        cfg.write_text("video:\n  colour: blue\n")
        with pytest.raises(typer.Exit) as exc_info:
            load_settings_or_exit(str(cfg))
        assert exc_info.value.exit_code == 1

    def test_valid_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.yaml"
        cfg.write_text("output:\n  output_dir: clips\n")
        assert load_settings_or_exit(str(cfg)).output_dir == "clips"
