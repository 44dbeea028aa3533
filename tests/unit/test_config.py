"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from promoreel.config import find_config_file, load_settings
from promoreel.config.settings import (
    DEFAULT_SHAPE_GUIDELINE,
    APISettings,
    AssetSettings,
    Settings,
    VideoSettings,
)
from promoreel.errors import ConfigurationError


class TestSettings:
    def test_default_values(self) -> None:
        settings = Settings()
        assert settings.output_dir == "output"
        assert settings.video.single_image_model == "veo-3.1-fast-generate-preview"
        assert settings.video.multi_image_model == "veo-3.1-generate-preview"
        assert settings.video.resolution == "720p"
        assert settings.video.poll_interval == 10.0
        assert settings.assets.max_uploads == 5
        assert settings.assets.max_selection == 3
        assert len(settings.assets.preloaded_images) == 20
        assert settings.product.shape_guideline == DEFAULT_SHAPE_GUIDELINE

    def test_loads_api_keys_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "ak")
        monkeypatch.setenv("GEMINI_API_KEY", "gk")
        s = APISettings()
        assert s.anthropic_api_key.get_secret_value() == "ak"
        assert s.gemini_api_key.get_secret_value() == "gk"

    def test_missing_keys_reported(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "ak")
        monkeypatch.setenv("GEMINI_API_KEY", "")
        s = Settings(api=APISettings())
        assert s.has_required_api_keys() is False
        assert s.get_missing_api_keys() == ["GEMINI_API_KEY"]

    def test_validates_ranges(self) -> None:
        with pytest.raises(ValueError):
            VideoSettings(max_poll_attempts=-1)
        with pytest.raises(ValueError):
            VideoSettings(aspect_ratio="4:3")  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            AssetSettings(max_selection=4)


class TestLoadSettings:
    def test_load_yaml_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.yaml"
        cfg.write_text(
            "video:\n  poll_interval: 2\n  max_poll_attempts: 0\n"
            "assets:\n  preloaded_source: https://cdn.example.com/img\n"
            "  preloaded_images: [a.png]\n"
            "output:\n  output_dir: videos\n"
        )
        settings = load_settings(cfg)
        assert settings.video.poll_interval == 2
        assert settings.video.max_poll_attempts == 0
        assert settings.assets.preloaded_source == "https://cdn.example.com/img"
        assert settings.assets.preloaded_images == ["a.png"]
        assert settings.output_dir == "videos"

    def test_product_section(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.yaml"
        cfg.write_text("product:\n  description: A mug\n  features: [Heat retention]\n")
        s = load_settings(cfg)
        assert s.product.description == "A mug"
        assert s.product.features == ["Heat retention"]
        assert s.product.shape_guideline == DEFAULT_SHAPE_GUIDELINE

    def test_finds_default_file_name(self, tmp_path: Path) -> None:
        (tmp_path / "promoreel.yaml").write_text("video:\n  resolution: 1080p\n")
        assert find_config_file(search_dir=tmp_path) == tmp_path / "promoreel.yaml"

    def test_uses_default_file_in_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.yml").write_text("video:\n  resolution: 1080p\n")
        assert load_settings().video.resolution == "1080p"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.yaml"
        cfg.write_text("")
        s = load_settings(cfg)
        assert s.video.aspect_ratio == "16:9"

    def test_misplaced_key_rejected(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.yaml"
        cfg.write_text("assets:\n  aspect_ratio: '9:16'\n")
        with pytest.raises(ConfigurationError, match="unknown assets setting"):
            load_settings(cfg)

    def test_unknown_section_rejected(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.yaml"
        cfg.write_text("api:\n  anthropic_api_key: sk\n")
        with pytest.raises(ConfigurationError, match="environment"):
            load_settings(cfg)

    def test_invalid_value_rejected(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.yaml"
        cfg.write_text("video:\n  aspect_ratio: '4:3'\n")
        with pytest.raises(ConfigurationError, match="invalid video settings"):
            load_settings(cfg)

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        cfg = tmp_path / "config.yaml"
        cfg.write_text("- video\n")
        with pytest.raises(ConfigurationError):
            load_settings(cfg)

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_settings(tmp_path / "nope.yaml")
