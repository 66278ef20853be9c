"""Tests for settings loading and precedence."""

import os
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from photoframe.config.settings import (
    PanelConfiguration,
    PhotoFrameSettings,
    SlideshowConfiguration,
    get_settings,
    reset_settings,
)
from photoframe.display.drivers.it8951.bus import PinAssignment
from photoframe.display.geometry import PanelGeometry


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in list(os.environ):
        if key.upper().startswith("PHOTOFRAME_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


def write_config(path: Path, data: dict) -> Path:
    path.write_text(yaml.safe_dump(data))
    return path


class TestPanelConfiguration:
    """Test cases for PanelConfiguration."""

    def test_defaults_when_created_then_ten_inch_panel(self) -> None:
        panel = PanelConfiguration()

        assert panel.geometry() == PanelGeometry(1872, 1404)
        assert panel.pins() == PinAssignment()
        assert panel.vcom == -2.0

    @pytest.mark.parametrize("vcom", [0.0, 1.5, -6.0])
    def test_vcom_when_out_of_range_then_validation_error(self, vcom: float) -> None:
        with pytest.raises(ValidationError):
            PanelConfiguration(vcom=vcom)

    def test_command_set_when_unknown_then_validation_error(self) -> None:
        with pytest.raises(ValidationError, match="Unknown command set"):
            PanelConfiguration(command_set="ssd1680")


class TestSlideshowConfiguration:
    """Test cases for SlideshowConfiguration."""

    def test_defaults_when_created_then_backoff_below_floor(self) -> None:
        config = SlideshowConfiguration()

        assert config.error_backoff < config.min_display_duration

    @pytest.mark.parametrize("backoff,floor", [(600, 60), (60, 60)])
    def test_backoff_when_not_below_floor_then_validation_error(self, backoff: float, floor: int) -> None:
        with pytest.raises(ValidationError, match="must be shorter than"):
            SlideshowConfiguration(error_backoff=backoff, min_display_duration=floor)

    def test_backoff_when_below_floor_then_accepted(self) -> None:
        config = SlideshowConfiguration(error_backoff=59.5, min_display_duration=60)

        assert config.error_backoff == 59.5


class TestPhotoFrameSettings:
    """Test cases for PhotoFrameSettings."""

    def test_paths_when_only_data_dir_then_derived(self, tmp_path: Path) -> None:
        settings = PhotoFrameSettings(data_dir=tmp_path, config_dir=tmp_path)

        assert settings.photo_directory == tmp_path / "photos"
        assert settings.processed_directory == tmp_path / "photos" / "processed"
        assert settings.database_file == tmp_path / "photos.db"
        assert settings.simulation_file == tmp_path / "panel.png"
        assert settings.log_directory == tmp_path / "logs"

    def test_yaml_when_config_file_then_sections_merged(self, tmp_path: Path) -> None:
        config = write_config(
            tmp_path / "frame.yaml",
            {
                "photo_root": str(tmp_path / "library"),
                "panel": {"width": 800, "height": 600, "vcom": -1.53},
                "slideshow": {"error_backoff": 5},
                "logging": {"console_level": "DEBUG"},
            },
        )

        settings = PhotoFrameSettings(config_file=config, config_dir=tmp_path)

        assert settings.panel.geometry() == PanelGeometry(800, 600)
        assert settings.panel.vcom == -1.53
        assert settings.panel.busy_pin == 24
        assert settings.slideshow.error_backoff == 5
        assert settings.slideshow.default_display_duration == 300
        assert settings.logging.console_level == "DEBUG"
        assert settings.photo_directory == tmp_path / "library"

    def test_yaml_when_user_config_dir_then_found(self, tmp_path: Path) -> None:
        write_config(tmp_path / "config.yaml", {"panel": {"simulate": True}})

        settings = PhotoFrameSettings(config_dir=tmp_path)

        assert settings.panel.simulate is True

    def test_env_when_set_then_overrides_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config = write_config(tmp_path / "frame.yaml", {"panel": {"width": 800, "vcom": -1.8}})
        monkeypatch.setenv("PHOTOFRAME_PANEL__VCOM", "-1.2")

        settings = PhotoFrameSettings(config_file=config, config_dir=tmp_path)

        assert settings.panel.vcom == -1.2
        assert settings.panel.width == 800

    def test_explicit_argument_when_set_then_overrides_yaml(self, tmp_path: Path) -> None:
        config = write_config(tmp_path / "frame.yaml", {"data_dir": "/var/lib/elsewhere"})

        settings = PhotoFrameSettings(config_file=config, config_dir=tmp_path, data_dir=tmp_path)

        assert settings.data_dir == tmp_path

    def test_yaml_when_invalid_then_defaults_and_warning(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        config = tmp_path / "broken.yaml"
        config.write_text("panel: [unclosed\n")

        settings = PhotoFrameSettings(config_file=config, config_dir=tmp_path)

        assert settings.panel.width == 1872
        assert "Could not load YAML config" in caplog.text

    def test_yaml_when_section_invalid_then_section_keeps_defaults(self, tmp_path: Path) -> None:
        config = write_config(tmp_path / "frame.yaml", {"panel": {"vcom": 3.0}})

        settings = PhotoFrameSettings(config_file=config, config_dir=tmp_path)

        assert settings.panel.vcom == -2.0

    def test_yaml_when_backoff_exceeds_floor_then_slideshow_keeps_defaults(self, tmp_path: Path) -> None:
        config = write_config(tmp_path / "frame.yaml", {"slideshow": {"error_backoff": 600}})

        settings = PhotoFrameSettings(config_file=config, config_dir=tmp_path)

        assert settings.slideshow.error_backoff == 30.0

    def test_config_file_when_missing_then_defaults(self, tmp_path: Path) -> None:
        settings = PhotoFrameSettings(config_file=tmp_path / "absent.yaml", config_dir=tmp_path)
        assert settings.slideshow.min_display_duration == 60


class TestGlobalSettings:
    """Test cases for the global settings instance."""

    def test_get_settings_when_called_twice_then_same_instance(self, tmp_path: Path) -> None:
        first = get_settings(config_dir=tmp_path)
        assert get_settings() is first

        reset_settings()
        assert get_settings(config_dir=tmp_path) is not first
