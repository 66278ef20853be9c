"""Configuration settings for the photo frame."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..display.drivers.it8951.bus import PinAssignment
from ..display.drivers.it8951.commands import get_command_table
from ..display.geometry import PanelGeometry

ENV_PREFIX = "PHOTOFRAME_"
ENV_NESTED_DELIMITER = "__"

VCOM_MIN = -5.0
VCOM_MAX = -0.2


class PanelConfiguration(BaseModel):
    """E-paper panel hardware configuration, fixed once a driver is built."""

    # Display Properties
    width: int = Field(default=1872, gt=0, le=0xFFFF, description="Panel width in pixels")
    height: int = Field(default=1404, gt=0, le=0xFFFF, description="Panel height in pixels")

    # Bus and Pins (BCM numbering)
    bus_device_path: str = Field(default="/dev/spidev0.0", description="SPI device node")
    reset_pin: int = Field(default=17, description="Reset GPIO pin")
    data_command_pin: int = Field(default=25, description="Data/command GPIO pin")
    chip_select_pin: int = Field(default=8, description="Chip select GPIO pin")
    busy_pin: int = Field(default=24, description="Busy (HRDY) GPIO pin")
    spi_speed_hz: int = Field(default=12_000_000, gt=0, description="SPI clock in Hz")

    # Controller
    vcom: float = Field(default=-2.0, description="VCOM in volts as printed on the panel cable")
    command_set: str = Field(default="it8951_spi", description="Controller command set")
    busy_active_high: bool = Field(
        default=True, description="Busy line is high while the controller is busy"
    )
    chunk_size: int = Field(default=4096, gt=0, description="Bytes per SPI data write")
    busy_timeout: float = Field(default=10.0, gt=0, description="Busy wait timeout in seconds")
    busy_poll_interval: float = Field(
        default=0.01, gt=0, description="Busy line poll interval in seconds"
    )

    # Simulation
    simulate: bool = Field(default=False, description="Render to a PNG instead of the panel")
    simulation_output: Optional[Path] = Field(
        default=None, description="Simulated panel PNG (defaults to data_dir/panel.png)"
    )

    @field_validator("vcom")
    @classmethod
    def validate_vcom(cls, value: float) -> float:
        if not VCOM_MIN <= value <= VCOM_MAX:
            raise ValueError(f"VCOM must be between {VCOM_MIN} and {VCOM_MAX} V, got {value}")
        return value

    @field_validator("command_set")
    @classmethod
    def validate_command_set(cls, value: str) -> str:
        get_command_table(value)
        return value

    def geometry(self) -> PanelGeometry:
        return PanelGeometry(self.width, self.height)

    def pins(self) -> PinAssignment:
        return PinAssignment(
            reset=self.reset_pin,
            data_command=self.data_command_pin,
            chip_select=self.chip_select_pin,
            busy=self.busy_pin,
        )


class SlideshowConfiguration(BaseModel):
    """Slideshow timing defaults used when catalog settings are missing."""

    default_display_duration: int = Field(
        default=300, description="Display duration in seconds when the setting is unusable"
    )
    min_display_duration: int = Field(
        default=60, gt=0, description="Floor applied to every display duration"
    )
    error_backoff: float = Field(
        default=30.0, gt=0, description="Seconds to wait after a failed cycle"
    )
    default_random_order: bool = Field(
        default=True, description="Random ordering when the setting is unusable"
    )

    @model_validator(mode="after")
    def validate_backoff_below_floor(self) -> "SlideshowConfiguration":
        if self.error_backoff >= self.min_display_duration:
            raise ValueError(
                f"error_backoff ({self.error_backoff} s) must be shorter than "
                f"min_display_duration ({self.min_display_duration} s)"
            )
        return self


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    # Console Logging
    console_enabled: bool = Field(default=True, description="Enable console logging")
    console_level: str = Field(
        default="INFO",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )

    # File Logging
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_level: str = Field(
        default="DEBUG",
        description="File log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    file_directory: Optional[str] = Field(
        default=None, description="Custom log directory (defaults to data_dir/logs)"
    )
    file_prefix: str = Field(default="photoframe", description="Log file prefix")
    max_log_files: int = Field(default=5, description="Maximum number of log files to keep")
    include_function_names: bool = Field(
        default=True, description="Include function names and line numbers in file logs"
    )

    # Third-party Libraries
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )


_SECTIONS: dict[str, type[BaseModel]] = {
    "panel": PanelConfiguration,
    "slideshow": SlideshowConfiguration,
    "logging": LoggingSettings,
}

_PATH_SETTINGS = ("data_dir", "config_dir", "photo_root", "database_path")


class PhotoFrameSettings(BaseSettings):
    """Application settings with environment variable and YAML support.

    Precedence: constructor arguments, then ``PHOTOFRAME_*`` environment
    variables, then the YAML config file, then defaults.
    """

    _explicit_args: set = PrivateAttr(default_factory=set)
    _env_vars_set: set = PrivateAttr(default_factory=set)

    # Paths
    config_file: Optional[Path] = Field(default=None, description="Explicit YAML config file")
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "photoframe")
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local" / "share" / "photoframe")
    photo_root: Optional[Path] = Field(
        default=None, description="Root of catalog artifact paths (defaults to data_dir/photos)"
    )
    database_path: Optional[Path] = Field(
        default=None, description="Photo catalog database (defaults to data_dir/photos.db)"
    )

    # Sections
    panel: PanelConfiguration = Field(default_factory=PanelConfiguration)
    slideshow: SlideshowConfiguration = Field(default_factory=SlideshowConfiguration)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter=ENV_NESTED_DELIMITER,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, **kwargs: Any) -> None:
        env_vars_set = {
            key[len(ENV_PREFIX) :].lower()
            for key in os.environ
            if key.upper().startswith(ENV_PREFIX)
        }

        super().__init__(**kwargs)

        self._explicit_args = set(kwargs.keys())
        self._env_vars_set = env_vars_set
        self._load_yaml_config()

    def _find_config_file(self) -> Optional[Path]:
        """Find config file: explicit path, project directory, then user config dir."""
        if self.config_file is not None:
            if self.config_file.exists():
                return self.config_file
            logging.warning(f"Config file {self.config_file} not found, using defaults")
            return None

        project_root = Path(__file__).parent.parent.parent
        project_config = project_root / "config" / "config.yaml"
        if project_config.exists():
            return project_config

        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config

        return None

    def _is_overridden(self, name: str) -> bool:
        return name in self._explicit_args or name in self._env_vars_set

    def _load_path_settings(self, config_data: dict) -> None:
        for setting in _PATH_SETTINGS:
            if setting in config_data and not self._is_overridden(setting):
                value = config_data[setting]
                setattr(self, setting, Path(value).expanduser() if value is not None else None)

    def _load_section(self, section: str, config_data: dict) -> None:
        section_data = config_data.get(section)
        if not isinstance(section_data, dict) or section in self._explicit_args:
            return

        updates = {
            key: value
            for key, value in section_data.items()
            if f"{section}{ENV_NESTED_DELIMITER}{key}".lower() not in self._env_vars_set
        }
        if not updates:
            return

        current: BaseModel = getattr(self, section)
        merged = {**current.model_dump(), **updates}
        setattr(self, section, _SECTIONS[section].model_validate(merged))

    def _load_yaml_config(self) -> None:
        """Load configuration from YAML file if it exists."""
        config_file = self._find_config_file()
        if not config_file:
            return

        try:
            with config_file.open() as f:
                config_data = yaml.safe_load(f)

            if not config_data:
                return

            self._load_path_settings(config_data)
            for section in _SECTIONS:
                self._load_section(section, config_data)

        except Exception as e:
            # Don't fail if YAML loading fails, just continue with defaults/env vars
            logging.warning(f"Could not load YAML config from {config_file}: {e}")

    @property
    def photo_directory(self) -> Path:
        """Directory that catalog artifact paths are relative to."""
        return self.photo_root if self.photo_root is not None else self.data_dir / "photos"

    @property
    def processed_directory(self) -> Path:
        """Directory for prepared artifacts created by imports."""
        return self.photo_directory / "processed"

    @property
    def database_file(self) -> Path:
        """Path to SQLite photo catalog."""
        return self.database_path if self.database_path is not None else self.data_dir / "photos.db"

    @property
    def simulation_file(self) -> Path:
        """PNG written by the simulated panel."""
        if self.panel.simulation_output is not None:
            return self.panel.simulation_output
        return self.data_dir / "panel.png"

    @property
    def log_directory(self) -> Path:
        if self.logging.file_directory:
            return Path(self.logging.file_directory).expanduser()
        return self.data_dir / "logs"


# Global settings management
_settings_instance: Optional[PhotoFrameSettings] = None


def get_settings(**kwargs: Any) -> PhotoFrameSettings:
    """Get the global settings instance, creating it lazily if needed.

    Args:
        **kwargs: Explicit settings used when the instance is first created

    Returns:
        PhotoFrameSettings: The global settings instance
    """
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = PhotoFrameSettings(**kwargs)
    return globals()["_settings_instance"]


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    globals()["_settings_instance"] = None
