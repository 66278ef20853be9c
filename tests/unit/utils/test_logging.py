"""Tests for logging setup."""

import argparse
import logging
import os
from pathlib import Path

import pytest

from photoframe.config.settings import PhotoFrameSettings
from photoframe.utils.logging import (
    VERBOSE,
    AutoColoredFormatter,
    TimestampedFileHandler,
    apply_command_line_overrides,
    get_log_level,
    setup_logging,
)


@pytest.fixture
def settings(tmp_path: Path) -> PhotoFrameSettings:
    return PhotoFrameSettings(data_dir=tmp_path, config_dir=tmp_path)


def make_args(**overrides) -> argparse.Namespace:
    values = {"log_level": None, "verbose": False, "quiet": False, "log_dir": None, "no_log_colors": False}
    values.update(overrides)
    return argparse.Namespace(**values)


class TestLogLevels:
    """Test cases for log level helpers."""

    def test_get_log_level_when_verbose_then_custom_level(self) -> None:
        assert get_log_level("verbose") == VERBOSE == 15

    def test_get_log_level_when_standard_name_then_numeric(self) -> None:
        assert get_log_level("warning") == logging.WARNING

    def test_get_log_level_when_unknown_then_value_error(self) -> None:
        with pytest.raises(ValueError):
            get_log_level("LOUD")

    def test_logger_verbose_when_enabled_then_recorded(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("photoframe.test")
        with caplog.at_level(VERBOSE, logger="photoframe.test"):
            logger.verbose("busy wait took 3 ms")  # type: ignore[attr-defined]
        assert caplog.records[0].levelname == "VERBOSE"


class TestFormatterAndHandler:
    """Test cases for the formatter and file handler."""

    def test_format_when_colors_disabled_then_plain(self) -> None:
        formatter = AutoColoredFormatter("%(levelname)s %(message)s", enable_colors=False)
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)

        assert formatter.format(record) == "ERROR boom"

    def test_cleanup_when_too_many_files_then_oldest_removed(self, tmp_path: Path) -> None:
        for index in range(4):
            old = tmp_path / f"photoframe_2020010{index}_000000.log"
            old.write_text("old")
            os.utime(old, (1_000_000 + index, 1_000_000 + index))

        handler = TimestampedFileHandler(tmp_path, prefix="photoframe", max_files=2)
        handler.close()

        remaining = sorted(path.name for path in tmp_path.glob("photoframe_*.log"))
        assert len(remaining) == 2
        assert Path(handler.baseFilename).name in remaining
        assert "photoframe_20200103_000000.log" in remaining


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_setup_logging_when_file_enabled_then_log_file_written(
        self, settings: PhotoFrameSettings, tmp_path: Path
    ) -> None:
        settings.logging.file_enabled = True

        logger = setup_logging(settings)
        logging.getLogger("photoframe.slideshow").warning("panel busy")
        for handler in logger.handlers:
            handler.flush()

        log_files = list((tmp_path / "logs").glob("photoframe_*.log"))
        assert len(log_files) == 1
        assert "panel busy" in log_files[0].read_text()

    def test_setup_logging_when_called_twice_then_handlers_replaced(
        self, settings: PhotoFrameSettings
    ) -> None:
        setup_logging(settings)
        logger = setup_logging(settings)

        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.INFO

    def test_setup_logging_when_all_disabled_then_null_handler(
        self, settings: PhotoFrameSettings
    ) -> None:
        settings.logging.console_enabled = False

        logger = setup_logging(settings)

        assert [type(handler) for handler in logger.handlers] == [logging.NullHandler]
        assert logging.getLogger("PIL").level == logging.WARNING


class TestCommandLineOverrides:
    """Test cases for apply_command_line_overrides."""

    def test_overrides_when_verbose_then_both_levels_verbose(self, settings: PhotoFrameSettings) -> None:
        apply_command_line_overrides(settings, make_args(verbose=True))

        assert settings.logging.console_level == "VERBOSE"
        assert settings.logging.file_level == "VERBOSE"

    def test_overrides_when_quiet_then_console_errors_only(self, settings: PhotoFrameSettings) -> None:
        apply_command_line_overrides(settings, make_args(quiet=True, no_log_colors=True))

        assert settings.logging.console_level == "ERROR"
        assert settings.logging.console_colors is False

    def test_overrides_when_log_dir_then_file_logging_enabled(
        self, settings: PhotoFrameSettings, tmp_path: Path
    ) -> None:
        apply_command_line_overrides(settings, make_args(log_dir=tmp_path / "custom"))

        assert settings.logging.file_enabled is True
        assert settings.log_directory == tmp_path / "custom"
