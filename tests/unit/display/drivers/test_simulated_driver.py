"""Tests for the simulated panel driver."""

from pathlib import Path

import pytest
from PIL import Image

from fakes import SMALL_GEOMETRY
from photoframe.display.drivers.panel_driver import DeviceState, RefreshMode
from photoframe.display.drivers.simulated import SimulatedPanelDriver
from photoframe.display.exceptions import BufferSizeMismatch, DeviceStateError


@pytest.fixture
def output_path(tmp_path: Path) -> Path:
    return tmp_path / "sim" / "panel.png"


@pytest.fixture
def simulated(output_path: Path) -> SimulatedPanelDriver:
    driver = SimulatedPanelDriver(SMALL_GEOMETRY, output_path)
    driver.initialize()
    return driver


class TestSimulatedPanelDriver:
    """Test cases for SimulatedPanelDriver."""

    def test_load_frame_when_uninitialized_then_state_error(self, output_path: Path) -> None:
        driver = SimulatedPanelDriver(SMALL_GEOMETRY, output_path)
        with pytest.raises(DeviceStateError):
            driver.load_frame(bytes(12))

    def test_load_frame_when_wrong_size_then_buffer_size_mismatch(
        self, simulated: SimulatedPanelDriver
    ) -> None:
        with pytest.raises(BufferSizeMismatch):
            simulated.load_frame(bytes(13))

    def test_refresh_full_when_frame_loaded_then_png_written(
        self, simulated: SimulatedPanelDriver, output_path: Path
    ) -> None:
        frame = bytes([0, 17, 34, 51] * 3)
        simulated.load_frame(frame)
        simulated.refresh_full(RefreshMode.GC16)

        with Image.open(output_path) as image:
            assert image.size == (4, 3)
            assert image.convert("L").tobytes() == frame
        assert simulated.refresh_count == 1
        assert simulated.last_mode is RefreshMode.GC16

    def test_refresh_area_when_partial_then_only_region_updated(
        self, simulated: SimulatedPanelDriver
    ) -> None:
        simulated.load_frame(bytes(12))
        simulated.refresh_area(0, 0, 2, 1, RefreshMode.DU)

        assert simulated.panel_image is not None
        assert simulated.panel_image.tobytes() == bytes([0, 0]) + bytes([255] * 10)

    def test_clear_when_running_then_panel_white_with_init_mode(
        self, simulated: SimulatedPanelDriver
    ) -> None:
        simulated.load_frame(bytes(12))
        simulated.refresh_full()

        simulated.clear()

        assert simulated.panel_image is not None
        assert simulated.panel_image.tobytes() == b"\xff" * 12
        assert simulated.last_mode is RefreshMode.INIT

    def test_shutdown_when_running_then_uninitialized(self, simulated: SimulatedPanelDriver) -> None:
        simulated.enter_sleep()
        simulated.enter_sleep()
        assert simulated.state is DeviceState.SLEEPING

        simulated.shutdown()
        assert simulated.state is DeviceState.UNINITIALIZED
