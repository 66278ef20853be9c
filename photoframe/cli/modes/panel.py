"""Panel driver construction and the panel clear mode."""

import asyncio
import logging
from typing import Any

from ...config.settings import PhotoFrameSettings
from ...display.drivers.it8951 import IT8951Driver, RaspberryPiBus, get_command_table
from ...display.drivers.panel_driver import PanelDriver
from ...display.drivers.simulated import SimulatedPanelDriver
from ...display.exceptions import DisplayError

logger = logging.getLogger(__name__)


def create_driver(settings: PhotoFrameSettings, simulate: bool = False) -> PanelDriver:
    """Build the panel driver described by the settings.

    Args:
        settings: Application settings
        simulate: Force the simulated driver regardless of configuration

    Returns:
        Uninitialized panel driver
    """
    panel = settings.panel
    geometry = panel.geometry()
    if simulate or panel.simulate:
        logger.info(f"Using simulated panel, output {settings.simulation_file}")
        return SimulatedPanelDriver(geometry, settings.simulation_file)

    bus = RaspberryPiBus(panel.bus_device_path, panel.pins(), panel.spi_speed_hz)
    return IT8951Driver(
        geometry,
        panel.vcom,
        bus,
        command_table=get_command_table(panel.command_set),
        chunk_size=panel.chunk_size,
        busy_timeout=panel.busy_timeout,
        busy_poll_interval=panel.busy_poll_interval,
        busy_active_high=panel.busy_active_high,
    )


def _clear_panel(driver: PanelDriver) -> None:
    try:
        driver.initialize()
        driver.clear()
    finally:
        driver.shutdown()


async def run_clear_mode(args: Any, settings: PhotoFrameSettings) -> int:
    """Initialize the panel, wipe it to white and put it to sleep.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    driver = create_driver(settings, getattr(args, "simulate", False))
    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(None, _clear_panel, driver)
    except DisplayError as e:
        logger.error(f"Failed to clear panel: {e.message}")
        return 1
    print("Panel cleared")
    return 0
