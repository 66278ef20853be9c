"""IT8951 controller driver."""

from .bus import PanelBus, PinAssignment, RaspberryPiBus
from .commands import COMMAND_TABLES, IT8951_DC_PIN, IT8951_SPI, BusFraming, CommandTable, get_command_table
from .driver import DeviceInfo, IT8951Driver

__all__ = [
    "COMMAND_TABLES",
    "IT8951_DC_PIN",
    "IT8951_SPI",
    "BusFraming",
    "CommandTable",
    "DeviceInfo",
    "IT8951Driver",
    "PanelBus",
    "PinAssignment",
    "RaspberryPiBus",
    "get_command_table",
]
