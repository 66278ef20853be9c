"""Command tables for IT8951-family panel controllers.

A single driver implementation is parameterised by a :class:`CommandTable`
value instead of one subclass per board variant. The table carries the
controller command codes, the register addresses the driver programs, the
refresh-mode codes, and the framing convention used to tell commands and
data apart on the bus.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from ..panel_driver import RefreshMode


class BusFraming(str, Enum):
    """How a transaction announces whether it carries a command or data."""

    # 16-bit preamble word at the start of every SPI transaction
    PREAMBLE = "preamble"
    # Data/command GPIO line: low for commands, high for data
    DATA_COMMAND_PIN = "data_command_pin"


_DEFAULT_REFRESH_MODES = {
    RefreshMode.INIT: 0,
    RefreshMode.DU: 1,
    RefreshMode.GC16: 2,
    RefreshMode.GL16: 3,
    RefreshMode.GLR16: 4,
    RefreshMode.GLD16: 5,
    RefreshMode.A2: 6,
    RefreshMode.DU4: 7,
}


@dataclass(frozen=True)
class CommandTable:
    """Tagged configuration describing one controller variant."""

    name: str
    framing: BusFraming

    # Controller commands
    sys_run: int = 0x0001
    standby: int = 0x0002
    sleep: int = 0x0003
    reg_read: int = 0x0010
    reg_write: int = 0x0011
    load_image: int = 0x0020
    load_image_area: int = 0x0021
    load_image_end: int = 0x0022
    display_area: int = 0x0034
    get_device_info: int = 0x0302
    vcom: int = 0x0039

    # Preamble words (PREAMBLE framing only)
    command_preamble: int = 0x6000
    data_preamble: int = 0x0000
    read_preamble: int = 0x1000

    # Registers
    reg_i80cpcr: int = 0x0004
    reg_lisar: int = 0x0208

    # Argument of the VCOM command selecting "write" rather than "read"
    vcom_set: int = 0x0001

    refresh_modes: Mapping[RefreshMode, int] = field(
        default_factory=lambda: MappingProxyType(dict(_DEFAULT_REFRESH_MODES))
    )

    def refresh_code(self, mode: RefreshMode) -> int:
        """Look up the wire code for a refresh mode.

        Raises:
            ValueError: If this controller variant does not support the mode
        """
        try:
            return self.refresh_modes[mode]
        except KeyError:
            raise ValueError(f"Refresh mode {mode.value} not supported by {self.name}") from None


IT8951_SPI = CommandTable(name="it8951_spi", framing=BusFraming.PREAMBLE)

IT8951_DC_PIN = CommandTable(name="it8951_dc_pin", framing=BusFraming.DATA_COMMAND_PIN)

COMMAND_TABLES: Mapping[str, CommandTable] = MappingProxyType(
    {table.name: table for table in (IT8951_SPI, IT8951_DC_PIN)}
)


def get_command_table(name: str) -> CommandTable:
    """Resolve a command table by its configuration name.

    Raises:
        ValueError: If no table with that name exists
    """
    try:
        return COMMAND_TABLES[name]
    except KeyError:
        available = ", ".join(sorted(COMMAND_TABLES))
        raise ValueError(f"Unknown command set '{name}'. Available: {available}") from None
