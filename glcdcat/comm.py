"""Bus tokens and wiring protocols.

Two fixed tables live here:

* COMM_FLAGS maps the COM_* tokens of the controller list to the bit values
  the driver library uses. A controller row combines several of them with '|'.
* PROTOCOL_TABLE maps the position of a record in interface_list[] to the
  protocol it describes. The upstream array carries no labels, so the order of
  this table *is* the contract. Review it whenever interface_list[] changes.
"""

import logging
from enum import Enum
from typing import List

from .errors import SchemaDriftError

logger = logging.getLogger(__name__)

UNKNOWN_COMM = -1

COMM_FLAGS = {
    'COM_4WSPI': 0x0001,
    'COM_3WSPI': 0x0002,
    'COM_6800': 0x0004,
    'COM_8080': 0x0008,
    'COM_I2C': 0x0010,
    'COM_ST7920SPI': 0x0020,
    'COM_UART': 0x0040,
    'COM_KS0108': 0x0080,
    'COM_SED1520': 0x0100,
}


class CommProtocol(Enum):
    I2C_HW = 'I2C_HW'
    I2C_HW_2ND = 'I2C_HW_2ND'
    I2C_SW = 'I2C_SW'
    PARALLEL_6800_KS0108 = 'PARALLEL_6800_KS0108'
    PARALLEL_6800 = 'PARALLEL_6800'
    PARALLEL_8080 = 'PARALLEL_8080'
    SED1520 = 'SED1520'
    SERIAL_HW = 'SERIAL_HW'
    SERIAL_SW = 'SERIAL_SW'
    SPI_HW_4WIRE = 'SPI_HW_4WIRE'
    SPI_HW_4WIRE_2ND = 'SPI_HW_4WIRE_2ND'
    SPI_HW_4WIRE_ST7920 = 'SPI_HW_4WIRE_ST7920'
    SPI_HW_ST7920_2ND = 'SPI_HW_ST7920_2ND'
    SPI_SW_3WIRE = 'SPI_SW_3WIRE'
    SPI_HW_3WIRE = 'SPI_HW_3WIRE'
    SPI_SW_4WIRE = 'SPI_SW_4WIRE'
    SPI_SW_4WIRE_ST7920 = 'SPI_SW_4WIRE_ST7920'


# index in interface_list[] -> protocol
PROTOCOL_TABLE = (
    CommProtocol.SPI_SW_4WIRE,          # 0
    CommProtocol.SPI_HW_4WIRE,          # 1
    CommProtocol.PARALLEL_6800,         # 2
    CommProtocol.PARALLEL_8080,         # 3
    CommProtocol.SPI_SW_3WIRE,          # 4
    CommProtocol.SPI_HW_3WIRE,          # 5  not implemented by u8g2
    CommProtocol.I2C_SW,                # 6
    CommProtocol.I2C_HW,                # 7
    CommProtocol.SPI_SW_4WIRE_ST7920,   # 8
    CommProtocol.SPI_HW_4WIRE_ST7920,   # 9
    CommProtocol.I2C_HW_2ND,            # 10
    CommProtocol.PARALLEL_6800_KS0108,  # 11
    CommProtocol.SPI_HW_4WIRE_2ND,      # 12
    CommProtocol.SED1520,               # 13
    CommProtocol.SPI_HW_ST7920_2ND,     # 14
)


def comm_value(token: str) -> int:
    """Return the bit flag of a COM_* token, or UNKNOWN_COMM.

    Unknown tokens are logged and otherwise tolerated; they never stop a record
    from being parsed.
    """
    value = COMM_FLAGS.get(token)
    if value is None:
        logger.warning("Unknown bus token %r, using %d", token, UNKNOWN_COMM)
        return UNKNOWN_COMM
    return value


def split_comm_expression(expr: str) -> List[str]:
    """ split 'COM_I2C|COM_4WSPI' into its tokens, keeping their order """
    expr = expr.strip().strip('"')
    if not expr:
        return []
    return [t.strip() for t in expr.split('|')]


def combined_flags(tokens) -> int:
    """ OR together the flags of all known tokens """
    flags = 0
    for t in tokens:
        value = COMM_FLAGS.get(t)
        if value is not None:
            flags |= value
    return flags


def protocol_for_index(index: int) -> CommProtocol:
    """ map the position of an interface record to its protocol """
    if not 0 <= index < len(PROTOCOL_TABLE):
        raise SchemaDriftError(
            f"Unmapped comm interface index: {index} "
            f"(known indices are 0..{len(PROTOCOL_TABLE) - 1})")
    return PROTOCOL_TABLE[index]


def check_interface_count(count: int) -> None:
    """Compare the number of interface records with the ordinal table.

    Any difference means records were inserted or removed upstream and every
    index after that point may now name the wrong protocol, so both directions
    are fatal.
    """
    if count > len(PROTOCOL_TABLE):
        raise SchemaDriftError(
            f"interface_list[] has {count} records but only "
            f"{len(PROTOCOL_TABLE)} protocols are mapped")
    if count < len(PROTOCOL_TABLE):
        raise SchemaDriftError(
            f"interface_list[] has {count} records, expected {len(PROTOCOL_TABLE)}")
