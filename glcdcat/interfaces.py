"""Parse interface_list[] of codebuild.c.

Each record holds eight strings describing one bus wiring variant:

    {
      "4W_SW_SPI",
      "u8x8_SetPin_4Wire_SW_SPI",
      "u8x8_byte_arduino_4wire_sw_spi",
      "u8x8_gpio_and_delay_arduino",
      "uint8_t clock, uint8_t data, uint8_t cs, uint8_t dc, uint8_t reset = U8X8_PIN_NONE",
      "clock, data, cs, dc [, reset]",
      "clock, data, cs, dc \\[, reset\\]",
      "u8x8_byte_4wire_sw_spi",
    },

The records carry no protocol label; the protocol comes from the position of
the record, see comm.PROTOCOL_TABLE.
"""

import logging
import re
from typing import List

from .comm import check_interface_count, protocol_for_index
from .errors import SchemaDriftError
from .model import CommInterface
from .sanitize import clean_interface_code

logger = logging.getLogger(__name__)

FIELDS = (
    'name',
    'set_pin_function',
    'arduino_com_procedure',
    'arduino_gpio_procedure',
    'pins_with_type',
    'pins_plain',
    'pins_markdown',
    'generic_com_procedure',
)

INTERFACE_LIST = re.compile(
    r'struct\s+interface\s+interface_list\s*\[\s*\]\s*=\s*\{(?P<body>.*?)\}\s*;', re.DOTALL)

INTERFACE_RECORD = re.compile(
    r'\{\s*'
    + r'\s*,\s*'.join(r'"(?P<%s>(?:[^"\\]|\\.)*)"' % f for f in FIELDS)
    + r'\s*,?\s*\}',
    re.DOTALL)

SEPARATORS = re.compile(r'[{},;\s]')


def interface_list_body(code: str) -> str:
    """ return the inside of 'struct interface interface_list[] = { ... };' if present """
    m = INTERFACE_LIST.search(code)
    return m.group('body') if m else code


def parse_interfaces(code: str) -> List[CommInterface]:
    """Parse the interface block into CommInterface records.

    Record N (0-based) gets index N and the protocol at position N of the
    ordinal table. If the block holds more or fewer records than the table,
    nothing is returned and SchemaDriftError is raised.
    """
    logger.info("[PARSE-INTERFACE] Parsing comm interface code")
    body = interface_list_body(clean_interface_code(code))
    matches = list(INTERFACE_RECORD.finditer(body))

    pos = 0
    for m in matches + [None]:
        gap = body[pos:m.start() if m else len(body)]
        if SEPARATORS.sub('', gap):
            raise SchemaDriftError("Unrecognised text in interface list", fragment=gap.strip())
        if m:
            pos = m.end()

    check_interface_count(len(matches))

    interfaces = []
    for index, m in enumerate(matches):
        interface = CommInterface(index=index, protocol=protocol_for_index(index),
                                  **{f: m.group(f) for f in FIELDS})
        logger.debug("[PARSE-INTERFACE] Parsed Comm Interface = %s", interface)
        interfaces.append(interface)
    logger.info("[PARSE-INTERFACE] Parsed a total of %d interfaces", len(interfaces))
    return interfaces
