"""Decompose the controller_list[] block of codebuild.c into records.

A record in the upstream file looks like this:

    {
      "ssd1306",  16,  8,  "u8g2_ll_hvline_vertical_top_lsb", "u8x8_cad_001", "i2c", COM_I2C,
      "", /* is_generate_u8g2_class= */ 1,
      {
        { "128x64_noname" },
        { "128x64_vcomh0" },
        { NULL }
      }
    },

After sanitize() it is a single run of characters without any whitespace,
which is what the patterns below are written against.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Tuple

from .comm import split_comm_expression
from .errors import SchemaDriftError
from .sanitize import sanitize

logger = logging.getLogger(__name__)

NULL_VENDOR = 'NULL'

CONTROLLER_LIST = re.compile(r'structcontroller\w*\[\w*\]=\{(?P<body>.*)\};?')

RECORD = re.compile(
    r'\{"(?P<name>\w+)",'
    r'(?P<tile_width>\d+),(?P<tile_height>\d+),'
    r'"(?P<layout>\w*)",'
    r'"(?P<cad>\w*)","(?P<cad_short>\w*)",'
    r'(?P<com>"[\w|]*"|[\w|]*),'
    r'"(?P<note>(?:[^"\\]|\\.)*)",'
    r'(?P<flag>\d+)'
    r'(?:,\{(?P<vendors>[^{}]*(?:\{[^{}]*\}[^{}]*)*)\})?'
    r',?\}')

# {"name"} or {NULL}; quotes come in pairs or not at all
DISPLAY = re.compile(r'\{(?:"(?P<quoted>[^"{},]*)"|(?P<bare>[^"{},]*))\}')

# what may legitimately sit between two records
SEPARATORS = re.compile(r'[{},;]')


@dataclass(frozen=True)
class ControllerRecord:
    """ one row of controller_list[], before merging """
    name: str
    tile_width: int
    tile_height: int
    buffer_layout: str
    cad: str
    cad_short: str
    comms: Tuple[str, ...]
    notes: str
    flag: int
    vendors: Tuple[str, ...]


def controller_list_body(block: str) -> str:
    """ return the inside of 'struct controller controller_list[] = { ... };' if present """
    m = CONTROLLER_LIST.search(block)
    return m.group('body') if m else block


def parse_vendor_names(vendor_list: str) -> List[str]:
    """Split the nested vendor list into uppercase vendor names.

    '{"128x64_noname"},{"128x64_vcomh0"},{NULL}' -> ['128X64_NONAME', '128X64_VCOMH0']

    NULL entries (any case, quoted or not) mark an empty slot and are dropped.
    A token that is not a single bracketed literal means the list layout
    changed upstream and raises SchemaDriftError.
    """
    names = []
    for token in vendor_list.split(','):
        token = token.strip()
        if not token:
            continue
        m = DISPLAY.fullmatch(token)
        display = m and (m.group('quoted') if m.group('quoted') is not None else m.group('bare'))
        if not display or not display.strip():
            raise SchemaDriftError("Unable to extract vendor name", fragment=token)
        name = display.strip().upper()
        if name == NULL_VENDOR:
            continue
        names.append(name)
    return names


def _check_leftovers(body: str, matches) -> None:
    """ anything but separators between records means a record was not recognised """
    pos = 0
    for m in matches + [None]:
        end = m.start() if m else len(body)
        gap = body[pos:end]
        if SEPARATORS.sub('', gap):
            raise SchemaDriftError("Unrecognised text in controller list", fragment=gap)
        if m:
            pos = m.end()


def parse_controller_records(block: str) -> List[ControllerRecord]:
    """Parse a raw controller block into records, in source order.

    The block may be the text between the list markers (including the struct
    header) or just the records themselves. Comments and whitespace are
    removed here, the caller does not need to sanitize.
    """
    body = controller_list_body(sanitize(block))
    matches = list(RECORD.finditer(body))
    _check_leftovers(body, matches)

    records = []
    for m in matches:
        vendors = m.group('vendors')
        record = ControllerRecord(
            name=m.group('name').upper(),
            tile_width=int(m.group('tile_width')),
            tile_height=int(m.group('tile_height')),
            buffer_layout=m.group('layout'),
            cad=m.group('cad'),
            cad_short=m.group('cad_short'),
            comms=tuple(split_comm_expression(m.group('com'))),
            notes=m.group('note'),
            flag=int(m.group('flag')),
            vendors=tuple(parse_vendor_names(vendors)) if vendors is not None else (),
        )
        logger.debug("name: %s, tile width = %d, tile height = %d, hvline = %s, cad = %s, "
                     "cadshort = %s, com = %s, notes = %s, flag = %d, vendors = %s",
                     record.name, record.tile_width, record.tile_height, record.buffer_layout,
                     record.cad, record.cad_short, '|'.join(record.comms), record.notes,
                     record.flag, vendors)
        records.append(record)
    logger.debug("Parsed %d controller records", len(records))
    return records
