"""Cut the controller and interface blocks out of a complete codebuild.c.

Only local text is handled here; fetching the file is up to the caller.
"""

import logging
import re
from pathlib import Path
from typing import Union

from .errors import SchemaDriftError

logger = logging.getLogger(__name__)

START_TAG = 'display_controller_list_start'
END_TAG = 'display_controller_list_end'

INTERFACES = re.compile(r'struct\s*interface\s*interface_list\[\]\s*=\s*\{(.+?)\};', re.DOTALL)


def read_codebuild(path: Union[str, Path]) -> str:
    """ read a local copy of codebuild.c """
    path = Path(path)
    text = path.read_text(encoding='utf-8', errors='replace')
    logger.info("Read %s (%d bytes)", path, len(text))
    return text


def extract_controller_block(text: str, start_tag: str = START_TAG, end_tag: str = END_TAG) -> str:
    """Return the lines between the start and end marker lines.

    Blank lines are dropped. The marker lines themselves are not included.
    """
    lines = []
    collecting = False
    seen_start = False
    seen_end = False
    for line in text.splitlines():
        if not line.strip():
            continue
        if start_tag in line:
            collecting = seen_start = True
            continue
        if end_tag in line:
            if collecting:
                seen_end = True
            collecting = False
            continue
        if collecting:
            lines.append(line)

    if not seen_start:
        raise SchemaDriftError(f"Start marker '{start_tag}' not found")
    if not seen_end:
        logger.warning("End marker '%s' not found, collected up to end of file", end_tag)
    logger.debug("Controller block has %d lines", len(lines))
    return '\n'.join(lines) + '\n' if lines else ''


def extract_interface_block(text: str) -> str:
    """ return the inside of the interface_list[] initializer """
    m = INTERFACES.search(text)
    if not m:
        raise SchemaDriftError("interface_list[] initializer not found")
    return m.group(1)
