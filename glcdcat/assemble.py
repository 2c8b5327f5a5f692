"""Fold parsed controller records into the Controller/Vendor/VendorConfig tree.

Merge rules:

* one Controller per name, however many rows mention it
* one Vendor per (controller, vendor name); the geometry, layout and notes of
  the first row that names the vendor are kept, later rows only add configs
* one VendorConfig per (vendor, cad, cad short); an identical config on a
  later row is not added a second time
"""

import hashlib
import json
import logging
from typing import Dict, Iterable, List

from .comm import comm_value
from .controllers import ControllerRecord
from .model import Comm, CommInterface, Controller, Vendor, VendorConfig

logger = logging.getLogger(__name__)


class ModelAssembler:
    """Accumulates controller records; the result is read with controllers()."""

    def __init__(self):
        self._controllers: Dict[str, Controller] = {}

    def add(self, record: ControllerRecord) -> Controller:
        controller = self._controllers.get(record.name)
        if controller is None:
            controller = Controller(record.name)
            self._controllers[record.name] = controller

        for vendor_name in record.vendors:
            vendor = controller.vendor(vendor_name)
            if vendor is None:
                vendor = controller.add_vendor(Vendor(
                    controller, vendor_name,
                    tile_width=record.tile_width,
                    tile_height=record.tile_height,
                    buffer_layout=record.buffer_layout,
                    notes=record.notes))
            elif (vendor.tile_width, vendor.tile_height) != (record.tile_width, record.tile_height):
                logger.debug("%s/%s: keeping %dx%d tiles, ignoring %dx%d",
                             controller.name, vendor.name, vendor.tile_width, vendor.tile_height,
                             record.tile_width, record.tile_height)

            config = VendorConfig(vendor, record.cad, record.cad_short,
                                  [Comm(t, comm_value(t)) for t in record.comms])
            if not vendor.add_config(config):
                logger.debug("%s/%s: duplicate config %s/%s skipped",
                             controller.name, vendor.name, record.cad, record.cad_short)
        return controller

    def add_all(self, records: Iterable[ControllerRecord]) -> 'ModelAssembler':
        for r in records:
            self.add(r)
        return self

    def controllers(self) -> List[Controller]:
        """ all controllers, sorted by name """
        return sorted(self._controllers.values())


def assemble_controllers(records: Iterable[ControllerRecord]) -> List[Controller]:
    controllers = ModelAssembler().add_all(records).controllers()
    logger.debug("Found a total of %d controllers", len(controllers))
    return controllers


def exclude_controllers(controllers: List[Controller], excluded: Iterable[str]) -> List[Controller]:
    """ drop the controllers named in excluded (case-insensitive) """
    names = {e.strip().upper() for e in excluded if e and e.strip()}
    if not names:
        return list(controllers)
    kept = []
    for c in controllers:
        if c.name.strip().upper() in names:
            logger.warning("Excluded controller: %s", c.name)
        else:
            kept.append(c)
    return kept


def model_digest(controllers: Iterable[Controller], interfaces: Iterable[CommInterface] = ()) -> str:
    """ SHA-256 over the canonical JSON form; equal models give equal digests """
    structure = {
        'controllers': [c.to_dict() for c in controllers],
        'interfaces': [i.to_dict() for i in interfaces],
    }
    json_str = json.dumps(structure, sort_keys=True, indent=None)
    return hashlib.sha256(json_str.encode()).hexdigest()
