"""Capability model recovered from codebuild.c.

Controller
  └─ Vendor            (one display panel, keyed by controller + vendor name)
       └─ VendorConfig (one command/address variant, keyed by cad + cad short)
            └─ Comm    (one bus token with its resolved bit flag)

CommInterface is independent of the tree: one record per wiring variant of
interface_list[], in source order.

Back-references (Vendor.controller, VendorConfig.vendor) are used for keys and
names only. They are left out of repr() and to_dict() to keep both acyclic.
"""

import functools
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .comm import CommProtocol, combined_flags

TILE_SIZE = 8   # pixels per tile, in both directions


class BufferLayout(Enum):
    HORIZONTAL = 'HORIZONTAL'
    VERTICAL = 'VERTICAL'
    UNKNOWN = 'UNKNOWN'


HVLINE_LAYOUTS = {
    'u8g2_ll_hvline_horizontal_right_lsb': BufferLayout.HORIZONTAL,
    'u8g2_ll_hvline_vertical_top_lsb': BufferLayout.VERTICAL,
}


def buffer_layout_of(tag: str) -> BufferLayout:
    """ classify an hvline procedure name; anything unrecognised is UNKNOWN """
    return HVLINE_LAYOUTS.get((tag or '').lower(), BufferLayout.UNKNOWN)


@dataclass
class Comm:
    name: str
    value: int

    def to_dict(self) -> dict:
        return {'name': self.name, 'value': self.value}


@dataclass(eq=False)
class VendorConfig:
    vendor: 'Vendor' = field(repr=False)
    cad_name: str
    cad_name_short: str = ''
    comms: List[Comm] = field(default_factory=list)

    @property
    def key(self) -> Tuple[str, str, str, str]:
        return self.vendor.key + (self.cad_name, self.cad_name_short or '')

    @property
    def flags(self) -> int:
        """ bitmask of all recognised bus tokens of this config """
        return combined_flags(c.name for c in self.comms)

    @property
    def setup_name(self) -> str:
        return setup_function_name(self)

    def __eq__(self, other):
        if not isinstance(other, VendorConfig):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def to_dict(self) -> dict:
        return {
            'cadName': self.cad_name,
            'cadNameShort': self.cad_name_short,
            'comms': [c.to_dict() for c in self.comms],
        }


@dataclass(eq=False)
class Vendor:
    controller: 'Controller' = field(repr=False)
    name: str
    tile_width: int = 0
    tile_height: int = 0
    buffer_layout: str = ''
    notes: str = ''
    configs: List[VendorConfig] = field(default_factory=list)

    @property
    def key(self) -> Tuple[str, str]:
        return (self.controller.name, self.name)

    @property
    def pixel_width(self) -> int:
        return self.tile_width * TILE_SIZE

    @property
    def pixel_height(self) -> int:
        return self.tile_height * TILE_SIZE

    @property
    def layout(self) -> BufferLayout:
        return buffer_layout_of(self.buffer_layout)

    @property
    def display_name(self) -> str:
        """ constant name used by the generated driver code, e.g. D_128x64_NONAME """
        return f"D_{self.pixel_width}x{self.pixel_height}_{self.name.replace('_', '')}"

    def find_config(self, cad_name: str, cad_name_short: str) -> Optional[VendorConfig]:
        for c in self.configs:
            if c.cad_name == cad_name and (c.cad_name_short or '') == (cad_name_short or ''):
                return c
        return None

    def add_config(self, config: VendorConfig) -> bool:
        """Append a config unless an equal one is already present.

        Returns True if the config was added.
        """
        if config.vendor is not self:
            raise ValueError(f"config belongs to {config.vendor.name}, not {self.name}")
        if self.find_config(config.cad_name, config.cad_name_short):
            return False
        self.configs.append(config)
        return True

    def comm_names(self) -> List[str]:
        """ distinct bus tokens over all configs, in first-seen order """
        names = []
        for c in self.configs:
            for comm in c.comms:
                if comm.name not in names:
                    names.append(comm.name)
        return names

    def __eq__(self, other):
        if not isinstance(other, Vendor):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'tileWidth': self.tile_width,
            'tileHeight': self.tile_height,
            'bufferLayout': self.buffer_layout,
            'notes': self.notes,
            'configs': [c.to_dict() for c in self.configs],
        }


@functools.total_ordering
@dataclass(eq=False)
class Controller:
    name: str
    vendors: List[Vendor] = field(default_factory=list)

    def vendor(self, name: str) -> Optional[Vendor]:
        """ look up a vendor of this controller by its (uppercase) name """
        for v in self.vendors:
            if v.name == name:
                return v
        return None

    def add_vendor(self, vendor: Vendor) -> Vendor:
        if vendor.controller is not self:
            raise ValueError(f"vendor {vendor.name} belongs to {vendor.controller.name}, not {self.name}")
        if self.vendor(vendor.name) is not None:
            raise ValueError(f"vendor {vendor.name} already present in {self.name}")
        self.vendors.append(vendor)
        return vendor

    def configs(self) -> List[VendorConfig]:
        return [c for v in self.vendors for c in v.configs]

    def __eq__(self, other):
        if not isinstance(other, Controller):
            return NotImplemented
        return self.name == other.name

    def __lt__(self, other):
        if not isinstance(other, Controller):
            return NotImplemented
        return self.name < other.name

    def __hash__(self):
        return hash(self.name)

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'vendors': [v.to_dict() for v in self.vendors],
        }


@dataclass(frozen=True)
class CommInterface:
    index: int
    protocol: CommProtocol
    name: str
    set_pin_function: str
    arduino_com_procedure: str
    arduino_gpio_procedure: str
    pins_with_type: str
    pins_plain: str
    pins_markdown: str
    generic_com_procedure: str

    def to_dict(self) -> dict:
        return {
            'index': self.index,
            'protocol': self.protocol.value,
            'name': self.name,
            'setPinFunction': self.set_pin_function,
            'arduinoComProcedure': self.arduino_com_procedure,
            'arduinoGpioProcedure': self.arduino_gpio_procedure,
            'pinsWithType': self.pins_with_type,
            'pinsPlain': self.pins_plain,
            'pinsMarkdown': self.pins_markdown,
            'genericComProcedure': self.generic_com_procedure,
        }


def setup_function_name(config: VendorConfig, buffer_code: str = None) -> str:
    """Name of the u8g2 setup function for one vendor config.

    u8g2_Setup_<controller>_[<cad short>_]<vendor>_<buffer code>, with the
    buffer code defaulting to 'f' (full frame buffer).
    """
    vendor = config.vendor
    parts = ['u8g2_Setup', vendor.controller.name.lower()]
    if config.cad_name_short and config.cad_name_short.strip():
        parts.append(config.cad_name_short)
    parts.append(vendor.name.lower())
    parts.append(buffer_code if buffer_code and buffer_code.strip() else 'f')
    return '_'.join(parts)
