"""Turn codebuild.c text into the capability model.

    text ─┬─ extract_controller_block ─ parse_controller_records ─ ModelAssembler ─┐
          └─ extract_interface_block ── parse_interfaces ──────────────────────────┴─ CodebuildModel

Every call builds a fresh model; nothing is cached between calls.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .assemble import assemble_controllers, exclude_controllers, model_digest
from .config import Config, apply_log_level
from .controllers import parse_controller_records
from .extract import extract_controller_block, extract_interface_block, read_codebuild
from .interfaces import parse_interfaces
from .model import CommInterface, Controller

logger = logging.getLogger(__name__)


@dataclass
class CodebuildModel:
    controllers: List[Controller] = field(default_factory=list)
    interfaces: List[CommInterface] = field(default_factory=list)

    def controller(self, name: str) -> Optional[Controller]:
        name = name.upper()
        return next((c for c in self.controllers if c.name == name), None)

    def digest(self) -> str:
        return model_digest(self.controllers, self.interfaces)

    def to_dict(self) -> dict:
        return {
            'controllers': [c.to_dict() for c in self.controllers],
            'interfaces': [i.to_dict() for i in self.interfaces],
        }


def parse_controller_code(block: str, excluded: Iterable[str] = ()) -> List[Controller]:
    """Parse a controller block into controllers sorted by name."""
    controllers = assemble_controllers(parse_controller_records(block))
    return exclude_controllers(controllers, excluded)


def parse_interface_code(block: str) -> List[CommInterface]:
    return parse_interfaces(block)


def parse_codebuild(text: str, config: Config = None) -> CodebuildModel:
    """Parse the complete codebuild.c source.

    Any SchemaDriftError aborts the whole parse; there is no partial result.
    A config passed in also sets the level of the package logger.
    """
    if config is not None:
        apply_log_level(config.log_level)
    config = config or Config()
    controller_code = extract_controller_block(text, config.start_tag, config.end_tag)
    interface_code = extract_interface_block(text)
    model = CodebuildModel(
        controllers=parse_controller_code(controller_code, config.excluded_controllers),
        interfaces=parse_interface_code(interface_code),
    )
    logger.info("Parsed %d controllers and %d interfaces",
                len(model.controllers), len(model.interfaces))
    return model


def load_model(path: Union[str, Path], config: Config = None) -> CodebuildModel:
    return parse_codebuild(read_codebuild(path), config)
