"""Configuration for reading codebuild.c.

A config file is YAML and may set any subset of:

    markers:
      start: display_controller_list_start
      end: display_controller_list_end
    exclude:
      controllers:
        - SSD1606
    logging:
      level: INFO

Missing keys fall back to DEFAULTS. The file is checked against SCHEMA before
use; unknown keys are rejected so that typos do not pass silently.
"""

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from jsonschema import Draft202012Validator
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError
from .extract import END_TAG, START_TAG

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = 'glcdcat'

DEFAULTS = {
    'markers': {'start': START_TAG, 'end': END_TAG},
    'exclude': {'controllers': []},
    'logging': {'level': 'INFO'},
}

SCHEMA = {
    '$schema': 'https://json-schema.org/draft/2020-12/schema',
    'type': 'object',
    'additionalProperties': False,
    'properties': {
        'markers': {
            'type': 'object',
            'additionalProperties': False,
            'properties': {
                'start': {'type': 'string', 'minLength': 1},
                'end': {'type': 'string', 'minLength': 1},
            },
        },
        'exclude': {
            'type': 'object',
            'additionalProperties': False,
            'properties': {
                'controllers': {'type': 'array', 'items': {'type': 'string'}},
            },
        },
        'logging': {
            'type': 'object',
            'additionalProperties': False,
            'properties': {
                'level': {'enum': ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']},
            },
        },
    },
}


@dataclass
class Config:
    start_tag: str = START_TAG
    end_tag: str = END_TAG
    excluded_controllers: List[str] = field(default_factory=list)
    log_level: str = 'INFO'


def _merge(base: dict, override: dict) -> dict:
    """ recursively overlay override onto a copy of base """
    merged = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _merge(merged[k], v)
        else:
            merged[k] = v
    return merged


def _plain(node):
    """ convert ruamel's CommentedMap/CommentedSeq into plain dicts and lists """
    if isinstance(node, dict):
        return {str(k): _plain(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_plain(v) for v in node]
    return node


def validate_config(data: dict) -> None:
    validator = Draft202012Validator(SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        e = errors[0]
        loc = "/".join(str(p) for p in e.path) or "(root)"
        raise ConfigError(f"Invalid configuration at {loc}: {e.message}")


def config_from_dict(data: Optional[dict]) -> Config:
    data = _plain(data or {})
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")
    validate_config(data)
    merged = _merge(DEFAULTS, data)
    return Config(
        start_tag=merged['markers']['start'],
        end_tag=merged['markers']['end'],
        excluded_controllers=list(merged['exclude']['controllers']),
        log_level=merged['logging']['level'],
    )


def load_config(path: Union[str, Path, None] = None) -> Config:
    """Load a YAML config file, or return the defaults if path is None."""
    if path is None:
        return config_from_dict({})
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config {path} not found")
    yaml = YAML(typ='safe')
    try:
        with open(path, 'r') as f:
            data = yaml.load(f)
    except YAMLError as ex:
        raise ConfigError(f"Unable to parse {path}: {ex}") from ex
    logger.debug("Loaded configuration from %s", path)
    return config_from_dict(data)


def apply_log_level(level: str) -> None:
    """Set the level of the package logger; handlers are left to the host."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(getattr(logging, level.upper(), logging.INFO))


def configure_logging(level: str = 'INFO') -> None:
    """ basic console logging for scripts that embed the parser """
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    apply_log_level(level)
