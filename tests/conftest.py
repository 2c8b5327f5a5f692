"""Shared fixtures: the codebuild.c excerpt in tests/data and blocks cut from it."""

import logging
from pathlib import Path

import pytest

from glcdcat.extract import extract_controller_block, extract_interface_block

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo log levels applied from a Config during a test."""
    yield
    logging.getLogger("glcdcat").setLevel(logging.NOTSET)


@pytest.fixture
def single_record():
    """Single controller row with quoted bus tokens and a NULL slot."""
    return (
        '{"SSD1306",1,1,"horiz","4wire","4w","COM_I2C|COM_4WSPI","no notes",0,'
        '{{"adafruit"},{"null"},{"generic"}}}'
    )


@pytest.fixture
def codebuild_path():
    return DATA_DIR / "codebuild.c"


@pytest.fixture
def codebuild_text(codebuild_path):
    return codebuild_path.read_text(encoding="utf-8")


@pytest.fixture
def controller_block(codebuild_text):
    return extract_controller_block(codebuild_text)


@pytest.fixture
def interface_block(codebuild_text):
    return extract_interface_block(codebuild_text)


@pytest.fixture
def make_interface_block():
    """Factory for interface blocks holding `count` well-formed records."""

    def _make(count):
        records = []
        for i in range(count):
            fields = ", ".join(f'"if{i}_f{n}"' for n in range(8))
            records.append(f"  /* {i} */\n  {{ {fields} }}")
        return "\n" + ",\n".join(records) + "\n"

    return _make
