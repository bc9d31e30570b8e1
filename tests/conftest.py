"""
Shared Test Fixtures
====================

Fixtures used across the converter test modules: a clean default
configuration for every test, and a small sample program in both text
and binary form.
"""

import pytest

from zxnext_basic.config import ConverterConfig, set_default_config
from zxnext_basic.plus3 import encode_program


_CONFIG_ENV_VARS = (
    "ZXBASIC_FIRST_LINE",
    "ZXBASIC_LINE_STEP",
    "ZXBASIC_STRICT_NUMBERS",
    "ZXBASIC_STRICT_DIRECTIVES",
    "ZXBASIC_INCLUDE_HEADER",
    "ZXBASIC_ENCODING",
)


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """
    Run every test against the built-in defaults.

    Clears ZXBASIC_* variables from the environment and resets the
    cached default configuration before and after the test.
    """
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield ConverterConfig()
    set_default_config(None)


@pytest.fixture
def sample_source() -> list[str]:
    """
    A short program exercising directives, numbering and literals.

    Lines 10 and 20 are explicit, the third line is numbered 30 from
    the running default.
    """
    return [
        "# greeting demo",
        "#autostart 10",
        "",
        '10 PRINT "HELLO"',
        "20 FOR I=1 TO 5",
        "NEXT I",
    ]


@pytest.fixture
def sample_program_bytes(sample_source: list[str]) -> bytes:
    """The sample program encoded with a +3DOS header."""
    return encode_program(sample_source)
