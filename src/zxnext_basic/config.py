"""
Converter Configuration
=======================

Conversion settings for the encoder, decoder and command-line tools.
Configuration can come from:
- Default values (defined here)
- Environment variables (ZXBASIC_*)
- Explicit construction by an embedding caller

The defaults reproduce the classic txt2bas behaviour: automatic line
numbers start at 10 and advance by 10, unsupported numbers are
zero-filled, malformed directives are ignored and every program is
written with a +3DOS header.
"""

from dataclasses import dataclass
from typing import Optional
import os


_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_bool(value: str) -> Optional[bool]:
    """Parse an environment flag, returning None for unrecognised text."""
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


@dataclass
class ConverterConfig:
    """
    Configuration for text <-> tokenized BASIC conversion.

    Attributes:
        first_line: Line number given to the first unnumbered line (default: 10)
        line_step: Increment for automatic line numbers (default: 10)
        strict_numbers: Raise UnsupportedNumberError instead of zero-filling
            literals outside the integer fast path (default: False)
        strict_directives: Raise DirectiveError for malformed #autostart
            directives instead of ignoring them (default: False)
        include_header: Prepend the 128-byte +3DOS header when encoding
            (default: True)
        encoding: Text encoding of source and listing files (default: utf-8)
    """

    # ═══════════════════════════════════════════════════════════════════════════
    # LINE NUMBERING
    # ═══════════════════════════════════════════════════════════════════════════

    first_line: int = 10
    line_step: int = 10

    # ═══════════════════════════════════════════════════════════════════════════
    # STRICTNESS
    # ═══════════════════════════════════════════════════════════════════════════

    strict_numbers: bool = False
    strict_directives: bool = False

    # ═══════════════════════════════════════════════════════════════════════════
    # OUTPUT
    # ═══════════════════════════════════════════════════════════════════════════

    include_header: bool = True
    encoding: str = "utf-8"

    @classmethod
    def from_env(cls) -> "ConverterConfig":
        """
        Create a ConverterConfig from environment variables.

        Environment variables (all optional):
            ZXBASIC_FIRST_LINE: First automatic line number (integer)
            ZXBASIC_LINE_STEP: Automatic line number increment (integer)
            ZXBASIC_STRICT_NUMBERS: Reject unsupported literals (bool)
            ZXBASIC_STRICT_DIRECTIVES: Reject malformed directives (bool)
            ZXBASIC_INCLUDE_HEADER: Write the +3DOS header (bool)
            ZXBASIC_ENCODING: Source/listing text encoding

        Invalid values are ignored and the default is kept.

        Returns:
            ConverterConfig with values from environment variables
        """
        config = cls()

        if first_line := os.environ.get("ZXBASIC_FIRST_LINE"):
            try:
                config.first_line = int(first_line)
            except ValueError:
                pass

        if line_step := os.environ.get("ZXBASIC_LINE_STEP"):
            try:
                config.line_step = int(line_step)
            except ValueError:
                pass

        if strict_numbers := os.environ.get("ZXBASIC_STRICT_NUMBERS"):
            parsed = _parse_bool(strict_numbers)
            if parsed is not None:
                config.strict_numbers = parsed

        if strict_directives := os.environ.get("ZXBASIC_STRICT_DIRECTIVES"):
            parsed = _parse_bool(strict_directives)
            if parsed is not None:
                config.strict_directives = parsed

        if include_header := os.environ.get("ZXBASIC_INCLUDE_HEADER"):
            parsed = _parse_bool(include_header)
            if parsed is not None:
                config.include_header = parsed

        if encoding := os.environ.get("ZXBASIC_ENCODING"):
            config.encoding = encoding

        return config


# ═══════════════════════════════════════════════════════════════════════════════
# DEFAULT CONFIGURATION INSTANCE
# ═══════════════════════════════════════════════════════════════════════════════

_default_config: Optional[ConverterConfig] = None


def get_default_config() -> ConverterConfig:
    """
    Get the default converter configuration.

    Created from environment variables on first access. Can be overridden
    by calling set_default_config().
    """
    global _default_config
    if _default_config is None:
        _default_config = ConverterConfig.from_env()
    return _default_config


def set_default_config(config: Optional[ConverterConfig]) -> None:
    """
    Set the default converter configuration.

    Passing None resets it, so the next get_default_config() call reads
    the environment again.
    """
    global _default_config
    _default_config = config
