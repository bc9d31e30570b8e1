"""
Hidden Number Packing
=====================

Sinclair BASIC stores every numeric literal twice: the ASCII digits as
typed, then a marker byte ($0E) followed by five bytes holding the value
in the interpreter's internal format, so the number never has to be
re-parsed at run time.

Integer Fast Path
-----------------
Whole numbers in -65535..65535 use the "small integer" form:

    Byte 0: $00
    Byte 1: sign ($00 positive, $FF negative)
    Byte 2: magnitude low byte
    Byte 3: magnitude high byte
    Byte 4: $00

Any other value (fractional or out of range) is zero-filled. This is a
known limitation rather than a faithful encoding: the interpreter will
see the value 0. Callers wanting to reject such literals pass
strict=True and get UnsupportedNumberError instead.
"""

from typing import Union
import logging
import math

from zxnext_basic.errors import UnsupportedNumberError

logger = logging.getLogger(__name__)


# Byte that introduces the 5-byte hidden form inside a line
NUMBER_MARKER = 0x0E
PACKED_NUMBER_SIZE = 5

SMALL_INTEGER_LIMIT = 65535

_ZERO_FILL = bytes(PACKED_NUMBER_SIZE)


def is_small_integer(value: Union[int, float]) -> bool:
    """True if the value can use the integer fast path."""
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return False
    return -SMALL_INTEGER_LIMIT <= value <= SMALL_INTEGER_LIMIT


def pack_number(value: Union[int, float], strict: bool = False) -> bytes:
    """
    Pack a numeric value into the 5-byte hidden form.

    Args:
        value: The literal's value
        strict: Raise instead of zero-filling unsupported values

    Returns:
        Exactly 5 bytes

    Raises:
        UnsupportedNumberError: If strict and the value is not a whole
            number in -65535..65535

    Example:
        >>> pack_number(100).hex()
        '0000640000'
        >>> pack_number(-1).hex()
        '00ff010000'
    """
    if not is_small_integer(value):
        if strict:
            raise UnsupportedNumberError(repr(value))
        logger.warning(f"Numeric value {value!r} is not a small integer; packed as zero")
        return _ZERO_FILL

    number = int(value)
    sign = 0xFF if number < 0 else 0x00
    magnitude = abs(number)
    return bytes([0x00, sign, magnitude & 0xFF, (magnitude >> 8) & 0xFF, 0x00])


def unpack_number(data: bytes) -> Union[int, None]:
    """
    Read a small integer back from its 5-byte hidden form.

    Returns:
        The integer, or None if the bytes are not in small-integer form
        (a full floating-point value, which this module does not decode)

    Raises:
        ValueError: If data is not exactly 5 bytes
    """
    if len(data) != PACKED_NUMBER_SIZE:
        raise ValueError(f"Expected {PACKED_NUMBER_SIZE} bytes, got {len(data)}")

    if data[0] != 0x00 or data[4] != 0x00 or data[1] not in (0x00, 0xFF):
        return None

    magnitude = data[2] | (data[3] << 8)
    return -magnitude if data[1] == 0xFF else magnitude
