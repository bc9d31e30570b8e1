"""
+3DOS File Header
=================

Files stored on +3DOS and NextZXOS disks carry a 128-byte header in
front of their data. For BASIC programs the header records the program
length and the line to auto-run on LOAD.

Header Layout
-------------
    Offset  Size    Description
    ------  ----    -----------
    0       8       Signature "PLUS3DOS"
    8       1       Soft EOF ($1A)
    9       1       Issue number (1)
    10      1       Version number (0)
    11      4       Total file size including header (little-endian)
    15      1       File type (0 = BASIC program)
    16      2       Data length (little-endian)
    18      2       Autostart line, 32768 = none (little-endian)
    20      2       Offset of the variables area (little-endian)
    22      105     Reserved (zero)
    127     1       Checksum: sum of bytes 0-126 modulo 256

Programs produced here never carry a variables area, so the variables
offset always equals the data length.

Checksum
--------
The checksum is recomputed from the other 127 bytes every time a header
is serialized. Reading a program does not validate it; the
verify_header_checksum() helper exists for inspection tools.

Reference
---------
- +3 manual, chapter 8 part 27: https://worldofspectrum.org/ZXSpectrum128+3Manual/chapter8pt27.html
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional
import logging
import struct

from zxnext_basic.errors import HeaderError

logger = logging.getLogger(__name__)


# =============================================================================
# Header Constants
# =============================================================================

HEADER_SIZE = 128
SIGNATURE = b"PLUS3DOS"
LEGACY_SIGNATURE_PREFIX = b"ZXPLUS3"
SOFT_EOF = 0x1A
ISSUE = 0x01
VERSION = 0x00

# Autostart value meaning "do not run on LOAD"
NO_AUTOSTART = 32768

MAX_DATA_LENGTH = 0xFFFF

# Offsets of the fields the decoder reads directly
AUTOSTART_OFFSET = 18
CHECKSUM_OFFSET = 127

# <8s B B B I B H H H> = 22 bytes of fields, then 105 reserved bytes
_FIELDS = struct.Struct("<8sBBBIBHHH")


class FileType(IntEnum):
    """+3BASIC file type byte (header offset 15)."""
    PROGRAM = 0
    NUMBER_ARRAY = 1
    CHARACTER_ARRAY = 2
    CODE = 3

    def get_description(self) -> str:
        return {
            FileType.PROGRAM: "Program",
            FileType.NUMBER_ARRAY: "Numeric array",
            FileType.CHARACTER_ARRAY: "Character array",
            FileType.CODE: "Code",
        }[self]


# =============================================================================
# Checksum Helpers
# =============================================================================

def calculate_header_checksum(header: bytes) -> int:
    """
    Calculate the +3DOS header checksum.

    Args:
        header: At least the first 127 bytes of a header

    Returns:
        Sum of bytes 0-126 modulo 256

    Raises:
        ValueError: If fewer than 127 bytes are given
    """
    if len(header) < CHECKSUM_OFFSET:
        raise ValueError(
            f"Header too short: need at least {CHECKSUM_OFFSET} bytes, got {len(header)}"
        )
    return sum(header[:CHECKSUM_OFFSET]) % 256


def verify_header_checksum(header: bytes) -> bool:
    """
    Check a header's stored checksum against its contents.

    Returns:
        True if byte 127 equals the checksum of bytes 0-126, False
        otherwise (including when the data is shorter than a header)
    """
    if len(header) < HEADER_SIZE:
        return False
    return header[CHECKSUM_OFFSET] == calculate_header_checksum(header)


def is_plus3dos_header(data: bytes) -> bool:
    """
    True if data starts with a complete +3DOS header.

    Accepts the "PLUS3DOS" signature and the older "ZXPLUS3" prefix.
    """
    if len(data) < HEADER_SIZE:
        return False
    return data[:8] == SIGNATURE or data[:7] == LEGACY_SIGNATURE_PREFIX


def normalize_autostart(autostart: Optional[int]) -> int:
    """Map None or any value outside 0..32767 to the NO_AUTOSTART sentinel."""
    if autostart is None or not 0 <= autostart < NO_AUTOSTART:
        if autostart is not None:
            logger.debug(f"Autostart line {autostart} out of range, writing none")
        return NO_AUTOSTART
    return autostart


# =============================================================================
# Header Record
# =============================================================================

@dataclass
class Plus3DosHeader:
    """
    A 128-byte +3DOS header.

    Attributes:
        data_length: Length of the data following the header
        autostart: Autostart line, NO_AUTOSTART for none
        file_type: File type byte
        vars_offset: Offset of the variables area within the data
        file_size: Total file size; computed from data_length if None
        signature: 8-byte signature
        issue: Issue number
        version: Version number
        checksum: Stored checksum (only meaningful after from_bytes)
    """
    data_length: int = 0
    autostart: int = NO_AUTOSTART
    file_type: int = FileType.PROGRAM
    vars_offset: Optional[int] = None
    file_size: Optional[int] = None
    signature: bytes = SIGNATURE
    issue: int = ISSUE
    version: int = VERSION
    checksum: int = 0

    def __post_init__(self) -> None:
        if self.vars_offset is None:
            self.vars_offset = self.data_length
        if self.file_size is None:
            self.file_size = self.data_length + HEADER_SIZE

    @property
    def has_autostart(self) -> bool:
        return self.autostart != NO_AUTOSTART

    def get_file_type(self) -> Optional[FileType]:
        try:
            return FileType(self.file_type)
        except ValueError:
            return None

    def to_bytes(self) -> bytes:
        """
        Serialize to 128 bytes with a freshly computed checksum.

        Raises:
            HeaderError: If a field does not fit its width
        """
        if not 0 <= self.data_length <= MAX_DATA_LENGTH:
            raise HeaderError(
                f"program data is {self.data_length} bytes; "
                f"a +3DOS header holds at most {MAX_DATA_LENGTH}"
            )

        try:
            fields = _FIELDS.pack(
                self.signature[:8].ljust(8, b"\x00"),
                SOFT_EOF,
                self.issue,
                self.version,
                self.file_size,
                self.file_type,
                self.data_length,
                self.autostart,
                self.vars_offset,
            )
        except struct.error as e:
            raise HeaderError(f"invalid header field: {e}") from e

        header = bytearray(HEADER_SIZE)
        header[:len(fields)] = fields
        header[CHECKSUM_OFFSET] = calculate_header_checksum(header)
        self.checksum = header[CHECKSUM_OFFSET]
        return bytes(header)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Plus3DosHeader":
        """
        Read a header from the first 128 bytes of data.

        The checksum is stored as read, not validated.

        Raises:
            HeaderError: If fewer than 128 bytes are given
        """
        if len(data) < HEADER_SIZE:
            raise HeaderError(
                f"Header too short: need {HEADER_SIZE} bytes, got {len(data)}"
            )

        (
            signature, _soft_eof, issue, version, file_size,
            file_type, data_length, autostart, vars_offset,
        ) = _FIELDS.unpack_from(data)

        return cls(
            data_length=data_length,
            autostart=autostart,
            file_type=file_type,
            vars_offset=vars_offset,
            file_size=file_size,
            signature=signature,
            issue=issue,
            version=version,
            checksum=data[CHECKSUM_OFFSET],
        )


def build_header(data_length: int, autostart: Optional[int] = None) -> bytes:
    """
    Build the 128-byte header for a BASIC program.

    Args:
        data_length: Length of the tokenized program in bytes
        autostart: Line to run on LOAD; None (or any value outside
            0..32767) writes the 32768 "no autostart" sentinel

    Returns:
        128 header bytes ending in a valid checksum

    Raises:
        HeaderError: If data_length does not fit 16 bits

    Example:
        >>> header = build_header(20, autostart=10)
        >>> header[:8]
        b'PLUS3DOS'
        >>> header[18:20].hex()
        '0a00'
    """
    header = Plus3DosHeader(
        data_length=data_length,
        autostart=normalize_autostart(autostart),
    )
    return header.to_bytes()


def read_autostart(data: bytes) -> Optional[int]:
    """
    Read the autostart line from a header.

    Returns:
        The line number, or None when the field holds NO_AUTOSTART
    """
    autostart = data[AUTOSTART_OFFSET] | (data[AUTOSTART_OFFSET + 1] << 8)
    return None if autostart == NO_AUTOSTART else autostart
