"""
Tokenized BASIC Decoder
=======================

This module provides the BasicDecoder class for turning tokenized ZX
Spectrum Next programs back into plain-text listings.

Input Format
------------
The decoder accepts either a complete +3DOS file (128-byte header
followed by line records) or bare line records. A header is recognised
by its "PLUS3DOS" signature (or the older "ZXPLUS3" prefix); anything
else is treated as a headerless program.

Output Format
-------------
One text line per program line, "<number> <text>", preceded by an
"#autostart <N>" line when the header names an autostart line. This is
the same format the encoder reads, so a listing can be edited and
re-encoded.

Leniency
--------
Decoding never fails on malformed content:
- the header checksum is not validated
- a record whose declared length runs past the end of the data ends the
  program; everything before it is returned
- bytes with no printable meaning are dropped

Usage
-----
    >>> from zxnext_basic.plus3 import BasicDecoder
    >>> decoder = BasicDecoder()
    >>> for line in decoder.decode(Path("game.bas").read_bytes()):
    ...     print(line)
"""

from pathlib import Path
from typing import Optional, Union
import logging

from zxnext_basic.config import ConverterConfig, get_default_config
from zxnext_basic.errors import InputUnavailableError
from zxnext_basic.plus3.header import (
    HEADER_SIZE,
    Plus3DosHeader,
    is_plus3dos_header,
    read_autostart,
    verify_header_checksum,
)
from zxnext_basic.plus3.numbers import NUMBER_MARKER, PACKED_NUMBER_SIZE
from zxnext_basic.plus3.records import RECORD_HEADER_SIZE, LineRecord, Program
from zxnext_basic.plus3.tokens import DEFAULT_TOKEN_TABLE, TokenTable

logger = logging.getLogger(__name__)


COPYRIGHT_BYTE = 0x7F
COPYRIGHT_SIGN = "©"

# Characters after a keyword that get a separating space when listed
_SPACE_BEFORE = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789\"."
)


class BasicDecoder:
    """
    Decoder from tokenized program bytes to text lines.

    The decoder holds no per-conversion state, so one instance can be
    reused and shared between threads.

    Attributes:
        table: Token table used for keyword lookup
    """

    def __init__(self, table: Optional[TokenTable] = None):
        self.table = table or DEFAULT_TOKEN_TABLE

    # =========================================================================
    # Program Level
    # =========================================================================

    def parse(self, data: bytes) -> Program:
        """
        Split file bytes into a header and line records.

        Args:
            data: Complete file contents

        Returns:
            A Program with its header (if present), autostart line and
            every complete line record
        """
        program = Program()
        offset = 0

        if is_plus3dos_header(data):
            program.header = Plus3DosHeader.from_bytes(data)
            program.autostart = read_autostart(data)
            offset = HEADER_SIZE
            logger.debug(
                f"+3DOS header found: {program.header.data_length} bytes of data, "
                f"autostart {program.autostart if program.autostart is not None else 'none'}"
            )
            if not verify_header_checksum(data):
                logger.debug("Header checksum does not match (not validated)")
        else:
            logger.debug("No +3DOS header, decoding as bare line records")

        while len(data) - offset >= RECORD_HEADER_SIZE:
            line_number = (data[offset] << 8) | data[offset + 1]
            length = data[offset + 2] | (data[offset + 3] << 8)
            offset += RECORD_HEADER_SIZE

            if length > len(data) - offset:
                logger.warning(
                    f"Line {line_number} declares {length} bytes but only "
                    f"{len(data) - offset} remain; stopping"
                )
                program.truncated = True
                break

            program.lines.append(LineRecord(line_number, bytes(data[offset:offset + length])))
            offset += length

        if 0 < len(data) - offset < RECORD_HEADER_SIZE:
            logger.debug(f"Ignoring {len(data) - offset} trailing byte(s)")

        return program

    def decode(self, data: bytes) -> list[str]:
        """
        Decode file bytes into listing lines.

        Returns:
            Text lines: an optional "#autostart N" line, then one
            "<number> <text>" line per program line
        """
        return self.decode_program(self.parse(data))

    def decode_program(self, program: Program) -> list[str]:
        """List a parsed Program as text lines."""
        lines = []
        if program.autostart is not None:
            lines.append(f"#autostart {program.autostart}")
        for record in program.lines:
            # The terminator is counted in the length but never listed
            text = self.decode_line(record.payload[:max(record.encoded_length - 1, 0)])
            lines.append(f"{record.line_number} {text}")
        return lines

    # =========================================================================
    # Line Level
    # =========================================================================

    def decode_line(self, payload: bytes) -> str:
        """
        Convert line payload bytes to text.

        Args:
            payload: Line bytes without the $0D terminator

        Returns:
            The listed line text
        """
        parts: list[str] = []
        end = len(payload)
        pos = 0

        while pos < end:
            byte = payload[pos]

            # Hidden number: its digits were already listed
            if byte == NUMBER_MARKER:
                pos += 1 + PACKED_NUMBER_SIZE
                continue

            keyword = self.table.decode(byte)
            if keyword is not None:
                parts.append(keyword)
                if pos + 1 < end:
                    following = payload[pos + 1]
                    if (
                        following < 0x80
                        and following != NUMBER_MARKER
                        and chr(following) in _SPACE_BEFORE
                    ):
                        parts.append(" ")
            elif 32 <= byte <= 126:
                parts.append(chr(byte))
            elif byte == COPYRIGHT_BYTE:
                parts.append(COPYRIGHT_SIGN)

            pos += 1

        return "".join(parts)


# =============================================================================
# Convenience Functions
# =============================================================================

def decode_program(data: bytes) -> list[str]:
    """Decode file bytes into listing lines with the shared token table."""
    return BasicDecoder().decode(data)


def decode_text(data: bytes) -> str:
    """Decode file bytes into a listing, one line per row, newline-terminated."""
    return "".join(f"{line}\n" for line in decode_program(data))


def read_program_file(filepath: Union[str, Path]) -> bytes:
    """
    Read a tokenized program from disk.

    Raises:
        InputUnavailableError: If the file cannot be read
    """
    filepath = Path(filepath)
    try:
        return filepath.read_bytes()
    except FileNotFoundError as e:
        raise InputUnavailableError(str(filepath), "file not found") from e
    except OSError as e:
        raise InputUnavailableError(str(filepath), e.strerror or str(e)) from e


def decode_file(filepath: Union[str, Path]) -> list[str]:
    """
    Read and decode a tokenized program file.

    Raises:
        InputUnavailableError: If the file cannot be read
    """
    return decode_program(read_program_file(filepath))


def write_listing(
    lines: list[str],
    filepath: Union[str, Path],
    config: Optional[ConverterConfig] = None,
) -> None:
    """Write listing lines to a text file, newline-terminated."""
    config = config or get_default_config()
    Path(filepath).write_text("".join(f"{line}\n" for line in lines), encoding=config.encoding)
