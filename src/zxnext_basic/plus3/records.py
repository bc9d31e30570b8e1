"""
Tokenized Program Records
=========================

Data structures for a tokenized BASIC program: the line records that
make up the program body and the Program container that carries them
between the encoder, the decoder and file I/O.

Line Record Format
------------------
    Byte 0:   Line number high byte   (big-endian)
    Byte 1:   Line number low byte
    Byte 2:   Length low byte         (little-endian)
    Byte 3:   Length high byte
    Byte 4+:  Payload (tokens, literals, hidden numbers), ending in $0D

The length counts the payload including its $0D terminator. The mixed
byte order is how the ROM stores lines; it is not a typo.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional
import struct

from zxnext_basic.plus3.header import Plus3DosHeader, build_header
from zxnext_basic.plus3.numbers import NUMBER_MARKER, PACKED_NUMBER_SIZE, unpack_number


LINE_TERMINATOR = 0x0D
RECORD_HEADER_SIZE = 4
MAX_LINE_NUMBER = 0xFFFF
MAX_PAYLOAD_LENGTH = 0xFFFF

# Bytes a numeric literal is listed with
_LITERAL_BYTES = frozenset(b"0123456789.")


@dataclass(frozen=True)
class LineRecord:
    """
    One program line as stored on disk.

    Attributes:
        line_number: Line number (0-65535)
        payload: Line bytes including the trailing $0D terminator
    """
    line_number: int
    payload: bytes

    def __post_init__(self) -> None:
        if not 0 <= self.line_number <= MAX_LINE_NUMBER:
            raise ValueError(f"Line number out of range: {self.line_number}")
        if len(self.payload) > MAX_PAYLOAD_LENGTH:
            raise ValueError(f"Line too long: {len(self.payload)} bytes")

    @property
    def encoded_length(self) -> int:
        """Value of the length field: payload size including terminator."""
        return len(self.payload)

    @property
    def body(self) -> bytes:
        """Payload without its terminator."""
        if self.payload and self.payload[-1] == LINE_TERMINATOR:
            return self.payload[:-1]
        return self.payload

    def to_bytes(self) -> bytes:
        """Serialize to [line hi][line lo][len lo][len hi][payload...]."""
        return (
            struct.pack(">H", self.line_number)
            + struct.pack("<H", self.encoded_length)
            + self.payload
        )

    def get_size(self) -> int:
        """Total size of this record on disk."""
        return RECORD_HEADER_SIZE + self.encoded_length

    def hidden_numbers(self) -> list[tuple[str, Optional[int]]]:
        """
        Literals in this line paired with their hidden values.

        Each entry is (digits listed before the marker, stored value).
        Small integers are returned as int and floating-point forms as
        None; a zero-filled literal reads back as 0. A marker cut short
        by the end of the line stops the scan.

        Example:
            >>> LineRecord(10, b"\\xf53.14\\x0e\\x00\\x00\\x00\\x00\\x00\\x0d").hidden_numbers()
            [('3.14', 0)]
        """
        numbers: list[tuple[str, Optional[int]]] = []
        body = self.body
        pos = 0
        while True:
            marker = body.find(NUMBER_MARKER, pos)
            if marker < 0:
                break
            packed = body[marker + 1:marker + 1 + PACKED_NUMBER_SIZE]
            if len(packed) < PACKED_NUMBER_SIZE:
                break

            # Digits never reach back into the previous hidden value
            start = marker
            while start > pos and body[start - 1] in _LITERAL_BYTES:
                start -= 1
            literal = body[start:marker].decode("ascii")

            numbers.append((literal, unpack_number(packed)))
            pos = marker + 1 + PACKED_NUMBER_SIZE
        return numbers

    def has_truncated_number(self) -> bool:
        """True if a number marker is not followed by a full 5-byte value."""
        body = self.body
        pos = 0
        while True:
            pos = body.find(NUMBER_MARKER, pos)
            if pos < 0:
                return False
            if pos + 1 + PACKED_NUMBER_SIZE > len(body):
                return True
            pos += 1 + PACKED_NUMBER_SIZE


@dataclass
class Program:
    """
    An ordered sequence of line records, optionally described by a header.

    Programs are built wholesale by the encoder or parsed wholesale by
    the decoder; lines keep the order they were encountered in, which is
    not necessarily ascending line-number order.

    Attributes:
        lines: Line records in file order
        autostart: Line to run on LOAD, None for none
        header: Header read from a binary file (decoder only)
        truncated: True if the decoder discarded an incomplete trailing record
    """
    lines: list[LineRecord] = field(default_factory=list)
    autostart: Optional[int] = None
    header: Optional[Plus3DosHeader] = None
    truncated: bool = False

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[LineRecord]:
        return iter(self.lines)

    def payload(self) -> bytes:
        """Concatenated line records, without any header."""
        return b"".join(record.to_bytes() for record in self.lines)

    def get_data_length(self) -> int:
        return sum(record.get_size() for record in self.lines)

    def line_numbers(self) -> list[int]:
        return [record.line_number for record in self.lines]

    def to_bytes(self, include_header: bool = True) -> bytes:
        """
        Serialize the program.

        Args:
            include_header: Prepend the 128-byte +3DOS header

        Returns:
            header + line records, or the line records alone

        Raises:
            HeaderError: If the program is too large for the header
        """
        payload = self.payload()
        if not include_header:
            return payload
        return build_header(len(payload), self.autostart) + payload
