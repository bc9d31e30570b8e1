"""
BASIC Text Encoder
==================

This module provides the BasicEncoder class for turning plain-text BASIC
listings into tokenized ZX Spectrum Next programs.

Source Format
-------------
- Blank lines are ignored.
- `#autostart <N>` sets the line run on LOAD; any other line starting
  with `#` is a comment. Neither produces a program line.
- `<digits><whitespace><rest>` gives a line an explicit number; the next
  unnumbered line gets that number plus 10.
- Unnumbered lines are numbered 10, 20, 30, ... automatically.

Tokenization
------------
Each line is scanned left to right. At every position, in order:

1. `"` copies a string literal through the closing quote (or end of line)
2. a digit, or `.` followed by a digit, copies a numeric literal and
   appends the $0E marker plus the 5-byte hidden value
3. `;` at line start or after `:` copies a comment to end of line
4. the longest matching keyword is replaced by its token byte; REM
   copies the rest of the line, other keywords swallow following spaces
5. anything else is copied as a single byte

Usage
-----
    >>> from zxnext_basic.plus3 import BasicEncoder
    >>> encoder = BasicEncoder()
    >>> program = encoder.encode_lines(["#autostart 10", 'PRINT "HELLO"'])
    >>> data = program.to_bytes()
"""

from pathlib import Path
from typing import Iterable, Optional, Union
import logging
import re

from zxnext_basic.config import ConverterConfig, get_default_config
from zxnext_basic.errors import (
    DirectiveError,
    InputUnavailableError,
    LineNumberError,
    LineTooLongError,
    SourceLocation,
    UnsupportedNumberError,
)
from zxnext_basic.plus3.numbers import NUMBER_MARKER, pack_number
from zxnext_basic.plus3.records import (
    LINE_TERMINATOR,
    MAX_LINE_NUMBER,
    MAX_PAYLOAD_LENGTH,
    LineRecord,
    Program,
)
from zxnext_basic.plus3.tokens import DEFAULT_TOKEN_TABLE, TOKEN_REM, TokenTable

logger = logging.getLogger(__name__)


# =============================================================================
# Source Syntax
# =============================================================================

AUTOSTART_DIRECTIVE = "#autostart"

# Explicit line number: digits, whitespace, then the statement text
LINE_NUMBER_PATTERN = re.compile(r"^([0-9]+)\s+(.*)$", re.DOTALL)

# Directive operand: optionally signed decimal integer
DIRECTIVE_OPERAND_PATTERN = re.compile(r"^[+-]?[0-9]+$")

DIGITS = frozenset("0123456789")

COPYRIGHT_SIGN = "©"
COPYRIGHT_BYTE = 0x7F


def text_to_bytes(text: str) -> bytes:
    """
    Convert literal source text to Spectrum character bytes.

    ASCII is copied unchanged and the copyright sign becomes $7F. Other
    characters have no Spectrum equivalent and are replaced with '?'.
    """
    out = bytearray()
    substituted = 0
    for ch in text:
        code = ord(ch)
        if code < 0x80:
            out.append(code)
        elif ch == COPYRIGHT_SIGN:
            out.append(COPYRIGHT_BYTE)
        else:
            out.append(ord("?"))
            substituted += 1
    if substituted:
        logger.warning(f"Replaced {substituted} non-ASCII character(s) with '?' in {text!r}")
    return bytes(out)


def _starts_semicolon_comment(text: str, pos: int) -> bool:
    """True if the ';' at pos is at line start or follows ':' (spaces ignored)."""
    back = pos - 1
    while back >= 0 and text[back] == " ":
        back -= 1
    return back < 0 or text[back] == ":"


# =============================================================================
# Encoder
# =============================================================================

class BasicEncoder:
    """
    Encoder from BASIC source text to a tokenized Program.

    An encoder carries per-conversion state (autostart line, running
    line number), so use one instance per conversion. The token table is
    shared and read-only.

    Attributes:
        table: Token table used for keyword matching
        config: Conversion settings
        filename: Name used in error locations
        autostart: Autostart line from the last #autostart directive
    """

    def __init__(
        self,
        table: Optional[TokenTable] = None,
        config: Optional[ConverterConfig] = None,
        filename: str = "<input>",
    ):
        self.table = table or DEFAULT_TOKEN_TABLE
        self.config = config or get_default_config()
        self.filename = filename
        self.autostart: Optional[int] = None
        self._next_line = self.config.first_line
        self._source_line_no = 0
        self._source_text = ""
        self._column_offset = 0

    # =========================================================================
    # Program Level
    # =========================================================================

    def encode_lines(self, lines: Iterable[str]) -> Program:
        """
        Encode a complete source listing.

        Args:
            lines: Source text lines, in file order

        Returns:
            A Program whose line records are in source order

        Raises:
            LineNumberError: If a line number does not fit 16 bits
            LineTooLongError: If a tokenized line does not fit 16 bits
            DirectiveError: Malformed #autostart in strict mode
            UnsupportedNumberError: Unsupported literal in strict mode
        """
        self.autostart = None
        self._next_line = self.config.first_line
        records: list[LineRecord] = []

        for index, line in enumerate(lines, start=1):
            self._source_line_no = index
            record = self.encode_source_line(line)
            if record is not None:
                records.append(record)

        logger.debug(
            f"Encoded {len(records)} lines from {self.filename}"
            f" (autostart: {self.autostart if self.autostart is not None else 'none'})"
        )
        return Program(lines=records, autostart=self.autostart)

    def encode_source_line(self, line: str) -> Optional[LineRecord]:
        """
        Encode one source line.

        Returns:
            The LineRecord, or None for blank lines, comments and
            directives
        """
        text = line.strip()
        self._source_text = text
        if not text:
            return None

        if text.startswith("#"):
            self._handle_directive(text)
            return None

        match = LINE_NUMBER_PATTERN.match(text)
        if match:
            line_number = int(match.group(1))
            statement = match.group(2)
            self._next_line = line_number + self.config.line_step
        else:
            line_number = self._next_line
            statement = text
            self._next_line += self.config.line_step

        self._column_offset = len(text) - len(statement)

        if not 0 <= line_number <= MAX_LINE_NUMBER:
            raise LineNumberError(
                line_number,
                location=SourceLocation(self.filename, self._source_line_no, 1),
                source_line=text,
            )

        payload = self.tokenize(statement)
        if len(payload) > MAX_PAYLOAD_LENGTH:
            raise LineTooLongError(
                line_number,
                len(payload),
                location=SourceLocation(self.filename, self._source_line_no, 1),
            )

        return LineRecord(line_number, payload)

    def _handle_directive(self, text: str) -> None:
        """Apply #autostart, ignore every other '#' line."""
        if not text.lower().startswith(AUTOSTART_DIRECTIVE):
            logger.debug(f"Skipping comment line {self._source_line_no}")
            return

        parts = text.split()
        if len(parts) > 1 and DIRECTIVE_OPERAND_PATTERN.match(parts[1]):
            self.autostart = int(parts[1])
            logger.debug(f"Autostart line set to {self.autostart}")
            return

        if self.config.strict_directives:
            raise DirectiveError(
                text,
                location=SourceLocation(self.filename, self._source_line_no, 1),
                source_line=text,
            )
        logger.warning(
            f"{self.filename}:{self._source_line_no}: ignoring malformed directive {text!r}"
        )

    # =========================================================================
    # Line Level
    # =========================================================================

    def tokenize(self, text: str) -> bytes:
        """
        Tokenize statement text into a line payload.

        Args:
            text: Line text without its line number

        Returns:
            Payload bytes ending in the $0D terminator
        """
        out = bytearray()
        length = len(text)
        pos = 0

        while pos < length:
            ch = text[pos]

            # String literal, closing quote optional
            if ch == '"':
                end = text.find('"', pos + 1)
                end = length if end < 0 else end + 1
                out += text_to_bytes(text[pos:end])
                pos = end
                continue

            # Numeric literal
            if ch in DIGITS or (ch == "." and pos + 1 < length and text[pos + 1] in DIGITS):
                end = pos
                while end < length and (text[end] in DIGITS or text[end] == "."):
                    end += 1
                literal = text[pos:end]
                packed = self._pack_literal(literal, pos)
                if packed is not None:
                    out += literal.encode("ascii")
                    out.append(NUMBER_MARKER)
                    out += packed
                    pos = end
                    continue

            # ';' comment
            if ch == ";" and _starts_semicolon_comment(text, pos):
                out += text_to_bytes(text[pos:])
                break

            # Keyword
            match = self.table.match(text, pos)
            if match is not None:
                keyword, code = match
                out.append(code)
                pos += len(keyword)
                if code == TOKEN_REM:
                    out += text_to_bytes(text[pos:])
                    break
                while pos < length and text[pos] == " ":
                    pos += 1
                continue

            out += text_to_bytes(ch)
            pos += 1

        out.append(LINE_TERMINATOR)
        return bytes(out)

    def _pack_literal(self, literal: str, pos: int) -> Optional[bytes]:
        """Pack a digit run, or return None if it is not a valid number."""
        try:
            value = float(literal)
        except ValueError:
            logger.debug(f"Digit run {literal!r} is not a number, copying as text")
            return None

        if value.is_integer():
            value = int(value)

        try:
            return pack_number(value, strict=self.config.strict_numbers)
        except UnsupportedNumberError:
            raise UnsupportedNumberError(
                literal,
                location=self._location(pos),
                source_line=self._source_text,
            ) from None

    def _location(self, pos: int) -> SourceLocation:
        return SourceLocation(
            self.filename,
            self._source_line_no,
            self._column_offset + pos + 1,
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def encode_lines(
    lines: Iterable[str],
    config: Optional[ConverterConfig] = None,
    filename: str = "<input>",
) -> Program:
    """Encode source lines into a Program."""
    return BasicEncoder(config=config, filename=filename).encode_lines(lines)


def encode_program(
    lines: Iterable[str],
    config: Optional[ConverterConfig] = None,
) -> bytes:
    """
    Encode source lines into file bytes.

    Returns:
        build_header(len(payload), autostart) + payload, or the payload
        alone when the configuration disables the header
    """
    config = config or get_default_config()
    program = encode_lines(lines, config=config)
    return program.to_bytes(include_header=config.include_header)


def encode_text(text: str, config: Optional[ConverterConfig] = None) -> bytes:
    """Encode a complete source listing held in a string."""
    return encode_program(text.splitlines(), config=config)


def read_source_file(
    filepath: Union[str, Path],
    config: Optional[ConverterConfig] = None,
) -> list[str]:
    """
    Read a source listing from disk.

    Raises:
        InputUnavailableError: If the file cannot be read or decoded
    """
    config = config or get_default_config()
    filepath = Path(filepath)
    try:
        return filepath.read_text(encoding=config.encoding).splitlines()
    except FileNotFoundError as e:
        raise InputUnavailableError(str(filepath), "file not found") from e
    except UnicodeDecodeError as e:
        raise InputUnavailableError(
            str(filepath), f"not valid {config.encoding} text"
        ) from e
    except OSError as e:
        raise InputUnavailableError(str(filepath), e.strerror or str(e)) from e


def encode_file(
    filepath: Union[str, Path],
    config: Optional[ConverterConfig] = None,
) -> Program:
    """
    Read and encode a source file.

    Raises:
        InputUnavailableError: If the file cannot be read
    """
    lines = read_source_file(filepath, config=config)
    return encode_lines(lines, config=config, filename=str(filepath))
