"""
+3DOS Tokenized BASIC Programs
==============================

This module converts between plain-text BASIC listings and the tokenized
program files used by the ZX Spectrum +3 and ZX Spectrum Next.

A program file is a 128-byte +3DOS header followed by line records. Each
line record holds a line number, a length and the line's bytes, in which
keywords are single token bytes and every numeric literal is followed by
a hidden 5-byte copy of its value.

This module provides:
- **BasicEncoder**: Tokenize source text into a Program
- **BasicDecoder**: List a program file as source text
- **TokenTable**: Keyword <-> token byte mapping
- **Plus3DosHeader**: Build and read the file header
- **LineRecord / Program**: The tokenized program structure
- **pack_number**: The 5-byte hidden number form

Quick Start
-----------
Encoding a listing:

    >>> from zxnext_basic.plus3 import encode_program
    >>> data = encode_program(["#autostart 10", '10 PRINT "HELLO"'])

Listing a program file:

    >>> from zxnext_basic.plus3 import decode_program
    >>> for line in decode_program(data):
    ...     print(line)
    #autostart 10
    10 PRINT "HELLO"
"""

# =============================================================================
# Public API Exports
# =============================================================================

from zxnext_basic.plus3.tokens import (
    TokenCategory,
    TokenEntry,
    TokenTable,
    TOKENS,
    DEFAULT_TOKEN_TABLE,
    FIRST_TOKEN,
    LAST_TOKEN,
    TOKEN_REM,
    ascii_upper,
    get_keyword,
    get_token,
)

from zxnext_basic.plus3.numbers import (
    NUMBER_MARKER,
    PACKED_NUMBER_SIZE,
    is_small_integer,
    pack_number,
    unpack_number,
)

from zxnext_basic.plus3.header import (
    FileType,
    Plus3DosHeader,
    HEADER_SIZE,
    NO_AUTOSTART,
    SIGNATURE,
    build_header,
    calculate_header_checksum,
    verify_header_checksum,
    is_plus3dos_header,
    read_autostart,
)

from zxnext_basic.plus3.records import (
    LINE_TERMINATOR,
    LineRecord,
    Program,
)

from zxnext_basic.plus3.encoder import (
    BasicEncoder,
    encode_lines,
    encode_program,
    encode_text,
    encode_file,
    read_source_file,
)

from zxnext_basic.plus3.decoder import (
    BasicDecoder,
    decode_program,
    decode_text,
    decode_file,
    read_program_file,
    write_listing,
)

__all__ = [
    # Tokens
    "TokenCategory",
    "TokenEntry",
    "TokenTable",
    "TOKENS",
    "DEFAULT_TOKEN_TABLE",
    "FIRST_TOKEN",
    "LAST_TOKEN",
    "TOKEN_REM",
    "ascii_upper",
    "get_keyword",
    "get_token",
    # Numbers
    "NUMBER_MARKER",
    "PACKED_NUMBER_SIZE",
    "is_small_integer",
    "pack_number",
    "unpack_number",
    # Header
    "FileType",
    "Plus3DosHeader",
    "HEADER_SIZE",
    "NO_AUTOSTART",
    "SIGNATURE",
    "build_header",
    "calculate_header_checksum",
    "verify_header_checksum",
    "is_plus3dos_header",
    "read_autostart",
    # Records
    "LINE_TERMINATOR",
    "LineRecord",
    "Program",
    # Encoder
    "BasicEncoder",
    "encode_lines",
    "encode_program",
    "encode_text",
    "encode_file",
    "read_source_file",
    # Decoder
    "BasicDecoder",
    "decode_program",
    "decode_text",
    "decode_file",
    "read_program_file",
    "write_listing",
]
