"""
ZX Next BASIC - Text/Tokenized BASIC Converter for the ZX Spectrum Next
=======================================================================

This package converts BASIC programs between plain-text listings that can
be edited on a PC and the tokenized +3DOS program files loaded by the ZX
Spectrum +3 and ZX Spectrum Next.

Main Components
---------------
- **plus3**: The tokenized program format
    Token table, hidden number packing, +3DOS header, encoder and decoder

- **config**: Conversion settings (line numbering, strictness, header)

- **cli**: Command-line tools
    txt2bas (encode), bas2txt (decode), zxbas (inspect)

Quick Start
-----------
Encode a listing:
    >>> from zxnext_basic import encode_file
    >>> program = encode_file("game.txt")
    >>> Path("game.bas").write_bytes(program.to_bytes())

List a program file:
    >>> from zxnext_basic import decode_file
    >>> for line in decode_file("game.bas"):
    ...     print(line)

Or use the command-line tools:
    $ txt2bas game.txt game.bas
    $ bas2txt game.bas game.txt
    $ zxbas info game.bas

Reference Documentation
-----------------------
- +3DOS file header: https://worldofspectrum.org/ZXSpectrum128+3Manual/chapter8pt27.html
- Next BASIC keywords: https://wiki.specnext.dev/Keywords

Version History
---------------
1.0.0 - Initial release with encoder, decoder and inspection tools
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from zxnext_basic.errors import (
    BasicError,
    SourceLocation,
    InputUnavailableError,
    EncodeError,
    DirectiveError,
    UnsupportedNumberError,
    LineNumberError,
    LineTooLongError,
    HeaderError,
)

from zxnext_basic.config import (
    ConverterConfig,
    get_default_config,
    set_default_config,
)

from zxnext_basic.plus3 import (
    TokenTable,
    TokenEntry,
    TOKENS,
    DEFAULT_TOKEN_TABLE,
    Plus3DosHeader,
    FileType,
    NO_AUTOSTART,
    build_header,
    verify_header_checksum,
    pack_number,
    LineRecord,
    Program,
    BasicEncoder,
    BasicDecoder,
    encode_lines,
    encode_program,
    encode_text,
    encode_file,
    decode_program,
    decode_text,
    decode_file,
)

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "BasicError",
    "SourceLocation",
    "InputUnavailableError",
    "EncodeError",
    "DirectiveError",
    "UnsupportedNumberError",
    "LineNumberError",
    "LineTooLongError",
    "HeaderError",
    # Configuration
    "ConverterConfig",
    "get_default_config",
    "set_default_config",
    # Program format
    "TokenTable",
    "TokenEntry",
    "TOKENS",
    "DEFAULT_TOKEN_TABLE",
    "Plus3DosHeader",
    "FileType",
    "NO_AUTOSTART",
    "build_header",
    "verify_header_checksum",
    "pack_number",
    "LineRecord",
    "Program",
    # Conversion
    "BasicEncoder",
    "BasicDecoder",
    "encode_lines",
    "encode_program",
    "encode_text",
    "encode_file",
    "decode_program",
    "decode_text",
    "decode_file",
]
