"""
ZX Spectrum Next BASIC Keyword Tokens
=====================================

This module defines the keyword tokens of Sinclair BASIC as extended by
the ZX Spectrum Next. In a tokenized program every keyword is stored as
a single byte in the range $87-$FF instead of its spelling.

Token Ranges
------------
- $87-$A2: Next extensions (procedures, banking, sprites, layers, files)
- $A3-$FF: Standard 48K/128K tokens (functions, operators, statements)

Spellings and Aliases
---------------------
Several spellings can share a code: "GOTO" is accepted for "GO TO" and
"GOSUB" for "GO SUB". Exactly one spelling per code is canonical and
that is the one produced when a program is listed.

Matching Rules
--------------
Keywords are matched longest-first ("GO TO" before "GO", "DEFPROC"
before "DEF FN"), compared with ASCII-only case folding. A keyword that
starts with a letter must not follow a letter and must not be followed
by a letter or digit, so "OPEN #4" and "CHR$65" stay as text while
"OPEN # 4" and "CHR$ 65" are tokenized. Symbolic keywords ("<<", "<=",
"<>", ...) are matched anywhere.

Reference
---------
- ZX Spectrum Next user manual, appendix "Tokens"
- https://wiki.specnext.dev/Keywords
"""

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Iterable, Iterator, Optional
import string


# =============================================================================
# Token Constants
# =============================================================================

FIRST_TOKEN = 0x87
LAST_TOKEN = 0xFF

# Token codes the encoder and decoder treat specially
TOKEN_REM = 0xEA

_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_LETTERS = frozenset(string.ascii_letters)
_ALNUM = frozenset(string.ascii_letters + string.digits)


def ascii_upper(text: str) -> str:
    """Upper-case ASCII letters only, leaving every other character alone."""
    return text.translate(_ASCII_UPPER)


# =============================================================================
# Token Entries
# =============================================================================

class TokenCategory(Enum):
    """Which keyword set a token belongs to."""
    NEXT_EXTENSION = auto()     # $87-$A2
    STANDARD = auto()           # $A3-$FF


@dataclass(frozen=True)
class TokenEntry:
    """
    One keyword spelling and the byte it tokenizes to.

    Attributes:
        keyword: Spelling as written in source (matched case-insensitively)
        code: Token byte ($87-$FF)
        canonical: True for the spelling produced when listing
    """
    keyword: str
    code: int
    canonical: bool = True

    @property
    def category(self) -> TokenCategory:
        if self.code <= 0xA2:
            return TokenCategory.NEXT_EXTENSION
        return TokenCategory.STANDARD

    @property
    def is_alphabetic(self) -> bool:
        """True if the keyword needs word boundaries when matched."""
        return self.keyword[0] in _LETTERS


def _canonical(pairs: Iterable[tuple[str, int]]) -> tuple[TokenEntry, ...]:
    return tuple(TokenEntry(keyword, code) for keyword, code in pairs)


# Next extensions
_NEXT_TOKENS = _canonical([
    ("PEEK$", 0x87), ("REG", 0x88), ("DPOKE", 0x89), ("DPEEK", 0x8A),
    ("MOD", 0x8B), ("<<", 0x8C), (">>", 0x8D), ("UNTIL", 0x8E),
    ("ERROR", 0x8F), ("ON", 0x90), ("DEFPROC", 0x91), ("ENDPROC", 0x92),
    ("PROC", 0x93), ("LOCAL", 0x94), ("DRIVER", 0x95), ("WHILE", 0x96),
    ("REPEAT", 0x97), ("ELSE", 0x98), ("REMOUNT", 0x99), ("BANK", 0x9A),
    ("TILE", 0x9B), ("LAYER", 0x9C), ("PALETTE", 0x9D), ("SPRITE", 0x9E),
    ("PWD", 0x9F), ("CD", 0xA0), ("MKDIR", 0xA1), ("RMDIR", 0xA2),
])

# Standard 48K/128K tokens
_STANDARD_TOKENS = _canonical([
    ("SPECTRUM", 0xA3), ("PLAY", 0xA4), ("RND", 0xA5), ("INKEY$", 0xA6),
    ("PI", 0xA7), ("FN", 0xA8), ("POINT", 0xA9), ("SCREEN$", 0xAA),
    ("ATTR", 0xAB), ("AT", 0xAC), ("TAB", 0xAD), ("VAL$", 0xAE),
    ("CODE", 0xAF), ("VAL", 0xB0), ("LEN", 0xB1), ("SIN", 0xB2),
    ("COS", 0xB3), ("TAN", 0xB4), ("ASN", 0xB5), ("ACS", 0xB6),
    ("ATN", 0xB7), ("LN", 0xB8), ("EXP", 0xB9), ("INT", 0xBA),
    ("SQR", 0xBB), ("SGN", 0xBC), ("ABS", 0xBD), ("PEEK", 0xBE),
    ("IN", 0xBF), ("USR", 0xC0), ("STR$", 0xC1), ("CHR$", 0xC2),
    ("NOT", 0xC3), ("BIN", 0xC4), ("OR", 0xC5), ("AND", 0xC6),
    ("<=", 0xC7), (">=", 0xC8), ("<>", 0xC9), ("LINE", 0xCA),
    ("THEN", 0xCB), ("TO", 0xCC), ("STEP", 0xCD), ("DEF FN", 0xCE),
    ("CAT", 0xCF), ("FORMAT", 0xD0), ("MOVE", 0xD1), ("ERASE", 0xD2),
    ("OPEN #", 0xD3), ("CLOSE #", 0xD4), ("MERGE", 0xD5), ("VERIFY", 0xD6),
    ("BEEP", 0xD7), ("CIRCLE", 0xD8), ("INK", 0xD9), ("PAPER", 0xDA),
    ("FLASH", 0xDB), ("BRIGHT", 0xDC), ("INVERSE", 0xDD), ("OVER", 0xDE),
    ("OUT", 0xDF), ("LPRINT", 0xE0), ("LLIST", 0xE1), ("STOP", 0xE2),
    ("READ", 0xE3), ("DATA", 0xE4), ("RESTORE", 0xE5), ("NEW", 0xE6),
    ("BORDER", 0xE7), ("CONTINUE", 0xE8), ("DIM", 0xE9), ("REM", 0xEA),
    ("FOR", 0xEB), ("GO TO", 0xEC), ("GO SUB", 0xED), ("INPUT", 0xEE),
    ("LOAD", 0xEF), ("LIST", 0xF0), ("LET", 0xF1), ("PAUSE", 0xF2),
    ("NEXT", 0xF3), ("POKE", 0xF4), ("PRINT", 0xF5), ("PLOT", 0xF6),
    ("RUN", 0xF7), ("SAVE", 0xF8), ("RANDOMIZE", 0xF9), ("IF", 0xFA),
    ("CLS", 0xFB), ("DRAW", 0xFC), ("CLEAR", 0xFD), ("RETURN", 0xFE),
    ("COPY", 0xFF),
])

# Alternative spellings accepted on input
_ALIASES = (
    TokenEntry("GOTO", 0xEC, canonical=False),
    TokenEntry("GOSUB", 0xED, canonical=False),
)

TOKENS: tuple[TokenEntry, ...] = _NEXT_TOKENS + _STANDARD_TOKENS + _ALIASES


# =============================================================================
# Token Table
# =============================================================================

class TokenTable:
    """
    Immutable bidirectional keyword <-> token byte mapping.

    The table is validated when built: a spelling may not map to two
    different codes, and every code must have exactly one canonical
    spelling. After construction it is never mutated, so one instance
    can be shared by any number of concurrent conversions.

    Example:
        >>> table = TokenTable(TOKENS)
        >>> hex(table.encode("goto"))
        '0xec'
        >>> table.decode(0xEC)
        'GO TO'
    """

    __slots__ = ("_entries", "_by_keyword", "_by_code", "_match_order")

    def __init__(self, entries: Iterable[TokenEntry]):
        entries = tuple(entries)
        by_keyword: dict[str, TokenEntry] = {}
        by_code: dict[int, str] = {}

        for entry in entries:
            if not FIRST_TOKEN <= entry.code <= LAST_TOKEN:
                raise ValueError(
                    f"token code 0x{entry.code:02X} for '{entry.keyword}' "
                    f"is outside 0x{FIRST_TOKEN:02X}-0x{LAST_TOKEN:02X}"
                )

            key = ascii_upper(entry.keyword)
            existing = by_keyword.get(key)
            if existing is not None and existing.code != entry.code:
                raise ValueError(
                    f"keyword '{entry.keyword}' maps to both "
                    f"0x{existing.code:02X} and 0x{entry.code:02X}"
                )
            by_keyword[key] = entry

            if entry.canonical:
                if entry.code in by_code:
                    raise ValueError(
                        f"code 0x{entry.code:02X} has two canonical spellings: "
                        f"'{by_code[entry.code]}' and '{entry.keyword}'"
                    )
                by_code[entry.code] = entry.keyword

        missing = {entry.code for entry in entries} - by_code.keys()
        if missing:
            codes = ", ".join(f"0x{code:02X}" for code in sorted(missing))
            raise ValueError(f"no canonical spelling for {codes}")

        self._entries = entries
        self._by_keyword = MappingProxyType(by_keyword)
        self._by_code = MappingProxyType(by_code)
        # Longest keyword first; sorted() is stable so ties keep table order
        self._match_order = tuple(
            sorted(by_keyword.items(), key=lambda item: len(item[0]), reverse=True)
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TokenEntry]:
        return iter(self._entries)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def encode(self, keyword: str) -> Optional[int]:
        """
        Look up the token byte for an exact keyword spelling.

        Args:
            keyword: Keyword text (case-insensitive, e.g. "print", "Go To")

        Returns:
            The token byte, or None if the spelling is not a keyword
        """
        entry = self._by_keyword.get(ascii_upper(keyword))
        return entry.code if entry else None

    def decode(self, code: int) -> Optional[str]:
        """
        Look up the canonical spelling of a token byte.

        Returns:
            The keyword, or None if the byte is not a token
        """
        return self._by_code.get(code)

    def is_token(self, code: int) -> bool:
        return code in self._by_code

    def aliases(self, code: int) -> list[str]:
        """Non-canonical spellings accepted for a token byte."""
        return [
            entry.keyword
            for entry in self._entries
            if entry.code == code and not entry.canonical
        ]

    def match(self, text: str, pos: int) -> Optional[tuple[str, int]]:
        """
        Find the longest keyword starting at text[pos].

        Args:
            text: Source line being tokenized
            pos: Index to match at

        Returns:
            (matched source text, token byte), or None if no keyword
            matches at this position
        """
        for key, entry in self._match_order:
            end = pos + len(key)
            if end > len(text):
                continue
            candidate = text[pos:end]
            if ascii_upper(candidate) != key:
                continue

            if entry.is_alphabetic:
                if pos > 0 and text[pos - 1] in _LETTERS:
                    continue
                if end < len(text) and text[end] in _ALNUM:
                    continue

            return candidate, entry.code
        return None


# Shared table used by the encoder and decoder
DEFAULT_TOKEN_TABLE = TokenTable(TOKENS)


def get_keyword(code: int) -> Optional[str]:
    """Canonical keyword for a token byte in the default table."""
    return DEFAULT_TOKEN_TABLE.decode(code)


def get_token(keyword: str) -> Optional[int]:
    """Token byte for a keyword spelling in the default table."""
    return DEFAULT_TOKEN_TABLE.encode(keyword)
