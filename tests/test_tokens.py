"""
Token Table Tests
=================

Tests for the keyword <-> token byte table: table integrity, lookups in
both directions, aliases and the longest-match / word-boundary rules
used by the encoder.
"""

import pytest

from zxnext_basic.plus3.tokens import (
    DEFAULT_TOKEN_TABLE,
    FIRST_TOKEN,
    LAST_TOKEN,
    TOKEN_REM,
    TOKENS,
    TokenCategory,
    TokenEntry,
    TokenTable,
    ascii_upper,
    get_keyword,
    get_token,
)


# =============================================================================
# Table Integrity
# =============================================================================

class TestTableIntegrity:
    """The shipped table covers the whole token range exactly once."""

    def test_every_code_has_one_canonical_spelling(self):
        canonical = [entry.code for entry in TOKENS if entry.canonical]
        assert len(canonical) == len(set(canonical))
        assert set(canonical) == set(range(FIRST_TOKEN, LAST_TOKEN + 1))

    def test_no_spelling_maps_to_two_codes(self):
        seen = {}
        for entry in TOKENS:
            key = entry.keyword.upper()
            assert seen.setdefault(key, entry.code) == entry.code

    def test_categories(self):
        assert TokenEntry("PEEK$", 0x87).category == TokenCategory.NEXT_EXTENSION
        assert TokenEntry("RMDIR", 0xA2).category == TokenCategory.NEXT_EXTENSION
        assert TokenEntry("SPECTRUM", 0xA3).category == TokenCategory.STANDARD

    def test_rem_constant(self):
        assert TOKEN_REM == DEFAULT_TOKEN_TABLE.encode("REM") == 0xEA

    def test_conflicting_codes_rejected(self):
        with pytest.raises(ValueError, match="maps to both"):
            TokenTable([TokenEntry("PRINT", 0xF5), TokenEntry("print", 0xF6)])

    def test_two_canonical_spellings_rejected(self):
        with pytest.raises(ValueError, match="two canonical"):
            TokenTable([TokenEntry("GO TO", 0xEC), TokenEntry("GOTO", 0xEC)])

    def test_alias_without_canonical_rejected(self):
        with pytest.raises(ValueError, match="no canonical"):
            TokenTable([TokenEntry("GOTO", 0xEC, canonical=False)])

    def test_code_out_of_range_rejected(self):
        with pytest.raises(ValueError, match="outside"):
            TokenTable([TokenEntry("FOO", 0x41)])


# =============================================================================
# Lookups
# =============================================================================

class TestLookups:
    """Keyword -> code and code -> keyword lookups."""

    def test_encode_case_insensitive(self):
        assert DEFAULT_TOKEN_TABLE.encode("PRINT") == 0xF5
        assert DEFAULT_TOKEN_TABLE.encode("print") == 0xF5
        assert DEFAULT_TOKEN_TABLE.encode("PrInT") == 0xF5

    def test_encode_multi_word(self):
        assert DEFAULT_TOKEN_TABLE.encode("GO TO") == 0xEC
        assert DEFAULT_TOKEN_TABLE.encode("go sub") == 0xED
        assert DEFAULT_TOKEN_TABLE.encode("DEF FN") == 0xCE
        assert DEFAULT_TOKEN_TABLE.encode("OPEN #") == 0xD3
        assert DEFAULT_TOKEN_TABLE.encode("CLOSE #") == 0xD4

    def test_encode_operators(self):
        assert DEFAULT_TOKEN_TABLE.encode("<<") == 0x8C
        assert DEFAULT_TOKEN_TABLE.encode(">>") == 0x8D
        assert DEFAULT_TOKEN_TABLE.encode("<=") == 0xC7
        assert DEFAULT_TOKEN_TABLE.encode(">=") == 0xC8
        assert DEFAULT_TOKEN_TABLE.encode("<>") == 0xC9

    def test_encode_unknown(self):
        assert DEFAULT_TOKEN_TABLE.encode("PRINTX") is None
        assert DEFAULT_TOKEN_TABLE.encode("") is None

    def test_aliases_share_code(self):
        assert DEFAULT_TOKEN_TABLE.encode("GOTO") == DEFAULT_TOKEN_TABLE.encode("GO TO")
        assert DEFAULT_TOKEN_TABLE.encode("GOSUB") == DEFAULT_TOKEN_TABLE.encode("GO SUB")

    def test_decode_canonical(self):
        assert DEFAULT_TOKEN_TABLE.decode(0xEC) == "GO TO"
        assert DEFAULT_TOKEN_TABLE.decode(0xED) == "GO SUB"
        assert DEFAULT_TOKEN_TABLE.decode(0x87) == "PEEK$"
        assert DEFAULT_TOKEN_TABLE.decode(0xFF) == "COPY"

    def test_decode_outside_range(self):
        assert DEFAULT_TOKEN_TABLE.decode(0x86) is None
        assert DEFAULT_TOKEN_TABLE.decode(0x41) is None
        assert not DEFAULT_TOKEN_TABLE.is_token(0x0E)

    def test_aliases(self):
        assert DEFAULT_TOKEN_TABLE.aliases(0xEC) == ["GOTO"]
        assert DEFAULT_TOKEN_TABLE.aliases(0xF5) == []

    def test_module_helpers(self):
        assert get_token("cls") == 0xFB
        assert get_keyword(0xFB) == "CLS"

    def test_ascii_upper_leaves_non_ascii(self):
        assert ascii_upper("print é") == "PRINT é"
        # Dotless i must not fold to I
        assert ascii_upper("ıf") == "ıF"


# =============================================================================
# Matching
# =============================================================================

class TestMatch:
    """Longest-match and word-boundary rules."""

    def test_longest_match_wins(self):
        assert DEFAULT_TOKEN_TABLE.match("GO TO 10", 0) == ("GO TO", 0xEC)
        assert DEFAULT_TOKEN_TABLE.match("DEFPROC x", 0) == ("DEFPROC", 0x91)
        assert DEFAULT_TOKEN_TABLE.match("ATTR(1,1)", 0) == ("ATTR", 0xAB)

    def test_match_returns_source_spelling(self):
        assert DEFAULT_TOKEN_TABLE.match("print a", 0) == ("print", 0xF5)

    def test_no_match_inside_identifier(self):
        # "TO" inside "TOTAL", "PRINT" at the start of "PRINTER"
        assert DEFAULT_TOKEN_TABLE.match("TOTAL", 0) is None
        assert DEFAULT_TOKEN_TABLE.match("PRINTER", 0) is None

    def test_no_match_after_letter(self):
        assert DEFAULT_TOKEN_TABLE.match("XOR", 1) is None

    def test_match_after_digit_or_symbol(self):
        assert DEFAULT_TOKEN_TABLE.match("1TO", 1) == ("TO", 0xCC)
        assert DEFAULT_TOKEN_TABLE.match("(INT 3)", 1) == ("INT", 0xBA)

    def test_trailing_digit_blocks_alphabetic_match(self):
        assert DEFAULT_TOKEN_TABLE.match("GOTO10", 0) is None

    def test_symbolic_keywords_skip_boundary(self):
        assert DEFAULT_TOKEN_TABLE.match("a<>b", 1) == ("<>", 0xC9)
        assert DEFAULT_TOKEN_TABLE.match("x<<2", 1) == ("<<", 0x8C)

    def test_keyword_ending_in_symbol_needs_boundary(self):
        assert DEFAULT_TOKEN_TABLE.match("OPEN #4", 0) is None
        assert DEFAULT_TOKEN_TABLE.match("CHR$65", 0) is None
        assert DEFAULT_TOKEN_TABLE.match("INKEY$a", 0) is None

    def test_keyword_ending_in_symbol_before_space(self):
        assert DEFAULT_TOKEN_TABLE.match("OPEN # 4", 0) == ("OPEN #", 0xD3)
        assert DEFAULT_TOKEN_TABLE.match("CHR$ 65", 0) == ("CHR$", 0xC2)
        assert DEFAULT_TOKEN_TABLE.match("STR$(x)", 0) == ("STR$", 0xC1)

    def test_match_at_end_of_text(self):
        assert DEFAULT_TOKEN_TABLE.match("CLS", 0) == ("CLS", 0xFB)
        assert DEFAULT_TOKEN_TABLE.match("CL", 0) is None
