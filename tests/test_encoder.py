"""
BASIC Encoder Tests
===================

Tests for turning source text into tokenized line records: directives,
line numbering, the tokenization priority rules and the file entry
points.
"""

import logging

import pytest

from zxnext_basic.config import ConverterConfig
from zxnext_basic.errors import (
    DirectiveError,
    InputUnavailableError,
    LineNumberError,
    LineTooLongError,
    UnsupportedNumberError,
)
from zxnext_basic.plus3.encoder import (
    BasicEncoder,
    encode_file,
    encode_lines,
    encode_program,
    encode_text,
    read_source_file,
    text_to_bytes,
)
from zxnext_basic.plus3.header import HEADER_SIZE
from zxnext_basic.plus3.numbers import pack_number


def tokenize(text: str) -> bytes:
    return BasicEncoder().tokenize(text)


def hidden(value) -> bytes:
    return b"\x0e" + pack_number(value)


# =============================================================================
# Program Structure
# =============================================================================

class TestProgramStructure:
    """Directives, comments and line numbering."""

    def test_blank_and_comment_lines_produce_nothing(self):
        program = encode_lines(["", "   ", "# a comment", "#define X"])
        assert len(program) == 0
        assert program.autostart is None

    def test_autostart_directive(self):
        program = encode_lines(["#autostart 10", "PRINT 1"])
        assert program.autostart == 10
        assert len(program) == 1

    def test_autostart_directive_case_insensitive(self):
        assert encode_lines(["#AutoStart 200"]).autostart == 200

    def test_last_autostart_wins(self):
        assert encode_lines(["#autostart 10", "#autostart 30"]).autostart == 30

    def test_malformed_autostart_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            program = encode_lines(["#autostart 10", "#autostart ten", "#autostart"])
        assert program.autostart == 10
        assert "malformed directive" in caplog.text

    def test_malformed_autostart_strict(self):
        config = ConverterConfig(strict_directives=True)
        with pytest.raises(DirectiveError) as exc_info:
            encode_lines(["CLS", "#autostart ten"], config=config)
        assert exc_info.value.location.line == 2
        assert "#autostart <line number>" in str(exc_info.value)

    def test_automatic_numbering(self):
        program = encode_lines(["CLS", "PRINT 1", "STOP"])
        assert program.line_numbers() == [10, 20, 30]

    def test_explicit_number_resets_counter(self):
        program = encode_lines(["100 CLS", "PRINT 1", "5 STOP", "RUN"])
        assert program.line_numbers() == [100, 110, 5, 15]

    def test_lines_kept_in_encounter_order(self):
        program = encode_lines(["30 CLS", "10 STOP", "20 RUN"])
        assert program.line_numbers() == [30, 10, 20]

    def test_number_without_whitespace_is_not_a_line_number(self):
        # "10PRINT" has no separator, so it is statement text
        program = encode_lines(["10PRINT"])
        assert program.line_numbers() == [10]
        assert program.lines[0].payload.startswith(b"10\x0e")

    def test_configured_numbering(self):
        config = ConverterConfig(first_line=1000, line_step=5)
        program = encode_lines(["CLS", "CLS"], config=config)
        assert program.line_numbers() == [1000, 1005]

    def test_line_number_out_of_range(self):
        with pytest.raises(LineNumberError) as exc_info:
            encode_lines(["CLS", "70000 PRINT"])
        assert exc_info.value.line_number == 70000
        assert exc_info.value.location.line == 2

    def test_automatic_number_overflow(self):
        with pytest.raises(LineNumberError):
            encode_lines(["65535 CLS", "CLS"])

    def test_line_too_long(self):
        long_line = 'PRINT "' + "A" * 70000 + '"'
        with pytest.raises(LineTooLongError) as exc_info:
            encode_lines(["CLS", long_line])
        error = exc_info.value
        assert error.line_number == 20
        assert error.length == 70004
        assert str(error).startswith("<input>:2:1: error: line 20 tokenizes to 70004 bytes")

    def test_longest_line_accepted(self):
        # Token, quotes and terminator leave 65531 bytes for the string
        line = 'PRINT "' + "A" * 65531 + '"'
        assert encode_lines([line]).lines[0].encoded_length == 65535

    def test_encoder_resets_between_programs(self):
        encoder = BasicEncoder()
        encoder.encode_lines(["#autostart 5", "100 CLS"])
        program = encoder.encode_lines(["CLS"])
        assert program.autostart is None
        assert program.line_numbers() == [10]


# =============================================================================
# Tokenization
# =============================================================================

class TestTokenize:
    """The per-line tokenization rules."""

    def test_terminator(self):
        assert tokenize("") == b"\x0d"

    def test_keyword_swallows_spaces(self):
        assert tokenize("CLS") == b"\xfb\x0d"
        assert tokenize("PRINT   a") == b"\xf5a\x0d"

    def test_lowercase_keyword(self):
        assert tokenize("print a") == b"\xf5a\x0d"

    def test_go_to_with_number(self):
        assert tokenize("GO TO 10") == b"\xec" + b"10" + hidden(10) + b"\x0d"

    def test_alias_spellings(self):
        assert tokenize("GOTO 10") == tokenize("GO TO 10")
        assert tokenize("gosub 100") == tokenize("GO SUB 100")

    def test_number_packing(self):
        assert tokenize("100") == b"100\x0e\x00\x00\x64\x00\x00\x0d"

    def test_number_keeps_source_digits(self):
        assert tokenize("PAUSE 010") == b"\xf2" + b"010" + hidden(10) + b"\x0d"

    def test_leading_dot_number(self):
        assert tokenize(".5") == b".5" + bytes([0x0E, 0, 0, 0, 0, 0]) + b"\x0d"

    def test_fraction_zero_filled(self):
        data = tokenize("PRINT 3.14")
        assert data == b"\xf53.14\x0e\x00\x00\x00\x00\x00\x0d"

    def test_fraction_strict(self):
        encoder = BasicEncoder(config=ConverterConfig(strict_numbers=True))
        with pytest.raises(UnsupportedNumberError) as exc_info:
            encoder.encode_lines(["PLOT 3.14,20"])
        error = exc_info.value
        assert error.literal == "3.14"
        assert error.location.line == 1
        assert error.location.column == 6

    def test_strict_column_counts_line_number(self):
        encoder = BasicEncoder(config=ConverterConfig(strict_numbers=True))
        with pytest.raises(UnsupportedNumberError) as exc_info:
            encoder.encode_lines(["20 PLOT 0.5,1"])
        assert exc_info.value.location.column == 9

    def test_digits_inside_identifier_are_numbers(self):
        # The tokenizer has no identifier rule; a digit always starts a number
        assert tokenize("a1") == b"a1" + hidden(1) + b"\x0d"

    def test_negative_literal_is_minus_then_number(self):
        assert tokenize("-5") == b"-5" + hidden(5) + b"\x0d"

    def test_string_literal_copied(self):
        assert tokenize('PRINT "HELLO"') == b'\xf5"HELLO"\x0d'

    def test_keywords_not_tokenized_in_strings(self):
        assert tokenize('"PRINT 10"') == b'"PRINT 10"\x0d'

    def test_unterminated_string_runs_to_end(self):
        assert tokenize('PRINT "OPEN') == b'\xf5"OPEN\x0d'

    def test_rem_copies_rest_of_line(self):
        assert tokenize("REM GO TO 10") == b"\xea GO TO 10\x0d"

    def test_semicolon_comment_at_start(self):
        assert tokenize("; PRINT 10") == b"; PRINT 10\x0d"

    def test_semicolon_comment_after_colon(self):
        assert tokenize("CLS : ; note 1") == b"\xfb: ; note 1\x0d"

    def test_semicolon_separator_in_print(self):
        assert tokenize('PRINT "A";"B"') == b'\xf5"A";"B"\x0d'

    def test_multi_word_keywords(self):
        assert tokenize("DEF FN") == b"\xce\x0d"
        assert tokenize("OPEN # 4") == b"\xd3" + b"4" + hidden(4) + b"\x0d"

    def test_keyword_glued_to_operand_stays_text(self):
        assert tokenize("OPEN #4") == b"OPEN #4" + hidden(4) + b"\x0d"
        assert tokenize("LET k$=INKEY$a") == b"\xf1k$=INKEY$a\x0d"
        assert tokenize("PRINT CHR$65") == b"\xf5CHR$65" + hidden(65) + b"\x0d"

    def test_operators(self):
        assert tokenize("a<>b") == b"a\xc9b\x0d"
        assert tokenize("a<=b") == b"a\xc7b\x0d"

    def test_for_loop(self):
        assert tokenize("FOR I=1 TO 5") == (
            b"\xebI=1" + hidden(1) + b" \xcc5" + hidden(5) + b"\x0d"
        )

    def test_keyword_not_matched_inside_identifier(self):
        assert tokenize("TOTAL") == b"TOTAL\x0d"

    def test_next_extension_keyword(self):
        assert tokenize("DEFPROC x") == b"\x91x\x0d"

    def test_copyright_sign(self):
        assert tokenize('"© 1982"') == b'"\x7f 1982"\x0d'


class TestTextToBytes:
    """Tests for text_to_bytes()."""

    def test_ascii_unchanged(self):
        assert text_to_bytes("Hello, world!") == b"Hello, world!"

    def test_copyright(self):
        assert text_to_bytes("©") == b"\x7f"

    def test_other_characters_replaced(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert text_to_bytes("café") == b"caf?"
        assert "non-ASCII" in caplog.text


# =============================================================================
# Program Bytes and Files
# =============================================================================

class TestEncodeProgram:
    """Whole-program output and the file entry points."""

    def test_sample_program(self, sample_source):
        program = encode_lines(sample_source)
        assert program.autostart == 10
        assert program.line_numbers() == [10, 20, 30]
        assert program.lines[0].to_bytes() == (
            b"\x00\x0a\x09\x00" + b'\xf5"HELLO"\x0d'
        )
        assert program.lines[2].to_bytes() == b"\x00\x1e\x03\x00\xf3I\x0d"

    def test_program_bytes_have_header(self, sample_source, sample_program_bytes):
        payload = encode_lines(sample_source).payload()
        assert sample_program_bytes[:8] == b"PLUS3DOS"
        assert sample_program_bytes[HEADER_SIZE:] == payload
        assert sample_program_bytes[16] | (sample_program_bytes[17] << 8) == len(payload)
        assert sample_program_bytes[18:20] == b"\x0a\x00"

    def test_no_autostart_sentinel(self):
        data = encode_program(["CLS"])
        assert data[18:20] == b"\x00\x80"

    def test_without_header(self):
        config = ConverterConfig(include_header=False)
        assert encode_program(["CLS"], config=config) == b"\x00\x0a\x02\x00\xfb\x0d"

    def test_empty_program(self):
        data = encode_program([])
        assert len(data) == HEADER_SIZE
        assert data[16:18] == b"\x00\x00"

    def test_encode_text(self, sample_source, sample_program_bytes):
        assert encode_text("\n".join(sample_source)) == sample_program_bytes

    def test_encode_text_crlf(self):
        assert encode_text("CLS\r\nSTOP\r\n") == encode_program(["CLS", "STOP"])

    def test_encode_file(self, tmp_path, sample_source):
        source = tmp_path / "demo.txt"
        source.write_text("\n".join(sample_source) + "\n", encoding="utf-8")
        program = encode_file(source)
        assert program.autostart == 10
        assert program.line_numbers() == [10, 20, 30]

    def test_encode_file_error_location_uses_filename(self, tmp_path):
        source = tmp_path / "bad.txt"
        source.write_text("CLS\n99999 STOP\n", encoding="utf-8")
        with pytest.raises(LineNumberError) as exc_info:
            encode_file(source)
        assert str(exc_info.value).startswith(f"{source}:2:1: error:")

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputUnavailableError) as exc_info:
            read_source_file(tmp_path / "missing.txt")
        assert "file not found" in str(exc_info.value)

    def test_undecodable_file(self, tmp_path):
        source = tmp_path / "latin1.txt"
        source.write_bytes(b"PRINT \"caf\xe9\"\n")
        with pytest.raises(InputUnavailableError) as exc_info:
            encode_file(source)
        assert "utf-8" in str(exc_info.value)

    def test_configured_encoding(self, tmp_path):
        source = tmp_path / "latin1.txt"
        source.write_bytes(b"PRINT \"\xa9\"\n")
        program = encode_file(source, config=ConverterConfig(encoding="latin-1"))
        assert program.lines[0].payload == b'\xf5"\x7f"\x0d'
