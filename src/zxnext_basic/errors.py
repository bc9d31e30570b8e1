"""
ZX Next BASIC Error Hierarchy
=============================

This module defines the exception hierarchy for the converter. All
exceptions inherit from BasicError, allowing callers to catch every
conversion error with a single except clause.

Exception Hierarchy
-------------------
BasicError (base)
├── InputUnavailableError - source file missing, unreadable or undecodable
├── EncodeError (text -> binary, location-aware)
│   ├── DirectiveError - malformed #autostart (strict mode only)
│   ├── UnsupportedNumberError - literal outside the integer fast path (strict mode only)
│   ├── LineNumberError - line number does not fit 16 bits
│   └── LineTooLongError - tokenized line does not fit 16 bits
└── HeaderError - +3DOS header cannot describe the program

Lenient Defaults
----------------
The converter is lenient by default: malformed directives are ignored,
fractional literals are zero-filled and truncated binary records end the
program. Only the strict configuration options turn the first two into
DirectiveError / UnsupportedNumberError. The decoder never raises for
malformed binary content.

Error messages for EncodeError follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class BasicError(Exception):
    """
    Base exception for all converter errors.

        try:
            data = encode_file("game.txt")
        except BasicError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in a BASIC source file.

    Attributes:
        filename: Name of the source file (or "<input>" for in-memory text)
        line: Physical source line (1-indexed)
        column: Column in the trimmed line (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Input Errors
# =============================================================================

class InputUnavailableError(BasicError):
    """
    The input for a conversion could not be obtained.

    Raised by the file entry points when the path does not exist, cannot
    be read, or its text cannot be decoded. Aborts that conversion only;
    no partial output is produced.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read '{path}': {reason}")


# =============================================================================
# Encoder Exceptions
# =============================================================================

class EncodeError(BasicError):
    """
    Base exception for errors raised while tokenizing source text.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The trimmed source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            game.txt:4:7: error: unsupported numeric literal '3.14'
                PLOT 3.14,20
                      ^
            hint: only whole numbers in -65535..65535 are packed
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class DirectiveError(EncodeError):
    """
    Malformed #autostart directive.

    Only raised when strict directive checking is enabled; by default the
    directive is ignored and the previous autostart value is kept.

    Examples:
        #autostart          ; missing operand
        #autostart ten      ; non-numeric operand
    """

    def __init__(
        self,
        directive: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.directive = directive
        super().__init__(
            f"malformed directive '{directive}'",
            location=location,
            hint="expected '#autostart <line number>'",
            source_line=source_line,
        )


class UnsupportedNumberError(EncodeError):
    """
    Numeric literal outside the integer fast path.

    The hidden 5-byte form is only produced for whole numbers in
    -65535..65535. Other literals are zero-filled unless strict number
    checking is enabled, in which case this error is raised.
    """

    def __init__(
        self,
        literal: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.literal = literal
        super().__init__(
            f"unsupported numeric literal '{literal}'",
            location=location,
            hint="only whole numbers in -65535..65535 are packed",
            source_line=source_line,
        )


class LineNumberError(EncodeError):
    """Line number outside the 16-bit range of a line record."""

    def __init__(
        self,
        line_number: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.line_number = line_number
        super().__init__(
            f"line number {line_number} is out of range",
            location=location,
            hint="line numbers must be between 0 and 65535",
            source_line=source_line,
        )


class LineTooLongError(EncodeError):
    """Tokenized line does not fit the 16-bit length field of a line record."""

    def __init__(
        self,
        line_number: int,
        length: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.line_number = line_number
        self.length = length
        super().__init__(
            f"line {line_number} tokenizes to {length} bytes",
            location=location,
            hint="a line may hold at most 65535 bytes; split it across several lines",
            source_line=source_line,
        )


# =============================================================================
# Header Exceptions
# =============================================================================

class HeaderError(BasicError):
    """
    The +3DOS header cannot be built or read.

    Raised when:
    - Program data is longer than the 16-bit length field allows
    - Header bytes passed for parsing are not 128 bytes long
    """
    pass
