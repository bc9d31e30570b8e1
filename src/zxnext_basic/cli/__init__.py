"""
ZX Next BASIC Command-Line Interface
====================================

This package provides command-line tools for the converter:

- **txt2bas**: Encode a text listing into a +3DOS BASIC program
- **bas2txt**: Decode a +3DOS BASIC program into a text listing
- **zxbas**: Inspect and validate program files, list the token table

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["txt2bas", "bas2txt", "zxbas"]
