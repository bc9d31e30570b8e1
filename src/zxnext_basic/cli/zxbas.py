"""
zxbas - BASIC Program Inspection Tool
=====================================

Inspects tokenized ZX Spectrum Next BASIC files without converting them.

Commands
--------
- **info**: Show header fields and program summary
- **validate**: Check header and line structure
- **tokens**: List the keyword token table

Usage Examples
--------------
Show file information:
    $ zxbas info game.bas

Validate a file:
    $ zxbas validate game.bas

List the Next extension tokens:
    $ zxbas tokens --extensions-only
"""

import sys
from pathlib import Path

import click

from zxnext_basic import __version__
from zxnext_basic.cli.errors import ExitCode, handle_cli_exception, setup_logging
from zxnext_basic.plus3 import (
    DEFAULT_TOKEN_TABLE,
    HEADER_SIZE,
    BasicDecoder,
    TokenCategory,
    calculate_header_checksum,
    read_program_file,
    verify_header_checksum,
)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="zxbas")
def main() -> None:
    """
    Inspection tools for ZX Spectrum Next BASIC program files.

    \b
    Commands:
      info      Show header fields and program summary
      validate  Check header and line structure
      tokens    List the keyword token table

    \b
    Examples:
      zxbas info game.bas
      zxbas validate game.bas
      zxbas tokens
    """
    pass


# =============================================================================
# Info Command
# =============================================================================

@main.command("info")
@click.argument(
    "bas_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-l", "--lines",
    "show_lines",
    is_flag=True,
    help="List every line number with its length",
)
def cmd_info(bas_file: Path, show_lines: bool) -> None:
    """
    Show detailed information about a BASIC program file.

    \b
    Example:
      zxbas info game.bas
    """
    try:
        data = read_program_file(bas_file)
        program = BasicDecoder().parse(data)
        header = program.header

        click.echo(f"Program Information: {bas_file}")
        click.echo("=" * 40)

        if header is not None:
            file_type = header.get_file_type()
            type_name = file_type.get_description() if file_type is not None else "Unknown"
            signature = header.signature.decode("ascii", errors="replace")
            click.echo(f"Signature:   {signature}")
            click.echo(f"Issue:       {header.issue}.{header.version}")
            click.echo(f"File Size:   {header.file_size} bytes")
            click.echo(f"File Type:   {type_name} ({header.file_type})")
            click.echo(f"Data Length: {header.data_length} bytes")
            click.echo(f"Autostart:   {program.autostart if program.autostart is not None else 'None'}")
            if verify_header_checksum(data):
                click.echo(f"Checksum:    Valid (0x{header.checksum:02X})")
            else:
                calculated = calculate_header_checksum(data)
                click.echo(
                    f"Checksum:    MISMATCH (stored 0x{header.checksum:02X}, "
                    f"calculated 0x{calculated:02X})"
                )
        else:
            click.echo("Header:      None (bare line records)")

        click.echo()
        click.echo("Contents:")
        click.echo(f"  Lines:       {len(program)}")
        numbers = program.line_numbers()
        if numbers:
            click.echo(f"  Line Range:  {min(numbers)}-{max(numbers)}")
        click.echo(f"  Data:        {program.get_data_length()} bytes")
        if program.truncated:
            click.echo("  Truncated:   yes (incomplete trailing record ignored)")

        if show_lines:
            click.echo()
            click.echo(f"{'Line':>6} {'Length':>8}")
            click.echo("-" * 15)
            for record in program:
                click.echo(f"{record.line_number:>6} {record.encoded_length:>8}")

    except Exception as e:
        handle_cli_exception(e)


# =============================================================================
# Validate Command
# =============================================================================

@main.command("validate")
@click.argument(
    "bas_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show validation details",
)
def cmd_validate(bas_file: Path, verbose: bool) -> None:
    """
    Validate a BASIC program file.

    Checks:
    - +3DOS header presence and checksum
    - Header size fields against the file size
    - Line record framing and terminators
    - Hidden number markers and zero-filled literals

    \b
    Example:
      zxbas validate game.bas
    """
    setup_logging(verbose)
    try:
        data = read_program_file(bas_file)
        errors = []
        warnings = []

        program = BasicDecoder().parse(data)
        header = program.header

        if header is None:
            warnings.append("No +3DOS header (bare line records)")
        else:
            if not verify_header_checksum(data):
                warnings.append(
                    f"Checksum mismatch: header 0x{header.checksum:02X}, "
                    f"calculated 0x{calculate_header_checksum(data):02X}"
                )
            elif verbose:
                click.echo(f"  Header checksum: OK (0x{header.checksum:02X})")

            if header.file_size != len(data):
                warnings.append(
                    f"File size mismatch: header {header.file_size}, actual {len(data)}"
                )
            if header.data_length != len(data) - HEADER_SIZE:
                warnings.append(
                    f"Data length mismatch: header {header.data_length}, "
                    f"actual {len(data) - HEADER_SIZE}"
                )
            if header.file_type != 0:
                errors.append(f"Not a BASIC program (file type {header.file_type})")

        if not program.lines:
            errors.append("No program lines found")

        if program.truncated:
            warnings.append("Incomplete trailing record ignored")

        for record in program:
            if record.encoded_length == 0:
                errors.append(f"Line {record.line_number}: zero length record")
                continue
            if record.payload[-1] != 0x0D:
                warnings.append(f"Line {record.line_number}: missing $0D terminator")
            if record.has_truncated_number():
                warnings.append(f"Line {record.line_number}: hidden number cut short")
            for literal, value in record.hidden_numbers():
                if value is None:
                    continue
                try:
                    listed = float(literal)
                except ValueError:
                    continue
                if listed != value:
                    warnings.append(
                        f"Line {record.line_number}: literal {literal} stored as {value}"
                    )

        if verbose:
            click.echo(f"  Lines parsed: {len(program)}")

        if errors:
            click.echo("Validation FAILED:")
            for error in errors:
                click.echo(f"  ERROR: {error}")
            for warning in warnings:
                click.echo(f"  WARNING: {warning}")
            sys.exit(ExitCode.CONVERSION_ERROR)
        elif warnings:
            click.echo("Validation passed with warnings:")
            for warning in warnings:
                click.echo(f"  WARNING: {warning}")
        else:
            click.echo(f"Validation PASSED: {bas_file}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


# =============================================================================
# Tokens Command
# =============================================================================

@main.command("tokens")
@click.option(
    "--extensions-only",
    is_flag=True,
    help="Only list the ZX Spectrum Next extension tokens",
)
def cmd_tokens(extensions_only: bool) -> None:
    """
    List the keyword token table.

    \b
    Output format:
      Code  Keyword   Aliases
      $EC   GO TO     GOTO
    """
    click.echo(f"{'Code':<5} {'Keyword':<10} Aliases")
    click.echo("-" * 30)
    for entry in DEFAULT_TOKEN_TABLE:
        if not entry.canonical:
            continue
        if extensions_only and entry.category != TokenCategory.NEXT_EXTENSION:
            continue
        aliases = ", ".join(DEFAULT_TOKEN_TABLE.aliases(entry.code))
        click.echo(f"${entry.code:02X}   {entry.keyword:<10} {aliases}".rstrip())


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
