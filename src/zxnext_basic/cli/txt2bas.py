"""
txt2bas - Text to Tokenized BASIC Converter
===========================================

Converts a plain-text BASIC listing into a +3DOS program file that the
ZX Spectrum +3 and ZX Spectrum Next can LOAD.

Usage Examples
--------------
Convert a listing:
    $ txt2bas game.txt game.bas

Reject fractional literals and malformed directives:
    $ txt2bas --strict game.txt game.bas

Write bare line records without the 128-byte header:
    $ txt2bas --no-header game.txt game.raw
"""

from dataclasses import replace
from pathlib import Path

import click

from zxnext_basic import __version__
from zxnext_basic.cli.errors import handle_cli_exception, setup_logging
from zxnext_basic.config import get_default_config
from zxnext_basic.plus3 import HEADER_SIZE, NO_AUTOSTART, encode_file
from zxnext_basic.plus3.header import normalize_autostart


@click.command()
@click.argument(
    "input_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.argument(
    "output_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--no-header",
    is_flag=True,
    help="Write line records only, without the +3DOS header",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on unsupported numeric literals and malformed directives",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(__version__, "--version", "-V", prog_name="txt2bas")
def main(
    input_file: Path,
    output_file: Path,
    no_header: bool,
    strict: bool,
    verbose: bool,
) -> None:
    """
    Convert a text listing into a tokenized ZX Spectrum Next BASIC file.

    INPUT_FILE is the text listing, OUTPUT_FILE the .bas file to create.

    \b
    Source format:
      10 PRINT "HELLO"      numbered line
      PRINT "WORLD"         unnumbered line (previous number + 10)
      #autostart 10         run line 10 on LOAD
      # any other text      comment, not stored

    \b
    Examples:
      txt2bas game.txt game.bas
      txt2bas --strict game.txt game.bas
    """
    setup_logging(verbose)
    try:
        config = get_default_config()
        if strict:
            config = replace(config, strict_numbers=True, strict_directives=True)
        if no_header:
            config = replace(config, include_header=False)

        program = encode_file(input_file, config=config)
        data = program.to_bytes(include_header=config.include_header)
        output_file.write_bytes(data)

        click.echo(f"Success! Created {output_file}")
        autostart = normalize_autostart(program.autostart)
        if autostart != NO_AUTOSTART:
            click.echo(f" - Auto-start Line: {autostart}")
        else:
            click.echo(" - Auto-start Line: None")
        basic_size = len(data) - HEADER_SIZE if config.include_header else len(data)
        click.echo(f" - BASIC Size: {basic_size} bytes")
        click.echo(f" - Total File Size: {len(data)} bytes")
        if verbose:
            click.echo(f" - Lines: {len(program)}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Encoding")


if __name__ == "__main__":
    main()
