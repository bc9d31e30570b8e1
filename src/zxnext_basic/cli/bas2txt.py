"""
bas2txt - Tokenized BASIC to Text Converter
===========================================

Lists a +3DOS (or headerless) ZX Spectrum Next BASIC program as plain
text in the format txt2bas reads.

Usage Examples
--------------
Decode to a file:
    $ bas2txt game.bas game.txt

Print the listing:
    $ bas2txt game.bas
"""

from pathlib import Path
from typing import Optional

import click

from zxnext_basic import __version__
from zxnext_basic.cli.errors import handle_cli_exception, setup_logging
from zxnext_basic.config import get_default_config
from zxnext_basic.plus3 import BasicDecoder, read_program_file, write_listing


@click.command()
@click.argument(
    "input_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.argument(
    "output_file",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(__version__, "--version", "-V", prog_name="bas2txt")
def main(input_file: Path, output_file: Optional[Path], verbose: bool) -> None:
    """
    Convert a tokenized ZX Spectrum Next BASIC file into a text listing.

    INPUT_FILE is the .bas file. The listing is written to OUTPUT_FILE,
    or printed when OUTPUT_FILE is omitted.

    \b
    Examples:
      bas2txt game.bas game.txt
      bas2txt game.bas
    """
    setup_logging(verbose)
    try:
        data = read_program_file(input_file)
        decoder = BasicDecoder()
        program = decoder.parse(data)
        lines = decoder.decode_program(program)

        if output_file is None:
            for line in lines:
                click.echo(line)
        else:
            write_listing(lines, output_file, config=get_default_config())
            click.echo(f"Success! Decoded {input_file} to {output_file}")
            if verbose:
                click.echo(f" - Lines: {len(program)}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Decoding")


if __name__ == "__main__":
    main()
