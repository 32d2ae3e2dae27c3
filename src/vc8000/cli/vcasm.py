"""
vcasm - VC8000 Assembler and Emulator Command-Line Interface
============================================================

This module implements the command-line interface for the VC8000 toolchain.
A run goes through the same stages an operator would step through:

1. Pass I, then the symbol table is shown
2. Pass II, then the translation is shown with errors under each line
3. The program is run on the emulator, unless assembly found errors

Between stages the tool waits for Enter (skipped with --no-pause, and
whenever input is not a terminal).

Usage Examples
--------------
Assemble and run:
    $ vcasm prog.asm

Assemble only, saving the listing and symbol table:
    $ vcasm prog.asm --no-run -l prog.lst -s prog.sym

Start execution somewhere other than address 100:
    $ vcasm prog.asm --start-address 0

Verbose mode:
    $ vcasm -v prog.asm
"""

import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from vc8000 import __version__
from vc8000.assembler import Assembler, SourceLines
from vc8000.cli.errors import ExitCode, handle_cli_exception
from vc8000.emulator import Emulator, EmulatorConfig


def _pause(enabled: bool) -> None:
    if enabled:
        click.pause("Press Enter to continue...")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--run/--no-run",
    default=True,
    help="Run the program after a clean assembly. Default: run.",
)
@click.option(
    "--pause/--no-pause",
    default=True,
    help="Wait for Enter between stages. Default: pause.",
)
@click.option(
    "--start-address",
    type=click.IntRange(min=0),
    default=None,
    help="Address of the first instruction executed "
         "(default: VC8000_START_ADDRESS or 100)",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the symbol table to a file",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the translation listing to a file",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="vcasm")
def main(
    input_file: Path,
    run: bool,
    pause: bool,
    start_address: Optional[int],
    symbols: Optional[Path],
    listing: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble a VC8000 program and run it.

    INPUT_FILE is the assembly source file to assemble.

    \b
    Examples:
        vcasm prog.asm                  # Assemble, show, run
        vcasm prog.asm --no-run         # Assemble and show only
        vcasm prog.asm --no-pause       # Do not wait between stages
        vcasm prog.asm -l prog.lst      # Also save the listing
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    config = EmulatorConfig.from_env()
    if start_address is not None:
        config = dataclasses.replace(config, start_address=start_address)

    asm = Assembler()

    try:
        source = SourceLines.from_file(input_file)

        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm.pass_one(source)
        click.echo(asm.get_symbol_listing())
        _pause(pause)

        asm.pass_two(source)
        click.echo(asm.get_listing())

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if asm.has_errors():
            if verbose:
                click.echo(asm.get_error_report(), err=True)
            if run:
                click.echo("Errors were found in the translation. The program will not be run.")
            sys.exit(ExitCode.BUILD_ERROR)

        if not run:
            return

        _pause(pause)

        if verbose:
            click.echo(f"Running from address {config.start_address}...")

        emulator = Emulator(config)
        if not emulator.run_program(asm.translation):
            click.echo(emulator.last_error.message, err=True)
            sys.exit(ExitCode.RUNTIME_ERROR)

        click.echo("Program terminated successfully.")

        if verbose:
            click.echo(f"Executed {emulator.cpu.state.instructions} instructions")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
