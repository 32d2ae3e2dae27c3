"""
VC8000 - Assembler and Emulator for the VC8000 Decimal Machine
==============================================================

This package provides a toolchain for the VC8000, a fictitious decimal
accumulator-register computer with 1,000,000 words of memory and ten
registers. Every word is a signed nine-digit decimal number.

Main Components
---------------
- **cpu**: Instruction set definition
    Opcodes, their wire numbering and the instruction word format, shared
    by the assembler and the emulator

- **assembler**: Two-pass assembler
    Converts assembly source into a translation: one numbered, encoded
    statement per source line, with diagnostics attached to each line

- **emulator**: VC8000 emulator
    Loads a translation into memory and executes it

Quick Start
-----------
Assemble and run a program:
    >>> from vc8000.assembler import Assembler
    >>> from vc8000.emulator import Emulator
    >>> asm = Assembler()
    >>> translation = asm.assemble_file("prog.asm")
    >>> print(asm.get_listing())
    >>> if not asm.has_errors():
    ...     Emulator().run_program(translation)

Or use the command-line tool:
    $ vcasm prog.asm
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from vc8000.assembler import Assembler, assemble, assemble_file
from vc8000.emulator import Emulator, EmulatorConfig
from vc8000.errors import (
    VC8000Error,
    AssemblerError,
    SourceError,
    EmulatorError,
    LoadError,
    BadInstructionError,
    MissingHaltError,
    DivisionByZeroError,
    InputError,
    Diagnostic,
    ErrorKind,
    ErrorCollector,
    SourceLocation,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    # Exception hierarchy
    "VC8000Error",
    "AssemblerError",
    "SourceError",
    "EmulatorError",
    "LoadError",
    "BadInstructionError",
    "MissingHaltError",
    "DivisionByZeroError",
    "InputError",
    # Diagnostics
    "Diagnostic",
    "ErrorKind",
    "ErrorCollector",
    "SourceLocation",
]
