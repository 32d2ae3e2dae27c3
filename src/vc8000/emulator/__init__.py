"""
VC8000 Emulator
===============

Runs translated VC8000 programs.

The emulator loads every translated statement into a flat memory of
1,000,000 words, then fetches, decodes and executes from address 100 until
HALT or the first fatal error.

Quick Start
-----------

    >>> from vc8000.assembler import assemble
    >>> from vc8000.emulator import Emulator
    >>> emu = Emulator()
    >>> emu.run_program(assemble(source))
    True

Module Structure
----------------

- `emulator.py`: Emulator and EmulatorConfig (high-level API)
- `cpu.py`: VC8000 CPU, fetch-decode-execute and arithmetic
- `memory.py`: Word memory and register file
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig, prompt_input, echo_output

# CPU components
from .cpu import VC8000, CPUState, wrap_word, divide

# Memory subsystem
from .memory import Memory, Registers

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",
    "prompt_input",
    "echo_output",

    # CPU
    "VC8000",
    "CPUState",
    "wrap_word",
    "divide",

    # Memory
    "Memory",
    "Registers",
]
