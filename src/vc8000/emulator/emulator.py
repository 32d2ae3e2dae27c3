"""
VC8000 Emulator - Main Orchestrator
===================================

This module provides the `Emulator` class, which owns one memory, one
register file and one CPU, loads a Translation into memory and runs it.

A run ends in exactly one of two ways: HALT (success) or the first fatal
load-time or run-time error (failure). There is no recovery mid-run.

Example usage:
    >>> from vc8000.assembler import assemble
    >>> from vc8000.emulator import Emulator
    >>> translation = assemble(source)
    >>> emu = Emulator()
    >>> if not emu.run_program(translation):
    ...     print(emu.last_error)
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional

import click

from vc8000.assembler.translation import Translation
from vc8000.cpu import MEMORY_SIZE, PROGRAM_START, REGISTER_COUNT
from vc8000.emulator.cpu import VC8000
from vc8000.emulator.memory import Memory, Registers
from vc8000.errors import EmulatorError, LoadError

logger = logging.getLogger(__name__)


def prompt_input() -> str:
    """Read one line from the operator, prompting with "? "."""
    return click.prompt("?", prompt_suffix=" ", default="", show_default=False)


def echo_output(value: int) -> None:
    click.echo(value)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        memory_size: Number of memory words
        register_count: Number of general-purpose registers
        start_address: Address of the first instruction executed

    Example:
        >>> config = EmulatorConfig(start_address=0)
    """
    memory_size: int = MEMORY_SIZE
    register_count: int = REGISTER_COUNT
    start_address: int = PROGRAM_START

    @classmethod
    def from_env(cls) -> "EmulatorConfig":
        """
        Create EmulatorConfig from environment variables.

        Environment variables (all optional):
            VC8000_MEMORY_SIZE: Number of memory words (positive integer)
            VC8000_START_ADDRESS: First instruction address (non-negative integer)

        Returns:
            EmulatorConfig with values from environment variables
        """
        overrides = {}

        if memory_size := os.environ.get("VC8000_MEMORY_SIZE"):
            try:
                if int(memory_size) > 0:
                    overrides["memory_size"] = int(memory_size)
            except ValueError:
                pass  # Ignore invalid values

        if start_address := os.environ.get("VC8000_START_ADDRESS"):
            try:
                if int(start_address) >= 0:
                    overrides["start_address"] = int(start_address)
            except ValueError:
                pass  # Ignore invalid values

        return cls(**overrides)


class Emulator:
    """
    VC8000 emulator.

    Memory and registers belong to this instance alone. Each call to load()
    or run_program() starts from cleared memory and registers.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        cpu: The VC8000 CPU (accessible for low-level control)
        last_error: The error that ended the last failed run, else None
    """

    def __init__(
        self,
        config: Optional[EmulatorConfig] = None,
        input_func: Callable[[], str] = prompt_input,
        output_func: Callable[[int], None] = echo_output,
    ):
        """
        Initialize the emulator.

        Args:
            config: Memory size and start address. Defaults to the standard
                    machine (1,000,000 words, 10 registers, start at 100).
            input_func: Returns one line of input for READ
            output_func: Displays the value written by WRITE
        """
        self.config = config or EmulatorConfig()
        self._memory = Memory(self.config.memory_size)
        self._registers = Registers(self.config.register_count)

        self.cpu = VC8000(self._memory, self._registers, self.config.start_address)
        self.cpu.input_func = input_func
        self.cpu.output_func = output_func

        self.last_error: Optional[EmulatorError] = None

    # =========================================================================
    # State Access
    # =========================================================================

    @property
    def memory(self) -> Memory:
        return self._memory

    @property
    def registers(self) -> Registers:
        return self._registers

    def read_memory(self, address: int) -> int:
        return self._memory.read(address)

    def reset(self) -> None:
        """Clear memory and registers and return to the start address."""
        self._memory.clear()
        self._registers.reset()
        self.cpu.reset()
        self.last_error = None

    # =========================================================================
    # Loading and Running
    # =========================================================================

    def load(self, translation: Translation) -> int:
        """
        Write a translation into memory.

        END and comment lines are skipped, as is any statement whose
        numeric contents are 0 (ORG, DS and a DC of 0 leave the word at 0).
        Error placeholders load as -1.

        Returns:
            Number of words written

        Raises:
            LoadError: If a statement's location lies outside memory
        """
        self.reset()

        loaded = 0
        for statement in translation:
            if statement.suppress_contents:
                continue
            value = statement.numeric_contents
            if value == 0:
                continue
            if not self._memory.in_bounds(statement.location):
                raise LoadError(statement.location)
            self._memory.write(statement.location, value)
            loaded += 1

        logger.debug(f"Loaded {loaded} words")
        return loaded

    def run(self, translation: Translation) -> int:
        """
        Load and execute a translation.

        Returns:
            Number of instructions executed

        Raises:
            EmulatorError: On the first load-time or run-time error
        """
        self.load(translation)
        logger.debug(f"Running from {self.config.start_address}")
        return self.cpu.execute()

    def run_program(self, translation: Translation) -> bool:
        """
        Load and execute a translation, reporting failure as a result.

        Returns:
            True if HALT was reached. False otherwise, with the cause
            in last_error.
        """
        try:
            self.run(translation)
        except EmulatorError as e:
            logger.error(f"Emulation stopped at {e.address}: {e.message}")
            self.last_error = e
            return False
        return True
