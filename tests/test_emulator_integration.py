"""
Emulator Integration Tests
==========================

End-to-end tests: assemble a program, load it into the emulator and run it.
Covers successful runs, each fatal load-time and run-time condition, and
emulator configuration.
"""

import pytest

from vc8000.assembler import assemble
from vc8000.emulator import Emulator, EmulatorConfig
from vc8000.errors import (
    BadInstructionError,
    DivisionByZeroError,
    InputError,
    LoadError,
    MissingHaltError,
)


PRINT_FIVE = """\
         ORG 100
         LOAD 0 A
         WRITE 0 A
         HALT
A        DC 5
         END
"""

DOUBLE = """\
         ORG 100
         READ 0 X
         LOAD 1 X
         ADD 1 X
         STORE 1 Y
         WRITE 0 Y
         HALT
X        DS 1
Y        DS 1
         END
"""

COUNTDOWN = """\
         ORG 100
         LOAD 0 N
LOOP     WRITE 0 N
         SUB 0 ONE
         STORE 0 N
         BP 0 LOOP
         HALT
N        DC 3
ONE      DC 1
         END
"""


class ScriptedIO:
    """Feeds READ from a list and records WRITE."""

    def __init__(self, *lines):
        self.lines = list(lines)
        self.output = []

    def read(self):
        return self.lines.pop(0)

    def write(self, value):
        self.output.append(value)


@pytest.fixture
def io():
    return ScriptedIO()


def make_emulator(io, config=None):
    return Emulator(config, input_func=io.read, output_func=io.write)


# =============================================================================
# Successful Runs
# =============================================================================

class TestPrograms:
    """Test complete programs."""

    def test_print_five(self, io):
        """The program prints 5 and halts."""
        emu = make_emulator(io)
        assert emu.run_program(assemble(PRINT_FIVE))
        assert io.output == [5]
        assert emu.last_error is None
        assert emu.cpu.halted

    def test_read_and_double(self):
        """READ feeds the program."""
        io = ScriptedIO("21")
        emu = make_emulator(io)
        assert emu.run_program(assemble(DOUBLE))
        assert io.output == [42]
        assert emu.read_memory(106) == 21
        assert emu.read_memory(107) == 42

    def test_loop(self, io):
        """Branches drive a loop."""
        emu = make_emulator(io)
        assert emu.run_program(assemble(COUNTDOWN))
        assert io.output == [3, 2, 1]
        assert emu.registers[0] == 0

    def test_run_returns_count(self, io):
        """run() returns the number of instructions executed."""
        emu = make_emulator(io)
        assert emu.run(assemble(PRINT_FIVE)) == 3

    def test_load_skips_empty_contents(self, io):
        """ORG, END and zero words are not written."""
        emu = make_emulator(io)
        loaded = emu.load(assemble(PRINT_FIVE))
        assert loaded == 4
        assert emu.memory.read_block(100, 5) == [50000103, 120000103, 170000000, 5, 0]

    def test_rerun_starts_clean(self, io):
        """Each run starts from cleared memory and registers."""
        emu = make_emulator(io)
        emu.run_program(assemble(COUNTDOWN))
        assert emu.run_program(assemble(COUNTDOWN))
        assert io.output == [3, 2, 1, 3, 2, 1]


# =============================================================================
# Fatal Conditions
# =============================================================================

class TestFatalErrors:
    """Test load-time and run-time failures."""

    def test_placeholder_contents(self, io):
        """Reaching an error placeholder is a bad instruction."""
        emu = make_emulator(io)
        assert not emu.run_program(assemble(" ORG 100\n LOAD 0 UNDEF\n HALT\n END"))
        assert isinstance(emu.last_error, BadInstructionError)
        assert emu.last_error.address == 100

    def test_missing_halt(self, io):
        """Running into an empty word is a missing halt."""
        source = " ORG 200\nA DC 5\n ORG 100\n LOAD 0 A\n END"
        emu = make_emulator(io)
        assert not emu.run_program(assemble(source))
        assert isinstance(emu.last_error, MissingHaltError)
        assert emu.last_error.address == 101
        assert emu.registers[0] == 5

    def test_data_reached(self, io):
        """Running into data is a bad instruction."""
        source = " ORG 100\n LOAD 0 A\nA DC 5\n END"
        emu = make_emulator(io)
        assert not emu.run_program(assemble(source))
        assert isinstance(emu.last_error, BadInstructionError)

    def test_division_by_zero(self, io):
        """Division by zero stops the run with the register unchanged."""
        source = " ORG 100\n LOAD 0 A\n DIV 0 Z\n WRITE 0 A\n HALT\nA DC 10\nZ DC 0\n END"
        emu = make_emulator(io)
        assert not emu.run_program(assemble(source))
        assert isinstance(emu.last_error, DivisionByZeroError)
        assert emu.last_error.message == "Error: division by zero. Terminating program."
        assert emu.registers[0] == 10
        assert io.output == []

    def test_bad_input(self):
        """Non-numeric input is fatal."""
        emu = make_emulator(ScriptedIO("twenty"))
        assert not emu.run_program(assemble(DOUBLE))
        assert isinstance(emu.last_error, InputError)

    def test_location_out_of_bounds(self, io):
        """A statement beyond memory cannot be loaded."""
        emu = make_emulator(io, EmulatorConfig(memory_size=500))
        assert not emu.run_program(assemble(" ORG 600\n HALT\n END"))
        assert isinstance(emu.last_error, LoadError)
        assert emu.last_error.message == "Error: location out of bounds."
        assert emu.last_error.address == 600

    def test_run_raises(self, io):
        """run() raises instead of returning False."""
        emu = make_emulator(io)
        with pytest.raises(MissingHaltError):
            emu.run(assemble(" HALT\n END"))


# =============================================================================
# Configuration
# =============================================================================

class TestConfig:
    """Test EmulatorConfig."""

    def test_defaults(self):
        """The standard machine."""
        config = EmulatorConfig()
        assert config.memory_size == 1_000_000
        assert config.register_count == 10
        assert config.start_address == 100

    def test_start_address(self, io):
        """Execution can start elsewhere."""
        emu = make_emulator(io, EmulatorConfig(start_address=0))
        assert emu.run_program(assemble(" HALT\n END"))

    def test_from_env(self, monkeypatch):
        """Environment variables override the defaults."""
        monkeypatch.setenv("VC8000_MEMORY_SIZE", "2000")
        monkeypatch.setenv("VC8000_START_ADDRESS", "0")
        config = EmulatorConfig.from_env()
        assert config.memory_size == 2000
        assert config.start_address == 0

    def test_from_env_ignores_invalid(self, monkeypatch):
        """Invalid values are ignored."""
        monkeypatch.setenv("VC8000_MEMORY_SIZE", "lots")
        monkeypatch.setenv("VC8000_START_ADDRESS", "-4")
        assert EmulatorConfig.from_env() == EmulatorConfig()

    def test_from_env_unset(self, monkeypatch):
        """No variables means defaults."""
        monkeypatch.delenv("VC8000_MEMORY_SIZE", raising=False)
        monkeypatch.delenv("VC8000_START_ADDRESS", raising=False)
        assert EmulatorConfig.from_env() == EmulatorConfig()
