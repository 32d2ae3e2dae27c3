"""
VC8000 CPU Unit Tests
=====================

Tests for the VC8000 CPU, covering:
- Fetch checks (empty word, negative word, unknown opcode)
- Arithmetic with overflow wraparound
- Division truncation and division by zero
- Branches
- READ / WRITE through the I/O hooks
"""

import pytest

from vc8000.cpu import OpCode, encode_register_address, encode_registers
from vc8000.emulator import VC8000, Memory, Registers, wrap_word, divide
from vc8000.errors import (
    BadInstructionError,
    DivisionByZeroError,
    InputError,
    MissingHaltError,
)


HALT = encode_register_address(OpCode.HALT, 0, 0)


@pytest.fixture
def cpu():
    """CPU with a small memory, starting at address 0."""
    return VC8000(Memory(1000), Registers(), start_address=0)


# =============================================================================
# Helper Functions
# =============================================================================

def load_program(cpu, *words, at=0):
    for offset, word in enumerate(words):
        cpu.memory.write(at + offset, word)


def ra(opcode, register, address):
    return encode_register_address(opcode, register, address)


def rr(opcode, register1, register2):
    return encode_registers(opcode, register1, register2)


class TestWrapWord:
    """Test overflow reduction."""

    def test_in_range_unchanged(self):
        """Values in range are left alone."""
        assert wrap_word(999_999_999) == 999_999_999
        assert wrap_word(-999_999_999) == -999_999_999

    def test_positive_overflow(self):
        """Overflow keeps the sign and reduces modulo 10**9."""
        assert wrap_word(1_000_000_001) == 1
        assert wrap_word(1_999_999_998) == 999_999_998

    def test_negative_overflow(self):
        """Negative overflow stays negative."""
        assert wrap_word(-1_500_000_000) == -500_000_000

    def test_exact_modulus(self):
        """10**9 wraps to 0."""
        assert wrap_word(1_000_000_000) == 0


class TestDivide:
    """Test integer division."""

    @pytest.mark.parametrize("a,b,q", [
        (7, 2, 3),
        (-7, 2, -3),
        (7, -2, -3),
        (-7, -2, 3),
        (0, 5, 0),
    ])
    def test_truncates_toward_zero(self, a, b, q):
        """Quotients are truncated toward zero."""
        assert divide(a, b) == q


# =============================================================================
# Fetch
# =============================================================================

class TestFetch:
    """Test the checks made on every fetched word."""

    def test_empty_word(self, cpu):
        """Running into 0 is a missing halt."""
        with pytest.raises(MissingHaltError) as exc_info:
            cpu.execute()
        assert exc_info.value.address == 0
        assert exc_info.value.message == (
            "Error: missing halt statement. Terminating program."
        )

    def test_negative_word(self, cpu):
        """An error placeholder is a bad instruction."""
        load_program(cpu, -1)
        with pytest.raises(BadInstructionError):
            cpu.execute()

    def test_unknown_opcode(self, cpu):
        """Opcode numbers outside 1-17 are bad instructions."""
        load_program(cpu, 990000000)
        with pytest.raises(BadInstructionError):
            cpu.execute()

    def test_opcode_zero(self, cpu):
        """A small positive data word decodes as opcode 0."""
        load_program(cpu, 5)
        with pytest.raises(BadInstructionError) as exc_info:
            cpu.execute()
        assert exc_info.value.code == 5

    def test_past_end_of_memory(self, cpu):
        """Running off the end of memory is a missing halt."""
        cpu.ip = 999
        load_program(cpu, ra(OpCode.LOAD, 0, 0), at=999)
        with pytest.raises(MissingHaltError) as exc_info:
            cpu.execute()
        assert exc_info.value.address == 1000

    def test_halt(self, cpu):
        """HALT stops execution and counts as an instruction."""
        load_program(cpu, HALT)
        assert cpu.execute() == 1
        assert cpu.halted
        assert cpu.ip == 0

    def test_on_instruction_stop(self, cpu):
        """A hook returning False stops before executing."""
        load_program(cpu, HALT)
        cpu.on_instruction = lambda ip, code: False
        assert cpu.execute() == 0
        assert not cpu.halted

    def test_max_instructions(self, cpu):
        """Execution can be limited."""
        load_program(cpu, ra(OpCode.B, 0, 0))
        assert cpu.execute(max_instructions=5) == 5
        assert not cpu.halted

    def test_nothing_runs_after_halt(self, cpu):
        """Once halted, execute() dispatches nothing more."""
        load_program(cpu, HALT)
        cpu.execute()
        cpu.memory.write(0, ra(OpCode.B, 0, 5))
        assert cpu.execute() == 0
        assert cpu.state.instructions == 1
        assert cpu.ip == 0

    def test_no_single_step(self, cpu):
        """Execution is only driven through execute()."""
        assert not hasattr(cpu, "step")

    def test_reset(self, cpu):
        """reset() returns to the start address."""
        load_program(cpu, HALT)
        cpu.execute()
        cpu.reset()
        assert cpu.ip == 0
        assert not cpu.halted


# =============================================================================
# Arithmetic
# =============================================================================

class TestArithmetic:
    """Test register + address and register + register arithmetic."""

    def test_load_store(self, cpu):
        """LOAD and STORE copy words."""
        load_program(cpu, ra(OpCode.LOAD, 2, 50), ra(OpCode.STORE, 2, 51), HALT)
        cpu.memory.write(50, -123)
        cpu.execute()
        assert cpu.registers[2] == -123
        assert cpu.memory.read(51) == -123

    def test_add(self, cpu):
        """ADD adds memory to a register."""
        load_program(cpu, ra(OpCode.ADD, 1, 50), HALT)
        cpu.memory.write(50, 30)
        cpu.registers[1] = 12
        cpu.execute()
        assert cpu.registers[1] == 42

    def test_add_overflow_wraps(self, cpu):
        """ADD overflow wraps instead of faulting."""
        load_program(cpu, ra(OpCode.ADD, 0, 50), HALT)
        cpu.memory.write(50, 999_999_999)
        cpu.registers[0] = 999_999_999
        cpu.execute()
        assert cpu.registers[0] == 999_999_998

    def test_sub_overflow_wraps(self, cpu):
        """SUB below the range stays negative."""
        load_program(cpu, ra(OpCode.SUB, 0, 50), HALT)
        cpu.memory.write(50, 2)
        cpu.registers[0] = -999_999_999
        cpu.execute()
        assert cpu.registers[0] == -1

    def test_mult_overflow_wraps(self, cpu):
        """MULT reduces large products."""
        load_program(cpu, ra(OpCode.MULT, 0, 50), HALT)
        cpu.memory.write(50, 100_000)
        cpu.registers[0] = 100_001
        cpu.execute()
        assert cpu.registers[0] == 100_000

    def test_div(self, cpu):
        """DIV truncates toward zero."""
        load_program(cpu, ra(OpCode.DIV, 0, 50), HALT)
        cpu.memory.write(50, 2)
        cpu.registers[0] = -7
        cpu.execute()
        assert cpu.registers[0] == -3

    def test_div_by_zero(self, cpu):
        """DIV by zero is fatal and leaves the register alone."""
        load_program(cpu, ra(OpCode.DIV, 0, 50), HALT)
        cpu.registers[0] = 10
        with pytest.raises(DivisionByZeroError) as exc_info:
            cpu.execute()
        assert exc_info.value.address == 0
        assert cpu.registers[0] == 10
        assert cpu.ip == 0
        assert not cpu.halted

    def test_register_forms(self, cpu):
        """ADDR, SUBR and MULTR use two registers."""
        load_program(
            cpu,
            rr(OpCode.ADDR, 0, 1),
            rr(OpCode.MULTR, 0, 1),
            rr(OpCode.SUBR, 0, 2),
            HALT,
        )
        cpu.registers[0] = 2
        cpu.registers[1] = 3
        cpu.registers[2] = 20
        cpu.execute()
        assert cpu.registers[0] == (2 + 3) * 3 - 20

    def test_addr_overflow_wraps(self, cpu):
        """ADDR overflow wraps."""
        load_program(cpu, rr(OpCode.ADDR, 0, 0), HALT)
        cpu.registers[0] = 600_000_000
        cpu.execute()
        assert cpu.registers[0] == 200_000_000

    def test_divr(self, cpu):
        """DIVR divides registers."""
        load_program(cpu, rr(OpCode.DIVR, 3, 4), HALT)
        cpu.registers[3] = 100
        cpu.registers[4] = -7
        cpu.execute()
        assert cpu.registers[3] == -14

    def test_divr_by_zero(self, cpu):
        """DIVR by zero stops at once, without running the next word."""
        load_program(cpu, rr(OpCode.DIVR, 3, 4), ra(OpCode.LOAD, 3, 50), HALT)
        cpu.registers[3] = 100
        cpu.memory.write(50, 1)
        with pytest.raises(DivisionByZeroError):
            cpu.execute()
        assert cpu.registers[3] == 100
        assert cpu.ip == 0


# =============================================================================
# Control Flow
# =============================================================================

class TestBranches:
    """Test B, BM, BZ and BP."""

    def test_unconditional(self, cpu):
        """B always jumps."""
        load_program(cpu, ra(OpCode.B, 0, 10))
        load_program(cpu, HALT, at=10)
        cpu.execute()
        assert cpu.ip == 10

    @pytest.mark.parametrize("opcode,value,taken", [
        (OpCode.BM, -1, True),
        (OpCode.BM, 0, False),
        (OpCode.BZ, 0, True),
        (OpCode.BZ, 5, False),
        (OpCode.BP, 5, True),
        (OpCode.BP, -5, False),
    ])
    def test_conditional(self, cpu, opcode, value, taken):
        """Conditional branches test the register."""
        load_program(cpu, ra(opcode, 4, 10), HALT)
        load_program(cpu, HALT, at=10)
        cpu.registers[4] = value
        cpu.execute()
        assert cpu.ip == (10 if taken else 1)


# =============================================================================
# Input / Output
# =============================================================================

class TestInputOutput:
    """Test READ and WRITE through the hooks."""

    def test_write(self, cpu):
        """WRITE passes the word to output_func."""
        output = []
        cpu.output_func = output.append
        load_program(cpu, ra(OpCode.WRITE, 0, 50), HALT)
        cpu.memory.write(50, -17)
        cpu.execute()
        assert output == [-17]

    def test_read(self, cpu):
        """READ stores the first token of the input line."""
        cpu.input_func = lambda: "  42 and more"
        load_program(cpu, ra(OpCode.READ, 0, 50), HALT)
        cpu.execute()
        assert cpu.memory.read(50) == 42

    def test_read_signed(self, cpu):
        """Signed input is accepted."""
        cpu.input_func = lambda: "-999999999"
        load_program(cpu, ra(OpCode.READ, 0, 50), HALT)
        cpu.execute()
        assert cpu.memory.read(50) == -999_999_999

    @pytest.mark.parametrize("text", ["abc", "", "1000000000", "12x", "1.5"])
    def test_read_invalid(self, cpu, text):
        """Anything but an in-range integer is fatal."""
        cpu.input_func = lambda: text
        load_program(cpu, ra(OpCode.READ, 0, 50), HALT)
        with pytest.raises(InputError) as exc_info:
            cpu.execute()
        assert exc_info.value.text == text
        assert cpu.memory.read(50) == 0
