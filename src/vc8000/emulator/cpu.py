"""
VC8000 CPU
==========

Fetch-decode-execute loop for the VC8000 decimal machine.

Each step fetches the word at the instruction pointer and checks it:

- ``0``: nothing was loaded there, so the program ran off its end
  (MissingHaltError)
- negative: an error placeholder or a data word (BadInstructionError)
- leading two digits not ADD..HALT: BadInstructionError

Otherwise the word is decoded and dispatched. Branches set the instruction
pointer; every other instruction advances it by one. HALT stops the loop.

Arithmetic
----------
ADD, SUB, MULT and their register forms never fault on overflow. A result
outside the word range keeps its sign and is reduced modulo 1,000,000,000.
DIV and DIVR truncate toward zero; a quotient always fits, so no reduction
is applied. A zero divisor raises DivisionByZeroError before any register
is touched.

I/O Hooks
---------
READ and WRITE go through two callables so the CPU never touches a
terminal itself:

- ``input_func() -> str``: return one line of operator input
- ``output_func(value: int)``: display one word
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from vc8000.assembler.instruction import parse_number
from vc8000.cpu import (
    OpCode,
    PROGRAM_START,
    WORD_MODULUS,
    decode_opcode,
    decode_register_address,
    decode_registers,
    in_word_range,
)
from vc8000.emulator.memory import Memory, Registers
from vc8000.errors import (
    BadInstructionError,
    DivisionByZeroError,
    InputError,
    MissingHaltError,
)

logger = logging.getLogger(__name__)


def wrap_word(value: int) -> int:
    """
    Bring an arithmetic result back into the word range.

    Values already in range are returned unchanged. Others keep their sign
    and are reduced modulo 1,000,000,000.

    Example:
        >>> wrap_word(999_999_999 + 2)
        1
        >>> wrap_word(-1_500_000_000)
        -500000000
    """
    if in_word_range(value):
        return value
    sign = -1 if value < 0 else 1
    return sign * (abs(value) % WORD_MODULUS)


def divide(dividend: int, divisor: int) -> int:
    """Integer division truncating toward zero. divisor must be nonzero."""
    quotient = abs(dividend) // abs(divisor)
    return -quotient if (dividend < 0) != (divisor < 0) else quotient


@dataclass
class CPUState:
    """
    Execution state apart from memory and registers.

    Attributes:
        ip: Address of the next instruction
        halted: True once HALT has executed
        instructions: Number of instructions executed so far
    """
    ip: int = PROGRAM_START
    halted: bool = False
    instructions: int = 0


class VC8000:
    """
    VC8000 CPU bound to one memory and one register file.

    Example:
        >>> cpu = VC8000(memory, registers)
        >>> cpu.output_func = print
        >>> cpu.execute()
    """

    def __init__(
        self,
        memory: Memory,
        registers: Registers,
        start_address: int = PROGRAM_START,
    ):
        self.memory = memory
        self.registers = registers
        self.start_address = start_address
        self.state = CPUState(ip=start_address)

        self.input_func: Callable[[], str] = lambda: ""
        self.output_func: Callable[[int], None] = lambda value: None

        # on_instruction(ip, code) -> bool: return False to stop execution
        self.on_instruction: Optional[Callable[[int, int], bool]] = None

        self._handlers: dict[OpCode, Callable[[int], None]] = {
            OpCode.ADD: self._op_add,
            OpCode.SUB: self._op_sub,
            OpCode.MULT: self._op_mult,
            OpCode.DIV: self._op_div,
            OpCode.LOAD: self._op_load,
            OpCode.STORE: self._op_store,
            OpCode.ADDR: self._op_addr,
            OpCode.SUBR: self._op_subr,
            OpCode.MULTR: self._op_multr,
            OpCode.DIVR: self._op_divr,
            OpCode.READ: self._op_read,
            OpCode.WRITE: self._op_write,
            OpCode.B: self._op_b,
            OpCode.BM: self._op_bm,
            OpCode.BZ: self._op_bz,
            OpCode.BP: self._op_bp,
            OpCode.HALT: self._op_halt,
        }

    @property
    def ip(self) -> int:
        return self.state.ip

    @ip.setter
    def ip(self, value: int) -> None:
        self.state.ip = value

    @property
    def halted(self) -> bool:
        return self.state.halted

    def reset(self) -> None:
        """Return to the start address. Memory and registers are untouched."""
        self.state = CPUState(ip=self.start_address)

    # ========================================
    # Main Execution Loop
    # ========================================

    def execute(self, max_instructions: Optional[int] = None) -> int:
        """
        Run until HALT.

        Args:
            max_instructions: Stop after this many instructions (None for
                              no limit)

        Returns:
            Number of instructions executed by this call

        Raises:
            EmulatorError: On the first fatal condition. Execution stops
                           there; nothing is retried.

        Note:
            Execution may also stop early, without HALT, if on_instruction
            returns False or max_instructions is reached.
        """
        executed = 0
        while not self.state.halted:
            if max_instructions is not None and executed >= max_instructions:
                break
            code = self._fetch()
            if self.on_instruction and not self.on_instruction(self.state.ip, code):
                break
            self._dispatch(code)
            executed += 1
        return executed

    def _fetch(self) -> int:
        ip = self.state.ip
        if not self.memory.in_bounds(ip):
            raise MissingHaltError(ip)
        code = self.memory.read(ip)
        if code == 0:
            raise MissingHaltError(ip)
        if code < 0:
            raise BadInstructionError(ip, code)
        return code

    def _dispatch(self, code: int) -> None:
        opcode = decode_opcode(code)
        if opcode is None:
            raise BadInstructionError(self.state.ip, code)

        self.state.instructions += 1
        self._handlers[opcode](code)

    # ========================================
    # Operand Access
    # ========================================

    def _register(self, code: int, register: int) -> int:
        if register >= len(self.registers):
            raise BadInstructionError(self.state.ip, code)
        return register

    def _register_address(self, code: int) -> tuple[int, int]:
        register, address = decode_register_address(code)
        if not self.memory.in_bounds(address):
            raise BadInstructionError(self.state.ip, code)
        return self._register(code, register), address

    def _register_pair(self, code: int) -> tuple[int, int]:
        register1, register2 = decode_registers(code)
        return self._register(code, register1), self._register(code, register2)

    def _advance(self) -> None:
        self.state.ip += 1

    # ========================================
    # Arithmetic (register + address)
    # ========================================

    def _op_add(self, code: int) -> None:
        reg, addr = self._register_address(code)
        self.registers[reg] = wrap_word(self.registers[reg] + self.memory.read(addr))
        self._advance()

    def _op_sub(self, code: int) -> None:
        reg, addr = self._register_address(code)
        self.registers[reg] = wrap_word(self.registers[reg] - self.memory.read(addr))
        self._advance()

    def _op_mult(self, code: int) -> None:
        reg, addr = self._register_address(code)
        self.registers[reg] = wrap_word(self.registers[reg] * self.memory.read(addr))
        self._advance()

    def _op_div(self, code: int) -> None:
        reg, addr = self._register_address(code)
        divisor = self.memory.read(addr)
        if divisor == 0:
            raise DivisionByZeroError(self.state.ip)
        self.registers[reg] = divide(self.registers[reg], divisor)
        self._advance()

    def _op_load(self, code: int) -> None:
        reg, addr = self._register_address(code)
        self.registers[reg] = self.memory.read(addr)
        self._advance()

    def _op_store(self, code: int) -> None:
        reg, addr = self._register_address(code)
        self.memory.write(addr, self.registers[reg])
        self._advance()

    # ========================================
    # Arithmetic (register + register)
    # ========================================

    def _op_addr(self, code: int) -> None:
        r1, r2 = self._register_pair(code)
        self.registers[r1] = wrap_word(self.registers[r1] + self.registers[r2])
        self._advance()

    def _op_subr(self, code: int) -> None:
        r1, r2 = self._register_pair(code)
        self.registers[r1] = wrap_word(self.registers[r1] - self.registers[r2])
        self._advance()

    def _op_multr(self, code: int) -> None:
        r1, r2 = self._register_pair(code)
        self.registers[r1] = wrap_word(self.registers[r1] * self.registers[r2])
        self._advance()

    def _op_divr(self, code: int) -> None:
        r1, r2 = self._register_pair(code)
        divisor = self.registers[r2]
        if divisor == 0:
            raise DivisionByZeroError(self.state.ip)
        self.registers[r1] = divide(self.registers[r1], divisor)
        self._advance()

    # ========================================
    # Input / Output
    # ========================================

    def _op_read(self, code: int) -> None:
        _, addr = self._register_address(code)
        text = self.input_func()
        tokens = text.split()
        value = parse_number(tokens[0]) if tokens else None
        if value is None or not in_word_range(value):
            raise InputError(self.state.ip, text)
        self.memory.write(addr, value)
        self._advance()

    def _op_write(self, code: int) -> None:
        _, addr = self._register_address(code)
        self.output_func(self.memory.read(addr))
        self._advance()

    # ========================================
    # Control Flow
    # ========================================

    def _op_b(self, code: int) -> None:
        _, addr = self._register_address(code)
        self.state.ip = addr

    def _op_bm(self, code: int) -> None:
        reg, addr = self._register_address(code)
        self._branch_if(self.registers[reg] < 0, addr)

    def _op_bz(self, code: int) -> None:
        reg, addr = self._register_address(code)
        self._branch_if(self.registers[reg] == 0, addr)

    def _op_bp(self, code: int) -> None:
        reg, addr = self._register_address(code)
        self._branch_if(self.registers[reg] > 0, addr)

    def _branch_if(self, condition: bool, address: int) -> None:
        if condition:
            self.state.ip = address
        else:
            self._advance()

    def _op_halt(self, code: int) -> None:
        logger.debug(
            f"HALT at {self.state.ip} after {self.state.instructions} instructions"
        )
        self.state.halted = True
