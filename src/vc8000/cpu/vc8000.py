"""
VC8000 Instruction Set Definition
=================================

The VC8000 is a decimal accumulator-register machine. Memory and registers
hold signed decimal words in the range -999,999,999 to 999,999,999, and
every machine instruction fits in one word.

Instruction Word Format
-----------------------
Machine instructions are nine decimal digits::

    OO R AAAAAA     register + address   (ADD, LOAD, B, ...)
    OO R S 00000    register + register  (ADDR, SUBR, MULTR, DIVR)

where ``OO`` is the two-digit opcode number, ``R`` the first register,
``S`` the second register and ``AAAAAA`` a six-digit address. A DC
constant is simply the nine-digit magnitude with an optional leading ``-``.

Opcode Numbering
----------------
The opcode number written into the instruction word is declared explicitly
in OPCODE_NUMBERS. It is not derived from the order in which the OpCode
members are declared, so reordering the enum never changes the binary format.

Reference
---------
| Mnemonic | No. | Effect                                  |
|----------|-----|-----------------------------------------|
| ADD      | 01  | Reg <- c(Reg) + c(ADDR)                 |
| SUB      | 02  | Reg <- c(Reg) - c(ADDR)                 |
| MULT     | 03  | Reg <- c(Reg) * c(ADDR)                 |
| DIV      | 04  | Reg <- c(Reg) / c(ADDR)                 |
| LOAD     | 05  | Reg <- c(ADDR)                          |
| STORE    | 06  | ADDR <- c(Reg)                          |
| ADDR     | 07  | Reg1 <- c(Reg1) + c(Reg2)               |
| SUBR     | 08  | Reg1 <- c(Reg1) - c(Reg2)               |
| MULTR    | 09  | Reg1 <- c(Reg1) * c(Reg2)               |
| DIVR     | 10  | Reg1 <- c(Reg1) / c(Reg2)               |
| READ     | 11  | ADDR <- number read from input          |
| WRITE    | 12  | display c(ADDR)                         |
| B        | 13  | go to ADDR                              |
| BM       | 14  | go to ADDR if c(Reg) < 0                |
| BZ       | 15  | go to ADDR if c(Reg) = 0                |
| BP       | 16  | go to ADDR if c(Reg) > 0                |
| HALT     | 17  | terminate execution                     |
"""

from enum import Enum, auto
from typing import Optional


# =============================================================================
# Machine Constants
# =============================================================================

WORD_MAX = 999_999_999
WORD_MIN = -WORD_MAX
WORD_MODULUS = 1_000_000_000

MEMORY_SIZE = 1_000_000
REGISTER_COUNT = 10
MAX_ADDRESS = MEMORY_SIZE - 1
MAX_REGISTER = REGISTER_COUNT - 1

# Programs conventionally start executing just past the first 100 words.
PROGRAM_START = 100

# DS may reserve between 1 and this many words.
MAX_STORAGE = 999_999

# Labels are at most this many characters.
MAX_LABEL_LENGTH = 10

# Field widths of the instruction word.
OPCODE_WIDTH = 2
ADDRESS_WIDTH = 6
WORD_WIDTH = 9

_OPCODE_SCALE = 10_000_000
_REG1_SCALE = 1_000_000
_REG2_SCALE = 100_000


# =============================================================================
# Opcodes and Classification
# =============================================================================

class OpCode(Enum):
    """Every symbolic operation the assembler understands."""
    ERR = auto()     # not a known mnemonic
    ADD = auto()
    SUB = auto()
    MULT = auto()
    DIV = auto()
    LOAD = auto()
    STORE = auto()
    ADDR = auto()
    SUBR = auto()
    MULTR = auto()
    DIVR = auto()
    READ = auto()
    WRITE = auto()
    B = auto()
    BM = auto()
    BZ = auto()
    BP = auto()
    HALT = auto()
    ORG = auto()
    DC = auto()
    DS = auto()
    END = auto()
    COMM = auto()    # comment or blank line

    def __str__(self) -> str:
        return self.name


class InstructionType(Enum):
    """Classification of a source line."""
    MACHINE_LANGUAGE = auto()  # ADD..HALT, produces executable code
    ASSEMBLER_INSTR = auto()   # ORG, DC, DS
    COMMENT = auto()           # comment or blank line
    END = auto()               # END
    ERROR = auto()             # unknown mnemonic


# Wire numbering of the machine instructions. Only these opcodes can
# appear in an instruction word.
OPCODE_NUMBERS: dict[OpCode, int] = {
    OpCode.ADD: 1,
    OpCode.SUB: 2,
    OpCode.MULT: 3,
    OpCode.DIV: 4,
    OpCode.LOAD: 5,
    OpCode.STORE: 6,
    OpCode.ADDR: 7,
    OpCode.SUBR: 8,
    OpCode.MULTR: 9,
    OpCode.DIVR: 10,
    OpCode.READ: 11,
    OpCode.WRITE: 12,
    OpCode.B: 13,
    OpCode.BM: 14,
    OpCode.BZ: 15,
    OpCode.BP: 16,
    OpCode.HALT: 17,
}

OPCODES_BY_NUMBER: dict[int, OpCode] = {
    number: opcode for opcode, number in OPCODE_NUMBERS.items()
}

MACHINE_OPCODES = frozenset(OPCODE_NUMBERS)

ASSEMBLER_DIRECTIVES = frozenset({OpCode.ORG, OpCode.DC, OpCode.DS})

# Opcodes taking a register and a symbolic address. READ, WRITE and B
# ignore the register at run time but it is still validated.
REGISTER_ADDRESS_OPCODES = frozenset({
    OpCode.ADD, OpCode.SUB, OpCode.MULT, OpCode.DIV,
    OpCode.LOAD, OpCode.STORE,
    OpCode.BM, OpCode.BZ, OpCode.BP,
    OpCode.READ, OpCode.WRITE, OpCode.B,
})

REGISTER_REGISTER_OPCODES = frozenset({
    OpCode.ADDR, OpCode.SUBR, OpCode.MULTR, OpCode.DIVR,
})

# Source mnemonics (upper case). ERR and COMM have no spelling.
MNEMONICS: dict[str, OpCode] = {
    opcode.name: opcode
    for opcode in OpCode
    if opcode not in (OpCode.ERR, OpCode.COMM)
}


# =============================================================================
# Lookup Functions
# =============================================================================

def lookup_mnemonic(mnemonic: str) -> OpCode:
    """
    Map a mnemonic to its opcode, ignoring case.

    Returns:
        The matching OpCode, or OpCode.ERR if the mnemonic is unknown
    """
    return MNEMONICS.get(mnemonic.upper(), OpCode.ERR)


def classify(opcode: OpCode) -> InstructionType:
    """Return the line classification implied by an opcode."""
    if opcode in MACHINE_OPCODES:
        return InstructionType.MACHINE_LANGUAGE
    if opcode in ASSEMBLER_DIRECTIVES:
        return InstructionType.ASSEMBLER_INSTR
    if opcode is OpCode.END:
        return InstructionType.END
    if opcode is OpCode.COMM:
        return InstructionType.COMMENT
    return InstructionType.ERROR


def is_register_register(opcode: OpCode) -> bool:
    """True for ADDR, SUBR, MULTR and DIVR."""
    return opcode in REGISTER_REGISTER_OPCODES


def in_word_range(value: int) -> bool:
    """True if value fits in a VC8000 word."""
    return WORD_MIN <= value <= WORD_MAX


# =============================================================================
# Encoding and Decoding
# =============================================================================

def encode_register_address(opcode: OpCode, register: int, address: int) -> int:
    """
    Build the instruction word ``OO R AAAAAA``.

    Raises:
        ValueError: If the opcode is not a machine instruction or a field
                    does not fit its width
    """
    number = OPCODE_NUMBERS.get(opcode)
    if number is None:
        raise ValueError(f"{opcode} is not a machine instruction")
    if not 0 <= register <= MAX_REGISTER:
        raise ValueError(f"register {register} out of range")
    if not 0 <= address <= MAX_ADDRESS:
        raise ValueError(f"address {address} out of range")
    return number * _OPCODE_SCALE + register * _REG1_SCALE + address


def encode_registers(opcode: OpCode, register1: int, register2: int) -> int:
    """
    Build the instruction word ``OO R S 00000``.

    Raises:
        ValueError: If the opcode is not a machine instruction or a
                    register is outside 0-9
    """
    number = OPCODE_NUMBERS.get(opcode)
    if number is None:
        raise ValueError(f"{opcode} is not a machine instruction")
    for register in (register1, register2):
        if not 0 <= register <= MAX_REGISTER:
            raise ValueError(f"register {register} out of range")
    return number * _OPCODE_SCALE + register1 * _REG1_SCALE + register2 * _REG2_SCALE


def decode_opcode(code: int) -> Optional[OpCode]:
    """
    Return the machine opcode in the leading two digits of a word.

    Returns:
        The OpCode, or None if the number is not ADD..HALT
    """
    return OPCODES_BY_NUMBER.get(code // _OPCODE_SCALE)


def decode_register_address(code: int) -> tuple[int, int]:
    """Split a non-negative instruction word into (register, address)."""
    return (code // _REG1_SCALE) % 10, code % _REG1_SCALE


def decode_registers(code: int) -> tuple[int, int]:
    """Split a non-negative instruction word into (register1, register2)."""
    return (code // _REG1_SCALE) % 10, (code // _REG2_SCALE) % 10
