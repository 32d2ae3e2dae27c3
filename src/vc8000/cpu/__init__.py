"""
VC8000 CPU Package
==================

Instruction set definitions shared by the assembler (which encodes
instruction words) and the emulator (which decodes them). Keeping both
sides on one table is what guarantees the two agree on the word format.

Usage:
    from vc8000.cpu import OpCode, lookup_mnemonic, decode_opcode
"""

from vc8000.cpu.vc8000 import (
    # Constants
    WORD_MAX,
    WORD_MIN,
    WORD_MODULUS,
    MEMORY_SIZE,
    REGISTER_COUNT,
    MAX_ADDRESS,
    MAX_REGISTER,
    PROGRAM_START,
    MAX_STORAGE,
    MAX_LABEL_LENGTH,
    OPCODE_WIDTH,
    ADDRESS_WIDTH,
    WORD_WIDTH,
    # Core types
    OpCode,
    InstructionType,
    # Tables
    OPCODE_NUMBERS,
    OPCODES_BY_NUMBER,
    MACHINE_OPCODES,
    ASSEMBLER_DIRECTIVES,
    REGISTER_ADDRESS_OPCODES,
    REGISTER_REGISTER_OPCODES,
    MNEMONICS,
    # Lookup functions
    lookup_mnemonic,
    classify,
    is_register_register,
    in_word_range,
    # Encoding
    encode_register_address,
    encode_registers,
    decode_opcode,
    decode_register_address,
    decode_registers,
)

__all__ = [
    "WORD_MAX",
    "WORD_MIN",
    "WORD_MODULUS",
    "MEMORY_SIZE",
    "REGISTER_COUNT",
    "MAX_ADDRESS",
    "MAX_REGISTER",
    "PROGRAM_START",
    "MAX_STORAGE",
    "MAX_LABEL_LENGTH",
    "OPCODE_WIDTH",
    "ADDRESS_WIDTH",
    "WORD_WIDTH",
    "OpCode",
    "InstructionType",
    "OPCODE_NUMBERS",
    "OPCODES_BY_NUMBER",
    "MACHINE_OPCODES",
    "ASSEMBLER_DIRECTIVES",
    "REGISTER_ADDRESS_OPCODES",
    "REGISTER_REGISTER_OPCODES",
    "MNEMONICS",
    "lookup_mnemonic",
    "classify",
    "is_register_register",
    "in_word_range",
    "encode_register_address",
    "encode_registers",
    "decode_opcode",
    "decode_register_address",
    "decode_registers",
]
