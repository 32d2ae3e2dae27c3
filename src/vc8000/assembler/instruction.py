"""
VC8000 Instruction Parsing and Translation
==========================================

Each source line goes through three steps:

1. **parse_instruction()** splits the line into label, opcode and operands
   and classifies it. The result is an immutable ParsedInstruction.
2. **location_next_instruction()** computes where the following line
   will be placed. Both passes call it the same way, so Pass I label
   locations and Pass II locations always agree.
3. **translate()** validates the operands against the opcode's family,
   resolves the address label and produces a TranslatedStatement.

Every diagnostic raised along the way travels with the value it belongs to;
nothing is written to shared state.

Source Line Grammar
-------------------
```
[label] opcode [operand1] [operand2]   ; comment
```
- A label must start in column 1. A line starting with whitespace has no label.
- Fields are separated by whitespace and/or commas.
- ``;`` starts a comment that runs to the end of the line.
- Blank and comment-only lines are valid and carry no label.
"""

import re
from dataclasses import dataclass
from typing import Optional

from vc8000.assembler.symtab import SymbolTable, MULTIPLY_DEFINED
from vc8000.assembler.translation import Contents, FieldValidity, TranslatedStatement
from vc8000.cpu import (
    OpCode,
    InstructionType,
    REGISTER_ADDRESS_OPCODES,
    REGISTER_REGISTER_OPCODES,
    MAX_ADDRESS,
    MAX_REGISTER,
    MAX_STORAGE,
    MAX_LABEL_LENGTH,
    classify,
    in_word_range,
    lookup_mnemonic,
)
from vc8000.errors import Diagnostic, ErrorCollector, ErrorKind

_NUMBER_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_number(text: str) -> Optional[int]:
    """
    Parse an optionally signed decimal integer.

    Returns:
        The value, or None if text is not a plain decimal number
    """
    if _NUMBER_PATTERN.fullmatch(text):
        return int(text)
    return None


# =============================================================================
# Parsed Instruction
# =============================================================================

@dataclass(frozen=True)
class ParsedInstruction:
    """
    The fields of one source line.

    Attributes:
        original: The line exactly as read, comment included
        label: Label text, "" if none
        opcode_text: Mnemonic as written, "" if none
        operand1: First operand, "" if none
        operand2: Second operand, "" if none
        opcode: Operation looked up from the mnemonic
        type: Line classification, a function of opcode alone
        operand1_value: Value of operand1 if it is numeric, else None
        operand2_value: Value of operand2 if it is numeric, else None
        diagnostics: Problems found while parsing
    """
    original: str
    label: str
    opcode_text: str
    operand1: str
    operand2: str
    opcode: OpCode
    type: InstructionType
    operand1_value: Optional[int] = None
    operand2_value: Optional[int] = None
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def has_label(self) -> bool:
        return self.label != ""

    @property
    def operand1_is_numeric(self) -> bool:
        return self.operand1_value is not None

    @property
    def operand2_is_numeric(self) -> bool:
        return self.operand2_value is not None

    def location_next_instruction(self, location: int) -> int:
        """Location of the line after this one (see location_next_instruction)."""
        return location_next_instruction(self, location)

    def translate(self, location: int, symtab: SymbolTable) -> TranslatedStatement:
        """Translate this line (see translate)."""
        return translate(self, location, symtab)


def _split_fields(line: str) -> tuple[list[str], bool]:
    """
    Split a comment-free line into [label, opcode, operand1, operand2].

    Returns:
        The four fields ("" where absent) and whether extra fields followed
    """
    line = line.replace(",", " ")
    if not line:
        return ["", "", "", ""], False

    tokens = line.split()
    if line[0].isspace():
        tokens.insert(0, "")

    fields = (tokens + ["", "", "", ""])[:4]
    return fields, len(tokens) > 4


def parse_instruction(line: str) -> ParsedInstruction:
    """
    Parse one source line.

    Records "extra operands" when a fifth field is present and
    "invalid operation" when the mnemonic is unknown. Neither stops the
    line from being classified.

    Args:
        line: Source line without its line terminator

    Returns:
        The parsed, classified line
    """
    errors = ErrorCollector()

    code = line.split(";", 1)[0]
    (label, opcode_text, operand1, operand2), extra = _split_fields(code)
    if extra:
        errors.add(ErrorKind.FORMAT, "Error: extra operands.")

    if not label and not opcode_text:
        opcode = OpCode.COMM
    else:
        opcode = lookup_mnemonic(opcode_text)

    line_type = classify(opcode)
    if line_type is InstructionType.ERROR:
        errors.add(ErrorKind.LEXICAL, "Error: invalid operation.")

    return ParsedInstruction(
        original=line,
        label=label,
        opcode_text=opcode_text.upper(),
        operand1=operand1,
        operand2=operand2,
        opcode=opcode,
        type=line_type,
        operand1_value=parse_number(operand1),
        operand2_value=parse_number(operand2),
        diagnostics=tuple(errors.diagnostics),
    )


# =============================================================================
# Location Advance
# =============================================================================

def location_next_instruction(inst: ParsedInstruction, location: int) -> int:
    """
    Compute the location of the line following inst.

    - ORG: the operand, without any range check (non-numeric counts as 0)
    - DS: location + operand when the operand is 1-999,999, otherwise
      location + 1 so that assembly keeps moving
    - END and comments: unchanged
    - everything else: location + 1
    """
    if inst.opcode is OpCode.ORG:
        return inst.operand1_value if inst.operand1_is_numeric else 0

    if inst.opcode is OpCode.DS:
        size = inst.operand1_value
        if size is None or size < 1 or size > MAX_STORAGE:
            return location + 1
        return location + size

    if inst.opcode in (OpCode.COMM, OpCode.END):
        return location

    return location + 1


# =============================================================================
# Translation
# =============================================================================

def _is_register(value: Optional[int]) -> bool:
    return value is not None and 0 <= value <= MAX_REGISTER


def _register_error_kind(value: Optional[int]) -> ErrorKind:
    return ErrorKind.LEXICAL if value is None else ErrorKind.SEMANTIC


def translate(
    inst: ParsedInstruction,
    location: int,
    symtab: SymbolTable,
) -> TranslatedStatement:
    """
    Translate a parsed line into a TranslatedStatement.

    Field requirements by opcode family:

    - Register + address (ADD..STORE, READ, WRITE, B, BM, BZ, BP):
      operand1 a register 0-9; operand2 a defined label that does not
      start with a digit and is at most 10 characters long.
    - Register + register (ADDR, SUBR, MULTR, DIVR): both operands
      registers 0-9.
    - HALT: no operands (extra ones only produce a warning).
    - DC: one constant within the word range.
    - DS: one size between 1 and 999,999.
    - ORG: one location between 0 and 999,999.

    Args:
        inst: The parsed line
        location: Location assigned to the line
        symtab: Symbol table completed by Pass I

    Returns:
        The translated statement, carrying the parse diagnostics followed by
        the translation diagnostics
    """
    errors = ErrorCollector()
    errors.extend(inst.diagnostics)

    register1 = register2 = address = value = None
    invalid_register1 = invalid_register2 = invalid_address = invalid_value = False

    opcode = inst.opcode

    if opcode in REGISTER_ADDRESS_OPCODES:
        # Operand 2 is a label.
        if not inst.operand2:
            errors.add(ErrorKind.SEMANTIC, "Error: missing operands.")
            invalid_address = True
        elif inst.operand2[0] in "0123456789":
            errors.add(
                ErrorKind.LEXICAL,
                "Error: Operand 2 is a label and cannot begin with a digit.",
            )
            invalid_address = True
        if len(inst.operand2) > MAX_LABEL_LENGTH:
            errors.add(
                ErrorKind.LEXICAL,
                "Error: Operand 2 is too long. Labels are a maximum of 10 characters.",
            )
            invalid_address = True

        # A missing operand 1 was already reported as missing operands.
        if not inst.operand1:
            invalid_register1 = True
        elif not _is_register(inst.operand1_value):
            errors.add(
                _register_error_kind(inst.operand1_value),
                "Error: Operand 1 must be a register number between 0 and 9.",
            )
            invalid_register1 = True
        register1 = inst.operand1_value

        if not invalid_address:
            address = symtab.lookup_symbol(inst.operand2)
            if address is None:
                errors.add(ErrorKind.SEMANTIC, "Error: label not found.")
                invalid_address = True
            elif address == MULTIPLY_DEFINED:
                errors.add(ErrorKind.SEMANTIC, "Error: multiply defined symbol.")
                invalid_address = True
            elif not 0 <= address <= MAX_ADDRESS:
                errors.add(ErrorKind.SEMANTIC, "Error: address out of range.")
                invalid_address = True

    elif opcode in REGISTER_REGISTER_OPCODES:
        if not inst.operand2:
            errors.add(ErrorKind.SEMANTIC, "Error: missing operands.")
            invalid_register2 = True
        elif not _is_register(inst.operand2_value):
            errors.add(
                _register_error_kind(inst.operand2_value),
                "Error: Operand 2 must be a register number between 0 and 9.",
            )
            invalid_register2 = True

        if not inst.operand1:
            invalid_register1 = True
        elif not _is_register(inst.operand1_value):
            errors.add(
                _register_error_kind(inst.operand1_value),
                "Error: Operand 1 must be a register number between 0 and 9.",
            )
            invalid_register1 = True
        register1 = inst.operand1_value
        register2 = inst.operand2_value

    elif opcode is OpCode.HALT:
        if inst.operand1 or inst.operand2:
            errors.add(ErrorKind.FORMAT, "Error: extra operands.")
        register1 = 0
        address = 0

    elif opcode is OpCode.DC:
        if inst.operand2:
            errors.add(ErrorKind.FORMAT, "Error: extra operands.")
        value = inst.operand1_value
        if value is None or not in_word_range(value):
            invalid_value = True
            errors.add(
                ErrorKind.SEMANTIC if value is not None else ErrorKind.LEXICAL,
                "Error: Operand 1 must be a value between -999,999,999 and 999,999,999.",
            )

    elif opcode is OpCode.DS:
        if inst.operand2:
            errors.add(ErrorKind.FORMAT, "Error: extra operands.")
        size = inst.operand1_value
        if size is None or size < 1 or size > MAX_STORAGE:
            invalid_value = True
            errors.add(
                ErrorKind.SEMANTIC if size is not None else ErrorKind.LEXICAL,
                "Error: Operand 1 must be a value between 1 and 999,999.",
            )

    elif opcode is OpCode.ORG:
        if inst.operand2:
            errors.add(ErrorKind.FORMAT, "Error: extra operands.")
        origin = inst.operand1_value
        if origin is None or not 0 <= origin <= MAX_ADDRESS:
            errors.add(
                ErrorKind.SEMANTIC if origin is not None else ErrorKind.LEXICAL,
                "Error: Operand 1 must be a location between 0 and 999,999.",
            )

    contents = Contents(
        opcode=opcode,
        register1=register1,
        register2=register2,
        address=address,
        value=value,
        validity=FieldValidity(
            invalid_opcode=opcode is OpCode.ERR,
            invalid_register1=invalid_register1,
            invalid_register2=invalid_register2,
            invalid_address=invalid_address,
            invalid_value=invalid_value,
        ),
    )
    return TranslatedStatement(
        location=location,
        contents=contents,
        original=inst.original,
        diagnostics=tuple(errors.diagnostics),
    )
