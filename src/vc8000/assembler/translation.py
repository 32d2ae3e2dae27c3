"""
VC8000 Translated Statements
============================

Pass II turns every source line into a TranslatedStatement: the line's
location, its machine contents, the original text and the diagnostics
raised for it. The ordered sequence of statements is the Translation,
which is both the listing shown to the user and the input to the emulator.

Contents Encoding
-----------------
Contents are rendered as a string of decimal digits:

- DC: nine-digit zero-padded magnitude, with a leading ``-`` if negative
- Register + address: ``OO`` ``R`` ``AAAAAA``
- Register + register: ``OO`` ``R`` ``S`` ``00000``
- ORG, DS, END and comments: no contents

Any field flagged invalid is replaced by ``?`` characters of the same width.
An unknown mnemonic or a bad DC/DS value makes the whole word ``?????????``.
The emulator reads contents containing ``?`` as -1, which it refuses to
execute.
"""

from dataclasses import dataclass, field, replace
from typing import Iterator, Optional

from vc8000.cpu import (
    OpCode,
    OPCODE_NUMBERS,
    OPCODE_WIDTH,
    ADDRESS_WIDTH,
    WORD_WIDTH,
    is_register_register,
)
from vc8000.errors import Diagnostic


# =============================================================================
# Field Validity
# =============================================================================

@dataclass(frozen=True)
class FieldValidity:
    """
    Which fields of an instruction word could not be translated.

    All flags start False and are set once, during translation.
    """
    invalid_opcode: bool = False
    invalid_register1: bool = False
    invalid_register2: bool = False
    invalid_address: bool = False
    invalid_value: bool = False

    @property
    def all_valid(self) -> bool:
        return not (
            self.invalid_opcode
            or self.invalid_register1
            or self.invalid_register2
            or self.invalid_address
            or self.invalid_value
        )


# =============================================================================
# Contents
# =============================================================================

@dataclass(frozen=True)
class Contents:
    """
    The machine contents of one statement, before rendering.

    Attributes:
        opcode: Operation of the source line
        register1: First register (machine instructions)
        register2: Second register (register + register family)
        address: Resolved address (register + address family, HALT)
        value: Constant (DC)
        validity: Per-field validity flags
    """
    opcode: OpCode
    register1: Optional[int] = None
    register2: Optional[int] = None
    address: Optional[int] = None
    value: Optional[int] = None
    validity: FieldValidity = field(default_factory=FieldValidity)

    def render(self) -> str:
        """Return the contents as decimal digits, with ``?`` for invalid fields."""
        validity = self.validity
        if validity.invalid_opcode or validity.invalid_value:
            return "?" * WORD_WIDTH

        if self.opcode is OpCode.DC:
            sign = "-" if self.value < 0 else ""
            return f"{sign}{abs(self.value):0{WORD_WIDTH}d}"

        number = OPCODE_NUMBERS.get(self.opcode)
        if number is None:
            return ""

        reg1 = "?" if validity.invalid_register1 else str(self.register1)
        if is_register_register(self.opcode):
            reg2 = "?" if validity.invalid_register2 else str(self.register2)
            return f"{number:0{OPCODE_WIDTH}d}{reg1}{reg2}00000"

        if validity.invalid_address:
            address = "?" * ADDRESS_WIDTH
        else:
            address = f"{self.address:0{ADDRESS_WIDTH}d}"
        return f"{number:0{OPCODE_WIDTH}d}{reg1}{address}"

    def numeric_value(self) -> int:
        """
        Return the contents as a number for loading into memory.

        Returns:
            0 for empty contents, -1 if any field is a placeholder,
            otherwise the decimal value
        """
        text = self.render()
        if not text:
            return 0
        if "?" in text:
            return -1
        return int(text)


# =============================================================================
# Translated Statement
# =============================================================================

@dataclass(frozen=True)
class TranslatedStatement:
    """
    One source line after translation.

    Statements are immutable. Diagnostics found after translation (such as
    END placement) are added with with_diagnostics(), which returns a copy.

    Attributes:
        location: Memory location assigned to the line
        contents: Machine contents
        original: The source line exactly as read
        diagnostics: Messages attached to the line, in the order raised
    """
    location: int
    contents: Contents
    original: str
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def opcode(self) -> OpCode:
        return self.contents.opcode

    @property
    def suppress_contents(self) -> bool:
        """True for END and comment lines, which only show their text."""
        return self.contents.opcode in (OpCode.END, OpCode.COMM)

    @property
    def contents_text(self) -> str:
        """Rendered contents, or "" when suppressed."""
        if self.suppress_contents:
            return ""
        return self.contents.render()

    @property
    def numeric_contents(self) -> int:
        """Contents as a number (see Contents.numeric_value)."""
        if self.suppress_contents:
            return 0
        return self.contents.numeric_value()

    @property
    def has_errors(self) -> bool:
        return len(self.diagnostics) > 0

    @property
    def error_text(self) -> str:
        """All diagnostics as one newline-terminated blob."""
        return "".join(f"{d.message}\n" for d in self.diagnostics)

    def with_diagnostics(self, diagnostics) -> "TranslatedStatement":
        """Return a copy with extra diagnostics appended."""
        return replace(self, diagnostics=self.diagnostics + tuple(diagnostics))

    def format_line(self) -> str:
        """
        Render the statement as listing text, followed by its error text.

        Example output:
            100        05 0000104    LOAD 0 A
        """
        if self.suppress_contents:
            line = f"{'':<26}{self.original}"
        else:
            contents = self.contents_text
            if contents and not contents.startswith("-"):
                contents = " " + contents
            line = f"{self.location:<10}{contents:<16}{self.original}"
        return f"{line}\n{self.error_text}"


# =============================================================================
# Translation
# =============================================================================

class Translation:
    """
    The translated program, one statement per source line in source order.

    The emission order is not necessarily memory order, since ORG can
    move the location backwards or forwards. Statements are only appended.
    """

    def __init__(self):
        self._statements: list[TranslatedStatement] = []

    def add_statement(self, statement: TranslatedStatement) -> None:
        self._statements.append(statement)

    @property
    def statements(self) -> tuple[TranslatedStatement, ...]:
        return tuple(self._statements)

    def __iter__(self) -> Iterator[TranslatedStatement]:
        return iter(self._statements)

    def __len__(self) -> int:
        return len(self._statements)

    def __getitem__(self, index: int) -> TranslatedStatement:
        return self._statements[index]

    def has_errors(self) -> bool:
        """Return True if any statement carries a diagnostic."""
        return any(stmt.has_errors for stmt in self._statements)

    def error_count(self) -> int:
        return sum(len(stmt.diagnostics) for stmt in self._statements)

    def format_listing(self) -> str:
        """Render the whole translation with a header line."""
        parts = [f"{'Location':<11}{'Contents':<15}Original Statement\n"]
        parts.extend(stmt.format_line() for stmt in self._statements)
        return "".join(parts)
