"""
VC8000 Error Hierarchy
======================

This module defines the exception hierarchy and the diagnostic values used
throughout the VC8000 toolchain. All exceptions inherit from VC8000Error,
allowing callers to catch every toolchain error with a single except clause.

Exception Hierarchy
-------------------
VC8000Error (base)
├── AssemblerError (assembler API misuse, unreadable source)
│   └── SourceError - source file cannot be read
└── EmulatorError (fatal load/run-time conditions)
    ├── LoadError - translated statement placed outside memory
    ├── BadInstructionError - placeholder or unknown opcode reached
    ├── MissingHaltError - execution ran into an empty word
    ├── DivisionByZeroError - DIV/DIVR with a zero divisor
    └── InputError - READ received something other than a word

Diagnostics vs Exceptions
-------------------------
Problems found while assembling a single line (bad operands, unknown
mnemonics, unresolved labels, misplaced END) never abort assembly. They are
recorded as Diagnostic values and attached to that line's translated
statement, so a full translation is always produced.

Emulation is different: the first load-time or run-time error stops the run,
so those are raised as EmulatorError subclasses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class VC8000Error(Exception):
    """
    Base exception for all VC8000 toolchain errors.

        try:
            emulator.run(translation)
        except VC8000Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A line in a source file, used when reporting diagnostics.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}"


# =============================================================================
# Per-Line Diagnostics
# =============================================================================

class ErrorKind(Enum):
    """Classification of a diagnostic or fatal error."""
    FORMAT = "format"          # extra operands
    LEXICAL = "lexical"        # unknown mnemonic, non-numeric operand
    SEMANTIC = "semantic"      # out of range, missing operand, bad label
    STRUCTURAL = "structural"  # missing/multiple/misplaced END
    LOAD = "load"              # location out of bounds
    RUNTIME = "runtime"        # bad opcode, missing halt, divide by zero, bad input


@dataclass(frozen=True)
class Diagnostic:
    """
    One message recorded against one source line.

    Attributes:
        kind: What sort of problem this is
        message: Text shown under the line in the translation listing
    """
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


class ErrorCollector:
    """
    Collects the diagnostics raised while processing one source line.

    The assembler creates a fresh collector for every line and hands the
    collected diagnostics to that line's translated statement, so messages
    can never leak from one line to the next.

    Example:
        errors = ErrorCollector()
        errors.add(ErrorKind.SEMANTIC, "Error: label not found.")
        if errors.has_errors():
            print(errors.report())
    """

    def __init__(self):
        self.diagnostics: list[Diagnostic] = []

    def add(self, kind: ErrorKind, message: str) -> None:
        """Record one message."""
        self.diagnostics.append(Diagnostic(kind, message))

    def extend(self, diagnostics) -> None:
        """Record several already-built diagnostics, keeping their order."""
        self.diagnostics.extend(diagnostics)

    def has_errors(self) -> bool:
        """Return True if any messages have been recorded."""
        return len(self.diagnostics) > 0

    def error_count(self) -> int:
        """Return the number of recorded messages."""
        return len(self.diagnostics)

    @property
    def messages(self) -> list[str]:
        """The recorded messages, in order."""
        return [d.message for d in self.diagnostics]

    def report(self) -> str:
        """
        Return all messages as one blob, one message per line.

        Every message is newline-terminated so the blob can be printed
        directly under a listing line.
        """
        return "".join(f"{message}\n" for message in self.messages)

    def clear(self) -> None:
        """Forget all recorded messages."""
        self.diagnostics.clear()


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(VC8000Error):
    """
    Base exception for errors that stop the assembler itself.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location and hint.

        Example output:
            prog.asm:3: error: cannot decode line
            hint: save the file as UTF-8
        """
        if self.location:
            parts = [f"{self.location}: error: {self.message}"]
        else:
            parts = [f"error: {self.message}"]

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class SourceError(AssemblerError):
    """
    The assembly source cannot be read.

    Raised when the source file is missing, unreadable, or not text.
    """

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"cannot read '{filename}': {reason}")


# =============================================================================
# Emulator Exceptions
# =============================================================================

class EmulatorError(VC8000Error):
    """
    Base exception for fatal emulation conditions.

    The message is the terminal explanation shown to the operator, so it
    is kept exactly as the operator should read it.

    Attributes:
        message: Operator-facing explanation
        address: Memory address involved, when there is one
        kind: ErrorKind.LOAD or ErrorKind.RUNTIME
    """

    kind = ErrorKind.RUNTIME

    def __init__(self, message: str, address: Optional[int] = None):
        self.message = message
        self.address = address
        super().__init__(message)


class LoadError(EmulatorError):
    """A translated statement lies outside the emulator's memory."""

    kind = ErrorKind.LOAD

    def __init__(self, address: int):
        super().__init__("Error: location out of bounds.", address=address)


class BadInstructionError(EmulatorError):
    """
    Execution reached a word that is not a machine instruction.

    This covers error placeholders (numeric contents of -1), any other
    negative word, and words whose leading two digits are not ADD..HALT.
    """

    def __init__(self, address: int, code: int):
        self.code = code
        super().__init__(
            "Error: bad instruction reached. Terminating program.",
            address=address,
        )


class MissingHaltError(EmulatorError):
    """Execution reached an empty word (or left memory) without a HALT."""

    def __init__(self, address: int):
        super().__init__(
            "Error: missing halt statement. Terminating program.",
            address=address,
        )


class DivisionByZeroError(EmulatorError):
    """DIV or DIVR was executed with a zero divisor."""

    def __init__(self, address: int):
        super().__init__(
            "Error: division by zero. Terminating program.",
            address=address,
        )


class InputError(EmulatorError):
    """READ received input that is not an integer within the word range."""

    def __init__(self, address: int, text: str):
        self.text = text
        super().__init__(
            "Error: input was not an integer between -999,999,999 and "
            "999,999,999. Terminating program.",
            address=address,
        )
