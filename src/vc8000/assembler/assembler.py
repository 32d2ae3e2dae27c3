"""
VC8000 Assembler - Main Interface
=================================

This module provides the Assembler class, which runs the two assembly
passes over a program and keeps the resulting symbol table and translation.

Pass I (Symbol Collection)
--------------------------
- Parse every line up to the first END
- Bind each label to the current location
- Advance the location (ORG jumps, DS reserves, comments take no space)

Pass II (Translation)
---------------------
- Rewind the source and parse every line again, including lines after END
- Translate each line against the completed symbol table
- Check END placement: missing, repeated, or followed by more statements
- Attach each line's diagnostics to that line's translated statement

Assembly never stops early: a program full of errors still produces a
complete translation, with the problems listed under the offending lines.

Example Usage
-------------
>>> from vc8000.assembler import Assembler
>>> asm = Assembler()
>>> translation = asm.assemble_string('''
...          ORG 100
...          LOAD 0 A
...          WRITE 0 A
...          HALT
... A        DC 5
...          END
... ''')
>>> asm.has_errors()
False
>>> print(asm.get_listing())
"""

import logging
from pathlib import Path

from vc8000.assembler.instruction import parse_instruction
from vc8000.assembler.source import SourceLines
from vc8000.assembler.symtab import SymbolTable
from vc8000.assembler.translation import Contents, Translation, TranslatedStatement
from vc8000.cpu import InstructionType, OpCode
from vc8000.errors import Diagnostic, ErrorCollector, ErrorKind, SourceLocation

logger = logging.getLogger(__name__)


class Assembler:
    """
    Two-pass VC8000 assembler.

    One Assembler holds the state of one assembly run: the symbol table
    built by Pass I and the translation built by Pass II. Calling assemble()
    again starts a fresh run.

    Attributes:
        symbol_table: Labels and their locations (filled by Pass I)
        translation: Translated statements (filled by Pass II)
        filename: Name of the source being assembled
    """

    def __init__(self):
        self.symbol_table = SymbolTable()
        self.translation = Translation()
        self.filename = "<input>"

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble(self, source: SourceLines) -> Translation:
        """
        Run both passes over a source.

        Returns:
            The translation (also available as self.translation)
        """
        self.pass_one(source)
        return self.pass_two(source)

    def assemble_string(self, text: str, filename: str = "<input>") -> Translation:
        """
        Assemble a program held in a string.

        Args:
            text: Assembly source
            filename: Name used in error reports
        """
        return self.assemble(SourceLines(text, filename))

    def assemble_file(self, filepath: str | Path) -> Translation:
        """
        Assemble a program from a file.

        Raises:
            SourceError: If the file cannot be read
        """
        return self.assemble(SourceLines.from_file(filepath))

    def pass_one(self, source: SourceLines) -> SymbolTable:
        """
        Establish the location of every label.

        Stops at the first END without complaint; a missing END is
        reported by Pass II.
        """
        self.filename = source.filename
        self.symbol_table = SymbolTable()
        source.rewind()

        logger.debug(f"Pass I: {source.filename}")
        location = 0
        while (line := source.next_line()) is not None:
            inst = parse_instruction(line)

            if inst.type is InstructionType.END:
                break
            if inst.type is InstructionType.COMMENT:
                continue

            if inst.has_label:
                logger.debug(f"Symbol '{inst.label}' at {location}")
                self.symbol_table.add_symbol(inst.label, location)

            location = inst.location_next_instruction(location)

        logger.debug(f"Pass I complete: {len(self.symbol_table)} symbols")
        return self.symbol_table

    def pass_two(self, source: SourceLines) -> Translation:
        """
        Translate every line using the symbol table from Pass I.

        Each line gets its own diagnostics, so nothing carries over from
        one line to the next.
        """
        self.filename = source.filename
        self.translation = Translation()
        source.rewind()

        logger.debug(f"Pass II: {source.filename}")
        location = 0
        reached_end = False
        while (line := source.next_line()) is not None:
            inst = parse_instruction(line)
            statement = inst.translate(location, self.symbol_table)

            errors = ErrorCollector()
            if inst.type is InstructionType.END:
                if reached_end:
                    errors.add(ErrorKind.STRUCTURAL, "Error: Multiple end statements.")
                reached_end = True
            elif reached_end and inst.type is not InstructionType.COMMENT:
                errors.add(
                    ErrorKind.STRUCTURAL,
                    "Error: Additional statement following end statement.",
                )

            if errors.has_errors():
                statement = statement.with_diagnostics(errors.diagnostics)
            self.translation.add_statement(statement)

            location = inst.location_next_instruction(location)

        if not reached_end:
            # The error belongs to end of input, which has no source text.
            self.translation.add_statement(TranslatedStatement(
                location=location,
                contents=Contents(OpCode.COMM),
                original="",
                diagnostics=(
                    Diagnostic(ErrorKind.STRUCTURAL, "Error: Missing end statement."),
                ),
            ))

        error_count = self.translation.error_count()
        if error_count:
            logger.warning(f"{source.filename}: {error_count} assembly error(s)")
        logger.debug(f"Pass II complete: {len(self.translation)} statements")
        return self.translation

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_symbols(self) -> dict[str, int]:
        """Return the symbol table as a dict, in definition order."""
        return dict(self.symbol_table.items())

    def get_symbol_listing(self) -> str:
        return self.symbol_table.format_table()

    def get_listing(self) -> str:
        """Return the translation listing with errors under their lines."""
        return self.translation.format_listing()

    def write_symbols(self, filepath: str | Path) -> None:
        Path(filepath).write_text(self.get_symbol_listing())
        logger.debug(f"Wrote symbols to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        Path(filepath).write_text(self.get_listing())
        logger.debug(f"Wrote listing to {filepath}")

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        return self.translation.has_errors()

    def get_diagnostics(self) -> list[tuple[SourceLocation, Diagnostic]]:
        """
        Return every diagnostic with the source line it belongs to.

        Statement n of the translation is source line n + 1; the missing
        END error sits on the line just past the end of the source.
        """
        result = []
        for index, statement in enumerate(self.translation):
            where = SourceLocation(self.filename, index + 1)
            result.extend((where, diagnostic) for diagnostic in statement.diagnostics)
        return result

    def get_error_report(self) -> str:
        """
        Format all diagnostics, one per line.

        Example output:
            prog.asm:2: Error: label not found.

            1 error
        """
        diagnostics = self.get_diagnostics()
        lines = [f"{where}: {diagnostic}" for where, diagnostic in diagnostics]
        word = "error" if len(diagnostics) == 1 else "errors"
        lines.append(f"\n{len(diagnostics)} {word}")
        return "\n".join(lines)


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(text: str, filename: str = "<input>") -> Translation:
    """Assemble a program held in a string and return its translation."""
    return Assembler().assemble_string(text, filename)


def assemble_file(filepath: str | Path) -> Translation:
    """Assemble a program file and return its translation."""
    return Assembler().assemble_file(filepath)
