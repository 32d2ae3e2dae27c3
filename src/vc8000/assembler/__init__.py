"""
VC8000 Assembler
================

This package provides the two-pass assembler for the VC8000 decimal machine.

The assembler turns line-oriented assembly source into a Translation: one
TranslatedStatement per source line, holding the line's location, its nine
digit machine contents and any diagnostics raised for it. The Translation
is what the emulator loads.

Main Components
---------------
- **Assembler**: Runs Pass I and Pass II and keeps their results
- **SourceLines**: Line cursor over a file or string, with rewind
- **SymbolTable**: Label to location mapping with multiple-definition detection
- **parse_instruction / translate**: Per-line parsing and translation
- **Translation**: Ordered translated statements and listing formatting

Assembly Process
----------------
1. **Pass I**: Assign a location to every line and bind labels.
2. **Pass II**: Translate every line against the finished symbol table,
   attaching the diagnostics for each line to that line.

Example Usage
-------------
>>> from vc8000.assembler import Assembler
>>> asm = Assembler()
>>> translation = asm.assemble_file("prog.asm")
>>> print(asm.get_symbol_listing())
>>> print(asm.get_listing())
"""

from vc8000.assembler.assembler import Assembler, assemble, assemble_file
from vc8000.assembler.instruction import (
    ParsedInstruction,
    parse_instruction,
    parse_number,
    location_next_instruction,
    translate,
)
from vc8000.assembler.source import SourceLines
from vc8000.assembler.symtab import SymbolTable, MULTIPLY_DEFINED
from vc8000.assembler.translation import (
    Contents,
    FieldValidity,
    TranslatedStatement,
    Translation,
)

__all__ = [
    "Assembler",
    "assemble",
    "assemble_file",
    "ParsedInstruction",
    "parse_instruction",
    "parse_number",
    "location_next_instruction",
    "translate",
    "SourceLines",
    "SymbolTable",
    "MULTIPLY_DEFINED",
    "Contents",
    "FieldValidity",
    "TranslatedStatement",
    "Translation",
]
