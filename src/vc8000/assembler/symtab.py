"""
VC8000 Symbol Table
===================

Maps label text to the memory location it was defined at. The table is
filled during Pass I and only read during Pass II.

A label defined more than once keeps its entry, but its location is
replaced by MULTIPLY_DEFINED. Every later reference to it can then be
reported, not just the second definition.
"""

import logging
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

# Location stored for a label that has been defined more than once.
MULTIPLY_DEFINED = -999


class SymbolTable:
    """
    Label name to location mapping, kept in definition order.

    Example:
        >>> symtab = SymbolTable()
        >>> symtab.add_symbol("LOOP", 100)
        >>> symtab.lookup_symbol("LOOP")
        100
        >>> symtab.lookup_symbol("MISSING") is None
        True
    """

    multiply_defined = MULTIPLY_DEFINED

    def __init__(self):
        self._symbols: dict[str, int] = {}

    def add_symbol(self, name: str, location: int) -> None:
        """
        Define a label.

        The first definition records the location. Any later definition
        overwrites it with MULTIPLY_DEFINED; the original location is not kept.
        """
        if name in self._symbols:
            logger.debug(f"Symbol '{name}' multiply defined")
            self._symbols[name] = MULTIPLY_DEFINED
            return
        self._symbols[name] = location

    def lookup_symbol(self, name: str) -> Optional[int]:
        """
        Return the location recorded for a label.

        The match is exact (case-sensitive). The result may be
        MULTIPLY_DEFINED.

        Returns:
            The stored location, or None if the label was never defined
        """
        return self._symbols.get(name)

    def is_multiply_defined(self, name: str) -> bool:
        return self._symbols.get(name) == MULTIPLY_DEFINED

    def items(self) -> list[tuple[str, int]]:
        """(name, location) pairs in definition order."""
        return list(self._symbols.items())

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def format_table(self) -> str:
        """
        Render the table for display.

        Example output:
              Symbol #         Symbol       Location
                     0           LOOP            100
        """
        lines = [f"{'Symbol #':>10}{'Symbol':>15}{'Location':>15}"]
        for index, (name, location) in enumerate(self._symbols.items()):
            lines.append(f"{index:>10}{name:>15}{location:>15}")
        return "\n".join(lines) + "\n"
