"""
Memory and Registers for the VC8000 Emulator
============================================

Memory is one flat array of words shared by program and data. Every cell
starts at 0, which the CPU treats as "no instruction here".

Registers are ten general-purpose words, numbered 0-9.

Both stores hold plain Python ints. Keeping values inside the word range is
the CPU's job (see vc8000.emulator.cpu.wrap_word), not the store's.
"""

from dataclasses import dataclass, field

from vc8000.cpu import MEMORY_SIZE, REGISTER_COUNT


class Memory:
    """
    Flat word-addressed memory.

    Attributes:
        size: Number of words
    """

    def __init__(self, size: int = MEMORY_SIZE):
        self.size = size
        self._data = [0] * size

    def __len__(self) -> int:
        return self.size

    def in_bounds(self, address: int) -> bool:
        return 0 <= address < self.size

    def read(self, address: int) -> int:
        """
        Read one word.

        Raises:
            IndexError: If address is outside memory
        """
        if not self.in_bounds(address):
            raise IndexError(f"address {address} outside memory")
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """
        Write one word.

        Raises:
            IndexError: If address is outside memory
        """
        if not self.in_bounds(address):
            raise IndexError(f"address {address} outside memory")
        self._data[address] = value

    def read_block(self, address: int, count: int) -> list[int]:
        """Read count consecutive words, for inspection and tests."""
        if count < 0 or not self.in_bounds(address) or address + count > self.size:
            raise IndexError(f"block {address}+{count} outside memory")
        return self._data[address:address + count]

    def clear(self) -> None:
        """Set every word back to 0."""
        self._data = [0] * self.size


@dataclass
class Registers:
    """
    The general-purpose register file.

    Example:
        >>> regs = Registers()
        >>> regs[3] = 42
        >>> regs[3]
        42
    """
    count: int = REGISTER_COUNT
    values: list[int] = field(default_factory=list)

    def __post_init__(self):
        if not self.values:
            self.values = [0] * self.count

    def __getitem__(self, register: int) -> int:
        return self.values[register]

    def __setitem__(self, register: int, value: int) -> None:
        self.values[register] = value

    def __len__(self) -> int:
        return self.count

    def reset(self) -> None:
        self.values = [0] * self.count
