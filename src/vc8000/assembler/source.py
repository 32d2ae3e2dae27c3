"""
Assembly Source Reader
======================

Both assembler passes stream the program one line at a time, and Pass II
starts over from the first line. SourceLines provides exactly that: a
"next line or end of input" cursor with a rewind.
"""

import logging
from pathlib import Path
from typing import Optional

from vc8000.errors import SourceError

logger = logging.getLogger(__name__)


class SourceLines:
    """
    Line cursor over an assembly program.

    Attributes:
        filename: Name used when reporting diagnostics
    """

    def __init__(self, text: str, filename: str = "<input>"):
        self.filename = filename
        self._lines = text.splitlines()
        self._index = 0

    @classmethod
    def from_file(cls, filepath: str | Path) -> "SourceLines":
        """
        Read a source file.

        Raises:
            SourceError: If the file cannot be read or decoded
        """
        filepath = Path(filepath)
        try:
            text = filepath.read_text()
        except FileNotFoundError:
            raise SourceError(str(filepath), "no such file")
        except UnicodeDecodeError as e:
            raise SourceError(str(filepath), f"not a text file ({e.reason})")
        except OSError as e:
            raise SourceError(str(filepath), e.strerror or str(e))

        logger.debug(f"Read {filepath}")
        return cls(text, str(filepath))

    def __len__(self) -> int:
        return len(self._lines)

    def next_line(self) -> Optional[str]:
        """Return the next line without its terminator, or None at end of input."""
        if self._index >= len(self._lines):
            return None
        line = self._lines[self._index]
        self._index += 1
        return line

    def rewind(self) -> None:
        """Go back to the first line."""
        self._index = 0
