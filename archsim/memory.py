"""
archsim - Memory Unit

A flat array of ``mem_size`` cells addressed by integer index. Cells hold
numbers and start at 0, so reading a cell that was never written returns 0.
Every access is bounds-checked.
"""

from typing import List, Optional, Tuple

from .errors import MemoryUnitError
from .operands import Value

__all__ = ['Memory']


class Memory:
    """Fixed-size, bounds-checked cell memory."""

    def __init__(self, mem_size: int):
        if mem_size <= 0:
            raise ValueError(f"memory size must be positive, got {mem_size}")
        self._cells: List[Value] = [0] * mem_size

    def __len__(self) -> int:
        return len(self._cells)

    @property
    def size(self) -> int:
        return len(self._cells)

    def check(self, address: int):
        """Raise MemoryUnitError if ``address`` is outside [0, size)."""
        if address < 0 or address >= len(self._cells):
            raise MemoryUnitError(
                f"Accessing a nonexistent memory location: m[{address}]", address)

    # --- Core read/write ---

    def read(self, address: int) -> Value:
        if address < 0 or address >= len(self._cells):
            raise MemoryUnitError(
                f"Reading from a nonexistent memory location: m[{address}]", address)
        return self._cells[address]

    def write(self, address: int, value: Value):
        if address < 0 or address >= len(self._cells):
            raise MemoryUnitError(
                f"Writing to a nonexistent memory location: m[{address}]", address)
        self._cells[address] = value

    # --- Inspection ---

    def snapshot(self, start: int = 0, end: Optional[int] = None) -> Tuple[Value, ...]:
        """Copy of cells [start, end). Default is the whole unit."""
        if end is None:
            end = len(self._cells)
        return tuple(self._cells[start:end])

    def dump(self, start: int = 0, length: int = 16, width: int = 8) -> str:
        """Text dump of ``length`` cells, ``width`` per row (debug helper)."""
        lines = []
        end = min(start + length, len(self._cells))
        for row in range(start, end, width):
            cells = ' '.join(str(v) for v in self._cells[row:min(row + width, end)])
            lines.append(f'{row:04d}  {cells}')
        return '\n'.join(lines)
