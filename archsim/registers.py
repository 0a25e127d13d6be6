"""
archsim - Register File

A fixed number of registers, created once with the processor and never
resized. Registers are addressed by index or by a textual descriptor of
the form ``r[<digits>]`` (surrounding whitespace allowed).
"""

import re
from typing import Iterator, Tuple

from .errors import RegisterFileError
from .operands import RegisterRef, Value

__all__ = ['Register', 'RegisterFile', 'REGISTER_DESCRIPTOR']

REGISTER_DESCRIPTOR = re.compile(r'^\s*r\[([0-9]+)\]\s*$')


class Register:
    """A single storage cell holding one value."""

    __slots__ = ('index', '_value')

    def __init__(self, index: int, value: Value = 0):
        self.index = index
        self._value = value

    def read(self) -> Value:
        return self._value

    def write(self, value: Value):
        self._value = value

    def __repr__(self) -> str:
        return f"Register(r[{self.index}]={self._value!r})"


class RegisterFile:
    """Fixed-size ordered collection of registers.

    Usage:
        regs = RegisterFile(4)
        regs.lookup_descriptor('r[2]').write(7)
        regs[2].read()          # 7
        regs.resolve(' r[3] ')  # RegisterRef(index=3)
    """

    def __init__(self, reg_count: int):
        if reg_count <= 0:
            raise ValueError(f"register count must be positive, got {reg_count}")
        self._regs: Tuple[Register, ...] = tuple(Register(i) for i in range(reg_count))

    def __len__(self) -> int:
        return len(self._regs)

    def __iter__(self) -> Iterator[Register]:
        return iter(self._regs)

    def __getitem__(self, index: int) -> Register:
        return self.lookup(index)

    # --- Lookup ---

    def lookup(self, index: int) -> Register:
        """Return the register at ``index``; RegisterFileError if out of range."""
        if index < 0 or index >= len(self._regs):
            raise RegisterFileError(f"Accessing a nonexistent register: r[{index}]", index)
        return self._regs[index]

    def lookup_descriptor(self, descriptor: str) -> Register:
        """Return the register named by ``r[<digits>]``."""
        return self._regs[self.resolve(descriptor).index]

    def resolve(self, descriptor: str) -> RegisterRef:
        """Parse and bounds-check a descriptor without touching the register.

        This is the capability handed to ISA builders.
        """
        m = REGISTER_DESCRIPTOR.match(descriptor)
        if m is None:
            raise RegisterFileError(f"Invalid register descriptor: {descriptor.strip()}")
        index = int(m.group(1))
        self.lookup(index)
        return RegisterRef(index)

    # --- Inspection ---

    def snapshot(self) -> Tuple[Value, ...]:
        """Current register values, in index order. For reporting only."""
        return tuple(r.read() for r in self._regs)

    def display(self) -> str:
        return ' '.join(f"r[{r.index}]={r.read()}" for r in self._regs)
