"""
archsim - Operand Values and Resolvers

A resolver turns one textual operand into a tagged operand value:

  Immediate(value)     numeric literal, passed to the rule as-is
  RegisterRef(index)   read from / written to the register file
  MemoryRef(address)   read from the memory unit

or returns a ParseFailure. Resolvers only parse and bounds-check; reading
the current value of a reference is the processor's job.
"""

from __future__ import annotations
import math
import re
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .errors import ArchSimError, MemoryUnitError, RegisterFileError

__all__ = [
    'Value', 'Immediate', 'RegisterRef', 'MemoryRef', 'Operand',
    'ParseFailure', 'Resolver', 'parse_number', 'number_operand',
    'register_operand', 'memory_operand', 'failure_from', 'MEMORY_DESCRIPTOR',
]

Value = Union[int, float]


@dataclass(frozen=True)
class Immediate:
    value: Value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RegisterRef:
    index: int

    def __str__(self) -> str:
        return f"r[{self.index}]"


@dataclass(frozen=True)
class MemoryRef:
    address: int

    def __str__(self) -> str:
        return f"m[{self.address}]"


Operand = Union[Immediate, RegisterRef, MemoryRef]


@dataclass(frozen=True)
class ParseFailure:
    """Resolver rejection.

    ``error`` is set when the token had the right shape but failed a
    bounds check; the decoder reports it if no other syntax variant
    matches.
    """
    reason: str
    error: Optional[ArchSimError] = None

    def __bool__(self) -> bool:
        return False


Resolver = Callable[[str], Union[Operand, ParseFailure]]


def failure_from(error: ArchSimError) -> ParseFailure:
    """ParseFailure for a raised error; only range errors are carried along."""
    out_of_range = (getattr(error, 'index', None) is not None
                    or getattr(error, 'address', None) is not None)
    return ParseFailure(error.message, error if out_of_range else None)


# ──────────────────────────────────────────────
# Numeric literals
# ──────────────────────────────────────────────

def parse_number(token: str) -> Optional[Value]:
    """Parse a numeric literal. Returns None if the token is not a number.

    Supports: 42, -7, 0x2A, 0o52, 0b101010, 1.5, 1e3
    NaN, infinities, underscores and non-ASCII digits are rejected.
    """
    text = token.strip()
    if not text or not text.isascii() or '_' in text:
        return None
    try:
        return int(text, 10)
    except ValueError:
        pass
    try:
        return int(text, 0)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def number_operand(token: str) -> Union[Immediate, ParseFailure]:
    """Resolver for numeric literal operands."""
    value = parse_number(token)
    if value is None:
        return ParseFailure(f"not a number: {token.strip()!r}")
    return Immediate(value)


# ──────────────────────────────────────────────
# Reference resolvers (built from machine capabilities)
# ──────────────────────────────────────────────

def register_operand(resolve_register: Callable[[str], RegisterRef]) -> Resolver:
    """Wrap the register file's descriptor resolver.

    resolve_register raises RegisterFileError for malformed or out-of-range
    descriptors. Both become a ParseFailure; only range errors carry the
    error along.
    """
    def resolve(token: str) -> Union[RegisterRef, ParseFailure]:
        try:
            return resolve_register(token)
        except RegisterFileError as e:
            return failure_from(e)
    return resolve


MEMORY_DESCRIPTOR = re.compile(r'^\s*m\[([0-9]+)\]\s*$')


def memory_operand(memory) -> Resolver:
    """Resolver for m[<digits>] operands, bounds-checked against ``memory``."""
    def resolve(token: str) -> Union[MemoryRef, ParseFailure]:
        m = MEMORY_DESCRIPTOR.match(token)
        if m is None:
            return ParseFailure(f"not a memory descriptor: {token.strip()!r}")
        address = int(m.group(1))
        try:
            memory.check(address)
        except MemoryUnitError as e:
            return ParseFailure(e.message, e)
        return MemoryRef(address)
    return resolve
