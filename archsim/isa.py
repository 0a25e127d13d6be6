"""
archsim - Instruction Set Table

An ISA is a declarative catalog of InstructionDescriptors. It is built by an
ISA-building function that the processor calls once, at construction, with
two capabilities:

  resolve_register(descriptor) -> RegisterRef   (bounds-checked, may raise)
  memory                                        (the processor's Memory unit)

The builder returns an IsaTable, or any iterable of descriptors. New
mnemonics are added by extending the table; the decoder has no
per-mnemonic logic.

Descriptor shape:

    InstructionDescriptor(
        mnemonic='add',
        description='Add two numbers into a register',
        syntax=(
            {'src1': reg, 'src2': number_operand, 'dest': reg},
            {'src1': reg, 'src2': reg,            'dest': reg},
        ),
        rule=lambda a, b: a + b,
    )

Syntax variants are tried in declaration order, roles in dict order.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import IsaError
from .operands import Resolver, Value, number_operand, register_operand

__all__ = [
    'SyntaxVariant', 'EvalRule', 'InstructionDescriptor', 'IsaTable',
    'IsaBuilder', 'build_isa', 'default_isa',
]

SyntaxVariant = Dict[str, Resolver]
EvalRule = Callable[..., Value]


@dataclass(frozen=True, eq=False)
class InstructionDescriptor:
    """One ISA entry. Immutable once the table is built."""
    mnemonic: str
    description: str
    syntax: Tuple[SyntaxVariant, ...]
    rule: EvalRule

    def __post_init__(self):
        # Accept any sequence of variants; store as a tuple
        object.__setattr__(self, 'syntax', tuple(self.syntax))

    @property
    def roles(self) -> List[Tuple[str, ...]]:
        """Role names of each variant, in order (for listings and help)."""
        return [tuple(v.keys()) for v in self.syntax]


class IsaTable:
    """Mnemonic -> InstructionDescriptor, in declaration order."""

    def __init__(self, descriptors: Iterable[InstructionDescriptor]):
        self._entries: Dict[str, InstructionDescriptor] = {}
        for desc in descriptors:
            if not desc.mnemonic or desc.mnemonic.split() != [desc.mnemonic]:
                raise IsaError(f"Invalid mnemonic: {desc.mnemonic!r}")
            if desc.mnemonic in self._entries:
                raise IsaError(f"Duplicate mnemonic: {desc.mnemonic}")
            if not desc.syntax:
                raise IsaError(f"{desc.mnemonic}: no syntax variants")
            for variant in desc.syntax:
                if 'dest' not in variant:
                    raise IsaError(f"{desc.mnemonic}: syntax variant without a dest role")
            self._entries[desc.mnemonic] = desc

    def __contains__(self, mnemonic: str) -> bool:
        return mnemonic in self._entries

    def __iter__(self) -> Iterator[InstructionDescriptor]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, mnemonic: str) -> Optional[InstructionDescriptor]:
        return self._entries.get(mnemonic)

    @property
    def mnemonics(self) -> List[str]:
        return list(self._entries)


IsaBuilder = Callable[..., Iterable[InstructionDescriptor]]


def build_isa(builder: IsaBuilder, resolve_register, memory) -> IsaTable:
    """Invoke an ISA builder and normalize its result to an IsaTable."""
    table = builder(resolve_register, memory)
    if isinstance(table, IsaTable):
        return table
    return IsaTable(table)


# ──────────────────────────────────────────────
# Sample ISA: mov / add / sub
# ──────────────────────────────────────────────

def default_isa(resolve_register, memory) -> IsaTable:
    """The three-instruction ISA shipped with the simulator.

        mov <number>, r[d]
        add r[a], <number>|r[b], r[d]
        sub r[a], <number>|r[b], r[d]
    """
    reg = register_operand(resolve_register)

    return IsaTable([
        InstructionDescriptor(
            mnemonic='mov',
            description='Move a number constant into a register',
            syntax=(
                {'src1': number_operand, 'dest': reg},
            ),
            rule=lambda src1, src2=None: src1,
        ),
        InstructionDescriptor(
            mnemonic='add',
            description='Add two numbers into a register',
            syntax=(
                {'src1': reg, 'src2': number_operand, 'dest': reg},
                {'src1': reg, 'src2': reg, 'dest': reg},
            ),
            rule=lambda src1, src2: src1 + src2,
        ),
        InstructionDescriptor(
            mnemonic='sub',
            description='Subtract two numbers into a register',
            syntax=(
                {'src1': reg, 'src2': number_operand, 'dest': reg},
                {'src1': reg, 'src2': reg, 'dest': reg},
            ),
            rule=lambda src1, src2: src1 - src2,
        ),
    ])
