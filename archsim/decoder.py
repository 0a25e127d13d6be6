"""
archsim - Instruction Decoder

Turns one program line into a DecodedInstruction using the ISA table:

  1. The first whitespace-delimited token is the mnemonic.
  2. The mnemonic must be in the ISA table (exact match).
  3. The rest of the line is split on commas into operand tokens.
  4. Syntax variants with a matching role count are tried in declaration
     order; the first variant whose resolvers all succeed wins.

No state survives between calls: the same line decoded against the same
table always picks the same variant.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import ArchSimError, IllegalInstruction, InstructionNotSupported
from .isa import EvalRule, IsaTable, SyntaxVariant
from .operands import Immediate, MemoryRef, Operand, ParseFailure, RegisterRef, failure_from

__all__ = ['DecodedInstruction', 'decode', 'split_operands']


@dataclass(frozen=True, eq=False)
class DecodedInstruction:
    """A line resolved against one syntax variant, ready to evaluate."""
    mnemonic: str
    description: str
    rule: EvalRule
    operands: Dict[str, Operand]
    line: str
    line_num: Optional[int] = None

    @property
    def src1(self) -> Optional[Operand]:
        return self.operands.get('src1')

    @property
    def src2(self) -> Optional[Operand]:
        return self.operands.get('src2')

    @property
    def dest(self) -> RegisterRef:
        return self.operands['dest']

    def __str__(self) -> str:
        return f"{self.mnemonic} " + ', '.join(str(op) for op in self.operands.values())


def split_operands(text: str) -> List[str]:
    """Split the operand field on commas. Tokens are not trimmed here."""
    return text.split(',')


def _resolve_variant(variant: SyntaxVariant, tokens: List[str]):
    """Resolve every role of one variant. Returns (operands, None) or (None, failure)."""
    operands: Dict[str, Operand] = {}
    for (role, resolver), token in zip(variant.items(), tokens):
        try:
            result = resolver(token)
        except ArchSimError as e:
            result = failure_from(e)
        except Exception as e:
            result = ParseFailure(f"{role}: {type(e).__name__}: {e}")
        if isinstance(result, ParseFailure):
            return None, result
        if not isinstance(result, (Immediate, RegisterRef, MemoryRef)):
            return None, ParseFailure(f"{role}: unresolved operand {token.strip()!r}")
        operands[role] = result
    if not isinstance(operands.get('dest'), RegisterRef):
        return None, ParseFailure("dest is not a register")
    return operands, None


def decode(line: str, isa: IsaTable, line_num: Optional[int] = None) -> DecodedInstruction:
    """Decode one program line.

    Raises:
        IllegalInstruction: no mnemonic, or no syntax variant fits.
        InstructionNotSupported: mnemonic not in the ISA.
        RegisterFileError / MemoryUnitError: no variant fits and at least
            one was rejected by a register or memory range check. The first
            such error is raised.
    """
    parts = line.split(None, 1)
    if not parts:
        raise IllegalInstruction(line, line_num)

    mnemonic = parts[0]
    desc = isa.get(mnemonic)
    if desc is None:
        raise InstructionNotSupported(mnemonic)

    tokens = split_operands(parts[1] if len(parts) > 1 else "")

    first_error: Optional[ArchSimError] = None
    for variant in desc.syntax:
        if len(variant) != len(tokens):
            continue
        operands, failure = _resolve_variant(variant, tokens)
        if operands is not None:
            return DecodedInstruction(
                mnemonic=mnemonic,
                description=desc.description,
                rule=desc.rule,
                operands=operands,
                line=line,
                line_num=line_num,
            )
        if first_error is None and failure.error is not None:
            first_error = failure.error

    if first_error is not None:
        raise first_error
    raise IllegalInstruction(line, line_num)
