"""
archsim - ISA-Driven Instruction Set Simulator
==============================================
Builds a machine from a declarative ISA description, a register count and
a memory size, then loads and runs textual programs one line at a time.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌───────────┐    ┌──────────────┐
    │ Program  │───>│ Decoder  │───>│ Processor │───>│ Registers /  │
    │ (text)   │    │ (ISA)    │    │ (eval)    │    │ Memory       │
    └──────────┘    └──────────┘    └───────────┘    └──────────────┘

    - errors.py:    Error taxonomy; Processor.exec() is the only catcher
    - operands.py:  Immediate / RegisterRef / MemoryRef + resolvers
    - registers.py: Fixed-size register file, r[n] descriptors
    - memory.py:    Fixed-size bounds-checked memory
    - isa.py:       InstructionDescriptor, IsaTable, sample mov/add/sub ISA
    - decoder.py:   Line -> DecodedInstruction (first matching syntax variant)
    - processor.py: Program counter, fetch/decode/execute loop, hooks
"""

__version__ = "0.1.0"

from .errors import (ArchSimError, ProgramNotLoaded, IllegalInstruction,
                     InstructionNotSupported, RegisterFileError, MemoryUnitError,
                     EvaluationError, IsaError)
from .operands import (Immediate, RegisterRef, MemoryRef, ParseFailure,
                       number_operand, register_operand, memory_operand)
from .registers import Register, RegisterFile
from .memory import Memory
from .isa import InstructionDescriptor, IsaTable, default_isa
from .decoder import DecodedInstruction, decode
from .processor import Processor, ProcessorState, ExecStatus, ProgramCounter


def run_program(source: str, *, isa=default_isa, reg_count: int = 12,
                mem_size: int = 1024) -> Processor:
    """Build a processor, load ``source`` and execute it.

    Returns the processor so callers can inspect registers, memory and
    last_error. exec() never raises for program errors.
    """
    proc = Processor(isa, reg_count, mem_size)
    proc.load(source).exec()
    return proc
