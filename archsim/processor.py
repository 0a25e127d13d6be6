"""
archsim - Processor (Execution Engine)

Integrates:
  - Register file (registers.py)
  - Memory unit (memory.py)
  - ISA table (isa.py), built once from the user's ISA builder
  - Decoder (decoder.py)
  - Program counter

State machine:

    UNLOADED --load()--> LOADED --exec()--> RUNNING --+--> UNLOADED (OK)
                                                      +--> UNLOADED (FAILED)

Execution model, one line at a time:
  1. Decode the line at PC
  2. Fire on_decode_complete
  3. Read source operands (register / memory / immediate)
  4. Evaluate the rule, write the result to dest
  5. Advance PC, fire on_instruction_complete

Any ArchSimError aborts the run: on_error gets "<kind>: <detail>", the
processor resets, and exec() returns ExecStatus.FAILED. Register writes made
before the failure are kept.
"""

import logging
from enum import Enum, IntEnum
from typing import Optional, Tuple

from .decoder import DecodedInstruction, decode
from .errors import ArchSimError, EvaluationError, ProgramNotLoaded
from .isa import IsaBuilder, IsaTable, build_isa
from .memory import Memory
from .operands import Immediate, MemoryRef, Operand, RegisterRef, Value
from .registers import RegisterFile

__all__ = ['Processor', 'ProcessorState', 'ExecStatus', 'ProgramCounter']

log = logging.getLogger('archsim.processor')


class ProcessorState(Enum):
    UNLOADED = 'UNLOADED'
    LOADED = 'LOADED'
    RUNNING = 'RUNNING'


class ExecStatus(IntEnum):
    OK = 0
    FAILED = 1


class ProgramCounter:
    """Index of the next program line. Only the processor moves it."""

    __slots__ = ('_value',)

    def __init__(self):
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def increment(self) -> int:
        self._value += 1
        return self._value

    def reset(self):
        self._value = 0


class Processor:
    """Single-cycle processor driven by a declarative ISA.

    Usage:
        proc = Processor(default_isa, reg_count=12, mem_size=1024)
        proc.on_error = print
        status = proc.load("mov 3, r[0]\\nadd r[0], 4, r[1]").exec()
        proc.registers[1].read()   # 7
    """

    def __init__(self, isa: IsaBuilder, reg_count: int, mem_size: int):
        self._registers = RegisterFile(reg_count)
        self._memory = Memory(mem_size)
        self._isa: IsaTable = build_isa(isa, self._registers.resolve, self._memory)

        self._pc = ProgramCounter()
        self._program: Tuple[str, ...] = ()
        self._state = ProcessorState.UNLOADED
        self._last_error: Optional[ArchSimError] = None

        log.debug("processor built: %d registers, %d cells, ISA %s",
                  reg_count, mem_size, ', '.join(self._isa.mnemonics))

    # ══════════════════════════════════════════════
    # Lifecycle hooks (replace on the instance)
    # ══════════════════════════════════════════════

    def on_program_loaded(self, program, registers, memory):
        pass

    def on_decode_complete(self, instr):
        pass

    def on_instruction_complete(self, instr, registers, memory):
        pass

    def on_program_complete(self, registers, memory):
        pass

    def on_error(self, message):
        pass

    # ══════════════════════════════════════════════
    # Inspection
    # ══════════════════════════════════════════════

    @property
    def registers(self) -> RegisterFile:
        return self._registers

    @property
    def memory(self) -> Memory:
        return self._memory

    @property
    def isa(self) -> IsaTable:
        return self._isa

    @property
    def state(self) -> ProcessorState:
        return self._state

    @property
    def pc(self) -> int:
        return self._pc.value

    @property
    def program(self) -> Tuple[str, ...]:
        return self._program

    @property
    def last_error(self) -> Optional[ArchSimError]:
        """Error that aborted the most recent run, or None."""
        return self._last_error

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load(self, text: str) -> 'Processor':
        """Load program text, replacing any previous program.

        Blank and whitespace-only lines are dropped.
        """
        self._program = tuple(line for line in text.splitlines() if line.strip())
        self._pc.reset()
        self._state = ProcessorState.LOADED
        self._last_error = None
        log.info("loaded program: %d instruction(s)", len(self._program))
        self.on_program_loaded(self._program, self._registers, self._memory)
        return self

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def exec(self) -> ExecStatus:
        """Run the loaded program to completion or failure.

        Hooks must not call load() or exec(). A nested exec() while a
        program is running returns FAILED and leaves the outer run alone.
        """
        if self._state is ProcessorState.RUNNING:
            log.error("exec() called while a program is running")
            return ExecStatus.FAILED
        if self._state is not ProcessorState.LOADED:
            return self._fail(ProgramNotLoaded())

        self._state = ProcessorState.RUNNING
        try:
            while self._pc.value < len(self._program):
                self._step()
        except ArchSimError as e:
            return self._fail(e)
        except BaseException:
            self._reset()
            raise

        log.info("program complete: %s", self._registers.display())
        self._reset()
        self.on_program_complete(self._registers, self._memory)
        return ExecStatus.OK

    def _step(self):
        pc = self._pc.value
        instr = decode(self._program[pc], self._isa, line_num=pc + 1)
        log.debug("%04d: %s", pc, instr)
        self.on_decode_complete(instr)

        result = self._evaluate(instr)
        self._registers[instr.dest.index].write(result)

        self._pc.increment()
        self.on_instruction_complete(instr, self._registers, self._memory)

    def _read(self, operand: Optional[Operand]) -> Optional[Value]:
        """Current value of a source operand. None stays None (missing operand)."""
        if operand is None:
            return None
        if isinstance(operand, Immediate):
            return operand.value
        if isinstance(operand, RegisterRef):
            return self._registers[operand.index].read()
        if isinstance(operand, MemoryRef):
            return self._memory.read(operand.address)
        raise TypeError(f"unknown operand type: {operand!r}")

    def _evaluate(self, instr: DecodedInstruction) -> Value:
        src1 = self._read(instr.src1)
        src2 = self._read(instr.src2)
        try:
            result = instr.rule(src1, src2)
        except ArchSimError:
            raise
        except Exception as e:
            raise EvaluationError(instr.mnemonic, f"{type(e).__name__}: {e}") from e
        if result is None:
            raise EvaluationError(instr.mnemonic, "rule produced no value")
        if not isinstance(result, (int, float)):
            raise EvaluationError(
                instr.mnemonic, f"rule produced a non-numeric value: {result!r}")
        return result

    # ══════════════════════════════════════════════
    # Error path / reset
    # ══════════════════════════════════════════════

    def _fail(self, error: ArchSimError) -> ExecStatus:
        message = error.describe()
        log.error(message)
        self._last_error = error
        try:
            self.on_error(message)
        finally:
            self._reset()
        return ExecStatus.FAILED

    def _reset(self):
        self._state = ProcessorState.UNLOADED
        self._program = ()
        self._pc.reset()
