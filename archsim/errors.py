"""
archsim - Error Taxonomy

Every failure that can abort a run is an ArchSimError subclass. Errors are
raised where they are detected (decoder, register file, memory unit) and are
caught in exactly one place: Processor.exec().

Each class carries a ``kind`` label; describe() renders the
"<kind>: <detail>" string handed to the error hook.
"""

from typing import Optional

__all__ = [
    'ArchSimError', 'ProgramNotLoaded', 'IllegalInstruction',
    'InstructionNotSupported', 'RegisterFileError', 'MemoryUnitError',
    'EvaluationError', 'IsaError',
]


class ArchSimError(Exception):
    """Base class for simulator errors."""
    kind = "Simulator Error"

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)

    def describe(self) -> str:
        if self.message:
            return f"{self.kind}: {self.message}"
        return self.kind


class ProgramNotLoaded(ArchSimError):
    """exec() called with nothing loaded."""
    kind = "Program Not Loaded"

    def __init__(self, message: str = "Nothing to execute."):
        super().__init__(message)


class IllegalInstruction(ArchSimError):
    """A line has no mnemonic, or no syntax variant matches its operands."""
    kind = "Illegal Instruction"

    def __init__(self, line: str, line_num: Optional[int] = None):
        self.line = line
        self.line_num = line_num
        super().__init__(line)


class InstructionNotSupported(ArchSimError):
    """The mnemonic is not in the ISA table."""
    kind = "Instruction Not Supported"

    def __init__(self, mnemonic: str):
        self.mnemonic = mnemonic
        super().__init__(mnemonic)


class RegisterFileError(ArchSimError):
    """Malformed register descriptor or out-of-range register index.

    ``index`` is the offending index for range errors, None for malformed
    descriptors.
    """
    kind = "Register File Error"

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class MemoryUnitError(ArchSimError):
    """Out-of-range memory address.

    Named to stay clear of the builtin MemoryError; its kind label is the
    one users see.
    """
    kind = "Memory Error"

    def __init__(self, message: str, address: Optional[int] = None):
        self.address = address
        super().__init__(message)


class EvaluationError(ArchSimError):
    """An evaluation rule raised, or did not return a number."""
    kind = "Evaluation Error"

    def __init__(self, mnemonic: str, message: str):
        self.mnemonic = mnemonic
        super().__init__(f"{mnemonic}: {message}")


class IsaError(ArchSimError):
    """Inconsistent ISA table (raised at Processor construction)."""
    kind = "ISA Error"
