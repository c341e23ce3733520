"""Fatal machine faults.

Every fault halts the machine. None of them is recovered internally: the
driver decides whether to build a fresh machine.
"""

from typing import Optional

__all__ = [
    "MachineFault",
    "DecodeError",
    "UnknownInstructionError",
    "StackOverflowError",
    "StackUnderflowError",
    "InvalidKeyError",
    "InvalidDigitError",
    "SpriteHeightError",
    "MemoryBoundsError",
    "ProgramTooLargeError",
]


class MachineFault(RuntimeError):
    """Base class for fatal CHIP-8 faults.

    Attributes:
        instruction: The 16-bit instruction word being executed, if any
        pc: Address of that instruction (before the pre-increment)
    """

    def __init__(self, message: str, instruction: Optional[int] = None, pc: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.instruction = instruction
        self.pc = pc

    def locate(self, instruction: int, pc: int) -> "MachineFault":
        """Attach the faulting instruction and its address if not already set."""
        if self.instruction is None:
            self.instruction = instruction
        if self.pc is None:
            self.pc = pc
        return self

    def __str__(self) -> str:
        location = []
        if self.instruction is not None:
            location.append(f"instruction 0x{self.instruction:04X}")
        if self.pc is not None:
            location.append(f"pc 0x{self.pc:03X}")
        if location:
            return f"{self.message} ({', '.join(location)})"
        return self.message


class DecodeError(MachineFault):
    """Instruction word has no recognized opcode family."""


class UnknownInstructionError(MachineFault):
    """Recognized family, but no matching instruction."""


class StackOverflowError(MachineFault):
    """CALL with a full stack."""


class StackUnderflowError(MachineFault):
    """RET with an empty stack."""


class InvalidKeyError(MachineFault):
    """Register value used as a key index is above 0xF."""


class InvalidDigitError(MachineFault):
    """Register value used as a font glyph is above 0xF."""


class SpriteHeightError(MachineFault):
    """Sprite with 0 or more than 15 rows."""


class MemoryBoundsError(MachineFault):
    """Access outside the 4 KiB address space."""


class ProgramTooLargeError(MachineFault):
    """Program does not fit between 0x200 and the end of memory."""
