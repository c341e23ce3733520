"""CHIP-8 instruction decoding.

The high nibble of a word (its opcode family) selects one of three operand
layouts. Decoding never touches machine state.
"""

from typing import Union

from chex import dataclass

from chix8.errors import DecodeError


@dataclass(frozen=True)
class Imm:
    """Address-immediate layout: families 0, 1, 2, A, B."""
    raw: int
    op: int   # First nibble
    nnn: int  # Last 12 bits (12-bit address)


@dataclass(frozen=True)
class RegImm:
    """Register-immediate layout: families 3, 4, 6, 7, C, E, F."""
    raw: int
    op: int
    x: int   # Second nibble (VX register)
    kk: int  # Last byte (8-bit immediate)


@dataclass(frozen=True)
class RegReg:
    """Register-register layout: families 5, 8, 9, D."""
    raw: int
    op: int
    x: int    # Second nibble (VX register)
    y: int    # Third nibble (VY register)
    op2: int  # Fourth nibble (sub-operation or sprite height)


DecodedInstruction = Union[Imm, RegImm, RegReg]

IMM_FAMILIES = frozenset({0x0, 0x1, 0x2, 0xA, 0xB})
REG_IMM_FAMILIES = frozenset({0x3, 0x4, 0x6, 0x7, 0xC, 0xE, 0xF})
REG_REG_FAMILIES = frozenset({0x5, 0x8, 0x9, 0xD})


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into its operand layout."""
    instruction = int(instruction)
    if not 0 <= instruction <= 0xFFFF:
        raise DecodeError(f"Unrecognized opcode family: 0x{instruction:X} is not a 16-bit word")

    op = (instruction & 0xF000) >> 12
    if op in IMM_FAMILIES:
        return Imm(raw=instruction, op=op, nnn=instruction & 0x0FFF)
    if op in REG_IMM_FAMILIES:
        return RegImm(raw=instruction, op=op, x=(instruction & 0x0F00) >> 8, kk=instruction & 0x00FF)
    if op in REG_REG_FAMILIES:
        return RegReg(
            raw=instruction,
            op=op,
            x=(instruction & 0x0F00) >> 8,
            y=(instruction & 0x00F0) >> 4,
            op2=instruction & 0x000F,
        )
    raise DecodeError(f"Unrecognized opcode family {op:X} in 0x{instruction:04X}", instruction=instruction)
