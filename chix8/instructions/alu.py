"""CHIP-8 ALU operations (8xxx)."""

from typing import Optional

from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.constants import FLAG_REGISTER
from chix8.instructions.system import unknown_instruction

# Each operation maps (vx, vy) to (result, flag); a flag of None leaves VF alone.


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    carry = int(result > 0xFF)
    return result & 0xFF, carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    not_borrow = int(vx >= vy)
    return (vx - vy) & 0xFF, not_borrow


def alu_shift_right(source: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right by one, VF = shifted-out bit."""
    return source >> 1, source & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    not_borrow = int(vy >= vx)
    return (vy - vx) & 0xFF, not_borrow


def alu_shift_left(source: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left by one, VF = shifted-out bit."""
    return (source << 1) & 0xFF, (source & 0x80) >> 7


ALU_OPERATIONS = {
    0x0: alu_set,
    0x1: alu_or,
    0x2: alu_and,
    0x3: alu_xor,
    0x4: alu_add,
    0x5: alu_sub_xy,
    0x7: alu_sub_yx,
}

SHIFT_OPERATIONS = {
    0x6: alu_shift_right,
    0xE: alu_shift_left,
}


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = int(state.V[instruction.x])
    vy = int(state.V[instruction.y])

    if instruction.op2 in ALU_OPERATIONS:
        result, vf = ALU_OPERATIONS[instruction.op2](vx, vy)
    elif instruction.op2 in SHIFT_OPERATIONS:
        # Legacy interpreters shift VY into VX
        source = vy if state.legacy_mode else vx
        result, vf = SHIFT_OPERATIONS[instruction.op2](source)
    else:
        return unknown_instruction(state, instruction)

    new_V = state.V.at[instruction.x].set(result)
    if vf is not None:
        new_V = new_V.at[FLAG_REGISTER].set(vf)
    return state.replace(V=new_V)
