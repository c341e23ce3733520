"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.constants import NUM_KEYS
from chix8.errors import InvalidKeyError
from chix8.stack import push
from chix8.instructions.system import unknown_instruction


def skip(state: EmulatorState) -> EmulatorState:
    """Step over the next instruction."""
    return state.replace(pc=state.pc + 2)


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        if condition_fn(state, instruction):
            return skip(state)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.kk
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.kk
)

_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)


def execute_skip_if_equal_register(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """5XY0 - Skip if VX == VY."""
    if instruction.op2 != 0:
        return unknown_instruction(state, instruction)
    return _skip_if_equal_register(state, instruction)


def execute_skip_if_not_equal_register(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """9XY0 - Skip if VX != VY."""
    if instruction.op2 != 0:
        return unknown_instruction(state, instruction)
    return _skip_if_not_equal_register(state, instruction)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = instruction.nnn + int(state.V[0])
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    if instruction.kk not in (0x9E, 0xA1):
        return unknown_instruction(state, instruction)

    key_index = int(state.V[instruction.x])
    if key_index >= NUM_KEYS:
        raise InvalidKeyError(f"Key index V{instruction.x:X}=0x{key_index:02X} is above 0xF")

    key_pressed = bool(state.keypad[key_index])
    is_not_instruction = (instruction.kk == 0xA1)
    if key_pressed != is_not_instruction:
        return skip(state)
    return state
