"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.constants import FONT_START, FONT_GLYPH_SIZE, ADDRESS_MASK
from chix8.errors import InvalidDigitError
from chix8.memory import read_bytes, write_bytes
from chix8.instructions.system import unknown_instruction


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    With no key down the program counter is rewound so the instruction runs
    again; the machine suspends execution until the keypad changes.
    """
    if not bool(jnp.any(state.keypad)):
        return state.replace(pc=state.pc - 2)
    pressed_key = int(jnp.argmax(state.keypad))
    return state.replace(V=state.V.at[instruction.x].set(pressed_key))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, wrapping at 16 bits."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & ADDRESS_MASK
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = int(state.V[instruction.x])
    if digit > 0xF:
        raise InvalidDigitError(f"Font digit V{instruction.x:X}=0x{digit:02X} is above 0xF")
    font_address = FONT_START + digit * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = [value // 100, (value // 10) % 10, value % 10]
    return state.replace(memory=write_bytes(state.memory, state.I, digits))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    new_memory = write_bytes(state.memory, state.I, state.V[:count])

    if state.legacy_mode:
        return state.replace(memory=new_memory, I=state.I + count)
    return state.replace(memory=new_memory)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    new_V = state.V.at[:count].set(read_bytes(state.memory, state.I, count))

    if state.legacy_mode:
        return state.replace(V=new_V, I=state.I + count)
    return state.replace(V=new_V)


MISC_INSTRUCTIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on the low byte."""
    handler = MISC_INSTRUCTIONS.get(instruction.kk, unknown_instruction)
    return handler(state, instruction)
