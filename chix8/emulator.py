"""Main CHIP-8 emulator execution engine."""

import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import decode
from chix8.errors import MachineFault
from chix8 import memory
from chix8.instructions.system import execute_system_instruction
from chix8.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chix8.instructions.alu import execute_alu_operation
from chix8.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chix8.instructions.display import execute_display
from chix8.instructions.misc import execute_misc_instruction

# Indexed by opcode family (high nibble)
INSTRUCTION_FAMILIES = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]

WAIT_FOR_KEY_MASK = 0xF0FF
WAIT_FOR_KEY = 0xF00A


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The program counter is advanced by 2 before the instruction's own effect,
    so jumps, calls and skips act on the already-incremented value. On a fault
    nothing is committed: the caller still holds the previous state.
    """
    instruction = int(instruction)
    pc = int(state.pc)
    try:
        decoded_instruction = decode(instruction)
        state = state.replace(pc=state.pc + 2)
        return INSTRUCTION_FAMILIES[decoded_instruction.op](state, decoded_instruction)
    except MachineFault as fault:
        raise fault.locate(instruction, pc)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> int:
    """Pack two bytes into a 16-bit word."""
    return (int(high) << 8) | int(low)


def fetch(state: EmulatorState) -> int:
    """Fetch the instruction word at the program counter."""
    pc = int(state.pc)
    try:
        high, low = memory.read_bytes(state.memory, pc, 2)
    except MachineFault as fault:
        raise fault.locate(None, pc)
    return _pack_u16(high, low)


def step(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch and execute one instruction, returning the new state and the word."""
    instruction = fetch(state)
    return execute(state, instruction), instruction


def is_waiting_for_key(before: EmulatorState, after: EmulatorState, instruction: int) -> bool:
    """True if FX0A found no key down and rewound onto itself."""
    return (instruction & WAIT_FOR_KEY_MASK) == WAIT_FOR_KEY and int(after.pc) == int(before.pc)


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Load program bytes into CHIP-8 memory starting at 0x200."""
    return state.replace(memory=memory.load_program(state.memory, bytes(program)))


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
