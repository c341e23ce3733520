"""CHIP-8 system instructions (0x0xxx)."""

from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.display import clear_display
from chix8.errors import UnknownInstructionError
from chix8.stack import pop


def unknown_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Fault on a word that matches no instruction."""
    raise UnknownInstructionError(f"Unknown instruction 0x{instruction.raw:04X}", instruction=instruction.raw)


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=clear_display(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions."""
    if instruction.raw == 0x00E0:
        return execute_clear_screen(state, instruction)
    if instruction.raw == 0x00EE:
        return execute_return(state, instruction)
    # 0NNN machine-code routines are not supported
    return unknown_instruction(state, instruction)
