"""CHIP-8 display operations."""

from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.constants import FLAG_REGISTER
from chix8.display import draw_sprite
from chix8.memory import read_bytes
from chix8.errors import SpriteHeightError


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    if instruction.op2 == 0:
        raise SpriteHeightError("Sprite height must be 1-15 rows, got 0")

    sprite = read_bytes(state.memory, state.I, instruction.op2)
    display, collision = draw_sprite(state.display, sprite, state.V[instruction.x], state.V[instruction.y])
    return state.replace(
        display=display,
        V=state.V.at[FLAG_REGISTER].set(int(collision)),
    )
