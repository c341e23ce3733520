"""CHIP-8 register load and index instructions."""

import jax
import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XKK - Set VX = KK."""
    return state.replace(V=state.V.at[instruction.x].set(instruction.kk))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XKK - Add KK to VX, wrapping, VF untouched."""
    result = (int(state.V[instruction.x]) + instruction.kk) & 0xFF
    return state.replace(V=state.V.at[instruction.x].set(result))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXKK - Set VX = random & KK."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.bits(subkey, shape=(), dtype=jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(random_value & instruction.kk), rng=key)
