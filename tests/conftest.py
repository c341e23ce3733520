"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chix8 import create_state, Machine, RecordingPeripherals
from chix8.logging import MachineLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def canonical_state():
    """Provide a fresh state with legacy mode off."""
    return create_state(legacy_mode=False)


@pytest.fixture
def legacy_state():
    """Provide a fresh state in legacy mode."""
    return create_state(legacy_mode=True)


@pytest.fixture
def recorder():
    return RecordingPeripherals()


@pytest.fixture
def machine(recorder):
    """Machine with recording peripherals and a quiet logger."""
    return Machine(peripherals=recorder, logger=MachineLogger(log_level="CRITICAL"))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def assemble(*words):
    """Pack 16-bit instruction words into big-endian program bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)
