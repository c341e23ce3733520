"""Bounds-checked access to the 4 KiB address space."""

import jax.numpy as jnp

from chix8.constants import MEMORY_SIZE, PROGRAM_START, MAX_PROGRAM_SIZE
from chix8.errors import MemoryBoundsError, ProgramTooLargeError


def check_range(address: int, length: int) -> None:
    """Raise MemoryBoundsError unless [address, address + length) fits in memory."""
    if address < 0 or address + length > MEMORY_SIZE:
        raise MemoryBoundsError(
            f"Memory access out of bounds: 0x{address:X}..0x{address + length - 1:X}"
        )


def read_bytes(memory: jnp.ndarray, address: int, length: int) -> jnp.ndarray:
    """Read ``length`` bytes starting at ``address``."""
    address = int(address)
    check_range(address, length)
    return memory[address:address + length]


def write_bytes(memory: jnp.ndarray, address: int, data) -> jnp.ndarray:
    """Return memory with ``data`` written starting at ``address``."""
    address = int(address)
    data = jnp.asarray(data, dtype=jnp.uint8)
    check_range(address, data.shape[0])
    return memory.at[address:address + data.shape[0]].set(data)


def load_program(memory: jnp.ndarray, program: bytes) -> jnp.ndarray:
    """Copy program bytes verbatim into memory at 0x200."""
    if len(program) > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(
            f"Program is {len(program)} bytes, at most {MAX_PROGRAM_SIZE} fit at 0x{PROGRAM_START:03X}"
        )
    if not program:
        return memory
    return write_bytes(memory, PROGRAM_START, jnp.array(list(program), dtype=jnp.uint8))
