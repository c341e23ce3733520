"""Framebuffer operations: clear and XOR sprite blit."""

import jax.numpy as jnp

from chix8.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MIN_SPRITE_HEIGHT, MAX_SPRITE_HEIGHT
from chix8.errors import SpriteHeightError

# Pre-computed coordinate grids for display operations
rows, cols = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')


def clear_display(display: jnp.ndarray) -> jnp.ndarray:
    """Return a blank display of the same shape."""
    return jnp.zeros_like(display)


def draw_sprite(display: jnp.ndarray, sprite, x: int, y: int) -> tuple[jnp.ndarray, bool]:
    """XOR a sprite onto the display at (x, y), wrapping around the edges.

    Args:
        display: (32, 64) array of 0/1 pixels
        sprite: 1 to 15 bytes, one per row, most significant bit leftmost
        x: Column of the top-left corner (taken modulo 64)
        y: Row of the top-left corner (taken modulo 32)

    Returns:
        Tuple of (new display, collision) where collision is True iff some
        pixel was turned off by the draw.
    """
    sprite = jnp.asarray(sprite, dtype=jnp.uint8).reshape(-1)
    height = sprite.shape[0]
    if not MIN_SPRITE_HEIGHT <= height <= MAX_SPRITE_HEIGHT:
        raise SpriteHeightError(
            f"Sprite height must be {MIN_SPRITE_HEIGHT}-{MAX_SPRITE_HEIGHT} rows, got {height}"
        )

    row_offset = (rows - int(y)) % SCREEN_HEIGHT
    col_offset = (cols - int(x)) % SCREEN_WIDTH
    in_sprite = (row_offset < height) & (col_offset < 8)

    sprite_bytes = sprite[jnp.minimum(row_offset, height - 1)]
    bits = (sprite_bytes >> (7 - jnp.minimum(col_offset, 7))) & 1
    bits = jnp.astype(bits * in_sprite, jnp.uint8)

    collision = bool(jnp.any(display & bits))
    return display ^ bits, collision
