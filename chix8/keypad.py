"""Live hexadecimal keypad shared between input pollers and the machine."""

import threading
from typing import Iterable, Optional

import numpy as np
import jax.numpy as jnp

from chix8.constants import NUM_KEYS


class Keypad:
    """Sixteen key states, safe to mutate from any thread.

    The machine copies a snapshot into the emulator state once per frame and
    blocks on ``wait_for_press`` while a program waits for a key.
    """

    def __init__(self):
        self._keys = np.zeros(NUM_KEYS, dtype=np.bool_)
        self._changed = threading.Condition()
        self._interrupted = False

    @staticmethod
    def _check_key(key: int) -> int:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key index must be 0x0-0xF, got {key!r}")
        return key

    def press(self, key: int):
        """Mark a key as held down."""
        self._set(self._check_key(key), True)

    def release(self, key: int):
        """Mark a key as released."""
        self._set(self._check_key(key), False)

    def _set(self, key: int, pressed: bool):
        with self._changed:
            self._keys[key] = pressed
            self._changed.notify_all()

    def set_state(self, pressed: Iterable[bool]):
        """Replace all 16 key states at once."""
        pressed = np.asarray(list(pressed), dtype=np.bool_)
        if pressed.shape != (NUM_KEYS,):
            raise ValueError(f"Expected {NUM_KEYS} key states, got {pressed.shape[0]}")
        with self._changed:
            self._keys[:] = pressed
            self._changed.notify_all()

    def clear(self):
        """Release every key."""
        self.set_state([False] * NUM_KEYS)

    def is_pressed(self, key: int) -> bool:
        with self._changed:
            return bool(self._keys[self._check_key(key)])

    def any_pressed(self) -> bool:
        with self._changed:
            return bool(self._keys.any())

    def snapshot(self) -> jnp.ndarray:
        """Copy of the key states as a JAX boolean array."""
        with self._changed:
            return jnp.array(self._keys, dtype=jnp.bool_)

    def wait_for_press(self, timeout: Optional[float] = None) -> bool:
        """Block until some key is down, the timeout expires or ``interrupt`` is called.

        Returns:
            True if a key is down on return
        """
        with self._changed:
            self._changed.wait_for(lambda: self._keys.any() or self._interrupted, timeout)
            self._interrupted = False
            return bool(self._keys.any())

    def interrupt(self):
        """Wake any thread blocked in ``wait_for_press``."""
        with self._changed:
            self._interrupted = True
            self._changed.notify_all()

    def __repr__(self) -> str:
        with self._changed:
            held = " ".join(f"{key:X}" for key in np.flatnonzero(self._keys))
        return f"Keypad(pressed=[{held}])"
