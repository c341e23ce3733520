"""Host-side capabilities the machine drives once per frame."""

from typing import List

import numpy as np

from chix8.keypad import Keypad


class Peripherals:
    """Render, sound and input hooks; the base class does nothing.

    Subclasses override whichever hooks they support. The machine calls
    ``poll_input`` at the start of each frame, then ``play_sound`` while the
    sound timer runs and ``render`` with a snapshot of the display.
    """

    def render(self, display: np.ndarray):
        """Present a (32, 64) array of 0/1 pixels."""

    def play_sound(self):
        """Emit the tone for one frame."""

    def poll_input(self, keypad: Keypad):
        """Refresh the keypad from the host input devices."""


class RecordingPeripherals(Peripherals):
    """Keeps every rendered frame and counts sound frames.

    Args:
        keep_frames: Store rendered frames (disable for long headless runs)
    """

    def __init__(self, keep_frames: bool = True):
        self.keep_frames = keep_frames
        self.frames: List[np.ndarray] = []
        self.frames_rendered = 0
        self.sound_frames = 0

    def render(self, display: np.ndarray):
        self.frames_rendered += 1
        if self.keep_frames:
            self.frames.append(np.array(display, copy=True))

    def play_sound(self):
        self.sound_frames += 1

    @property
    def last_frame(self) -> np.ndarray:
        if not self.frames:
            raise ValueError("No frame has been rendered yet")
        return self.frames[-1]
