"""pygame window, beeper and keyboard for an interactive machine."""

from typing import Callable, Optional

import numpy as np
import pygame

from chix8.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chix8.keypad import Keypad
from chix8.peripherals import Peripherals
from chix8.rendering import chip8_display_to_rgb, create_color_scheme

# Modern key mapping
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0x4,
    pygame.K_5: 0x5, pygame.K_6: 0x6, pygame.K_7: 0x7, pygame.K_8: 0x8,
    pygame.K_9: 0x9, pygame.K_0: 0x0,
    pygame.K_UP: 0x2, pygame.K_DOWN: 0x8, pygame.K_LEFT: 0x4, pygame.K_RIGHT: 0x6,
    pygame.K_w: 0x2, pygame.K_s: 0x8, pygame.K_a: 0x4, pygame.K_d: 0x6,
    pygame.K_SPACE: 0x5,
    pygame.K_q: 0xA, pygame.K_e: 0xB, pygame.K_t: 0xC,
    pygame.K_y: 0xD, pygame.K_u: 0xE, pygame.K_i: 0xF
}

SAMPLE_RATE = 44100


def square_wave(frequency: float = 440.0, duration: float = 0.1, volume: float = 0.2) -> np.ndarray:
    """One buffer of a 16-bit mono square wave."""
    t = np.arange(int(SAMPLE_RATE * duration)) / SAMPLE_RATE
    wave = np.sign(np.sin(2 * np.pi * frequency * t))
    return (wave * volume * 32767).astype(np.int16)


class PygamePeripherals(Peripherals):
    """Interactive peripherals backed by a pygame window.

    Args:
        scale: Window pixels per CHIP-8 pixel
        color_scheme: Palette name understood by ``create_color_scheme``
        on_quit: Called when the window is closed or Escape is pressed
        title: Window caption
    """

    def __init__(
        self,
        scale: int = 8,
        color_scheme: str = "classic",
        on_quit: Optional[Callable[[], None]] = None,
        title: str = "chix8",
    ):
        self.scale = scale
        self.on_color, self.off_color = create_color_scheme(color_scheme)
        self.on_quit = on_quit

        pygame.mixer.pre_init(SAMPLE_RATE, -16, 1)
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
        pygame.display.set_caption(title)

        self._tone = pygame.mixer.Sound(buffer=square_wave().tobytes()) if pygame.mixer.get_init() else None
        self._channel = None
        self._sounding = False

    def poll_input(self, keypad: Keypad):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._quit()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._quit()
                elif event.key in KEY_MAP:
                    keypad.press(KEY_MAP[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    keypad.release(KEY_MAP[event.key])

    def play_sound(self):
        self._sounding = True
        if self._tone is not None and (self._channel is None or not self._channel.get_busy()):
            self._channel = self._tone.play(loops=-1)

    def render(self, display: np.ndarray):
        # play_sound runs before render in every frame the sound timer is active
        if not self._sounding and self._channel is not None:
            self._channel.stop()
            self._channel = None
        self._sounding = False

        rgb = chip8_display_to_rgb(display, self.scale, self.on_color, self.off_color)
        surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

    def _quit(self):
        if self.on_quit is not None:
            self.on_quit()

    def close(self):
        pygame.quit()
