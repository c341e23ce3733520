"""CHIP-8 emulator package."""

from chix8.state import EmulatorState, create_state
from chix8.emulator import execute, fetch, step, load_program, load_rom
from chix8.decode import DecodedInstruction, Imm, RegImm, RegReg, decode
from chix8.display import clear_display, draw_sprite
from chix8.keypad import Keypad
from chix8.peripherals import Peripherals, RecordingPeripherals
from chix8.machine import Machine
from chix8.errors import *
from chix8.constants import *
from chix8.rendering import chip8_display_to_rgb, create_color_scheme, create_video

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "Imm",
    "RegImm",
    "RegReg",
    "decode",
    "clear_display",
    "draw_sprite",
    "Keypad",
    "Peripherals",
    "RecordingPeripherals",
    "Machine",
    "MachineFault",
    "DecodeError",
    "UnknownInstructionError",
    "StackOverflowError",
    "StackUnderflowError",
    "InvalidKeyError",
    "InvalidDigitError",
    "SpriteHeightError",
    "MemoryBoundsError",
    "ProgramTooLargeError",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "create_video",
]
