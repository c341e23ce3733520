"""Draw every font glyph headlessly and save the result as a short video."""

import time

from chix8 import Machine, RecordingPeripherals, create_video
from chix8.logging import MachineLogger


def glyph_program() -> bytes:
    """Program that draws digits 0-F in two rows of eight, then loops."""
    words = [
        0x6200,  # V2 = 0 (digit)
        0x6000,  # V0 = 0 (x)
        0x6100,  # V1 = 0 (y)
        # loop (0x206)
        0xF229,  # I = glyph V2
        0xD015,  # draw at (V0, V1)
        0x7008,  # x += 8
        0x7201,  # digit += 1
        0x3208,  # skip if digit == 8
        0x1216,  # -> check end
        0x6000,  # x = 0
        0x7106,  # y += 6
        # check end (0x216)
        0x3210,  # skip if digit == 16
        0x1206,  # -> loop
        0x121A,  # halt
    ]
    return b"".join(word.to_bytes(2, "big") for word in words)


if __name__ == "__main__":
    recorder = RecordingPeripherals()
    machine = Machine(peripherals=recorder, logger=MachineLogger(log_level="DEBUG"), log_interval=30)
    machine.load_program(glyph_program())

    start = time.time()
    machine.run(max_frames=120, paced=False, progress=True)
    print("Execution time (s):", time.time() - start)

    create_video(recorder.frames, "glyphs.mp4")
