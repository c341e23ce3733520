"""CHIP-8 rendering utilities for visualization."""
import time
from typing import Sequence, Tuple

import cv2
import numpy as np

from chix8.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chix8.logging import ConsoleLogger


def chip8_display_to_rgb(
    display: np.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (0, 255, 0),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert CHIP-8 display to RGB array with optional upscaling.

    Args:
        display: Array of shape (32, 64) with 0/1 pixels
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: green)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (32*scale, 64*scale, 3) with uint8 values
    """
    pixels = np.asarray(display).astype(np.bool_)
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Nearest neighbor upscaling
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(
    scheme: str = "classic",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("classic", "amber", "white", "blue", "retro", "octo")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "white": ((255, 255, 255), (0, 0, 0)),  # White on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
        "octo": ((255, 204, 0), (153, 102, 0)),  # Octo default palette
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def create_video(
        frames: Sequence[np.ndarray],
        filename: str,
        fps: float = 60.0,
        scale: int = 8,
        color_scheme: str = "classic",
        persistence: bool = True,
) -> None:
    """Save captured CHIP-8 frames to an MP4 file with optional phosphor persistence.

    Args:
        frames: Sequence of (32, 64) displays, e.g. ``RecordingPeripherals.frames``
        filename: Output MP4 path
        fps: Video frame rate
        scale: Upscaling factor
        color_scheme: Color scheme for rendering
        persistence: Enable phosphor screen simulation (smooth fading)
    """
    displays = np.asarray(frames)
    if len(displays.shape) != 3 or displays.shape[1:] != (SCREEN_HEIGHT, SCREEN_WIDTH):
        raise ValueError(
            f"Expected frames of shape (N, {SCREEN_HEIGHT}, {SCREEN_WIDTH}), got {displays.shape}"
        )

    height, width = SCREEN_HEIGHT * scale, SCREEN_WIDTH * scale
    on_color, off_color = np.array(create_color_scheme(color_scheme))

    fourcc = cv2.VideoWriter_fourcc(*'mp4v')
    writer = cv2.VideoWriter(filename, fourcc, fps, (width, height))

    # Phosphor glow buffer
    glow = np.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=np.float32)
    decay = 0.8

    start_time = time.time()
    try:
        for frame_display in displays:
            if persistence:
                glow = np.clip(glow * decay + frame_display.astype(np.float32), 0.0, 1.0)
                pixel_values = glow
            else:
                pixel_values = frame_display.astype(np.float32)

            # Interpolate between off and on colors
            frame = np.zeros((SCREEN_HEIGHT, SCREEN_WIDTH, 3), dtype=np.uint8)
            for c in range(3):
                frame[:, :, c] = off_color[c] + pixel_values * (on_color[c] - off_color[c])

            if scale > 1:
                frame = np.repeat(np.repeat(frame, scale, axis=0), scale, axis=1)
            writer.write(cv2.cvtColor(frame, cv2.COLOR_RGB2BGR))
    finally:
        writer.release()

    duration = len(displays) / fps
    ConsoleLogger("Video").info(
        f"Video saved: {filename} ({len(displays)} frames, {fps} FPS, {duration:.1f}s, "
        f"encoded in {time.time() - start_time:.1f}s)"
    )
