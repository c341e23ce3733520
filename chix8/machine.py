"""Frame scheduler driving the interpreter against wall-clock time.

A ``Machine`` owns the emulator state and the live keypad. Each frame it
polls input, executes a burst of instructions spread over 1/60 s, ticks the
timers and hands the display to the peripherals.
"""

import threading
import time
from typing import Any, Dict, Optional

import jax
import numpy as np

from chix8 import emulator
from chix8.constants import INSTRUCTION_FREQUENCY, FRAME_RATE
from chix8.errors import MachineFault
from chix8.keypad import Keypad
from chix8.logging import MachineLogger, frame_progress
from chix8.peripherals import Peripherals
from chix8.state import EmulatorState, create_state, tick_timers


class Machine:
    """CHIP-8 machine with a 60 Hz frame clock.

    The machine is ``Stopped`` until ``run`` is called and stays ``Running``
    until ``stop`` is called from a peripheral or another thread, a frame
    limit is reached, or a fault propagates out of ``run``.
    """

    def __init__(
        self,
        peripherals: Optional[Peripherals] = None,
        legacy_mode: bool = False,
        instruction_frequency: int = INSTRUCTION_FREQUENCY,
        fps: int = FRAME_RATE,
        rng: Optional[jax.random.PRNGKey] = None,
        logger: Optional[MachineLogger] = None,
        log_interval: int = 60,
    ):
        """Initialize the machine.

        Args:
            peripherals: Render/sound/input hooks; no-op stand-ins if None
            legacy_mode: Use COSMAC VIP shift and load/store behaviour
            instruction_frequency: Target instructions per second
            fps: Frames per second (timer and redraw rate)
            rng: JAX random key for the CXKK instruction
            logger: Logger for run and fault reports
            log_interval: Frames between DEBUG statistics lines (0 disables)
        """
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        if instruction_frequency < fps:
            raise ValueError(
                f"instruction_frequency ({instruction_frequency}) must be at least fps ({fps})"
            )

        self.peripherals = peripherals if peripherals is not None else Peripherals()
        self.legacy_mode = legacy_mode
        self.instruction_frequency = instruction_frequency
        self.fps = fps
        self.logger = logger if logger is not None else MachineLogger()
        self.log_interval = log_interval

        self.keypad = Keypad()
        self.rng = rng if rng is not None else jax.random.PRNGKey(0)
        self.state: EmulatorState = create_state(self.rng, legacy_mode=legacy_mode)
        self.program = b""

        self.frame_count = 0
        self.instruction_count = 0
        self.waiting_for_key = False
        self._running = threading.Event()

    @property
    def instructions_per_frame(self) -> int:
        """Number of instructions executed in one frame window."""
        return self.instruction_frequency // self.fps

    @property
    def frame_duration(self) -> float:
        return 1.0 / self.fps

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def config(self) -> Dict[str, Any]:
        return {
            "legacy_mode": self.legacy_mode,
            "instruction_frequency": self.instruction_frequency,
            "fps": self.fps,
            "instructions_per_frame": self.instructions_per_frame,
            "program_size": len(self.program),
        }

    @property
    def stats(self) -> Dict[str, Any]:
        return {
            "frames": self.frame_count,
            "instructions": self.instruction_count,
            "pc": f"0x{int(self.state.pc):03X}",
            "waiting_for_key": self.waiting_for_key,
        }

    def load_program(self, program: bytes):
        """Copy program bytes into memory at 0x200."""
        self.state = emulator.load_program(self.state, program)
        self.program = bytes(program)

    def load_rom(self, filename: str):
        """Load a ROM file into memory at 0x200."""
        with open(filename, 'rb') as f:
            self.load_program(f.read())
        self.logger.info(f"Loaded {filename} ({len(self.program)} bytes)")

    def reset(self):
        """Rebuild a fresh state and reload the current program."""
        if self.running:
            raise RuntimeError("Cannot reset a running machine")
        self.rng, key = jax.random.split(self.rng)
        self.state = emulator.load_program(create_state(key, legacy_mode=self.legacy_mode), self.program)
        self.frame_count = 0
        self.instruction_count = 0
        self.waiting_for_key = False

    def sync_keypad(self):
        """Copy the live keypad into the emulator state."""
        self.state = self.state.replace(keypad=self.keypad.snapshot())

    def step(self) -> bool:
        """Execute one instruction.

        Returns:
            False if the instruction is a key wait that found no key down
        """
        before = self.state
        try:
            after, instruction = emulator.step(before)
        except MachineFault as fault:
            self._running.clear()
            self.logger.log_fault(fault, before)
            raise
        self.state = after
        if emulator.is_waiting_for_key(before, after, instruction):
            self.waiting_for_key = True
            return False
        self.waiting_for_key = False
        self.instruction_count += 1
        return True

    def _await_key(self, timeout: float) -> bool:
        """Block until a key is down or ``timeout`` seconds pass."""
        if not self.keypad.wait_for_press(timeout):
            return False
        self.sync_keypad()
        return True

    def run_frame(self, paced: bool = False):
        """Run one frame: poll input, execute a burst, tick timers, render.

        Args:
            paced: Sleep so that the frame spans 1/fps seconds of wall time
        """
        frame_start = time.perf_counter()
        deadline = frame_start + self.frame_duration
        period = self.frame_duration / self.instructions_per_frame

        self.peripherals.poll_input(self.keypad)
        self.sync_keypad()

        executed = 0
        while executed < self.instructions_per_frame:
            if self.waiting_for_key:
                timeout = max(0.0, deadline - time.perf_counter()) if paced else 0.0
                if not self._await_key(timeout):
                    break
            if not self.step():
                continue
            executed += 1
            if paced:
                _sleep_until(frame_start + executed * period)

        if paced:
            _sleep_until(deadline)
        self._end_frame()

    def _end_frame(self):
        # Sound is gated on the sound timer, independently of the delay timer
        if int(self.state.sound_timer) > 0:
            self.peripherals.play_sound()
        self.state = tick_timers(self.state)
        self.peripherals.render(np.asarray(self.state.display))
        self.frame_count += 1
        self.logger.log_frame_stats(self.frame_count, self.stats, self.log_interval)

    def run(self, max_frames: Optional[int] = None, paced: bool = True, progress: bool = False):
        """Run frames until ``stop`` is called or ``max_frames`` have run.

        Args:
            max_frames: Frame limit for this call, or None to run until stopped
            paced: Keep real-time pacing (disable for headless runs)
            progress: Show a tqdm progress bar (requires ``max_frames``)
        """
        if self.running:
            raise RuntimeError("Machine is already running")
        self._running.set()
        self.logger.log_run_start(self.config)

        bar = frame_progress(max_frames) if progress and max_frames else None
        frames = 0
        try:
            while self.running:
                self.run_frame(paced=paced)
                frames += 1
                if bar is not None:
                    bar.update(1)
                if max_frames is not None and frames >= max_frames:
                    break
        finally:
            self._running.clear()
            if bar is not None:
                bar.close()
            self.logger.log_run_end(self.stats)

    def stop(self):
        """Leave the running state at the next frame boundary."""
        self._running.clear()
        self.keypad.interrupt()


def _sleep_until(target: float):
    remaining = target - time.perf_counter()
    if remaining > 0:
        time.sleep(remaining)
