"""Console logging utilities for chix8 machines.

This module provides a leveled console logger, a machine-specific logger
that reports run configuration, periodic frame statistics and faults, and a
tqdm progress bar for headless runs.
"""

import time
import sys
from typing import Any, Dict, Optional

import jax.numpy as jnp
from tqdm import tqdm


class ConsoleLogger:
    """Flexible console logger with levels, colors and timestamps."""

    def __init__(
        self,
        name: str = "chix8",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


def format_registers(state) -> str:
    """One-line dump of the register file."""
    registers = " ".join(f"V{i:X}={int(v):02X}" for i, v in enumerate(state.V))
    return (
        f"PC={int(state.pc):03X} I={int(state.I):03X} SP={int(state.stack.pointer)} "
        f"DT={int(state.delay_timer)} ST={int(state.sound_timer)} | {registers}"
    )


class MachineLogger(ConsoleLogger):
    """Logger for a running machine: configuration, frame statistics, faults."""

    def __init__(self, name: str = "Machine", **kwargs):
        super().__init__(name, **kwargs)
        self.last_log_time = time.time()

    def log_run_start(self, config: Dict[str, Any]):
        """Log machine configuration and start message."""
        self.info("=" * 60)
        self.info("Starting machine with configuration:")
        for key, value in config.items():
            self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_frame_stats(self, frame: int, stats: Dict[str, Any], log_interval: int = 60):
        """Log running statistics every ``log_interval`` frames at DEBUG level."""
        if log_interval <= 0 or frame % log_interval != 0:
            return
        current_time = time.time()
        elapsed = current_time - self.last_log_time
        self.last_log_time = current_time

        stat_strs = []
        for key, value in stats.items():
            if isinstance(value, float):
                stat_strs.append(f"{key}={value:.1f}")
            else:
                stat_strs.append(f"{key}={value}")
        self.debug(f"Frame {frame:6d} ({elapsed:5.2f}s since last) | " + " | ".join(stat_strs))

    def log_fault(self, fault: Exception, state=None):
        """Log a fatal fault with a register dump of the last good state."""
        self.error(f"Machine fault: {fault}")
        if state is not None:
            self.error(f"  {format_registers(state)}")
            if bool(jnp.any(state.keypad)):
                held = " ".join(f"{i:X}" for i, down in enumerate(state.keypad) if down)
                self.error(f"  keys held: {held}")

    def log_run_end(self, stats: Dict[str, Any]):
        """Log run completion with final statistics."""
        elapsed = time.time() - self.start_time
        self.info("=" * 60)
        self.info(f"Machine stopped after {elapsed:.1f}s")
        for key, value in stats.items():
            if isinstance(value, float):
                self.info(f"  {key}: {value:.1f}")
            else:
                self.info(f"  {key}: {value}")
        self.info("=" * 60)


def frame_progress(n: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Build a tqdm progress bar for a headless run of ``n`` frames."""
    if desc is None:
        desc = f"Emulating ({n:,} frames)"
    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)
    return tqdm(total=n, desc=desc, unit="frame", **kwargs)
