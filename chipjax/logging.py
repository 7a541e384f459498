"""Console logging utilities for chipjax hosts.

The emulator core is pure and never logs; the host adapter and the CLI
report ROM loading, halts and run summaries through these loggers.
"""

import time
import sys
from typing import Any, Dict, Optional, TextIO

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"


class ConsoleLogger:
    """Console logger with level filtering, elapsed-time stamps and colored level tags.

    Messages go to ``stream`` (standard output when None, looked up at write
    time so redirected output is honoured). Colors are only used on a tty.
    """

    def __init__(
        self,
        name: str = "chipjax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")

        self.stream = stream
        output = stream if stream is not None else sys.stdout
        self.use_colors = use_colors and hasattr(output, "isatty") and output.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def _should_log(self, level: str) -> bool:
        return LEVELS.index(level) >= LEVELS.index(self.log_level)

    def _format_message(self, level: str, message: str) -> str:
        parts = []
        if self.show_timestamps:
            parts.append(f"[{time.time() - self.start_time:8.2f}s]")

        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{LEVEL_COLORS[level]}{tag}{RESET}"
        parts.append(tag)
        parts.append(f"[{self.name}]")

        return "".join(parts) + f" {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        level = level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{level}'")
        if self._should_log(level):
            output = self.stream if self.stream is not None else sys.stdout
            print(self._format_message(level, message), file=output, flush=True)

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


class EmulatorLogger(ConsoleLogger):
    """Logger for emulator runs: ROM loads, halts and end-of-run summaries."""

    def __init__(self, name: str = "chipjax", **kwargs):
        super().__init__(name, **kwargs)
        self.frames = 0

    def log_rom_loaded(self, source: str, size: int, address: int):
        self.info(f"Loaded {source}: {size} bytes at 0x{address:03X}")

    def log_config(self, config: Dict[str, Any]):
        """Log run configuration, one key per line."""
        self.info("=" * 60)
        self.info("Emulator configuration:")
        for key, value in config.items():
            self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_frame(self, frame: int, status: str, every: int = 60):
        """Log progress every ``every`` frames at debug level."""
        self.frames = frame + 1
        if frame % every == 0:
            self.debug(f"Frame {frame:6d} status={status}")

    def log_halt(self, error: Exception):
        self.error(f"Machine halted: {type(error).__name__}: {error}")

    def log_run_end(self, state: Any, error: Optional[Exception] = None):
        elapsed = time.time() - self.start_time
        outcome = "halted" if error is not None else "completed"
        self.info(
            f"Run {outcome} after {self.frames} frames in {elapsed:.2f}s "
            f"(pc=0x{int(state.pc):03X}, I=0x{int(state.I):03X}, "
            f"sp={int(state.stack.pointer)}, delay={int(state.delay_timer)}, "
            f"sound={int(state.sound_timer)})"
        )
