"""
Logging utility with timestamps and timing support.
Provides structured, colourful console output for purge activity.
Optionally mirrors every line to a file when CICHLID_LOG_FILE is set.

Build notifications can arrive on the host's dispatch thread while
menu commands run on the UI thread, so all shared state (timers,
log-file handle) is guarded by a single lock.
"""

from __future__ import annotations

import io
import os
import re
import sys
import threading
import time
from datetime import UTC, datetime

_lock = threading.Lock()
_timers: dict[str, tuple[float, str]] = {}
_log_file_stream: io.TextIOWrapper | None = None

_ANSI_RE = re.compile(r"\033\[[0-9;]*m")


# ============================================================================
# File Logging
# ============================================================================


def open_log_file(path: str | None = None) -> str | None:
    """Start mirroring log lines to *path* (or ``CICHLID_LOG_FILE``).

    Returns the path being written, or ``None`` when file logging
    is disabled or the file cannot be opened.
    """
    global _log_file_stream

    target = path or os.environ.get("CICHLID_LOG_FILE", "")
    if not target:
        return None

    close_log_file()
    try:
        stream = open(target, "a", encoding="utf-8")  # noqa: SIM115
    except OSError as exc:
        print(f"\033[31m✗ [Logger] Failed to open log file: {exc}\033[0m", file=sys.stderr)
        return None

    stream.write(f"\n{'=' * 80}\n  Cichlid Log\n  Started: {datetime.now(UTC).isoformat()}\n{'=' * 80}\n")
    with _lock:
        _log_file_stream = stream
    return target


def close_log_file() -> None:
    """Flush and close the current log file, if any."""
    global _log_file_stream

    with _lock:
        stream = _log_file_stream
        _log_file_stream = None
    if stream is not None:
        try:
            stream.flush()
            stream.close()
        except OSError:
            print("\033[33m⚠ [Logger] Failed to flush/close log file stream\033[0m", file=sys.stderr)


def _emit(line: str) -> None:
    """Write *line* to stderr and, without colours, to the log file."""
    with _lock:
        print(line, file=sys.stderr)
        if _log_file_stream is not None:
            _log_file_stream.write(_ANSI_RE.sub("", line) + "\n")
            _log_file_stream.flush()


# ============================================================================
# ANSI Colours
# ============================================================================

_colours = {
    "reset": "\033[0m",
    "bright": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "red": "\033[31m",
    "magenta": "\033[35m",
    "blue": "\033[34m",
    "gray": "\033[90m",
}

_level_colour = {
    "info": _colours["cyan"],
    "success": _colours["green"],
    "warn": _colours["yellow"],
    "error": _colours["red"],
    "debug": _colours["gray"],
    "timing": _colours["magenta"],
}

_level_symbol = {
    "info": "ℹ",
    "success": "✓",
    "warn": "⚠",
    "error": "✗",
    "debug": "•",
    "timing": "⏱",
}


def _get_timestamp() -> str:
    """Return the current UTC time as HH:MM:SS.mmm."""
    now = datetime.now(UTC)
    return now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"


def _format_duration(ms: float) -> str:
    """Format a duration in milliseconds for display."""
    if ms < 1000:
        return f"{int(ms)}ms"
    return f"{ms / 1000:.2f}s"


def _format_value(value: object) -> str:
    """Return an ANSI-coloured representation of *value*."""
    c = _colours
    if value is None:
        return f"{c['dim']}None{c['reset']}"
    if isinstance(value, bool):
        return f"{c['green']}True{c['reset']}" if value else f"{c['red']}False{c['reset']}"
    if isinstance(value, (int, float)):
        return f"{c['yellow']}{value}{c['reset']}"
    if isinstance(value, str):
        display = value[:297] + "..." if len(value) > 300 else value
        return f'{c["green"]}"{display}"{c["reset"]}'
    if isinstance(value, (list, tuple, set)):
        return f"{c['cyan']}[{len(value)} items]{c['reset']}"
    return str(value)


# ============================================================================
# Logger Class
# ============================================================================


class Logger:
    """Structured logger with context prefix and timing support."""

    def __init__(self, context: str = "Cichlid") -> None:
        self._context = context

    def _log(self, level: str, message: str, data: dict[str, object] | None = None) -> None:
        ts = _get_timestamp()
        colour = _level_colour.get(level, _colours["cyan"])
        symbol = _level_symbol.get(level, "ℹ")
        c = _colours

        prefix = f"{c['gray']}[{ts}]{c['reset']} {colour}{symbol}{c['reset']} {c['bright']}[{self._context}]{c['reset']}"

        if data:
            data_str = " ".join(f"{c['dim']}{k}={c['reset']}{_format_value(v)}" for k, v in data.items())
            _emit(f"{prefix} {message} {data_str}")
        else:
            _emit(f"{prefix} {message}")

    def info(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log an informational message."""
        self._log("info", message, data)

    def success(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log a success message."""
        self._log("success", message, data)

    def warn(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log a warning message."""
        self._log("warn", message, data)

    def error(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log an error message."""
        self._log("error", message, data)

    def debug(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log a debug-level message."""
        self._log("debug", message, data)

    def start_timer(self, label: str) -> None:
        """Start a named timer for measuring a purge."""
        key = f"{self._context}:{label}"
        with _lock:
            _timers[key] = (time.monotonic() * 1000, _get_timestamp())

    def end_timer(self, label: str, message: str | None = None) -> float:
        """Stop a named timer and log the elapsed time."""
        key = f"{self._context}:{label}"
        with _lock:
            entry = _timers.pop(key, None)
        if entry is None:
            self.warn(f'Timer "{label}" was not started')
            return 0.0

        start_ms, start_ts = entry
        duration = time.monotonic() * 1000 - start_ms
        c = _colours
        duration_str = f"{c['magenta']}{_format_duration(duration)}{c['reset']}"
        display_message = message or f"Completed: {label}"
        self._log(
            "timing",
            f"{display_message} {c['dim']}took{c['reset']} {duration_str} {c['dim']}(started {start_ts}){c['reset']}",
        )
        return duration

    def section(self, title: str) -> None:
        """Print a prominent section divider with *title*."""
        c = _colours
        line = "─" * 60
        _emit(f"\n{c['blue']}{line}{c['reset']}\n{c['blue']}{c['bright']}  {title}{c['reset']}\n{c['blue']}{line}{c['reset']}\n")


def create_logger(context: str) -> Logger:
    """Create a logger for a specific module."""
    return Logger(context)
