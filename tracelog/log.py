"""Core leveled logger with a diagnostic scope stack.

A ``TraceLog`` mirrors every line to the console and, once initialized, to
an append-mode log file. Both sinks are stdlib ``logging`` handlers hung off
a private, unregistered ``logging.Logger`` so every write is synchronous and
flushed before the call returns.

Usage:
    from tracelog import get_log
    log = get_log()
    log.initialize("app.log")
    log.push("load_config")
    log.error("missing key")   # line + stack dump
    log.pop()

Callers that prefer to own the lifetime construct ``TraceLog`` directly and
use it as a context manager; the process-wide handle from ``get_log()`` is
closed at interpreter exit.
"""
from __future__ import annotations

import atexit
import logging
import os
import sys
import threading
from datetime import datetime
from typing import IO, List, Optional, Tuple, Union

from tracelog import config
from tracelog.levels import Level, LevelLike

STACK_BANNER_OPEN = "====== Stack Trace ======"
STACK_BANNER_CLOSE = "========================="
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

PathLike = Union[str, "os.PathLike[str]"]


class EmptyStackError(LookupError):
    """Raised when peeking at an empty scope stack."""


class TraceLog:
    """Leveled console/file logger holding a stack of scope labels.

    States: uninitialized (console only) -> initialized (console + file)
    -> closed. Only ``initialize`` and ``close`` move between them.
    """

    def __init__(
        self,
        threshold: LevelLike = Level.INFO,
        *,
        stream: Optional[IO[str]] = None,
        indent: bool = False,
        name: str = "tracelog",
    ) -> None:
        self._threshold = Level.parse(threshold)
        self._indent = indent
        self._file_path: Optional[str] = None
        self._stack: List[str] = []
        self._file_handler: Optional[logging.FileHandler] = None
        self._closed = False

        # Not registered with logging.getLogger: several TraceLogs may share a
        # name without sharing handlers.
        self._sink = logging.Logger(name, logging.DEBUG)
        self._sink.propagate = False
        console = logging.StreamHandler(stream if stream is not None else sys.stdout)
        console.setFormatter(logging.Formatter("%(message)s"))
        self._sink.addHandler(console)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def threshold(self) -> Level:
        return self._threshold

    @threshold.setter
    def threshold(self, value: LevelLike) -> None:
        self._threshold = Level.parse(value)

    @property
    def file_path(self) -> Optional[str]:
        return self._file_path

    @property
    def initialized(self) -> bool:
        return self._file_handler is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def stack(self) -> Tuple[str, ...]:
        """Snapshot of the scope stack, oldest entry first."""
        return tuple(self._stack)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, path: PathLike) -> bool:
        """Open ``path`` for appending.

        Returns False without touching anything if a file was already opened
        (or the logger was closed). An ``OSError`` from opening propagates and
        leaves the logger uninitialized.
        """
        if self.initialized or self._closed:
            return False
        file_path = os.fspath(path)
        handler = logging.FileHandler(file_path, mode="a", encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        self._sink.addHandler(handler)
        self._file_handler = handler
        self._file_path = file_path
        self.info("Log initialised")
        return True

    def close(self) -> bool:
        """Write the shutdown line and close the file; True only the first time."""
        if not self.initialized:
            return False
        self.info("Log shutting down")
        handler = self._file_handler
        self._sink.removeHandler(handler)
        handler.close()  # type: ignore[union-attr]
        self._file_handler = None
        self._closed = True
        return True

    def __enter__(self) -> "TraceLog":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def write(self, message: str) -> None:
        """Emit ``message`` verbatim to every sink; no filtering."""
        self._emit(message, logging.INFO)

    def _emit(self, message: str, levelno: int) -> None:
        # Skip Logger.log: its enabled check honours logging.disable().
        record = self._sink.makeRecord(self._sink.name, levelno, "(tracelog)", 0, message, None, None)
        self._sink.handle(record)

    def _timestamp(self) -> str:
        return datetime.now().strftime(TIMESTAMP_FORMAT)

    def _format(self, level: Level, message: str) -> str:
        pad = " " * len(self._stack) if self._indent else ""
        return f"[ {self._timestamp()} ] {pad}{level.name} {message}"

    def log(self, level: LevelLike, message: str) -> bool:
        level = Level.parse(level)
        if level > self._threshold:
            return False
        levelno = level.to_logging()
        self._emit(self._format(level, message), levelno)
        if level.is_error():
            self._emit(STACK_BANNER_OPEN, levelno)
            for label in reversed(self._stack):
                self._emit(label, levelno)
            self._emit(STACK_BANNER_CLOSE, levelno)
        return True

    def fatal(self, message: str) -> bool:
        return self.log(Level.FATAL, message)

    def error(self, message: str) -> bool:
        return self.log(Level.ERROR, message)

    def warn(self, message: str) -> bool:
        return self.log(Level.WARN, message)

    def info(self, message: str) -> bool:
        return self.log(Level.INFO, message)

    def debug(self, message: str) -> bool:
        return self.log(Level.DEBUG, message)

    # ------------------------------------------------------------------
    # Scope stack
    # ------------------------------------------------------------------

    def push(self, label: str) -> bool:
        if not label:
            return False
        self.info(f"BEGIN - {label}")
        self._stack.append(label)
        return True

    def pop(self) -> str:
        """Remove and return the top label; "" when the stack is empty."""
        if not self._stack:
            return ""
        label = self._stack.pop()
        self.info(f"END - {label}")
        return label

    def peek(self) -> str:
        if not self._stack:
            raise EmptyStackError("scope stack is empty")
        return self._stack[-1]

    def __repr__(self) -> str:
        return (
            f"TraceLog(threshold={self._threshold.name}, file_path={self._file_path!r}, "
            f"depth={len(self._stack)})"
        )


# ---------------------------------------------------------------------------
# Process-wide handle
# ---------------------------------------------------------------------------

_LOCK = threading.Lock()
_LOG: Optional[TraceLog] = None


def _configured_threshold() -> Tuple[Level, Optional[str]]:
    name = config.log_level_name()
    try:
        return Level.parse(name), None
    except ValueError:
        return Level.INFO, name


def get_log() -> TraceLog:
    """Return the process-wide TraceLog, creating it on first use.

    Threshold and indentation come from ``tracelog.config``; when
    TRACELOG_FILE is set the file is opened immediately. The instance is
    closed by an ``atexit`` hook.
    """
    global _LOG
    if _LOG is not None:
        return _LOG
    with _LOCK:
        if _LOG is not None:
            return _LOG
        threshold, bad_name = _configured_threshold()
        log = TraceLog(threshold, indent=config.indent_by_depth())
        path = config.log_file_path()
        if path:
            log.initialize(path)
        if bad_name is not None:
            log.warn(f"Unknown TRACELOG_LEVEL {bad_name!r}; using INFO")
        log.debug(f"Runtime config: {config.summarize_runtime_config()}")
        atexit.register(log.close)
        _LOG = log
        return log


def reset_for_tests() -> None:
    """Close and forget the process-wide logger."""
    global _LOG
    with _LOCK:
        if _LOG is None:
            return
        atexit.unregister(_LOG.close)
        _LOG.close()
        _LOG = None


__all__ = [
    "TraceLog",
    "EmptyStackError",
    "STACK_BANNER_OPEN",
    "STACK_BANNER_CLOSE",
    "TIMESTAMP_FORMAT",
    "get_log",
    "reset_for_tests",
]
