"""tracelog package root.

Leveled console + file logging with a manually maintained stack of scope
labels that is dumped alongside every ERROR or FATAL line.
"""
from tracelog.levels import Level
from tracelog.log import EmptyStackError, TraceLog, get_log, reset_for_tests
from tracelog.scoping import log_exceptions, refresh_threshold, scope, temp_threshold, traced
from tracelog.bridge import TraceLogHandler, install

__all__ = [
    "Level",
    "TraceLog",
    "EmptyStackError",
    "get_log",
    "reset_for_tests",
    "scope",
    "traced",
    "temp_threshold",
    "refresh_threshold",
    "log_exceptions",
    "TraceLogHandler",
    "install",
]
