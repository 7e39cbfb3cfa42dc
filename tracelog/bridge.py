"""Forward stdlib ``logging`` records into a TraceLog.

Lets code that already logs through ``logging.getLogger(...)`` share the
TraceLog sinks, threshold and stack dumps.
"""
from __future__ import annotations

import logging
from typing import Optional

from tracelog.levels import Level
from tracelog.log import TraceLog, get_log


class TraceLogHandler(logging.Handler):
    """Handler that re-emits each record through ``TraceLog.log``.

    Threshold filtering is left to the TraceLog. With ``log=None`` the
    process-wide instance is looked up on every record.
    """

    def __init__(self, log: Optional[TraceLog] = None) -> None:
        super().__init__(logging.NOTSET)
        self._log = log

    @property
    def target(self) -> TraceLog:
        return self._log if self._log is not None else get_log()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            self.target.log(Level.from_logging(record.levelno), message)
        except Exception:
            self.handleError(record)


def install(logger_name: Optional[str] = None, log: Optional[TraceLog] = None) -> TraceLogHandler:
    """Attach a single TraceLogHandler to ``logging.getLogger(logger_name)``.

    Calling again returns the handler already installed; passing ``log``
    retargets it at that TraceLog.
    """
    logger = logging.getLogger(logger_name)
    for handler in logger.handlers:
        if isinstance(handler, TraceLogHandler):
            if log is not None:
                handler._log = log
            return handler
    handler = TraceLogHandler(log)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    # Prevent messages from bubbling to root if root also configured
    logger.propagate = False
    return handler


__all__ = ["TraceLogHandler", "install"]
