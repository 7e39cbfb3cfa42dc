"""Severity levels.

Levels are ordered most severe first: a *lower* value is *more* severe.
A message passes the threshold when ``level <= threshold``. This is the
inverse of stdlib ``logging`` numbering; use ``to_logging`` /
``from_logging`` when crossing between the two.
"""
from __future__ import annotations

import logging
from enum import IntEnum
from typing import Union

LevelLike = Union["Level", int, str]


class Level(IntEnum):
    FATAL = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4

    @classmethod
    def parse(cls, value: LevelLike) -> "Level":
        """Coerce a Level, its int value, or a case-insensitive name.

        ``WARNING`` and ``CRITICAL`` are accepted as the stdlib spellings of
        WARN and FATAL. Anything else raises ``ValueError``.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid log level: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            key = value.strip().upper()
            key = _ALIASES.get(key, key)
            try:
                return cls[key]
            except KeyError:
                raise ValueError(f"Unknown log level name: {value!r}") from None
        raise ValueError(f"Invalid log level: {value!r}")

    def to_logging(self) -> int:
        return _TO_LOGGING[self]

    @classmethod
    def from_logging(cls, levelno: int) -> "Level":
        # Walk from most severe; anything under DEBUG is still DEBUG.
        for level in cls:
            if levelno >= _TO_LOGGING[level]:
                return level
        return cls.DEBUG

    def is_error(self) -> bool:
        """ERROR or worse; these dump the scope stack."""
        return self <= Level.ERROR


_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}

_TO_LOGGING = {
    Level.FATAL: logging.CRITICAL,
    Level.ERROR: logging.ERROR,
    Level.WARN: logging.WARNING,
    Level.INFO: logging.INFO,
    Level.DEBUG: logging.DEBUG,
}


__all__ = ["Level", "LevelLike"]
