"""
Scoped helpers around a TraceLog.

Responsibilities:
  - Guarantee matching push/pop of scope labels on every exit path.
  - Temporarily change the threshold inside a block.
  - Decorate functions for exception logging (with the stack still intact).
  - Re-read the configured threshold at runtime.

Usage:
    from tracelog.scoping import scope, traced

    with scope("import_books"):
        ...

    @traced()
    def sync_catalog():
        ...

Every helper takes an optional ``log``; when omitted the process-wide
``get_log()`` instance is used.
"""

from __future__ import annotations

import contextlib
import functools
from typing import Any, Callable, Iterator, Optional, TypeVar

from tracelog import config
from tracelog.levels import Level, LevelLike
from tracelog.log import TraceLog, get_log

T = TypeVar("T")


def _resolve(log: Optional[TraceLog]) -> TraceLog:
    return log if log is not None else get_log()


# ---------------------------------------------------------------------------
# Scope labels
# ---------------------------------------------------------------------------

@contextlib.contextmanager
def scope(label: str, log: Optional[TraceLog] = None) -> Iterator[TraceLog]:
    """
    Push ``label`` for the duration of the block and pop it on the way out,
    whether the block returns or raises.

    Raises ValueError for an empty label (nothing is pushed).
    """
    target = _resolve(log)
    if not target.push(label):
        raise ValueError("scope label must be a non-empty string")
    try:
        yield target
    finally:
        target.pop()


def traced(
    label: Optional[str] = None,
    log: Optional[TraceLog] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator running the wrapped function inside ``scope``.

    The label defaults to the function's qualified name.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = label or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            with scope(name, log):
                return func(*args, **kwargs)
        return wrapper
    return decorator


# ---------------------------------------------------------------------------
# Threshold management
# ---------------------------------------------------------------------------

@contextlib.contextmanager
def temp_threshold(level: LevelLike, log: Optional[TraceLog] = None) -> Iterator[TraceLog]:
    """
    Temporarily set the threshold inside a context.

    Example:
        with temp_threshold(Level.DEBUG):
            log.debug("Verbose details")
    """
    target = _resolve(log)
    old = target.threshold
    target.threshold = level
    try:
        yield target
    finally:
        target.threshold = old


def refresh_threshold(log: Optional[TraceLog] = None) -> Level:
    """
    Re-read TRACELOG_LEVEL and apply it if changed.
    Returns the effective (possibly updated) threshold; an unknown name
    leaves the threshold as it was.
    """
    target = _resolve(log)
    name = config.log_level_name()
    try:
        new_level = Level.parse(name)
    except ValueError:
        target.warn(f"Unknown TRACELOG_LEVEL {name!r}; keeping {target.threshold.name}")
        return target.threshold
    if target.threshold != new_level:
        old = target.threshold
        target.threshold = new_level
        target.info(f"Log threshold changed from {old.name} to {new_level.name}")
    return target.threshold


# ---------------------------------------------------------------------------
# Exception logging decorator
# ---------------------------------------------------------------------------

def log_exceptions(
    *,
    reraise: bool = True,
    level: LevelLike = Level.ERROR,
    message: str = "Unhandled exception",
    log: Optional[TraceLog] = None,
) -> Callable[[Callable[..., T]], Callable[..., Optional[T]]]:
    """
    Decorator to log exceptions raised by the wrapped function.

    Parameters:
      reraise: If True (default), exception is re-raised after logging.
      level:   Level used for the record; ERROR or worse dumps the stack.
      message: Base message prefix.

    Stack it under ``traced`` to have the function's own label in the dump:

        @traced()
        @log_exceptions(message="Syncing catalog")
        def sync_catalog(...):
            ...
    """
    record_level = Level.parse(level)

    def decorator(func: Callable[..., T]) -> Callable[..., Optional[T]]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Optional[T]:
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                _resolve(log).log(record_level, f"{message}: {exc}")
                if reraise:
                    raise
                return None
        return wrapper
    return decorator


__all__ = [
    "scope",
    "traced",
    "temp_threshold",
    "refresh_threshold",
    "log_exceptions",
]
