"""Tests for forwarding stdlib logging records into a TraceLog."""
from __future__ import annotations

import io
import logging

import pytest

from tracelog.bridge import TraceLogHandler, install
from tracelog.levels import Level
from tracelog.log import STACK_BANNER_OPEN, TraceLog


@pytest.fixture
def console():
    return io.StringIO()


@pytest.fixture
def stdlib_logger():
    name = "tracelog.tests.bridge"
    logger = logging.getLogger(name)
    yield name
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_install_is_idempotent(stdlib_logger, console):
    log = TraceLog(stream=console)
    first = install(stdlib_logger, log)
    second = install(stdlib_logger, log)
    assert first is second
    logger = logging.getLogger(stdlib_logger)
    assert sum(isinstance(h, TraceLogHandler) for h in logger.handlers) == 1
    assert logger.propagate is False


def test_records_are_mapped_and_filtered_by_tracelog(stdlib_logger, console):
    log = TraceLog(Level.WARN, stream=console)
    install(stdlib_logger, log)
    logger = logging.getLogger(stdlib_logger)

    logger.info("hidden %s", "detail")
    logger.warning("disk at %d%%", 91)
    lines = console.getvalue().splitlines()
    assert len(lines) == 1
    assert lines[0].endswith(f"WARN {stdlib_logger}: disk at 91%")


def test_error_records_dump_stack(stdlib_logger, console):
    log = TraceLog(stream=console)
    install(stdlib_logger, log)
    log.push("request")

    logging.getLogger(stdlib_logger).error("failed")
    lines = console.getvalue().splitlines()
    assert lines[-4].endswith(f"ERROR {stdlib_logger}: failed")
    assert lines[-3:-1] == [STACK_BANNER_OPEN, "request"]


def test_install_again_retargets_handler(stdlib_logger):
    first_out, second_out = io.StringIO(), io.StringIO()
    first = TraceLog(stream=first_out)
    second = TraceLog(stream=second_out)
    handler = install(stdlib_logger, first)
    assert install(stdlib_logger, second) is handler
    assert handler.target is second
    assert install(stdlib_logger) is handler
    assert handler.target is second

    logging.getLogger(stdlib_logger).warning("moved")
    assert first_out.getvalue() == ""
    assert second_out.getvalue().rstrip().endswith(f"WARN {stdlib_logger}: moved")
