"""Tests for request-ID aware logging."""

import logging

from transcription_gateway.core.logging import RequestIDFilter, request_id_scope, request_id_var, setup_logging


def _record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)


def test_filter_outside_request_uses_dash():
    record = _record()

    assert RequestIDFilter().filter(record) is True
    assert record.request_id == "-"


def test_request_id_scope_binds_and_resets():
    with request_id_scope("abc123") as rid:
        assert rid == "abc123"
        record = _record()
        RequestIDFilter().filter(record)
        assert record.request_id == "abc123"

    assert request_id_var.get() == "-"


def test_request_id_scope_generates_ids():
    with request_id_scope() as rid:
        assert len(rid) == 12


def test_setup_logging_installs_single_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug")
        setup_logging("WARNING")

        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
