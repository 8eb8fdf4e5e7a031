"""Tests for the structured logging system (bignumber_kernel/logging_config.py)."""

import json
import logging
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from bignumber_kernel.domain.values import BigNumber
from bignumber_kernel.exceptions import CastError
from bignumber_kernel.fields.big_number_field import BigNumberField
from bignumber_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests, then restore the suite's config."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG)


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "bignumber_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("cast_ok", extra={"scale": 2, "kind": "min"})

        record = _parse_log(stream)
        assert record["scale"] == 2
        assert record["kind"] == "min"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="abc-123", model="Invoice", path="total")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["model"] == "Invoice"
        assert record["path"] == "total"

    def test_big_number_rendered(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info(
            "threshold",
            extra={"threshold": BigNumber("1.005", 2), "raw": Decimal("1.005")},
        )

        record = _parse_log(stream)
        assert record["threshold"] == "1.01"
        assert record["raw"] == "1.005"

    def test_uuid_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        uid = uuid4()
        get_logger("test").info("with_uuid", extra={"row_id": uid})

        assert _parse_log(stream)["row_id"] == str(uid)

    def test_kernel_exception_fields_extracted(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise CastError("BigNumber", "abc", "total")
        except CastError:
            get_logger("test").error("cast_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "CAST_ERROR"
        assert record["exc_type"] == "CastError"
        assert record["exc_path"] == "total"
        assert record["exc_raw_value"] == "abc"
        assert "traceback" in record

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "model" not in record

    def test_debug_suppressed_at_info(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _parse_all_logs(stream)
        assert [r["message"] for r in logs] == ["first", "second"]


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", operator="in")
        assert LogContext.get_all() == {"correlation_id": "x", "operator": "in"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_restores_previous(self):
        LogContext.set(path="outer")
        with LogContext.bind(path="inner"):
            assert LogContext.get_all()["path"] == "inner"
        assert LogContext.get_all()["path"] == "outer"

    def test_bind_restores_none(self):
        with LogContext.bind(model="Sample"):
            assert LogContext.get_all()["model"] == "Sample"
        assert "model" not in LogContext.get_all()


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for initialization."""

    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)
        handlers = logging.getLogger("bignumber_kernel").handlers
        assert h1 in handlers
        assert h2 not in handlers

    def test_get_logger_returns_child(self):
        assert get_logger("fields.big_number").name == "bignumber_kernel.fields.big_number"

    def test_field_events_reach_configured_handler(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        BigNumberField("total").min(5)

        record = _parse_log(stream)
        assert record["message"] == "validator_registered"
        assert record["logger"] == "bignumber_kernel.fields.big_number"
        assert record["threshold"] == "5"
