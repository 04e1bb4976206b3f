"""Tests for JSON formatting, context injection and logging setup."""
from __future__ import annotations

import json
import logging
import sys

import pytest

from billboard_service.infra.logging import (
    ContextInjectingFilter,
    JSONFormatter,
    clear_log_context,
    configure_logging,
    get_log_context,
    log_context,
    set_log_context,
    shutdown,
)


def make_record(message: str = "Flags refreshed", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="billboard_service.client.sync",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _empty_context():
    clear_log_context()
    yield
    clear_log_context()


class TestJSONFormatter:
    def test_core_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "billboard_service.client.sync"
        assert data["message"] == "Flags refreshed"
        assert data["timestamp"].endswith("Z")

    def test_extra_and_static_fields(self):
        formatter = JSONFormatter(static={"service": "billboard-service"})

        data = json.loads(formatter.format(make_record(recipients=3)))

        assert data["service"] == "billboard-service"
        assert data["recipients"] == 3
        assert "trace_id" not in data

    def test_exception_stays_on_one_line(self):
        try:
            raise ValueError("bad code")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        output = JSONFormatter().format(record)

        assert "\n" not in output
        assert "ValueError: bad code" in json.loads(output)["exception"]


class TestLogContext:
    def test_scoped_context(self):
        with log_context(billboard_code="4821"):
            assert get_log_context() == {"billboard_code": "4821"}
        assert get_log_context() == {}

    def test_set_and_clear(self):
        set_log_context(connection_id="abc")
        set_log_context(billboard_code="4821")

        assert get_log_context() == {"connection_id": "abc", "billboard_code": "4821"}

        clear_log_context()
        assert get_log_context() == {}

    def test_filter_copies_context_without_overwriting(self):
        record = make_record(billboard_code="explicit")

        with log_context(billboard_code="4821", connection_id="abc"):
            assert ContextInjectingFilter().filter(record) is True

        assert record.billboard_code == "explicit"
        assert record.connection_id == "abc"


def test_configure_logging_writes_json_lines(tmp_path):
    log_file = tmp_path / "logs" / "billboard.log"
    configure_logging(
        log_level="DEBUG",
        file_path=log_file,
        json_logs=True,
        console_enabled=False,
        service_name="billboard-test",
    )
    try:
        with log_context(billboard_code="4821"):
            logging.getLogger("billboard_service.test").info("Authenticated", extra={"posts": 2})
    finally:
        shutdown()

    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    record = next(line for line in lines if line["message"] == "Authenticated")
    assert record["service"] == "billboard-test"
    assert record["billboard_code"] == "4821"
    assert record["posts"] == 2
