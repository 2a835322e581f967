"""Tests for the JSON log formatter."""

import json
import logging

from opentelemetry.sdk.trace import TracerProvider

from statuspage.telemetry.logging import JsonFormatter


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("statuspage.test", logging.WARNING, __file__, 1, msg, args, None)


def test_message_with_quotes_stays_valid_json():
    line = JsonFormatter().format(_record("Skipping malformed entry: %s", 'id="a\\b"'))
    parsed = json.loads(line)

    assert parsed["level"] == "WARNING"
    assert parsed["logger"] == "statuspage.test"
    assert parsed["message"] == 'Skipping malformed entry: id="a\\b"'
    assert parsed["trace_id"] == "0"
    assert parsed["service"] == "status-page"


def test_active_span_ids_are_included():
    tracer = TracerProvider().get_tracer("test")
    with tracer.start_as_current_span("request") as span:
        parsed = json.loads(JsonFormatter().format(_record("inside span")))
        ctx = span.get_span_context()

    assert parsed["trace_id"] == format(ctx.trace_id, "032x")
    assert parsed["span_id"] == format(ctx.span_id, "016x")


def test_server_lines_omit_trace_fields():
    parsed = json.loads(JsonFormatter(with_trace=False).format(_record("GET /api/status")))
    assert "trace_id" not in parsed
