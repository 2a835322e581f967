"""Structured JSON logging with trace context."""

import json
import logging
import sys

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource

from statuspage.telemetry.tracing import SERVICE_NAME, SERVICE_VERSION

LOGGER_NAME = "statuspage"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, tagged with the active span's ids when there is one."""

    def __init__(self, with_trace: bool = True) -> None:
        super().__init__()
        self._with_trace = with_trace

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self._with_trace:
            ctx = trace.get_current_span().get_span_context()
            line["trace_id"] = format(ctx.trace_id, "032x") if ctx.is_valid else "0"
            line["span_id"] = format(ctx.span_id, "016x") if ctx.is_valid else "0"
            line["service"] = SERVICE_NAME
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def _otlp_handler(otlp_endpoint: str, level: int | str) -> logging.Handler:
    provider = LoggerProvider(
        resource=Resource.create({"service.name": SERVICE_NAME, "service.version": SERVICE_VERSION})
    )
    provider.add_log_record_processor(
        BatchLogRecordProcessor(OTLPLogExporter(endpoint=otlp_endpoint, insecure=True))
    )
    return LoggingHandler(level=level, logger_provider=provider)


def setup_logging(otlp_endpoint: str = "", level: int | str = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # create_app may run more than once per process (tests); keep one set of handlers.
    if getattr(logger, "_statuspage_configured", False):
        return logger

    stdout = logging.StreamHandler(sys.stdout)
    stdout.setFormatter(JsonFormatter())
    logger.addHandler(stdout)

    if otlp_endpoint:
        logger.addHandler(_otlp_handler(otlp_endpoint, level))

    server_handler = logging.StreamHandler(sys.stdout)
    server_handler.setFormatter(JsonFormatter(with_trace=False))
    for name in ("uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).handlers = [server_handler]

    logger._statuspage_configured = True
    return logger
