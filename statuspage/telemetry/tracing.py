"""OpenTelemetry tracing for the status service."""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

SERVICE_NAME = "status-page"
SERVICE_VERSION = "1.0.0"

_provider: TracerProvider | None = None


def _export_to(otlp_endpoint: str) -> TracerProvider:
    global _provider
    if _provider is None:
        _provider = TracerProvider(
            resource=Resource.create({"service.name": SERVICE_NAME, "service.version": SERVICE_VERSION})
        )
        _provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True)))
        trace.set_tracer_provider(_provider)
    return _provider


def setup_tracing(app: FastAPI, otlp_endpoint: str = "") -> None:
    """Instrument request handling; spans are exported only when an OTLP endpoint is set."""
    if otlp_endpoint:
        FastAPIInstrumentor.instrument_app(app, tracer_provider=_export_to(otlp_endpoint))
    else:
        FastAPIInstrumentor.instrument_app(app)
