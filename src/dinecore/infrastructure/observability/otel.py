from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.propagate import inject, set_global_textmap
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

TRACER_NAME = "dinecore.remote_api"
UNTRACED_URLS = "health/live,health/ready,metrics"

logger = logging.getLogger(__name__)
_provider: TracerProvider | None = None


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(TRACER_NAME)


def propagation_headers() -> dict[str, str]:
    """W3C trace context for the active span, to attach to calls to the remote store."""
    headers: dict[str, str] = {}
    inject(headers)
    return headers


def _span_exporter(endpoint: str) -> OTLPSpanExporter | None:
    try:
        return OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
    except Exception:
        logger.exception("otel_exporter_setup_failed")
        return None


def _install_provider() -> TracerProvider:
    resource = Resource.create(
        {
            SERVICE_NAME: os.getenv("OTEL_SERVICE_NAME", "dinecore-bff"),
            SERVICE_VERSION: os.getenv("APP_VERSION", "0.1.0"),
        }
    )
    provider = TracerProvider(resource=resource)
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    exporter = _span_exporter(endpoint) if endpoint else None
    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())
    return provider


def configure_otel(app: FastAPI) -> None:
    # The provider is process-wide; each app built in the process is still instrumented.
    global _provider
    if _provider is None:
        _provider = _install_provider()
    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=_provider,
        excluded_urls=UNTRACED_URLS,
    )
