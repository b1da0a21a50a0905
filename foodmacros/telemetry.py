import logging

import phoenix as px
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry import trace as trace_api
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor

from foodmacros.config import Settings

logger = logging.getLogger(__name__)


def setup_telemetry(app, settings: Settings):
    # Start a Phoenix session
    session = px.launch_app()

    resource = Resource(attributes={
        "service.name": "food-macros-api",
    })

    trace_provider = TracerProvider(resource=resource)
    # Send traces to the Phoenix collector
    exporter = OTLPSpanExporter(endpoint=settings.tracing_endpoint)

    trace_provider.add_span_processor(SimpleSpanProcessor(exporter))
    trace_api.set_tracer_provider(trace_provider)

    FastAPIInstrumentor().instrument_app(app)

    logger.info("Phoenix is running on: %s", session.url)
    return session
