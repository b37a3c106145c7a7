"""
OpenTelemetry tracing for the booking service.

Spans come from three places:
- FastAPI auto-instrumentation (one server span per request)
- SQLAlchemy auto-instrumentation on the async engine (one span per statement)
- Manual `tracer.start_as_current_span(...)` in controllers and use cases

Export goes to an OTLP collector when `OTEL_EXPORTER_OTLP_ENDPOINT` is set and to
stdout when `OTEL_CONSOLE_EXPORT=true`; otherwise spans are created but dropped.
"""

import os
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON


class TracingConfig:
    """
    Usage:
        tracing = TracingConfig(service_name='flight-booking-service')
        tracing.setup()
        tracing.instrument_sqlalchemy(engine=get_engine())
        ...
        tracing.shutdown()
    """

    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: str | None = None,
        enable_console: bool = False,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
        self.enable_console = (
            enable_console or os.getenv('OTEL_CONSOLE_EXPORT', 'false').lower() == 'true'
        )
        self._provider: TracerProvider | None = None

    def setup(self) -> None:
        """Install the global tracer provider; call once at startup"""
        resource = Resource(attributes={SERVICE_NAME: self.service_name})
        # Sample everything here; volume control belongs in the collector
        self._provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)

        if self.otlp_endpoint:
            self._provider.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter(endpoint=self.otlp_endpoint))
            )
        if self.enable_console:
            self._provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any, excluded_urls: str = 'health') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        # AsyncEngine is instrumented through its sync_engine
        target = engine.sync_engine if hasattr(engine, 'sync_engine') else engine
        SQLAlchemyInstrumentor().instrument(engine=target)

    def shutdown(self) -> None:
        """Flush pending spans"""
        if self._provider:
            self._provider.shutdown()
