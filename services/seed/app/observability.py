from __future__ import annotations

import time
from collections.abc import Callable

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor


REGISTRY = CollectorRegistry()
ProcessCollector(registry=REGISTRY)
PlatformCollector(registry=REGISTRY)
GCCollector(registry=REGISTRY)

# Label for requests that matched no route (404s); raw paths never become label values.
UNMATCHED_ROUTE = "unmatched"

REQUESTS_TOTAL = Counter(
    "requests_total",
    "Requests by route template and status class",
    ["service", "route", "method", "status_class"],
    registry=REGISTRY,
)
REQUEST_LATENCY = Histogram(
    "request_latency_ms",
    "Request latency in milliseconds",
    ["service", "route", "method"],
    buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
    registry=REGISTRY,
)
SEED_RUNS_TOTAL = Counter("seed_runs_total", "Seed runs by outcome", ["outcome"], registry=REGISTRY)

# One provider per process; every app built by create_app() shares it.
_PROVIDER: TracerProvider | None = None
_TRACED_ENGINES: list[Engine] = []


def setup_tracing(app: FastAPI, service_name: str) -> TracerProvider:
    global _PROVIDER
    if _PROVIDER is None:
        _PROVIDER = TracerProvider(resource=Resource.create({"service.name": service_name}))
        _PROVIDER.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
        trace.set_tracer_provider(_PROVIDER)
    FastAPIInstrumentor.instrument_app(app, tracer_provider=_PROVIDER)
    return _PROVIDER


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    # SQLAlchemyInstrumentor is a singleton that ignores repeat instrument() calls,
    # so re-register with the full engine list each time a new engine appears.
    instrumentor = SQLAlchemyInstrumentor()
    if instrumentor.is_instrumented_by_opentelemetry:
        instrumentor.uninstrument()
    _TRACED_ENGINES.append(engine.sync_engine)
    instrumentor.instrument(engines=list(_TRACED_ENGINES), tracer_provider=_PROVIDER)


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)


def add_metrics_middleware(app: FastAPI, service_name: str) -> None:
    @app.middleware("http")
    async def _metrics(request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        resp = await call_next(request)
        # Routing has filled scope["route"] by the time the response comes back.
        route = _route_template(request)
        REQUEST_LATENCY.labels(service_name, route, request.method).observe((time.perf_counter() - start) * 1000)
        REQUESTS_TOTAL.labels(service_name, route, request.method, f"{resp.status_code // 100}xx").inc()
        return resp

    @app.get("/metrics")
    async def metrics() -> Response:
        return Response(generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
