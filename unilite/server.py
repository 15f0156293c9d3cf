import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import Info
from prometheus_fastapi_instrumentator import Instrumentator

from unilite.vars import (
    MOCK_ORIGIN_ENABLED,
    ORIGIN_BASE_URL,
    OTLP_ENDPOINT,
    OTLP_HEADERS,
    SERVICE_NAME,
    STATIC_DIR,
)
from .routes import router
from .mock_origin import router as mock_origin_router

logger = logging.getLogger("uvicorn.error")

app = FastAPI(
    title="UniLite Proxy",
    description="Bandwidth-saving proxy for a university ERP portal.",
    version="0.1.0",
)
instrumentator = Instrumentator()
instrumentator.instrument(app).expose(app)

# Pages are text-heavy; compress everything worth compressing
app.add_middleware(GZipMiddleware, minimum_size=500)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

trace.set_tracer_provider(
    TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
)
if OTLP_ENDPOINT:
    otlp_exporter = OTLPSpanExporter(
        endpoint=OTLP_ENDPOINT,
        headers=OTLP_HEADERS or None,
    )
    trace.get_tracer_provider().add_span_processor(BatchSpanProcessor(otlp_exporter))

FastAPIInstrumentor.instrument_app(app, excluded_urls="metrics,static")

app_info = Info("fastapi_app_info", "Application Info")
app_info.info({"app_name": SERVICE_NAME, "origin": ORIGIN_BASE_URL})

if os.path.isdir(STATIC_DIR):
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
else:
    logger.warning(f"[Server] Static directory {STATIC_DIR} not found, client shell disabled")

app.include_router(router)
if MOCK_ORIGIN_ENABLED:
    app.include_router(mock_origin_router)
    logger.info("[Server] Mock origin enabled at /mock-erp")
