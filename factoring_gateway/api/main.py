"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from factoring_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from factoring_gateway.api.v1 import admin, offers, pricing_items
from factoring_gateway.infrastructure.database.session import init_db
from factoring_gateway.infrastructure.observability.logging import setup_logging
from factoring_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Invoice Factoring Gateway",
        description="Fee-schedule validation and offer settlement service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(pricing_items.router, prefix="/v1", tags=["pricing"])
    app.include_router(offers.router, prefix="/v1", tags=["offers"])
    app.include_router(admin.router, prefix="/v1", tags=["admin"])

    return app


app = create_app()
