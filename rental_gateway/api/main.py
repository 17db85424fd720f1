"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from rental_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from rental_gateway.api.v1 import agreements, pricing, reservations
from rental_gateway.infrastructure.observability.logging import setup_logging
from rental_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Rental Gateway",
        description="Instant-booking pricing, auto-approval and agreement drafting",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(pricing.router, prefix="/v1", tags=["pricing"])
    app.include_router(reservations.router, prefix="/v1", tags=["reservations"])
    app.include_router(agreements.router, prefix="/v1", tags=["agreements"])

    return app


app = create_app()
