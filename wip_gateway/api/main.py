"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from wip_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from wip_gateway.api.v1 import rates, timesheet, wip
from wip_gateway.infrastructure.observability.logging import setup_logging
from wip_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="WIP Gateway",
        description="Time capture and work-in-progress billing exposure service",
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

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(timesheet.router, prefix="/v1", tags=["time"])
    app.include_router(wip.router, prefix="/v1", tags=["wip"])
    app.include_router(rates.router, prefix="/v1", tags=["rates"])

    return app


app = create_app()
