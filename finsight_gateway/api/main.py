"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finsight_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finsight_gateway.api.v1 import accounts, goals, insights, transactions
from finsight_gateway.infrastructure.observability.logging import setup_logging
from finsight_gateway.config import settings

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finsight Gateway",
        description="Personal-finance insights, goals, and transaction service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(insights.router, prefix="/v1", tags=["insights"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])

    return app


app = create_app()
