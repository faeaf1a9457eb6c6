"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from wealth_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from wealth_engine.api.v1 import drip, options, paycheck, retirement
from wealth_engine.infrastructure.observability.logging import setup_logging
from wealth_engine.config import settings

setup_logging(settings.log_level)

# (router module, OpenAPI tag)
CALCULATOR_ROUTERS = (
    (drip, "dividends"),
    (options, "options"),
    (paycheck, "paycheck"),
    (retirement, "retirement"),
)


def create_app() -> FastAPI:
    """Build the calculator service; calculators live under /v1"""
    app = FastAPI(
        title="Wealth Engine",
        description="Dividend, options, paycheck and retirement projections",
        version="0.1.0",
    )

    # Last added runs first, so request ids exist before metrics are observed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "tax_year": settings.tax_year,
            "calculators": [tag for _, tag in CALCULATOR_ROUTERS],
        }

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for module, tag in CALCULATOR_ROUTERS:
        app.include_router(module.router, prefix="/v1", tags=[tag])

    return app


app = create_app()
