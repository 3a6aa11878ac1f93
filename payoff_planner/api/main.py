"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from payoff_planner.api.middleware import RequestIDMiddleware, MetricsMiddleware
from payoff_planner.api.v1 import calculation, plan, payments
from payoff_planner.domain.exceptions import (
    DebtNotFoundError,
    DistributionAtomicityError,
    InsufficientPaymentError,
    InvalidStrategyError,
    NoDebtsError,
    PayoffNotConvergingError,
    PlanNotFoundError,
    ReportNotFoundError,
    UpstreamUnavailableError,
)
from payoff_planner.infrastructure.observability.logging import setup_logging
from payoff_planner.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain failures to HTTP responses"""

    async def not_found(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    async def invalid_strategy(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    async def not_converging(request: Request, exc: PayoffNotConvergingError) -> JSONResponse:
        deficit = str(exc.deficit) if isinstance(exc, InsufficientPaymentError) else None
        return JSONResponse(
            status_code=422,
            content={
                "detail": {
                    "message": "The monthly payment does not cover the interest. Please increase the payment amount.",
                    "deficit": deficit,
                }
            },
        )

    async def upstream_unavailable(request: Request, exc: Exception) -> JSONResponse:
        logging.error(f"Upstream error: {exc}", extra={"path": request.url.path})
        return JSONResponse(status_code=503, content={"detail": "Upstream service unavailable"})

    async def atomicity_failure(request: Request, exc: Exception) -> JSONResponse:
        logging.error(f"Payment batch rolled back: {exc}", extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"detail": "Payment could not be recorded"})

    for exc_class in (ReportNotFoundError, PlanNotFoundError, DebtNotFoundError, NoDebtsError):
        app.add_exception_handler(exc_class, not_found)
    app.add_exception_handler(InvalidStrategyError, invalid_strategy)
    app.add_exception_handler(PayoffNotConvergingError, not_converging)
    app.add_exception_handler(UpstreamUnavailableError, upstream_unavailable)
    app.add_exception_handler(DistributionAtomicityError, atomicity_failure)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Debt Payoff Planner",
        description="Snowball vs Avalanche payoff simulation and plan tracking",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(calculation.router, prefix="/v1", tags=["calculations"])
    app.include_router(plan.router, prefix="/v1", tags=["plans"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])

    return app


app = create_app()
