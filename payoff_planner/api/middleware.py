"""FastAPI middleware for request tracing and metrics"""

import uuid
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from payoff_planner.infrastructure.observability.logging import request_id_var, user_id_var
from payoff_planner.infrastructure.observability.metrics import request_duration_histogram


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Propagate the gateway's X-Request-ID (or mint one) and expose it,
    together with X-User-Id, to every log line written for the request.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        request_token = request_id_var.set(request_id)
        user_token = user_id_var.set(request.headers.get("X-User-Id"))
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(request_token)
            user_id_var.reset(user_token)

        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP latency per route template (ids stay out of the labels)"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)

        route = request.scope.get("route")
        request_duration_histogram.labels(
            method=request.method,
            endpoint=getattr(route, "path", request.url.path),
            status=response.status_code,
        ).observe(time.perf_counter() - started)

        return response
