"""FastAPI middleware for request tracing and metrics"""

import uuid
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from wallet_ledger.infrastructure.observability.metrics import request_duration_histogram


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add unique request ID to each request for log correlation"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request metrics"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        # Label by route template so wallet ids don't explode label cardinality
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        request_duration_histogram.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
        ).observe(duration)

        return response
