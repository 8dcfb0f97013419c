"""
Request tracing middleware
"""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from flight_booking.core.logging_config import generate_trace_id, set_trace_id
from flight_booking.core.metrics import http_request_duration_seconds, http_requests_total

logger = logging.getLogger(__name__)


def _endpoint_label(request: Request) -> str:
    """Route template rather than raw path, so ids don't explode label cardinality"""
    route = request.scope.get('route')
    return getattr(route, 'path', request.url.path)


class TracingMiddleware(BaseHTTPMiddleware):
    """Middleware to add trace ID to all requests"""

    async def dispatch(self, request: Request, call_next):
        # Generate or extract trace ID
        trace_id = request.headers.get('X-Trace-ID') or generate_trace_id()
        set_trace_id(trace_id)

        start_time = time.time()
        logger.debug(f"Request started: {request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={'duration_ms': round(duration_ms, 2)},
                exc_info=True,
            )
            raise

        duration = time.time() - start_time
        endpoint = _endpoint_label(request)
        http_requests_total.labels(
            method=request.method, endpoint=endpoint, status=str(response.status_code)
        ).inc()
        http_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(duration)

        logger.info(
            f"Request completed: {request.method} {request.url.path}",
            extra={'status_code': response.status_code, 'duration_ms': round(duration * 1000, 2)},
        )

        response.headers['X-Trace-ID'] = trace_id
        return response
