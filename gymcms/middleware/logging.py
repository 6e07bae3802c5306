"""
GymCMS Backend — Request Logging Middleware
=============================================

What:  One access log line per HTTP request.
How:   Measures wall time around the handler and logs method, path, status,
       duration, request ID and client IP on the "gymcms.access" logger.
       The line also names the admin user who made the request (user=<id>)
       or "anon"; the route dependencies leave the id on request.state.

Level by status class:
    5xx → ERROR    4xx → WARNING    otherwise → INFO

Privacy:
    Request bodies and the Authorization header are never logged; login
    bodies carry passwords.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from gymcms.middleware.request_id import client_address, request_id_var

logger = logging.getLogger("gymcms.access")

HEALTH_PATH = "/api/health"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = client_address(request) or "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        # Health probes run every few seconds
        if path == HEALTH_PATH:
            return await call_next(request)

        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000
        caller_id = getattr(request.state, "caller_id", None)
        actor = f"user={caller_id}" if caller_id is not None else "anon"

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] %s from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            actor,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "caller_id": caller_id,
            },
        )
        return response
