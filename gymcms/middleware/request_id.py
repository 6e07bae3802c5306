"""
GymCMS Backend — Request ID Middleware
========================================

What:  Assigns an ID to each incoming request and echoes it in the response.
Why:   Every log line and every error body of a request share the same ID,
       so an admin reporting a failure can quote it.
How:   Honours a client-supplied X-Request-ID, otherwise generates a short
       UUID. The value is kept in a ContextVar (coroutine-local) and on
       request.state.

Client address:
    client_address() is the one place a request's IP is decided. The rate
    limiter, the access log and the activity journal all use it, so they
    always agree. X-Forwarded-For is read only when
    settings.trust_forwarded_for is on.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from gymcms.config import settings

# Coroutine-local: concurrent requests on one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def client_address(request: Request, trust_forwarded: Optional[bool] = None) -> Optional[str]:
    if trust_forwarded is None:
        trust_forwarded = settings.trust_forwarded_for
    if trust_forwarded:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else None


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 characters are enough to correlate log lines; blank headers count as missing
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
