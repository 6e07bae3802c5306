"""
GymCMS Backend — Rate Limiting Middleware
===========================================

What:  Per-IP sliding window limiter for the authentication endpoints.
Why:   Slows down password guessing against /api/auth/login.
How:   Keeps the request timestamps of each IP in memory. Timestamps older
       than the window are dropped on every request; once the remaining
       count reaches the limit the request is rejected with 429.

Defaults (settings):
    rate_limit_path_prefix  /api/auth
    rate_limit_requests     100
    rate_limit_window       900 seconds (15 minutes)

Single process only: each uvicorn worker keeps its own counters.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from gymcms.config import settings
from gymcms.exceptions import RateLimitExceededError, error_payload
from gymcms.middleware.request_id import client_address, request_id_var

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        path_prefix: Optional[str] = None,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ):
        super().__init__(app)
        self.path_prefix = path_prefix or settings.rate_limit_path_prefix
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self._requests: Dict[str, List[float]] = defaultdict(list)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_ip = client_address(request) or "unknown"
        now = time.time()
        window_start = now - self.window_seconds

        # ── Sliding window: drop expired entries ──────────────────────────
        timestamps = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = timestamps

        if len(timestamps) >= self.max_requests:
            retry_after = int(timestamps[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                self.window_seconds,
            )
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=exc.status_code,
                content=error_payload(exc, request_id_var.get("")),
                headers={"Retry-After": str(retry_after)},
            )

        timestamps.append(now)

        # Forget idle IPs now and then so the dict cannot grow without bound
        if len(self._requests) > 1000:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]
        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
