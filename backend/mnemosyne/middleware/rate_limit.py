"""
Mnemosyne Backend — Rate Limiting Middleware
==============================================

What:  Per-IP sliding window rate limiter.
How:   Keeps the timestamps of each IP's requests inside the window; once an
       IP has `max_requests` timestamps in the window, further requests are
       answered with 429 and a `Retry-After` header until the oldest expires.

Limits:
    RATE_LIMIT_ENABLED   master switch (tests and trusted deployments turn it off)
    RATE_LIMIT_REQUESTS  requests allowed per window per IP
    RATE_LIMIT_WINDOW    window length in seconds

State is in process memory and therefore per worker.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from mnemosyne.config import settings
from mnemosyne.exceptions import RateLimitExceededError
from mnemosyne.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

# Sweep idle IPs after this many recorded requests
CLEANUP_INTERVAL = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        enabled: Optional[bool] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests if max_requests is not None else settings.rate_limit_requests
        self.window_seconds = (
            window_seconds if window_seconds is not None else settings.rate_limit_window
        )
        self.enabled = enabled if enabled is not None else settings.rate_limit_enabled
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._recorded = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if (
            not self.enabled
            or request.method == "OPTIONS"
            or request.url.path in self.EXCLUDED_PATHS
        ):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        window_start = now - self.window_seconds

        recent = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = recent

        if len(recent) >= self.max_requests:
            retry_after = int(recent[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip, len(recent), self.window_seconds,
            )
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "error": exc.message,
                    "requestId": request_id_var.get("") or None,
                },
                headers={"Retry-After": str(retry_after)},
            )

        recent.append(now)
        self._recorded += 1
        if self._recorded % CLEANUP_INTERVAL == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        inactive = [
            ip for ip, stamps in self._requests.items()
            if not stamps or stamps[-1] < window_start
        ]
        for ip in inactive:
            del self._requests[ip]
        if inactive:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive))
