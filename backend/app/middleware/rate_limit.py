"""
Grievance Portal Backend — Submission Rate Limiting
====================================================

What:  Per-IP sliding window limit on anonymous message submissions.
How:   Keeps the timestamps of each IP's recent submissions in memory. A
       submission is refused with 429 once `rate_limit_requests` of them fall
       inside the last `rate_limit_window` seconds.
Who:   Applied to every request, but only POST /api/message is counted.
       Authenticated dashboard traffic and the share page are never limited.

State is per process: with several workers each one enforces its own window.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, FrozenSet, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.exceptions import RateLimitExceededError
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding window limiter for the public submission endpoint."""

    LIMITED_ROUTES: FrozenSet[Tuple[str, str]] = frozenset({("POST", "/api/message")})

    # Idle IPs are swept once every this many counted submissions
    CLEANUP_EVERY = 1000

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._counted = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if (request.method, request.url.path) not in self.LIMITED_ROUTES:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        window = settings.rate_limit_window
        hits = self._hits[client_ip]

        while hits and hits[0] <= now - window:
            hits.popleft()

        if len(hits) >= settings.rate_limit_requests:
            retry_after = int(hits[0] + window - now) + 1
            logger.warning(
                "Submission rate limit exceeded for %s: %d in %ds",
                client_ip,
                len(hits),
                window,
            )
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(retry_after)},
            )

        hits.append(now)
        self._counted += 1
        if self._counted % self.CLEANUP_EVERY == 0:
            self._forget_idle(now - window)
        return await call_next(request)

    def _forget_idle(self, window_start: float) -> None:
        idle = [ip for ip, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for ip in idle:
            del self._hits[ip]
        if idle:
            logger.debug("Rate limiter forgot %d idle IPs", len(idle))
