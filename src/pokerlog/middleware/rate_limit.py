"""Redis-backed fixed window rate limiting per client IP."""

import time
from typing import Any

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from pokerlog.redis_client import get_redis

logger = structlog.get_logger()

# Health endpoints are never rate limited
_EXEMPT_PATHS = frozenset({"/health", "/ready", "/version"})


def window_key(client_ip: str, window_seconds: int, now: float | None = None) -> str:
    """Counter key for the window containing ``now``."""
    window = int(now if now is not None else time.time()) // window_seconds
    return f"ratelimit:{client_ip}:{window}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Count requests per IP per window; answer 429 once the limit is passed."""

    def __init__(self, app: Any, requests_per_window: int = 100, window_seconds: int = 60) -> None:  # noqa: ANN401
        super().__init__(app)
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _EXEMPT_PATHS:
            return await call_next(request)

        try:
            redis = get_redis()
        except RuntimeError:
            # Redis not initialized, let the request through without rate limiting
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        key = window_key(client_ip, self.window_seconds)

        pipe = redis.pipeline()
        pipe.incr(key)
        pipe.expire(key, self.window_seconds + 1)
        results: list[Any] = await pipe.execute()
        current_count: int = results[0]
        limit_headers = {
            "X-RateLimit-Remaining": str(max(0, self.requests_per_window - current_count)),
            "X-RateLimit-Limit": str(self.requests_per_window),
        }

        if current_count > self.requests_per_window:
            logger.info("rate_limited", client_ip=client_ip, count=current_count)
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Try again later.", "kind": "rate_limited", "field": None},
                headers={"Retry-After": str(self.window_seconds), **limit_headers},
            )

        response = await call_next(request)
        response.headers.update(limit_headers)
        return response
