"""
Rate limiting middleware.

Fixed-window rate limiting per client address on the unauthenticated
write endpoints.
"""

import hashlib
import time
from typing import Callable, Tuple

from django.conf import settings
from django.core.cache import cache
from django.http import HttpRequest, HttpResponse, JsonResponse

from core.metrics import errors_total

DEFAULT_RATE_LIMITED_PATHS = ("/verify", "/trial/create", "/invoices/pay")


class RateLimitMiddleware:
    """
    Rate limiting middleware per client address.

    Counters live in the Django cache (Redis in production) so every
    worker shares the same window.
    """

    RATE_LIMIT_WINDOW = 60  # seconds

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    @property
    def limit(self) -> int:
        return getattr(settings, "RATE_LIMIT_PER_MINUTE", 120)

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(getattr(settings, "RATE_LIMITED_PATHS", DEFAULT_RATE_LIMITED_PATHS))

    def _get_rate_limit_key(self, client: str, window_start: int) -> str:
        """
        Generate cache key for rate limiting.

        Args:
            client: Client address
            window_start: Index of the current window

        Returns:
            Cache key string
        """
        client_hash = hashlib.sha256(client.encode()).hexdigest()[:16]
        return f"rate_limit:{client_hash}:{window_start}"

    def _check_rate_limit(self, client: str, limit: int) -> Tuple[bool, int, int]:
        """
        Count the request and check it against the limit.

        Args:
            client: Client address
            limit: Requests allowed per window

        Returns:
            Tuple of (is_allowed, remaining, reset_time)
        """
        window_start = int(time.time() / self.RATE_LIMIT_WINDOW)
        reset_time = (window_start + 1) * self.RATE_LIMIT_WINDOW
        full_key = self._get_rate_limit_key(client, window_start)

        if cache.add(full_key, 1, timeout=self.RATE_LIMIT_WINDOW):
            count = 1
        else:
            try:
                count = cache.incr(full_key, 1)
            except ValueError:
                # Window key expired between add and incr.
                cache.set(full_key, 1, timeout=self.RATE_LIMIT_WINDOW)
                count = 1

        if count > limit:
            return False, 0, reset_time
        return True, limit - count, reset_time

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """
        Process request with rate limiting.

        Args:
            request: HTTP request

        Returns:
            HTTP response with rate limit headers
        """
        path = request.path.rstrip("/") or "/"
        if request.method != "POST" or path not in self.paths:
            return self.get_response(request)

        limit = self.limit
        client = request.META.get("REMOTE_ADDR") or "unknown"
        is_allowed, remaining, reset_time = self._check_rate_limit(client, limit)

        if not is_allowed:
            errors_total.labels(error_type="rate_limit_exceeded", endpoint=path).inc()
            response = JsonResponse(
                {
                    "error": {
                        "code": "RATE_LIMIT_EXCEEDED",
                        "message": "Rate limit exceeded. Please try again later.",
                    }
                },
                status=429,
            )
            response["Retry-After"] = str(max(0, reset_time - int(time.time())))
        else:
            response = self.get_response(request)

        response["X-RateLimit-Limit"] = str(limit)
        response["X-RateLimit-Remaining"] = str(remaining)
        response["X-RateLimit-Reset"] = str(reset_time)
        return response
