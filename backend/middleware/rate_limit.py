"""
In-memory rate limiting for the generation endpoint.

A simple per-process dict. For multiple workers, consider Redis or similar.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import UTC, datetime, timedelta


class RateLimiter:
    """
    Simple in-memory rate limiter.

    Tracks request timestamps per key (client IP) within time windows.
    """

    def __init__(self):
        # key -> request timestamps
        self._requests: dict[str, list[datetime]] = defaultdict(list)

    def check_rate_limit(self, key: str, max_requests: int, window_minutes: int = 1) -> bool:
        """
        Check if a key has exceeded the rate limit, recording the request if not.

        Args:
            key: Identifier to rate limit (e.g. "generate:<ip>")
            max_requests: Maximum requests allowed in the window
            window_minutes: Time window in minutes (default 1)

        Returns:
            True if under the limit, False if limit exceeded
        """
        now = datetime.now(UTC)
        cutoff = now - timedelta(minutes=window_minutes)

        self._requests[key] = [ts for ts in self._requests[key] if ts > cutoff]

        if len(self._requests[key]) >= max_requests:
            return False

        self._requests[key].append(now)
        return True

    def cleanup_old_entries(self, max_age_minutes: int = 10):
        """
        Drop entries older than `max_age_minutes` and forget idle keys.

        Args:
            max_age_minutes: Remove entries older than this many minutes
        """
        cutoff = datetime.now(UTC) - timedelta(minutes=max_age_minutes)
        for key in list(self._requests.keys()):
            self._requests[key] = [ts for ts in self._requests[key] if ts > cutoff]
            if not self._requests[key]:
                del self._requests[key]

    def reset(self):
        """Forget every key."""
        self._requests.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()
