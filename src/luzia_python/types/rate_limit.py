"""
Rate limit quota reported by the API.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitInfo:
    """Quota counters for the calling API key.

    Parsed from the ``X-RateLimit-*`` response headers. Instances are
    immutable; the client keeps only the most recent one.

    Attributes:
        limit: Maximum requests per minute for the current tier
        remaining: Requests remaining in the current minute window
        reset: Unix timestamp (seconds) when the minute window resets
        daily_limit: Maximum requests per day (Free tier only)
        daily_remaining: Requests remaining today (Free tier only)
        daily_reset: Unix timestamp for midnight UTC (Free tier only)
    """

    limit: int
    remaining: int
    reset: int
    daily_limit: int | None = None
    daily_remaining: int | None = None
    daily_reset: int | None = None

    @property
    def is_exhausted(self) -> bool:
        """Whether either the minute or the daily window is used up."""
        if self.remaining <= 0:
            return True
        return self.daily_remaining is not None and self.daily_remaining <= 0
