"""Client-side rate limiting."""

from templatesync.infrastructure.ratelimit.rate_limiter import RateLimiter, RateLimits

__all__ = ["RateLimiter", "RateLimits"]
