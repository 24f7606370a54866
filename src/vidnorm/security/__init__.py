"""Request policies applied to every ``/api`` route."""

from .api_key import API_KEY_HEADER, ApiKeyPolicy, require_api_key
from .rate_limit import SlidingWindowRateLimiter, enforce_rate_limit

__all__ = [
    "API_KEY_HEADER",
    "ApiKeyPolicy",
    "SlidingWindowRateLimiter",
    "enforce_rate_limit",
    "require_api_key",
]
