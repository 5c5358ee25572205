"""
Rate limit policy: which requests count as what, and how many are allowed.

Enforcement lives in rate_limiter.py. Adjust numbers in RATE_LIMITS; add
credential-checking routes to SENSITIVE_ENDPOINTS.
"""
from dataclasses import dataclass
from enum import Enum


class OperationType(Enum):
    """Bucket a request is charged to."""

    READ = "read"
    WRITE = "write"
    SENSITIVE = "sensitive"


@dataclass(frozen=True)
class RateLimitConfig:
    """Allowed requests per sliding minute and per fixed day."""

    requests_per_minute: int
    requests_per_day: int


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of one limiter check."""

    allowed: bool
    limit: int
    remaining: int
    reset: int  # unix time the current window ends
    retry_after: int = 0

    def headers(self) -> dict[str, str]:
        """X-RateLimit-* headers, plus Retry-After when the request was refused."""
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after)
        return headers


class RateLimitExceededError(Exception):
    """Raised by the rate limit dependencies; rendered as 429 by api.main."""

    def __init__(self, result: RateLimitResult) -> None:
        self.result = result
        super().__init__("Rate limit exceeded")


# READ/WRITE buckets are per user, SENSITIVE per client address.
# READ and WRITE share one daily counter; SENSITIVE has its own.
RATE_LIMITS: dict[OperationType, RateLimitConfig] = {
    OperationType.READ: RateLimitConfig(requests_per_minute=180, requests_per_day=4000),
    OperationType.WRITE: RateLimitConfig(requests_per_minute=120, requests_per_day=4000),
    OperationType.SENSITIVE: RateLimitConfig(requests_per_minute=10, requests_per_day=200),
}

# (method, path without trailing slash)
SENSITIVE_ENDPOINTS: frozenset[tuple[str, str]] = frozenset({
    ("POST", "/auth/signup"),
    ("POST", "/auth/signin"),
})

_READ_METHODS = frozenset({"GET", "HEAD"})


def get_operation_type(method: str, path: str) -> OperationType:
    """Classify a request for rate limiting."""
    if (method, path.rstrip("/")) in SENSITIVE_ENDPOINTS:
        return OperationType.SENSITIVE
    return OperationType.READ if method in _READ_METHODS else OperationType.WRITE
