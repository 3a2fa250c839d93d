"""Translation of HTTP failures into catalog outages."""

from typing import NoReturn

import httpx

from food_resolver.domain.errors import ExternalUnavailable

_STATUS_REASONS = {
    401: "unauthorized",
    402: "quota exhausted",
    403: "access denied",
    429: "rate limit exceeded",
}


def raise_unavailable(provider: str, exc: httpx.HTTPError) -> NoReturn:
    """Re-raise an httpx failure as ExternalUnavailable."""
    if isinstance(exc, httpx.TimeoutException):
        raise ExternalUnavailable(provider, "request timed out") from exc
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        reason = _STATUS_REASONS.get(status_code, "unexpected response")
        raise ExternalUnavailable(provider, reason, status_code=status_code) from exc
    raise ExternalUnavailable(provider, f"transport error: {exc}") from exc
