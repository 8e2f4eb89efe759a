"""
Rate limiting setup.

Fixed-window counters (slowapi / limits) keyed by client address. The
default ``memory://`` storage is per process and resets on restart; point
RATE_LIMIT_STORAGE_URI at ``redis://`` to share counters between instances.
"""

from fastapi import Request
from slowapi import Limiter

from src.core.config import settings


def get_client_key(request: Request) -> str:
    """
    Identify the client for rate limiting.

    Order: first hop of ``X-Forwarded-For``, then ``X-Real-IP``, then the
    socket peer address, then ``"unknown"``.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


# ============================================================================
# Rate Limiter Setup
# ============================================================================
limiter = Limiter(
    key_func=get_client_key,
    storage_uri=settings.rate_limit_storage_uri,
    default_limits=[settings.rate_limit_default],
    strategy="fixed-window",
    headers_enabled=False,
    enabled=settings.rate_limit_enabled,
)
