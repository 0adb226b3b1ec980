"""Shared persistent httpx client for external API calls.

Using a persistent client avoids creating a new TCP connection + TLS handshake
for every catalog call.
"""

import httpx

from shelfwise.constants import API_TIMEOUT_EXTERNAL

# Connection pool limits
_POOL_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=30,
)

_general_client: httpx.AsyncClient | None = None


def get_general_client() -> httpx.AsyncClient:
    """Get persistent httpx client for external API calls (Google Books)."""
    global _general_client
    if _general_client is None:
        _general_client = httpx.AsyncClient(
            timeout=API_TIMEOUT_EXTERNAL,
            limits=_POOL_LIMITS,
            http2=False,
        )
    return _general_client


async def close_all_clients() -> None:
    """Close all persistent httpx clients. Call during app shutdown."""
    global _general_client
    if _general_client is not None:
        await _general_client.aclose()
        _general_client = None
