"""Shared outbound HTTP client (Discord webhooks, Groq)."""

from typing import Optional

import httpx

from tracker import __version__

HTTP_TIMEOUT = httpx.Timeout(10.0, connect=5.0)

# Global client, reused across requests
http_client: Optional[httpx.AsyncClient] = None


async def init_http_client() -> httpx.AsyncClient:
    """Initialize the shared client."""
    global http_client

    http_client = httpx.AsyncClient(
        timeout=HTTP_TIMEOUT,
        headers={"User-Agent": f"azeroth-bug-tracker/{__version__}"},
    )
    return http_client


async def get_http_client() -> httpx.AsyncClient:
    """Get HTTP client dependency."""
    if http_client is None:
        return await init_http_client()
    return http_client


async def close_http_client() -> None:
    """Close the shared client."""
    global http_client

    if http_client:
        await http_client.aclose()

    http_client = None
