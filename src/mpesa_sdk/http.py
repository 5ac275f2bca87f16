"""HTTP client utilities for the M-Pesa SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from .config import ClientConfig


def create_async_http_client(config: ClientConfig) -> httpx.AsyncClient:
    """Create configured async HTTP client.

    Requests carry absolute URLs, so the client has no base URL and can be
    shared between environments.

    Args:
        config: SDK configuration.

    Returns:
        Configured httpx.AsyncClient.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=config.connect_timeout,
            read=config.timeout,
            write=config.timeout,
            pool=config.timeout,
        ),
        headers={
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        },
        follow_redirects=False,
    )
