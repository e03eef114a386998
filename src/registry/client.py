# src/registry/client.py — v1
"""Shared async HTTP client for registry and CDN requests."""

from __future__ import annotations

import httpx

from varletmeta.config.settings import Settings
from varletmeta.version import __version__


def create_http_client(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build the AsyncClient used by the resolver and the fetch tiers.

    Args:
        settings: Supplies the request timeout and user agent.
        transport: Optional transport override (tests use httpx.MockTransport).

    Returns:
        A client the caller is responsible for closing.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout_seconds),
        follow_redirects=True,
        headers={
            "User-Agent": f"{settings.user_agent}/{__version__}",
            "Accept": "application/json",
        },
        transport=transport,
    )
