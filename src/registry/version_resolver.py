# src/registry/version_resolver.py — v1
"""Map symbolic version tokens to concrete versions via the npm registry.

Concrete tokens pass through untouched without any network access. Only the
"latest" dist-tag is resolved.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any

import httpx

from varletmeta.config.settings import Settings
from varletmeta.core.errors import ResolutionError, TierFailure

logger = logging.getLogger(__name__)

LATEST = "latest"

_NUMERIC_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:[-+](.*))?$")


def is_symbolic(token: str) -> bool:
    """Whether a token names a moving dist-tag rather than one release."""
    return token.strip().lower() == LATEST


def version_sort_key(version: str) -> tuple[Any, ...]:
    """Ordering key for concrete versions.

    Numeric components compare numerically; a pre-release sorts before its
    release. Strings that are not version-like sort before all versions.
    """
    match = _NUMERIC_RE.match(version.strip())
    if not match:
        return (-1, -1, -1, 0, version)
    major, minor, patch, suffix = match.groups()
    release = (int(major), int(minor or 0), int(patch or 0))
    # (1, "") for a release, (0, "alpha.1") for a pre-release
    return (*release, 0 if suffix else 1, suffix or "")


class VersionResolver:
    """Resolve "latest" and confirm concrete versions against the registry."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings
        self.request_count = 0

    async def resolve(self, token: str) -> str:
        """Return the concrete version a token names.

        Raises:
            ResolutionError: If "latest" cannot be resolved.
        """
        token = token.strip()
        if not is_symbolic(token):
            return token

        url = self._settings.registry_url_for(LATEST)
        try:
            payload = await self._get_json(url)
        except (httpx.HTTPError, asyncio.TimeoutError, ValueError) as e:
            raise ResolutionError(token, f"{type(e).__name__}: {e}") from e

        version = _version_field(payload)
        if version is None:
            raise ResolutionError(token, "registry response has no version field")

        logger.info("Resolved %s -> %s", token, version)
        return version

    async def confirm(self, version: str) -> str:
        """Confirm a concrete version exists and return its registry spelling.

        Raises:
            TierFailure: If the registry is unreachable or does not know it.
        """
        url = self._settings.registry_url_for(version)
        try:
            payload = await self._get_json(url)
        except (httpx.HTTPError, asyncio.TimeoutError, ValueError) as e:
            raise TierFailure("derived", f"{type(e).__name__}: {e}") from e

        confirmed = _version_field(payload)
        if confirmed is None:
            raise TierFailure("derived", f"registry has no record of version '{version}'")
        return confirmed

    async def _get_json(self, url: str) -> Any:
        self.request_count += 1
        # httpx bounds each phase; this bounds the request as a whole.
        response = await asyncio.wait_for(
            self._client.get(url), timeout=self._settings.request_timeout_seconds
        )
        response.raise_for_status()
        return response.json()


def _version_field(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    version = payload.get("version")
    if not isinstance(version, str) or not version.strip():
        return None
    return version.strip()
