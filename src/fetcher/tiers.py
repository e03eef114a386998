# src/fetcher/tiers.py — v1
"""Fetch tiers, ordered from highest to lowest fidelity.

Every tier implements `attempt(version) -> MetadataDocument` and raises
TierFailure (or lets an httpx / decoding error escape) when it cannot
produce a document. The fetcher treats all of those as "try the next tier".
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import httpx

from varletmeta.config.settings import Settings
from varletmeta.core.errors import TierFailure
from varletmeta.core.models import MetadataDocument, SourceTier
from varletmeta.fetcher.baseline import build_baseline_document
from varletmeta.fetcher.web_types import parse_web_types
from varletmeta.registry.version_resolver import VersionResolver

logger = logging.getLogger(__name__)


class BaseTier(ABC):
    """One fallback strategy of the fetcher."""

    name: SourceTier
    # Upper bound for one attempt in seconds; None for tiers without I/O.
    timeout: float | None = None

    def __init__(self) -> None:
        self.attempts = 0

    @abstractmethod
    async def attempt(self, version: str) -> MetadataDocument:
        """Produce a document for a concrete version or raise TierFailure."""


class PrimaryTier(BaseTier):
    """Full web-types document for the exact version from the CDN."""

    name: SourceTier = "primary"

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        super().__init__()
        self._client = client
        self._settings = settings
        self.timeout = settings.request_timeout_seconds

    async def attempt(self, version: str) -> MetadataDocument:
        self.attempts += 1
        url = self._settings.web_types_url_for(version)
        response = await self._client.get(url)
        if response.status_code != 200:
            raise TierFailure(self.name, f"GET {url} returned {response.status_code}")
        try:
            payload = response.json()
        except ValueError as e:
            raise TierFailure(self.name, f"body is not JSON: {e}") from e
        return parse_web_types(payload, version)


class DerivedTier(BaseTier):
    """Baseline entities annotated with a registry-confirmed version."""

    name: SourceTier = "derived"

    def __init__(self, resolver: VersionResolver, settings: Settings) -> None:
        super().__init__()
        self._resolver = resolver
        self.timeout = settings.request_timeout_seconds

    async def attempt(self, version: str) -> MetadataDocument:
        self.attempts += 1
        confirmed = await self._resolver.confirm(version)
        return build_baseline_document(confirmed, self.name)


class StaticFallbackTier(BaseTier):
    """Baseline entities with the requested version verbatim. Never fails."""

    name: SourceTier = "static-fallback"

    async def attempt(self, version: str) -> MetadataDocument:
        self.attempts += 1
        return build_baseline_document(version, self.name)


def default_tiers(
    client: httpx.AsyncClient,
    settings: Settings,
    resolver: VersionResolver,
) -> list[BaseTier]:
    """The standard primary -> derived -> static-fallback chain."""
    return [
        PrimaryTier(client, settings),
        DerivedTier(resolver, settings),
        StaticFallbackTier(),
    ]
