# src/fetcher/fetcher.py — v1
"""MetadataFetcher — walk the tiers until one yields a valid document.

`fetch` never raises for "could not get perfect data": the last tier has no
external dependency. Each tier's output is re-validated before it is
returned; a tier that produces an invalid document counts as failed.
"""

from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import ValidationError

from varletmeta.core.errors import TierFailure
from varletmeta.core.models import MetadataDocument
from varletmeta.fetcher.baseline import build_baseline_document
from varletmeta.fetcher.tiers import BaseTier

logger = logging.getLogger(__name__)


class MetadataFetcher:
    """Tiered metadata fetcher."""

    def __init__(self, tiers: list[BaseTier]) -> None:
        if not tiers:
            raise ValueError("MetadataFetcher needs at least one tier")
        self._tiers = list(tiers)
        self.fetch_count = 0

    @property
    def tiers(self) -> list[BaseTier]:
        return list(self._tiers)

    async def fetch(self, version: str) -> MetadataDocument:
        """Return the best document available for a concrete version."""
        self.fetch_count += 1

        for tier in self._tiers:
            try:
                document = await self._run_tier(tier, version)
                document = _validated(document, tier)
            except (
                TierFailure, httpx.HTTPError, asyncio.TimeoutError, ValidationError, ValueError,
            ) as e:
                logger.warning(
                    "Tier %s failed for %s: %s", tier.name, version, _describe(e)
                )
                continue

            if tier is not self._tiers[0]:
                logger.warning("Serving %s from degraded tier %s", version, tier.name)
            else:
                logger.info("Fetched %s from tier %s", version, tier.name)
            return document

        # Only reachable with a custom tier list lacking the static tier.
        logger.error("All tiers failed for %s; using embedded baseline", version)
        return build_baseline_document(version, "static-fallback")

    @staticmethod
    async def _run_tier(tier: BaseTier, version: str) -> MetadataDocument:
        if tier.timeout is None:
            return await tier.attempt(version)
        return await asyncio.wait_for(tier.attempt(version), timeout=tier.timeout)


def _validated(document: MetadataDocument, tier: BaseTier) -> MetadataDocument:
    if not isinstance(document, MetadataDocument):
        raise TierFailure(tier.name, f"returned {type(document).__name__}")
    if document.source_tier != tier.name:
        raise TierFailure(tier.name, f"document tagged as {document.source_tier}")
    # Round-trip through the persisted shape so nothing invalid reaches the cache.
    return MetadataDocument.model_validate_json(document.to_json())


def _describe(error: Exception) -> str:
    if isinstance(error, TierFailure):
        return error.reason
    if isinstance(error, asyncio.TimeoutError):
        return "timed out"
    return f"{type(error).__name__}: {error}"
