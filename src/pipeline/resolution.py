# src/pipeline/resolution.py — v1
"""MetadataResolutionPipeline — version resolution, cache and fetch orchestration.

Per concrete version the pipeline moves UNREQUESTED -> FETCHING -> CACHED.
Concurrent requests for a version that is being fetched share the same
in-flight task, so each version has at most one upstream fetch sequence
running at a time.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Callable

from varletmeta.cache.base_cache_store import BaseCacheStore
from varletmeta.config.settings import Settings
from varletmeta.core.errors import CacheWriteError, ResolutionError
from varletmeta.core.models import MetadataDocument
from varletmeta.fetcher.fetcher import MetadataFetcher
from varletmeta.registry.version_resolver import (
    VersionResolver,
    is_symbolic,
    version_sort_key,
)

logger = logging.getLogger(__name__)


class VersionState(str, Enum):
    UNREQUESTED = "unrequested"
    FETCHING = "fetching"
    CACHED = "cached"


class MetadataResolutionPipeline:
    """Resolve a version token to one authoritative MetadataDocument."""

    def __init__(
        self,
        resolver: VersionResolver,
        cache: BaseCacheStore,
        fetcher: MetadataFetcher,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._resolver = resolver
        self._cache = cache
        self._fetcher = fetcher
        self._settings = settings
        self._clock = clock

        self._inflight: dict[str, asyncio.Task[MetadataDocument]] = {}
        self._states: dict[str, VersionState] = {}
        # requested version -> confirmed version it is cached under
        self._aliases: dict[str, str] = {}
        # (concrete version, monotonic time it was resolved)
        self._latest: tuple[str, float] | None = None
        self._latest_task: asyncio.Task[str] | None = None

    def state_of(self, version: str) -> VersionState:
        return self._states.get(version, VersionState.UNREQUESTED)

    async def resolve_document(self, token: str) -> MetadataDocument:
        """Return the document for a version token.

        Raises:
            ResolutionError: If a symbolic token cannot be resolved and
                nothing at all is cached.
        """
        try:
            version = await self.resolve_version(token)
        except ResolutionError as e:
            return await self._last_known_good(e)
        return await self._document_for(version)

    async def resolve_version(self, token: str) -> str:
        """Resolve a token, memoising "latest" for latest_ttl_seconds."""
        if not is_symbolic(token):
            return await self._resolver.resolve(token)

        if self._latest is not None:
            version, resolved_at = self._latest
            if self._clock() - resolved_at < self._settings.latest_ttl_seconds:
                return version

        if self._latest_task is None:
            self._latest_task = asyncio.create_task(self._resolver.resolve(token))
            self._latest_task.add_done_callback(self._on_latest_resolved)
        return await asyncio.shield(self._latest_task)

    async def invalidate(self, token: str | None = None) -> bool:
        """Drop one version's record, or every record when token is None.

        Returns:
            True if the cache was updated completely; False if a record
            could not be removed (the failure is logged).

        Raises:
            ResolutionError: If a symbolic token cannot be resolved and no
                previous resolution is known.
        """
        if token is None:
            self._latest = None
            self._states.clear()
            self._aliases.clear()
            try:
                removed = await self._cache.clear()
            except CacheWriteError as e:
                logger.error("Cache clear incomplete: %s", e)
                return False
            logger.info("Cleared %d cached document(s)", removed)
            return True

        try:
            version = await self.resolve_version(token)
        except ResolutionError:
            if self._latest is None or not is_symbolic(token):
                raise
            version = self._latest[0]

        if is_symbolic(token):
            self._latest = None
        self._states.pop(version, None)
        key = self._aliases.pop(version, version)
        try:
            await self._cache.delete(key)
        except CacheWriteError as e:
            logger.error("Cache invalidation failed: %s", e)
            return False
        logger.info("Invalidated cached document for %s", key)
        return True

    # --- internals ---

    async def _document_for(self, version: str) -> MetadataDocument:
        task = self._inflight.get(version)
        if task is None:
            cached = await self._cached(version)
            if cached is not None:
                return cached
            # The cache read may have suspended; another caller can have
            # started the fetch meanwhile, or even finished it.
            task = self._inflight.get(version)
            if task is None and self.state_of(version) is VersionState.CACHED:
                cached = await self._cached(version, log_stale=False)
                if cached is not None:
                    return cached
                task = self._inflight.get(version)

        if task is None:
            task = asyncio.create_task(self._fetch_and_store(version))
            self._inflight[version] = task
            task.add_done_callback(lambda _t, v=version: self._inflight.pop(v, None))
        else:
            logger.debug("Joining in-flight fetch for %s", version)

        return await asyncio.shield(task)

    async def _cached(self, version: str, log_stale: bool = True) -> MetadataDocument | None:
        """Fresh cached document for a requested version, or None."""
        key = self._aliases.get(version, version)
        cached = await self._cache.get(key)
        if cached is None:
            return None
        if self._is_stale(cached):
            if log_stale:
                logger.info(
                    "Cached %s document for %s is %.0fs old; refetching",
                    cached.source_tier, key, cached.age_seconds(),
                )
            return None
        self._states[version] = VersionState.CACHED
        return cached

    async def _fetch_and_store(self, version: str) -> MetadataDocument:
        self._states[version] = VersionState.FETCHING
        try:
            document = await self._fetcher.fetch(version)
        except BaseException:
            self._states.pop(version, None)
            raise

        # The registry may confirm a range ("3") as a release ("3.0.0");
        # the record is keyed by the version it describes.
        key = document.library_version
        if key != version:
            logger.info("Version %s confirmed as %s", version, key)
            self._aliases[version] = key
        try:
            await self._cache.put(key, document)
        except CacheWriteError as e:
            logger.warning("%s; serving uncached document", e)
        self._states[version] = VersionState.CACHED
        return document

    def _is_stale(self, document: MetadataDocument) -> bool:
        # Primary documents describe an immutable release and never expire.
        if not document.is_degraded:
            return False
        return document.age_seconds() > self._settings.degraded_max_age_seconds

    def _on_latest_resolved(self, task: asyncio.Task[str]) -> None:
        self._latest_task = None
        if task.cancelled() or task.exception() is not None:
            return
        self._latest = (task.result(), self._clock())

    async def _last_known_good(self, error: ResolutionError) -> MetadataDocument:
        candidates = sorted(
            await self._cache.list_versions(), key=version_sort_key, reverse=True
        )
        if self._latest is not None:
            # An expired resolution is still the best guess for "latest".
            candidates.insert(0, self._latest[0])

        for version in candidates:
            document = await self._cache.get(version)
            if document is not None:
                logger.warning(
                    "%s; serving last known good version %s (%s)",
                    error, version, document.source_tier,
                )
                self._states[version] = VersionState.CACHED
                return document

        raise error
