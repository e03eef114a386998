# tests/conftest.py — v1
"""Shared test fixtures for all unit tests.

Provides settings pointing at a temp cache directory, an HTTP client wired
to the fake upstream in tests/fakes.py, and ready-wired pipelines.
No network access.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
import pytest

from tests.fakes import FakeUpstream
from varletmeta.cache.base_cache_store import BaseCacheStore
from varletmeta.cache.json_store import JsonCacheStore
from varletmeta.cache.memory_store import MemoryCacheStore
from varletmeta.config.settings import Settings
from varletmeta.fetcher.fetcher import MetadataFetcher
from varletmeta.fetcher.tiers import default_tiers
from varletmeta.pipeline.resolution import MetadataResolutionPipeline
from varletmeta.registry.client import create_http_client
from varletmeta.registry.version_resolver import VersionResolver


# === FIXTURES ===


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from any .env file, caching under tmp_path."""
    return Settings(_env_file=None, cache_root=tmp_path / "cache")


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def http_client(settings: Settings, upstream: FakeUpstream) -> httpx.AsyncClient:
    return create_http_client(settings, transport=upstream.transport())


@pytest.fixture
def resolver(http_client: httpx.AsyncClient, settings: Settings) -> VersionResolver:
    return VersionResolver(http_client, settings)


@pytest.fixture
def fetcher(
    http_client: httpx.AsyncClient, settings: Settings, resolver: VersionResolver
) -> MetadataFetcher:
    return MetadataFetcher(default_tiers(http_client, settings, resolver))


@pytest.fixture
def json_cache(settings: Settings) -> JsonCacheStore:
    return JsonCacheStore(cache_root=settings.cache_root)


@pytest.fixture
def memory_cache() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def make_pipeline(resolver: VersionResolver, fetcher: MetadataFetcher, settings: Settings):
    """Factory: pipeline over the shared resolver/fetcher and a chosen cache."""

    def _make(
        cache: BaseCacheStore,
        pipeline_settings: Settings | None = None,
        **kwargs: Any,
    ) -> MetadataResolutionPipeline:
        return MetadataResolutionPipeline(
            resolver, cache, fetcher, pipeline_settings or settings, **kwargs
        )

    return _make


@pytest.fixture
def pipeline(make_pipeline, json_cache: JsonCacheStore) -> MetadataResolutionPipeline:
    return make_pipeline(json_cache)
