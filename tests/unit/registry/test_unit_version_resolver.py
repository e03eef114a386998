# tests/unit/registry/test_unit_version_resolver.py — v1
"""Tests for registry/version_resolver.py."""

from __future__ import annotations

import pytest

from varletmeta.config.settings import Settings
from varletmeta.core.errors import ResolutionError, TierFailure
from varletmeta.registry.client import create_http_client
from varletmeta.registry.version_resolver import VersionResolver, is_symbolic, version_sort_key


class TestIsSymbolic:
    def test_latest(self):
        assert is_symbolic("latest")
        assert is_symbolic(" LATEST ")

    def test_concrete(self):
        assert not is_symbolic("3.0.0")
        assert not is_symbolic("next")


class TestVersionSortKey:
    def test_numeric_ordering(self):
        versions = ["3.0.0", "2.10.1", "2.9.0", "10.0.0"]
        assert sorted(versions, key=version_sort_key) == ["2.9.0", "2.10.1", "3.0.0", "10.0.0"]

    def test_prerelease_before_release(self):
        assert version_sort_key("3.0.0-alpha.1") < version_sort_key("3.0.0")

    def test_garbage_sorts_first(self):
        assert version_sort_key("nightly") < version_sort_key("0.0.1")


class TestResolve:
    @pytest.mark.asyncio
    async def test_concrete_passthrough_no_network(self, resolver, upstream):
        assert await resolver.resolve("3.0.0") == "3.0.0"
        assert await resolver.resolve(" 2.9.0 ") == "2.9.0"
        assert upstream.total_requests == 0

    @pytest.mark.asyncio
    async def test_latest(self, resolver, upstream):
        upstream.latest = "3.1.4"
        assert await resolver.resolve("latest") == "3.1.4"
        assert upstream.counts["latest"] == 1
        assert resolver.request_count == 1

    @pytest.mark.asyncio
    async def test_unreachable(self, resolver, upstream):
        upstream.registry_mode = "error"
        with pytest.raises(ResolutionError, match="latest"):
            await resolver.resolve("latest")

    @pytest.mark.asyncio
    async def test_server_error(self, resolver, upstream):
        upstream.registry_mode = "500"
        with pytest.raises(ResolutionError):
            await resolver.resolve("latest")

    @pytest.mark.asyncio
    async def test_malformed_response(self, resolver, upstream):
        upstream.registry_mode = "malformed"
        with pytest.raises(ResolutionError, match="no version field"):
            await resolver.resolve("latest")

    @pytest.mark.asyncio
    async def test_slow_registry_bounded_by_request_timeout(self, upstream):
        upstream.registry_mode = "slow"
        settings = Settings(_env_file=None, request_timeout_seconds=0.05)
        async with create_http_client(settings, transport=upstream.transport()) as client:
            with pytest.raises(ResolutionError, match="TimeoutError"):
                await VersionResolver(client, settings).resolve("latest")


class TestConfirm:
    @pytest.mark.asyncio
    async def test_known_version(self, resolver, upstream):
        assert await resolver.confirm("2.9.0") == "2.9.0"
        assert upstream.counts["registry"] == 1

    @pytest.mark.asyncio
    async def test_unknown_version(self, resolver):
        with pytest.raises(TierFailure) as exc_info:
            await resolver.confirm("0.0.1")
        assert exc_info.value.tier == "derived"

    @pytest.mark.asyncio
    async def test_unreachable(self, resolver, upstream):
        upstream.registry_mode = "error"
        with pytest.raises(TierFailure):
            await resolver.confirm("3.0.0")

    @pytest.mark.asyncio
    async def test_range_confirmed_as_release(self, resolver, upstream):
        upstream.ranges["3"] = "3.0.0"
        assert await resolver.confirm("3") == "3.0.0"

    @pytest.mark.asyncio
    async def test_slow_registry(self, upstream):
        upstream.registry_mode = "slow"
        settings = Settings(_env_file=None, request_timeout_seconds=0.05)
        async with create_http_client(settings, transport=upstream.transport()) as client:
            with pytest.raises(TierFailure):
                await VersionResolver(client, settings).confirm("3.0.0")
