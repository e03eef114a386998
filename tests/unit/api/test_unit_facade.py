# tests/unit/api/test_unit_facade.py — v1
"""Tests for api/facade.py — public operations and typed dispatch."""

from __future__ import annotations

import pytest

from varletmeta.api.facade import VarletMetadataService, create_service
from varletmeta.api.models import ServiceRequest
from varletmeta.cache.memory_store import MemoryCacheStore
from varletmeta.core.errors import NotFoundError, ResolutionError
from varletmeta.core.models import ComponentEntry, DirectiveEntry
from varletmeta.logging.context import get_context


@pytest.fixture
def service(settings, json_cache, http_client) -> VarletMetadataService:
    return create_service(settings, cache_store=json_cache, http_client=http_client)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

class TestGetComponent:
    @pytest.mark.asyncio
    async def test_primary_component(self, service, upstream):
        entry = await service.get_component("3.0.0", "Input")
        assert isinstance(entry, ComponentEntry)
        assert entry.name == "var-input"
        assert entry.vue_model.event == "update:modelValue"
        assert [a.name for a in entry.attributes] == ["v-model", "placeholder", "clearable"]
        assert upstream.counts["web_types"] == 1

        requests = upstream.total_requests
        again = await service.get_component("3.0.0", "var-input")
        assert again == entry
        assert upstream.total_requests == requests

    @pytest.mark.asyncio
    async def test_not_found_then_valid(self, service, upstream):
        missing = await service.get_component("3.0.0", "Carousel")
        assert isinstance(missing, NotFoundError)
        assert missing.message == 'Component "var-carousel" not found in Varlet version 3.0.0.'

        found = await service.get_component("3.0.0", "Button")
        assert isinstance(found, ComponentEntry)
        assert upstream.counts["web_types"] == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token,name", [("  ", "Button"), ("3.0.0", ""), ("3.0.0", "   ")])
    async def test_blank_arguments(self, service, token, name):
        with pytest.raises(ValueError):
            await service.get_component(token, name)

    @pytest.mark.asyncio
    async def test_context_cleared(self, service):
        await service.get_component("3.0.0", "Button")
        assert get_context().operation is None


class TestOtherOperations:
    @pytest.mark.asyncio
    async def test_get_directive(self, service):
        entry = await service.get_directive("3.0.0", "ripple")
        assert isinstance(entry, DirectiveEntry)
        assert entry.name == "v-ripple"

    @pytest.mark.asyncio
    async def test_list_components_latest(self, service, upstream):
        names = await service.list_components()
        assert names == ["var-button", "var-input", "var-date-picker"]
        assert upstream.counts["latest"] == 1

    @pytest.mark.asyncio
    async def test_list_components_by_category(self, service):
        groups = await service.list_components_by_category("3.0.0")
        assert groups == {
            "basic": ["var-button"],
            "form": ["var-input"],
            "advanced": ["var-date-picker"],
        }

    @pytest.mark.asyncio
    async def test_degraded_listing_by_category(self, service, upstream):
        upstream.web_types_mode = "404"
        groups = await service.list_components_by_category("2.9.0")
        assert "var-dialog" in groups["feedback"]
        assert "var-sticky" in groups["layout"]

    @pytest.mark.asyncio
    async def test_document(self, service):
        doc = await service.get_metadata_document("2.9.0")
        assert doc.library_version == "2.9.0"
        assert doc.source_tier == "primary"

    @pytest.mark.asyncio
    async def test_degraded_document(self, service, upstream):
        upstream.web_types_mode = "404"
        entry = await service.get_component("2.9.0", "Card")
        assert isinstance(entry, ComponentEntry)
        doc = await service.get_metadata_document("2.9.0")
        assert doc.source_tier == "derived"

    @pytest.mark.asyncio
    async def test_resolution_error_propagates(self, service, upstream):
        upstream.registry_mode = "error"
        with pytest.raises(ResolutionError):
            await service.get_component("latest", "Button")

    @pytest.mark.asyncio
    async def test_invalidate(self, service, json_cache, upstream):
        await service.get_metadata_document("3.0.0")
        assert await service.invalidate_cache("3.0.0") is True
        assert await json_cache.get("3.0.0") is None
        await service.get_metadata_document("3.0.0")
        assert upstream.counts["web_types"] == 2
        assert await service.invalidate_cache() is True
        assert await json_cache.list_versions() == []


# ---------------------------------------------------------------------------
# handle()
# ---------------------------------------------------------------------------

class TestHandle:
    @pytest.mark.asyncio
    async def test_component_payload_uses_wire_names(self, service):
        result = await service.handle(
            ServiceRequest(operation="get_component", version="3.0.0", entityName="Input")
        )
        assert result.ok is True
        assert result.error is None
        assert result.data["name"] == "var-input"
        assert result.data["docUrl"].endswith("/input")
        assert result.data["vueModel"] == {"prop": "modelValue", "event": "update:modelValue"}

    @pytest.mark.asyncio
    async def test_not_found(self, service):
        result = await service.handle(
            ServiceRequest(operation="get_directive", version="3.0.0", entity_name="sticky")
        )
        assert result.ok is False
        assert result.error.code == "not_found"
        assert result.version == "3.0.0"
        assert "v-sticky" in result.error.message

    @pytest.mark.asyncio
    async def test_resolution_error(self, service, upstream):
        upstream.registry_mode = "error"
        result = await service.handle(ServiceRequest(operation="list_components"))
        assert result.ok is False
        assert result.version == "latest"
        assert result.error.code == "resolution"
        assert "latest" in result.error.message

    @pytest.mark.asyncio
    async def test_document(self, service):
        result = await service.handle(
            ServiceRequest(operation="get_metadata_document", version="3.0.0")
        )
        assert result.data["schemaVersion"] == 1
        assert result.data["libraryVersion"] == "3.0.0"
        assert result.data["sourceTier"] == "primary"

    @pytest.mark.asyncio
    async def test_blank_version_is_a_typed_error(self, service, upstream):
        request = ServiceRequest.model_construct(
            operation="get_component", version="   ", entity_name="Button"
        )
        result = await service.handle(request)
        assert result.ok is False
        assert result.error.code == "invalid_request"
        assert "version_token" in result.error.message
        assert upstream.total_requests == 0

    @pytest.mark.asyncio
    async def test_by_category(self, service):
        result = await service.handle(
            ServiceRequest(operation="list_components_by_category", version="3.0.0")
        )
        assert result.ok is True
        assert result.data["basic"] == ["var-button"]

    @pytest.mark.asyncio
    async def test_invalidate_all(self, service):
        result = await service.handle(ServiceRequest(operation="invalidate_cache"))
        assert result.ok is True
        assert result.data == {"invalidated": True}


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

class TestCreateService:
    @pytest.mark.asyncio
    async def test_owned_client_closed(self, settings, upstream):
        service = create_service(
            settings, cache_store=MemoryCacheStore(), transport=upstream.transport()
        )
        client = service._http_client
        async with service:
            await service.get_component("3.0.0", "Button")
        assert client.is_closed
        assert service._http_client is None

    @pytest.mark.asyncio
    async def test_shared_client_left_open(self, settings, http_client):
        async with create_service(settings, http_client=http_client) as service:
            assert isinstance(service, VarletMetadataService)
        assert not http_client.is_closed

    def test_cache_backend_from_settings(self, settings):
        service = create_service(settings.model_copy(update={"cache_backend": "memory"}))
        assert isinstance(service.pipeline._cache, MemoryCacheStore)
