# src/api/facade.py — v1
"""Public API facade — the operations exposed to the transport layer.

Usage:
    from varletmeta.api.facade import create_service

    async with create_service() as service:
        entry = await service.get_component("3.0.0", "Input")

Only ResolutionError (raised) and NotFoundError (returned) reach callers;
every storage and network failure is absorbed by the pipeline.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from varletmeta.api.models import ServiceError, ServiceRequest, ServiceResult
from varletmeta.cache.base_cache_store import BaseCacheStore
from varletmeta.cache.cache_factory import create_cache_store
from varletmeta.config.settings import Settings
from varletmeta.core.errors import NotFoundError, ResolutionError
from varletmeta.core.models import ComponentEntry, DirectiveEntry, MetadataDocument
from varletmeta.fetcher.fetcher import MetadataFetcher
from varletmeta.fetcher.tiers import default_tiers
from varletmeta.logging.context import clear_context, set_request_context
from varletmeta.lookup.entity_lookup import (
    find_component,
    find_directive,
    group_components_by_category,
    list_component_names,
)
from varletmeta.pipeline.resolution import MetadataResolutionPipeline
from varletmeta.registry.client import create_http_client
from varletmeta.registry.version_resolver import LATEST, VersionResolver

logger = logging.getLogger(__name__)


class VarletMetadataService:
    """Version-parameterized metadata queries over one resolution pipeline."""

    def __init__(
        self,
        pipeline: MetadataResolutionPipeline,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._http_client = http_client

    @property
    def pipeline(self) -> MetadataResolutionPipeline:
        return self._pipeline

    async def __aenter__(self) -> VarletMetadataService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this service owns one."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def get_metadata_document(self, version_token: str = LATEST) -> MetadataDocument:
        token = _require(version_token, "version_token")
        set_request_context("get_metadata_document", token)
        try:
            return await self._pipeline.resolve_document(token)
        finally:
            clear_context()

    async def get_component(
        self, version_token: str, name: str
    ) -> ComponentEntry | NotFoundError:
        token = _require(version_token, "version_token")
        name = _require(name, "name")
        set_request_context("get_component", token)
        try:
            document = await self._pipeline.resolve_document(token)
            result = find_component(document, name)
            if isinstance(result, NotFoundError):
                logger.info(result.message)
            return result
        finally:
            clear_context()

    async def get_directive(
        self, version_token: str, name: str
    ) -> DirectiveEntry | NotFoundError:
        token = _require(version_token, "version_token")
        name = _require(name, "name")
        set_request_context("get_directive", token)
        try:
            document = await self._pipeline.resolve_document(token)
            result = find_directive(document, name)
            if isinstance(result, NotFoundError):
                logger.info(result.message)
            return result
        finally:
            clear_context()

    async def list_components(self, version_token: str = LATEST) -> list[str]:
        document = await self.get_metadata_document(version_token)
        return list_component_names(document)

    async def list_components_by_category(
        self, version_token: str = LATEST
    ) -> dict[str, list[str]]:
        """Component names grouped by catalogue category (basic, form, ...)."""
        document = await self.get_metadata_document(version_token)
        return group_components_by_category(document)

    async def invalidate_cache(self, version_token: str | None = None) -> bool:
        """Clear one version's cached document, or all of them.

        Returns:
            False if some record could not be removed.
        """
        token = None if version_token is None else _require(version_token, "version_token")
        set_request_context("invalidate_cache", token)
        try:
            return await self._pipeline.invalidate(token)
        finally:
            clear_context()

    async def handle(self, request: ServiceRequest) -> ServiceResult:
        """Dispatch one typed request; errors come back as typed results."""
        token = request.version or LATEST
        try:
            data = await self._dispatch(request, token)
        except ResolutionError as e:
            return ServiceResult(
                operation=request.operation,
                ok=False,
                version=token,
                error=ServiceError(code="resolution", message=str(e)),
            )
        except ValueError as e:
            return ServiceResult(
                operation=request.operation,
                ok=False,
                version=request.version,
                error=ServiceError(code="invalid_request", message=str(e)),
            )

        if isinstance(data, NotFoundError):
            return ServiceResult(
                operation=request.operation,
                ok=False,
                version=data.version,
                error=ServiceError(code="not_found", message=data.message),
            )
        return ServiceResult(
            operation=request.operation, ok=True, version=token, data=data
        )

    async def _dispatch(self, request: ServiceRequest, token: str) -> Any:
        op = request.operation
        if op == "get_metadata_document":
            document = await self.get_metadata_document(token)
            return document.model_dump(mode="json", by_alias=True)
        if op == "get_component":
            result = await self.get_component(token, request.entity_name or "")
        elif op == "get_directive":
            result = await self.get_directive(token, request.entity_name or "")
        elif op == "list_components":
            return await self.list_components(token)
        elif op == "list_components_by_category":
            return await self.list_components_by_category(token)
        else:
            return {"invalidated": await self.invalidate_cache(request.version)}

        if isinstance(result, NotFoundError):
            return result
        return result.model_dump(mode="json", by_alias=True, exclude_none=True)


def create_service(
    settings: Settings | None = None,
    cache_store: BaseCacheStore | None = None,
    http_client: httpx.AsyncClient | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> VarletMetadataService:
    """Wire resolver, cache, fetcher and pipeline into a service.

    Args:
        settings: Global settings. Loaded from .env if None.
        cache_store: Cache backend. Built from settings if None.
        http_client: Shared client, left open on close. A new one owned by
            the service is created if None.
        transport: Transport for the owned client (tests pass
            httpx.MockTransport).

    Returns:
        A service to be used as an async context manager.
    """
    settings = settings or Settings()
    cache_store = cache_store or create_cache_store(settings)

    owned_client = None
    if http_client is None:
        http_client = owned_client = create_http_client(settings, transport=transport)

    resolver = VersionResolver(http_client, settings)
    fetcher = MetadataFetcher(default_tiers(http_client, settings, resolver))
    pipeline = MetadataResolutionPipeline(resolver, cache_store, fetcher, settings)
    return VarletMetadataService(pipeline, http_client=owned_client)


def _require(value: str, field: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field} must be a non-empty string")
    return value.strip()
