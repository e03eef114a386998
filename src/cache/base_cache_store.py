# src/cache/base_cache_store.py — v1
"""Abstract cache store interface.

A store is a dumb key/value layer keyed by concrete version. Staleness is
decided by the resolution pipeline, never inside a store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from varletmeta.core.models import MetadataDocument


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    @abstractmethod
    async def get(self, version: str) -> MetadataDocument | None:
        """Return the document cached for a version, or None.

        Unreadable or corrupt records count as absent; they never raise.
        """

    @abstractmethod
    async def put(self, version: str, document: MetadataDocument) -> None:
        """Store a document, replacing any previous record for the version.

        Raises:
            CacheWriteError: If the record could not be persisted.
        """

    @abstractmethod
    async def delete(self, version: str) -> None:
        """Remove the record for a version if present."""

    @abstractmethod
    async def clear(self) -> int:
        """Remove all records and return how many were removed.

        Raises:
            CacheWriteError: If any record could not be removed. Records
                that were removed stay removed; the rest are untouched.
        """

    @abstractmethod
    async def list_versions(self) -> list[str]:
        """List the versions that currently have a record."""
