# src/cache/memory_store.py — v1
"""In-process cache store (CACHE_BACKEND=memory).

Nothing survives the process. Useful for tests and read-only hosts.
"""

from __future__ import annotations

from varletmeta.cache.base_cache_store import BaseCacheStore
from varletmeta.core.models import MetadataDocument


class MemoryCacheStore(BaseCacheStore):
    """Dict-backed cache store."""

    def __init__(self) -> None:
        self._records: dict[str, MetadataDocument] = {}

    async def get(self, version: str) -> MetadataDocument | None:
        return self._records.get(version)

    async def put(self, version: str, document: MetadataDocument) -> None:
        self._records[version] = document

    async def delete(self, version: str) -> None:
        self._records.pop(version, None)

    async def clear(self) -> int:
        removed = len(self._records)
        self._records.clear()
        return removed

    async def list_versions(self) -> list[str]:
        return list(self._records)
