# src/cache/json_store.py — v1
"""JSON file-based cache store (default CACHE_BACKEND=json).

One file per concrete version under CACHE_ROOT: varlet-<version>.json.
Writes go to a temporary file in the same directory and are renamed into
place, so a concurrent reader (possibly another process) sees either the old
record or the new one, never a partial file.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import time
from pathlib import Path

from pydantic import ValidationError

from varletmeta.cache.base_cache_store import BaseCacheStore
from varletmeta.core.errors import CacheReadError, CacheWriteError
from varletmeta.core.models import MetadataDocument

logger = logging.getLogger(__name__)

_PREFIX = "varlet-"
_SUFFIX = ".json"
_TMP_PREFIX = ".varlet-"
# Temp files younger than this may belong to a write in progress.
_TMP_GRACE_SECONDS = 60.0


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using JSON files."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    async def get(self, version: str) -> MetadataDocument | None:
        """Retrieve the document for a version, evicting corrupt records."""
        path = self._entry_path(version)
        try:
            raw = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Failed to read cache record %s: %s", path, e)
            return None

        try:
            return self._decode(version, raw)
        except CacheReadError as e:
            logger.warning("%s; evicting", e)
            await self._evict(path)
            return None

    async def put(self, version: str, document: MetadataDocument) -> None:
        """Atomically write the record for a version."""
        payload = document.to_json().encode("utf-8")
        try:
            await asyncio.to_thread(self._write_atomic, self._entry_path(version), payload)
        except OSError as e:
            raise CacheWriteError(version, str(e)) from e
        logger.debug("Cached %s (%s, %d bytes)", version, document.source_tier, len(payload))

    async def delete(self, version: str) -> None:
        """Remove the record for a version."""
        path = self._entry_path(version)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise CacheWriteError(version, str(e)) from e

    async def clear(self) -> int:
        """Remove every record and abandoned temporary files."""
        if not self._root.is_dir():
            return 0

        removed = 0
        failures: list[str] = []
        paths = list(self._root.glob(f"{_PREFIX}*{_SUFFIX}"))
        paths.extend(self._abandoned_temp_files())
        for path in paths:
            try:
                await asyncio.to_thread(path.unlink, missing_ok=True)
                removed += 1
            except OSError as e:
                logger.error("Failed to remove cache record %s: %s", path, e)
                failures.append(path.name)

        if failures:
            raise CacheWriteError(
                None, f"could not remove {len(failures)} record(s): {', '.join(failures)}"
            )
        return removed

    async def list_versions(self) -> list[str]:
        """List versions from record file names."""
        if not self._root.is_dir():
            return []
        return [
            path.name[len(_PREFIX):-len(_SUFFIX)]
            for path in sorted(self._root.glob(f"{_PREFIX}*{_SUFFIX}"))
        ]

    def _abandoned_temp_files(self) -> list[Path]:
        cutoff = time.time() - _TMP_GRACE_SECONDS
        abandoned = []
        for path in self._root.glob(f"{_TMP_PREFIX}*"):
            try:
                if path.stat().st_mtime < cutoff:
                    abandoned.append(path)
            except FileNotFoundError:
                continue
        return abandoned

    def _entry_path(self, version: str) -> Path:
        """Return file path for a version key."""
        safe_key = version.replace("/", "_").replace("\\", "_")
        return self._root / f"{_PREFIX}{safe_key}{_SUFFIX}"

    def _write_atomic(self, path: Path, payload: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=_TMP_PREFIX, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @staticmethod
    def _decode(version: str, raw: bytes) -> MetadataDocument:
        try:
            data = json.loads(raw.decode("utf-8"))
            document = MetadataDocument.model_validate(data)
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            raise CacheReadError(version, type(e).__name__) from e

        if document.library_version != version:
            raise CacheReadError(
                version, f"record describes version '{document.library_version}'"
            )
        return document

    async def _evict(self, path: Path) -> None:
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            logger.warning("Failed to evict corrupt cache record %s: %s", path, e)
