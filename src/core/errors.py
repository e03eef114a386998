# src/core/errors.py — v1
"""Error taxonomy.

Only ResolutionError (raised) and NotFoundError (returned as a value) reach
callers of the service facade. Storage and tier failures are absorbed by the
pipeline.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class VarletMetaError(Exception):
    """Base class for all varletmeta exceptions."""


class ResolutionError(VarletMetaError):
    """A version token could not be resolved and no cached fallback exists."""

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        self.reason = reason
        super().__init__(f"Could not resolve version '{token}': {reason}")


class CacheWriteError(VarletMetaError):
    """Persisting or removing a cache record failed."""

    def __init__(self, version: str | None, reason: str) -> None:
        self.version = version
        self.reason = reason
        target = f"version '{version}'" if version else "cache"
        super().__init__(f"Cache write failed for {target}: {reason}")


class CacheReadError(VarletMetaError):
    """A cache record exists but cannot be decoded. Treated as a miss."""

    def __init__(self, version: str, reason: str) -> None:
        self.version = version
        self.reason = reason
        super().__init__(f"Corrupt cache record for version '{version}': {reason}")


class TierFailure(VarletMetaError):
    """One fetch tier could not produce a document; the next tier is tried."""

    def __init__(self, tier: str, reason: str) -> None:
        self.tier = tier
        self.reason = reason
        super().__init__(f"Tier '{tier}' failed: {reason}")


class NotFoundError(BaseModel):
    """Negative lookup result. Returned, never raised."""

    kind: Literal["component", "directive"]
    name: str
    version: str

    @property
    def message(self) -> str:
        label = self.kind.capitalize()
        return f'{label} "{self.name}" not found in Varlet version {self.version}.'
