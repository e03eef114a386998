# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
A MetadataDocument is the unit of caching: one document per concrete
library version, never mutated after creation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SCHEMA_VERSION = 1

SourceTier = Literal["primary", "derived", "static-fallback"]


class _EntityModel(BaseModel):
    """Base for entity records: camelCase aliases on the wire, frozen in memory."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# === SUB-RECORDS ===


class ValueType(_EntityModel):
    """Declared value shape of an attribute (web-types `value`)."""

    kind: str
    type: str | list[str] | None = None


class AttributeEntry(_EntityModel):
    """Component prop."""

    name: str
    description: str | None = None
    doc_url: str | None = None
    default: Any = None
    value: ValueType | None = None


class EventArgument(_EntityModel):
    name: str | None = None
    type: str | list[str] | None = None


class EventEntry(_EntityModel):
    """Component event and its callback arguments."""

    name: str
    description: str | None = None
    doc_url: str | None = None
    arguments: list[EventArgument] = Field(default_factory=list)


class SlotProperty(_EntityModel):
    name: str
    type: str | list[str] | None = None


class SlotEntry(_EntityModel):
    """Named slot with its scoped properties."""

    name: str
    description: str | None = None
    doc_url: str | None = None
    vue_properties: list[SlotProperty] = Field(default_factory=list)


class VueModel(_EntityModel):
    prop: str
    event: str


# === ENTITIES ===


class ComponentEntry(_EntityModel):
    """A component tag, keyed by its canonical `var-` lower-kebab name."""

    name: str
    description: str | None = None
    doc_url: str | None = None
    attributes: list[AttributeEntry] = Field(default_factory=list)
    events: list[EventEntry] = Field(default_factory=list)
    slots: list[SlotEntry] = Field(default_factory=list)
    vue_model: VueModel | None = None
    # Catalogue group (basic, form, ...); web-types documents carry none.
    category: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("component name must not be empty")
        return v.strip().lower()


class DirectiveEntry(_EntityModel):
    """A directive attribute, keyed by its canonical `v-` name."""

    name: str
    description: str | None = None
    doc_url: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("directive name must not be empty")
        return v.strip().lower()


# === DOCUMENT ===


class MetadataDocument(_EntityModel):
    """All metadata known for one concrete library version."""

    schema_version: Literal[1] = SCHEMA_VERSION
    library_version: str
    tags: list[ComponentEntry] = Field(default_factory=list)
    attributes: list[DirectiveEntry] = Field(default_factory=list)
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source_tier: SourceTier

    @field_validator("library_version")
    @classmethod
    def validate_library_version(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("library_version must not be empty")
        return v.strip()

    @property
    def is_degraded(self) -> bool:
        """Whether the document was synthesized rather than fetched in full."""
        return self.source_tier != "primary"

    def age_seconds(self, now: datetime | None = None) -> float:
        """Seconds elapsed since the document was obtained."""
        now = now or datetime.now(timezone.utc)
        fetched_at = self.fetched_at
        if fetched_at.tzinfo is None:
            fetched_at = fetched_at.replace(tzinfo=timezone.utc)
        return (now - fetched_at).total_seconds()

    def to_json(self) -> str:
        """Serialize with camelCase keys, as persisted by the cache."""
        return self.model_dump_json(by_alias=True, indent=2)
