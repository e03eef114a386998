# src/api/models.py — v1
"""API-level models: ServiceRequest and ServiceResult.

The transport layer hands the service a typed request and gets back a typed
result; it never sees exceptions.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Operation = Literal[
    "get_metadata_document",
    "get_component",
    "get_directive",
    "list_components",
    "list_components_by_category",
    "invalidate_cache",
]

_NEEDS_ENTITY = {"get_component", "get_directive"}


class ServiceRequest(BaseModel):
    """One query from the transport layer."""

    operation: Operation
    version: str | None = None
    entity_name: str | None = Field(default=None, alias="entityName")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("version must not be blank; omit it for \"latest\"")
        return v

    @model_validator(mode="after")
    def validate_entity_name(self) -> ServiceRequest:
        if self.operation in _NEEDS_ENTITY and not (self.entity_name or "").strip():
            raise ValueError(f"{self.operation} requires entity_name")
        return self


class ServiceError(BaseModel):
    """Typed error payload: 'resolution', 'not_found' or 'invalid_request'."""

    code: Literal["resolution", "not_found", "invalid_request"]
    message: str


class ServiceResult(BaseModel):
    """Outcome of one ServiceRequest."""

    operation: Operation
    ok: bool
    version: str | None = None
    data: Any = None
    error: ServiceError | None = None
