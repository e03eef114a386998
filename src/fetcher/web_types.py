# src/fetcher/web_types.py — v1
"""Parse a JetBrains web-types document into a MetadataDocument.

The library publishes `web-types.json` with its entities under
`contributions.html.tags` (components) and `contributions.html.attributes`
(directives). Anything that does not have that shape is rejected so the
fetcher moves on to the next tier instead of caching a malformed document.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from varletmeta.core.errors import TierFailure
from varletmeta.core.models import ComponentEntry, DirectiveEntry, MetadataDocument
from varletmeta.lookup.entity_lookup import normalize_component_name

# Values under these keys are user data and keep their keys verbatim.
_OPAQUE_KEYS = frozenset({"default"})


def _snake_keys(value: Any) -> Any:
    """Recursively rename hyphenated web-types keys ("doc-url" -> "doc_url")."""
    if isinstance(value, dict):
        return {
            key.replace("-", "_"): (item if key in _OPAQUE_KEYS else _snake_keys(item))
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_snake_keys(item) for item in value]
    return value


def _html_contributions(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise TierFailure("primary", "web-types payload is not an object")
    contributions = payload.get("contributions")
    html = contributions.get("html") if isinstance(contributions, dict) else None
    if not isinstance(html, dict):
        raise TierFailure("primary", "web-types payload has no contributions.html")
    if not isinstance(html.get("tags"), list):
        raise TierFailure("primary", "contributions.html.tags is not a list")
    return html


def parse_web_types(payload: Any, version: str) -> MetadataDocument:
    """Build a primary-tier document from a decoded web-types payload.

    Args:
        payload: Decoded JSON body.
        version: The concrete version that was requested; it becomes the
            document's library_version whatever the payload claims.

    Raises:
        TierFailure: If the payload does not have the web-types shape.
    """
    html = _html_contributions(payload)
    raw_directives = html.get("attributes") or []
    if not isinstance(raw_directives, list):
        raise TierFailure("primary", "contributions.html.attributes is not a list")

    try:
        tags = []
        for raw in html["tags"]:
            data = _snake_keys(raw)
            if isinstance(data, dict) and isinstance(data.get("name"), str):
                data["name"] = normalize_component_name(data["name"])
            tags.append(ComponentEntry.model_validate(data))
        directives = [
            DirectiveEntry.model_validate(_snake_keys(raw)) for raw in raw_directives
        ]
        return MetadataDocument(
            library_version=version,
            tags=tags,
            attributes=directives,
            fetched_at=datetime.now(timezone.utc),
            source_tier="primary",
        )
    except ValidationError as e:
        raise TierFailure(
            "primary", f"web-types entries failed validation ({e.error_count()} errors)"
        ) from e
