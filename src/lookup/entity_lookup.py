# src/lookup/entity_lookup.py — v1
"""Name normalization and exact-match lookup of components and directives.

A miss is an ordinary outcome: lookups return a NotFoundError value instead
of raising.
"""

from __future__ import annotations

import re

from varletmeta.core.errors import NotFoundError
from varletmeta.core.models import ComponentEntry, DirectiveEntry, MetadataDocument
from varletmeta.fetcher.baseline import CATEGORIES, baseline_category

COMPONENT_PREFIX = "var-"
DIRECTIVE_PREFIX = "v-"
UNCATEGORIZED = "other"

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATOR_RE = re.compile(r"[\s_]+")
_DASHES_RE = re.compile(r"-{2,}")


def _kebab(name: str) -> str:
    name = _CAMEL_BOUNDARY_RE.sub("-", name.strip())
    name = _SEPARATOR_RE.sub("-", name).lower()
    return _DASHES_RE.sub("-", name).strip("-")


def normalize_component_name(name: str) -> str:
    """Canonical `var-` lower-kebab form.

    "Button", "button", "var-button" and "VarButton" all become
    "var-button"; "DatePicker" becomes "var-date-picker".
    """
    kebab = _kebab(name)
    while kebab.startswith(COMPONENT_PREFIX):
        kebab = kebab[len(COMPONENT_PREFIX):]
    return f"{COMPONENT_PREFIX}{kebab}"


def directive_name_candidates(name: str) -> list[str]:
    """Candidate canonical names for a directive, most literal first.

    "ripple", "v-ripple" and "V-Ripple" give ["v-ripple"]. The malformed
    "vripple" gives ["v-vripple", "v-ripple"] so that a directive whose own
    name starts with "v" is still found by its literal spelling.
    """
    target = _kebab(name)
    while target.startswith(DIRECTIVE_PREFIX):
        target = target[len(DIRECTIVE_PREFIX):]

    candidates = [f"{DIRECTIVE_PREFIX}{target}"]
    if target.startswith("v") and len(target) > 1:
        candidates.append(f"{DIRECTIVE_PREFIX}{target[1:]}")
    return candidates


def find_component(doc: MetadataDocument, name: str) -> ComponentEntry | NotFoundError:
    target = normalize_component_name(name)
    for tag in doc.tags:
        if tag.name.lower() == target:
            return tag
    return NotFoundError(kind="component", name=target, version=doc.library_version)


def find_directive(doc: MetadataDocument, name: str) -> DirectiveEntry | NotFoundError:
    candidates = directive_name_candidates(name)
    by_name = {attr.name.lower(): attr for attr in doc.attributes}
    for candidate in candidates:
        if candidate in by_name:
            return by_name[candidate]
    return NotFoundError(kind="directive", name=candidates[0], version=doc.library_version)


def list_component_names(doc: MetadataDocument) -> list[str]:
    """Canonical component names in declaration order."""
    return [tag.name for tag in doc.tags]


def group_components_by_category(doc: MetadataDocument) -> dict[str, list[str]]:
    """Component names grouped by catalogue category.

    Entries without their own category (web-types documents) take the
    baseline catalogue's; anything uncatalogued lands in "other". Groups
    follow catalogue order and empty groups are omitted.
    """
    groups: dict[str, list[str]] = {category: [] for category in (*CATEGORIES, UNCATEGORIZED)}
    for tag in doc.tags:
        category = tag.category or baseline_category(tag.name) or UNCATEGORIZED
        groups.setdefault(category, []).append(tag.name)
    return {category: names for category, names in groups.items() if names}
