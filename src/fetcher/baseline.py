# src/fetcher/baseline.py — v1
"""Embedded baseline entity list.

Used by the derived and static-fallback tiers when the full web-types
document cannot be obtained. Button, Card and Input carry their full prop,
event and slot declarations; the rest of the catalogue carries names,
descriptions and categories only.
"""

from __future__ import annotations

from datetime import datetime, timezone

from varletmeta.core.models import (
    AttributeEntry,
    ComponentEntry,
    DirectiveEntry,
    EventArgument,
    EventEntry,
    MetadataDocument,
    SlotEntry,
    SourceTier,
    ValueType,
    VueModel,
)

DOC_BASE_URL = "https://varlet.gitee.io/varlet-ui/#/en-US"


def _doc_url(slug: str) -> str:
    return f"{DOC_BASE_URL}/{slug}"


_DETAILED_COMPONENTS: tuple[ComponentEntry, ...] = (
    ComponentEntry(
        name="var-button",
        description="Button component for user interactions",
        doc_url=_doc_url("button"),
        attributes=[
            AttributeEntry(
                name="type",
                description="Button type",
                default="default",
                value=ValueType(kind="enum", type="string"),
            ),
            AttributeEntry(
                name="size",
                description="Button size",
                default="normal",
                value=ValueType(kind="enum", type="string"),
            ),
            AttributeEntry(
                name="disabled",
                description="Whether the button is disabled",
                default=False,
                value=ValueType(kind="boolean", type="boolean"),
            ),
        ],
        events=[
            EventEntry(
                name="click",
                description="Triggered when button is clicked",
                arguments=[EventArgument(name="event", type="MouseEvent")],
            ),
        ],
        category="basic",
    ),
    ComponentEntry(
        name="var-card",
        description="Card component for displaying content",
        doc_url=_doc_url("card"),
        attributes=[
            AttributeEntry(
                name="title",
                description="Card title",
                value=ValueType(kind="string", type="string"),
            ),
            AttributeEntry(
                name="subtitle",
                description="Card subtitle",
                value=ValueType(kind="string", type="string"),
            ),
        ],
        slots=[
            SlotEntry(name="default", description="Card content"),
            SlotEntry(name="title", description="Custom title content"),
        ],
        category="basic",
    ),
    ComponentEntry(
        name="var-input",
        description="Input component for user text input",
        doc_url=_doc_url("input"),
        attributes=[
            AttributeEntry(
                name="v-model",
                description="Input value",
                value=ValueType(kind="string", type="string"),
            ),
            AttributeEntry(
                name="placeholder",
                description="Input placeholder text",
                value=ValueType(kind="string", type="string"),
            ),
            AttributeEntry(
                name="disabled",
                description="Whether the input is disabled",
                default=False,
                value=ValueType(kind="boolean", type="boolean"),
            ),
        ],
        vue_model=VueModel(prop="value", event="input"),
        category="form",
    ),
)

CATEGORIES: tuple[str, ...] = ("basic", "form", "feedback", "navigation", "layout", "advanced")

# (canonical name, description, category)
_CATALOGUE: tuple[tuple[str, str, str], ...] = (
    ("var-icon", "Icon component for displaying icons", "basic"),
    ("var-image", "Image component with lazy loading support", "basic"),
    ("var-cell", "Cell component for list items", "basic"),
    ("var-fab", "Floating action button", "basic"),
    ("var-select", "Select component for option selection", "form"),
    ("var-checkbox", "Checkbox component for boolean input", "form"),
    ("var-radio", "Radio component for single selection", "form"),
    ("var-switch", "Switch component for boolean toggle", "form"),
    ("var-slider", "Slider component for range input", "form"),
    ("var-rate", "Rate component for rating input", "form"),
    ("var-form", "Form component with validation", "form"),
    ("var-dialog", "Dialog component for modal interactions", "feedback"),
    ("var-popup", "Popup component for overlay content", "feedback"),
    ("var-overlay", "Overlay component that masks the page", "feedback"),
    ("var-loading", "Loading component for async operations", "feedback"),
    ("var-snackbar", "Snackbar component for notifications", "feedback"),
    ("var-tooltip", "Tooltip component for contextual help", "feedback"),
    ("var-progress", "Progress component for showing progress", "feedback"),
    ("var-tab", "Tab component for navigation", "navigation"),
    ("var-menu", "Menu component for navigation options", "navigation"),
    ("var-pagination", "Pagination component for data navigation", "navigation"),
    ("var-step", "Step component for step-by-step processes", "navigation"),
    ("var-list", "List component for displaying data", "layout"),
    ("var-table", "Table component for tabular data", "layout"),
    ("var-divider", "Divider component for content separation", "layout"),
    ("var-space", "Space component for layout spacing", "layout"),
    ("var-sticky", "Sticky component for fixed positioning", "layout"),
    ("var-picker", "Picker component for option selection", "advanced"),
    ("var-date-picker", "DatePicker component for date selection", "advanced"),
    ("var-time-picker", "TimePicker component for time selection", "advanced"),
    ("var-uploader", "Uploader component for file uploads", "advanced"),
    ("var-image-preview", "ImagePreview component for image viewing", "advanced"),
    ("var-pull-refresh", "PullRefresh component for refresh functionality", "advanced"),
)

_DIRECTIVES: tuple[DirectiveEntry, ...] = (
    DirectiveEntry(
        name="v-ripple",
        description="Ripple effect directive",
        doc_url=_doc_url("ripple"),
    ),
    DirectiveEntry(
        name="v-lazy",
        description="Lazy loading for images and components",
        doc_url=_doc_url("lazy"),
    ),
)


def baseline_components() -> list[ComponentEntry]:
    """Detailed entries first, then the name-and-description catalogue."""
    components = list(_DETAILED_COMPONENTS)
    components.extend(
        ComponentEntry(name=name, description=description, category=category)
        for name, description, category in _CATALOGUE
    )
    return components


def baseline_category(name: str) -> str | None:
    """Catalogue group of a canonical component name, if it is catalogued."""
    return _CATEGORY_BY_NAME.get(name)


_CATEGORY_BY_NAME: dict[str, str] = {
    entry.name: entry.category
    for entry in baseline_components()
    if entry.category is not None
}


def baseline_directives() -> list[DirectiveEntry]:
    return list(_DIRECTIVES)


def build_baseline_document(version: str, tier: SourceTier) -> MetadataDocument:
    """Synthesize a document from the baseline, annotated with a version."""
    return MetadataDocument(
        library_version=version,
        tags=baseline_components(),
        attributes=baseline_directives(),
        fetched_at=datetime.now(timezone.utc),
        source_tier=tier,
    )
