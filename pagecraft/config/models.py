"""Typed dataclasses describing the site schema and baseline site data."""

from __future__ import annotations

import copy
import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

FIELD_TYPES = frozenset({"string", "number", "boolean", "image", "array"})

SchemaNode: typ.TypeAlias = "FieldSchema | CompoundSchema"
CompoundSchema: typ.TypeAlias = "dict[str, SchemaNode]"


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True, frozen=True)
class FieldSchema:
    """Describe one leaf value: its type, constraints, and editability."""

    type: str
    editable: bool = False
    description: str = ""
    max_length: int | None = None
    max_items: int | None = None
    item_schema: SchemaNode | None = None

    @property
    def is_array(self) -> bool:
        """Return True when the field holds a list of items."""
        return self.type == "array"


@dc.dataclass(slots=True, frozen=True)
class SectionTypeConfig:
    """Registry entry offered by the section picker."""

    key: str
    display_name: str
    description: str
    singleton: bool
    schema_id: str
    default_data: dict[str, typ.Any] | None = None


@dc.dataclass(slots=True, frozen=True)
class PageSchema:
    """Section schemas and picker allow-list for a secondary page template."""

    key: str
    allowed_section_types: tuple[str, ...] | None
    sections: dict[str, CompoundSchema]


@dc.dataclass(slots=True)
class SiteSchema:
    """Static description of every editable field on the site."""

    site: CompoundSchema = dc.field(default_factory=dict)
    features: CompoundSchema = dc.field(default_factory=dict)
    section_types: dict[str, SectionTypeConfig] = dc.field(default_factory=dict)
    sections: dict[str, CompoundSchema] = dc.field(default_factory=dict)
    pages: dict[str, PageSchema] = dc.field(default_factory=dict)

    def get_section_type(self, key: str) -> SectionTypeConfig | None:
        """Return the registry entry for ``key`` or None when unregistered."""
        return self.section_types.get(key)

    def section_schema(
        self, schema_id: str, *, page_type: str | None = None
    ) -> CompoundSchema | None:
        """Return the section schema for ``schema_id``.

        Page-scoped schemas take precedence over the home-page schemas when
        ``page_type`` names a known page.
        """
        page = self.pages.get(page_type) if page_type else None
        if page is not None and schema_id in page.sections:
            return page.sections[schema_id]
        return self.sections.get(schema_id)

    def allowed_section_types(self, page_type: str | None) -> tuple[str, ...] | None:
        """Return the picker allow-list for ``page_type``, if it has one."""
        if not page_type:
            return None
        page = self.pages.get(page_type)
        return page.allowed_section_types if page else None


@dc.dataclass(slots=True)
class Section:
    """One ordered, enableable block of page content."""

    id: str
    type: str
    enabled: bool = True
    order: int | float = 0
    data: dict[str, typ.Any] = dc.field(default_factory=dict)

    def as_dict(self) -> dict[str, typ.Any]:
        """Return a detached mapping suitable for serialization."""
        return {
            "id": self.id,
            "type": self.type,
            "enabled": self.enabled,
            "order": self.order,
            "data": copy.deepcopy(self.data),
        }


@dc.dataclass(slots=True)
class SiteData:
    """Published baseline content: site fields, feature flags, and sections."""

    site: dict[str, typ.Any] = dc.field(default_factory=dict)
    features: dict[str, typ.Any] = dc.field(default_factory=dict)
    sections: list[Section] = dc.field(default_factory=list)

    def as_dict(self) -> dict[str, typ.Any]:
        """Return the baseline as a detached nested mapping."""
        return {
            "site": copy.deepcopy(self.site),
            "features": copy.deepcopy(self.features),
            "sections": [section.as_dict() for section in self.sections],
        }


@dc.dataclass(slots=True)
class SiteConfig:
    """Schema and baseline data loaded together from one document."""

    schema: SiteSchema
    data: SiteData
    site_id: str | None = None
    source: Path | None = None


__all__ = [
    "FIELD_TYPES",
    "CompoundSchema",
    "FieldSchema",
    "PageSchema",
    "SchemaNode",
    "Section",
    "SectionTypeConfig",
    "SiteConfig",
    "SiteConfigError",
    "SiteData",
    "SiteSchema",
]
