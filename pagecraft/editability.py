"""Decide whether a dot-path addresses an editable field.

The resolver walks the schema tree alongside the path. Site-level paths such
as ``site.brand`` resolve directly against the site and feature schemas.
Section paths such as ``sections.services.items.2.price`` first locate the
section schema, either by the section id itself or through the section
type's ``schemaId``, and then descend field by field. A numeric segment under
an array field steps into the array's item schema, so editability is decided
by the item *shape* and never by the current array length.

Every miss resolves to "not editable"; the resolver never raises.

Examples
--------
>>> from pagecraft.config import FieldSchema, SiteSchema
>>> schema = SiteSchema(
...     sections={"about": {"title": FieldSchema(type="string", editable=True)}}
... )
>>> EditabilityResolver(schema).is_editable("sections.about.title")
True
>>> EditabilityResolver(schema).is_editable("sections.unknown.title")
False
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from ._constants import SECTIONS_NAMESPACE
from .config.models import FieldSchema
from .paths import is_index, split_path

if typ.TYPE_CHECKING:
    from .config.models import CompoundSchema, SchemaNode, SiteSchema

# Items of an array without an item schema are presumed editable.
PERMISSIVE_ITEM_SCHEMA = FieldSchema(
    type="string", editable=True, description="Array item"
)


class EditabilityResolver:
    """Resolve schema nodes and editability for dot-paths into site data."""

    def __init__(self, schema: SiteSchema, *, page_type: str | None = None) -> None:
        """Bind the resolver to ``schema``.

        Parameters
        ----------
        schema : SiteSchema
            Canonical schema; shared by reference and never modified.
        page_type : str, optional
            Page template whose section schemas take precedence over the
            home-page schemas (for example ``service-detail``).
        """
        self.schema = schema
        self.page_type = page_type

    def is_editable(
        self,
        path: str,
        section_schema_ids: cabc.Mapping[str, str] | None = None,
    ) -> bool:
        """Return True when the field at ``path`` is marked ``editable: true``.

        Parameters
        ----------
        path : str
            Dot-path such as ``site.brand`` or ``sections.hero-main.primaryCta.label``.
        section_schema_ids : Mapping[str, str], optional
            Map from runtime section id to the schema id of its type, used
            when the id itself is not a schema key (repeatable sections).
        """
        node = self.resolve_node(path, section_schema_ids)
        return isinstance(node, FieldSchema) and node.editable is True

    def resolve_node(
        self,
        path: str,
        section_schema_ids: cabc.Mapping[str, str] | None = None,
    ) -> SchemaNode | None:
        """Return the schema node addressed by ``path`` or None on any miss."""
        tokens = split_path(path)
        if not tokens:
            return None
        if tokens[0] != SECTIONS_NAMESPACE:
            root: CompoundSchema = {
                "site": self.schema.site,
                "features": self.schema.features,
            }
            return _walk(root, tokens, step_into_items=False)
        if len(tokens) < 2:
            return None
        section_schema = self.section_schema(tokens[1], section_schema_ids)
        if section_schema is None:
            return None
        return _walk(section_schema, tokens[2:], step_into_items=True)

    def resolve_array_schema(
        self,
        array_path: str,
        section_schema_ids: cabc.Mapping[str, str] | None = None,
    ) -> FieldSchema | None:
        """Return the array field schema at ``array_path``, if it is one."""
        node = self.resolve_node(array_path, section_schema_ids)
        if isinstance(node, FieldSchema) and node.is_array:
            return node
        return None

    def section_schema(
        self,
        section_id: str,
        section_schema_ids: cabc.Mapping[str, str] | None = None,
    ) -> CompoundSchema | None:
        """Return the schema for a section, by id first and then by type."""
        direct = self.schema.section_schema(section_id, page_type=self.page_type)
        if direct is not None:
            return direct
        schema_id = (section_schema_ids or {}).get(section_id)
        if not schema_id:
            return None
        return self.schema.section_schema(schema_id, page_type=self.page_type)


def _walk(
    node: SchemaNode | None, tokens: list[str], *, step_into_items: bool
) -> SchemaNode | None:
    """Descend ``tokens`` from ``node``; numeric tokens step into array items."""
    for token in tokens:
        match node:
            case FieldSchema() if step_into_items and node.is_array and is_index(token):
                node = (
                    node.item_schema
                    if node.item_schema is not None
                    else PERMISSIVE_ITEM_SCHEMA
                )
            case dict():
                node = node.get(token)
            case _:
                return None
        if node is None:
            return None
    return node


__all__ = ["PERMISSIVE_ITEM_SCHEMA", "EditabilityResolver"]
