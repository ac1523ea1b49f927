"""Schema-specific configuration builders."""

from __future__ import annotations

import collections.abc as cabc
import copy
import typing as typ

from .helpers import (
    _is_field_payload,
    _optional_int,
    _optional_str,
    _pick,
    _require_mapping,
)
from .models import (
    FIELD_TYPES,
    CompoundSchema,
    FieldSchema,
    PageSchema,
    SchemaNode,
    SectionTypeConfig,
    SiteConfigError,
    SiteSchema,
)


def _build_site_schema(payload: cabc.Mapping[str, typ.Any]) -> SiteSchema:
    """Build the full site schema from the ``schema`` block of the config."""
    sections = {
        str(schema_id): _build_compound(section, where=f"sections.{schema_id}")
        for schema_id, section in _require_mapping(
            payload.get("sections"), where="schema.sections"
        ).items()
    }
    pages = _build_page_schemas(payload.get("pages"))
    section_types = _build_section_types(
        _pick(payload, "sectionTypes", "section_types")
    )

    known = set(sections)
    for page in pages.values():
        known.update(page.sections)
    for entry in section_types.values():
        if entry.schema_id not in known:
            msg = (
                f"Section type '{entry.key}' references unknown schema "
                f"'{entry.schema_id}'."
            )
            raise SiteConfigError(msg)

    return SiteSchema(
        site=_build_compound(payload.get("site"), where="site"),
        features=_build_compound(payload.get("features"), where="features"),
        section_types=section_types,
        sections=sections,
        pages=pages,
    )


def _build_node(payload: object, *, where: str) -> SchemaNode:
    """Build a field schema, or a compound mapping of nested nodes."""
    if _is_field_payload(payload):
        return _build_field_schema(typ.cast("cabc.Mapping[str, typ.Any]", payload), where=where)
    return _build_compound(payload, where=where)


def _build_compound(payload: object, *, where: str) -> CompoundSchema:
    """Build a compound node: a mapping from field name to schema node."""
    mapping = _require_mapping(payload, where=where)
    return {
        str(key): _build_node(value, where=f"{where}.{key}")
        for key, value in mapping.items()
    }


def _build_field_schema(
    payload: cabc.Mapping[str, typ.Any], *, where: str
) -> FieldSchema:
    """Build a single field schema, validating its declared type."""
    field_type = str(payload["type"])
    if field_type not in FIELD_TYPES:
        allowed = ", ".join(sorted(FIELD_TYPES))
        msg = f"Field '{where}' has unknown type '{field_type}' (expected {allowed})."
        raise SiteConfigError(msg)

    item_payload = _pick(payload, "itemSchema", "item_schema")
    item_schema: SchemaNode | None = None
    if item_payload is not None:
        if field_type != "array":
            msg = f"Field '{where}' declares an item schema but is not an array."
            raise SiteConfigError(msg)
        item_schema = _build_node(item_payload, where=f"{where}.itemSchema")

    return FieldSchema(
        type=field_type,
        editable=payload.get("editable") is True,
        description=_optional_str(payload.get("description")) or "",
        max_length=_optional_int(
            _pick(payload, "maxLength", "max_length"), where=f"{where}.maxLength"
        ),
        max_items=_optional_int(
            _pick(payload, "maxItems", "max_items"), where=f"{where}.maxItems"
        ),
        item_schema=item_schema,
    )


def _build_section_types(payload: object) -> dict[str, SectionTypeConfig]:
    """Build the section type registry used by the picker."""
    registry: dict[str, SectionTypeConfig] = {}
    for key, entry in _require_mapping(payload, where="sectionTypes").items():
        match entry:
            case cabc.Mapping():
                pass
            case _:
                msg = f"Section type '{key}' must be a mapping."
                raise SiteConfigError(msg)
        default_data = _pick(entry, "defaultData", "default_data")
        if default_data is not None and not isinstance(default_data, cabc.Mapping):
            msg = f"Section type '{key}' default data must be a mapping."
            raise SiteConfigError(msg)
        registry[str(key)] = SectionTypeConfig(
            key=str(key),
            display_name=_optional_str(_pick(entry, "displayName", "display_name"))
            or str(key),
            description=_optional_str(entry.get("description")) or "",
            singleton=entry.get("singleton") is True,
            schema_id=_optional_str(_pick(entry, "schemaId", "schema_id")) or str(key),
            default_data=copy.deepcopy(dict(default_data))
            if default_data is not None
            else None,
        )
    return registry


def _build_page_schemas(payload: object) -> dict[str, PageSchema]:
    """Build per-page schemas for secondary page templates."""
    pages: dict[str, PageSchema] = {}
    for key, entry in _require_mapping(payload, where="pages").items():
        page = _require_mapping(entry, where=f"pages.{key}")
        allowed = _pick(page, "allowedSectionTypes", "allowed_section_types")
        match allowed:
            case None:
                allowed_types = None
            case list() | tuple():
                allowed_types = tuple(str(item) for item in allowed)
            case _:
                msg = f"Page '{key}' allowedSectionTypes must be a list."
                raise SiteConfigError(msg)
        sections = {
            str(schema_id): _build_compound(
                section, where=f"pages.{key}.sections.{schema_id}"
            )
            for schema_id, section in _require_mapping(
                page.get("sections"), where=f"pages.{key}.sections"
            ).items()
        }
        pages[str(key)] = PageSchema(
            key=str(key), allowed_section_types=allowed_types, sections=sections
        )
    return pages


__all__ = ["_build_site_schema"]
