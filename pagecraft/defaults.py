"""Placeholder values for newly added sections and array items.

Defaults are derived from schema nodes: string fields get a canned
placeholder chosen by keywords in the field name, other leaf types get their
zero value, arrays with an item schema start with one derived item, and
compound nodes derive each property in turn.

Examples
--------
>>> from pagecraft.config import FieldSchema
>>> derive_default(FieldSchema(type="string"), "phone")
'(555) 000-0000'
>>> derive_default(FieldSchema(type="array", item_schema=FieldSchema(type="number")))
[0]
"""

from __future__ import annotations

import typing as typ

from .config.models import FieldSchema

if typ.TYPE_CHECKING:
    from .config.models import CompoundSchema, SchemaNode

# Checked in order; the first keyword contained in the field name wins.
_STRING_PLACEHOLDERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("name",), "Placeholder Name"),
    (("subtitle",), "Placeholder Subtitle"),
    (("title",), "Placeholder Title"),
    (("description", "excerpt"), "Placeholder description..."),
    (("price",), "$$"),
    (("email",), "email@example.com"),
    (("phone",), "(555) 000-0000"),
    (("address",), "123 Main St"),
    (("date",), "2024-01-01"),
    (("company",), "Company"),
    (("slug",), "placeholder-slug"),
    (("message",), "Placeholder message"),
    (("label",), "Click me"),
)

_ZERO_VALUES: dict[str, typ.Any] = {"number": 0, "boolean": False, "image": ""}


def placeholder_text(key_hint: str) -> str:
    """Return the canned placeholder string for a field called ``key_hint``."""
    key = key_hint.lower()
    if key == "href":
        return "#"
    for keywords, placeholder in _STRING_PLACEHOLDERS:
        if any(keyword in key for keyword in keywords):
            return placeholder
    return ""


def derive_default(node: SchemaNode | None, key_hint: str = "") -> typ.Any:
    """Return a placeholder value for ``node``.

    Parameters
    ----------
    node : FieldSchema or mapping or None
        Field schema or compound mapping of schema nodes. ``None`` (an
        unknown schema) derives an empty string.
    key_hint : str, optional
        Field name used to pick a string placeholder.
    """
    match node:
        case FieldSchema(type="string"):
            return placeholder_text(key_hint)
        case FieldSchema(type="array", item_schema=None):
            return []
        case FieldSchema(type="array", item_schema=item_schema):
            return [derive_item(item_schema)]
        case FieldSchema(type=field_type):
            return _ZERO_VALUES.get(field_type, "")
        case dict():
            return derive_section_data(node)
        case _:
            return ""


def derive_item(item_schema: SchemaNode | None) -> typ.Any:
    """Return a new array element for ``item_schema``.

    Compound items derive each property from its own name. Primitive items
    carry no field name, so string items start empty.
    """
    return derive_default(item_schema)


def derive_section_data(section_schema: CompoundSchema | None) -> dict[str, typ.Any]:
    """Return default ``data`` for a section whose type has no explicit default."""
    if not section_schema:
        return {}
    return {key: derive_default(node, key) for key, node in section_schema.items()}


__all__ = ["derive_default", "derive_item", "derive_section_data", "placeholder_text"]
