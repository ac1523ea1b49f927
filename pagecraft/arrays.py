"""Array item operations on fields inside sections.

Paths name an array field inside a section, for example
``sections.services.items`` or ``sections.contact.form.fields``. Each
operation reads the current effective array (baseline with pending edits
overlaid), so repeated operations in one session compose, and writes the whole
new array back as a single patch entry. Invalid requests are no-ops that
return False.
"""

from __future__ import annotations

import logging
import typing as typ

from ._constants import SECTIONS_NAMESPACE
from .defaults import derive_item
from .editability import PERMISSIVE_ITEM_SCHEMA
from .paths import get_path, split_path

if typ.TYPE_CHECKING:
    from .config.models import FieldSchema
    from .store import EditStateStore

logger = logging.getLogger(__name__)


def add_item(store: EditStateStore, array_path: str) -> bool:
    """Append one default item unless the array is at its ``maxItems`` cap."""
    current = _live_array(store, array_path)
    if current is None:
        return False
    array_schema = store.resolver.resolve_array_schema(
        array_path, store.section_schema_ids()
    )
    if not _has_room(array_schema, current):
        logger.info("Array %s is full (%d items)", array_path, len(current))
        return False
    item_schema = (
        array_schema.item_schema
        if array_schema is not None and array_schema.item_schema is not None
        else PERMISSIVE_ITEM_SCHEMA
    )
    store.write(array_path, [*current, derive_item(item_schema)])
    return True


def can_add_item(store: EditStateStore, array_path: str) -> bool:
    """Return True when :func:`add_item` would append an item."""
    current = _live_array(store, array_path)
    if current is None:
        return False
    array_schema = store.resolver.resolve_array_schema(
        array_path, store.section_schema_ids()
    )
    return _has_room(array_schema, current)


def remove_item(store: EditStateStore, array_path: str, index: int) -> bool:
    """Remove the item at ``index``; out-of-range indices are ignored."""
    current = _live_array(store, array_path)
    if current is None or not 0 <= index < len(current):
        logger.debug("Ignoring removal of %s[%s]", array_path, index)
        return False
    store.write(array_path, [item for i, item in enumerate(current) if i != index])
    return True


def move_item(
    store: EditStateStore, array_path: str, from_index: int, to_index: int
) -> bool:
    """Move the item at ``from_index`` so it ends up at ``to_index``.

    Moving index 0 to index 2 of ``[A, B, C, D]`` yields ``[B, C, A, D]``.
    """
    current = _live_array(store, array_path)
    if (
        current is None
        or from_index == to_index
        or not 0 <= from_index < len(current)
        or not 0 <= to_index < len(current)
    ):
        logger.debug("Ignoring move of %s[%s] to %s", array_path, from_index, to_index)
        return False
    moved = current.pop(from_index)
    current.insert(to_index, moved)
    store.write(array_path, current)
    return True


def _live_array(store: EditStateStore, array_path: str) -> list[typ.Any] | None:
    """Return the effective array at ``array_path``.

    A missing field counts as an empty array; a missing section or a
    non-list value yields None.
    """
    tokens = split_path(array_path)
    if len(tokens) < 3 or tokens[0] != SECTIONS_NAMESPACE:
        return None
    section = store.get_section(tokens[1])
    if section is None:
        return None
    value = get_path(section.data, ".".join(tokens[2:]))
    if value is None:
        return []
    return value if isinstance(value, list) else None


def _has_room(array_schema: FieldSchema | None, current: list[typ.Any]) -> bool:
    if array_schema is None or array_schema.max_items is None:
        return True
    return len(current) < array_schema.max_items


__all__ = ["add_item", "can_add_item", "move_item", "remove_item"]
