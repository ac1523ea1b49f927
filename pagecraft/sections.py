"""Section collection operations: add, remove, and picker status.

Adding a section respects singleton types (at most one instance) and gives
singleton instances the stable id of their schema, while repeatable types get
a unique suffix. Inserting at an explicit position renumbers every section's
``order`` to ``(index + 1) * 10``; appending uses ``(count + 1) * 10``.
Removing a section leaves the remaining ``order`` values untouched.

Every operation rebuilds the collection from the merged sections and records
it in the patch as one ``sections`` entry.
"""

from __future__ import annotations

import copy
import dataclasses as dc
import logging
import time
import typing as typ

from ._constants import ORDER_STEP
from .config.models import Section
from .defaults import derive_section_data

if typ.TYPE_CHECKING:
    from .store import EditStateStore

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True, frozen=True)
class SectionTypeStatus:
    """Picker entry for one registered section type."""

    key: str
    display_name: str
    description: str
    singleton: bool
    is_added: bool
    can_add: bool


def add_section(
    store: EditStateStore, section_type: str, position: int | None = None
) -> Section | None:
    """Add a new section of ``section_type`` to the working collection.

    Parameters
    ----------
    store : EditStateStore
        Session whose collection is changed.
    section_type : str
        Registry key of the section type.
    position : int, optional
        Collection index to insert at, clamped to the collection bounds.
        When omitted the section is appended.

    Returns
    -------
    Section or None
        A copy of the new section, or None when the type is unknown or is a
        singleton that is already present.
    """
    entry = store.schema.get_section_type(section_type)
    if entry is None:
        logger.debug("Ignoring unknown section type %r", section_type)
        return None
    current = store.list_sections()
    if entry.singleton and any(section.type == section_type for section in current):
        logger.info("Section type %r is a singleton and already present", section_type)
        return None

    if entry.default_data is not None:
        data = copy.deepcopy(entry.default_data)
    else:
        data = derive_section_data(
            store.schema.section_schema(entry.schema_id, page_type=store.page_type)
        )
    existing_ids = {section.id for section in current}
    if entry.singleton and entry.schema_id not in existing_ids:
        section_id = entry.schema_id
    else:
        section_id = _unique_id(entry.schema_id, existing_ids)

    new_section = Section(id=section_id, type=section_type, enabled=True, data=data)
    if position is None:
        new_section.order = (len(current) + 1) * ORDER_STEP
        current.append(new_section)
    else:
        current.insert(max(0, min(position, len(current))), new_section)
        for index, section in enumerate(current):
            section.order = (index + 1) * ORDER_STEP

    store.replace_sections(current)
    return dc.replace(new_section, data=copy.deepcopy(new_section.data))


def remove_section(store: EditStateStore, section_id: str) -> bool:
    """Remove the section with ``section_id``; return False when absent."""
    current = store.list_sections()
    remaining = [section for section in current if section.id != section_id]
    if len(remaining) == len(current):
        logger.debug("No section %r to remove", section_id)
        return False
    store.replace_sections(remaining)
    return True


def available_section_types(
    store: EditStateStore, page_type: str | None = None
) -> dict[str, SectionTypeStatus]:
    """Report every registered section type with its added/can-add status.

    Types outside the page's ``allowedSectionTypes`` are omitted when the page
    (``page_type`` or the store's own page) declares an allow-list.
    """
    allowed = store.schema.allowed_section_types(page_type or store.page_type)
    present = {section.type for section in store.list_sections()}
    statuses: dict[str, SectionTypeStatus] = {}
    for key, entry in store.schema.section_types.items():
        if allowed is not None and key not in allowed:
            continue
        is_added = key in present
        statuses[key] = SectionTypeStatus(
            key=key,
            display_name=entry.display_name,
            description=entry.description,
            singleton=entry.singleton,
            is_added=is_added,
            can_add=not is_added if entry.singleton else True,
        )
    return statuses


def _unique_id(schema_id: str, existing_ids: set[str]) -> str:
    stamp = time.time_ns() // 1_000_000
    candidate = f"{schema_id}-{stamp}"
    while candidate in existing_ids:
        stamp += 1
        candidate = f"{schema_id}-{stamp}"
    return candidate


__all__ = [
    "SectionTypeStatus",
    "add_section",
    "available_section_types",
    "remove_section",
]
