"""Pending-edit state layered over a site's published baseline.

:class:`EditStateStore` owns a sparse patch of edits keyed by literal
dot-path and a working copy of the section collection. Reads consult the
patch first, then the working sections with any section-scoped edits
overlaid, then the baseline. Every write persists the whole patch to the
optional durable draft cache; discarding or publishing clears it.

The store is the single entry point the presentation layer talks to: it
exposes resolved values, editability, section management, and array item
management, and none of those calls raise for input inside their documented
domain.

Examples
--------
>>> from pagecraft.config import FieldSchema, Section, SiteData, SiteSchema
>>> schema = SiteSchema(
...     sections={"about": {"title": FieldSchema(type="string", editable=True)}}
... )
>>> baseline = SiteData(
...     sections=[Section(id="about", type="about", data={"title": "About Us"})]
... )
>>> store = EditStateStore(schema, baseline)
>>> store.write("sections.about.title", "Our Story")
>>> store.read("sections.about.title")
'Our Story'
>>> store.publish().ok
True
>>> store.baseline.sections[0].data["title"]
'Our Story'
"""

from __future__ import annotations

import collections.abc as cabc
import copy
import dataclasses as dc
import logging
import typing as typ

from . import arrays, sections
from ._constants import SECTIONS_NAMESPACE
from .cache import draft_key_for
from .config.loader import build_sections
from .config.models import Section, SiteConfigError, SiteData
from .editability import EditabilityResolver
from .paths import PathError, get_path, merge_into, set_path, split_path
from .publish import PublishError, PublishResult

if typ.TYPE_CHECKING:
    from .cache import DraftCache
    from .config.models import SiteConfig, SiteSchema
    from .publish import PublishBackend

logger = logging.getLogger(__name__)

_SECTION_PREFIX = f"{SECTIONS_NAMESPACE}."


class EditStateStore:
    """Hold pending edits for one editing session of one site."""

    def __init__(
        self,
        schema: SiteSchema,
        baseline: SiteData,
        *,
        site_id: str | None = None,
        page_type: str | None = None,
        cache: DraftCache | None = None,
        backend: PublishBackend | None = None,
    ) -> None:
        """Start a session with an empty patch.

        Parameters
        ----------
        schema : SiteSchema
            Canonical schema; read-only and shared by reference.
        baseline : SiteData
            Published content. It is never mutated; publishing replaces it.
        site_id : str, optional
            Identifier used to key the durable draft cache.
        page_type : str, optional
            Page template whose schemas and picker allow-list apply.
        cache : DraftCache, optional
            Durable draft storage. Without one the session is in-memory only.
        backend : PublishBackend, optional
            Storage that receives published content. Without one publishing
            only promotes the draft to the in-memory baseline.
        """
        self.schema = schema
        self.baseline = baseline
        self.site_id = site_id
        self.page_type = page_type
        self.cache = cache
        self.backend = backend
        self.resolver = EditabilityResolver(schema, page_type=page_type)
        self._patch: dict[str, typ.Any] = {}
        self._sections: list[Section] = _copy_sections(baseline.sections)

    @classmethod
    def from_config(
        cls,
        config: SiteConfig,
        *,
        page_type: str | None = None,
        cache: DraftCache | None = None,
        backend: PublishBackend | None = None,
    ) -> EditStateStore:
        """Build a store for the schema and baseline held by ``config``."""
        return cls(
            config.schema,
            config.data,
            site_id=config.site_id,
            page_type=page_type,
            cache=cache,
            backend=backend,
        )

    @property
    def draft_key(self) -> str:
        """Return the durable cache key for this site's draft."""
        return draft_key_for(self.site_id)

    @property
    def patch(self) -> dict[str, typ.Any]:
        """Return a detached copy of the pending patch."""
        return copy.deepcopy(self._patch)

    @property
    def has_changes(self) -> bool:
        """Return True while any edit is pending."""
        return bool(self._patch)

    @property
    def change_count(self) -> int:
        """Return the number of pending patch entries."""
        return len(self._patch)

    def write(self, path: str, value: typ.Any) -> None:
        """Record ``value`` at ``path`` and persist the patch.

        The entry is keyed by its literal path. Entries below ``path`` are
        dropped because the new value replaces that whole subtree, and the
        entry moves to the end of the patch so it is overlaid last. Writing
        ``sections`` also replaces the working section collection when the
        value is a valid section list.
        """
        if not path:
            return
        if path == SECTIONS_NAMESPACE:
            try:
                self._sections = build_sections(copy.deepcopy(value))
            except SiteConfigError as exc:
                logger.warning("Keeping invalid section list as a raw edit: %s", exc)
        prefix = f"{path}."
        patch = {
            key: existing
            for key, existing in self._patch.items()
            if key != path and not key.startswith(prefix)
        }
        patch[path] = copy.deepcopy(value)
        self._patch = patch
        self._persist()

    def read(self, path: str) -> typ.Any:
        """Return the effective value at ``path``, or None when it is absent.

        A pending entry at exactly ``path`` is returned as written unless a
        later edit below it exists. Otherwise pending entries are overlaid on
        the baseline in write order, so an edit below a previously written
        subtree shows through reads of that subtree.
        """
        tokens = split_path(path)
        if not tokens:
            return None
        prefix = f"{path}."
        if path in self._patch and not any(
            key.startswith(prefix) for key in self._patch
        ):
            return copy.deepcopy(self._patch[path])
        if tokens[0] == SECTIONS_NAMESPACE:
            value = self._read_section_path(tokens[1:])
        else:
            value = get_path(self._merged_site(), path)
        if value is None and path in self._patch:
            value = self._patch[path]
        return copy.deepcopy(value)

    def is_editable(self, path: str) -> bool:
        """Return True when the schema marks the field at ``path`` editable."""
        return self.resolver.is_editable(path, self.section_schema_ids())

    def section_schema_ids(self) -> dict[str, str]:
        """Map each working section id to the schema id of its type."""
        ids: dict[str, str] = {}
        for section in self._sections:
            entry = self.schema.get_section_type(section.type)
            if entry is not None:
                ids[section.id] = entry.schema_id
        return ids

    def list_sections(self) -> list[Section]:
        """Return the working sections with pending section edits applied."""
        return [self._merged(section) for section in self._sections]

    def get_section(self, section_id: str) -> Section | None:
        """Return one merged section, or None when no such section exists."""
        for section in self._sections:
            if section.id == section_id:
                return self._merged(section)
        return None

    def replace_sections(self, new_sections: list[Section]) -> None:
        """Swap in a new working collection and record it in the patch."""
        self.write(
            SECTIONS_NAMESPACE, [section.as_dict() for section in new_sections]
        )

    def merged_document(self) -> dict[str, typ.Any]:
        """Return the baseline with every pending edit applied."""
        document = self._merged_site()
        document["sections"] = [section.as_dict() for section in self.list_sections()]
        return document

    def discard(self) -> None:
        """Drop every pending edit and restore the baseline sections."""
        self._patch = {}
        self._sections = _copy_sections(self.baseline.sections)
        self._forget()

    def publish(self) -> PublishResult:
        """Send the merged document to the backend and promote it to baseline.

        Any exception raised by the backend is logged and reported in the
        result; the patch is kept so the operator can retry.
        """
        document = self.merged_document()
        published_fields = len(self._patch)
        if self.backend is not None:
            try:
                self.backend.publish(copy.deepcopy(document), self.patch)
            except PublishError as exc:
                logger.error("Publishing %s failed: %s", self.draft_key, exc)
                return PublishResult(ok=False, error=str(exc))
            except Exception as exc:
                logger.exception("Publish backend crashed for %s", self.draft_key)
                return PublishResult(ok=False, error=str(exc) or type(exc).__name__)
        self.baseline = SiteData(
            site=document["site"],
            features=document["features"],
            sections=self.list_sections(),
        )
        self.discard()
        logger.info(
            "Published %d pending edit(s) for %s", published_fields, self.draft_key
        )
        return PublishResult(ok=True, published_fields=published_fields)

    def restore(self) -> bool:
        """Reload a draft saved by an earlier session from the cache.

        Returns
        -------
        bool
            True when a non-empty draft was restored.
        """
        if self.cache is None:
            return False
        try:
            loaded = self.cache.load(self.draft_key)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not restore draft %s: %s", self.draft_key, exc)
            return False
        if not loaded:
            return False
        patch = dict(loaded)
        if SECTIONS_NAMESPACE in patch:
            try:
                self._sections = build_sections(patch[SECTIONS_NAMESPACE])
            except SiteConfigError as exc:
                logger.warning("Dropping cached section list: %s", exc)
                del patch[SECTIONS_NAMESPACE]
        self._patch = patch
        return bool(patch)

    # Section collection operations
    def add_section(self, section_type: str, position: int | None = None) -> Section | None:
        """Add a section of ``section_type``; see :func:`sections.add_section`."""
        return sections.add_section(self, section_type, position)

    def remove_section(self, section_id: str) -> bool:
        """Remove the section with ``section_id``; see :func:`sections.remove_section`."""
        return sections.remove_section(self, section_id)

    def available_section_types(
        self, page_type: str | None = None
    ) -> dict[str, sections.SectionTypeStatus]:
        """Return picker entries with added/can-add status."""
        return sections.available_section_types(self, page_type)

    # Array item operations
    def add_item(self, array_path: str) -> bool:
        """Append a default item to the array at ``array_path``."""
        return arrays.add_item(self, array_path)

    def can_add_item(self, array_path: str) -> bool:
        """Return True while the array at ``array_path`` is below its cap."""
        return arrays.can_add_item(self, array_path)

    def remove_item(self, array_path: str, index: int) -> bool:
        """Remove the item at ``index`` from the array at ``array_path``."""
        return arrays.remove_item(self, array_path, index)

    def move_item(self, array_path: str, from_index: int, to_index: int) -> bool:
        """Move an item of the array at ``array_path`` to a new index."""
        return arrays.move_item(self, array_path, from_index, to_index)

    def _read_section_path(self, tokens: list[str]) -> typ.Any:
        if not tokens:
            return [section.as_dict() for section in self.list_sections()]
        section = self.get_section(tokens[0])
        if section is None:
            return None
        if len(tokens) == 1:
            return section.as_dict()
        return get_path(section.data, ".".join(tokens[1:]))

    def _merged_site(self) -> dict[str, typ.Any]:
        """Return site fields and feature flags with pending edits applied."""
        document: dict[str, typ.Any] = {
            "site": copy.deepcopy(self.baseline.site),
            "features": copy.deepcopy(self.baseline.features),
        }
        for path, value in self._patch.items():
            if path == SECTIONS_NAMESPACE or path.startswith(_SECTION_PREFIX):
                continue
            try:
                set_path(document, path, copy.deepcopy(value))
            except PathError as exc:
                logger.debug("Skipping unmergeable edit %s: %s", path, exc)
        return document

    def _merged(self, section: Section) -> Section:
        whole = f"{_SECTION_PREFIX}{section.id}"
        prefix = f"{whole}."
        merged = dc.replace(section, data=copy.deepcopy(section.data))
        for path, value in self._patch.items():
            if path == whole:
                _merge_section_entry(merged, value)
                continue
            if not path.startswith(prefix):
                continue
            try:
                set_path(merged.data, path[len(prefix) :], copy.deepcopy(value))
            except PathError as exc:
                logger.debug("Skipping stale edit %s: %s", path, exc)
        return merged

    def _persist(self) -> None:
        if self.cache is None:
            return
        try:
            self.cache.save(self.draft_key, self._patch)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not cache draft %s: %s", self.draft_key, exc)

    def _forget(self) -> None:
        if self.cache is None:
            return
        try:
            self.cache.remove(self.draft_key)
        except OSError as exc:
            logger.warning("Could not clear draft %s: %s", self.draft_key, exc)


def _copy_sections(source: list[Section]) -> list[Section]:
    return [dc.replace(section, data=copy.deepcopy(section.data)) for section in source]


def _merge_section_entry(section: Section, value: typ.Any) -> None:
    """Apply a whole-section edit such as ``{"data": {...}, "enabled": False}``.

    ``data`` is merged key by key into the section data. ``enabled`` and
    ``order`` replace the section flags when they have the right type. The
    section id and type never change.
    """
    if not isinstance(value, cabc.Mapping):
        logger.debug("Skipping non-mapping edit for section %s", section.id)
        return
    data = value.get("data")
    if isinstance(data, cabc.Mapping):
        merge_into(section.data, data)
    enabled = value.get("enabled")
    if isinstance(enabled, bool):
        section.enabled = enabled
    order = value.get("order")
    if isinstance(order, int | float) and not isinstance(order, bool):
        section.order = order


__all__ = ["EditStateStore"]
