"""Durable local storage for pending edit patches.

Each cache call is a best-effort attempt: a failure to read, write, or remove
a draft is logged and otherwise ignored, so the in-memory patch held by the
store stays authoritative when storage is missing or broken.

Examples
--------
>>> cache = MemoryDraftCache()
>>> cache.save("preview-demo", {"site.brand": "Summit"})
>>> cache.load("preview-demo")
{'site.brand': 'Summit'}
"""

from __future__ import annotations

import copy
import json
import logging
import typing as typ

from ._constants import DEFAULT_SITE_ID, DRAFT_KEY_TEMPLATE

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def draft_key_for(site_id: str | None) -> str:
    """Return the cache key for the pending edits of ``site_id``."""
    return DRAFT_KEY_TEMPLATE.format(site=site_id or DEFAULT_SITE_ID)


class DraftCache(typ.Protocol):
    """Keyed storage for serialized edit patches."""

    def load(self, key: str) -> dict[str, typ.Any] | None:
        """Return the stored patch for ``key`` or None."""
        ...

    def save(self, key: str, patch: typ.Mapping[str, typ.Any]) -> None:
        """Store ``patch`` under ``key``, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Forget the patch stored under ``key``."""
        ...


class MemoryDraftCache:
    """Process-local draft cache, handy for tests and embedding."""

    def __init__(self) -> None:
        self.entries: dict[str, dict[str, typ.Any]] = {}

    def load(self, key: str) -> dict[str, typ.Any] | None:
        entry = self.entries.get(key)
        return copy.deepcopy(entry) if entry is not None else None

    def save(self, key: str, patch: typ.Mapping[str, typ.Any]) -> None:
        self.entries[key] = copy.deepcopy(dict(patch))

    def remove(self, key: str) -> None:
        self.entries.pop(key, None)


class FileDraftCache:
    """Store each draft as ``<directory>/<key>.json``."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> dict[str, typ.Any] | None:
        path = self._path_for(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Could not read draft %s: %s", path, exc)
            return None
        try:
            loaded = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring corrupt draft %s: %s", path, exc)
            return None
        if not isinstance(loaded, dict):
            logger.warning("Ignoring draft %s: top level is not an object", path)
            return None
        return loaded

    def save(self, key: str, patch: typ.Mapping[str, typ.Any]) -> None:
        path = self._path_for(key)
        try:
            payload = json.dumps(dict(patch), indent=2, sort_keys=True)
        except (TypeError, ValueError) as exc:
            logger.warning("Draft for %s is not serializable: %s", key, exc)
            return
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload + "\n", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write draft %s: %s", path, exc)

    def remove(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove draft %s: %s", path, exc)


__all__ = ["DraftCache", "FileDraftCache", "MemoryDraftCache", "draft_key_for"]
