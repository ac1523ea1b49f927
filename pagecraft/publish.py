"""Publish backends that persist a site's merged content.

The edit-state store hands a backend the fully merged site document together
with the patch that produced it. A backend either persists the document or
raises :class:`PublishError`; the store treats that exception as the only
failure signal and keeps the patch so the operator can retry.

Example
-------
.. code-block:: python

    from pathlib import Path
    from pagecraft.publish import YamlPublishBackend

    backend = YamlPublishBackend(Path("config/site.yaml"))
    backend.publish(document, patch)
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

if typ.TYPE_CHECKING:
    from pathlib import Path


class PublishError(RuntimeError):
    """Raised when a backend cannot persist published content."""


@dc.dataclass(slots=True, frozen=True)
class PublishResult:
    """Outcome of a publish attempt, reported to the presentation layer."""

    ok: bool
    published_fields: int = 0
    error: str | None = None


class PublishBackend(typ.Protocol):
    """Durable storage for published site content."""

    def publish(
        self, document: dict[str, typ.Any], patch: dict[str, typ.Any]
    ) -> None:
        """Persist ``document``; raise :class:`PublishError` on failure."""
        ...


class YamlPublishBackend:
    """Write the published document back into the ``data`` block of a config.

    The rest of the file (schema, comments, key order) is preserved by using
    ruamel's round-trip mode.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path

    def publish(
        self, document: dict[str, typ.Any], patch: dict[str, typ.Any]
    ) -> None:
        yaml = _build_roundtrip_yaml()
        try:
            with self.config_path.open("r", encoding="utf-8") as handle:
                loaded = yaml.load(handle) or CommentedMap()
        except (OSError, YAMLError) as exc:
            msg = f"Could not read '{self.config_path}': {exc}"
            raise PublishError(msg) from exc
        if not isinstance(loaded, CommentedMap):
            msg = "Top-level configuration must be a mapping"
            raise PublishError(msg)

        loaded["data"] = document
        try:
            with self.config_path.open("w", encoding="utf-8") as handle:
                yaml.dump(loaded, handle)
        except (OSError, YAMLError) as exc:
            msg = f"Could not write '{self.config_path}': {exc}"
            raise PublishError(msg) from exc


def _build_roundtrip_yaml() -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 120
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


__all__ = ["PublishBackend", "PublishError", "PublishResult", "YamlPublishBackend"]
