"""Load site schema and baseline data from YAML or JSON into dataclasses."""

from __future__ import annotations

import collections.abc as cabc
import copy
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .._constants import ORDER_STEP
from .helpers import _optional_str, _require_mapping
from .models import Section, SiteConfig, SiteConfigError, SiteData, SiteSchema
from .schema import _build_site_schema


def load_site_config(path: Path) -> SiteConfig:
    """Load the document describing the site schema and its baseline content.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML (or JSON) configuration file, for example
        ``config/site.yaml``.

    Returns
    -------
    SiteConfig
        Parsed schema, baseline site data, and the optional site identifier.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level document is not a mapping.
    SiteConfigError
        If the schema or data block is invalid (unknown field types, duplicate
        section ids, repeated singleton sections and so on).
    YAMLError
        If the content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from pagecraft.config import load_site_config
    >>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> [section.id for section in config.data.sections][:1]  # doctest: +SKIP
    ['hero-main']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    return parse_site_config(loaded, source=path)


def parse_site_config(
    payload: cabc.Mapping[str, typ.Any], *, source: Path | None = None
) -> SiteConfig:
    """Build a :class:`SiteConfig` from an already-deserialized mapping."""
    schema = _build_site_schema(_require_mapping(payload.get("schema"), where="schema"))
    data = _build_site_data(
        _require_mapping(payload.get("data"), where="data"), schema=schema
    )
    return SiteConfig(
        schema=schema,
        data=data,
        site_id=_optional_str(payload.get("site_id")),
        source=source,
    )


def build_sections(entries: object) -> list[Section]:
    """Build section instances from a list of mappings.

    Raises
    ------
    SiteConfigError
        If an entry is not a mapping, lacks ``id`` or ``type``, or repeats an
        id already used earlier in the list.
    """
    if entries is None:
        return []
    if not isinstance(entries, list):
        msg = "'sections' must be a list."
        raise SiteConfigError(msg)
    sections: list[Section] = []
    seen: set[str] = set()
    for position, entry in enumerate(entries):
        section = _build_section(entry, position=position)
        if section.id in seen:
            msg = f"Duplicate section id '{section.id}'."
            raise SiteConfigError(msg)
        seen.add(section.id)
        sections.append(section)
    return sections


def _build_section(entry: object, *, position: int) -> Section:
    """Build one section from its mapping payload."""
    match entry:
        case {"id": section_id, "type": section_type, **rest}:
            pass
        case _:
            msg = f"Section #{position} requires 'id' and 'type'."
            raise SiteConfigError(msg)
    if not section_id or not section_type:
        msg = f"Section #{position} requires a non-empty 'id' and 'type'."
        raise SiteConfigError(msg)
    order = rest.get("order", (position + 1) * ORDER_STEP)
    if isinstance(order, bool) or not isinstance(order, int | float):
        msg = f"Section '{section_id}' order must be a number."
        raise SiteConfigError(msg)
    data = _require_mapping(rest.get("data"), where=f"sections.{section_id}.data")
    return Section(
        id=str(section_id),
        type=str(section_type),
        enabled=rest.get("enabled", True) is not False,
        order=order,
        data=copy.deepcopy(dict(data)),
    )


def _build_site_data(
    payload: cabc.Mapping[str, typ.Any], *, schema: SiteSchema
) -> SiteData:
    """Build the baseline site data, enforcing singleton exclusivity."""
    sections = build_sections(payload.get("sections"))
    seen_types: set[str] = set()
    for section in sections:
        entry = schema.get_section_type(section.type)
        if entry is None or not entry.singleton:
            continue
        if section.type in seen_types:
            msg = f"Singleton section type '{section.type}' appears more than once."
            raise SiteConfigError(msg)
        seen_types.add(section.type)
    return SiteData(
        site=copy.deepcopy(dict(_require_mapping(payload.get("site"), where="data.site"))),
        features=copy.deepcopy(
            dict(_require_mapping(payload.get("features"), where="data.features"))
        ),
        sections=sections,
    )


__all__ = ["build_sections", "load_site_config", "parse_site_config"]
