"""Utility helpers shared by the pagecraft configuration loader."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from .models import SiteConfigError


def _pick(payload: cabc.Mapping[str, typ.Any], *keys: str, default: typ.Any = None) -> typ.Any:
    """Return the value of the first key present in ``payload``.

    Lets configuration authors use either the camelCase keys of the JSON
    export or snake_case keys in hand-written YAML.
    """
    for key in keys:
        if key in payload:
            return payload[key]
    return default


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_int(value: object | None, *, where: str) -> int | None:
    """Return ``value`` as a non-negative int, or None when unset."""
    match value:
        case None:
            return None
        case bool():
            pass
        case int() if value >= 0:
            return value
    msg = f"'{where}' must be a non-negative integer, got {value!r}."
    raise SiteConfigError(msg)


def _require_mapping(value: object, *, where: str) -> cabc.Mapping[str, typ.Any]:
    """Return ``value`` when it is a mapping, treating None as empty."""
    if value is None:
        return {}
    if not isinstance(value, cabc.Mapping):
        msg = f"'{where}' must be a mapping."
        raise SiteConfigError(msg)
    return value


def _is_field_payload(value: object) -> bool:
    """Return True for a field schema mapping (one that declares ``type``)."""
    return isinstance(value, cabc.Mapping) and "type" in value


__all__ = [
    "_is_field_payload",
    "_optional_int",
    "_optional_str",
    "_pick",
    "_require_mapping",
]
