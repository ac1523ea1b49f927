"""Dot-path access over nested mappings and lists.

Paths such as ``sections.services.items.2.price`` address values inside the
site document. Segments are mapping keys, or list indices when the current
node is a list and the segment is a decimal integer.

Examples
--------
>>> doc = set_path({}, "site.brand", "Summit Books")
>>> get_path(doc, "site.brand")
'Summit Books'
>>> get_path(doc, "site.city") is None
True
"""

from __future__ import annotations

import collections.abc as cabc
import copy
import typing as typ


class PathError(LookupError):
    """Raised when a value cannot be stored at the requested path."""


def split_path(path: str) -> list[str]:
    """Return the segments of ``path``; an empty path has no segments."""
    if not path:
        return []
    return path.split(".")


def is_index(token: str) -> bool:
    """Return True when ``token`` reads as a non-negative list index."""
    return token.isascii() and token.isdigit()


def _child(node: object, token: str) -> object | None:
    match node:
        case cabc.Mapping():
            return node.get(token)
        case list() if is_index(token):
            index = int(token)
            return node[index] if index < len(node) else None
        case _:
            return None


def get_path(root: object, path: str, default: typ.Any = None) -> typ.Any:
    """Return the value at ``path`` or ``default`` when any segment is missing.

    Missing keys, out-of-range indices and scalar intermediates all resolve to
    ``default``; this function never raises for a malformed path.
    """
    tokens = split_path(path)
    if not tokens:
        return default
    node: object | None = root
    for token in tokens:
        node = _child(node, token)
        if node is None:
            return default
    return node


def set_path(root: typ.Any, path: str, value: typ.Any) -> typ.Any:
    """Store ``value`` at ``path`` inside ``root`` and return ``root``.

    Intermediate mappings are created when absent. ``root`` is mutated in
    place; callers that need the previous value copy it first.

    Raises
    ------
    PathError
        If ``path`` is empty, or an intermediate node is a scalar, or a list
        segment is not a valid index for that list.
    """
    tokens = split_path(path)
    if not tokens:
        msg = "Cannot set a value at an empty path."
        raise PathError(msg)
    *parents, last = tokens
    node = root
    for token in parents:
        match node:
            case cabc.MutableMapping():
                if node.get(token) is None:
                    node[token] = {}
                node = node[token]
            case list() if is_index(token) and int(token) < len(node):
                node = node[int(token)]
            case _:
                msg = f"Cannot descend into '{token}' while setting '{path}'."
                raise PathError(msg)
    match node:
        case cabc.MutableMapping():
            node[last] = value
        case list() if is_index(last) and int(last) < len(node):
            node[int(last)] = value
        case list() if is_index(last) and int(last) == len(node):
            node.append(value)
        case _:
            msg = f"Cannot assign '{last}' while setting '{path}'."
            raise PathError(msg)
    return root


def merge_into(
    target: cabc.MutableMapping[str, typ.Any], source: cabc.Mapping[str, typ.Any]
) -> cabc.MutableMapping[str, typ.Any]:
    """Merge ``source`` into ``target`` key by key and return ``target``.

    Nested mappings are merged recursively; any other value (lists included)
    replaces the target value with a copy.
    """
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(value, cabc.Mapping) and isinstance(
            existing, cabc.MutableMapping
        ):
            merge_into(existing, value)
        else:
            target[key] = copy.deepcopy(value)
    return target


__all__ = [
    "PathError",
    "get_path",
    "is_index",
    "merge_into",
    "set_path",
    "split_path",
]
