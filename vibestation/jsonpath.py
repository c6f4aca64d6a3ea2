"""Dotted JSON paths (``$.a.b``, ``$.arr[0]``, ``meta.$.x``) over JSON documents."""

from __future__ import annotations

import json
import re
from typing import Any

_INDEX_RE = re.compile(r"[+-]?[0-9]+")

_DATA_PREFIX = "$."
_META_PREFIX = "meta.$."
_ROOTS = ("", "$", "meta.$")


class PathError(ValueError):
    """Raised when a path cannot be resolved, or a document cannot be read or written."""


def _index(part: str) -> int | None:
    """Return ``part`` as an integer index, or None if it is not one."""
    if _INDEX_RE.fullmatch(part):
        return int(part)
    return None


def _split_path(path: str) -> tuple[str, ...]:
    path = path.strip()
    if path in _ROOTS:
        return ()
    if path.startswith(_DATA_PREFIX):
        path = path[len(_DATA_PREFIX):]
    elif path.startswith(_META_PREFIX):
        path = path[len(_META_PREFIX):]
    else:
        return ()

    parts: list[str] = []
    for part in path.split("."):
        while part:
            open_idx = part.find("[")
            if open_idx < 0:
                parts.append(part)
                break
            if open_idx > 0:
                parts.append(part[:open_idx])
            close_idx = part.find("]")
            if close_idx > open_idx:
                parts.append(part[open_idx + 1:close_idx])
                part = part[close_idx + 1:]
            else:
                # Malformed bracket: keep the remainder as a literal key.
                parts.append(part)
                break
    return tuple(parts)


def _decode(data: bytes | str) -> Any:
    try:
        return json.loads(data)
    except ValueError as exc:
        raise PathError(f"invalid JSON: {exc}") from exc


def _encode(obj: Any) -> bytes:
    try:
        text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError) as exc:
        raise PathError(f"cannot encode value as JSON: {exc}") from exc
    return text.encode("utf-8")


def _get(obj: Any, parts: tuple[str, ...]) -> Any:
    current = obj
    for depth, part in enumerate(parts, start=1):
        where = ".".join(parts[:depth])
        if isinstance(current, dict):
            if part not in current:
                raise PathError(f"key '{part}' not found at path '{where}'")
            current = current[part]
        elif isinstance(current, list):
            idx = _index(part)
            if idx is None or not 0 <= idx < len(current):
                raise PathError(f"invalid array index '{part}' at path '{where}'")
            current = current[idx]
        else:
            raise PathError(
                f"cannot access key '{part}' in non-object/non-array at path '{where}'"
            )
    return current


def _set(obj: Any, parts: tuple[str, ...], value: Any) -> Any:
    if not parts:
        return value
    if obj is None:
        obj = {}

    if len(parts) == 1:
        if not isinstance(obj, dict):
            raise PathError(f"cannot set key '{parts[0]}' in non-object")
        obj[parts[0]] = value
        return obj

    parent_parts = parts[:-1]
    try:
        parent = _get(obj, parent_parts)
    except PathError:
        obj = _set(obj, parent_parts, {})
        parent = _get(obj, parent_parts)

    key = parts[-1]
    if isinstance(parent, dict):
        parent[key] = value
    elif isinstance(parent, list):
        idx = _index(key)
        if idx is None or idx < 0:
            raise PathError(f"invalid array index '{key}'")
        if len(parent) <= idx:
            parent.extend([None] * (idx + 1 - len(parent)))
        parent[idx] = value
    else:
        raise PathError(f"cannot set key '{key}' in non-object/non-array")
    return obj


def _delete(obj: Any, parts: tuple[str, ...]) -> Any:
    if not parts:
        return obj

    if len(parts) == 1:
        if not isinstance(obj, dict):
            raise PathError(f"cannot delete key '{parts[0]}' from non-object")
        obj.pop(parts[0], None)
        return obj

    try:
        parent = _get(obj, parts[:-1])
    except PathError:
        return obj

    key = parts[-1]
    if isinstance(parent, dict):
        parent.pop(key, None)
    elif isinstance(parent, list):
        idx = _index(key)
        if idx is not None and 0 <= idx < len(parent):
            # Null the slot rather than shifting the remaining elements.
            parent[idx] = None
    return obj


class JSONPath:
    """A parsed path into a JSON document.

    Paths start with ``$.`` (or ``meta.$.``); ``$``, ``meta.$`` and the empty
    string denote the document root. Any other string also resolves to the root.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._parts = _split_path(path)

    @property
    def parts(self) -> tuple[str, ...]:
        """The keys and indices the path walks through."""
        return self._parts

    def __repr__(self) -> str:
        return f"JSONPath({self.path!r})"

    def get(self, data: bytes | str) -> Any:
        """Return the value at this path, or None for an empty document."""
        if not data:
            return None
        return _get(_decode(data), self._parts)

    def set(self, data: bytes | str, value: Any) -> bytes:
        """Return the document with ``value`` stored at this path, creating objects as needed."""
        if not data:
            data = b"{}"
        return _encode(_set(_decode(data), self._parts, value))

    def delete(self, data: bytes | str) -> bytes | str:
        """Return the document with the value at this path removed."""
        if not data:
            return data
        return _encode(_delete(_decode(data), self._parts))