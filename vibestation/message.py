"""Messages carried through a pipeline, and the values read out of them."""

from __future__ import annotations

import json
import re
from typing import Any

from vibestation.jsonpath import JSONPath, PathError

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

_DATA_ROOT = "$"
_META_ROOT = "meta.$"
_DATA_PREFIX = "$."
_META_PREFIX = "meta.$."


class InvalidPathError(PathError):
    """Raised when a path does not start with ``$``/``$.`` or ``meta.$``/``meta.$.``."""


def is_valid_json_path(path: str) -> bool:
    """Return True if ``path`` addresses message data or metadata."""
    path = path.strip()
    return (
        path in (_DATA_ROOT, _META_ROOT)
        or path.startswith(_DATA_PREFIX)
        or path.startswith(_META_PREFIX)
    )


def _to_bytes(data: bytes | str | None) -> bytes:
    if data is None:
        return b""
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _encode(value: Any) -> bytes:
    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError) as exc:
        raise PathError(f"cannot encode value as JSON: {exc}") from exc
    return text.encode("utf-8")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class Value:
    """A JSON value read from a message, with lenient conversions."""

    __slots__ = ("value", "_found")

    def __init__(self, value: Any = None, exists: bool = False) -> None:
        self.value = value
        self._found = exists

    @property
    def exists(self) -> bool:
        """True if the value was found and is not null."""
        return self._found and self.value is not None

    def __repr__(self) -> str:
        return f"Value({self.value!r}, exists={self._found})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.value == other.value and self._found == other._found

    def __str__(self) -> str:
        value = self.value
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8", errors="replace")
        try:
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False, sort_keys=True)
        except (TypeError, ValueError):
            return str(value)

    def as_bytes(self) -> bytes | None:
        """The value as bytes: strings encoded, everything else as JSON text."""
        value = self.value
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        if isinstance(value, str):
            return value.encode("utf-8")
        return str(self).encode("utf-8")

    def as_int(self) -> int:
        """The value as an integer, or 0 if it has none."""
        value = self.value
        if _is_number(value):
            return int(value)
        if isinstance(value, str) and _INT_RE.fullmatch(value):
            return int(value)
        return 0

    def as_float(self) -> float:
        """The value as a float, or 0.0 if it has none."""
        value = self.value
        if _is_number(value):
            return float(value)
        if isinstance(value, str) and _FLOAT_RE.fullmatch(value):
            return float(value)
        return 0.0

    def as_bool(self) -> bool:
        """The value as a boolean: ``"true"`` and ``"1"`` count as true for strings."""
        value = self.value
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value in ("true", "1")
        if _is_number(value):
            return value != 0
        return False

    def as_list(self) -> list[Value] | None:
        """The value's elements if it is an array, otherwise None."""
        if isinstance(self.value, list):
            return [item if isinstance(item, Value) else Value(item, True) for item in self.value]
        return None

    def as_dict(self) -> dict[str, Value] | None:
        """The value's members if it is an object, otherwise None."""
        if isinstance(self.value, dict):
            return {
                key: item if isinstance(item, Value) else Value(item, True)
                for key, item in self.value.items()
            }
        return None


class Message:
    """Data and metadata handled by transforms.

    Both fields are raw bytes that may hold JSON, accessed with ``$.``
    paths for data and ``meta.$.`` paths for metadata. A control message
    carries no data or metadata and ignores attempts to set them.
    """

    def __init__(self, data: bytes | str = b"", metadata: bytes | str = b"") -> None:
        self._data = _to_bytes(data)
        self._meta = _to_bytes(metadata)
        self._control = False

    def __str__(self) -> str:
        return self._data.decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        if self._control:
            return "Message(control)"
        return f"Message(data={self._data!r}, metadata={self._meta!r})"

    @property
    def is_control(self) -> bool:
        """True for a control message."""
        return self._control

    @property
    def data(self) -> bytes:
        """The message data; empty for a control message."""
        return b"" if self._control else self._data

    @data.setter
    def data(self, value: bytes | str) -> None:
        if not self._control:
            self._data = _to_bytes(value)

    @property
    def metadata(self) -> bytes:
        """The message metadata; empty for a control message."""
        return b"" if self._control else self._meta

    @metadata.setter
    def metadata(self, value: bytes | str) -> None:
        if not self._control:
            self._meta = _to_bytes(value)

    def as_control(self) -> Message:
        """Turn this message into a control message and return it."""
        self._data = b""
        self._meta = b""
        self._control = True
        return self

    def get_value(self, path: str) -> Value:
        """Return the value at ``path``; it does not exist if the path is invalid or missing."""
        path = path.strip()
        if not is_valid_json_path(path):
            return Value(None, False)

        if path in (_DATA_ROOT, _META_ROOT):
            source = self._data if path == _DATA_ROOT else self._meta
            try:
                return Value(json.loads(source), True)
            except ValueError:
                return Value(None, False)

        source = self._meta if path.startswith(_META_PREFIX) else self._data
        try:
            return Value(JSONPath(path).get(source), True)
        except PathError:
            return Value(None, False)

    def set_value(self, path: str, value: Any) -> None:
        """Store ``value`` at ``path``, creating intermediate objects as needed."""
        path = path.strip()
        if not is_valid_json_path(path):
            raise InvalidPathError(f"invalid JSONPath: {path}")

        if path == _DATA_ROOT:
            self._data = _encode(value)
        elif path == _META_ROOT:
            self._meta = _encode(value)
        elif path.startswith(_META_PREFIX):
            self._meta = JSONPath(path).set(self._meta, value)
        else:
            self._data = JSONPath(path).set(self._data, value)

    def delete_value(self, path: str) -> None:
        """Remove the value at ``path``; a root path empties the whole object."""
        path = path.strip()
        if not is_valid_json_path(path):
            raise InvalidPathError(f"invalid JSONPath: {path}")

        if path == _DATA_ROOT:
            self._data = b"{}"
        elif path == _META_ROOT:
            self._meta = b"{}"
        elif path.startswith(_META_PREFIX):
            self._meta = _to_bytes(JSONPath(path).delete(self._meta))
        else:
            self._data = _to_bytes(JSONPath(path).delete(self._data))