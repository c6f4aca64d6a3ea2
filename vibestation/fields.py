"""Transforms that copy and remove fields inside a message."""

from __future__ import annotations

import json

from vibestation.config import TransformError
from vibestation.jsonpath import PathError
from vibestation.message import Message

_DELETED_VALUE = "$.deleted_value"


class DirectAssign:
    """Copies the value at ``source`` to ``target``; ``$`` copies the whole data object."""

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target

    def __repr__(self) -> str:
        return f"DirectAssign(source={self.source!r}, target={self.target!r})"

    def transform(self, msg: Message) -> list[Message]:
        """Copy the value; a missing source leaves the message untouched."""
        if self.source == "$":
            data = msg.data
            if not data:
                return [msg]
            try:
                value = json.loads(data)
            except ValueError as exc:
                raise TransformError(
                    f"direct assign: failed to parse message data as JSON: {exc}"
                ) from exc
        else:
            found = msg.get_value(self.source)
            if not found.exists:
                return [msg]
            value = found.value

        try:
            msg.set_value(self.target, value)
        except PathError as exc:
            raise TransformError(
                f"direct assign: failed to set target {self.target}: {exc}"
            ) from exc
        return [msg]


class DirectDelete:
    """Removes the value at ``path`` and stores it at ``target`` or ``$.deleted_value``."""

    def __init__(self, path: str, target: str = "") -> None:
        self.path = path
        self.target = target

    def __repr__(self) -> str:
        return f"DirectDelete(path={self.path!r}, target={self.target!r})"

    def transform(self, msg: Message) -> list[Message]:
        """Delete the field; a missing field leaves the message untouched."""
        found = msg.get_value(self.path)
        if not found.exists:
            return [msg]
        removed = found.value

        try:
            msg.delete_value(self.path)
        except PathError as exc:
            raise TransformError(
                f"direct delete: failed to delete path {self.path}: {exc}"
            ) from exc

        destination = self.target or _DELETED_VALUE
        try:
            msg.set_value(destination, removed)
        except PathError as exc:
            if self.target:
                raise TransformError(
                    f"direct delete: failed to set target {self.target}: {exc}"
                ) from exc
            raise TransformError(f"delete: failed to store deleted value: {exc}") from exc
        return [msg]