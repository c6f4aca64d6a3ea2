"""Transform that writes message content to standard output."""

from __future__ import annotations

import json
import sys
import threading
from collections.abc import Mapping
from typing import Any, TextIO

from vibestation.config import TransformError
from vibestation.jsonpath import PathError
from vibestation.message import Message


def _setting_str(settings: Mapping[str, Any], key: str) -> str:
    value = settings.get(key)
    return value if isinstance(value, str) else ""


class SendStdout:
    """Prints the source value (or the message data) as a line; messages pass through."""

    default_id = "send_stdout"

    def __init__(
        self, settings: Mapping[str, Any] | None = None, stream: TextIO | None = None
    ) -> None:
        settings = dict(settings or {})
        raw_id = settings.get("id")
        if raw_id is not None and not isinstance(raw_id, str):
            raise TransformError(
                f"transform {self.default_id}: setting 'id' must be a string, "
                f"got {type(raw_id).__name__}"
            )
        self.id = raw_id or self.default_id
        self.settings = settings
        self.source = _setting_str(settings, "source")
        self.target = _setting_str(settings, "target")
        self._stream = stream
        self._lock = threading.Lock()

    def _input(self, msg: Message) -> bytes:
        if self.source:
            value = msg.get_value(self.source)
            if value.exists:
                found = value.as_bytes()
                if found is not None:
                    return found
        return msg.data

    def transform(self, msg: Message) -> list[Message]:
        """Write the input to the stream, optionally storing it at the target path."""
        with self._lock:
            if msg.is_control:
                return [msg]

            text = self._input(msg).decode("utf-8", errors="replace")
            if self.target:
                try:
                    msg.set_value(self.target, text)
                except PathError as exc:
                    raise TransformError(
                        f"transform {self.id}: failed to set target: {exc}"
                    ) from exc

            stream = self._stream if self._stream is not None else sys.stdout
            stream.write(text + "\n")
            return [msg]

    def __str__(self) -> str:
        return json.dumps({"id": self.id}, separators=(",", ":"), ensure_ascii=False)