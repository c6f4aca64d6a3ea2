"""Transforms that decode message content: base64 and gzip."""

from __future__ import annotations

import base64
import binascii
import gzip
import json
import zlib
from collections.abc import Mapping
from typing import Any

from vibestation.config import TransformError
from vibestation.jsonpath import PathError
from vibestation.message import Message


def decode_base64(data: bytes) -> bytes:
    """Decode standard, padded base64 text; surrounding whitespace is ignored."""
    if not data:
        return data
    text = bytes(data).strip()
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise TransformError(f"base64 decode error: {exc}") from exc


def decompress_gzip(data: bytes) -> bytes:
    """Decompress gzip data; empty input is returned unchanged."""
    if not data:
        return data
    try:
        return gzip.decompress(bytes(data))
    except (OSError, EOFError, zlib.error) as exc:
        raise TransformError(str(exc)) from exc


def _setting_str(settings: Mapping[str, Any], key: str) -> str:
    value = settings.get(key)
    return value if isinstance(value, str) else ""


class _DecodingTransform:
    """Reads input from ``source`` (or the message data), decodes it and stores the result."""

    default_id = ""

    def __init__(self, settings: Mapping[str, Any] | None = None) -> None:
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

    def _decode(self, data: bytes) -> bytes:
        raise NotImplementedError

    def _input(self, msg: Message) -> bytes:
        if self.source:
            value = msg.get_value(self.source)
            if value.exists:
                found = value.as_bytes()
                if found is not None:
                    return found
        return msg.data

    def transform(self, msg: Message) -> list[Message]:
        """Decode the input and write it to the target path or the message data."""
        if msg.is_control:
            return [msg]

        try:
            decoded = self._decode(self._input(msg))
        except TransformError as exc:
            raise TransformError(f"transform {self.id}: {exc}") from exc

        if self.target:
            try:
                msg.set_value(self.target, decoded.decode("utf-8", errors="replace"))
            except PathError as exc:
                raise TransformError(
                    f"transform {self.id}: failed to set target: {exc}"
                ) from exc
        else:
            msg.data = decoded
        return [msg]

    def __str__(self) -> str:
        return json.dumps({"id": self.id}, separators=(",", ":"), ensure_ascii=False)


class DecodeBase64(_DecodingTransform):
    """Decodes base64 text from the source path or the message data."""

    default_id = "decode_base64"

    def __init__(self, settings: Mapping[str, Any] | None = None) -> None:
        super().__init__(settings)

    def _decode(self, data: bytes) -> bytes:
        return decode_base64(data)

    def transform(self, msg: Message) -> list[Message]:
        """Decode base64 input and store the result."""
        return super().transform(msg)

    def __str__(self) -> str:
        return super().__str__()


class DecompressGzip(_DecodingTransform):
    """Decompresses gzip data from the source path or the message data."""

    default_id = "decompress_gzip"

    def __init__(self, settings: Mapping[str, Any] | None = None) -> None:
        super().__init__(settings)

    def _decode(self, data: bytes) -> bytes:
        return decompress_gzip(data)

    def transform(self, msg: Message) -> list[Message]:
        """Decompress gzip input and store the result."""
        return super().transform(msg)

    def __str__(self) -> str:
        return super().__str__()