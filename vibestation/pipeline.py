"""Building transforms from configuration and running messages through them."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

from vibestation.config import TransformConfig, TransformError
from vibestation.decoders import DecodeBase64, DecompressGzip
from vibestation.fields import DirectAssign, DirectDelete
from vibestation.message import Message
from vibestation.output import SendStdout


@runtime_checkable
class Transformer(Protocol):
    """Anything that turns one message into zero or more messages."""

    def transform(self, msg: Message) -> list[Message]:
        """Transform ``msg`` and return the resulting messages."""


def _setting_str(settings: dict[str, Any], key: str) -> str:
    value = settings.get(key)
    return value if isinstance(value, str) else ""


def create_transform(config: TransformConfig) -> Transformer:
    """Build the transform named by ``config.type``; raise TransformError if it is unknown."""
    settings = config.settings or {}
    kind = config.type
    if kind == "decompress_gzip":
        return DecompressGzip(settings)
    if kind == "send_stdout":
        return SendStdout(settings)
    if kind == "decode_base64":
        return DecodeBase64(settings)
    if kind == "assign":
        return DirectAssign(_setting_str(settings, "source"), _setting_str(settings, "target"))
    if kind == "direct_delete":
        return DirectDelete(_setting_str(settings, "path"), _setting_str(settings, "target"))
    if kind == "delete":
        return DirectDelete(_setting_str(settings, "source"), _setting_str(settings, "target"))
    raise TransformError(f"transform {kind}: unsupported transform type")


def apply(transforms: Sequence[Transformer], messages: Iterable[Message]) -> list[Message]:
    """Run every message through each transform in order.

    The output of one transform is the input of the next. The first error
    raised by a transform stops the run and propagates.
    """
    results = list(messages)
    for tf in transforms:
        if not results:
            break
        results = [out for msg in results for out in tf.transform(msg)]
    return results