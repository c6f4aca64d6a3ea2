"""The pipeline object: a configured list of transforms applied to messages."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from vibestation.config import ConfigError, TransformConfig
from vibestation.message import Message
from vibestation.pipeline import Transformer, apply, create_transform

Factory = Callable[[TransformConfig], Transformer]


class NoTransformsError(ConfigError):
    """Raised when a pipeline is created without any transforms."""


class Vibestation:
    """Runs configured transforms over messages."""

    def __init__(
        self,
        transforms: Sequence[TransformConfig] | None,
        factory: Factory | None = None,
    ) -> None:
        if not transforms:
            raise NoTransformsError("no transforms configured")
        self._configs = list(transforms)
        self._factory = factory or create_transform
        self._transforms = [self._factory(config) for config in self._configs]

    def transform(self, *args: Message) -> list[Message]:
        """Run the given messages through every transform and return the results."""
        return apply(self._transforms, args)

    def __str__(self) -> str:
        return '{"transforms":[' + ",".join(str(c) for c in self._configs) + "]}"