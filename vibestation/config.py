"""Transform configuration records and the errors raised while building or running them."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


class ConfigError(ValueError):
    """Raised when a configuration cannot be loaded or is incomplete."""


class TransformError(RuntimeError):
    """Raised when a transform cannot be built or fails on a message."""


@dataclass
class TransformConfig:
    """Template for building a transform: its type name and its settings."""

    type: str
    settings: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        settings = json.dumps(
            self.settings, separators=(",", ":"), ensure_ascii=False, sort_keys=True, default=str
        )
        return f'{{"type":{json.dumps(self.type, ensure_ascii=False)},"settings":{settings}}}'