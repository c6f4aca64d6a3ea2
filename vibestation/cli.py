"""Command line entry point: load a configuration and run an input file through it."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

from vibestation.app import Vibestation
from vibestation.config import ConfigError, TransformConfig, TransformError
from vibestation.jsonpath import PathError
from vibestation.message import Message
from vibestation.sublang import Parser, SublangError

_DETECT_BYTES = 1024


def configs_from_script(text: str) -> list[TransformConfig]:
    """Parse a SUB script into transform configurations."""
    configs: list[TransformConfig] = []
    for item in Parser().parse(text):
        kind = item.get("type")
        if not isinstance(kind, str):
            raise ConfigError("transform missing type field")
        settings: dict[str, Any] = {
            key: value for key, value in item.items() if key not in ("type", "id")
        }
        if isinstance(item.get("id"), str):
            settings["id"] = item["id"]
        configs.append(TransformConfig(kind, settings))
    return configs


def _load_yaml(text: str) -> list[TransformConfig]:
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse YAML config: {exc}") from exc
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ConfigError("failed to parse YAML config: top level must be a mapping")
    script = document.get("transforms")
    if script is None:
        script = ""
    if not isinstance(script, str):
        raise ConfigError("failed to parse YAML config: 'transforms' must be a string")
    try:
        return configs_from_script(script)
    except SublangError as exc:
        raise ConfigError(f"failed to parse SUB script in YAML: {exc}") from exc


def _load_sub(text: str) -> list[TransformConfig]:
    try:
        return configs_from_script(text)
    except SublangError as exc:
        raise ConfigError(f"failed to parse SUB config: {exc}") from exc


def load_config(path: str | Path) -> list[TransformConfig]:
    """Load transforms from a YAML (``.yaml``/``.yml``) or SUB (``.sub``) file.

    Files with other extensions are recognised from their first bytes.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ConfigError(f"failed to open config file: {exc}") from exc
    text = raw.decode("utf-8", errors="replace")

    ext = path.suffix.lower()
    if ext in (".yaml", ".yml"):
        return _load_yaml(text)
    if ext == ".sub":
        return _load_sub(text)

    if not raw:
        raise ConfigError("failed to read config file: EOF")
    head = raw[:_DETECT_BYTES].decode("utf-8", errors="replace")
    if "transforms:" in head and "|" in head:
        return _load_yaml(text)
    if "(" in head or "=" in head:
        return _load_sub(text)
    raise ConfigError("unable to detect configuration format")


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Run the input file through the configured pipeline; return the exit status."""
    parser = argparse.ArgumentParser(prog="vibestation")
    parser.add_argument(
        "-config", "--config", dest="config", default="", help="Configuration file (YAML or SUB)"
    )
    parser.add_argument(
        "-input", "--input", dest="input", default="", help="Input file to process"
    )
    args = parser.parse_args(argv)

    if not args.config:
        return _fail("Please provide a configuration file with -config flag")
    if not args.input:
        return _fail("Please provide an input file with -input flag")

    try:
        configs = load_config(args.config)
    except ConfigError as exc:
        return _fail(f"Error loading configuration file: {exc}")

    try:
        data = Path(args.input).read_bytes()
    except OSError as exc:
        return _fail(f"Error reading input file: {exc}")

    try:
        vibe = Vibestation(configs)
    except (ConfigError, TransformError) as exc:
        return _fail(f"Error creating vibestation: {exc}")

    try:
        results = vibe.transform(Message(data))
    except (TransformError, PathError) as exc:
        return _fail(f"Error processing message: {exc}")

    print(f"Processed {len(results)} messages")
    return 0


if __name__ == "__main__":
    sys.exit(main())