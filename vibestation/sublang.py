"""Parser for the SUB transform language.

A SUB script is one statement per line. Blank lines and lines starting with
``#`` are ignored. A statement is one of:

* a direct assignment, ``$.target = $.source``;
* an assignment from a function, ``$.target = func(args)``;
* a function call, ``func(args)``.

Each statement becomes one or more transform dictionaries holding ``type``,
``id`` and the settings of the transform. Function calls nested inside
arguments are emitted before the call that uses them, and that call then
reads its input from ``$.nested_output``.
"""

from __future__ import annotations

import re
from typing import Any

_BUILTINS = frozenset(
    {
        "split_string",
        "decompress_gzip",
        "send_stdout",
        "decode_base64",
        "lowercase_string",
        "delete",
    }
)

_DEFAULTS: dict[str, dict[str, Any]] = {
    "decompress_gzip": {"id": "decompress_gzip"},
    "split_string": {"separator": "\n", "id": "split_string"},
    "send_stdout": {"id": "send_stdout"},
    "decode_base64": {"id": "decode_base64", "type": "decode_base64"},
    "lowercase_string": {"id": "lowercase_string"},
    "delete": {"id": "delete"},
}

_NESTED_PREFIX = "nested_arg_"
_NESTED_OUTPUT = "$.nested_output"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
}
_HEX_WIDTH = {"x": 2, "u": 4, "U": 8}
_OCTAL = "01234567"
_HEX = set("0123456789abcdefABCDEF")


class SublangError(ValueError):
    """Raised when a SUB script cannot be parsed."""


def _unescape(text: str) -> str:
    """Interpret a quoted literal with C-style escapes; raise ValueError if malformed."""
    quote = text[0]
    body = text[1:-1]
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == quote or ch == "\n":
            raise ValueError("unescaped quote or newline")
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        i += 1
        if i >= len(body):
            raise ValueError("dangling backslash")
        esc = body[i]
        i += 1
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
        elif esc == quote:
            out.append(esc)
        elif esc in _HEX_WIDTH:
            width = _HEX_WIDTH[esc]
            digits = body[i:i + width]
            if len(digits) != width or not set(digits) <= _HEX:
                raise ValueError("bad hex escape")
            i += width
            code = int(digits, 16)
            if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                raise ValueError("bad code point")
            out.append(chr(code))
        elif esc in _OCTAL:
            digits = esc + body[i:i + 2]
            if len(digits) != 3 or any(d not in _OCTAL for d in digits):
                raise ValueError("bad octal escape")
            i += 2
            code = int(digits, 8)
            if code > 0xFF:
                raise ValueError("octal escape out of range")
            out.append(chr(code))
        else:
            raise ValueError(f"unknown escape \\{esc}")
    result = "".join(out)
    if quote == "'" and len(result) != 1:
        raise ValueError("single-quoted literal must hold exactly one character")
    return result


def _unquote_value(value: str) -> str:
    """Strip and unescape matching quotes; return the text unchanged if that fails."""
    if len(value) > 1 and value[0] == value[-1] and value[0] in "\"'":
        try:
            return _unescape(value)
        except ValueError:
            pass
    return value


def _legacy_value(value: str) -> Any:
    if value in ("true", "false"):
        return value == "true"
    if _INT_RE.fullmatch(value):
        number = int(value)
        if _INT64_MIN <= number <= _INT64_MAX:
            return number
    return value.strip("\"'")


def _is_nested_function(arg: str) -> bool:
    return "(" in arg and ")" in arg


def _split_arguments(args_text: str) -> list[str]:
    """Split a call's argument text on top-level commas outside quotes."""
    if not args_text.strip():
        return []

    args: list[str] = []
    current: list[str] = []
    quote_char: str | None = None
    depth = 0

    def flush() -> None:
        arg = "".join(current).strip()
        if arg:
            args.append(arg)
        current.clear()

    for char in args_text:
        if char in "\"'":
            if quote_char is None and depth == 0:
                quote_char = char
            elif quote_char is not None and char == quote_char:
                quote_char = None
            current.append(char)
        elif char == "(":
            if quote_char is None:
                depth += 1
            current.append(char)
        elif char == ")":
            if quote_char is None:
                depth -= 1
            current.append(char)
        elif char == "," and quote_char is None and depth == 0:
            flush()
        else:
            current.append(char)

    flush()
    return args


class _SettingsBuilder:
    """Collects the settings of one function call from its arguments."""

    def __init__(self, func_name: str) -> None:
        self.func_name = func_name
        self.settings: dict[str, Any] = {}
        self._nested = 0
        self._positional = 0

    def _add_nested(self, call: str) -> None:
        self.settings[f"{_NESTED_PREFIX}{self._nested}"] = call
        self._nested += 1

    def add(self, arg: str) -> None:
        if "=" in arg:
            key, value = (part.strip() for part in arg.split("=", 1))
            if _is_nested_function(value):
                self._add_nested(value)
            else:
                self.settings[key] = _unquote_value(value)
        elif ":" in arg:
            key, value = (part.strip() for part in arg.split(":", 1))
            self.settings[key] = _legacy_value(value)
        elif _is_nested_function(arg):
            self._add_nested(arg)
        elif self.func_name in _BUILTINS:
            self._add_builtin_positional(arg)
        else:
            self.settings[f"arg{self._positional}"] = _unquote_value(arg)
            self._positional += 1

    def _add_builtin_positional(self, arg: str) -> None:
        if self._positional != 0:
            raise SublangError(
                "only the first positional argument is allowed for built-in transforms; "
                f"use named arguments for additional parameters (got: {arg!r})"
            )
        if arg == "$" or arg.startswith("$."):
            self.settings["source"] = arg
        elif _is_nested_function(arg):
            self.settings[f"{_NESTED_PREFIX}0"] = arg
        else:
            raise SublangError(
                "first positional argument must be a JSON path (starting with $ or $.) "
                f"or a function call (containing parentheses); got: {arg!r}"
            )
        self._positional += 1

    def finish(self) -> dict[str, Any]:
        for key, value in _DEFAULTS.get(self.func_name, {}).items():
            self.settings.setdefault(key, value)
        return self.settings


class Parser:
    """Turns SUB scripts into lists of transform dictionaries."""

    def parse(self, text: str) -> list[dict[str, Any]]:
        """Parse a whole script; raise SublangError on the first bad line."""
        transforms: list[dict[str, Any]] = []
        for raw in text.split("\n"):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            transforms.extend(self._parse_line(line))
        return transforms

    def _parse_line(self, line: str) -> list[dict[str, Any]]:
        has_eq = "=" in line
        has_open = "(" in line
        if has_eq and not has_open:
            return [self._direct_assignment(line)]
        if has_eq and has_open and line.index("(") > line.index("="):
            return self._assignment_with_function(line)
        if has_open and ")" in line:
            return self._function_call(line, "")
        raise SublangError(f"invalid SUB line format: {line}")

    @staticmethod
    def _direct_assignment(line: str) -> dict[str, Any]:
        target, source = (part.strip() for part in line.split("=", 1))
        if not target or not source:
            raise SublangError(f"invalid assignment: {line}")
        return {"id": "assign", "type": "assign", "source": source, "target": target}

    def _assignment_with_function(self, line: str) -> list[dict[str, Any]]:
        eq = line.index("=")
        target = line[:eq].strip()
        call = line[eq + 1:].strip()
        try:
            transforms = self._function_call(call, target)
        except SublangError as exc:
            raise SublangError(f"error parsing assignment with function: {exc}") from exc
        for transform in transforms:
            if transform["type"] == "delete":
                transform["target"] = target
        return transforms

    def _function_call(self, line: str, target: str) -> list[dict[str, Any]]:
        open_paren = line.find("(")
        close_paren = line.rfind(")")
        if open_paren == -1 or close_paren == -1 or close_paren <= open_paren:
            raise SublangError(f"invalid function call syntax: {line}")

        func_name = line[:open_paren].strip()
        builder = _SettingsBuilder(func_name)
        try:
            for arg in _split_arguments(line[open_paren + 1:close_paren]):
                builder.add(arg)
        except SublangError as exc:
            raise SublangError(f"error parsing settings: {exc}") from exc
        settings = builder.finish()

        nested: list[dict[str, Any]] = []
        for key, value in list(settings.items()):
            if not key.startswith(_NESTED_PREFIX) or not isinstance(value, str):
                continue
            try:
                nested.extend(self.parse(value))
            except SublangError as exc:
                raise SublangError(f"error parsing nested function {value}: {exc}") from exc
            del settings[key]
            settings["source"] = _NESTED_OUTPUT

        transform: dict[str, Any] = {"id": settings.get("id"), "type": func_name}
        if target:
            transform["target"] = target
        transform.update((key, value) for key, value in settings.items() if key != "id")
        return [*nested, transform]


def parse(text: str) -> list[dict[str, Any]]:
    """Parse a SUB script with a fresh Parser."""
    return Parser().parse(text)