"""JSON values used during rendering and their default text form."""

from __future__ import annotations

import dataclasses
import enum
import math
import sys
from collections.abc import Mapping
from typing import Any, Optional


class JsonKind(enum.Enum):
    """Where a scoped value comes from."""

    CONSTANT = "constant"
    DERIVED = "derived"
    CONTEXT = "context"
    MISSING = "missing"


@dataclasses.dataclass(frozen=True)
class ScopedJson:
    """A JSON value together with its origin.

    Constant values are literals of a template, context values are referenced
    in the render data (with their full path), derived values are computed
    while rendering, and missing marks a reference that resolved to nothing.
    """

    kind: JsonKind
    value: Any = None
    path: Optional[tuple[str, ...]] = None

    @classmethod
    def constant(cls, value: Any) -> "ScopedJson":
        return cls(JsonKind.CONSTANT, value)

    @classmethod
    def derived(cls, value: Any) -> "ScopedJson":
        return cls(JsonKind.DERIVED, value)

    @classmethod
    def context(cls, value: Any, path: Any) -> "ScopedJson":
        return cls(JsonKind.CONTEXT, value, tuple(path))

    @classmethod
    def missing(cls) -> "ScopedJson":
        return cls(JsonKind.MISSING)

    def as_json(self) -> Any:
        """The JSON value; null when missing."""
        return None if self.kind is JsonKind.MISSING else self.value

    def render(self) -> str:
        return render_json(self.as_json())

    def is_missing(self) -> bool:
        return self.kind is JsonKind.MISSING

    def into_derived(self) -> "ScopedJson":
        """A derived copy of this value, detached from any path."""
        return ScopedJson.derived(self.as_json())

    def context_path(self) -> Optional[list[str]]:
        """Full path of a context value, else None."""
        if self.kind is JsonKind.CONTEXT:
            return list(self.path or ())
        return None


@dataclasses.dataclass(frozen=True)
class PathAndJson:
    """A resolved value and the path it was referenced by, if any."""

    relative_path: Optional[str]
    scoped: ScopedJson

    def context_path(self) -> Optional[list[str]]:
        return self.scoped.context_path()

    def value(self) -> Any:
        return self.scoped.as_json()

    def is_value_missing(self) -> bool:
        return self.scoped.is_missing()

    def render(self) -> str:
        return self.scoped.render()


def _format_float(number: float) -> str:
    if not math.isfinite(number):
        return ""
    text = repr(number)
    if "e" not in text:
        return text
    mantissa, exp_text = text.split("e")
    exponent = int(exp_text)
    if exponent == -5:
        sign = "-" if mantissa.startswith("-") else ""
        digits = mantissa.lstrip("-").replace(".", "")
        return f"{sign}0.0000{digits}"
    return f"{mantissa}e{exponent}"


def render_json(value: Any) -> str:
    """Default text form of a JSON value."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, Mapping):
        return "[object]"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_json(item) for item in value) + "]"
    return str(value)


def is_truthy(value: Any, include_zero: bool) -> bool:
    """Handlebars truthiness of a JSON value."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return True
        if include_zero:
            return not math.isnan(number)
        return math.isfinite(number) and abs(number) >= sys.float_info.min
    if isinstance(value, (str, list, tuple, Mapping)):
        return len(value) > 0
    raise TypeError(f"not a JSON value: {type(value).__name__}")


def _json_key(key: Any) -> str:
    if isinstance(key, enum.Enum):
        key = key.value
    if isinstance(key, str):
        return key
    if isinstance(key, int) and not isinstance(key, bool):
        return str(key)
    raise TypeError(f"key must be a string, got {type(key).__name__}")


def json_value(src: Any) -> Any:
    """Convert data into plain JSON values, raising TypeError when impossible."""
    if src is None or isinstance(src, (bool, str)):
        return src
    if isinstance(src, enum.Enum):
        return json_value(src.value)
    if isinstance(src, int):
        return int(src)
    if isinstance(src, float):
        return float(src) if math.isfinite(src) else None
    if dataclasses.is_dataclass(src) and not isinstance(src, type):
        return {f.name: json_value(getattr(src, f.name)) for f in dataclasses.fields(src)}
    if isinstance(src, Mapping):
        return {_json_key(k): json_value(v) for k, v in src.items()}
    if isinstance(src, (bytes, bytearray)):
        return list(src)
    if isinstance(src, (list, tuple, set, frozenset)):
        return [json_value(item) for item in src]
    raise TypeError(f"cannot serialize {type(src).__name__} as JSON")


def to_json(src: Any) -> Any:
    """Convert data into plain JSON values; null when it cannot be converted."""
    try:
        return json_value(src)
    except TypeError:
        return None


def as_string(src: Any) -> Optional[str]:
    """The value if it is a JSON string, else None."""
    return src if isinstance(src, str) else None