"""Built-in value helpers: comparisons, boolean logic, length, lookup and log."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional, Sequence

from barscope.errors import RenderError, RenderErrorReason
from barscope.helper_macro import JsonHelper, json_helper
from barscope.value import PathAndJson, ScopedJson, is_truthy, render_json

logger = logging.getLogger(__name__)

TRACE = logging.DEBUG - 5
_LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}
_U64_MAX = 2**64 - 1
_ABSENT = object()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _json_equal(a: Any, b: Any) -> bool:
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if _is_int(a) or _is_int(b):
        return _is_int(a) and _is_int(b) and a == b
    if isinstance(a, float) or isinstance(b, float):
        return isinstance(a, float) and isinstance(b, float) and a == b
    if isinstance(a, Mapping) or isinstance(b, Mapping):
        return (
            isinstance(a, Mapping)
            and isinstance(b, Mapping)
            and a.keys() == b.keys()
            and all(_json_equal(a[k], b[k]) for k in a)
        )
    if isinstance(a, (list, tuple)) or isinstance(b, (list, tuple)):
        return (
            isinstance(a, (list, tuple))
            and isinstance(b, (list, tuple))
            and len(a) == len(b)
            and all(_json_equal(x, y) for x, y in zip(a, b))
        )
    return a == b


def eq(x: Any, y: Any) -> bool:
    """JSON equality."""
    return _json_equal(x, y)


def ne(x: Any, y: Any) -> bool:
    """JSON inequality."""
    return not _json_equal(x, y)


def gt(x: int, y: int) -> bool:
    return x > y


def gte(x: int, y: int) -> bool:
    return x >= y


def lt(x: int, y: int) -> bool:
    return x < y


def lte(x: int, y: int) -> bool:
    return x <= y


def and_(x: Any, y: Any) -> bool:
    return is_truthy(x, False) and is_truthy(y, False)


def or_(x: Any, y: Any) -> bool:
    return is_truthy(x, False) or is_truthy(y, False)


def not_(x: Any) -> bool:
    return not is_truthy(x, False)


def length(x: Any) -> int:
    """Length of an array or object, UTF-8 byte length of a string, else 0."""
    if isinstance(x, (list, tuple, Mapping)):
        return len(x)
    if isinstance(x, str):
        return len(x.encode("utf-8"))
    return 0


def lookup(params: Sequence[PathAndJson], strict_mode: bool = False) -> ScopedJson:
    """Value of an array at an index or of an object at a key."""
    if len(params) < 1:
        raise RenderError.from_reason(RenderErrorReason.PARAM_NOT_FOUND_FOR_INDEX, "lookup", 0)
    if len(params) < 2:
        raise RenderError.from_reason(RenderErrorReason.PARAM_NOT_FOUND_FOR_INDEX, "lookup", 1)
    collection = params[0].value()
    index = params[1].value()

    found: Any = _ABSENT
    if isinstance(collection, (list, tuple)):
        if _is_int(index) and 0 <= index <= _U64_MAX and index < len(collection):
            found = collection[index]
    elif isinstance(collection, Mapping):
        if isinstance(index, str):
            found = collection.get(index, _ABSENT)

    if found is _ABSENT:
        if strict_mode:
            raise RenderError.strict_error(None)
        return ScopedJson.derived(None)
    return ScopedJson.derived(found)


def log(params: Sequence[PathAndJson], hash: Optional[Mapping[str, PathAndJson]] = None) -> None:
    """Log the parameters at the level named by the ``level`` hash entry (default info)."""
    hash = hash or {}
    message = ", ".join(
        f"{p.relative_path}: {render_json(p.value())}"
        if p.relative_path is not None
        else render_json(p.value())
        for p in params
    )
    level_entry = hash.get("level")
    level_value = level_entry.value() if level_entry is not None else None
    level = level_value if isinstance(level_value, str) else "info"
    log_level = _LOG_LEVELS.get(level.lower()) if level.isascii() else None
    if log_level is None:
        raise RenderError.from_reason(RenderErrorReason.INVALID_LOGGING_LEVEL, level)
    logger.log(log_level, "%s", message)


_J = "Json"
_I = "i64"

BUILTIN_HELPERS: dict[str, JsonHelper] = {
    "eq": json_helper("eq", [("x", _J), ("y", _J)])(eq),
    "ne": json_helper("ne", [("x", _J), ("y", _J)])(ne),
    "gt": json_helper("gt", [("x", _I), ("y", _I)])(gt),
    "gte": json_helper("gte", [("x", _I), ("y", _I)])(gte),
    "lt": json_helper("lt", [("x", _I), ("y", _I)])(lt),
    "lte": json_helper("lte", [("x", _I), ("y", _I)])(lte),
    "and": json_helper("and", [("x", _J), ("y", _J)])(and_),
    "or": json_helper("or", [("x", _J), ("y", _J)])(or_),
    "not": json_helper("not", [("x", _J)])(not_),
    "len": json_helper("len", [("x", _J)])(length),
}