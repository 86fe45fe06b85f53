"""Helpers that compute a JSON value from typed parameters and hash entries."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional, Sequence

from barscope.errors import RenderError, RenderErrorReason
from barscope.value import PathAndJson, ScopedJson, json_value

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_U64_MAX = 2**64 - 1


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _type_label(type_name: Any) -> str:
    return type_name if isinstance(type_name, str) else getattr(type_name, "__name__", str(type_name))


def _mismatch(value: Any, type_name: Any) -> TypeError:
    return TypeError(f"expected {_type_label(type_name)}, got {type(value).__name__}")


def as_json_value(value: Any, type_name: Any) -> Any:
    """Read a JSON value as the named type; raise TypeError when it is not one.

    Type names are ``object``, ``array``, ``str``, ``i64``, ``u64``, ``f64``,
    ``bool``, ``null`` and ``Json`` (any value). A Python type is checked
    with isinstance.
    """
    if isinstance(type_name, type):
        if isinstance(value, bool) and type_name in (int, float):
            raise _mismatch(value, type_name)
        if type_name is float and _is_int(value):
            return float(value)
        if isinstance(value, type_name):
            return value
        raise _mismatch(value, type_name)

    if type_name == "Json":
        return value
    if type_name == "object":
        if isinstance(value, Mapping):
            return value
    elif type_name == "array":
        if isinstance(value, (list, tuple)):
            return value
    elif type_name == "str":
        if isinstance(value, str):
            return value
    elif type_name == "i64":
        if _is_int(value) and _I64_MIN <= value <= _I64_MAX:
            return value
    elif type_name == "u64":
        if _is_int(value) and 0 <= value <= _U64_MAX:
            return value
    elif type_name == "f64":
        if _is_int(value) or isinstance(value, float):
            return float(value)
    elif type_name == "bool":
        if isinstance(value, bool):
            return value
    elif type_name == "null":
        if value is None:
            return None
    else:
        raise ValueError(f"unknown JSON type {type_name!r}")
    raise _mismatch(value, type_name)


@dataclasses.dataclass(frozen=True)
class JsonHelper:
    """A helper whose result is the JSON value returned by a function.

    Declared parameters are required and passed positionally; hash entries
    are optional, passed by keyword, and fall back to their defaults. When
    ``args`` names a keyword, all parameter values are passed under it; when
    ``kwargs`` does, all hash values are passed under it as a mapping.
    """

    name: str
    func: Callable[..., Any]
    params: tuple = ()
    hash_params: tuple = ()
    args: Optional[str] = None
    kwargs: Optional[str] = None

    def call_inner(
        self,
        params: Sequence[PathAndJson],
        hash: Optional[Mapping[str, PathAndJson]] = None,
        strict_mode: bool = False,
    ) -> ScopedJson:
        """Run the helper on resolved parameters and hash entries."""
        hash = hash or {}
        values = []
        for idx, (pname, ptype) in enumerate(self.params):
            param = params[idx] if idx < len(params) else None
            if param is None or (strict_mode and param.is_value_missing()):
                raise RenderError.from_reason(
                    RenderErrorReason.PARAM_NOT_FOUND_FOR_NAME, self.name, pname
                )
            try:
                values.append(as_json_value(param.value(), ptype))
            except TypeError:
                raise RenderError.from_reason(
                    RenderErrorReason.PARAM_TYPE_MISMATCH_FOR_NAME,
                    self.name,
                    pname,
                    _type_label(ptype),
                ) from None

        named: dict[str, Any] = {}
        for hname, htype, default in self.hash_params:
            entry = hash.get(hname)
            if entry is None:
                named[hname] = default
                continue
            try:
                named[hname] = as_json_value(entry.value(), htype)
            except TypeError:
                raise RenderError.from_reason(
                    RenderErrorReason.HASH_TYPE_MISMATCH_FOR_NAME,
                    self.name,
                    hname,
                    _type_label(htype),
                ) from None

        if self.args:
            named[self.args] = [p.value() for p in params]
        if self.kwargs:
            named[self.kwargs] = {k: v.value() for k, v in sorted(hash.items())}

        result = self.func(*values, **named)
        try:
            return ScopedJson.derived(json_value(result))
        except TypeError as exc:
            raise RenderError.from_error("Failed to access JSON data.", exc) from exc


def json_helper(
    name: str,
    params: Iterable[tuple] = (),
    hash_params: Iterable[tuple] = (),
    args: Optional[str] = None,
    kwargs: Optional[str] = None,
) -> Callable[[Callable[..., Any]], JsonHelper]:
    """Decorator turning a function into a JsonHelper.

    ``params`` holds ``(name, type)`` pairs, ``hash_params`` holds
    ``(name, type, default)`` triples.
    """
    declared = tuple(tuple(p) for p in params)
    hashed = tuple(tuple(h) for h in hash_params)

    def wrap(func: Callable[..., Any]) -> JsonHelper:
        return JsonHelper(name, func, declared, hashed, args, kwargs)

    return wrap