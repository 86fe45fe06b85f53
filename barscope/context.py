"""The render data and navigation through it along template paths."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, Optional, Sequence

from barscope.block import BlockContext, BlockParamHolder
from barscope.errors import RenderError
from barscope.grammar import Rule
from barscope.path import PathSeg, merge_json_path
from barscope.value import ScopedJson, json_value

_ABSENT = object()


class _Resolved:
    """Where a path points: into the context data, or into a detached value."""

    __slots__ = ("path", "base", "from_context")

    def __init__(self, path: list[str], base: Any = None, from_context: bool = True) -> None:
        self.path = path
        self.base = base
        self.from_context = from_context


def _block_param(
    block_contexts: Sequence[BlockContext], name: str
) -> Optional[tuple[BlockParamHolder, list[str]]]:
    for block in block_contexts:
        holder = block.get_block_param(name)
        if holder is not None:
            return holder, block.base_path
    return None


def _resolve(relative_path: Sequence[PathSeg], block_contexts: Sequence[BlockContext]) -> _Resolved:
    depth = 0
    with_block_param = None
    from_root = False

    for seg in relative_path:
        if seg.name is not None:
            with_block_param = _block_param(block_contexts, seg.name)
            break
        if seg.rule is Rule.PATH_ROOT:
            from_root = True
            break
        if seg.rule is Rule.PATH_UP:
            depth += 1
        else:
            break

    path_stack: list[str] = []
    if with_block_param is not None:
        holder, base_path = with_block_param
        if not holder.is_path:
            merge_json_path(path_stack, relative_path[1:])
            return _Resolved(path_stack, holder.value, from_context=False)
        path_stack.extend(base_path)
        path_stack.extend(holder.path)
        merge_json_path(path_stack, relative_path[1:])
        return _Resolved(path_stack)

    if from_root:
        merge_json_path(path_stack, relative_path)
        return _Resolved(path_stack)

    if depth > 0 and depth < len(block_contexts):
        block: Optional[BlockContext] = block_contexts[depth]
    else:
        block = block_contexts[0] if block_contexts else None

    if block is not None and block.has_base_value:
        merge_json_path(path_stack, relative_path)
        return _Resolved(path_stack, block.base_value, from_context=False)
    if block is not None:
        path_stack.extend(block.base_path)
    merge_json_path(path_stack, relative_path)
    return _Resolved(path_stack)


def _array_index(key: str) -> int:
    digits = key[1:] if key.startswith("+") else key
    if not digits or not (digits.isascii() and digits.isdigit()):
        raise RenderError.from_error(
            "Cannot access array/vector with string index.",
            ValueError(f"invalid digit found in string: {key!r}"),
        )
    return int(digits)


def _child(value: Any, key: str) -> Any:
    if value is _ABSENT:
        return _ABSENT
    if isinstance(value, list):
        index = _array_index(key)
        return value[index] if index < len(value) else _ABSENT
    if isinstance(value, Mapping):
        return value.get(key, _ABSENT)
    return _ABSENT


def _walk(value: Any, path: Iterable[str]) -> Any:
    for key in path:
        value = _child(value, key)
    return value


def merge_json(base: Any, addition: Mapping[str, Any]) -> dict[str, Any]:
    """An object holding the entries of base (if an object) updated with addition."""
    merged = dict(base) if isinstance(base, Mapping) else {}
    merged.update(addition)
    return merged


class Context:
    """The data a template is rendered with."""

    def __init__(self, data: Any = None) -> None:
        self.data = data

    @classmethod
    def null(cls) -> "Context":
        """A context holding null."""
        return cls(None)

    @classmethod
    def wraps(cls, data: Any) -> "Context":
        """A context holding data converted to JSON values; raises RenderError if impossible."""
        try:
            return cls(json_value(data))
        except TypeError as exc:
            raise RenderError.from_error("Failed to access JSON data.", exc) from exc

    def navigate(
        self, relative_path: Sequence[PathSeg], block_contexts: Sequence[BlockContext]
    ) -> ScopedJson:
        """Resolve a path against this data and the block scopes, innermost first."""
        resolved = _resolve(list(relative_path), block_contexts)
        if resolved.from_context:
            found = _walk(self.data, resolved.path)
            if found is _ABSENT:
                return ScopedJson.missing()
            return ScopedJson.context(found, resolved.path)
        found = _walk(resolved.base, resolved.path)
        if found is _ABSENT:
            return ScopedJson.missing()
        return ScopedJson.derived(found)

    def __repr__(self) -> str:
        return f"Context({self.data!r})"