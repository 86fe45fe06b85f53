"""Paths that templates use to reference data."""

from __future__ import annotations

import dataclasses
from typing import Iterable, Optional

from barscope.errors import RenderError, RenderErrorReason
from barscope.grammar import GrammarError, Rule, path_tokens


@dataclasses.dataclass(frozen=True)
class PathSeg:
    """One segment of a path: a name, or a rule such as ``..`` or ``@root``."""

    name: Optional[str] = None
    rule: Optional[Rule] = None

    @classmethod
    def named(cls, name: str) -> "PathSeg":
        return cls(name=name)

    @classmethod
    def ruled(cls, rule: Rule) -> "PathSeg":
        return cls(rule=rule)


_LOCAL = PathSeg.ruled(Rule.PATH_LOCAL)
_UP = PathSeg.ruled(Rule.PATH_UP)
_RULED = {Rule.PATH_ROOT, Rule.PATH_LOCAL, Rule.PATH_UP}


def _local_path_and_level(segs: list[PathSeg]) -> Optional[tuple[int, str]]:
    if not segs or segs[0] != _LOCAL:
        return None
    level = 0
    while level + 1 < len(segs) and segs[level + 1] == _UP:
        level += 1
    if level + 1 < len(segs) and segs[level + 1].name is not None:
        return level, segs[level + 1].name
    return None


@dataclasses.dataclass(frozen=True)
class Path:
    """A relative path like ``a/b/c`` or a local variable like ``@index`` or ``@../index``."""

    raw: str
    relative: Optional[tuple[PathSeg, ...]] = None
    level: int = 0
    local_name: Optional[str] = None

    @classmethod
    def parse(cls, raw: str) -> "Path":
        """Parse a path; raises RenderError for an invalid one."""
        try:
            tokens = path_tokens(raw)
        except GrammarError:
            raise RenderError.from_reason(RenderErrorReason.INVALID_JSON_PATH, raw) from None
        segs = []
        for rule, text in tokens:
            if rule in _RULED:
                segs.append(PathSeg.ruled(rule))
            elif text != "this":
                segs.append(PathSeg.named(text))
        return cls.new(raw, segs)

    @classmethod
    def new(cls, raw: str, segs: Iterable[PathSeg]) -> "Path":
        segs = list(segs)
        local = _local_path_and_level(segs)
        if local is not None:
            return cls(raw, level=local[0], local_name=local[1])
        return cls(raw, relative=tuple(segs))

    @classmethod
    def current(cls) -> "Path":
        return cls("", relative=())

    @classmethod
    def with_named_paths(cls, name_segs: Iterable[str]) -> "Path":
        names = list(name_segs)
        return cls("/".join(names), relative=tuple(PathSeg.named(n) for n in names))

    def segs(self) -> Optional[list[PathSeg]]:
        """Segments of a relative path; None for a local variable."""
        return None if self.relative is None else list(self.relative)

    def is_local(self) -> bool:
        return self.relative is None


def merge_json_path(path_stack: list[str], relative_path: Iterable[PathSeg]) -> None:
    """Append the named segments of a path to a path stack."""
    path_stack.extend(seg.name for seg in relative_path if seg.name is not None)