"""Block scopes: base paths, base values, block parameters and local variables."""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Optional

from barscope.local_vars import LocalVars
from barscope.value import PathAndJson


class HolderKind(enum.Enum):
    PATH = "path"
    VALUE = "value"


@dataclasses.dataclass(frozen=True)
class BlockParamHolder:
    """A block parameter: a path into the context or an actual value."""

    kind: HolderKind
    path: tuple[str, ...] = ()
    value: Any = None

    @classmethod
    def of_value(cls, value: Any) -> "BlockParamHolder":
        return cls(HolderKind.VALUE, value=value)

    @classmethod
    def of_path(cls, path: Any) -> "BlockParamHolder":
        return cls(HolderKind.PATH, path=tuple(path))

    @property
    def is_path(self) -> bool:
        return self.kind is HolderKind.PATH


class BlockParams:
    """Block parameters of a block, by name."""

    def __init__(self) -> None:
        self._data: dict[str, BlockParamHolder] = {}

    def add_path(self, key: str, path: Any) -> None:
        """Add a parameter referring to a path relative to the block's base path."""
        self._data[key] = BlockParamHolder.of_path(path)

    def add_value(self, key: str, value: Any) -> None:
        """Add a parameter holding a value."""
        self._data[key] = BlockParamHolder.of_value(value)

    def get(self, key: str) -> Optional[BlockParamHolder]:
        return self._data.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


@dataclasses.dataclass
class BlockContext:
    """Data of the current block scope."""

    base_path: list[str] = dataclasses.field(default_factory=list)
    base_value: Any = None
    has_base_value: bool = False
    block_params: BlockParams = dataclasses.field(default_factory=BlockParams)
    local_variables: LocalVars = dataclasses.field(default_factory=LocalVars)

    def set_local_var(self, name: str, value: Any) -> None:
        self.local_variables.put(name, value)

    def get_local_var(self, name: str) -> Any:
        return self.local_variables.get(name)

    def set_base_value(self, value: Any) -> None:
        """Use a constant or derived value as the block's base."""
        self.base_value = value
        self.has_base_value = True

    def get_block_param(self, name: str) -> Optional[BlockParamHolder]:
        return self.block_params.get(name)

    def set_block_params(self, block_params: BlockParams) -> None:
        self.block_params = block_params


def create_block(param: PathAndJson) -> BlockContext:
    """Start a block based on a parameter's context path, or on its value."""
    block = BlockContext()
    path = param.context_path()
    if path is not None:
        block.base_path = list(path)
    else:
        block.set_base_value(param.value())
    return block