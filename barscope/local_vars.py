"""Local (``@``-prefixed) variables of a block scope."""

from __future__ import annotations

from typing import Any, Iterator


class LocalVars:
    """Named local variables such as ``@index``, ``@key``, ``@first`` and ``@last``."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def put(self, key: str, value: Any) -> None:
        """Set a local variable."""
        self._values[key] = value

    def get(self, key: str) -> Any:
        """Get a local variable, or None when it is not set."""
        return self._values.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def copy(self) -> "LocalVars":
        clone = LocalVars()
        clone._values = dict(self._values)
        return clone

    def __repr__(self) -> str:
        return f"LocalVars({self._values!r})"