"""Destinations for rendered text."""

from __future__ import annotations

import abc
import io
from typing import IO, Any


class Output(abc.ABC):
    """Where rendered text goes."""

    @abc.abstractmethod
    def write(self, seg: str) -> None:
        """Append a piece of rendered text."""


class StringOutput(Output):
    """Collects rendered text in memory."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def write(self, seg: str) -> None:
        self._parts.append(seg)

    def into_string(self) -> str:
        """Return everything written so far."""
        return "".join(self._parts)


class WriteOutput(Output):
    """Writes rendered text to a text or binary stream."""

    def __init__(self, stream: IO[Any], encoding: str = "utf-8") -> None:
        self._stream = stream
        self._encoding = encoding
        self._binary = isinstance(stream, (io.RawIOBase, io.BufferedIOBase)) or "b" in getattr(
            stream, "mode", ""
        )

    def write(self, seg: str) -> None:
        if self._binary:
            self._stream.write(seg.encode(self._encoding))
        else:
            self._stream.write(seg)