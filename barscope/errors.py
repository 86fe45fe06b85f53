"""Errors raised while parsing and rendering templates."""

from __future__ import annotations

import enum
import string
from typing import Any, Optional


def _quote(text: Any) -> str:
    escaped = str(text).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _debug_option(value: Optional[str]) -> str:
    return "None" if value is None else f"Some({_quote(value)})"


def _field_count(template: str) -> int:
    return len({field for _, field, _, _ in string.Formatter().parse(template) if field is not None})


def _check_arity(member: enum.Enum, template: str, args: tuple) -> None:
    expected = _field_count(template)
    if len(args) != expected:
        raise TypeError(f"{member.name} takes {expected} argument(s), {len(args)} given")


class RenderErrorReason(enum.Enum):
    """Why rendering failed; each member carries its message template."""

    TEMPLATE_NOT_FOUND = "Template not found {0}"
    MISSING_VARIABLE = "Failed to access variable in strict mode {0}"
    PARTIAL_NOT_FOUND = "Partial not found {0}"
    HELPER_NOT_FOUND = "Helper not found {0}"
    PARAM_NOT_FOUND_FOR_INDEX = "Helper/Decorator {0} param at index {1} required but not found"
    PARAM_NOT_FOUND_FOR_NAME = "Helper/Decorator {0} param with name {1} required but not found"
    PARAM_TYPE_MISMATCH_FOR_NAME = "Helper/Decorator {0} param with name {1} type mismatch for {2}"
    HASH_TYPE_MISMATCH_FOR_NAME = "Helper/Decorator {0} hash with name {1} type mismatch for {2}"
    DECORATOR_NOT_FOUND = "Decorator not found {0}"
    CANNOT_INCLUDE_SELF = "Can not include current template in partial"
    INVALID_LOGGING_LEVEL = "Invalid logging level: {0}"
    INVALID_PARAM_TYPE = "Invalid param type, {0} expected"
    BLOCK_CONTENT_REQUIRED = "Block content required"
    INVALID_JSON_PATH = "Invalid json path {0}"
    OTHER = "{0}"

    def format(self, *args: Any) -> str:
        """Build the message for this reason from its arguments."""
        _check_arity(self, self.value, args)
        if self is RenderErrorReason.MISSING_VARIABLE:
            args = (_debug_option(args[0]),)
        return self.value.format(*args)


class RenderError(Exception):
    """Error raised when data cannot be rendered on a template."""

    def __init__(
        self,
        desc: str = "",
        *,
        template_name: Optional[str] = None,
        line_no: Optional[int] = None,
        column_no: Optional[int] = None,
        cause: Optional[BaseException] = None,
        reason: Optional[RenderErrorReason] = None,
        reason_args: tuple = (),
        unimplemented: bool = False,
    ) -> None:
        super().__init__(desc)
        self.desc = desc
        self.template_name = template_name
        self.line_no = line_no
        self.column_no = column_no
        self.cause = cause
        self.reason = reason
        self.reason_args = tuple(reason_args)
        self.is_unimplemented = unimplemented
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.line_no is not None and self.column_no is not None:
            name = self.template_name if self.template_name is not None else "Unnamed template"
            return f'Error rendering "{name}" line {self.line_no}, col {self.column_no}: {self.desc}'
        return self.desc

    @classmethod
    def from_reason(cls, reason: RenderErrorReason, *args: Any) -> "RenderError":
        """Create an error whose description is the reason's message."""
        return cls(reason.format(*args), reason=reason, reason_args=args)

    @classmethod
    def from_error(cls, desc: str, cause: BaseException) -> "RenderError":
        """Create an error with a description and an underlying cause."""
        return cls(desc, cause=cause)

    @classmethod
    def strict_error(cls, path: Optional[str]) -> "RenderError":
        """Error for a variable missing in strict mode."""
        return cls.from_reason(RenderErrorReason.MISSING_VARIABLE, path)

    @classmethod
    def unimplemented(cls) -> "RenderError":
        """Marker error telling that a helper has no value-returning form."""
        return cls(unimplemented=True)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "RenderError":
        """Wrap a lower-level exception with the matching description."""
        if isinstance(exc, RenderError):
            return exc
        if isinstance(exc, TemplateError):
            return cls.from_error("Failed to parse template.", exc)
        if isinstance(exc, UnicodeError):
            return cls.from_error("Failed to generate bytes.", exc)
        if isinstance(exc, OSError):
            return cls.from_error("Cannot generate output.", exc)
        if isinstance(exc, ValueError):
            return cls.from_error("Cannot access array/vector with string index.", exc)
        if isinstance(exc, TypeError):
            return cls.from_error("Failed to access JSON data.", exc)
        return cls.from_error(str(exc), exc)


class TemplateErrorReason(enum.Enum):
    """Why a template could not be parsed."""

    MISMATCHING_CLOSED_HELPER = "helper {0} was opened, but {1} is closing"
    MISMATCHING_CLOSED_DECORATOR = "decorator {0} was opened, but {1} is closing"
    INVALID_SYNTAX = "invalid handlebars syntax."
    INVALID_PARAM = "invalid parameter {0}"
    NESTED_SUBEXPRESSION = "nested subexpression is not supported"
    IO_ERROR = 'Template "{1}": {0}'

    def format(self, *args: Any) -> str:
        """Build the message for this reason from its arguments."""
        _check_arity(self, self.value, args)
        if self in _QUOTED_TEMPLATE_REASONS:
            args = tuple(_quote(arg) for arg in args)
        return self.value.format(*args)


_QUOTED_TEMPLATE_REASONS = frozenset(
    {
        TemplateErrorReason.MISMATCHING_CLOSED_HELPER,
        TemplateErrorReason.MISMATCHING_CLOSED_DECORATOR,
        TemplateErrorReason.INVALID_PARAM,
    }
)


def _source_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def template_segment(template_str: str, line: int, col: int) -> str:
    """Show the template lines around a position, marking the column."""
    spread = 3
    line_start = line - spread if line >= spread else 0
    line_end = line + spread
    parts = []
    for line_count, content in enumerate(_source_lines(template_str)):
        if line_start <= line_count <= line_end:
            parts.append(f"{line_count:4d} | {content}\n")
            if line_count == line - 1:
                width = len(content.encode("utf-8"))
                marks = "".join("^" if c == col else "-" for c in range(width))
                parts.append(f"     |{marks}\n")
    return "".join(parts)


class TemplateError(Exception):
    """Error raised when a template cannot be parsed."""

    def __init__(
        self,
        reason: TemplateErrorReason,
        reason_args: tuple = (),
        *,
        template_name: Optional[str] = None,
        line_no: Optional[int] = None,
        column_no: Optional[int] = None,
        segment: Optional[str] = None,
    ) -> None:
        self.reason = reason
        self.reason_args = tuple(reason_args)
        self.reason_message = reason.format(*self.reason_args)
        super().__init__(self.reason_message)
        self.template_name = template_name
        self.line_no = line_no
        self.column_no = column_no
        self.segment = segment

    @classmethod
    def of(cls, reason: TemplateErrorReason, *args: Any) -> "TemplateError":
        """Create an error for a reason without position."""
        return cls(reason, args)

    def at(self, template_str: str, line_no: int, column_no: int) -> "TemplateError":
        """Attach a position and the surrounding template text."""
        self.line_no = line_no
        self.column_no = column_no
        self.segment = template_segment(template_str, line_no, column_no)
        return self

    def in_template(self, name: str) -> "TemplateError":
        """Attach the name of the template."""
        self.template_name = name
        return self

    def pos(self) -> Optional[tuple[int, int]]:
        """Line and column of the error, if known."""
        if self.line_no is not None and self.column_no is not None:
            return (self.line_no, self.column_no)
        return None

    def name(self) -> Optional[str]:
        """Name of the template, if known."""
        return self.template_name

    def __str__(self) -> str:
        if self.line_no is not None and self.column_no is not None and self.segment is not None:
            name = self.template_name if self.template_name is not None else "Unnamed template"
            return (
                f"Template error: {self.reason_message}\n"
                f'    --> Template error in "{name}":{self.line_no}:{self.column_no}\n'
                f"     |\n{self.segment}     |\n"
                f"     = reason: {self.reason_message}\n"
            )
        return self.reason_message