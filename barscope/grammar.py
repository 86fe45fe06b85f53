"""Template grammar: recognises the syntax elements of a template."""

from __future__ import annotations

import enum
import re
from typing import Callable, Optional

_NUMBER = re.compile(r"-?[0-9]+\.?[0-9]*(?:[eE]-?[0-9]+)?")
_TILDE = object()
_KEYWORDS = ("as", "else")
_SIMPLE_ESCAPES = "\"'\\/bfnrt"


class Rule(enum.Enum):
    """The syntax elements of a template."""

    RAW_TEXT = "raw_text"
    RAW_BLOCK_TEXT = "raw_block_text"
    LITERAL = "literal"
    STRING_LITERAL = "string_literal"
    NUMBER_LITERAL = "number_literal"
    NULL_LITERAL = "null_literal"
    BOOLEAN_LITERAL = "boolean_literal"
    ARRAY_LITERAL = "array_literal"
    OBJECT_LITERAL = "object_literal"
    IDENTIFIER = "identifier"
    PARTIAL_IDENTIFIER = "partial_identifier"
    REFERENCE = "reference"
    NAME = "name"
    PARAM = "param"
    HASH = "hash"
    BLOCK_PARAM = "block_param"
    SUBEXPRESSION = "subexpression"
    EXPRESSION = "expression"
    HTML_EXPRESSION = "html_expression"
    DECORATOR_EXPRESSION = "decorator_expression"
    PARTIAL_EXPRESSION = "partial_expression"
    INVERT_TAG = "invert_tag"
    HELPER_BLOCK_START = "helper_block_start"
    HELPER_BLOCK_END = "helper_block_end"
    HELPER_BLOCK = "helper_block"
    DECORATOR_BLOCK_START = "decorator_block_start"
    DECORATOR_BLOCK_END = "decorator_block_end"
    DECORATOR_BLOCK = "decorator_block"
    PARTIAL_BLOCK_START = "partial_block_start"
    PARTIAL_BLOCK_END = "partial_block_end"
    PARTIAL_BLOCK = "partial_block"
    RAW_BLOCK_START = "raw_block_start"
    RAW_BLOCK_END = "raw_block_end"
    RAW_BLOCK = "raw_block"
    HBS_COMMENT = "hbs_comment"
    HBS_COMMENT_COMPACT = "hbs_comment_compact"
    TEMPLATE = "template"
    PATH = "path"
    PATH_ID = "path_id"
    PATH_RAW_ID = "path_raw_id"
    PATH_UP = "path_up"
    PATH_ROOT = "path_root"
    PATH_LOCAL = "path_local"


class GrammarError(ValueError):
    """Raised when text does not start with the requested syntax element."""

    def __init__(self, rule: Rule, text: str) -> None:
        super().__init__(f"text does not match {rule.value}: {text!r}")
        self.rule = rule
        self.text = text


def _is_symbol_char(c: str) -> bool:
    return (c.isascii() and c.isalnum()) or c in "-_$" or ord(c) >= 0x80


def _is_partial_symbol_char(c: str) -> bool:
    return (c.isascii() and c.isalnum()) or c in "-_/." or ord(c) >= 0x80


_Fn = Callable[[int], Optional[int]]


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.n = len(text)
        self.tokens: list[tuple[Rule, str]] = []

    # basic helpers

    def lit(self, pos: int, s: str) -> Optional[int]:
        return pos + len(s) if self.text.startswith(s, pos) else None

    def ws(self, pos: int) -> int:
        while pos < self.n and self.text[pos] in " \t\r\n":
            pos += 1
        return pos

    def is_sym(self, pos: int) -> bool:
        return pos < self.n and _is_symbol_char(self.text[pos])

    def alt(self, pos: int, *fns: _Fn) -> Optional[int]:
        for fn in fns:
            end = fn(pos)
            if end is not None:
                return end
        return None

    def seq(self, pos: int, *parts: object) -> Optional[int]:
        p = pos
        for i, part in enumerate(parts):
            if i:
                p = self.ws(p)
            if part is _TILDE:
                if self.text.startswith("~", p):
                    p += 1
                continue
            end = self.lit(p, part) if isinstance(part, str) else part(p)  # type: ignore[operator]
            if end is None:
                return None
            p = end
        return p

    # text

    def escape(self, pos: int) -> Optional[int]:
        if not self.text.startswith("\\", pos):
            return None
        after = self.lit(pos + 1, "{{")
        if after is not None:
            more = self.lit(after, "{{")
            return more if more is not None else after
        q = pos + 1
        if q < self.n and self.text[q] == "\\":
            while q < self.n and self.text[q] == "\\":
                q += 1
            if self.text.startswith("{{", q):
                return q
        return None

    def _text(self, pos: int, stop: str) -> int:
        p = pos
        while p < self.n:
            end = self.escape(p)
            if end is not None:
                p = end
            elif not self.text.startswith(stop, p):
                p += 1
            else:
                break
        return p

    def raw_text(self, pos: int) -> Optional[int]:
        end = self._text(pos, "{{")
        return end if end > pos else None

    def raw_block_text(self, pos: int) -> Optional[int]:
        return self._text(pos, "{{{{")

    # literals

    def string_literal(self, pos: int) -> Optional[int]:
        if pos >= self.n or self.text[pos] not in "\"'":
            return None
        quote = self.text[pos]
        p = pos + 1
        while p < self.n:
            c = self.text[p]
            if c == quote:
                return p + 1
            if c == "\\":
                nxt = self.text[p + 1 : p + 2]
                if nxt and nxt in _SIMPLE_ESCAPES:
                    p += 2
                elif nxt == "u" and re.fullmatch(r"[0-9a-fA-F]{4}", self.text[p + 2 : p + 6]):
                    p += 6
                else:
                    return None
            else:
                p += 1
        return None

    def number_literal(self, pos: int) -> Optional[int]:
        m = _NUMBER.match(self.text, pos)
        if m is None or self.is_sym(m.end()):
            return None
        return m.end()

    def _keyword(self, pos: int, *words: str) -> Optional[int]:
        for word in words:
            end = self.lit(pos, word)
            if end is not None and not self.is_sym(end):
                return end
        return None

    def null_literal(self, pos: int) -> Optional[int]:
        return self._keyword(pos, "null")

    def boolean_literal(self, pos: int) -> Optional[int]:
        return self._keyword(pos, "true", "false")

    def array_literal(self, pos: int) -> Optional[int]:
        p = self.lit(pos, "[")
        if p is None:
            return None
        p = self.ws(p)
        first = self.literal(p)
        if first is not None:
            p = first
        while True:
            nxt = self.seq(p, ",", self.literal)
            if nxt is None:
                break
            p = nxt
        return self.lit(self.ws(p), "]")

    def _pair(self, pos: int) -> Optional[int]:
        return self.seq(pos, self.string_literal, ":", self.literal)

    def object_literal(self, pos: int) -> Optional[int]:
        p = self.lit(pos, "{")
        if p is None:
            return None
        p = self.ws(p)
        first = self._pair(p)
        if first is not None:
            p = first
        while True:
            nxt = self.seq(p, ",", self._pair)
            if nxt is None:
                break
            p = nxt
        return self.lit(self.ws(p), "}")

    def literal(self, pos: int) -> Optional[int]:
        return self.alt(
            pos,
            self.string_literal,
            self.array_literal,
            self.object_literal,
            self.number_literal,
            self.null_literal,
            self.boolean_literal,
        )

    # paths

    def _token(self, rule: Rule, start: int, end: int) -> None:
        self.tokens.append((rule, self.text[start:end]))

    def path_id(self, pos: int) -> Optional[int]:
        p = pos
        while self.is_sym(p):
            p += 1
        return p if p > pos else None

    def path_raw_id(self, pos: int) -> Optional[int]:
        end = self.text.find("]", pos)
        return self.n if end < 0 else end

    def path_item(self, pos: int) -> Optional[int]:
        end = self.path_id(pos)
        if end is not None:
            self._token(Rule.PATH_ID, pos, end)
            return end
        if self.text.startswith("[", pos):
            close = self.text.find("]", pos + 1)
            if close < 0:
                return None
            self._token(Rule.PATH_RAW_ID, pos + 1, close)
            return close + 1
        return None

    def _is_sep(self, pos: int) -> bool:
        return pos < self.n and self.text[pos] in "/."

    def path_inline(self, pos: int) -> Optional[int]:
        mark = len(self.tokens)
        p = pos
        if self.text.startswith("this", p) and self._is_sep(p + 4):
            p += 5
        elif self.text.startswith("./", p):
            p += 2
        if self.text.startswith("@root", p) and self._is_sep(p + 5):
            self._token(Rule.PATH_ROOT, p, p + 5)
            p += 6
        if self.text.startswith("@", p):
            self._token(Rule.PATH_LOCAL, p, p + 1)
            p += 1
        while self.text.startswith("..", p) and self._is_sep(p + 2):
            self._token(Rule.PATH_UP, p, p + 2)
            p += 3
        end = self.path_item(p)
        if end is None:
            del self.tokens[mark:]
            return None
        p = end
        while self._is_sep(p):
            inner = len(self.tokens)
            end = self.path_item(p + 1)
            if end is None:
                del self.tokens[inner:]
                break
            p = end
        return p

    # expressions

    def identifier(self, pos: int) -> Optional[int]:
        return self.path_id(pos)

    def partial_identifier(self, pos: int) -> Optional[int]:
        p = pos
        while p < self.n and _is_partial_symbol_char(self.text[p]):
            p += 1
        if p > pos:
            return p
        if self.text.startswith("[", pos):
            close = self.text.find("]", pos + 1)
            return close + 1 if close > pos + 1 else None
        if self.text.startswith("'", pos):
            p = pos + 1
            while p < self.n and self.text[p] != "'":
                p += 2 if self.text.startswith("\\'", p) else 1
            if p > pos + 1 and p < self.n:
                return p + 1
        return None

    def reference(self, pos: int) -> Optional[int]:
        return self.path_inline(pos)

    def name(self, pos: int) -> Optional[int]:
        return self.alt(pos, self.subexpression, self.reference)

    def param(self, pos: int) -> Optional[int]:
        if self._keyword(pos, *_KEYWORDS) is not None:
            return None
        return self.alt(pos, self.literal, self.reference, self.subexpression)

    def hash(self, pos: int) -> Optional[int]:
        return self.seq(pos, self.identifier, "=", self.param)

    def block_param(self, pos: int) -> Optional[int]:
        p = self.seq(pos, "as", "|", self.identifier)
        if p is None:
            return None
        second = self.identifier(self.ws(p))
        if second is not None:
            p = second
        return self.lit(self.ws(p), "|")

    def _ident_with_params(self, pos: int, minimum: int) -> Optional[int]:
        q = self.identifier(pos)
        if q is None:
            return None
        count = 0
        while True:
            end = self.alt(self.ws(q), self.hash, self.param)
            if end is None:
                break
            q = end
            count += 1
        return q if count >= minimum else None

    def call_body(self, pos: int) -> Optional[int]:
        return self.alt(pos, lambda p: self._ident_with_params(p, 1), self.name)

    def exp_line(self, pos: int) -> Optional[int]:
        q = self._ident_with_params(pos, 0)
        if q is None:
            return None
        end = self.block_param(self.ws(q))
        return end if end is not None else q

    def partial_exp_line(self, pos: int) -> Optional[int]:
        q = self.alt(pos, self.partial_identifier, self.name)
        if q is None:
            return None
        while True:
            end = self.alt(self.ws(q), self.hash, self.param)
            if end is None:
                return q
            q = end

    def subexpression(self, pos: int) -> Optional[int]:
        return self.seq(pos, "(", self.call_body, ")")

    def expression(self, pos: int) -> Optional[int]:
        if self.invert_tag(pos) is not None:
            return None
        return self.seq(pos, "{{", _TILDE, self.call_body, _TILDE, "}}")

    def html_expression(self, pos: int) -> Optional[int]:
        return self.alt(
            pos,
            lambda p: self.seq(p, "{{{", _TILDE, self.call_body, _TILDE, "}}}"),
            lambda p: self.seq(p, "{{", _TILDE, "{", self.call_body, "}", _TILDE, "}}"),
            lambda p: self.seq(p, "{{", _TILDE, "&", self.name, _TILDE, "}}"),
        )

    def decorator_expression(self, pos: int) -> Optional[int]:
        return self.seq(pos, "{{", _TILDE, "*", self.exp_line, _TILDE, "}}")

    def partial_expression(self, pos: int) -> Optional[int]:
        return self.seq(pos, "{{", _TILDE, ">", self.partial_exp_line, _TILDE, "}}")

    def invert_tag(self, pos: int) -> Optional[int]:
        item = lambda p: self.alt(p, lambda q: self.lit(q, "else"), lambda q: self.lit(q, "^"))
        return self.seq(pos, "{{", _TILDE, item, _TILDE, "}}")

    # blocks

    def helper_block_start(self, pos: int) -> Optional[int]:
        return self.seq(pos, "{{", _TILDE, "#", self.exp_line, _TILDE, "}}")

    def helper_block_end(self, pos: int) -> Optional[int]:
        return self.seq(pos, "{{", _TILDE, "/", self.identifier, _TILDE, "}}")

    def helper_block(self, pos: int) -> Optional[int]:
        p = self.helper_block_start(pos)
        if p is None:
            return None
        p = self.template(p)
        inv = self.invert_tag(p)
        if inv is not None:
            p = self.template(inv)
        return self.helper_block_end(p)

    def decorator_block_start(self, pos: int) -> Optional[int]:
        return self.seq(pos, "{{", _TILDE, "#", "*", self.exp_line, _TILDE, "}}")

    def decorator_block_end(self, pos: int) -> Optional[int]:
        return self.helper_block_end(pos)

    def decorator_block(self, pos: int) -> Optional[int]:
        p = self.decorator_block_start(pos)
        if p is None:
            return None
        return self.decorator_block_end(self.template(p))

    def partial_block_start(self, pos: int) -> Optional[int]:
        return self.seq(pos, "{{", _TILDE, "#", ">", self.partial_exp_line, _TILDE, "}}")

    def partial_block_end(self, pos: int) -> Optional[int]:
        return self.seq(pos, "{{", _TILDE, "/", self.partial_identifier, _TILDE, "}}")

    def partial_block(self, pos: int) -> Optional[int]:
        p = self.partial_block_start(pos)
        if p is None:
            return None
        return self.partial_block_end(self.template(p))

    def raw_block_start(self, pos: int) -> Optional[int]:
        return self.seq(pos, "{{{{", _TILDE, self.exp_line, _TILDE, "}}}}")

    def raw_block_end(self, pos: int) -> Optional[int]:
        return self.seq(pos, "{{{{", _TILDE, "/", self.identifier, _TILDE, "}}}}")

    def raw_block(self, pos: int) -> Optional[int]:
        p = self.raw_block_start(pos)
        if p is None:
            return None
        return self.raw_block_end(self.raw_block_text(p))

    def _comment_open(self, pos: int) -> Optional[int]:
        return self.seq(pos, "{{", _TILDE, "!")

    def hbs_comment(self, pos: int) -> Optional[int]:
        p = self._comment_open(pos)
        if p is None:
            return None
        p = self.lit(self.ws(p), "--")
        if p is None:
            return None
        while p < self.n:
            if self.text.startswith("--", p):
                end = self.seq(p + 2, _TILDE, "}}")
                if end is not None:
                    return end
            p += 1
        return None

    def hbs_comment_compact(self, pos: int) -> Optional[int]:
        p = self._comment_open(pos)
        if p is None:
            return None
        close = self.text.find("}}", p)
        return close + 2 if close >= 0 else None

    def template(self, pos: int) -> int:
        p = pos
        while True:
            end = self.alt(
                p,
                self.raw_text,
                self.expression,
                self.html_expression,
                self.helper_block,
                self.raw_block,
                self.hbs_comment,
                self.hbs_comment_compact,
                self.decorator_expression,
                self.decorator_block,
                self.partial_expression,
                self.partial_block,
            )
            if end is None or end == p:
                return p
            p = end

    def rule_fn(self, rule: Rule) -> _Fn:
        special: dict[Rule, _Fn] = {
            Rule.PATH: self.path_inline,
            Rule.PATH_UP: lambda p: self.lit(p, ".."),
            Rule.PATH_ROOT: lambda p: self.lit(p, "@root"),
            Rule.PATH_LOCAL: lambda p: self.lit(p, "@"),
        }
        return special.get(rule) or getattr(self, rule.value)


def match_rule(rule: Rule, text: str) -> int:
    """Match a rule at the start of text and return where the match ends."""
    end = _Parser(text).rule_fn(rule)(0)
    if end is None:
        raise GrammarError(rule, text)
    return end


def matches_fully(rule: Rule, text: str) -> bool:
    """Whether the whole of text is one instance of the rule."""
    try:
        return match_rule(rule, text) == len(text)
    except GrammarError:
        return False


def path_tokens(raw: str) -> list[tuple[Rule, str]]:
    """Split a path reference into its root, local, up and name tokens."""
    parser = _Parser(raw)
    if parser.path_inline(0) is None:
        raise GrammarError(Rule.PATH, raw)
    return list(parser.tokens)