# barscope

barscope holds the building blocks of a Handlebars-style template engine.
It is plain Python with no third-party dependencies.

## What is in it

- **Values** (`barscope.value`)
  - `render_json` renders a JSON-like Python value the way templates print it:
    - strings print as-is;
    - `None` prints as an empty string;
    - booleans print as `true` and `false`;
    - lists print as `[1, 2, 3]`;
    - mappings print as `[object]`.
  - `is_truthy(value, include_zero)` follows Handlebars truthiness. Zero counts
    as true only when `include_zero` is true. NaN is always false.
  - `to_json` turns data into plain JSON values, giving `None` when it cannot.
    The data may be dataclasses, mappings, sequences or enums.
  - `ScopedJson` and `PathAndJson` carry a value together with where it came
    from, which is one of constant, derived, context or missing.
- **Local variables** (`barscope.local_vars`): `LocalVars` stores `@index`-style
  variables.
- **Block scopes** (`barscope.block`)
  - `BlockContext` holds a base path or a base value, block parameters
    (`BlockParams`, `BlockParamHolder`) and local variables.
  - `create_block` starts a scope from a resolved parameter.
- **Paths** (`barscope.path`)
  - `Path.parse("a.[0]/b")` turns a template reference into `PathSeg` segments.
  - It handles `this`, `./`, `../`, `@root` and local variables such as
    `@index` and `@../index`.
  - It raises `RenderError` for an invalid path.
- **Contexts** (`barscope.context`)
  - `Context.wraps(data)` wraps your data.
  - `Context.navigate` resolves parsed path segments against a stack of
    `BlockContext` scopes, innermost first. Block parameters are included.
  - `merge_json` extends an object with extra entries.
- **Grammar** (`barscope.grammar`)
  - `match_rule(rule, text)` returns where a `Rule` match ends. It raises
    `GrammarError` when there is no match.
  - `matches_fully` tells whether the whole text is one instance of a rule.
  - `path_tokens` splits a path reference into tokens.
- **Helpers** (`barscope.helper_macro`, `barscope.builtin_helpers`)
  - The comparison and boolean helpers are `eq`, `ne`, `gt`, `gte`, `lt`,
    `lte`, `and_`, `or_` and `not_`.
  - `length` gives the length of an array or object, or the UTF-8 byte length
    of a string.
  - `lookup` reads a value by array index or object key.
  - `log` writes to the `barscope.builtin_helpers` logger at the level given by
    the `level` hash entry.
  - `json_helper` and `JsonHelper` declare typed helpers. `as_json_value`
    checks values against type names such as `i64`, `str` or `Json`.
  - `BUILTIN_HELPERS` maps template names such as `eq` and `len` to ready
    `JsonHelper` objects.
- **Output** (`barscope.output`)
  - `StringOutput` collects text in memory.
  - `WriteOutput` writes text to a text or binary stream.
- **Errors** (`barscope.errors`)
  - `RenderError` and `TemplateError` carry a reason from `RenderErrorReason`
    or `TemplateErrorReason`.
  - A `TemplateError` placed with `at()` shows a marked excerpt of the
    template around the line and column.

## Installation

```
pip install barscope
```

## Examples

```python
from barscope.context import Context
from barscope.path import Path

ctx = Context.wraps({"addr": {"country": "China"}, "titles": ["programmer"]})
print(ctx.navigate(Path.parse("addr.[country]").segs(), []).render())  # China
print(ctx.navigate(Path.parse("titles.[0]").segs(), []).render())      # programmer
```

```python
from barscope.value import render_json, is_truthy

render_json([1, 2, 3])        # "[1, 2, 3]"
render_json({"a": 1})         # "[object]"
is_truthy(0, False)           # False
is_truthy(0, True)            # True
```

```python
from barscope.builtin_helpers import gt, length

gt(5, 3)                      # True
length("tomcat")              # 6
```

```python
from barscope.grammar import Rule, matches_fully

matches_fully(Rule.EXPRESSION, "{{exp key=(sub 0)}}")   # True
```

## What it does not do

barscope does not compile or render whole templates. There is:

- no template registry;
- no partials or decorators at render time;
- no `if`, `each` or `with` block helpers;
- no loading of template files;
- no command-line tool.

It gives you the values, paths, scopes, grammar checks, errors and value
helpers that such a renderer would be built on.

## Running the tests

```
pip install barscope[test]
pytest
```