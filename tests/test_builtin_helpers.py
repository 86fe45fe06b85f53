import logging

import pytest

from barscope.builtin_helpers import (
    BUILTIN_HELPERS,
    and_,
    eq,
    gt,
    gte,
    length,
    log,
    lookup,
    lt,
    lte,
    ne,
    not_,
    or_,
)
from barscope.errors import RenderError, RenderErrorReason
from barscope.value import PathAndJson, ScopedJson, is_truthy


def const(value):
    return PathAndJson(None, ScopedJson.constant(value))


def ref(path, value):
    return PathAndJson(path, ScopedJson.context(value, [path]))


def call(name, *args, strict=False):
    params = [a if isinstance(a, PathAndJson) else const(a) for a in args]
    return BUILTIN_HELPERS[name].call_inner(params, {}, strict)


def sub(name, *args):
    return PathAndJson(None, call(name, *args))


def condition(name, *args):
    return is_truthy(call(name, *args).as_json(), False)


def test_conditions():
    assert condition("gt", 5, 3) is True
    assert condition("gt", 3, 5) is False
    assert condition("or", sub("gt", 3, 5), sub("gt", 5, 3)) is True
    assert condition("not", []) is True
    assert condition("and", None, 4) is False


@pytest.mark.parametrize(
    "x,y,expected",
    [
        (5, 5, True),
        (5, 6, False),
        ("foo", "foo", True),
        ("foo", "Foo", False),
        ([5], [5], True),
        ([5], [4], False),
        (5, "5", False),
        (5, [5], False),
    ],
)
def test_eq(x, y, expected):
    assert condition("eq", x, y) is expected
    assert eq(x, y) is expected


@pytest.mark.parametrize(
    "x,y,expected",
    [(5, 6, True), (5, 5, False), ("foo", "foo", False), ("foo", "Foo", True)],
)
def test_ne(x, y, expected):
    assert condition("ne", x, y) is expected
    assert ne(x, y) is expected


def test_eq_is_json_typed():
    assert eq(True, 1) is False
    assert eq(5, 5.0) is False
    assert eq({"a": [1]}, {"a": [1]}) is True


def test_nested_conditions():
    assert condition("gt", 5, 3) is True
    assert condition("not", sub("gt", 5, 3)) is False


def test_comparisons_direct():
    assert gt(2, 1) and not gt(1, 1)
    assert gte(1, 1) and not gte(0, 1)
    assert lt(1, 2) and not lt(2, 2)
    assert lte(2, 2) and not lte(3, 2)


def test_comparison_type_mismatch():
    with pytest.raises(RenderError) as info:
        call("gt", "5", 3)
    assert info.value.reason is RenderErrorReason.PARAM_TYPE_MISMATCH_FOR_NAME


def test_boolean_direct():
    assert and_(1, "a") is True
    assert or_(0, "") is False
    assert not_(0) is True


def test_len():
    assert call("len", [1, 2, 3]).render() == "3"
    assert call("len", {"a": 1, "b": 2}).render() == "2"
    assert call("len", "tomcat").render() == "6"
    assert call("len", 3).render() == "0"


def test_len_counts_utf8_bytes():
    assert length("你好") == 6


def test_lookup():
    m = {"v1": [1, 2, 3], "v2": [9, 8, 7]}
    v2 = ref("../v2", m["v2"])
    assert "".join(lookup([v2, const(i)]).render() for i in range(3)) == "987"
    assert "".join(lookup([v2, const(1)]).render() for _ in m["v1"]) == "888"
    assert lookup([ref("kk", {"a": "world"}), const("a")]).render() == "world"

    with pytest.raises(RenderError):
        lookup([])
    with pytest.raises(RenderError) as info:
        lookup([ref("v1", m["v1"])])
    assert info.value.reason_args == ("lookup", 1)

    assert lookup([const(None), const(1)]).render() == ""
    assert lookup([ref("v1", m["v1"]), const(3)]).render() == ""


def test_strict_lookup():
    empty = ref("kk", [])
    with_null = ref("kk", [None])
    assert lookup([empty, const(1)]).render() == ""
    assert lookup([with_null, const(0)]).as_json() is None

    with pytest.raises(RenderError) as info:
        lookup([empty, const(1)], True)
    assert info.value.reason is RenderErrorReason.MISSING_VARIABLE
    assert lookup([with_null, const(0)], True).render() == ""


def test_log_helper(caplog):
    with caplog.at_level(logging.INFO, logger="barscope"):
        log([ref("this", True)], {"level": const("warn")})
        log([ref("this", True)], {})
    levels = [r.levelno for r in caplog.records]
    assert levels == [logging.WARNING, logging.INFO]
    assert caplog.records[0].getMessage() == "this: true"

    with pytest.raises(RenderError) as info:
        log([ref("this", True)], {"level": const("hello")})
    assert info.value.reason is RenderErrorReason.INVALID_LOGGING_LEVEL
    assert str(info.value) == "Invalid logging level: hello"


def test_log_joins_params(caplog):
    with caplog.at_level(logging.INFO, logger="barscope"):
        log([const(1), ref("name", "x")], {"level": const("INFO")})
    assert caplog.records[-1].getMessage() == "1, name: x"