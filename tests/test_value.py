from dataclasses import dataclass

import pytest

from barscope.value import (
    PathAndJson,
    ScopedJson,
    as_string,
    is_truthy,
    json_value,
    render_json,
    to_json,
)


def test_json_render():
    raw = '<p>Hello world</p>\n<p thing="hello"</p>'
    assert render_json(raw) == raw


def test_json_number_truthy():
    assert is_truthy(to_json(16), False)
    assert is_truthy(to_json(16), True)

    assert is_truthy(to_json(0), True)
    assert not is_truthy(to_json(0), False)

    assert is_truthy(to_json(1.0), False)
    assert is_truthy(to_json(1.0), True)

    assert not is_truthy(to_json(None), False)
    assert not is_truthy(to_json(None), True)

    assert not is_truthy(to_json(float("nan")), False)
    assert not is_truthy(to_json(float("nan")), True)


def test_raw_nan_is_not_truthy():
    assert not is_truthy(float("nan"), True)
    assert not is_truthy(float("nan"), False)


def test_subnormal_not_truthy_without_zero():
    assert not is_truthy(5e-324, False)
    assert is_truthy(5e-324, True)


def test_collections_truthy():
    assert not is_truthy([], False)
    assert is_truthy([0], False)
    assert not is_truthy({}, False)
    assert is_truthy({"a": 1}, False)
    assert not is_truthy("", False)
    assert is_truthy("x", False)


def test_render_array():
    assert render_json([1, 2, 3]) == "[1, 2, 3]"
    assert render_json([42, {"wow": "cool"}, [[]]]) == "[42, [object], [[]]]"
    assert render_json(["e"]) == "[e]"


def test_render_scalars():
    assert render_json({"a": 1}) == "[object]"
    assert render_json(None) == ""
    assert render_json(True) == "true"
    assert render_json(27) == "27"
    assert render_json(4.5) == "4.5"
    assert render_json(10.1) == "10.1"
    assert render_json(1.0) == "1.0"


def test_scoped_missing():
    missing = ScopedJson.missing()
    assert missing.is_missing()
    assert missing.as_json() is None
    assert missing.render() == ""
    assert missing.context_path() is None


def test_scoped_context_path():
    scoped = ScopedJson.context("China", ["addr", "country"])
    assert scoped.context_path() == ["addr", "country"]
    assert scoped.render() == "China"
    derived = scoped.into_derived()
    assert derived.context_path() is None
    assert derived.as_json() == "China"
    assert not derived.is_missing()


def test_scoped_constant():
    scoped = ScopedJson.constant([1, 2])
    assert scoped.as_json() == [1, 2]
    assert scoped.context_path() is None


def test_path_and_json():
    pj = PathAndJson("a.b", ScopedJson.context(2, ["a", "b"]))
    assert pj.value() == 2
    assert pj.render() == "2"
    assert pj.context_path() == ["a", "b"]
    assert pj.relative_path == "a.b"
    assert not pj.is_value_missing()
    gone = PathAndJson("x", ScopedJson.missing())
    assert gone.is_value_missing()
    assert gone.value() is None


def test_to_json_dataclass():
    @dataclass
    class Team:
        name: str
        pts: int

    data = to_json([Team("Hebei CFFC", 27)])
    assert data == [{"name": "Hebei CFFC", "pts": 27}]


def test_to_json_unserializable_is_null():
    assert to_json(object()) is None
    with pytest.raises(TypeError):
        json_value(object())


def test_to_json_int_keys_become_strings():
    assert to_json({1: "a"}) == {"1": "a"}


def test_as_string():
    assert as_string("miles") == "miles"
    assert as_string(5) is None