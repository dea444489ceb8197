"""
Tests for the value model: undefined, truthiness and path lookup.
"""

import math
import pickle

import pytest

from condexpr import (
    UNDEFINED,
    LimitExceededError,
    Stack,
    get_type_name,
    is_truthy,
    resolve_path,
    values_equal,
)
from condexpr.values import split_path


class TestUndefined:
    """Tests for the UNDEFINED sentinel."""

    def test_is_a_singleton(self):
        assert type(UNDEFINED)() is UNDEFINED

    def test_is_falsy(self):
        assert not UNDEFINED

    def test_repr(self):
        assert repr(UNDEFINED) == "undefined"

    def test_survives_pickling(self):
        assert pickle.loads(pickle.dumps(UNDEFINED)) is UNDEFINED

    def test_is_distinct_from_null(self):
        assert UNDEFINED is not None
        assert values_equal(UNDEFINED, None) is False
        assert values_equal(UNDEFINED, UNDEFINED) is True


class TestTruthiness:
    """Tests for is_truthy."""

    @pytest.mark.parametrize("value", [None, UNDEFINED, False, 0, 0.0, math.nan, ""])
    def test_falsy_values(self, value):
        assert is_truthy(value) is False

    @pytest.mark.parametrize("value", [True, 1, -1, 0.5, 10**400, "0", "false", [], {}, [0]])
    def test_truthy_values(self, value):
        assert is_truthy(value) is True


class TestTypeNames:
    """Tests for get_type_name."""

    def test_type_names(self):
        assert get_type_name(UNDEFINED) == "undefined"
        assert get_type_name(None) == "null"
        assert get_type_name(True) == "boolean"
        assert get_type_name(1) == "number"
        assert get_type_name(1.5) == "number"
        assert get_type_name("s") == "string"
        assert get_type_name([1]) == "array"
        assert get_type_name((1,)) == "array"
        assert get_type_name({"a": 1}) == "object"


class TestResolvePath:
    """Tests for dotted path lookup."""

    def test_split_path(self):
        assert split_path("a.b[0].c") == ["a", "b", "0", "c"]
        assert split_path("a['b'].c") == ["a", "b", "c"]

    def test_resolves_nested_mappings(self):
        assert resolve_path({"a": {"b": {"c": 3}}}, "a.b.c") == 3

    def test_missing_segment_is_undefined(self):
        assert resolve_path({"a": {}}, "a.b.c") is UNDEFINED

    def test_lookup_through_null_is_undefined(self):
        assert resolve_path({"a": None}, "a.b") is UNDEFINED

    def test_present_null_is_returned(self):
        assert resolve_path({"a": {"b": None}}, "a.b") is None

    def test_list_indexes(self):
        data = {"a": [10, 20]}
        assert resolve_path(data, "a.1") == 20
        assert resolve_path(data, "a[0]") == 10
        assert resolve_path(data, "a.2") is UNDEFINED
        assert resolve_path(data, "a.x") is UNDEFINED

    def test_length(self):
        assert resolve_path({"a": [1, 2, 3]}, "a.length") == 3
        assert resolve_path({"s": "abcd"}, "s.length") == 4

    def test_scalars_have_no_members(self):
        assert resolve_path({"a": 5}, "a.b") is UNDEFINED
        assert resolve_path({"s": "abc"}, "s.0") is UNDEFINED

    def test_whole_path_key_first(self):
        assert resolve_path({"a.b": 1, "a": {"b": 2}}, "a.b") == 1

    def test_depth_limit(self):
        data = {"a": {"b": {"c": 1}}}
        assert resolve_path(data, "a.b.c", max_depth=3) == 1
        with pytest.raises(LimitExceededError):
            resolve_path(data, "a.b.c", max_depth=2)
        assert resolve_path({"a.b.c": 1}, "a.b.c", max_depth=2) == 1

    def test_non_mapping_data(self):
        assert resolve_path(None, "a") is UNDEFINED
        assert resolve_path([1, 2], "0") == 1


class TestStack:
    """Tests for the evaluation stack."""

    def test_lifo_order(self):
        stack: Stack[int] = Stack()
        stack.push(1)
        stack.push(2)
        assert stack.peek() == 2
        assert stack.pop() == 2
        assert stack.pop() == 1
        assert stack.empty()

    def test_len(self):
        stack: Stack[str] = Stack()
        assert len(stack) == 0
        stack.push("x")
        assert len(stack) == 1

    def test_underflow(self):
        stack: Stack[int] = Stack()
        with pytest.raises(IndexError):
            stack.pop()
        with pytest.raises(IndexError):
            stack.peek()
