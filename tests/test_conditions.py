"""Tests for aumai_mockengine.conditions: condition evaluation."""

from __future__ import annotations

import pytest

from aumai_mockengine.conditions import evaluate_condition, resolve_field
from aumai_mockengine.models import Condition, ConditionOperator


def _cond(field: str, operator: str, value: object = None) -> Condition:
    return Condition(field=field, operator=ConditionOperator(operator), value=value)


# ---------------------------------------------------------------------------
# Field resolution
# ---------------------------------------------------------------------------


class TestResolveField:
    def test_top_level_key(self) -> None:
        assert resolve_field("a", {"a": 1}) == 1

    def test_nested_path(self) -> None:
        assert resolve_field("user.name", {"user": {"name": "Ada"}}) == "Ada"

    def test_list_index(self) -> None:
        body = {"items": [{"sku": "A"}, {"sku": "B"}]}
        assert resolve_field("items.1.sku", body) == "B"

    def test_missing_intermediate_is_missing(self) -> None:
        assert not evaluate_condition(_cond("a.b.c", "exists"), {"a": {}})

    def test_walking_through_scalar_is_missing(self) -> None:
        assert not evaluate_condition(_cond("a.b", "exists"), {"a": 5})


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class TestExists:
    def test_missing_nested_field(self) -> None:
        assert evaluate_condition(_cond("a.b", "exists"), {}) is False

    def test_null_field(self) -> None:
        assert evaluate_condition(_cond("a", "exists"), {"a": None}) is False

    def test_falsy_but_present(self) -> None:
        assert evaluate_condition(_cond("a", "exists"), {"a": 0}) is True
        assert evaluate_condition(_cond("a", "exists"), {"a": ""}) is True


class TestEquality:
    def test_eq_string(self) -> None:
        assert evaluate_condition(_cond("role", "eq", "admin"), {"role": "admin"})

    def test_eq_is_strict_about_types(self) -> None:
        assert not evaluate_condition(_cond("n", "eq", "1"), {"n": 1})

    def test_eq_bool_is_not_number(self) -> None:
        assert not evaluate_condition(_cond("flag", "eq", 1), {"flag": True})
        assert evaluate_condition(_cond("flag", "eq", True), {"flag": True})

    def test_eq_int_and_float(self) -> None:
        assert evaluate_condition(_cond("n", "eq", 2.0), {"n": 2})

    def test_neq(self) -> None:
        assert evaluate_condition(_cond("role", "neq", "admin"), {"role": "user"})
        assert not evaluate_condition(_cond("role", "neq", "admin"), {"role": "admin"})

    def test_neq_missing_field(self) -> None:
        assert evaluate_condition(_cond("role", "neq", "admin"), {})

    def test_omitted_value_does_not_equal_null(self) -> None:
        condition = Condition(field="token", operator=ConditionOperator.eq)
        assert not evaluate_condition(condition, {"token": None})
        assert evaluate_condition(condition, {})

    def test_null_value_does_not_equal_missing_field(self) -> None:
        assert not evaluate_condition(_cond("token", "eq", None), {})
        assert evaluate_condition(_cond("token", "eq", None), {"token": None})

    def test_omitted_value_in_wire_mapping(self) -> None:
        condition = {"field": "token", "operator": "neq"}
        assert evaluate_condition(condition, {"token": None})


class TestOrdering:
    def test_gt_numeric(self) -> None:
        assert evaluate_condition(_cond("count", "gt", 5), {"count": 10})

    def test_gt_rejects_numeric_string(self) -> None:
        assert evaluate_condition(_cond("count", "gt", 5), {"count": "10"}) is False

    def test_lt_numeric(self) -> None:
        assert evaluate_condition(_cond("price", "lt", 9.5), {"price": 3})

    def test_lt_equal_is_false(self) -> None:
        assert not evaluate_condition(_cond("price", "lt", 3), {"price": 3})

    def test_gt_missing_field(self) -> None:
        assert not evaluate_condition(_cond("count", "gt", 5), {})

    def test_gt_bool_field_is_not_numeric(self) -> None:
        assert not evaluate_condition(_cond("flag", "gt", 0), {"flag": True})

    def test_gt_non_numeric_expected(self) -> None:
        assert not evaluate_condition(_cond("count", "gt", "5"), {"count": 10})


class TestContains:
    def test_array_membership(self) -> None:
        assert evaluate_condition(_cond("tags", "contains", "x"), {"tags": ["x", "y"]}) is True

    def test_array_non_member(self) -> None:
        assert not evaluate_condition(_cond("tags", "contains", "z"), {"tags": ["x", "y"]})

    def test_substring(self) -> None:
        assert evaluate_condition(_cond("email", "contains", "@corp"), {"email": "a@corp.io"})

    def test_substring_of_number(self) -> None:
        assert evaluate_condition(_cond("code", "contains", 5), {"code": "a5"})
        assert evaluate_condition(_cond("code", "contains", 2.0), {"code": "v2"})
        assert not evaluate_condition(_cond("code", "contains", 6), {"code": "a5"})

    def test_substring_of_bool(self) -> None:
        assert evaluate_condition(_cond("note", "contains", True), {"note": "is true"})

    def test_substring_of_structured_value(self) -> None:
        assert not evaluate_condition(_cond("note", "contains", ["a"]), {"note": "a"})

    def test_non_container(self) -> None:
        assert not evaluate_condition(_cond("n", "contains", 1), {"n": 123})

    def test_array_membership_is_strict(self) -> None:
        assert not evaluate_condition(_cond("ids", "contains", 1), {"ids": [True]})


class TestMatches:
    def test_regex_search(self) -> None:
        body = {"phone": "+1-555-0100"}
        assert evaluate_condition(_cond("phone", "matches", r"^\+1-\d{3}"), body)

    def test_regex_no_match(self) -> None:
        assert not evaluate_condition(_cond("code", "matches", r"^\d+$"), {"code": "AB1"})

    def test_non_string_field(self) -> None:
        assert not evaluate_condition(_cond("code", "matches", r"\d"), {"code": 12})

    def test_non_string_pattern(self) -> None:
        assert not evaluate_condition(_cond("code", "matches", 12), {"code": "12"})

    def test_invalid_pattern_is_false(self) -> None:
        assert not evaluate_condition(_cond("code", "matches", "("), {"code": "("})


# ---------------------------------------------------------------------------
# Raw mappings
# ---------------------------------------------------------------------------


class TestRawConditions:
    def test_mapping_is_accepted(self) -> None:
        raw = {"field": "a", "operator": "eq", "value": 1}
        assert evaluate_condition(raw, {"a": 1})

    @pytest.mark.parametrize("operator", ["between", "", "EQ"])
    def test_unknown_operator_is_false(self, operator: str) -> None:
        raw = {"field": "a", "operator": operator, "value": 1}
        assert evaluate_condition(raw, {"a": 1}) is False

    def test_non_mapping_body(self) -> None:
        assert not evaluate_condition(_cond("a", "exists"), None)
