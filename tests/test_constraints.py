from __future__ import annotations

from datetime import date
from enum import Enum, IntEnum

import pytest

from ruleval.constraints import (
    ConstraintSet,
    OrConstraint,
    PrimitiveConstraint,
    parse_constraints,
    strict_equal,
)
from ruleval.errors import RuleSyntaxError, RuleTypeError


@pytest.mark.parametrize(
    "constraints, value, expected",
    [
        ({"max": 2}, 2, True),
        ({"max": 2}, 3, False),
        ({"min": 2}, 2, True),
        ({"min": 2}, 1, False),
        ({"under": 2}, 1.999, True),
        ({"under": 2}, 2, False),
        ({"over": -3}, 1, True),
        ({"over": 1}, 1, False),
        ({"is": 1}, 1, True),
        ({"is": 1}, 2, False),
        ({"not": 100}, 1, True),
        ({"not": None}, None, False),
        ({"is": None}, None, True),
        ({"is": "string", "not": "sterling", "max": "tring", "min": "ring"}, "string", True),
    ],
)
def test_primitive_operators(constraints: dict, value: object, expected: bool) -> None:
    assert parse_constraints(constraints).evaluate(value) is expected


def test_all_constraints_must_hold() -> None:
    constraints = parse_constraints({"max": 2, "min": 1, "is": 1})
    assert constraints.evaluate(1)
    assert not constraints.evaluate(2)


def test_empty_constraint_set_holds() -> None:
    assert parse_constraints({}).evaluate(42)


def test_strict_equality_does_not_coerce() -> None:
    assert strict_equal(1, 1.0)
    assert not strict_equal(1, True)
    assert not strict_equal(0, False)
    assert not strict_equal("1", 1)
    assert not strict_equal(None, 0)
    assert parse_constraints({"not": True}).evaluate(1)


class _Status(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class _Level(IntEnum):
    LOW = 1


def test_str_subclass_values_compare_by_kind() -> None:
    assert parse_constraints({"is": "active"}).evaluate(_Status.ACTIVE)
    assert not parse_constraints({"not": "active"}).evaluate(_Status.ACTIVE)
    assert not parse_constraints({"is": "active"}).evaluate(_Status.CLOSED)
    assert parse_constraints({"is": 1, "max": 1}).evaluate(_Level.LOW)
    assert not strict_equal(_Level.LOW, True)


@pytest.mark.parametrize("constraints", [{"max": 5}, {"min": 5}, {"under": 5}, {"over": 5}])
def test_unorderable_values_fail(constraints: dict) -> None:
    assert not parse_constraints(constraints).evaluate("five")
    assert not parse_constraints(constraints).evaluate(None)


def test_or_constraint_any_branch() -> None:
    constraints = parse_constraints({"OR": [{"is": 10}, {"over": 1.9999}]})
    assert constraints.evaluate(2)
    assert constraints.evaluate(10)
    assert not constraints.evaluate(1)


def test_or_constraint_without_branches_fails() -> None:
    assert not parse_constraints({"OR": []}).evaluate(1)


def test_nested_or_constraints() -> None:
    constraints = parse_constraints(
        {
            "OR": [
                {"is": False},
                {"OR": [{"is": False}, {"OR": [{"is": False}, {"is": True}]}]},
            ]
        }
    )
    assert constraints.evaluate(True)
    assert constraints.evaluate(False)
    assert not constraints.evaluate("x")


def test_parse_builds_variants_in_order() -> None:
    constraints = parse_constraints({"max": 5, "OR": [{"is": 1}]})
    assert isinstance(constraints, ConstraintSet)
    first, second = constraints.constraints
    assert first == PrimitiveConstraint(operator="max", limit_value=5)
    assert isinstance(second, OrConstraint)
    assert len(second.branches) == 1


def test_constraint_values_are_collected_recursively() -> None:
    constraints = parse_constraints({"max": 5, "not": 3, "OR": [{"is": 7}, {"OR": [{"is": "x"}]}]})
    assert constraints.constraint_values() == frozenset({5, 3, 7, "x"})


@pytest.mark.parametrize("specimen", [[1], "x", 33, date.today(), lambda: 55, None])
def test_parse_rejects_non_mapping(specimen: object) -> None:
    with pytest.raises(RuleSyntaxError):
        parse_constraints(specimen)


def test_parse_rejects_unknown_operator() -> None:
    with pytest.raises(RuleSyntaxError, match="foobars"):
        parse_constraints({"foobars": 32000})


@pytest.mark.parametrize("specimen", [[1], date.today(), {}, lambda: 55, (1, 2)])
def test_parse_rejects_non_primitive_limit(specimen: object) -> None:
    with pytest.raises(RuleSyntaxError):
        parse_constraints({"max": specimen})


@pytest.mark.parametrize("specimen", [1, None, "x", date.today(), {}, lambda: 55])
def test_parse_rejects_or_without_list(specimen: object) -> None:
    with pytest.raises(RuleSyntaxError):
        parse_constraints({"OR": specimen})


@pytest.mark.parametrize("specimen", [[1], date.today(), {}, lambda: 55, {1, 2}])
def test_evaluate_rejects_non_primitive_value(specimen: object) -> None:
    with pytest.raises(RuleTypeError):
        parse_constraints({"max": 5}).evaluate(specimen)


def test_rule_type_error_is_a_type_error() -> None:
    with pytest.raises(TypeError):
        parse_constraints({"is": 1}).evaluate([1])
