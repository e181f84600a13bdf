"""
Constraint evaluator: operator + limit value tests applied to one value.

A constraints mapping such as ``{"max": 5, "not": 3}`` parses into a
ConstraintSet (AND semantics). The ``OR`` key introduces a disjunction of
nested constraint sets. Parsing resolves every key to a concrete node once;
evaluation never dispatches on strings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Union

from .errors import RuleSyntaxError, RuleTypeError
from .util import Primitive, describe, is_primitive

OperatorFn = Callable[[Any, Any], bool]

OR_OPERATOR = "OR"


def primitive_kind(value: Primitive) -> str:
    """One of "none", "bool", "number" or "str"; subclasses map to their base kind."""
    if value is None:
        return "none"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    return "str"


def strict_equal(value: Primitive, limit: Primitive) -> bool:
    """Equality without cross-kind coercion (True is not 1, "1" is not 1)."""
    if primitive_kind(value) != primitive_kind(limit):
        return False
    return value == limit


def _ordered(compare: OperatorFn) -> OperatorFn:
    def apply(value: Primitive, limit: Primitive) -> bool:
        if value is None or limit is None:
            return False
        try:
            return bool(compare(value, limit))
        except TypeError:
            # str vs number and friends have no ordering
            return False

    return apply


PRIMITIVE_OPERATORS: dict[str, OperatorFn] = {
    "max": _ordered(lambda v, c: v <= c),
    "min": _ordered(lambda v, c: v >= c),
    "is": strict_equal,
    "not": lambda v, c: not strict_equal(v, c),
    "under": _ordered(lambda v, c: v < c),
    "over": _ordered(lambda v, c: v > c),
}


@dataclass(frozen=True)
class PrimitiveConstraint:
    operator: str
    limit_value: Primitive

    def evaluate(self, value: Any) -> bool:
        if not is_primitive(value):
            raise RuleTypeError(
                f"Operator '{self.operator}' expects a primitive input value, but got {describe(value)}"
            )
        return PRIMITIVE_OPERATORS[self.operator](value, self.limit_value)

    def constraint_values(self) -> frozenset:
        return frozenset([self.limit_value])


@dataclass(frozen=True)
class OrConstraint:
    branches: tuple["ConstraintSet", ...]

    def evaluate(self, value: Any) -> bool:
        return any(branch.evaluate(value) for branch in self.branches)

    def constraint_values(self) -> frozenset:
        values: frozenset = frozenset()
        for branch in self.branches:
            values |= branch.constraint_values()
        return values


Constraint = Union[PrimitiveConstraint, OrConstraint]


@dataclass(frozen=True)
class ConstraintSet:
    """All constraints must hold for a value (an empty set always holds)."""

    constraints: tuple[Constraint, ...] = ()

    def evaluate(self, value: Any) -> bool:
        return all(constraint.evaluate(value) for constraint in self.constraints)

    def constraint_values(self) -> frozenset:
        """Every literal limit value referenced anywhere below this set."""
        values: frozenset = frozenset()
        for constraint in self.constraints:
            values |= constraint.constraint_values()
        return values

    def __len__(self) -> int:
        return len(self.constraints)


def _parse_or(operator: str, operand: Any) -> OrConstraint:
    if not isinstance(operand, (list, tuple)):
        raise RuleSyntaxError(f"Operator '{operator}' expects a list, but got {describe(operand)}")
    return OrConstraint(branches=tuple(parse_constraints(item) for item in operand))


def _parse_primitive(operator: str, operand: Any) -> PrimitiveConstraint:
    if operator not in PRIMITIVE_OPERATORS:
        raise RuleSyntaxError(f"Invalid constraint operator: {operator!r}")
    if not is_primitive(operand):
        raise RuleSyntaxError(f"Operator '{operator}' expects a primitive, but got {describe(operand)}")
    return PrimitiveConstraint(operator=operator, limit_value=operand)


# Group operators; every other key is looked up in PRIMITIVE_OPERATORS.
GROUP_PARSERS: dict[str, Callable[[str, Any], Constraint]] = {
    OR_OPERATOR: _parse_or,
}


def parse_constraint(operator: Any, operand: Any) -> Constraint:
    if not isinstance(operator, str):
        raise RuleSyntaxError(f"Constraint operator must be a string, got {describe(operator)}")
    parser = GROUP_PARSERS.get(operator, _parse_primitive)
    return parser(operator, operand)


def parse_constraints(obj: Any) -> ConstraintSet:
    """
    Parse a constraints mapping into a ConstraintSet.

    Raises:
        RuleSyntaxError: if `obj` is not a mapping, an operator is unknown,
            an ``OR`` operand is not a list, or a limit value is not a
            primitive.
    """
    if not isinstance(obj, Mapping):
        raise RuleSyntaxError(f"Constraints mapping expected, instead got {describe(obj)}")
    return ConstraintSet(
        constraints=tuple(parse_constraint(operator, operand) for operator, operand in obj.items())
    )
