"""
Parameter tree: named parameters bound to constraint sets.

A ruleset mapping parses into a ParameterSet (AND across its keys). Each
key is either ``OR`` (a list of nested rulesets, any of which may pass) or
a dotted parameter name ``accessor.child.grandchild`` whose value is a
constraints mapping.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Collection, Union

from .constraints import OR_OPERATOR, ConstraintSet, parse_constraints
from .errors import RuleSyntaxError
from .models import PASSED, EvalResult
from .util import MISSING, describe, safe_get

if TYPE_CHECKING:
    from .collector import AccessorDataBuilder

RESERVED_NAMES = frozenset({"OR", "AND", "or", "and"})


@dataclass(frozen=True)
class SingleParameter:
    name: str
    accessor: str
    path: tuple[str, ...]
    constraints: ConstraintSet

    def resolve(self, values: Mapping[str, Any]) -> Any:
        """Walk `path` from the accessor's value; missing segments are errors."""
        value = values.get(self.accessor, MISSING)
        if value is MISSING:
            raise RuleSyntaxError(f"No value was resolved for accessor '{self.accessor}'")

        consumed = self.accessor
        for key in self.path:
            consumed = f"{consumed}.{key}"
            value = safe_get(value, key)
            if value is MISSING:
                raise RuleSyntaxError(f"Parameter '{consumed}' doesn't exist in '{self.accessor}'")
        return value

    def evaluate(self, values: Mapping[str, Any]) -> EvalResult:
        if self.constraints.evaluate(self.resolve(values)):
            return PASSED
        return EvalResult(False, self.name)

    def collect(self, builder: "AccessorDataBuilder") -> None:
        builder.add(
            parameter_name=self.name,
            accessor=self.accessor,
            constraint_values=self.constraints.constraint_values(),
            child_path=".".join(self.path),
        )


@dataclass(frozen=True)
class OrParameter:
    branches: tuple["ParameterSet", ...]

    def evaluate(self, values: Mapping[str, Any]) -> EvalResult:
        # Only the last branch's failure is reported when every branch fails.
        result = EvalResult(False)
        for branch in self.branches:
            result = branch.evaluate(values)
            if result.value:
                return result
        return result

    def collect(self, builder: "AccessorDataBuilder") -> None:
        for branch in self.branches:
            branch.collect(builder)


ParameterNode = Union[SingleParameter, OrParameter]


@dataclass(frozen=True)
class ParameterSet:
    """Parameters of one ruleset level; all must pass, in order."""

    parameters: tuple[ParameterNode, ...] = ()

    def evaluate(self, values: Mapping[str, Any]) -> EvalResult:
        for parameter in self.parameters:
            result = parameter.evaluate(values)
            if not result.value:
                return result
        return PASSED

    def collect(self, builder: "AccessorDataBuilder") -> "AccessorDataBuilder":
        for parameter in self.parameters:
            parameter.collect(builder)
        return builder

    def __len__(self) -> int:
        return len(self.parameters)


def split_parameter_name(name: str) -> tuple[str, tuple[str, ...]]:
    """Split ``"o.v1.x"`` into ``("o", ("v1", "x"))``, validating each segment."""
    accessor, *path = name.split(".")
    if accessor in RESERVED_NAMES:
        raise RuleSyntaxError(f"Parameter name '{accessor}' is reserved")
    for segment in (accessor, *path):
        if not segment:
            raise RuleSyntaxError(f"Parameter name {name!r} has an empty segment")
    return accessor, tuple(path)


def _parse_or(name: str, operand: Any, ignored: Collection[str]) -> OrParameter:
    if not isinstance(operand, (list, tuple)):
        raise RuleSyntaxError(f"Operator '{name}' expects a list, but got {describe(operand)}")
    return OrParameter(branches=tuple(parse_ruleset(item, ignored) for item in operand))


def _parse_single(name: str, operand: Any, ignored: Collection[str]) -> SingleParameter:
    if not isinstance(operand, Mapping):
        raise RuleSyntaxError(
            f"Parameter '{name}' expects a mapping with constraint definitions, but got {describe(operand)}"
        )
    accessor, path = split_parameter_name(name)
    return SingleParameter(
        name=name,
        accessor=accessor,
        path=path,
        constraints=parse_constraints(operand),
    )


GROUP_PARSERS: dict[str, Callable[[str, Any, Collection[str]], ParameterNode]] = {
    OR_OPERATOR: _parse_or,
}


def parse_parameter(name: Any, operand: Any, ignored: Collection[str] = ()) -> ParameterNode:
    if not isinstance(name, str):
        raise RuleSyntaxError(f"Parameter name must be a string, got {describe(name)}")
    parser = GROUP_PARSERS.get(name, _parse_single)
    return parser(name, operand, ignored)


def parse_ruleset(obj: Any, ignored: Collection[str] = ()) -> ParameterSet:
    """
    Parse a ruleset mapping into a ParameterSet.

    Keys listed in `ignored` are dropped before parsing, at every nesting
    level, so they never need an accessor and never fail an evaluation.

    Raises:
        RuleSyntaxError: on any malformed parameter or constraint.
    """
    if not isinstance(obj, Mapping):
        raise RuleSyntaxError(f"A mapping with parameter definitions is expected, instead got {describe(obj)}")
    return ParameterSet(
        parameters=tuple(
            parse_parameter(name, operand, ignored) for name, operand in obj.items() if name not in ignored
        )
    )
