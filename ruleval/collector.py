"""
Accessor data collection: which accessors a ruleset needs, and what for.

The parameter tree is walked once (every OR branch included, since values
must be known before any branch is chosen) and each single parameter is
reported to an AccessorDataBuilder. The builder produces one immutable
AccessorRequest per distinct accessor name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable

from .models import AccessorRequest

if TYPE_CHECKING:
    from .parameters import ParameterSet


@dataclass
class _AccessorAccumulator:
    # insertion-ordered set of child paths; "" marks direct access
    child_paths: dict[str, None] = field(default_factory=dict)


class AccessorDataBuilder:
    """Accumulates constraint values and child paths per accessor."""

    def __init__(self) -> None:
        self._values_by_parameter: dict[str, frozenset] = {}
        self._accessors: dict[str, _AccessorAccumulator] = {}

    def add(
        self,
        *,
        parameter_name: str,
        accessor: str,
        constraint_values: Iterable,
        child_path: str = "",
    ) -> None:
        previous = self._values_by_parameter.get(parameter_name, frozenset())
        self._values_by_parameter[parameter_name] = previous | frozenset(constraint_values)

        acc = self._accessors.setdefault(accessor, _AccessorAccumulator())
        acc.child_paths[child_path] = None

    def constraint_values_for(self, parameter_name: str) -> frozenset:
        return self._values_by_parameter.get(parameter_name, frozenset())

    @property
    def accessor_names(self) -> list[str]:
        return list(self._accessors.keys())

    def build(self) -> tuple[AccessorRequest, ...]:
        requests: list[AccessorRequest] = []
        for accessor, acc in self._accessors.items():
            children = {
                path: self.constraint_values_for(f"{accessor}.{path}")
                for path in acc.child_paths
                if path
            }
            requests.append(
                AccessorRequest(
                    accessor_name=accessor,
                    constraint_values=self.constraint_values_for(accessor),
                    children_constraint_values=MappingProxyType(children),
                )
            )
        return tuple(requests)


def collect_accessor_requests(parameters: "ParameterSet") -> tuple[AccessorRequest, ...]:
    """Walk a parsed ruleset and return the accessor requests it implies."""
    builder = AccessorDataBuilder()
    parameters.collect(builder)
    return builder.build()
