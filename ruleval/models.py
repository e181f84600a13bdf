"""Value objects passed between evaluation stages."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class EvalResult:
    """Outcome of evaluating a ruleset (or any sub-tree of it)."""

    value: bool
    parameter_name: str | None = None  # first failing dotted name; None on success

    def __bool__(self) -> bool:
        return self.value

    def __str__(self) -> str:
        if self.value:
            return "true"
        return f"false (reason: {self.parameter_name})"

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "parameter_name": self.parameter_name}


PASSED = EvalResult(True)


@dataclass(frozen=True)
class AccessorRequest:
    """
    Everything one accessor invocation is asked to provide.

    `constraint_values` are the limit values tested directly against the
    accessor's value; `children_constraint_values` maps each dotted child
    path (``"v1"``, ``"o.v1"``) to the limit values tested against it.
    Accessors receive this object as their second argument and must treat
    it as read-only.
    """

    accessor_name: str
    constraint_values: frozenset = frozenset()
    children_constraint_values: Mapping[str, frozenset] = field(
        default_factory=lambda: MappingProxyType({}),
        hash=False,  # mappingproxy is unhashable; still compared for equality
    )

    @property
    def child_paths(self) -> list[str]:
        return list(self.children_constraint_values.keys())

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output (value sets become sorted lists)."""
        return {
            "accessor_name": self.accessor_name,
            "constraint_values": sorted_values(self.constraint_values),
            "children_constraint_values": {
                path: sorted_values(values) for path, values in self.children_constraint_values.items()
            },
        }


def sorted_values(values: frozenset) -> list[Any]:
    return sorted(values, key=lambda v: (type(v).__name__, repr(v)))
