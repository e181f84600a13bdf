"""
Rule engine: parse → collect → resolve → evaluate.

Parsing, collection and evaluation are synchronous and pure; only value
resolution awaits accessors. Nothing is cached between evaluations.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .accessors import AccessorFn, AccessorRegistry, resolve_values, validate_accessor_name, value_map_summary
from .collector import collect_accessor_requests
from .models import AccessorRequest, EvalResult
from .parameters import ParameterSet, parse_ruleset

logger = logging.getLogger(__name__)


async def _pass_accessor(external_params: Any, request: AccessorRequest) -> bool:
    return True


class RuleEngine:
    """
    Evaluates rulesets against registered accessors.

    Example:
        >>> engine = RuleEngine()
        >>> engine.define_accessor("v1", lambda params, request: 1)
        >>> await engine.evaluate_with_reason({"v1": {"min": 2}})
        EvalResult(value=False, parameter_name='v1')
    """

    def __init__(self) -> None:
        self._accessors = AccessorRegistry()
        self._ignored: set[str] = set()
        self.define_accessor("pass", _pass_accessor)

    @property
    def accessors(self) -> AccessorRegistry:
        return self._accessors

    @property
    def ignored_parameters(self) -> frozenset[str]:
        return frozenset(self._ignored)

    def define_accessor(self, name: str | Iterable[str], fn: AccessorFn) -> None:
        """Register `fn` under one name or under each name of a list."""
        if isinstance(name, (list, tuple, set, frozenset)):
            self._accessors.register_many(name, fn)
        else:
            self._accessors.register(name, fn)

    def ignore_parameter(self, name: str) -> None:
        """Exclude a (possibly dotted) parameter name from every ruleset."""
        validate_accessor_name(name, action="ignore_parameter()")
        self._ignored.add(name)

    def parse(self, ruleset: Any) -> ParameterSet:
        return parse_ruleset(ruleset, self._ignored)

    def plan(self, ruleset: Any) -> tuple[AccessorRequest, ...]:
        """Accessor requests an evaluation of `ruleset` would make (no calls)."""
        return collect_accessor_requests(self.parse(ruleset))

    async def evaluate_with_reason(self, ruleset: Any, external_params: Any = None) -> EvalResult:
        if external_params is None:
            external_params = {}

        parameters = self.parse(ruleset)
        requests = collect_accessor_requests(parameters)
        logger.debug("Parsed %d parameter node(s), %d accessor request(s)", len(parameters), len(requests))

        values = await resolve_values(self._accessors, requests, external_params)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Resolved values: %s", value_map_summary(values))

        result = parameters.evaluate(values)
        logger.debug("Evaluation result: %s", result)
        return result

    async def evaluate(self, ruleset: Any, external_params: Any = None) -> bool:
        result = await self.evaluate_with_reason(ruleset, external_params)
        return result.value
