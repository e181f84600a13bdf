"""ruleval - declarative rule evaluation with concurrently resolved accessors."""

__version__ = "0.1.0"

from .accessors import AccessorRegistry, resolve_values, static_accessor
from .collector import AccessorDataBuilder, collect_accessor_requests
from .constraints import ConstraintSet, parse_constraints
from .engine import RuleEngine
from .errors import (
    MissingAccessorError,
    ParameterError,
    RuleEngineError,
    RuleSyntaxError,
    RuleTypeError,
)
from .models import AccessorRequest, EvalResult
from .parameters import ParameterSet, parse_ruleset

__all__ = [
    "__version__",
    # Engine
    "RuleEngine",
    "EvalResult",
    "AccessorRequest",
    # Stages
    "parse_constraints",
    "parse_ruleset",
    "collect_accessor_requests",
    "resolve_values",
    "ConstraintSet",
    "ParameterSet",
    "AccessorDataBuilder",
    "AccessorRegistry",
    "static_accessor",
    # Errors
    "RuleEngineError",
    "RuleSyntaxError",
    "MissingAccessorError",
    "RuleTypeError",
    "ParameterError",
]
