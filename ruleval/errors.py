"""
Error taxonomy for rule evaluation.

Three kinds, all propagated to the caller of an evaluation:
- RuleSyntaxError: the ruleset (or its wiring to accessors) is malformed
- RuleTypeError: a resolved value cannot be tested by a primitive operator
- ParameterError: misuse of the registration / ignore-list API
"""

from __future__ import annotations

from typing import Any

MESSAGE_PREFIX = "ruleval: "


class RuleEngineError(Exception):
    """Base class for every error raised by the engine."""

    def __init__(self, message: str, **details: Any) -> None:
        # Unpickling calls __init__ again with the already-prefixed message.
        if not message.startswith(MESSAGE_PREFIX):
            message = MESSAGE_PREFIX + message
        super().__init__(message)
        for key, value in details.items():
            setattr(self, key, value)


class RuleSyntaxError(RuleEngineError, ValueError):
    """Malformed ruleset, unknown operator, missing field or accessor."""


class MissingAccessorError(RuleSyntaxError):
    """No accessor is registered for a name the ruleset references."""

    accessor_name: str
    parameters: list[str]


class RuleTypeError(RuleEngineError, TypeError):
    """A value under test is not a primitive."""


class ParameterError(RuleEngineError, ValueError):
    """Invalid accessor registration or ignore-list entry."""
