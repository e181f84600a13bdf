"""
Accessor registry and value resolution.

Accessors register themselves by name. The resolver looks each requested
accessor up, calls all of them concurrently, and assembles the value map
the parameter tree is evaluated against.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Awaitable, Callable, Union

from .errors import MissingAccessorError, ParameterError
from .models import AccessorRequest
from .parameters import RESERVED_NAMES

logger = logging.getLogger(__name__)

AccessorFn = Callable[[Any, AccessorRequest], Union[Awaitable[Any], Any]]


def validate_accessor_name(name: Any, *, action: str = "define_accessor()") -> str:
    if not isinstance(name, str) or not name:
        raise ParameterError(f"{action} expects a non-empty string name, got {name!r}")
    if name in RESERVED_NAMES:
        raise ParameterError(f"{action} name '{name}' is reserved")
    return name


class AccessorRegistry:
    """Accessor name → accessor function lookup."""

    def __init__(self) -> None:
        self._accessors: dict[str, AccessorFn] = {}

    def register(self, name: str, fn: AccessorFn) -> None:
        """
        Register an accessor function under `name`.

        Args:
            name: Accessor name (the first segment of a parameter name)
            fn: Called as ``fn(external_params, request)``; may be a
                coroutine function or return a plain value

        Raises:
            ParameterError: if the name is empty, not a string or reserved,
                or `fn` is not callable
        """
        validate_accessor_name(name)
        if not callable(fn):
            raise ParameterError(f"define_accessor() expects a callable for '{name}', got {type(fn).__name__}")
        self._accessors[name] = fn

    def register_many(self, names: Iterable[str], fn: AccessorFn) -> None:
        for name in names:
            self.register(name, fn)

    def get(self, name: str) -> AccessorFn | None:
        return self._accessors.get(name)

    def names(self) -> list[str]:
        return list(self._accessors.keys())

    def clear(self) -> None:
        """Remove every registered accessor (for testing)."""
        self._accessors.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._accessors

    def __len__(self) -> int:
        return len(self._accessors)


def static_accessor(value: Any) -> AccessorFn:
    """Accessor that always resolves to `value`."""

    async def accessor(external_params: Any, request: AccessorRequest) -> Any:
        return value

    return accessor


def _missing_accessor(request: AccessorRequest) -> MissingAccessorError:
    parameters = [f"'{path}'" for path in request.child_paths]
    accessed_by = f", accessed by: {', '.join(parameters)}" if parameters else ""
    if not parameters:
        parameters = [f"'{request.accessor_name}'"]
    return MissingAccessorError(
        f"missing accessor definition for '{request.accessor_name}'{accessed_by}",
        accessor_name=request.accessor_name,
        parameters=parameters,
    )


async def _call_accessor(fn: AccessorFn, external_params: Any, request: AccessorRequest) -> Any:
    value = fn(external_params, request)
    if inspect.isawaitable(value):
        value = await value
    return value


async def resolve_values(
    registry: AccessorRegistry,
    requests: Iterable[AccessorRequest],
    external_params: Any,
) -> dict[str, Any]:
    """
    Call every requested accessor once, concurrently.

    Returns:
        Mapping accessor name → resolved value

    Raises:
        MissingAccessorError: if any request names an unregistered accessor
            (checked before any accessor is called)
        Exception: the first error raised by an accessor, unwrapped
    """
    calls: list[tuple[AccessorRequest, AccessorFn]] = []
    for request in requests:
        fn = registry.get(request.accessor_name)
        if fn is None:
            raise _missing_accessor(request)
        calls.append((request, fn))

    logger.debug("Resolving %d accessor(s): %s", len(calls), ", ".join(r.accessor_name for r, _ in calls))

    try:
        async with asyncio.TaskGroup() as group:
            tasks = {
                request.accessor_name: group.create_task(_call_accessor(fn, external_params, request))
                for request, fn in calls
            }
    except BaseExceptionGroup as failures:
        # Surface the first accessor error as-is rather than the group.
        first = failures.exceptions[0]
        logger.debug("Accessor resolution failed: %r", first)
        raise first from None

    return {name: task.result() for name, task in tasks.items()}


def value_map_summary(values: Mapping[str, Any]) -> str:
    return ", ".join(f"{name}={type(value).__name__}" for name, value in values.items())
