"""
Small helpers shared by the constraint and parameter trees.

Field lookup only ever sees a value's own data: mapping keys, or instance
attributes for plain objects. Inherited members and dunder names are
treated as absent.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

Primitive = Union[None, bool, int, float, str]

PRIMITIVE_TYPES = (bool, int, float, str)

FORBIDDEN_KEYS = frozenset({"__proto__", "constructor", "prototype"})


class _Missing:
    """Sentinel for a field that does not exist (distinct from None)."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def is_primitive(value: Any) -> bool:
    return value is None or isinstance(value, PRIMITIVE_TYPES)


def is_forbidden_key(key: str) -> bool:
    if key in FORBIDDEN_KEYS:
        return True
    return key.startswith("__") and key.endswith("__")


def safe_get(obj: Any, key: str) -> Any:
    """
    Look up `key` on `obj`, returning MISSING unless it is an own field.

    Mappings are looked up by key. Other objects expose only their instance
    attributes (`vars(obj)`), never class attributes, properties or methods.
    Primitives and None have no fields.
    """
    if is_forbidden_key(key):
        return MISSING

    if is_primitive(obj):
        return MISSING

    if isinstance(obj, Mapping):
        if key not in obj:
            return MISSING
        return obj[key]

    try:
        own = vars(obj)
    except TypeError:
        return MISSING
    return own.get(key, MISSING)


def describe(value: Any) -> str:
    """Short type-and-value rendering used in error messages."""
    text = repr(value)
    if len(text) > 80:
        text = text[:77] + "..."
    return f"{type(value).__name__}: {text}"
