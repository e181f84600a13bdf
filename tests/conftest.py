"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from ruleval import AccessorRequest, RuleEngine

DEFAULT_DATA: dict[str, Any] = {
    "v0": 0,
    "v1": 1,
    "v2": 2,
    "v3": 3,
    "o": {
        "v1": 1,
        "v2": 2,
        "v3": 3,
        "o": {"v1": 1},
    },
    "s": "string",
    "n": None,
}


async def data_accessor(external_params: Any, request: AccessorRequest) -> Any:
    return DEFAULT_DATA[request.accessor_name]


def params_accessor(external_params: Any, request: AccessorRequest) -> Any:
    return external_params.get("g")


@pytest.fixture
def engine() -> RuleEngine:
    """Engine with one accessor per DEFAULT_DATA key, plus `g` from external params."""
    re = RuleEngine()
    re.define_accessor(list(DEFAULT_DATA.keys()), data_accessor)
    re.define_accessor("g", params_accessor)
    return re
