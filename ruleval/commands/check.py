"""Check command implementation."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from rich.console import Console

from ..accessors import static_accessor
from ..engine import RuleEngine
from ..errors import RuleEngineError
from ..load import EngineConfig, load_data, load_ruleset
from ..models import EvalResult
from . import report_error


def build_engine(config: EngineConfig, *, data: dict[str, Any], ignore: tuple[str, ...] = ()) -> RuleEngine:
    """Engine whose accessors return the config's inline values and `data`."""
    engine = RuleEngine()
    for name, value in {**config.accessors, **data}.items():
        engine.define_accessor(name, static_accessor(value))
    for name in (*config.ignore, *ignore):
        engine.ignore_parameter(name)
    return engine


def run_check(
    ruleset_path: Path,
    config: EngineConfig,
    data_path: Path | None = None,
    ignore: tuple[str, ...] = (),
    output_json: bool = False,
) -> int:
    """Evaluate a ruleset file against static data.

    Args:
        ruleset_path: TOML/YAML/JSON ruleset
        config: Project config (ignore list, default data file, inline values)
        data_path: Data file overriding the config's `data`
        ignore: Extra parameter names to ignore
        output_json: Output the result as JSON

    Returns:
        Exit code (0 = pass, 1 = ruleset failed, 2 = invalid input)
    """
    console = Console(stderr=True)

    data_path = data_path or config.data_path
    try:
        ruleset = load_ruleset(ruleset_path)
        data = load_data(data_path) if data_path else {}
    except (OSError, ValueError) as e:
        report_error(console, e, output_json=output_json, context="Could not load input: ")
        return 2

    try:
        engine = build_engine(config, data=data, ignore=ignore)
        result = asyncio.run(engine.evaluate_with_reason(ruleset))
    except RuleEngineError as e:
        report_error(console, e, output_json=output_json)
        return 2

    if output_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(console, ruleset_path, result)

    return 0 if result.value else 1


def _print_result(console: Console, ruleset_path: Path, result: EvalResult) -> None:
    if result.value:
        console.print(f"✓ {ruleset_path.name}: all constraints hold", style="bold green")
    else:
        console.print(f"✗ {ruleset_path.name}: failed at '{result.parameter_name}'", style="bold red")
