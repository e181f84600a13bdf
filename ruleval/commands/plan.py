"""Plan command: show which accessors a ruleset needs, without calling them."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..engine import RuleEngine
from ..errors import RuleEngineError
from ..load import EngineConfig, load_ruleset
from ..models import AccessorRequest, sorted_values
from . import report_error


def run_plan(
    ruleset_path: Path,
    config: EngineConfig,
    ignore: tuple[str, ...] = (),
    output_json: bool = False,
) -> int:
    console = Console(stderr=True)

    try:
        ruleset = load_ruleset(ruleset_path)
    except (OSError, ValueError) as e:
        report_error(console, e, output_json=output_json, context="Could not load input: ")
        return 2

    engine = RuleEngine()
    try:
        for name in (*config.ignore, *ignore):
            engine.ignore_parameter(name)
        requests = engine.plan(ruleset)
    except RuleEngineError as e:
        report_error(console, e, output_json=output_json)
        return 2

    if output_json:
        print(json.dumps([r.to_dict() for r in requests], indent=2, default=str))
        return 0

    Console().print(_requests_table(ruleset_path, requests))
    return 0


def _format_values(values: frozenset) -> str:
    return ", ".join(repr(v) for v in sorted_values(values)) or "-"


def _requests_table(ruleset_path: Path, requests: tuple[AccessorRequest, ...]) -> Table:
    table = Table(title=f"Accessor requests for {ruleset_path.name}")
    table.add_column("Accessor", style="cyan")
    table.add_column("Path")
    table.add_column("Constraint values")

    for request in requests:
        table.add_row(request.accessor_name, "", _format_values(request.constraint_values))
        for path, values in request.children_constraint_values.items():
            table.add_row("", path, _format_values(values))
    return table
