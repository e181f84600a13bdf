"""CLI entrypoint for ruleval."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .load import EngineConfig, find_config, load_config

_RULESET_PATH = click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path)


@click.group()
@click.version_option(__version__, prog_name="ruleval")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to ruleval.toml (defaults to auto-detected ./ruleval.toml)",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    help="Logging level for engine diagnostics",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str) -> None:
    """ruleval - Declarative rule evaluation.

    Evaluate rulesets (TOML, YAML or JSON) against static data files.
    """
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )

    ctx.ensure_object(dict)
    if config_path is None:
        config_path = find_config(Path.cwd())

    try:
        config = load_config(config_path) if config_path else EngineConfig()
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Invalid config: {e}")

    ctx.obj["config"] = config


@cli.command()
@click.argument("ruleset", type=_RULESET_PATH)
@click.option(
    "--data",
    "-d",
    "data_path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Data file whose top-level keys become accessors",
)
@click.option(
    "--ignore",
    "-i",
    multiple=True,
    metavar="NAME",
    help="Parameter name to ignore (repeatable)",
)
@click.option("--json", "output_json", is_flag=True, help="Output result as JSON")
@click.pass_context
def check(
    ctx: click.Context,
    ruleset: Path,
    data_path: Path | None,
    ignore: tuple[str, ...],
    output_json: bool,
) -> None:
    """Evaluate RULESET and report the first failing parameter.

    Exits 0 when every constraint holds, 1 when the ruleset fails,
    and 2 when the ruleset or data is invalid.
    """
    from .commands.check import run_check

    exit_code = run_check(ruleset, ctx.obj["config"], data_path, ignore, output_json)
    sys.exit(exit_code)


@cli.command()
@click.argument("ruleset", type=_RULESET_PATH)
@click.option(
    "--ignore",
    "-i",
    multiple=True,
    metavar="NAME",
    help="Parameter name to ignore (repeatable)",
)
@click.option("--json", "output_json", is_flag=True, help="Output requests as JSON")
@click.pass_context
def plan(ctx: click.Context, ruleset: Path, ignore: tuple[str, ...], output_json: bool) -> None:
    """Show the accessors RULESET needs and the values each is tested against.

    Nothing is evaluated; this is the collection pass only.
    """
    from .commands.plan import run_plan

    exit_code = run_plan(ruleset, ctx.obj["config"], ignore, output_json)
    sys.exit(exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
