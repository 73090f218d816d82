"""
Strata CLI
===========

Click-based command-line interface for the Strata password strength
estimator. Provides subcommands for checking a password and for adding
words to the ranked dictionary.

Usage::

    python -m strata check "Tr0ub4dour&3"
    python -m strata check "alice1987" -u alice -u alice@example.com
    python -m strata --output json check "correcthorsebatterystaple"
    python -m strata add-words passwords hunter dragonfly

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from shared.config import StrataConfig
from shared.console import StrataConsole
from shared.errors import ConfigError, StrataError

from strata import __version__
from strata.core.engine import StrataEngine
from strata.core.models import StrengthResult
from strata.output.console import StrataConsoleOutput
from strata.output.report import StrataReportGenerator


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group()
@click.version_option(__version__, prog_name="strata")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to Strata configuration file (TOML).",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Output format.",
)
@click.option(
    "--output-file", "-f",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file path (for JSON output).",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress banner and informational output.",
)
@click.option(
    "--dictionary", "-d",
    type=click.Path(dir_okay=False),
    default=None,
    help="Ranked frequency list JSON file to use instead of the bundled one.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    output: str,
    output_file: Optional[str],
    quiet: bool,
    dictionary: Optional[str],
) -> None:
    """Strata -- pattern-aware password strength estimation.

    Decomposes passwords into dictionary words, keyboard patterns,
    repeats, sequences and dates to estimate how many guesses they take.
    """
    ctx.ensure_object(dict)

    try:
        strata_config = StrataConfig.load(config) if config else StrataConfig()
    except ConfigError as exc:
        raise click.BadParameter(str(exc), param_hint="--config") from exc
    if dictionary:
        strata_config.matching.dictionary_file = dictionary
    ctx.obj["config"] = strata_config
    ctx.obj["output_format"] = output
    ctx.obj["output_file"] = output_file
    ctx.obj["quiet"] = quiet

    console = StrataConsole(quiet=quiet)
    ctx.obj["console"] = console
    ctx.obj["display"] = StrataConsoleOutput(console)
    ctx.obj["reporter"] = StrataReportGenerator()

    if not quiet and output == "console":
        console.banner(version=__version__)


def _engine(ctx: click.Context) -> StrataEngine:
    """Build the engine once per invocation, after the options are parsed."""
    if "engine" not in ctx.obj:
        ctx.obj["engine"] = StrataEngine(ctx.obj["config"])
    return ctx.obj["engine"]


def _handle_output(
    ctx: click.Context, result: StrengthResult, *, include_password: bool = True
) -> None:
    """Handle output based on the selected format.

    Args:
        ctx: Click context containing configuration.
        result: StrengthResult to output.
        include_password: Keep the password and its pieces in JSON reports.
    """
    output_format = ctx.obj["output_format"]
    output_file = ctx.obj["output_file"]
    reporter: StrataReportGenerator = ctx.obj["reporter"]
    console: StrataConsole = ctx.obj["console"]

    if output_format == "json":
        if output_file:
            path = reporter.generate_json(
                result, Path(output_file), include_password=include_password
            )
            console.success(f"JSON report saved to: {path}")
        else:
            click.echo(reporter.to_json(result, include_password=include_password))
    else:
        display: StrataConsoleOutput = ctx.obj["display"]
        display.display_strength(result)


# ===================================================================== #
#  Subcommands
# ===================================================================== #

@cli.command()
@click.argument("password")
@click.option(
    "--user-input", "-u",
    "user_inputs",
    multiple=True,
    help="Word tied to the user (name, e-mail...). May be repeated.",
)
@click.option(
    "--redact",
    is_flag=True,
    default=False,
    help="Leave the password and the matched pieces of it out of JSON reports.",
)
@click.pass_context
def check(
    ctx: click.Context, password: str, user_inputs: tuple[str, ...], redact: bool
) -> None:
    """Estimate the strength of PASSWORD.

    Prints the score (0-4), entropy, winning match sequence, crack-time
    estimates and feedback.
    """
    engine = _engine(ctx)
    try:
        result = engine.password_strength(password, user_inputs)
    except StrataError as exc:
        ctx.obj["console"].error(str(exc))
        sys.exit(2)
    _handle_output(ctx, result, include_password=not redact)


@cli.command("add-words")
@click.argument("category")
@click.argument("words", nargs=-1, required=True)
@click.pass_context
def add_words(ctx: click.Context, category: str, words: tuple[str, ...]) -> None:
    """Add WORDS to the CATEGORY table of the ranked dictionary.

    Words are normalised; numeric words, words shorter than four
    characters and words already in any category are skipped.
    """
    engine = _engine(ctx)
    console: StrataConsole = ctx.obj["console"]

    if engine.add_words_to_password_list(words, category):
        console.success(f"Dictionary category '{category}' is up to date")
    else:
        console.error(f"Could not update dictionary category '{category}'")
        sys.exit(1)


# ===================================================================== #
#  Entry Point
# ===================================================================== #

def main() -> None:
    """Main entry point for the Strata CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
