"""Command-line entrypoint: ``rtx doctor``."""

from __future__ import annotations

import json
import logging
import sys

import click
import typer

from rtx_doctor import __version__
from rtx_doctor.doctor import Doctor
from rtx_doctor.env import EnvSnapshot
from rtx_doctor.errors import ToolError
from rtx_doctor.exit_codes import ExitCode
from rtx_doctor.render import TextRenderer, render_json, resolve_no_color

AFTER_LONG_HELP = """\
Examples:

  $ rtx doctor
  [WARN] plugin nodejs is not installed
"""

cli = typer.Typer(no_args_is_help=True, help="rtx runtime version manager", add_completion=False)


def _configure_logging(verbose: int, env: EnvSnapshot) -> None:
    level = logging.WARNING
    named = logging.getLevelName(env.get("RTX_LOG_LEVEL", "").upper())
    if isinstance(named, int):
        level = named
    if verbose or env.flag("RTX_DEBUG"):
        level = logging.DEBUG
    # stdout carries the report
    logging.basicConfig(level=level, stream=sys.stderr, format="rtx %(levelname)s %(name)s: %(message)s")


def _echo_fatal(exc: ToolError) -> None:
    click.echo(f"rtx: {exc.message}", err=True)
    if exc.suggestion is not None:
        click.echo(f"  fix: {exc.suggestion.fix}", err=True)
        if exc.suggestion.example:
            click.echo(f"  e.g. {exc.suggestion.example}", err=True)


def _print_version(value: bool) -> None:
    if value:
        click.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _main(
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show the rtx version and exit.",
    ),
) -> None:
    """rtx command-line entrypoint."""


@cli.command(epilog=AFTER_LONG_HELP)
def doctor(
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output."),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Log diagnostics to stderr."),
) -> None:
    """Check rtx installation for possible problems."""
    env = EnvSnapshot.capture()
    _configure_logging(verbose, env)
    try:
        engine = Doctor.from_environment(env)
        if json_output:
            report = engine.run()
        else:
            renderer = TextRenderer(color=not resolve_no_color(no_color, env))
            report = engine.collect()
    except ToolError as exc:
        if json_output:
            click.echo(json.dumps({"error": exc.to_dict(), "exit_code": exc.exit_code}, indent=2))
        else:
            _echo_fatal(exc)
        raise typer.Exit(exc.exit_code) from exc

    if json_output:
        click.echo(render_json(report))
        exit_code = report.exit_code
    else:
        click.echo(renderer.report(report), nl=False)
        outcome = engine.check()
        click.echo(renderer.summary(outcome.problems), nl=False)
        exit_code = outcome.exit_code

    sys.stdout.flush()
    if exit_code != ExitCode.SUCCESS:
        raise typer.Exit(exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
