"""Command-line entry point: ``timecalc EXPRESSION``."""

import click
from babel import Locale, UnknownLocaleError

from timecalc import __version__
from timecalc.calculator import calculate
from timecalc.errors import CalcError
from timecalc.logconfig import configure_logging
from timecalc.present import present
from timecalc.util import DEFAULT_LOCALE


def _validate_locale(ctx: click.Context, param: click.Parameter, value: str) -> str:
    try:
        Locale.parse(value)
    except (UnknownLocaleError, ValueError) as e:
        raise click.BadParameter(f"unknown locale {value!r}") from e
    return value


@click.command(
    context_settings={"ignore_unknown_options": True, "help_option_names": ["-h", "--help"]}
)
@click.version_option(version=__version__, prog_name="timecalc")
@click.option(
    "--locale",
    envvar="TIMECALC_LOCALE",
    default=DEFAULT_LOCALE,
    show_default=True,
    callback=_validate_locale,
    help="Locale for the human-readable part of the result.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log each pipeline stage to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.argument("expression", nargs=-1, type=click.UNPROCESSED)
def main(expression: tuple[str, ...], locale: str, verbose: bool, log_json: bool) -> None:
    """Evaluate EXPRESSION over numbers, dates, durations and now.

    \b
    Examples:
      timecalc "2024-01-31 + P1M"
      timecalc "(now - 2024-01-01T09:30) / 2"
      timecalc PT1H30M * 3
    """
    configure_logging(verbose=verbose, log_json=log_json)

    text = " ".join(expression).strip()
    if not text:
        raise click.ClickException("Please enter the expression to calculate.")

    try:
        output = present(calculate(text), locale=locale)
    except CalcError as e:
        raise click.ClickException(str(e)) from e
    click.echo(output)
