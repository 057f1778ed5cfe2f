"""uxassert CLI entry point."""

import typer

from uxassert import __version__
from uxassert.cli.run_cmd import run

app = typer.Typer(
    name="uxassert",
    help="Validate UX assertions against screen recordings with a vision LLM",
    no_args_is_help=True,
)

app.command()(run)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"uxassert {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Validate UX assertions against screen recordings with a vision LLM."""
