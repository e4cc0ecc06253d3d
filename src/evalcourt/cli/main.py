"""evalcourt CLI entry point."""

import typer

from evalcourt import __version__
from evalcourt.cli.report_cmd import report as report_cmd
from evalcourt.cli.run_cmd import run

app = typer.Typer(
    name="evalcourt",
    help="Evaluate LLM responses against natural-language criteria",
    no_args_is_help=True,
)

# Register subcommands
app.command(name="report")(report_cmd)
app.command()(run)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"evalcourt {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Evaluate LLM responses against natural-language criteria."""
