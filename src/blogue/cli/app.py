from typing import Optional

import typer

from blogue.utils import setup_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import blogue

        typer.echo(f"blogue version: {blogue.__version__}")
        raise typer.Exit()


app = typer.Typer(name="blogue", no_args_is_help=True)


@app.callback()
def app_callback(
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Log level for stderr output", envvar="BLOGUE_LOG_LEVEL"
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """blogue - Create blog posts whose frontmatter matches the site's schema."""
    setup_logging(log_level=log_level.upper())
