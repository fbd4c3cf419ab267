"""Demo client CLI - generate and browse AI video demonstrations."""

import typer

from demo_client.cli.auth import auth_app, prefs_app
from demo_client.cli.common import configure_logging
from demo_client.cli.demos import demos_app
from demo_client.cli.history import history_app
from demo_client.cli.password import password_app

app = typer.Typer(
    name="demo-client",
    help="Generate step-by-step video demos from a learning request",
    no_args_is_help=True,
)

# Add command groups
app.add_typer(demos_app, name="demo")
app.add_typer(history_app, name="history")
app.add_typer(auth_app, name="auth")
app.add_typer(password_app, name="password")
app.add_typer(prefs_app, name="prefs")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    configure_logging(verbose)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
