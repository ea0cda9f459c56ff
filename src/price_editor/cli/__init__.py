"""Command line interface for the price editor service."""

import typer
from dotenv import load_dotenv

from .config_commands import config_app
from .settings_commands import init_db_command, serve_command, settings_app

app = typer.Typer(
    help="Price Editor service tools",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(settings_app, name="settings")
app.add_typer(config_app, name="config")
app.command(name="init-db")(init_db_command)
app.command(name="serve")(serve_command)


@app.callback()
def _load_env() -> None:
    load_dotenv()


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
