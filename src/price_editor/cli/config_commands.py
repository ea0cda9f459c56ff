"""Configuration inspection commands."""

import typer
from rich.console import Console
from rich.table import Table

console = Console()

config_app = typer.Typer(help="Inspect the effective configuration")


@config_app.command("check")
def check_config() -> None:
    """Report missing environment variables and the resolved host settings."""
    from src.price_editor.runtime.config.config_template import validate_config_env_vars
    from src.price_editor.runtime.config.settings import EnvironmentVariables

    env = EnvironmentVariables()
    missing = validate_config_env_vars()

    table = Table(title=f"Configuration ({env.environment})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("WC_SITE_URL", env.wc_site_url)
    table.add_row("DATABASE_URL", env.database_url)
    table.add_row("REDIS_URL", env.redis_url or "-")
    table.add_row("API keys", "✅" if env.has_host_credentials else "❌")
    console.print(table)

    if missing:
        for var, description in missing.items():
            console.print(f"[red]❌ {var}[/red]: {description}")
        raise typer.Exit(code=1)
    console.print("[green]✅ All required variables are set[/green]")
