"""Database and editor settings commands."""

import asyncio

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

console = Console()

settings_app = typer.Typer(help="Inspect or reset the stored editor settings")


def init_db_command() -> None:
    """Create tables and seed the default editor settings."""
    from src.price_editor.runtime.init_db import init_db

    settings = init_db()
    console.print(
        f"[green]✅ Database ready; start category '{settings.start_category}', "
        f"{len(settings.default_columns)} default columns[/green]"
    )


@settings_app.command("show")
def show_settings() -> None:
    """Show the stored editor settings merged with defaults."""
    from src.price_editor.core.services.database import DbSessionService
    from src.price_editor.entities.settings import EditorSettingsRepository

    with DbSessionService().session_scope() as session:
        repository = EditorSettingsRepository(session)
        stored = repository.exists()
        settings = repository.get()

    table = Table(title="Editor settings" + ("" if stored else " (defaults)"))
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("start_category", settings.start_category)
    table.add_row("default_columns", ", ".join(settings.default_columns))
    table.add_row("instructions", settings.instructions)
    console.print(table)


@settings_app.command("reset")
def reset_settings(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete the stored editor settings; defaults apply until saved again."""
    from src.price_editor.core.services.database import DbSessionService
    from src.price_editor.entities.settings import EditorSettingsRepository

    if not force and not Confirm.ask("Delete the stored editor settings?"):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(code=0)

    with DbSessionService().session_scope() as session:
        deleted = EditorSettingsRepository(session).delete()

    if deleted:
        console.print("[green]✅ Stored editor settings deleted[/green]")
    else:
        console.print("[yellow]No stored editor settings found[/yellow]")

    _clear_shared_counters()


def _clear_shared_counters() -> None:
    """Drop the per-user rate limit counters kept in Redis, if any."""
    from redis.exceptions import RedisError

    from src.price_editor.api.http.middleware.limiter import clear_rate_limit_counters
    from src.price_editor.core.services.redis_service import RedisService
    from src.price_editor.runtime.context import get_config

    redis_service = RedisService()
    client = redis_service.get_client()
    if client is None:
        return

    async def _clear() -> int:
        try:
            return await clear_rate_limit_counters(
                client, get_config().rate_limiter.key_prefix
            )
        finally:
            await redis_service.close()

    try:
        cleared = asyncio.run(_clear())
    except RedisError as e:
        console.print(f"[red]❌ Could not clear rate limit counters: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✅ Cleared {cleared} rate limit counters[/green]")


def serve_command(
    host: str | None = typer.Option(None, help="Host to bind (defaults to config)"),
    port: int | None = typer.Option(None, help="Port to bind (defaults to config)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """Start the HTTP service with uvicorn."""
    import uvicorn

    from src.price_editor.runtime.context import get_config

    config = get_config()
    uvicorn.run(
        "src.price_editor.api.http.app:app",
        host=host or config.app.host,
        port=port or config.app.port,
        reload=reload,
        access_log=False,
    )
