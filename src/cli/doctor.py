"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Copyleaks Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.email and settings.api_key:
        table.add_row("Credentials", "OK", settings.email)
    else:
        table.add_row("Credentials", "MISSING", "Run `copyleaks doctor setup` or pass --email/--key")
    table.add_row(
        "Retry policy",
        "OK",
        f"max_retries={settings.max_retries}, initial_backoff={settings.initial_backoff_seconds}s",
    )
    table.add_row("Token safety margin", "OK", f"{settings.token_safety_margin_minutes} min")

    # Connectivity (best-effort)
    for label, url in (
        ("API server", settings.api_server_uri),
        ("Identity server", settings.identity_server_uri),
    ):
        ok, detail = asyncio.run(_check_http(url, settings))
        table.add_row(label, "OK" if ok else "FAIL", f"{url} -> {detail}")

    _console.print(table)


@app.command()
def setup() -> None:
    """Interactive credentials setup (stored in the user config .env)."""

    email = typer.prompt("Copyleaks account email").strip()
    api_key = typer.prompt("Copyleaks API key", hide_input=True, confirmation_prompt=False).strip()

    if not email or not api_key:
        raise typer.BadParameter("email and API key are required")

    env_path = write_user_env_vars(
        {
            "COPYLEAKS_EMAIL": email,
            "COPYLEAKS_API_KEY": api_key,
        }
    )

    _console.print(f"[green]Saved Copyleaks credentials to:[/green] {env_path}")
