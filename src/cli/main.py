"""Copyleaks command line interface.

Thin layer over `adapters.copyleaks_api.CopyleaksClient`: parse options, run
the async call, render the result with Rich. Tokens are never stored by the
CLI; `login` prints them and other commands read them from `--token-file`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.copyleaks_api import CopyleaksClient
from cli import doctor
from cli.ui_components import (
    build_mapping_table,
    build_token_panel,
    build_values_table,
    print_banner,
)
from core.config import AppSettings
from core.domain.errors import CopyleaksError
from core.domain.models import AuthToken, DeleteRequest
from core.domain.product import Product

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="Copyleaks API client.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

_TOKEN_FILE_OPTION = typer.Option(
    ...,
    "--token-file",
    "-t",
    exists=True,
    dir_okay=False,
    help="JSON token written by `copyleaks login --output`.",
)
_PRODUCT_OPTION = typer.Option(Product.default(), "--product", "-p", help="Product line.")
_JSON_OPTION = typer.Option(False, "--json", help="Print raw JSON instead of a table.")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, rich_tracebacks=verbose)],
        force=True,
    )


def _load_token(path: Path) -> AuthToken:
    try:
        return AuthToken.model_validate_json(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise typer.BadParameter(f"invalid token file {path}: {exc}") from exc


def _run(call: Callable[[CopyleaksClient], Awaitable[T]]) -> T:
    """Run one client call, turning client failures into a clean exit code."""

    async def _main() -> T:
        async with CopyleaksClient(AppSettings()) as client:
            return await call(client)

    try:
        return asyncio.run(_main())
    except (CopyleaksError, httpx.HTTPError) as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _print_json(data: Any) -> None:
    _console.print_json(json.dumps(data, ensure_ascii=False))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show retry/backoff diagnostics."),
) -> None:
    configure_logging(verbose)


@app.command()
def login(
    email: Optional[str] = typer.Option(None, "--email", help="Account email (defaults to COPYLEAKS_EMAIL)."),
    key: Optional[str] = typer.Option(None, "--key", help="API key (defaults to COPYLEAKS_API_KEY)."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", dir_okay=False, help="Write the token JSON here."),
) -> None:
    """Login and print the auth token."""

    settings = AppSettings()
    email = email or settings.email
    key = key or settings.api_key
    if not email or not key:
        raise typer.BadParameter("email and key are required (options or `copyleaks doctor setup`)")

    token = _run(lambda client: client.login(email, key))
    payload = token.model_dump_json(by_alias=True, indent=2)
    if output is None:
        typer.echo(payload)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload + "\n", encoding="utf-8")
    print_banner(_console)
    _console.print(build_token_panel(token))
    _console.print(f"[green]Token saved to:[/green] {output}")


@app.command()
def credits(
    token_file: Path = _TOKEN_FILE_OPTION,
    product: Product = _PRODUCT_OPTION,
    as_json: bool = _JSON_OPTION,
) -> None:
    """Show the current credits balance."""

    token = _load_token(token_file)
    balance = _run(lambda client: client.get_credits_balance(product, token))
    if as_json:
        _print_json(balance)
    else:
        _console.print(build_mapping_table(f"Credits ({product.label()})", balance))


@app.command()
def usages(
    start: str = typer.Option(..., "--start", help="Start date, dd-MM-yyyy."),
    end: str = typer.Option(..., "--end", help="End date, dd-MM-yyyy."),
    token_file: Path = _TOKEN_FILE_OPTION,
    product: Product = _PRODUCT_OPTION,
    output: Optional[Path] = typer.Option(None, "--output", "-o", dir_okay=False, help="Write the CSV here."),
) -> None:
    """Export the usage history between two dates as CSV."""

    token = _load_token(token_file)
    csv_text = _run(lambda client: client.get_usages_history_csv(product, token, start, end))
    if output is None:
        typer.echo(csv_text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(csv_text, encoding="utf-8")
    _console.print(f"[green]Usage history saved to:[/green] {output}")


@app.command()
def delete(
    scan_ids: list[str] = typer.Argument(..., help="Scan ids to delete."),
    token_file: Path = _TOKEN_FILE_OPTION,
    product: Product = _PRODUCT_OPTION,
    purge: bool = typer.Option(False, "--purge", help="Also remove the scans from the private index."),
) -> None:
    """Delete scans."""

    token = _load_token(token_file)
    model = DeleteRequest.for_ids(scan_ids, purge=purge)
    _run(lambda client: client.delete(product, token, model))
    _console.print(f"[green]Deleted {len(scan_ids)} scan(s).[/green]")


@app.command(name="release-notes")
def release_notes(as_json: bool = _JSON_OPTION) -> None:
    """List API release notes."""

    notes = _run(lambda client: client.get_release_notes())
    if as_json:
        _print_json(notes)
    else:
        _console.print(build_values_table("Release notes", notes))


@app.command(name="file-types")
def file_types(as_json: bool = _JSON_OPTION) -> None:
    """List supported file types."""

    types = _run(lambda client: client.get_supported_file_types())
    if as_json:
        _print_json(types)
    else:
        _console.print(build_mapping_table("Supported file types", types))


@app.command(name="ocr-languages")
def ocr_languages(as_json: bool = _JSON_OPTION) -> None:
    """List languages supported by OCR scans."""

    languages = _run(lambda client: client.get_ocr_supported_languages())
    if as_json:
        _print_json(languages)
    else:
        _console.print(build_values_table("OCR languages", languages))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
