"""CLI de colisdesk (Typer + Rich).

Por qué una CLI:
- Permite operar el back-office (login, consulta de colis, ajustes SMS) desde
  scripts y terminales sin navegador.
- Sirve de consumidor real de `Backoffice`: todo pasa por los mismos clientes.

Reglas:
- Cualquier `ApiError` se muestra en rojo y termina con código 1.
- La sesión se persiste en `AppSettings.session_file`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Optional, TypeVar

import typer
from rich.console import Console

from adapters.api.backoffice import Backoffice
from adapters.json_exporter import export_json
from cli import doctor
from cli.ui_components import (
    build_nav_tree,
    build_parcels_table,
    build_principal_panel,
    build_sms_preview_panel,
    build_tracking_panel,
    print_banner,
)
from core.config import AppSettings
from core.domain.parcels import ParcelFilters
from core.errors import ApiError, SessionExpiredError
from core.logging_setup import configure_logging
from core.services.navigation import ADMIN_MENU, build_navigation
from core.services.sms_templates import extract_placeholders, render_preview, segment_count, validate_template

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="Logistics back-office client.")
parcels_app = typer.Typer(no_args_is_help=True, help="Parcel lookup.")
sms_app = typer.Typer(no_args_is_help=True, help="SMS template helpers.")

app.add_typer(parcels_app, name="parcels")
app.add_typer(sms_app, name="sms")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING o ERROR."),
) -> None:
    settings = AppSettings()
    configure_logging(log_level or settings.log_level)


def _run(awaitable: Awaitable[T]) -> T:
    try:
        return asyncio.run(awaitable)
    except SessionExpiredError as exc:
        _console.print(f"[red]{exc.message}[/red] Run `colisdesk login`.")
        raise typer.Exit(code=1) from exc
    except ApiError as exc:
        _console.print(f"[red]{exc.code.value}:[/red] {exc.message}")
        raise typer.Exit(code=1) from exc


@app.command()
def login(
    email: str = typer.Argument(..., help="Operator email."),
    tenant: Optional[str] = typer.Option(None, "--tenant", "-t", help="Tenant id."),
) -> None:
    """Authenticate and store the session."""

    password = typer.prompt("Password", hide_input=True)

    async def _login() -> Any:
        async with Backoffice.from_settings() as bo:
            return await bo.session.login(email, password, tenant_id=tenant)

    user = _run(_login())
    if user is None:
        _console.print("[yellow]Account pending approval or validation: no session was opened.[/yellow]")
        raise typer.Exit(code=1)
    print_banner(_console)
    _console.print(f"[green]Logged in as[/green] {user.name or user.email}")


@app.command()
def logout() -> None:
    """Close the session (server side when possible, always locally)."""

    async def _logout() -> None:
        async with Backoffice.from_settings() as bo:
            await bo.session.logout()

    _run(_logout())
    _console.print("[green]Session closed.[/green]")


@app.command()
def whoami() -> None:
    """Show the current principal."""

    bo = Backoffice.from_settings()
    principal = bo.session.principal()
    if principal.is_anonymous:
        _console.print("[yellow]Not logged in.[/yellow]")
        raise typer.Exit(code=1)
    _console.print(build_principal_panel(principal, bo.session.session_info()))


@app.command()
def nav(
    path: Optional[str] = typer.Option(None, "--path", help="Current path, marks active entries."),
    admin: bool = typer.Option(False, "--admin", help="Show the administrative tree."),
) -> None:
    """Render the menu visible to the current principal."""

    bo = Backoffice.from_settings()
    principal = bo.session.principal()
    view = build_navigation(principal, path, ADMIN_MENU if admin else None)
    if view.is_empty:
        _console.print("[yellow]No navigation entries available.[/yellow]")
        raise typer.Exit(code=1)
    _console.print(build_nav_tree(view, title="Admin" if admin else "Navigation"))


@parcels_app.command("list")
def parcels_list(
    status: Optional[str] = typer.Option(None, "--status", help="Status code."),
    search: Optional[str] = typer.Option(None, "--search", help="Free text search."),
    page: int = typer.Option(1, "--page", min=1),
    limit: int = typer.Option(20, "--limit", min=1, max=1000),
    json_path: Optional[Path] = typer.Option(None, "--json", help="Also export the page to JSON."),
) -> None:
    """List parcels."""

    filters = ParcelFilters(status_code=status, search=search, page=page, limit=limit)

    async def _list() -> Any:
        async with Backoffice.from_settings() as bo:
            return await bo.parcels.list(filters)

    result = _run(_list())
    _console.print(build_parcels_table(result))
    if json_path is not None:
        out = export_json(result, json_path)
        _console.print(f"[green]Saved JSON to:[/green] {out}")


@parcels_app.command("track")
def parcels_track(parcel_id: str = typer.Argument(..., help="Parcel id.")) -> None:
    """Show tracking for a parcel."""

    async def _track() -> Any:
        async with Backoffice.from_settings() as bo:
            return await bo.parcels.tracking(parcel_id)

    _console.print(build_tracking_panel(_run(_track())))


@sms_app.command("preview")
def sms_preview(
    content: str = typer.Argument(..., help="Template content."),
    name: str = typer.Option("preview", "--name", help="Template name (for validation)."),
) -> None:
    """Preview an SMS template with sample values."""

    rendered = render_preview(content)
    problems = validate_template(name, content)
    _console.print(
        build_sms_preview_panel(rendered, extract_placeholders(content), segment_count(rendered), problems)
    )
    if problems:
        raise typer.Exit(code=1)


def run() -> None:
    app()
