"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.api.backoffice import Backoffice
from core.config import ENV_PREFIX, AppSettings, write_user_env_vars
from core.errors import ApiError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_backend(settings: AppSettings) -> tuple[bool, str]:
    async with Backoffice.from_settings(settings) as bo:
        try:
            health = await bo.health.health()
        except ApiError as exc:
            return False, f"{exc.code.value}: {exc.message}"
    status = health.get("status") if isinstance(health, dict) else None
    return True, str(status or "reachable")


def _check_session(settings: AppSettings) -> tuple[str, str]:
    bo = Backoffice.from_settings(settings)
    session = bo.session.session
    if session is None:
        return "NONE", f"No session stored in {settings.session_file}"
    if bo.session.is_token_valid():
        return "OK", f"Valid until {session.expires_at}"
    if session.refresh_token:
        return "STALE", "Access token expiring; it will be refreshed on next request"
    return "EXPIRED", "Run `colisdesk login` again"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="colisdesk doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("API base_url", "OK", settings.api_base_url)
    for service, url in sorted(settings.service_urls.items()):
        table.add_row(f"  {service}", "OVERRIDE", url)
    if settings.tenant_id:
        table.add_row("Tenant", "OK", f"{settings.tenant_header}: {settings.tenant_id}")
    else:
        table.add_row("Tenant", "OPTIONAL", "No default tenant -> taken from the session")

    ok_http, detail_http = asyncio.run(_check_backend(settings))
    table.add_row("Backend health", "OK" if ok_http else "FAIL", detail_http)

    session_status, session_detail = _check_session(settings)
    table.add_row("Session", session_status, session_detail)

    _console.print(table)

    if not ok_http:
        _console.print(
            f"\n[yellow]Note:[/yellow] set {ENV_PREFIX}API_BASE_URL or run `colisdesk doctor setup`."
        )


@app.command()
def setup() -> None:
    """Interactive setup (stores base URL and tenant in the user config .env)."""

    current = AppSettings()
    base_url = typer.prompt("API base URL", default=current.api_base_url, show_default=True).strip()
    tenant_id = typer.prompt("Default tenant id (empty for none)", default=current.tenant_id or "", show_default=False).strip()

    if not base_url.startswith(("http://", "https://")):
        raise typer.BadParameter("base URL must start with http:// or https://")

    env_path = write_user_env_vars(
        {
            f"{ENV_PREFIX}API_BASE_URL": base_url,
            f"{ENV_PREFIX}TENANT_ID": tenant_id,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
