"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import json

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.registry_hosts import StaticHostResolver
from core.config import AppSettings, write_user_env_vars
from core.domain.models import Host

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_host(host: Host, settings: AppSettings) -> tuple[bool, str]:
    """Ping `<base>/` of the registry API. 401 still means the API is there."""

    try:
        async with build_async_client(settings) as client:
            response = await client.get(host.base_url + "/")
    except httpx.HTTPError as exc:
        return False, str(exc) or type(exc).__name__
    return response.status_code in (200, 401), f"HTTP {response.status_code}"


@app.command()
def run(
    registry: str = typer.Option("docker.io", "--registry", "-r", help="Registry hostname to check."),
) -> None:
    """Run baseline diagnostics for one registry and its mirrors."""

    settings = AppSettings()

    table = Table(title="refscout doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.registry_token:
        table.add_row("Registry token", "OK", "Bearer token configured")
    else:
        table.add_row("Registry token", "OPTIONAL", "No token set -> anonymous requests")
    table.add_row("TLS verify", "OFF" if settings.skip_verify else "OK", "")
    table.add_row("Timeout", "OK", f"{settings.http_timeout_seconds}s, {settings.http_retries} retries")

    # Connectivity (best-effort)
    for host in StaticHostResolver.for_registry(registry, settings).hosts:
        ok, detail = asyncio.run(_check_host(host, settings))
        caps = ",".join(sorted(c.value for c in host.capabilities))
        table.add_row(host.base_url, "OK" if ok else "FAIL", f"{detail} ({caps})")

    _console.print(table)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores token/mirrors in the user config .env)."""

    registry = typer.prompt("Registry hostname", default="docker.io", show_default=True).strip()
    mirror = typer.prompt("Mirror URL (empty for none)", default="", show_default=False).strip()
    token = typer.prompt("Bearer token (empty for none)", default="", hide_input=True, show_default=False).strip()

    if not registry:
        raise typer.BadParameter("registry is required")

    settings = AppSettings()
    mirrors = dict(settings.mirrors)
    if mirror:
        mirrors[registry] = [*mirrors.get(registry, []), mirror]

    env_path = write_user_env_vars(
        {
            "REFSCOUT_MIRRORS": json.dumps(mirrors, separators=(",", ":")) if mirrors else None,
            "REFSCOUT_REGISTRY_TOKEN": token or None,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
