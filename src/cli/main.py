"""CLI principal (Typer).

Comandos:
- `refscout discover REFERENCE` lista los referrers de un subject.
- `refscout doctor ...` diagnóstico de configuración y conectividad.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.http_client import HttpxTransport
from adapters.json_exporter import export_referrers_json, referrers_payload
from adapters.registry_hosts import StaticHostResolver
from cli import doctor
from cli.ui_components import build_referrers_table, print_banner
from core.config import AppSettings
from core.domain.context import DiscoveryContext
from core.domain.errors import DiscoveryError, InvalidReferenceError
from core.domain.models import Descriptor, DiscoveredArtifact
from core.domain.reference import RefSpec, parse_reference
from core.services.discoverer import Discoverer

app = typer.Typer(no_args_is_help=True, help="Discover OCI referrers (signatures, SBOMs) of an image.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


def build_transport(settings: AppSettings) -> HttpxTransport:
    return HttpxTransport(settings)


async def discover_referrers(
    *,
    refspec: RefSpec,
    digest: str,
    artifact_type: str,
    settings: AppSettings,
) -> list[DiscoveredArtifact]:
    resolver = StaticHostResolver.for_registry(refspec.hostname, settings)
    async with build_transport(settings) as transport:
        discoverer = Discoverer(refspec, resolver, transport)
        return await discoverer.discover(DiscoveryContext(), Descriptor(digest=digest), artifact_type)


@app.command()
def discover(
    reference: str = typer.Argument(..., help="host/repository[:tag][@digest]"),
    artifact_type: str = typer.Option("", "--artifact-type", "-t", help="Filter by artifact type."),
    digest: Optional[str] = typer.Option(None, "--digest", "-d", help="Subject digest (if not in the reference)."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write JSON results to a file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Discover the referrers of a subject manifest."""

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        refspec = parse_reference(reference)
    except InvalidReferenceError as exc:
        raise typer.BadParameter(str(exc), param_hint="REFERENCE") from exc

    subject_digest = digest or refspec.digest
    if not subject_digest:
        if refspec.tag:
            raise typer.BadParameter(
                f"tag {refspec.tag!r} is not resolved to a digest: use REFERENCE@digest or --digest",
                param_hint="--digest",
            )
        raise typer.BadParameter("a digest is required: use REFERENCE@digest or --digest", param_hint="--digest")

    try:
        artifacts = asyncio.run(
            discover_referrers(
                refspec=refspec,
                digest=subject_digest,
                artifact_type=artifact_type,
                settings=settings,
            )
        )
    except DiscoveryError as exc:
        _err_console.print(f"[red]Discovery failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if output is not None:
        path = export_referrers_json(subject=subject_digest, artifacts=artifacts, output_path=output)
        _err_console.print(f"[green]Saved referrers to:[/green] {path}")

    if as_json:
        payload = referrers_payload(subject=subject_digest, artifacts=artifacts)
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))
        return

    print_banner(_console)
    if not artifacts:
        _console.print(f"[yellow]No referrers found for[/yellow] {subject_digest}")
        return
    _console.print(build_referrers_table(subject_digest, artifacts))


def run() -> None:
    app()
