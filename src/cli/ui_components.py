"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import DiscoveredArtifact


def print_banner(console: Console) -> None:
    title = Text("refscout", style="bold cyan")
    subtitle = Text("OCI referrers discovery • signatures • SBOMs", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _short_digest(digest: str, keep: int = 19) -> str:
    return digest if len(digest) <= keep else digest[:keep] + "…"


def build_referrers_table(subject: str, artifacts: Sequence[DiscoveredArtifact]) -> Table:
    """Tabla Rich con un referrer por fila."""

    table = Table(title=f"Referrers of {subject}")
    table.add_column("Digest", style="cyan", no_wrap=True)
    table.add_column("Artifact type", style="white")
    table.add_column("Media type", style="dim")
    table.add_column("Blobs", style="green", justify="right")
    table.add_column("Annotations", style="magenta")

    for artifact in artifacts:
        manifest = artifact.artifact
        annotations = ", ".join(f"{k}={v}" for k, v in sorted(manifest.annotations.items()))
        table.add_row(
            _short_digest(artifact.digest),
            manifest.artifact_type or "-",
            manifest.media_type or "-",
            str(len(manifest.blobs)),
            annotations or "-",
        )
    return table
