"""Exportación JSON de referrers descubiertos.

Por qué JSON:
- Interoperabilidad con otras herramientas de supply chain (cosign, oras, jq).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from core.domain.models import DiscoveredArtifact


def referrers_payload(*, subject: str, artifacts: Sequence[DiscoveredArtifact]) -> dict[str, Any]:
    return {
        "subject": subject,
        "references": [
            {
                "digest": artifact.digest,
                "manifest": artifact.artifact.model_dump(mode="json", by_alias=True, exclude_none=True),
            }
            for artifact in artifacts
        ],
    }


def export_referrers_json(*, subject: str, artifacts: Sequence[DiscoveredArtifact], output_path: Path) -> Path:
    """Exporta los referrers a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = referrers_payload(subject=subject, artifacts=artifacts)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
