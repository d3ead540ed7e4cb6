"""Decodificación de la respuesta de `.../referrers`.

- 200: lista de referrers -> `DiscoveredArtifact`.
- != 200: errores del registry si se pueden parsear; si no, mensaje genérico.
- La respuesta se cierra siempre, también cuando el decode falla.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from core.domain.errors import DecodeError, RegistryReportedError, UnexpectedStatusError
from core.domain.models import DiscoveredArtifact, ReferrersResponse, RegistryErrors
from core.interfaces.registry import RegistryResponse
from core.services.request_builder import DiscoveryRequest


def status_text(response: RegistryResponse) -> str:
    reason = (getattr(response, "reason_phrase", "") or "").strip()
    return f"{response.status_code} {reason}" if reason else str(response.status_code)


def parse_registry_errors(body: bytes) -> RegistryErrors | None:
    """Parsea `{"errors": [...]}` (o una lista directa de errores)."""

    try:
        data: Any = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return None
    if isinstance(data, list):
        data = {"errors": data}
    if not isinstance(data, dict):
        return None
    try:
        return RegistryErrors.model_validate(data)
    except ValidationError:
        return None


def parse_referrers(body: bytes) -> list[DiscoveredArtifact]:
    try:
        result = ReferrersResponse.model_validate_json(body)
    except ValidationError as exc:
        raise DecodeError(f"invalid referrers response: {exc}") from exc
    return [DiscoveredArtifact(digest=ref.digest, artifact=ref.manifest) for ref in result.references]


async def decode_referrers(request: DiscoveryRequest, response: RegistryResponse) -> list[DiscoveredArtifact]:
    try:
        body = await response.aread()

        if response.status_code != 200:
            status = status_text(response)
            errors = parse_registry_errors(body)
            if errors is None or len(errors) < 1:
                raise UnexpectedStatusError(
                    f"unexpected status code {request}: {status}",
                    status_code=response.status_code,
                )
            raise RegistryReportedError(
                f"unexpected status code {request}: {status} - Server message: {errors}",
                status_code=response.status_code,
                errors=errors,
            )

        return parse_referrers(body)
    finally:
        await response.aclose()
