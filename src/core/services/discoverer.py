"""Orquestador del discovery de referrers.

Protocolo:
1. Hosts con capacidad `discover` (una vez por llamada); ninguno -> error inmediato.
2. Scope de repositorio (una vez por llamada, compartido por todos los intentos).
3. Para cada host, en orden: request -> transporte -> decode.
   - Éxito: se devuelve en el acto; los hosts restantes no se prueban.
   - Fallo: se guarda solo el primer error y se pasa al siguiente host.
4. Todos fallan -> `AllHostsFailedError` con el primer error.

Reglas de diseño:
- Secuencial, sin fan-out: nunca se mezclan resultados de hosts distintos.
- Sin estado mutable compartido: todo vive en la llamada a `discover`.
- `asyncio.CancelledError` no se captura: cancelar aborta la llamada.
"""

from __future__ import annotations

import logging

from core.domain.context import DiscoveryContext
from core.domain.errors import AllHostsFailedError, NoEligibleHostsError
from core.domain.models import Descriptor, DiscoveredArtifact, DiscoveryQuery, HostCapability
from core.domain.reference import RefSpec
from core.interfaces.registry import HostResolver, ScopeBuilder, Transport
from core.services.request_builder import DiscoveryRequest, build_discovery_request
from core.services.response_decoder import decode_referrers
from core.services.scope import context_with_repository_scope

logger = logging.getLogger(__name__)


class Discoverer:
    """Descubre referrers de un subject contra los hosts del registry."""

    def __init__(
        self,
        refspec: RefSpec,
        resolver: HostResolver,
        transport: Transport,
        *,
        scope_builder: ScopeBuilder = context_with_repository_scope,
    ) -> None:
        self._refspec = refspec
        self._resolver = resolver
        self._transport = transport
        self._scope_builder = scope_builder

    async def discover(
        self,
        ctx: DiscoveryContext,
        subject: Descriptor,
        artifact_type: str = "",
    ) -> list[DiscoveredArtifact]:
        hosts = self._resolver.list_eligible_hosts(HostCapability.DISCOVER)
        if not hosts:
            raise NoEligibleHostsError(HostCapability.DISCOVER.value)

        ctx = self._scope_builder(ctx, self._refspec, False)
        query = DiscoveryQuery(subject_digest=subject.digest, artifact_type=artifact_type)

        first_error: Exception | None = None
        for host in hosts:
            request = build_discovery_request(host, self._refspec, query)
            logger.debug("discovering referrers of %s via %s", subject.digest, request)

            try:
                artifacts = await self._attempt(ctx, request)
            except Exception as exc:
                logger.warning("discover via %s failed for %s: %s", host.host, subject.digest, exc)
                if first_error is None:
                    first_error = exc
                continue

            logger.info("found %d referrer(s) of %s on %s", len(artifacts), subject.digest, host.host)
            return artifacts

        assert first_error is not None
        raise AllHostsFailedError(first_error) from first_error

    async def _attempt(self, ctx: DiscoveryContext, request: DiscoveryRequest) -> list[DiscoveredArtifact]:
        response = await self._transport.send(ctx, request)
        return await decode_referrers(request, response)
