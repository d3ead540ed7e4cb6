"""Contratos de los colaboradores del discovery.

Por qué Protocol:
- Contrato estructural (duck typing) sin herencia rígida.
- `httpx.Response` ya cumple `RegistryResponse`, así el Core no importa httpx.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from core.domain.context import DiscoveryContext
from core.domain.models import Host, HostCapability
from core.domain.reference import RefSpec

if TYPE_CHECKING:
    from core.services.request_builder import DiscoveryRequest


@runtime_checkable
class RegistryResponse(Protocol):
    """Respuesta HTTP en streaming; el cuerpo se lee una vez y se cierra."""

    status_code: int
    reason_phrase: str

    async def aread(self) -> bytes: ...

    async def aclose(self) -> None: ...


@runtime_checkable
class HostResolver(Protocol):
    def list_eligible_hosts(self, capability: HostCapability) -> list[Host]:
        """Hosts que declaran `capability`, en orden de preferencia."""

        ...


@runtime_checkable
class Transport(Protocol):
    """Ejecuta un request preparado.

    Reglas de diseño:
    - Aplica sus propios reintentos/backoff.
    - Los fallos de red se señalan con `core.domain.errors.TransportError`.
    - No captura `asyncio.CancelledError`.
    """

    async def send(self, ctx: DiscoveryContext, request: "DiscoveryRequest") -> RegistryResponse: ...


class ScopeBuilder(Protocol):
    def __call__(self, ctx: DiscoveryContext, refspec: RefSpec, push: bool) -> DiscoveryContext: ...
