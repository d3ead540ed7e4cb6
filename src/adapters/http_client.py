"""Wrapper de httpx para hablar con registries.

Por qué un wrapper:
- Estandariza timeouts, headers, TLS y reintentos para todos los hosts.
- Facilita testeo: se inyecta un `httpx.AsyncClient` con `httpx.MockTransport`.
"""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

import httpx

from core.config import AppSettings
from core.domain.context import DiscoveryContext
from core.domain.errors import TransportError
from core.services.request_builder import DiscoveryRequest

logger = logging.getLogger(__name__)

RETRY_STATUSES = frozenset({429, 502, 503, 504})


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults para la API del registry."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        verify=not settings.skip_verify,
        transport=transport,
    )


class HttpxTransport:
    """`Transport` sobre httpx con reintentos y backoff exponencial.

    Devuelve respuestas en streaming; quien las recibe debe cerrarlas.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._owns_client = client is None
        self._client = client or build_async_client(self._settings)

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self, ctx: DiscoveryContext) -> dict[str, str]:
        headers: dict[str, str] = {}
        if ctx.scopes and self._settings.registry_token:
            headers["Authorization"] = f"Bearer {self._settings.registry_token}"
        return headers

    async def send(self, ctx: DiscoveryContext, request: DiscoveryRequest) -> httpx.Response:
        retries = self._settings.http_retries
        headers = self._headers(ctx)

        attempt = 0
        while True:
            http_request = self._client.build_request(request.method, request.url, headers=headers)
            try:
                response = await self._client.send(http_request, stream=True)
            except httpx.HTTPError as exc:
                if attempt >= retries:
                    raise TransportError(f"{request}: {exc}") from exc
                logger.debug("retrying %s after transport error: %s", request, exc)
            else:
                if response.status_code not in RETRY_STATUSES or attempt >= retries:
                    return response
                logger.debug("retrying %s after status %s", request, response.status_code)
                await response.aclose()

            attempt += 1
            await asyncio.sleep(self._settings.http_backoff_seconds * (2 ** (attempt - 1)))
