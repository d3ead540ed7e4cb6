"""Resolución estática de hosts a partir de la configuración.

Orden de preferencia: mirrors configurados para el registry, después el propio
registry. Los mirrors solo sirven lectura (pull/resolve/discover).
"""

from __future__ import annotations

from urllib.parse import urlsplit

from core.config import AppSettings
from core.domain.models import ALL_CAPABILITIES, Host, HostCapability
from core.services.hosts import filter_hosts

MIRROR_CAPABILITIES: frozenset[HostCapability] = frozenset(
    {HostCapability.PULL, HostCapability.RESOLVE, HostCapability.DISCOVER}
)


def _default_scheme(hostname: str, plain_http: bool) -> str:
    if plain_http:
        return "http"
    host = hostname.split(":", 1)[0]
    if host in ("localhost", "127.0.0.1"):
        return "http"
    return "https"


def host_from_url(url: str, capabilities: frozenset[HostCapability] = MIRROR_CAPABILITIES) -> Host:
    """`https://mirror.example/v2` -> `Host`. Sin path se asume `/v2`."""

    parts = urlsplit(url if "://" in url else f"https://{url}")
    path = parts.path.rstrip("/") or "/v2"
    return Host(host=parts.netloc, scheme=parts.scheme or "https", path=path, capabilities=capabilities)


def default_registry_host(hostname: str, plain_http: bool = False) -> Host:
    host = "registry-1.docker.io" if hostname == "docker.io" else hostname
    return Host(host=host, scheme=_default_scheme(hostname, plain_http), capabilities=ALL_CAPABILITIES)


def configure_hosts(hostname: str, settings: AppSettings | None = None) -> list[Host]:
    settings = settings or AppSettings()
    hosts = [host_from_url(url) for url in settings.mirrors.get(hostname, [])]
    hosts.append(default_registry_host(hostname, settings.plain_http))
    return hosts


class StaticHostResolver:
    """`HostResolver` sobre una lista fija de hosts."""

    def __init__(self, hosts: list[Host]) -> None:
        self._hosts = list(hosts)

    @classmethod
    def for_registry(cls, hostname: str, settings: AppSettings | None = None) -> "StaticHostResolver":
        return cls(configure_hosts(hostname, settings))

    @property
    def hosts(self) -> list[Host]:
        return list(self._hosts)

    def list_eligible_hosts(self, capability: HostCapability) -> list[Host]:
        return filter_hosts(self._hosts, capability)
