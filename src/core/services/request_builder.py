"""Construcción del request de discovery para un host concreto.

Forma del request:
- `GET <host.path>/_ext/oci-artifacts/v1-rc1/<repo>/manifests/<digest>/referrers`
- `?referenceType=<artifact type>` codificado una sola vez.
- `&ns=<registry>` solo si el host es un mirror del registry del subject.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

from core.domain.models import DiscoveryQuery, Host
from core.domain.reference import RefSpec
from core.services.scope import validate_hostname

DISCOVER_EXTENSION_PATH = "/_ext/oci-artifacts/v1-rc1"

_DOCKER_HUB = "docker.io"
_DOCKER_HUB_REGISTRY = "registry-1.docker.io"


@dataclass
class DiscoveryRequest:
    host: Host
    path: str
    query: str = ""
    method: str = "GET"
    namespace: str | None = None

    @property
    def url(self) -> str:
        base = f"{self.host.scheme}://{self.host.host}{self.path}"
        return f"{base}?{self.query}" if self.query else base

    def add_namespace(self, registry_hostname: str) -> None:
        """Anota el registry de origen cuando el host actúa como proxy."""

        validate_hostname(registry_hostname)
        if not is_proxy(self.host.host, registry_hostname):
            return
        ns = urlencode({"ns": registry_hostname})
        self.query = f"{self.query}&{ns}" if self.query else ns
        self.namespace = registry_hostname

    def __str__(self) -> str:
        return self.url


def is_proxy(host: str, registry_hostname: str) -> bool:
    if registry_hostname == host:
        return False
    return not (registry_hostname == _DOCKER_HUB and host == _DOCKER_HUB_REGISTRY)


def build_discovery_request(host: Host, refspec: RefSpec, query: DiscoveryQuery) -> DiscoveryRequest:
    segments = [
        host.path.rstrip("/"),
        DISCOVER_EXTENSION_PATH.strip("/"),
        refspec.namespace,
        "manifests",
        query.subject_digest,
        "referrers",
    ]
    path = "/".join(segment for segment in segments if segment)
    if not path.startswith("/"):
        path = "/" + path

    request = DiscoveryRequest(
        host=host,
        path=path,
        query=urlencode({"referenceType": query.artifact_type}),
    )
    request.add_namespace(refspec.hostname)
    return request
