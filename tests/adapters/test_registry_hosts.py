from __future__ import annotations

from adapters.registry_hosts import (
    MIRROR_CAPABILITIES,
    StaticHostResolver,
    configure_hosts,
    default_registry_host,
    host_from_url,
)
from core.config import AppSettings
from core.domain.models import ALL_CAPABILITIES, Host, HostCapability


def test_docker_hub_maps_to_registry_1():
    host = default_registry_host("docker.io")

    assert host.host == "registry-1.docker.io"
    assert host.base_url == "https://registry-1.docker.io/v2"
    assert host.capabilities == ALL_CAPABILITIES


def test_localhost_defaults_to_plain_http():
    assert default_registry_host("localhost:5000").scheme == "http"
    assert default_registry_host("ghcr.io").scheme == "https"
    assert default_registry_host("ghcr.io", plain_http=True).scheme == "http"


def test_host_from_url():
    host = host_from_url("http://mirror.example:8080/cache/v2/")

    assert host.scheme == "http"
    assert host.host == "mirror.example:8080"
    assert host.path == "/cache/v2"
    assert host.capabilities == MIRROR_CAPABILITIES
    assert host_from_url("mirror.example").base_url == "https://mirror.example/v2"


def test_mirrors_come_before_registry():
    settings = AppSettings(mirrors={"docker.io": ["https://mirror.gcr.io", "https://dockerhub.example"]})

    hosts = configure_hosts("docker.io", settings)

    assert [h.host for h in hosts] == ["mirror.gcr.io", "dockerhub.example", "registry-1.docker.io"]


def test_resolver_filters_by_capability_preserving_order():
    hosts = [
        Host(host="a.example", capabilities=frozenset({HostCapability.PULL})),
        Host(host="b.example", capabilities=frozenset({HostCapability.DISCOVER})),
        Host(host="c.example"),
    ]
    resolver = StaticHostResolver(hosts)

    assert [h.host for h in resolver.list_eligible_hosts(HostCapability.DISCOVER)] == ["b.example", "c.example"]
    assert [h.host for h in resolver.list_eligible_hosts(HostCapability.PUSH)] == ["c.example"]
    assert len(resolver.hosts) == 3
