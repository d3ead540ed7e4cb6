"""Filtrado de hosts por capacidad."""

from __future__ import annotations

from typing import Iterable

from core.domain.models import Host, HostCapability


def filter_hosts(hosts: Iterable[Host], capability: HostCapability) -> list[Host]:
    """Subconjunto de `hosts` que soporta `capability`, conservando el orden."""

    return [host for host in hosts if host.supports(capability)]
