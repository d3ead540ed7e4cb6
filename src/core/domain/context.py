"""Contexto por llamada (scopes de autorización).

Inmutable: añadir un scope devuelve un contexto nuevo, así un `discover`
concurrente nunca ve los scopes de otro.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class DiscoveryContext:
    scopes: tuple[str, ...] = field(default_factory=tuple)

    def with_scope(self, scope: str) -> "DiscoveryContext":
        if scope in self.scopes:
            return self
        return replace(self, scopes=(*self.scopes, scope))
