"""Scopes de autorización por repositorio.

`repository:<path>:pull[,push]`, derivado del locator de la referencia del
subject (nunca del host consultado), para que un mirror reciba el mismo scope.
"""

from __future__ import annotations

import re

from core.domain.context import DiscoveryContext
from core.domain.errors import ScopeConstructionError
from core.domain.reference import RefSpec

_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_HOSTNAME_RE = re.compile(
    rf"^(?:{_DOMAIN_COMPONENT}(?:\.{_DOMAIN_COMPONENT})*|\[[0-9a-fA-F:]+\])(?::[0-9]{{1,5}})?$"
)
_PATH_COMPONENT_RE = re.compile(r"^[a-z0-9]+(?:(?:[._]|__|[-]*)[a-z0-9]+)*$")


def validate_hostname(hostname: str) -> str:
    if not hostname or not _HOSTNAME_RE.match(hostname):
        raise ScopeConstructionError(f"invalid registry hostname: {hostname!r}")
    return hostname


def repository_scope(refspec: RefSpec, push: bool = False) -> str:
    validate_hostname(refspec.hostname)

    path = refspec.namespace
    components = path.split("/") if path else []
    if not components or not all(_PATH_COMPONENT_RE.match(c) for c in components):
        raise ScopeConstructionError(f"invalid repository name: {refspec.locator!r}")

    scope = f"repository:{path}:pull"
    if push:
        scope += ",push"
    return scope


def context_with_repository_scope(ctx: DiscoveryContext, refspec: RefSpec, push: bool) -> DiscoveryContext:
    return ctx.with_scope(repository_scope(refspec, push))
