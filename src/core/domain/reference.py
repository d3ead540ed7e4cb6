"""Referencias de imagen: `host/repo[:tag][@digest]`.

Solo se parsea lo que necesita el discovery: el locator (host + repo), el
hostname del registry y el digest. No se valida el algoritmo del digest.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from core.domain.errors import InvalidReferenceError

_TAG_RE = re.compile(r"^[\w][\w.-]{0,127}$")


@dataclass(frozen=True)
class RefSpec:
    locator: str
    object: str = ""

    @property
    def hostname(self) -> str:
        host, _, _ = self.locator.partition("/")
        return host

    @property
    def namespace(self) -> str:
        """Path del repositorio dentro del registry (sin hostname)."""

        return self.locator[len(self.hostname) + 1 :]

    @property
    def digest(self) -> str | None:
        _, sep, dgst = self.object.partition("@")
        return dgst if sep else None

    @property
    def tag(self) -> str | None:
        tag, _, _ = self.object.partition("@")
        return tag or None

    def __str__(self) -> str:
        if not self.object:
            return self.locator
        if self.object.startswith("@"):
            return f"{self.locator}{self.object}"
        return f"{self.locator}:{self.object}"


def parse_reference(value: str) -> RefSpec:
    """Parsea `host/repo[:tag][@digest]` en un `RefSpec`.

    El hostname es obligatorio (no se asume `docker.io`).
    """

    s = (value or "").strip()
    if not s:
        raise InvalidReferenceError("reference is empty")
    if "://" in s:
        raise InvalidReferenceError(f"reference must not include a scheme: {value!r}")

    locator, sep, dgst = s.partition("@")
    obj = ""
    if sep:
        if ":" not in dgst:
            raise InvalidReferenceError(f"invalid digest in reference: {value!r}")
        obj = "@" + dgst

    # El tag va tras el último ':' que esté después del último '/'.
    slash = locator.rfind("/")
    colon = locator.rfind(":")
    if colon > slash:
        tag = locator[colon + 1 :]
        if not _TAG_RE.match(tag):
            raise InvalidReferenceError(f"invalid tag in reference: {value!r}")
        locator = locator[:colon]
        obj = tag + obj

    if slash <= 0 or locator.endswith("/"):
        raise InvalidReferenceError(f"reference must be of the form host/repository: {value!r}")

    return RefSpec(locator=locator, object=obj)
