"""Taxonomía de errores del discovery.

Reglas:
- Los errores fatales (`NoEligibleHostsError`, `ScopeConstructionError`) se
  propagan sin intentar ningún host.
- Los `HostAttemptError` son recuperables: el orquestador prueba el siguiente host.
- Si todos fallan, el llamador recibe un único `AllHostsFailedError`.
"""

from __future__ import annotations

from core.domain.models import RegistryErrors


class DiscoveryError(Exception):
    """Base de todos los errores del discovery."""


class NoEligibleHostsError(DiscoveryError):
    def __init__(self, capability: str = "discover") -> None:
        super().__init__(f"not found: no {capability} hosts")
        self.capability = capability


class ScopeConstructionError(DiscoveryError):
    """No se pudo construir el scope de repositorio o la anotación de namespace."""


class HostAttemptError(DiscoveryError):
    """Fallo de un único intento contra un host."""


class TransportError(HostAttemptError):
    pass


class UnexpectedStatusError(HostAttemptError):
    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class RegistryReportedError(UnexpectedStatusError):
    """Status != 200 con un cuerpo de errores del registry parseable."""

    def __init__(self, message: str, *, status_code: int, errors: RegistryErrors) -> None:
        super().__init__(message, status_code=status_code)
        self.errors = errors


class DecodeError(HostAttemptError):
    """Status 200 pero el cuerpo no es una lista de referrers válida."""


class AllHostsFailedError(DiscoveryError):
    """Todos los hosts fallaron; expone solo el primer error."""

    def __init__(self, first_error: Exception) -> None:
        super().__init__(f"all discover hosts failed: {first_error}")
        self.first_error = first_error


class InvalidReferenceError(ValueError):
    pass
