"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación en el borde (JSON del registry) sin acoplar el Core a httpx.
- Los modelos describen *qué* devuelve un registry, no *cómo* se obtiene.

Nota:
- El manifest de artefacto sigue el borrador OCI Artifacts `v1-rc1`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic.config import ConfigDict

MEDIA_TYPE_ARTIFACT_MANIFEST = "application/vnd.oci.artifact.manifest.v1-rc1+json"


class HostCapability(str, Enum):
    """Operaciones que un host de registry declara soportar."""

    PULL = "pull"
    RESOLVE = "resolve"
    PUSH = "push"
    DISCOVER = "discover"


ALL_CAPABILITIES: frozenset[HostCapability] = frozenset(HostCapability)


class Host(BaseModel):
    """Endpoint candidato de un registry (registry propio o mirror)."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., min_length=1, description="host[:port] del endpoint.")
    scheme: str = Field(default="https", pattern=r"^https?$")
    path: str = Field(default="/v2", description="Prefijo de la API en el host.")
    capabilities: frozenset[HostCapability] = Field(default=ALL_CAPABILITIES)

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"

    def supports(self, capability: HostCapability) -> bool:
        return capability in self.capabilities


class DiscoveryQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject_digest: str = Field(..., min_length=1)
    artifact_type: str = Field(default="")


class Descriptor(BaseModel):
    """Descriptor OCI (subject, blobs, subjectManifest)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    media_type: str = Field(default="", alias="mediaType")
    digest: str = Field(default="")
    size: int = Field(default=0, ge=0)
    artifact_type: str | None = Field(default=None, alias="artifactType")
    annotations: dict[str, str] = Field(default_factory=dict)

    @field_validator("annotations", mode="before")
    @classmethod
    def _null_annotations(cls, value: Any) -> Any:
        return {} if value is None else value


class ArtifactManifest(BaseModel):
    """Manifest de un artefacto referrer (firma, SBOM, atestación)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    schema_version: int | None = Field(default=None, alias="schemaVersion")
    media_type: str = Field(default="", alias="mediaType")
    artifact_type: str = Field(default="", alias="artifactType")
    blobs: list[Descriptor] = Field(default_factory=list)
    subject_manifest: Descriptor | None = Field(default=None, alias="subjectManifest")
    annotations: dict[str, str] = Field(default_factory=dict)

    # Los registries en Go serializan slices/maps nil como `null`.
    @field_validator("blobs", "annotations", mode="before")
    @classmethod
    def _null_collections(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return [] if info.field_name == "blobs" else {}
        return value


class DiscoveredArtifact(BaseModel):
    """Resultado normalizado: un referrer encontrado para el subject."""

    model_config = ConfigDict(frozen=True)

    digest: str = Field(..., min_length=1)
    artifact: ArtifactManifest


class ReferrerEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    digest: str = Field(..., min_length=1)
    manifest: ArtifactManifest = Field(default_factory=ArtifactManifest)

    @field_validator("manifest", mode="before")
    @classmethod
    def _null_manifest(cls, value: Any) -> Any:
        return {} if value is None else value


class ReferrersResponse(BaseModel):
    """Cuerpo 200 de `.../manifests/<digest>/referrers`."""

    model_config = ConfigDict(extra="ignore")

    references: list[ReferrerEntry] = Field(default_factory=list)

    @field_validator("references", mode="before")
    @classmethod
    def _null_references(cls, value: Any) -> Any:
        return [] if value is None else value


class RegistryError(BaseModel):
    """Un registro `{code, message, detail}` del formato de errores del registry."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    code: str = Field(default="UNKNOWN")
    message: str = Field(default="")
    detail: Any = None

    def __str__(self) -> str:
        code = self.code.lower().replace("_", " ")
        if not self.message:
            return code
        return f"{code}: {self.message}"


class RegistryErrors(BaseModel):
    """Lista ordenada de errores devuelta en un status != 200."""

    model_config = ConfigDict(extra="ignore")

    errors: list[RegistryError] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.errors)

    def __str__(self) -> str:
        if not self.errors:
            return "<nil>"
        if len(self.errors) == 1:
            return str(self.errors[0])
        return "errors:\n" + "\n".join(str(err) for err in self.errors)
