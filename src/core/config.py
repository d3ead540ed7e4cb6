"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/hosts) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "refscout"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "refscout"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "refscout"
    return Path.home() / ".config" / "refscout"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# refscout user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    `mirrors` se pasa como JSON en el entorno, p.ej.
    `REFSCOUT_MIRRORS='{"docker.io": ["https://mirror.gcr.io"]}'`.
    """

    model_config = SettingsConfigDict(
        env_prefix="REFSCOUT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    http_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Reintentos por host ante fallos transitorios (red, 429, 5xx).",
    )
    http_backoff_seconds: float = Field(
        default=0.3,
        ge=0,
        description="Backoff base entre reintentos (exponencial).",
    )
    user_agent: str = Field(
        default="refscout/0.1",
        min_length=1,
        description="User-Agent para peticiones al registry.",
    )

    plain_http: bool = Field(
        default=False,
        description="Usar http:// en vez de https:// para el registry.",
    )
    skip_verify: bool = Field(
        default=False,
        description="No verificar certificados TLS.",
    )
    registry_token: str | None = Field(
        default=None,
        description="Bearer token estático para el registry (opcional).",
    )
    mirrors: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Mirrors por hostname de registry; se consultan antes que el registry.",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value
