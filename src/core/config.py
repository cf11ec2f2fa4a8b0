"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP, token store) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "colisdesk"
ENV_PREFIX = "COLISDESK_"

# Servicios conocidos del backend (cada uno puede tener su propia base URL).
SERVICES: tuple[str, ...] = (
    "auth",
    "users",
    "roles",
    "tenants",
    "parcels",
    "payments",
    "settings",
    "products",
    "expeditions",
)


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Los valores `None` se ignoran, una cadena vacía borra la clave y el resto
    sobrescribe lo existente.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = parse_env_lines(env_path.read_text(encoding="utf-8"))

    for key, value in values.items():
        if value is None:
            continue
        if value == "":
            existing.pop(key, None)
        else:
            existing[key] = value

    lines = ["# colisdesk user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="http://localhost:3001",
        min_length=8,
        description="Base URL por defecto del backend (gateway o servicio auth).",
    )
    service_urls: dict[str, str] = Field(
        default_factory=dict,
        description="Overrides por servicio, p.ej. {\"parcels\": \"http://localhost:3002\"}.",
    )
    http_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="colisdesk/0.1",
        min_length=1,
        description="User-Agent enviado al backend.",
    )

    tenant_id: str | None = Field(
        default=None,
        description="Tenant por defecto (cabecera de tenant en cada request).",
    )
    tenant_header: str = Field(
        default="X-Tenant-ID",
        min_length=1,
        description="Nombre de la cabecera que transporta el tenant.",
    )

    slow_request_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Umbral a partir del cual una request se loguea como lenta.",
    )
    token_refresh_buffer_seconds: int = Field(
        default=300,
        ge=0,
        description="Un token se considera inválido si expira antes de este margen.",
    )
    token_refresh_window_seconds: int = Field(
        default=600,
        ge=0,
        description="Ventana previa a la expiración en la que se refresca el token.",
    )

    session_file: Path = Field(
        default_factory=lambda: get_user_config_dir() / "session.json",
        description="Fichero donde la CLI persiste la sesión (tokens + usuario).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("service_urls")
    @classmethod
    def _normalize_service_urls(cls, value: dict[str, str]) -> dict[str, str]:
        unknown = sorted(set(value) - set(SERVICES))
        if unknown:
            raise ValueError(f"unknown services: {', '.join(unknown)}")
        return {name: url.rstrip("/") for name, url in value.items()}

    def service_url(self, service: str) -> str:
        """Base URL efectiva para un servicio (override o `api_base_url`)."""

        if service not in SERVICES:
            raise ValueError(f"unknown service: {service}")
        return self.service_urls.get(service, self.api_base_url)
