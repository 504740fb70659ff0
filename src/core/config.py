"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (Home Assistant/Telegram) lean config de forma
  consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.uri import DEFAULT_AUTHORITY, parse_authority

DEFAULT_USER_AGENT = "hass-doorbot/0.1"
DEFAULT_HTTP_TIMEOUT_SECONDS = 20.0


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "hass-doorbot"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "hass-doorbot"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "hass-doorbot"
    return Path.home() / ".config" / "hass-doorbot"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
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


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# hass-doorbot user config (.env)"]
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
        env_prefix="DOORBOT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    hass_token: str = Field(
        ...,
        min_length=1,
        description="Long-lived access token de Home Assistant (Bearer).",
    )
    hass_authority: str = Field(
        default=DEFAULT_AUTHORITY,
        min_length=1,
        description="host[:port] de Home Assistant. El default es un placeholder local.",
    )
    http_timeout_seconds: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent para peticiones HTTP.",
    )

    door_entity_id: str = Field(
        default="switch.open_ring_one_door",
        pattern=r"^[a-z0-9_]+\.[A-Za-z0-9_]+$",
        description="Entidad que libera la puerta (switch.* o button.*).",
    )
    pulse_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Tiempo entre turn_on y turn_off para entidades switch.",
    )

    telegram_token: str | None = Field(
        default=None,
        description="Token del bot de Telegram (solo para `run`).",
    )
    telegram_api_url: str = Field(
        default="https://api.telegram.org",
        min_length=8,
        description="Base URL de la Bot API de Telegram.",
    )
    control_chat_id: int | None = Field(
        default=None,
        description="Único chat autorizado a dar órdenes al bot.",
    )
    bot_username: str = Field(
        default="undefspace_bot",
        min_length=1,
        description="Username del bot (sufijo @ en los comandos).",
    )
    poll_timeout_seconds: int = Field(
        default=30,
        ge=0,
        le=50,
        description="Timeout de long polling de getUpdates (segundos).",
    )
    restart_delay_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Espera antes de reiniciar el bot tras un fallo.",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG muestra las trazas HTTP).",
    )

    @field_validator("hass_authority")
    @classmethod
    def _validate_authority(cls, value: str) -> str:
        return parse_authority(value)

    @field_validator("bot_username")
    @classmethod
    def _strip_at(cls, value: str) -> str:
        return value.lstrip("@")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()
