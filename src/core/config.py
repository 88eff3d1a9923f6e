"""Configuración del cliente Cinebot.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Un único contrato inmutable (URL, credenciales, timeouts, TLS) que se
  inyecta en el cliente; no hay estado global ni campos mutables.
- Solo se lee configuración: el cliente no escribe ficheros propios.
"""

from __future__ import annotations

from typing import Any

from pydantic import AnyHttpUrl, Field, SecretStr, TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError

CLIENT_VERSION = "2.1.0"
DEFAULT_USER_AGENT = f"CinebotApiClient-Python/{CLIENT_VERSION}"

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


class ClientSettings(BaseSettings):
    """Configuración inmutable de un cliente remoto Cinebot.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars / .env) antes de abrir
      cualquier conexión.
    - `frozen=True`: una vez construido, el cliente solo lee configuración.
    """

    model_config = SettingsConfigDict(
        env_prefix="CINEBOT_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        ...,
        description="URL del sistema en formato http[s]://host:port (p.ej. https://1.2.3.4:8443).",
    )
    idpv: str = Field(
        ...,
        min_length=1,
        description="Identificador del cliente remoto registrado en el sistema.",
    )
    passkey: SecretStr = Field(
        ...,
        description="Password del cliente remoto.",
    )
    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout total por request; None usa el default (30s).",
    )
    connect_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout de conexión; None usa timeout_seconds o el default (10s).",
    )
    verify_tls: bool = Field(
        default=False,
        description=(
            "Verificar certificado y hostname TLS. Desactivado por defecto porque "
            "los equipos fiscales on-premise suelen usar certificados autofirmados."
        ),
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent enviado en cada request.",
    )

    @field_validator("idpv", mode="before")
    @classmethod
    def _coerce_idpv(cls, value: Any) -> Any:
        # El sistema registra clientes con id numérico, pero viaja como texto.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        try:
            _URL_ADAPTER.validate_python(value)
        except ValidationError as exc:
            raise ValueError(f"invalid URL {value!r}, expected http[s]://host:port") from exc
        return value.rstrip("/")


def build_settings(**values: Any) -> ClientSettings:
    """Construye `ClientSettings` traduciendo errores de validación.

    `ValidationError` es un detalle de pydantic; hacia fuera exponemos
    `ConfigurationError` para que el llamador no dependa de la librería.
    """

    try:
        return ClientSettings(**values)
    except ValidationError as exc:
        raise ConfigurationError(_describe_validation_error(exc)) from exc


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "settings"
        parts.append(f"{loc}: {err.get('msg')}")
    return "Invalid configuration: " + "; ".join(parts)


def resolve_timeouts(
    settings: ClientSettings,
    override: float | None = None,
) -> tuple[float, float]:
    """Devuelve `(total, connect)` en segundos.

    Orden: override por llamada → configurado en el cliente → default.
    El connect usa además el timeout total configurado antes del default.
    """

    if override:
        return float(override), float(override)

    total = settings.timeout_seconds or DEFAULT_TIMEOUT_SECONDS
    connect = (
        settings.connect_timeout_seconds
        or settings.timeout_seconds
        or DEFAULT_CONNECT_TIMEOUT_SECONDS
    )
    return float(total), float(connect)
