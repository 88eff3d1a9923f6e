"""Errores del cliente Cinebot.

Jerarquía:
- `CinebotError`: base de todo lo que lanza el cliente.
- `ConfigurationError`: configuración inválida al construir el cliente.
- `CinebotConnectionError`: fallo de transporte antes de recibir respuesta.
- `ProtocolError`: hay respuesta pero no respeta el envelope/esquema.
- `RemoteError`: el servidor informa un fallo genérico.
- `LogicalError`: el servidor informa una regla de negocio violada
  (residuo insuficiente, preemisión vencida, sector agotado...).
- `LeaseStateError`: operación sobre una preemisión ya cerrada (lado cliente).
"""

from __future__ import annotations

LOGICAL_EXCEPTION_CLASS = "com.cinebot.exception.LogicalException"


class CinebotError(Exception):
    """Base class for client errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(CinebotError):
    """Raised when the client settings are invalid."""


class CinebotConnectionError(CinebotError):
    """Raised when the request never got a response (network, DNS, timeout, TLS)."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ProtocolError(CinebotError):
    """Raised when the response body is not a valid envelope or payload."""

    def __init__(self, message: str = "Invalid response", *, body: str | None = None) -> None:
        super().__init__(message)
        self.body = body


class RemoteError(CinebotError):
    """Generic failure reported by the server envelope."""

    def __init__(self, message: str | None, *, exception_class: str | None = None) -> None:
        super().__init__(message or "")
        self.exception_class = exception_class


class LogicalError(RemoteError):
    """Business-rule failure reported by the server."""

    def __init__(self, message: str | None) -> None:
        super().__init__(message, exception_class=LOGICAL_EXCEPTION_CLASS)


class LeaseStateError(CinebotError):
    """Raised when a pre-issuance lease is used after reaching a terminal state."""
