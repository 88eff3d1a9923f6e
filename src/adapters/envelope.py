"""Decoder del envelope `{success, value, error, exception}`.

Responsabilidad:
- Validar que el cuerpo sea un envelope JSON.
- Devolver `value` tal cual si `success` es verdadero.
- Clasificar el fallo en `LogicalError` o `RemoteError` según el
  discriminador `exception` (comparación exacta de texto).
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from core.domain.models import Envelope
from core.errors import LOGICAL_EXCEPTION_CLASS, LogicalError, ProtocolError, RemoteError


def parse_envelope(body: str | bytes | None) -> Envelope:
    """Parsea el cuerpo crudo; cualquier forma inesperada es `ProtocolError`."""

    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    if not text or not text.strip():
        raise ProtocolError("Invalid response: empty body", body=text)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProtocolError("Invalid response: not JSON", body=text) from exc

    if not data or not isinstance(data, dict):
        raise ProtocolError("Invalid response: not an envelope", body=text)

    try:
        return Envelope.model_validate(data)
    except ValidationError as exc:
        raise ProtocolError("Invalid response: missing envelope fields", body=text) from exc


def decode(body: str | bytes | None, logger: logging.Logger | None = None) -> Any:
    """Devuelve el `value` del envelope o lanza el error clasificado."""

    envelope = parse_envelope(body)
    if envelope.success:
        return envelope.value

    message = _as_text(envelope.error)
    exception_class = _as_text(envelope.exception)
    if logger:
        logger.error("Remote error: %s", message)

    # Un discriminador ausente es un fallo genérico, no un crash.
    if exception_class == LOGICAL_EXCEPTION_CLASS:
        raise LogicalError(message)
    raise RemoteError(message, exception_class=exception_class)


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)
