"""Wrapper de httpx para el sistema remoto Cinebot.

Por qué un wrapper:
- Estandariza timeouts, headers, autenticación Basic y política TLS.
- Traduce fallos de red a `CinebotConnectionError`.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from core.config import ClientSettings, resolve_timeouts
from core.errors import CinebotConnectionError


def build_client(
    settings: ClientSettings,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` con autenticación y headers del sistema.

    Por qué un builder:
    - Centraliza auth/headers/TLS para que GET y POST se comporten igual.
    - `transport` permite sustituir la red en tests.
    """

    total, connect = resolve_timeouts(settings)
    return httpx.Client(
        base_url=f"{settings.base_url}/remote/",
        auth=httpx.BasicAuth(settings.idpv, settings.passkey.get_secret_value()),
        headers={"User-Agent": settings.user_agent},
        timeout=httpx.Timeout(total, connect=connect),
        verify=settings.verify_tls,
        transport=transport,
    )


class HttpTransport:
    """Transporte GET/POST sobre httpx.

    Devuelve siempre el cuerpo crudo: el código HTTP no se interpreta, el
    envelope decide si la llamada fue correcta.
    """

    def __init__(
        self,
        settings: ClientSettings,
        *,
        logger: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._logger = logger
        self._client = build_client(settings, transport=transport)

    def _timeout(self, override: float | None) -> httpx.Timeout:
        total, connect = resolve_timeouts(self._settings, override)
        return httpx.Timeout(total, connect=connect)

    def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> str:
        query = {k: v for k, v in (params or {}).items() if v is not None}
        # Legacy: credenciales también en query string. Eliminar cuando todos
        # los servidores acepten solo el header Authorization.
        query["id"] = self._settings.idpv
        query["passkey"] = self._settings.passkey.get_secret_value()

        request = self._client.build_request(
            "GET",
            path,
            params=query,
            timeout=self._timeout(timeout),
        )
        return self._send(request, body=None)

    def post(
        self,
        path: str,
        body: Mapping[str, Any] | None = None,
        *,
        json_body: bool = True,
        timeout: float | None = None,
    ) -> str:
        payload = dict(body or {})
        if json_body:
            content = json.dumps(payload)
            request = self._client.build_request(
                "POST",
                path,
                content=content,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout(timeout),
            )
        else:
            content = str(payload) if payload else ""
            request = self._client.build_request(
                "POST",
                path,
                data=payload,
                timeout=self._timeout(timeout),
            )
        return self._send(request, body=content)

    def _send(self, request: httpx.Request, *, body: str | None) -> str:
        if self._logger:
            suffix = f" {body}" if body else ""
            self._logger.debug("%s >> %s%s", request.method, request.url, suffix)

        try:
            response = self._client.send(request)
        except httpx.TransportError as exc:
            if self._logger:
                self._logger.error("Request failed: %s", exc)
            raise CinebotConnectionError(
                f"Connection error: {exc}",
                url=str(request.url),
            ) from exc

        text = response.text
        if self._logger:
            self._logger.debug("%s << %s", request.method, text)
        return text

    def close(self) -> None:
        self._client.close()
