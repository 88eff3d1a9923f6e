"""Contrato del transporte remoto.

Por qué Protocol:
- Contrato estructural (duck typing) sin herencia rígida.
- `CinebotClient` puede trabajar con el transporte httpx o con un doble de
  test que devuelva cuerpos crudos.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class RemoteTransport(Protocol):
    """Ejecuta requests contra `{base_url}/remote/{path}` y devuelve el cuerpo crudo.

    Reglas de diseño:
    - No interpreta el envelope: eso es trabajo del decoder.
    - Fallos de red se traducen a `CinebotConnectionError`.
    """

    def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> str:
        ...

    def post(
        self,
        path: str,
        body: Mapping[str, Any] | None = None,
        *,
        json_body: bool = True,
        timeout: float | None = None,
    ) -> str:
        ...

    def close(self) -> None:
        ...
