"""Cliente remoto del sistema fiscal Cinebot.

Responsabilidad:
- Exponer las operaciones remotas (programación, mapas, estados, reservas,
  bloqueos y emisión en dos pasos).
- Componer transporte + decoder y validar cada `value` contra su esquema.

Ejemplo:
    with CinebotClient("https://1.2.3.4:8443", "2", "secretpasskey") as client:
        programmazione = client.get_programmazione()

Nota:
- El cliente solo guarda configuración inmutable; una instancia se puede
  compartir entre hilos (httpx.Client es thread-safe).
- No hay reintentos ni caché: cada fallo llega directo al llamador.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Mapping, Sequence, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from adapters.envelope import decode
from adapters.http_client import HttpTransport
from core.config import DEFAULT_USER_AGENT, ClientSettings, build_settings
from core.domain.models import (
    Abbonamento,
    Anagrafica,
    Ingresso,
    Posto,
    Programmazione,
    StatoEvento,
    StatoTipoAbbonamento,
    SystemStatus,
    as_list,
    to_epoch_millis,
)
from core.errors import ProtocolError
from core.interfaces.transport import RemoteTransport

T = TypeVar("T")

_POSTI_ADAPTER = TypeAdapter(list[Posto])


def _dump(item: Any) -> Any:
    if isinstance(item, BaseModel):
        return item.model_dump(mode="json")
    if isinstance(item, Mapping):
        return dict(item)
    return item


def _dump_all(items: Any) -> list[Any]:
    return [_dump(item) for item in as_list(items)]


class CinebotClient:
    """Cliente síncrono del protocolo remoto Cinebot.

    Se puede construir con URL/credenciales directamente o
    con un `ClientSettings` ya validado vía `from_settings`.
    """

    def __init__(
        self,
        url: str,
        idpv: str | int,
        passkey: str,
        *,
        timeout: float | None = None,
        connect_timeout: float | None = None,
        verify_tls: bool = False,
        user_agent: str = DEFAULT_USER_AGENT,
        logger: logging.Logger | None = None,
        transport: RemoteTransport | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        # Argumentos explícitos: ni .env ni variables CINEBOT_* los pisan.
        settings = build_settings(
            _env_file=None,
            base_url=url,
            idpv=idpv,
            passkey=passkey,
            timeout_seconds=timeout,
            connect_timeout_seconds=connect_timeout,
            verify_tls=verify_tls,
            user_agent=user_agent,
        )
        self._init(settings, logger=logger, transport=transport, http_transport=http_transport)

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        *,
        logger: logging.Logger | None = None,
        transport: RemoteTransport | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> "CinebotClient":
        client = cls.__new__(cls)
        client._init(settings, logger=logger, transport=transport, http_transport=http_transport)
        return client

    def _init(
        self,
        settings: ClientSettings,
        *,
        logger: logging.Logger | None,
        transport: RemoteTransport | None,
        http_transport: httpx.BaseTransport | None,
    ) -> None:
        self._settings = settings
        self._logger = logger
        self._transport: RemoteTransport = transport or HttpTransport(
            settings,
            logger=logger,
            transport=http_transport,
        )

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def logger(self) -> logging.Logger | None:
        return self._logger

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "CinebotClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Plumbing
    # ------------------------------------------------------------------ #

    def _get(self, path: str, params: Mapping[str, Any] | None = None, *, timeout: float | None = None) -> Any:
        return decode(self._transport.get(path, params, timeout=timeout), self._logger)

    def _post(
        self,
        path: str,
        body: Mapping[str, Any],
        *,
        json_body: bool = True,
        timeout: float | None = None,
    ) -> Any:
        raw = self._transport.post(path, body, json_body=json_body, timeout=timeout)
        return decode(raw, self._logger)

    def _parse(self, model: type[T] | TypeAdapter, value: Any, operation: str) -> T:
        try:
            if isinstance(model, TypeAdapter):
                return model.validate_python(value)
            return model.model_validate(value)  # type: ignore[attr-defined]
        except ValidationError as exc:
            if self._logger:
                self._logger.error("Unexpected %s payload: %s", operation, exc)
            raise ProtocolError(f"Unexpected {operation} payload") from exc

    # ------------------------------------------------------------------ #
    # Consultas
    # ------------------------------------------------------------------ #

    def ping(self, timeout: float | None = None) -> SystemStatus:
        """Estado del sistema: código, usuario, versión y progresivos."""

        return self._parse(SystemStatus, self._get("ping", timeout=timeout), "ping")

    def is_ready(self, timeout: float | None = None) -> bool:
        """True si el sistema está encendido y listo para emitir."""

        return self.ping(timeout).ready

    def verify_sso(self, userid: str, session: str) -> Any:
        """Verifica el usuario local para SSO con el portal."""

        return self._get("sso", {"userid": userid, "session": session})

    def get_programmazione(self) -> Programmazione:
        return self._parse(Programmazione, self._get("programmazione"), "programmazione")

    def get_mappa(self, idmappa: int) -> list[Posto]:
        """Asientos de un mapa de posti numerati."""

        return self._parse(_POSTI_ADAPTER, self._get("mappa", {"mappa": idmappa}), "mappa")

    def get_stato_evento(self, idevento: int) -> StatoEvento:
        """Estado del evento, de sus sectores/slots y, si es numerado, de sus asientos."""

        value = self._get("statoevento", {"evento": idevento})
        return self._parse(StatoEvento, value, "statoevento")

    def get_stato_tipoabbonamento(self, idtipoabbonamento: int) -> StatoTipoAbbonamento:
        value = self._get("statotipoabbonamento", {"tipoabbonamento": idtipoabbonamento})
        return self._parse(StatoTipoAbbonamento, value, "statotipoabbonamento")

    def verifica_abbonato(self, codiceabbonamento: str, progressivoabbonamento: int, qta: int = 1) -> Any:
        """Comprueba que el abono tenga residuo para `qta` entradas."""

        return self._post(
            "verificaAbbonato",
            {
                "codiceabbonamento": codiceabbonamento,
                "progressivoabbonamento": progressivoabbonamento,
                "qta": qta,
            },
        )

    # ------------------------------------------------------------------ #
    # Reservas y bloqueos
    # ------------------------------------------------------------------ #

    def prenotazione(
        self,
        evento: int,
        slot: int | None,
        anagrafica: Anagrafica | Mapping[str, Any] | None,
        ingressi: Ingresso | Iterable[Ingresso] | None,
    ) -> Any:
        """Registra una reserva; acepta una `Ingresso` o una lista."""

        return self._post(
            "prenotazione",
            {
                "evento": evento,
                "slot": slot,
                "anagrafica": _dump(anagrafica),
                "ingressi": _dump_all(ingressi),
            },
        )

    def blocco(
        self,
        evento: int,
        slot: int | None,
        ingressi: Ingresso | Iterable[Ingresso] | None,
    ) -> Any:
        """Registra un bloqueo de plazas.

        Mismo endpoint que `prenotazione`: el servidor lo distingue porque el
        payload no lleva `anagrafica`. Las entradas pueden no tener precio.
        """

        return self._post(
            "prenotazione",
            {
                "evento": evento,
                "slot": slot,
                "ingressi": _dump_all(ingressi),
            },
        )

    # ------------------------------------------------------------------ #
    # Emisión en dos pasos (requiere homologación de la integración)
    # ------------------------------------------------------------------ #

    def preemissione(
        self,
        evento: int | None,
        slot: int | None,
        anagrafica: Anagrafica,
        ingressi: Ingresso | Sequence[Ingresso] | None,
        abbonamenti: Abbonamento | Sequence[Abbonamento | Mapping[str, Any]] | None,
        tipopagamento: int,
        iptransazione: str,
        transazione: str,
        datacheckout: int | datetime,
    ) -> Any:
        """Preemite entradas/abonos. Devuelve la lista de ids preemitidos.

        Lo preemitido caduca en 5 minutos en el servidor si no se renueva
        (`rinnova_preemissione`) o se confirma (`emissione`).
        """

        return self._post(
            "preemissione",
            {
                "evento": evento,
                "slot": slot,
                "anagrafica": _dump(anagrafica),
                "ingressi": _dump_all(ingressi),
                "abbonamenti": _dump_all(abbonamenti),
                "tipopagamento": tipopagamento,
                "iptransazione": iptransazione,
                "transazione": transazione,
                "datacheckout": to_epoch_millis(datacheckout),
                "email": anagrafica.email,
                "telefono": anagrafica.telefono,
                "autenticazione": anagrafica.autenticazione,
                "registrazione": anagrafica.registrazione,
                "ipregistrazione": anagrafica.ipregistrazione,
            },
        )

    def rinnova_preemissione(self, ingressiid: Any, abbonamentiid: Any) -> Any:
        """Renueva la transacción y reinicia el vencimiento de la preemisión."""

        return self._post(
            "rinnovapreemissione",
            {"ingressi": as_list(ingressiid), "abbonamenti": as_list(abbonamentiid)},
        )

    def emissione(
        self,
        ingressiid: Any,
        abbonamentiid: Any,
        pagamento: str,
        datapagamento: int | datetime,
    ) -> Any:
        """Confirma la emisión de entradas y/o abonos preemitidos."""

        return self._post(
            "emissione",
            {
                "ingressi": as_list(ingressiid),
                "abbonamenti": as_list(abbonamentiid),
                "pagamento": pagamento,
                "datapagamento": to_epoch_millis(datapagamento),
            },
        )

    def libera_preemissione(self, ingressiid: Any, abbonamentiid: Any) -> Any:
        """Anula la preemisión y libera los recursos."""

        return self._post(
            "liberaPreemissione",
            {"ingressi": as_list(ingressiid), "abbonamenti": as_list(abbonamentiid)},
        )
