"""Modelos del dominio Cinebot (Pydantic v2).

Dos familias:
- Payloads de request (`Anagrafica`, `Ingresso`, `Abbonamento`): los nombres
  de campo son exactamente las claves del wire.
- Esquemas de respuesta por operación (`SystemStatus`, `Programmazione`,
  `StatoEvento`...): el `value` del envelope se valida contra ellos para que
  el llamador trabaje con tipos y no con dicts anónimos.

Nota:
- Los modelos de respuesta conservan claves desconocidas (`extra="allow"`):
  el servidor evoluciona más rápido que el cliente.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Iterable, Mapping

from pydantic import AliasChoices, BaseModel, Field, ValidationInfo, field_validator
from pydantic.config import ConfigDict

from core.domain.states import StatoPosto, StatoPostoAbbonamento, StatoPubblicazione, TipoPrezzo


def to_epoch_millis(value: int | datetime) -> int:
    """Normaliza un instante a unixtime*1000 (formato de fechas del sistema).

    Un `datetime` naive se interpreta como UTC.
    """

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)
    return int(value)


def as_list(value: Any) -> list[Any]:
    """Normaliza "uno o varios": escalar → [escalar], None/vacío → []."""

    if value is None:
        return []
    # Los modelos pydantic son iterables: se tratan como un único elemento.
    if isinstance(value, (str, bytes, Mapping, BaseModel)):
        return [value]
    if isinstance(value, Iterable):
        return list(value)
    return [value]


def from_epoch_millis(value: int | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def _lookup_state(enum_cls: type[IntEnum], code: int | None) -> IntEnum | int | None:
    if code is None:
        return None
    try:
        return enum_cls(code)
    except ValueError:
        return code


# ---------------------------------------------------------------------------
# Payloads de request
# ---------------------------------------------------------------------------


class Anagrafica(BaseModel):
    """Perfil del cliente final que compra o reserva.

    No tiene identidad propia: se construye en cada request y el cliente
    no la persiste.
    """

    cognome: str = Field(..., description="Apellido.")
    nome: str = Field(..., description="Nombre.")
    email: str = Field(..., description="Correo electrónico.")
    telefono: str | None = Field(default=None, description="Teléfono.")
    indirizzo: str | None = Field(default=None, description="Dirección.")
    cap: str | None = Field(default=None, description="Código postal.")
    citta: str | None = Field(default=None, description="Ciudad.")
    luogonascita: str | None = Field(default=None, description="Lugar de nacimiento.")
    datanascita: str | None = Field(default=None, description="Fecha de nacimiento.")
    note: str | None = Field(default=None, description="Notas libres.")
    registrazione: int | str | None = Field(
        default=None,
        description="Momento de registro en el portal (unixtime*1000 o texto ISO).",
    )
    ipregistrazione: str | None = Field(default=None, description="IP desde la que se registró.")
    autenticazione: str | None = Field(
        default=None,
        description="Referencia de autenticación del usuario en el portal.",
    )
    marketing: bool = Field(default=False, description="Consentimiento de marketing.")
    riferi1: str | None = Field(default=None, description="Referencia libre 1.")
    riferi2: str | None = Field(default=None, description="Referencia libre 2.")
    riferi3: str | None = Field(default=None, description="Referencia libre 3.")


class Ingresso(BaseModel):
    """Línea de entrada: sector, precio y (opcional) asientos asignados.

    - `abbonamento` no nulo: la entrada consume un derecho de abono.
    - `posti` vacío: entrada sin asiento asignado (posto unico).
    - `prezzo` puede omitirse en un bloqueo.
    """

    id: int | None = Field(default=None, description="Id asignado por el sistema (si existe).")
    settore: int = Field(..., description="Código del sector.")
    prezzo: int | float | None = Field(
        default=None,
        description="Precio de la entrada (id de `Prezzo` de la programación).",
    )
    abbonamento: str | int | None = Field(
        default=None,
        description="Referencia del abono que se consume, None si no aplica.",
    )
    qta: int = Field(default=1, ge=1, description="Cantidad de entradas.")
    posti: list[int] = Field(default_factory=list, description="Ids de asientos concretos.")


class Abbonamento(BaseModel):
    """Compra de un abono dentro de una preemisión."""

    model_config = ConfigDict(extra="allow")

    tipoabbonamento: int = Field(..., description="Código numérico del tipo de abono.")
    prezzo: int | None = Field(default=None, description="Código del precio, si aplica.")
    importo: float | None = Field(default=None, description="Importe bruto.")
    posti: list[int] = Field(default_factory=list, description="Asientos para abonos numerados.")


# ---------------------------------------------------------------------------
# Esquemas de respuesta
# ---------------------------------------------------------------------------


class _RemoteModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # El servidor manda `null` explícito en campos vacíos (listas, flags, contadores).
        if value is None and info.field_name:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return value


class SystemStatus(_RemoteModel):
    """Respuesta de `ping`.

    Ejemplo:
        {"codicesistema":"00012345","utente":"test@cinebot.it","password":null,
         "ready":true,"versione":"2.1.0 1 1111","stepprog":0,"stepabb":0,"stepupdate":0}
    """

    codicesistema: str | None = Field(default=None, description="Código SIAE del sistema.")
    utente: str | None = Field(default=None, description="Usuario Cinebot.")
    ready: bool = Field(default=False, description="Sistema listo para emitir.")
    versione: str | None = Field(
        default=None,
        description="Versión fiscal, db y build separadas por espacio.",
    )
    stepprog: int = Field(default=0, description="Progresivo de actualización de la programación.")
    stepabb: int = Field(default=0, description="Progresivo de actualización de abonos.")
    stepupdate: int = Field(default=0, description="Progresivo de actualización remota del sistema.")

    def _version_part(self, index: int) -> str | None:
        parts = (self.versione or "").split()
        return parts[index] if len(parts) > index else None

    @property
    def versione_fiscale(self) -> str | None:
        return self._version_part(0)

    @property
    def versione_db(self) -> str | None:
        return self._version_part(1)

    @property
    def build(self) -> str | None:
        return self._version_part(2)


class Prezzo(_RemoteModel):
    id: int
    prezzo: str | None = Field(default=None, description="Descripción del precio.")
    tipo: str | None = Field(default=None, description="I=intero, R=ridotto, O=omaggio.")
    importo: float | None = Field(default=None, description="Importe bruto, preventa incluida.")
    prevendita: float | None = Field(default=None, description="Cuota de preventa.")
    iva: float | None = Field(default=None, description="IVA (0.1 = 10%).")

    @property
    def tipo_prezzo(self) -> TipoPrezzo | None:
        return TipoPrezzo(self.tipo) if self.tipo in {t.value for t in TipoPrezzo} else None


class Settore(_RemoteModel):
    id: int
    nome: str | None = Field(
        default=None,
        validation_alias=AliasChoices("nome", "settore"),
        description="Nombre del sector.",
    )
    prezzi: list[Prezzo] = Field(default_factory=list)


class Evento(_RemoteModel):
    id: int
    inizio: int | None = Field(default=None, description="Inicio (unixtime*1000).")
    localeid: int | None = None
    locale: str | None = Field(default=None, description="Nombre de la sala.")
    mappa: int | None = Field(default=None, description="Mapa de asientos numerados, si existe.")
    slot: int | None = Field(default=None, description="1 = evento gestionado por slots de acceso.")
    stato: int | None = Field(default=None, description="1=publicado 2=reservable 3=vendible.")
    settori: list[Settore] = Field(default_factory=list)

    @property
    def inizio_dt(self) -> datetime | None:
        return from_epoch_millis(self.inizio)

    @property
    def numerato(self) -> bool:
        return self.mappa is not None

    @property
    def a_slot(self) -> bool:
        return self.slot == 1

    @property
    def vendibile(self) -> bool:
        return self.stato == StatoPubblicazione.VENDIBILE


class Titolo(_RemoteModel):
    id: int
    titolo: str
    autore: str | None = None
    esecutore: str | None = None
    distributore: str | None = None
    durata: int | None = Field(default=None, description="Duración en minutos.")
    descrizione: str | None = None
    locandina: str | None = Field(default=None, description="JPEG en base64.")
    note: str | None = None
    eventi: list[Evento] = Field(default_factory=list)


class TipoAbbonamento(_RemoteModel):
    id: int
    nome: str | None = None
    codice: str | None = None
    descrizione: str | None = None
    scadenza: int | None = Field(
        default=None,
        description="Vencimiento (unixtime*1000); None = vencimiento relativo.",
    )
    scadenzarelval: int | None = None
    scadenzarelunt: str | None = None
    entrate: int | None = Field(default=None, description="Número de entradas del abono.")
    importo: float | None = None
    iva: float | None = None
    prevendita: float | None = None
    organizzatorecf: str | None = None
    stato: int | None = None


class Programmazione(_RemoteModel):
    """Snapshot completo del catálogo."""

    stepprog: int = Field(default=0, description="Revisión de la programación.")
    titoli: list[Titolo] = Field(default_factory=list)
    tipiabbonamenti: list[TipoAbbonamento] = Field(default_factory=list)

    def evento(self, idevento: int) -> Evento | None:
        for titolo in self.titoli:
            for evento in titolo.eventi:
                if evento.id == idevento:
                    return evento
        return None


class Posto(_RemoteModel):
    """Asiento de un mapa de posti numerati."""

    id: int
    nome: str | None = None
    settore: int | None = None
    sottosettore: str | None = None
    x: int | None = None
    y: int | None = None
    classe: int = 0


class StatoSlot(_RemoteModel):
    capienza: int | None = None
    residui: int | None = Field(default=None, description="Plazas restantes para venta online.")
    limiteremoto: bool = False


class StatoSettore(_RemoteModel):
    capienza: int | None = None
    residui: int | None = Field(default=None, description="Plazas restantes para venta online.")
    limitecapienza: bool = False
    limiteremoto: bool = False
    slots: dict[int, StatoSlot] | None = Field(
        default=None,
        description="Capacidad por slot (solo eventos a slot).",
    )


class StatoEvento(_RemoteModel):
    """Estado de un evento y, si es numerado, de sus asientos."""

    idevento: int
    mappa: int | None = None
    stato: int | None = None
    posti: dict[int, int] = Field(default_factory=dict, description="id asiento -> código de estado.")
    settori: dict[int, StatoSettore] = Field(default_factory=dict)

    def stato_posto(self, idposto: int) -> StatoPosto | int | None:
        """Estado del asiento; un código desconocido se devuelve tal cual."""

        return _lookup_state(StatoPosto, self.posti.get(idposto))

    def posti_liberi(self) -> list[int]:
        return [pid for pid, code in self.posti.items() if code == StatoPosto.LIBERO]


class StatoTipoAbbonamento(_RemoteModel):
    idtipoabbonamento: int | None = None
    mappa: int | None = None
    posti: dict[int, int] = Field(default_factory=dict)

    def stato_posto(self, idposto: int) -> StatoPostoAbbonamento | int | None:
        return _lookup_state(StatoPostoAbbonamento, self.posti.get(idposto))


class Envelope(BaseModel):
    """Sobre común de todas las respuestas remotas."""

    model_config = ConfigDict(extra="allow")

    success: Any = Field(..., description="Flag de éxito (se evalúa por veracidad).")
    value: Any = None
    # Solo se leen si `success` es falso; el decoder los pasa a texto.
    error: Any = None
    exception: Any = None
