"""Códigos numéricos/alfanuméricos usados por el sistema remoto."""

from __future__ import annotations

from enum import Enum, IntEnum


class StatoPosto(IntEnum):
    """Estado de un asiento en `statoevento`."""

    LIBERO = 0
    OCCUPATO = 1
    RISERVATO_ABBONATO = 2
    PRENOTATO = 3
    BLOCCATO = 4
    ABBONATO_NON_RISERVATO = 5


class StatoPostoAbbonamento(IntEnum):
    """Estado de un asiento en `statotipoabbonamento`."""

    FUORI_SETTORE = -1
    LIBERO = 0
    OCCUPATO = 1


class StatoPubblicazione(IntEnum):
    """Estado de publicación de eventos y tipos de abono."""

    PUBBLICATO = 1
    PRENOTABILE = 2
    VENDIBILE = 3


class TipoPrezzo(str, Enum):
    INTERO = "I"
    RIDOTTO = "R"
    OMAGGIO = "O"


class StatoPreemissione(str, Enum):
    """Ciclo de vida de una preemisión (emisión en dos pasos)."""

    PREEMESSO = "preemesso"
    EMESSO = "emesso"
    LIBERATO = "liberato"
    SCADUTO = "scaduto"

    @property
    def terminal(self) -> bool:
        return self is not StatoPreemissione.PREEMESSO
