"""Seguimiento del lado cliente de la emisión en dos pasos.

El servidor invalida lo preemitido a los 5 minutos de inactividad y el
cliente no ve ese temporizador. Estas utilidades guardan los ids que el
llamador decide seguir y el instante de la última renovación, para saber
cuándo renovar. Nunca renuevan por su cuenta.

Máquina de estados:
    PREEMESSO --rinnova--> PREEMESSO
    PREEMESSO --emissione--> EMESSO
    PREEMESSO --libera--> LIBERATO
    PREEMESSO --(5 min sin renovar)--> SCADUTO
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Callable

from core.domain.models import as_list
from core.domain.states import StatoPreemissione
from core.errors import LeaseStateError, LogicalError

if TYPE_CHECKING:
    from adapters.cinebot_client import CinebotClient

LEASE_WINDOW = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PreemissionLease:
    """Ids preemitidos y su ventana de validez estimada."""

    ingressi: list[Any] = field(default_factory=list)
    abbonamenti: list[Any] = field(default_factory=list)
    renewed_at: datetime = field(default_factory=_utcnow)
    state: StatoPreemissione = StatoPreemissione.PREEMESSO
    window: timedelta = LEASE_WINDOW

    @property
    def expires_at(self) -> datetime:
        return self.renewed_at + self.window

    def remaining(self, now: datetime | None = None) -> timedelta:
        left = self.expires_at - (now or _utcnow())
        return max(left, timedelta(0))

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or _utcnow()) >= self.expires_at

    def needs_renewal(self, margin: timedelta = timedelta(seconds=60), now: datetime | None = None) -> bool:
        """True si sigue abierta y le queda menos de `margin`."""

        if self.state.terminal:
            return False
        return self.remaining(now) <= margin


class PreemissionManager:
    """Aplica las transiciones de estado llamando al cliente remoto.

    Los errores del servidor se propagan siempre; si llega un `LogicalError`
    con la ventana local ya vencida, la preemisión se marca `SCADUTO`.
    """

    def __init__(
        self,
        client: "CinebotClient",
        *,
        clock: Callable[[], datetime] = _utcnow,
        window: timedelta = LEASE_WINDOW,
    ) -> None:
        self._client = client
        self._clock = clock
        self._window = window

    def track(self, ingressi: Any = None, abbonamenti: Any = None) -> PreemissionLease:
        """Empieza a seguir ids devueltos por `preemissione`."""

        return PreemissionLease(
            ingressi=as_list(ingressi),
            abbonamenti=as_list(abbonamenti),
            renewed_at=self._clock(),
            window=self._window,
        )

    def _ensure_open(self, lease: PreemissionLease, action: str) -> None:
        if lease.state.terminal:
            raise LeaseStateError(f"Cannot {action} a pre-issuance in state {lease.state.value}")

    def _expire_on_logical(self, lease: PreemissionLease) -> None:
        if lease.is_expired(self._clock()):
            lease.state = StatoPreemissione.SCADUTO

    def renew(self, lease: PreemissionLease) -> Any:
        self._ensure_open(lease, "renew")
        try:
            result = self._client.rinnova_preemissione(lease.ingressi, lease.abbonamenti)
        except LogicalError:
            self._expire_on_logical(lease)
            raise
        lease.renewed_at = self._clock()
        return result

    def confirm(self, lease: PreemissionLease, pagamento: str, datapagamento: int | datetime) -> Any:
        self._ensure_open(lease, "confirm")
        try:
            result = self._client.emissione(lease.ingressi, lease.abbonamenti, pagamento, datapagamento)
        except LogicalError:
            self._expire_on_logical(lease)
            raise
        lease.state = StatoPreemissione.EMESSO
        return result

    def release(self, lease: PreemissionLease) -> Any:
        self._ensure_open(lease, "release")
        result = self._client.libera_preemissione(lease.ingressi, lease.abbonamenti)
        lease.state = StatoPreemissione.LIBERATO
        return result
