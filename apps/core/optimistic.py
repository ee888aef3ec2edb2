# apps/core/optimistic.py
import logging
from enum import Enum
from typing import Any, Callable, Optional

from apps.core.notifications import NotificationBus, default_bus

logger = logging.getLogger(__name__)


class TransactionState(str, Enum):
    PENDING = 'pending'
    COMMITTED = 'committed'
    ROLLED_BACK = 'rolled_back'


class OptimisticUpdate:
    """
    Optymistyczna aktualizacja jako jawna transakcja: pending -> committed | rolled_back.

    Wartość do przywrócenia jest przechwytywana PRZED wysłaniem mutacji
    (read_current), a nie odtwarzana po błędzie.

        tx = OptimisticUpdate(read_current=lambda: state['done'],
                              apply_local=lambda v: state.update(done=v))
        tx.run(new_value=True, mutation=lambda: service.toggle(...))
    """

    def __init__(
        self,
        read_current: Callable[[], Any],
        apply_local: Callable[[Any], None],
        refetch: Optional[Callable[[], Any]] = None,
        bus: Optional[NotificationBus] = None,
        error_message: str = "Nie udało się zapisać zmian",
    ):
        self.read_current = read_current
        self.apply_local = apply_local
        self.refetch = refetch
        self.bus = bus or default_bus
        self.error_message = error_message

        self.state = TransactionState.PENDING
        self.rollback_value = None
        self.result = None
        self.error: Optional[Exception] = None

    def run(self, new_value, mutation: Callable[[], Any]):
        if self.state != TransactionState.PENDING:
            raise ValueError(f"Transaction already {self.state.value}")

        # 1. Zapamiętaj stan sprzed zmiany
        self.rollback_value = self.read_current()

        # 2. Pokaż zmianę od razu
        self.apply_local(new_value)

        # 3. Wyślij mutację
        try:
            self.result = mutation()
        except Exception as exc:
            self._rollback(exc)
            return self

        self.state = TransactionState.COMMITTED

        # Prawdą jest baza, nie wartość optymistyczna
        if self.refetch is not None:
            self._safe_refetch()
        return self

    @property
    def committed(self) -> bool:
        return self.state == TransactionState.COMMITTED

    @property
    def rolled_back(self) -> bool:
        return self.state == TransactionState.ROLLED_BACK

    def _rollback(self, exc: Exception):
        logger.error("Optimistic update failed, rolling back", exc_info=exc)
        self.error = exc
        self.apply_local(self.rollback_value)
        self.state = TransactionState.ROLLED_BACK
        self.bus.error(f"{self.error_message}: {exc}")
        if self.refetch is not None:
            self._safe_refetch()

    def _safe_refetch(self):
        try:
            self.refetch()
        except Exception:
            logger.warning("Re-fetch after mutation failed", exc_info=True)
