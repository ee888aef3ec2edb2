# apps/core/notifications.py
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from django.dispatch import Signal

logger = logging.getLogger(__name__)


class ToastVariant(str, Enum):
    SUCCESS = 'success'
    ERROR = 'error'
    INFO = 'info'


@dataclass(frozen=True)
class ToastMessage:
    id: str
    variant: ToastVariant
    message: str
    ttl_ms: int


Listener = Callable[[ToastMessage], None]


class NotificationBus:
    """
    Szyna powiadomień (toast) wstrzykiwana do widoków i serwisów.

    Cykl życia jest jawny: subscribe() przy montowaniu, wywołanie zwróconej
    funkcji (lub unsubscribe()) przy odmontowaniu. Wysyłka typu
    fire-and-forget, bez potwierdzeń.
    """

    DEFAULT_TTL_MS = {
        ToastVariant.SUCCESS: 3000,
        ToastVariant.ERROR: 4000,
        ToastVariant.INFO: 3000,
    }

    def __init__(self):
        self._signal = Signal()
        self._listeners = {}

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        def receiver(sender, message, **kwargs):
            listener(message)

        # weak=False, bo receiver to domknięcie żyjące tylko tutaj
        self._signal.connect(receiver, weak=False, dispatch_uid=id(listener))
        self._listeners[id(listener)] = receiver
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> bool:
        if self._listeners.pop(id(listener), None) is None:
            return False
        return self._signal.disconnect(dispatch_uid=id(listener))

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, variant: ToastVariant, message: str, ttl_ms: Optional[int] = None) -> ToastMessage:
        toast = ToastMessage(
            id=uuid.uuid4().hex,
            variant=variant,
            message=message,
            ttl_ms=ttl_ms if ttl_ms is not None else self.DEFAULT_TTL_MS[variant],
        )
        # Błąd jednego słuchacza nie blokuje pozostałych
        for receiver, result in self._signal.send_robust(sender=self.__class__, message=toast):
            if isinstance(result, Exception):
                logger.warning("Toast listener failed: %s", result)
        return toast

    def success(self, message: str, ttl_ms: Optional[int] = None) -> ToastMessage:
        return self.publish(ToastVariant.SUCCESS, message, ttl_ms)

    def error(self, message: str, ttl_ms: Optional[int] = None) -> ToastMessage:
        return self.publish(ToastVariant.ERROR, message, ttl_ms)

    def info(self, message: str, ttl_ms: Optional[int] = None) -> ToastMessage:
        return self.publish(ToastVariant.INFO, message, ttl_ms)


class LoggingListener:
    """Domyślny słuchacz: przepisuje toasty do logów aplikacji."""

    def __call__(self, message: ToastMessage):
        level = logging.ERROR if message.variant == ToastVariant.ERROR else logging.INFO
        logger.log(level, "[toast:%s] %s", message.variant.value, message.message)


class MessagesListener:
    """Przekazuje toasty do django.contrib.messages dla danego requestu."""

    LEVELS = {
        ToastVariant.SUCCESS: 'success',
        ToastVariant.ERROR: 'error',
        ToastVariant.INFO: 'info',
    }

    def __init__(self, request):
        self.request = request

    def __call__(self, message: ToastMessage):
        from django.contrib import messages
        add = getattr(messages, self.LEVELS[message.variant])
        add(self.request, message.message, fail_silently=True)


default_bus = NotificationBus()
default_bus.subscribe(LoggingListener())
