# apps/core/store.py
import functools
import json
import logging
import math
from typing import Any, List, Optional

from django.core.exceptions import ValidationError
from django.db import DatabaseError

logger = logging.getLogger(__name__)


def safe_read(default):
    """
    Dekorator dla odczytów: błąd połączenia/konfiguracji bazy nie wybucha,
    tylko jest logowany, a funkcja zwraca wartość domyślną.

    `default` może być wywoływalny (np. list), żeby nie dzielić mutowalnych obiektów.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DatabaseError:
                logger.warning("Read %s failed, returning default", func.__qualname__, exc_info=True)
                return default() if callable(default) else default
        return wrapper
    return decorator


class CancelToken:
    """Flaga "cancelled" przechwycona przy subskrypcji; spóźnione wyniki są ignorowane."""

    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def deliver(self, result, apply):
        if self.cancelled:
            logger.debug("Dropping late result after cancel")
            return False
        apply(result)
        return True


def to_number(value: Any, field: str = 'value', default: Optional[float] = None) -> Optional[float]:
    """Liczba z luźno typowanego wiersza (int/float/str/None/bool)."""
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    try:
        n = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field}: expected a number, got {value!r}", code='invalid')
    if not math.isfinite(n):
        raise ValidationError(f"{field}: expected a finite number, got {value!r}", code='invalid')
    return n


def ensure_list(value: Any) -> List:
    """Lista z kolumny JSON, która mogła przyjść jako string albo None."""
    if isinstance(value, list):
        return value
    if value is None:
        return []
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return []
        return parsed if isinstance(parsed, list) else []
    return []


def error_message(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(exc.messages)
    return str(exc)
