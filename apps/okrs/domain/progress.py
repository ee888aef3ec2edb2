# apps/okrs/domain/progress.py
import math
from typing import Any, Iterable, Optional

from apps.okrs.domain.entities import Direction, KeyResultKind


def _round(x: float) -> int:
    # Zaokrąglenie "w górę od połowy" (0.5 -> 1), a nie bankierskie
    return int(math.floor(x + 0.5))


def _num(value: Any) -> Optional[float]:
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


def _field(kr: Any, name: str):
    if isinstance(kr, dict):
        return kr.get(name)
    return getattr(kr, name, None)


def normalize_progress(value: Any) -> int:
    """
    Jawna wartość postępu -> procent całkowity.
    <= 1 traktujemy jako ułamek (x100), > 1 jako gotowe procenty.
    Dolne ograniczenie 0, brak górnego (nadwyżka jest dozwolona).
    """
    n = _num(value)
    if n is None:
        return 0
    if n <= 1:
        n = n * 100
    return max(0, _round(n))


def normalize_kr_progress(kr: Any) -> int:
    """
    Postęp KR-a (dict z wiersza albo obiekt z atrybutami).
    Wszystkie ścieżki dzielenia przez zero zwracają 0.
    """
    explicit = _field(kr, 'progress')
    if explicit is not None:
        return normalize_progress(explicit)

    kind = _field(kr, 'kind')
    kind = kind.value if isinstance(kind, KeyResultKind) else (kind or KeyResultKind.NUMERIC.value)
    current = _num(_field(kr, 'current_value')) or 0.0

    if kind == KeyResultKind.BOOLEAN.value:
        return 100 if current else 0

    if kind == KeyResultKind.PERCENT.value:
        return max(0, _round(current))

    target = _num(_field(kr, 'target_value')) or 0.0
    direction = _field(kr, 'direction')
    direction = direction.value if isinstance(direction, Direction) else (direction or Direction.UP.value)

    if direction == Direction.DOWN.value:
        baseline = _num(_field(kr, 'baseline_value'))
        # Zdegenerowany mianownik
        if not baseline or baseline == target:
            return 0
        return max(0, _round((baseline - current) / (baseline - target) * 100))

    if target <= 0:
        return 0
    return max(0, _round(current / target * 100))


def objective_progress(key_results: Iterable[Any]) -> int:
    """Średnia z postępów KR-ów (0 gdy brak KR-ów)."""
    values = [normalize_kr_progress(kr) for kr in key_results]
    if not values:
        return 0
    return _round(sum(values) / len(values))


def is_completed(kr: Any) -> bool:
    return normalize_kr_progress(kr) >= 100
