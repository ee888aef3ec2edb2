# apps/calendar_app/domain/days.py
"""
Rozkład wydarzeń na dni i wygląd wiersza dnia.

Funkcje czyste: przyjmują obiekty z polami start_date, end_date, category,
is_pto, affects_row_appearance (model Django albo dowolny podobny obiekt).
"""
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

# Domyślne priorytety nowych wydarzeń (1-10)
PTO_PRIORITY = 10
TRAVEL_PRIORITY = 7
DEFAULT_PRIORITY = 1

TRAVEL_CATEGORY = 'travel'


class RowKind(str, Enum):
    PTO = 'pto'
    TRAVEL = 'travel'
    WEEKEND = 'weekend'
    DEFAULT = 'default'


@dataclass(frozen=True)
class RowAppearance:
    kind: RowKind
    has_pto: bool = False
    # PTO bez podróży w tym samym dniu
    pto_only: bool = False


@dataclass
class Day:
    date: date
    events: List = field(default_factory=list)

    @property
    def is_weekend(self) -> bool:
        return self.date.weekday() >= 5

    @property
    def appearance(self) -> RowAppearance:
        return row_appearance(self.events, self.is_weekend)


def _is_travel(event) -> bool:
    return (event.category or '').lower() == TRAVEL_CATEGORY


def default_priority(category: Optional[str], is_pto: bool = False) -> int:
    if is_pto:
        return PTO_PRIORITY
    if (category or '').lower() == TRAVEL_CATEGORY:
        return TRAVEL_PRIORITY
    return DEFAULT_PRIORITY


def default_affects_row_appearance(category: Optional[str]) -> bool:
    return (category or '').lower() == TRAVEL_CATEGORY


def row_appearance(events: Iterable, is_weekend: bool) -> RowAppearance:
    """Kolejność: PTO > podróż > weekend > zwykły dzień."""
    events = list(events)
    has_pto = any(e.is_pto for e in events)
    has_travel = any(_is_travel(e) and e.affects_row_appearance for e in events)

    if has_pto:
        return RowAppearance(RowKind.PTO, has_pto=True, pto_only=not has_travel)
    if has_travel:
        return RowAppearance(RowKind.TRAVEL)
    if is_weekend:
        return RowAppearance(RowKind.WEEKEND)
    return RowAppearance(RowKind.DEFAULT)


def covered_dates(event, start: date, end: date) -> Iterator[date]:
    """Dni wydarzenia przycięte do zakresu [start, end]."""
    day = max(event.start_date, start)
    last = min(event.end_date, end)
    while day <= last:
        yield day
        day += timedelta(days=1)


def build_days(events: Iterable, start: date, end: date) -> List[Day]:
    if end < start:
        raise ValueError("end must not be before start")
    days = [Day(start + timedelta(days=i)) for i in range((end - start).days + 1)]
    for event in events:
        for day in covered_dates(event, start, end):
            days[(day - start).days].events.append(event)
    return days


def year_bounds(year: int) -> Tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)
