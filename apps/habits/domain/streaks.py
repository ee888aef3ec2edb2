# apps/habits/domain/streaks.py
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

# Nigdy nie wykonano
NEVER_COMPLETED_DAYS = 999


@dataclass(frozen=True)
class RollingStats:
    weekly_average: float = 0.0
    monthly_average: float = 0.0


@dataclass(frozen=True)
class StreakSummary:
    current_streak: int = 0
    longest_streak: int = 0
    longest_cold_streak: int = 0
    last_completed_date: Optional[date] = None
    cold_days: int = NEVER_COMPLETED_DAYS


def current_streak(dates: Iterable[date], today: date) -> int:
    """
    Liczba kolejnych dni z wykonaniem, kończąca się dzisiaj albo wczoraj.
    Niezrobione "dzisiaj" nie zrywa serii, dopóki wczoraj jest zrobione.
    """
    done = set(dates)
    yesterday = today - timedelta(days=1)

    if today in done:
        day = today
    elif yesterday in done:
        day = yesterday
    else:
        return 0

    count = 0
    while day in done:
        count += 1
        day -= timedelta(days=1)
    return count


def longest_streak(dates: Iterable[date]) -> int:
    ordered = sorted(set(dates))
    if not ordered:
        return 0

    best = run = 1
    for prev, curr in zip(ordered, ordered[1:]):
        if (curr - prev).days == 1:
            run += 1
        else:
            run = 1
        best = max(best, run)
    return best


def longest_cold_streak(dates: Iterable[date], start: date, end: date) -> int:
    """Najdłuższa seria dni BEZ wykonania w oknie [start, end]."""
    if end < start:
        return 0

    done = set(dates)
    best = run = 0
    day = start
    while day <= end:
        if day in done:
            run = 0
        else:
            run += 1
            best = max(best, run)
        day += timedelta(days=1)
    return best


def days_since_last_completed(last_completed: Optional[date], today: date) -> int:
    """Dni "na zimno" z pominięciem dnia bieżącego (zrobione wczoraj -> 0)."""
    if last_completed is None:
        return NEVER_COMPLETED_DAYS
    return max(0, (today - last_completed).days - 1)


def rolling_average(
    dates: Iterable[date],
    window_days: int,
    today: date,
    scale: float,
    tracked_since: Optional[date] = None,
) -> float:
    """
    Wykonania w oknie kończącym się dzisiaj / dni, które w tym oknie upłynęły,
    przeskalowane do okresu docelowego (np. x7 dla średniej tygodniowej).
    """
    if window_days <= 0:
        return 0.0

    window_start = today - timedelta(days=window_days - 1)
    if tracked_since and tracked_since > window_start:
        window_start = tracked_since

    elapsed = (today - window_start).days + 1
    if elapsed <= 0:
        return 0.0

    completions = sum(1 for d in set(dates) if window_start <= d <= today)
    return round(completions / elapsed * scale, 1)


def rolling_stats(
    dates: Iterable[date],
    today: date,
    window_days: int = 30,
    tracked_since: Optional[date] = None,
) -> RollingStats:
    dates = list(dates)
    return RollingStats(
        weekly_average=rolling_average(dates, window_days, today, 7, tracked_since),
        monthly_average=rolling_average(dates, window_days, today, 30, tracked_since),
    )


def summarize(dates: Iterable[date], today: date, period_start: Optional[date] = None) -> StreakSummary:
    """
    Pełne podsumowanie serii. Daty z przyszłości są pomijane.
    Zimna seria liczona od period_start (domyślnie 1 stycznia bieżącego roku).
    """
    done = {d for d in dates if d <= today}
    period_start = period_start or date(today.year, 1, 1)
    last = max(done) if done else None

    return StreakSummary(
        current_streak=current_streak(done, today),
        longest_streak=longest_streak(done),
        longest_cold_streak=longest_cold_streak(done, period_start, today),
        last_completed_date=last,
        cold_days=days_since_last_completed(last, today),
    )


def streak_badge(current: int, cold_days: int) -> str:
    """
    Jedna, kanoniczna reguła wyświetlania:
    seria >= 1 -> płomienie (1-5: 1, 6-10: 2, >10: 3),
    seria 0 i dni na zimno > 0 -> śnieżynki (te same progi), inaczej pusto.
    """
    if current >= 1:
        return '\U0001F525' * _tier(current)
    if cold_days > 0:
        return '❄️' * _tier(cold_days)
    return ''


def _tier(n: int) -> int:
    if n <= 5:
        return 1
    if n <= 10:
        return 2
    return 3
