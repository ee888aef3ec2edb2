# apps/okrs/domain/quarters.py
from datetime import date, timedelta
from typing import Tuple

from dateutil.relativedelta import relativedelta


def quarter_of(day: date) -> int:
    return (day.month - 1) // 3 + 1


def quarter_label(day: date) -> str:
    return f"{day.year}-Q{quarter_of(day)}"


def quarter_window(day: date) -> Tuple[date, date]:
    """Pierwszy i ostatni dzień kwartału, w którym leży `day`."""
    start = date(day.year, 3 * (quarter_of(day) - 1) + 1, 1)
    end = start + relativedelta(months=3) - timedelta(days=1)
    return start, end


def next_quarter_window(day: date) -> Tuple[date, date]:
    start, _ = quarter_window(day)
    return quarter_window(start + relativedelta(months=3))
