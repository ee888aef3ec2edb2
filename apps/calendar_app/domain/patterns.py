# apps/calendar_app/domain/patterns.py
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Mapping, Optional

from dateutil.rrule import DAILY, FR, MO, MONTHLY, SA, SU, TH, TU, WE, WEEKLY, rrule
from django.core.exceptions import ValidationError

FREQUENCIES = {'daily': DAILY, 'weekly': WEEKLY, 'monthly': MONTHLY}
WEEKDAYS = {
    'monday': MO, 'tuesday': TU, 'wednesday': WE, 'thursday': TH,
    'friday': FR, 'saturday': SA, 'sunday': SU,
}


@dataclass(frozen=True)
class RecurrenceRule:
    frequency: str
    interval: int = 1
    days: tuple = ()
    start_time: Optional[time] = None
    duration_minutes: Optional[int] = None

    @property
    def end_time(self) -> Optional[time]:
        if self.start_time is None or not self.duration_minutes:
            return None
        end = datetime.combine(date.min, self.start_time) + timedelta(minutes=self.duration_minutes)
        # Wydarzenie przechodzące przez północ nie dostaje godziny końca
        if end.date() != date.min:
            return None
        return end.time()

    def occurrences(self, start: date, end: date) -> List[date]:
        if end < start:
            return []
        kwargs = {'interval': self.interval, 'dtstart': datetime.combine(start, time.min),
                  'until': datetime.combine(end, time.min)}
        if self.days:
            kwargs['byweekday'] = [WEEKDAYS[d] for d in self.days]
        return [dt.date() for dt in rrule(FREQUENCIES[self.frequency], **kwargs)]


def parse_rule(rule_json: Mapping) -> RecurrenceRule:
    """
    Reguła wzorca cyklicznego, np.
    {"frequency": "weekly", "days": ["monday", "wednesday"], "time": "18:00", "duration_minutes": 60}
    """
    if not isinstance(rule_json, Mapping):
        raise ValidationError("rule_json must be an object")

    frequency = str(rule_json.get('frequency', '')).lower()
    if frequency not in FREQUENCIES:
        raise ValidationError(f"Unknown frequency: {rule_json.get('frequency')!r}")

    interval = rule_json.get('interval', 1)
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
        raise ValidationError("interval must be a positive integer")

    days = rule_json.get('days') or []
    if not isinstance(days, list):
        raise ValidationError("days must be a list of weekday names")
    days = tuple(str(d).lower() for d in days)
    unknown = [d for d in days if d not in WEEKDAYS]
    if unknown:
        raise ValidationError(f"Unknown weekdays: {unknown}")

    start_time = None
    if rule_json.get('time'):
        try:
            start_time = datetime.strptime(str(rule_json['time']), '%H:%M').time()
        except ValueError:
            raise ValidationError(f"time must be HH:MM, got {rule_json['time']!r}")

    duration = rule_json.get('duration_minutes')
    if duration is not None and (isinstance(duration, bool) or not isinstance(duration, int) or duration < 0):
        raise ValidationError("duration_minutes must be a non-negative integer")

    return RecurrenceRule(frequency, interval, days, start_time, duration)
