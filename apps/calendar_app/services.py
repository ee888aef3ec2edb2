# apps/calendar_app/services.py
import logging
from datetime import date, timedelta
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.core.store import safe_read
from .domain.days import build_days, default_affects_row_appearance, default_priority, year_bounds
from .domain.patterns import parse_rule
from .models import CalendarEvent, CalendarPattern

logger = logging.getLogger(__name__)

# Najdłuższy zakres zwracany w jednym zapytaniu o dni
MAX_RANGE_DAYS = 731

EVENT_FIELDS = (
    'title', 'category', 'notes', 'start_date', 'end_date', 'start_time', 'end_time',
    'all_day', 'affects_row_appearance', 'priority', 'is_pto',
)


def event_to_dict(e: CalendarEvent) -> dict:
    return {
        'id': e.id,
        'title': e.title,
        'category': e.category or None,
        'notes': e.notes or None,
        'start_date': e.start_date.isoformat(),
        'end_date': e.end_date.isoformat(),
        'start_time': e.start_time.strftime('%H:%M') if e.start_time else None,
        'end_time': e.end_time.strftime('%H:%M') if e.end_time else None,
        'all_day': e.all_day,
        'affects_row_appearance': e.affects_row_appearance,
        'priority': e.priority,
        'is_pto': e.is_pto,
        'source_pattern_id': e.source_pattern_id,
    }


def pattern_to_dict(p: CalendarPattern) -> dict:
    return {
        'id': p.id,
        'name': p.name,
        'pattern_type': p.pattern_type,
        'category': p.category or None,
        'notes': p.notes or None,
        'start_date': p.start_date.isoformat() if p.start_date else None,
        'end_date': p.end_date.isoformat() if p.end_date else None,
        'rule_json': p.rule_json,
        'default_affects_row_appearance': p.default_affects_row_appearance,
        'default_priority': p.default_priority,
        'is_active': p.is_active,
    }


def _check_range(start: date, end: date):
    if end < start:
        raise ValidationError("end_date cannot be before start_date")
    if (end - start).days >= MAX_RANGE_DAYS:
        raise ValidationError(f"Date range cannot exceed {MAX_RANGE_DAYS} days")


class CalendarService:
    # --- Odczyty ---

    def _overlapping(self, start: date, end: date):
        # Wydarzenie wielodniowe trafia do zakresu, jeśli go choć częściowo pokrywa
        return CalendarEvent.objects.filter(start_date__lte=end, end_date__gte=start)

    def events_in_range(self, start: date, end: date) -> List[dict]:
        _check_range(start, end)
        return self._events_in_range(start, end)

    @safe_read(list)
    def _events_in_range(self, start: date, end: date) -> List[dict]:
        return [event_to_dict(e) for e in self._overlapping(start, end)]

    def events_for_year(self, year: int) -> List[dict]:
        return self.events_in_range(*year_bounds(year))

    @safe_read(list)
    def upcoming(self, today: Optional[date] = None, days: int = 14) -> List[dict]:
        """Wydarzenia trwające dziś albo zaczynające się w ciągu `days` dni."""
        today = today or timezone.localdate()
        return [event_to_dict(e) for e in self._overlapping(today, today + timedelta(days=days))]

    def days(self, start: date, end: date) -> List[dict]:
        """Dzień po dniu: wydarzenia i wygląd wiersza (PTO > podróż > weekend)."""
        _check_range(start, end)
        return self._days(start, end)

    @safe_read(list)
    def _days(self, start: date, end: date) -> List[dict]:
        result = []
        for day in build_days(self._overlapping(start, end), start, end):
            appearance = day.appearance
            result.append({
                'date': day.date.isoformat(),
                'is_weekend': day.is_weekend,
                'row': appearance.kind.value,
                'has_pto': appearance.has_pto,
                'pto_only': appearance.pto_only,
                'event_ids': [e.id for e in day.events],
            })
        return result

    # --- Wydarzenia ---

    def _get_event(self, event_id: int) -> CalendarEvent:
        try:
            return CalendarEvent.objects.get(id=event_id)
        except CalendarEvent.DoesNotExist:
            raise ValueError(f"Event {event_id} not found")

    def create_event(self, **fields) -> dict:
        fields = {k: v for k, v in fields.items() if k in EVENT_FIELDS and v is not None}
        if not fields.get('title', '').strip():
            raise ValidationError("title is required")
        if not fields.get('start_date'):
            raise ValidationError("start_date is required")

        category = fields.get('category') or ''
        is_pto = fields.get('is_pto', False)
        fields['title'] = fields['title'].strip()
        # Jednodniowe: koniec = początek
        fields.setdefault('end_date', fields['start_date'])
        fields.setdefault('priority', default_priority(category, is_pto))
        fields.setdefault('affects_row_appearance', default_affects_row_appearance(category))
        if fields.get('start_time') and 'all_day' not in fields:
            fields['all_day'] = False
        if fields.get('all_day', True):
            fields.pop('start_time', None)
            fields.pop('end_time', None)

        event = CalendarEvent(**fields)
        event.full_clean(exclude=['source_pattern'])
        event.save()
        logger.info("Created event %s (%s - %s)", event.id, event.start_date, event.end_date)
        return event_to_dict(event)

    def update_event(self, event_id: int, **fields) -> dict:
        """Aktualizuje tylko podane pola."""
        event = self._get_event(event_id)
        for name, value in fields.items():
            if name not in EVENT_FIELDS:
                raise ValidationError(f"Unknown event field: {name}")
            if name in ('category', 'notes') and value is None:
                value = ''
            setattr(event, name, value)
        if event.all_day:
            event.start_time = event.end_time = None
        event.full_clean(exclude=['source_pattern'])
        event.save()
        return event_to_dict(event)

    def delete_event(self, event_id: int) -> None:
        event = self._get_event(event_id)
        event.delete()
        logger.info("Deleted event %s", event_id)

    # --- Wzorce ---

    @safe_read(list)
    def list_patterns(self, active_only: bool = True) -> List[dict]:
        qs = CalendarPattern.objects.order_by('name', 'id')
        if active_only:
            qs = qs.filter(is_active=True)
        return [pattern_to_dict(p) for p in qs]

    def create_pattern(self, **fields) -> dict:
        pattern = CalendarPattern(**fields)
        if pattern.pattern_type == CalendarPattern.PatternTypeChoices.RECURRING:
            parse_rule(pattern.rule_json)
        pattern.full_clean()
        pattern.save()
        logger.info("Created pattern %s (%s)", pattern.id, pattern.pattern_type)
        return pattern_to_dict(pattern)

    def _get_pattern(self, pattern_id: int) -> CalendarPattern:
        try:
            return CalendarPattern.objects.get(id=pattern_id)
        except CalendarPattern.DoesNotExist:
            raise ValueError(f"Pattern {pattern_id} not found")

    def deactivate_pattern(self, pattern_id: int) -> dict:
        pattern = self._get_pattern(pattern_id)
        pattern.is_active = False
        pattern.save(update_fields=['is_active', 'updated_at'])
        return pattern_to_dict(pattern)

    def generate_from_pattern(self, pattern_id: int, until: date, today: Optional[date] = None) -> List[dict]:
        """
        Tworzy wydarzenia wzorca cyklicznego do `until` włącznie.
        Dni, które już mają wydarzenie z tego wzorca, są pomijane,
        więc wielokrotne wywołanie niczego nie dubluje.
        """
        pattern = self._get_pattern(pattern_id)
        if not pattern.is_active:
            raise ValidationError("Pattern is not active")
        if pattern.pattern_type != CalendarPattern.PatternTypeChoices.RECURRING:
            raise ValidationError("Only recurring patterns generate events")

        rule = parse_rule(pattern.rule_json)
        start = pattern.start_date or today or timezone.localdate()
        end = min(until, pattern.end_date) if pattern.end_date else until
        _check_range(start, max(start, end))

        existing = set(pattern.events.values_list('start_date', flat=True))
        events = [
            CalendarEvent(
                title=pattern.name,
                category=pattern.category,
                notes=pattern.notes,
                start_date=day,
                end_date=day,
                start_time=rule.start_time,
                end_time=rule.end_time,
                all_day=rule.start_time is None,
                affects_row_appearance=pattern.default_affects_row_appearance,
                priority=pattern.default_priority,
                source_pattern=pattern,
            )
            for day in rule.occurrences(start, end)
            if day not in existing
        ]
        with transaction.atomic():
            created = CalendarEvent.objects.bulk_create(events)
        logger.info("Pattern %s generated %d events up to %s", pattern.id, len(created), end)
        return [event_to_dict(e) for e in created]
