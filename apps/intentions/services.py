# apps/intentions/services.py
import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Union

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.core.store import safe_read
from apps.habits.domain.streaks import current_streak, longest_streak
from apps.okrs.domain.entities import PILLAR_ORDER, Pillar
from .models import DailyIntention

logger = logging.getLogger(__name__)

MAX_INTENTION_LENGTH = 500


def _as_mapping(entries: Union[Mapping[str, Any], Iterable[Mapping[str, Any]]]) -> dict:
    """Przyjmuje {pillar: tekst} albo listę {'pillar': ..., 'intention': ...}."""
    if isinstance(entries, Mapping):
        return dict(entries)
    result = {}
    for row in entries:
        if not isinstance(row, Mapping):
            raise ValidationError("Each intention must be an object")
        result[row.get('pillar')] = row.get('intention', row.get('text'))
    return result


class IntentionService:
    @safe_read(dict)
    def current(self, today: Optional[date] = None) -> dict:
        today = today or timezone.localdate()
        rows = {i.pillar: i for i in DailyIntention.objects.filter(date=today)}
        return {
            'date': today.isoformat(),
            'locked': bool(rows) and all(r.locked_at for r in rows.values()),
            'intentions': [
                {'pillar': p.value, 'intention': rows[p.value].text if p.value in rows else ''}
                for p in PILLAR_ORDER
            ],
        }

    def lock_in(self, entries, today: Optional[date] = None) -> dict:
        """Zatwierdza intencje na dziś: po jednej na filar, wszystkie niepuste."""
        today = today or timezone.localdate()
        data = _as_mapping(entries)

        unknown = [k for k in data if k not in {p.value for p in Pillar}]
        if unknown:
            raise ValidationError(f"Unknown pillars: {', '.join(map(str, unknown))}")

        cleaned = {}
        for pillar in PILLAR_ORDER:
            text = data.get(pillar.value)
            text = text.strip() if isinstance(text, str) else ''
            if not text:
                raise ValidationError(f"{pillar.value}: intention cannot be empty")
            if len(text) > MAX_INTENTION_LENGTH:
                raise ValidationError(f"{pillar.value}: intention is too long")
            cleaned[pillar.value] = text

        if DailyIntention.objects.filter(date=today, locked_at__isnull=False).exists():
            raise ValidationError("Intentions are already locked for today")

        now = timezone.now()
        with transaction.atomic():
            for pillar, text in cleaned.items():
                DailyIntention.objects.update_or_create(
                    date=today, pillar=pillar, defaults={'text': text, 'locked_at': now}
                )
        logger.info("Locked in intentions for %s", today)
        return self.current(today)

    @safe_read(lambda: {'current_streak': 0, 'longest_streak': 0})
    def stats(self, today: Optional[date] = None) -> dict:
        """Serie dni z zatwierdzonymi intencjami."""
        today = today or timezone.localdate()
        dates = set(
            DailyIntention.objects.filter(locked_at__isnull=False, date__lte=today)
            .values_list('date', flat=True)
        )
        return {
            'current_streak': current_streak(dates, today),
            'longest_streak': longest_streak(dates),
        }
