# apps/habits/services.py
import asyncio
import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from asgiref.sync import async_to_sync, sync_to_async
from django.db import transaction
from django.utils import timezone

from apps.core.store import safe_read
from .domain.entities import EntryEntity, HabitEntity
from .domain.streaks import RollingStats, StreakSummary, rolling_stats, summarize
from .models import Habit, HabitEntry

logger = logging.getLogger(__name__)


class HabitService:
    def _get_habit(self, habit_id: int) -> Habit:
        try:
            return Habit.objects.get(id=habit_id)
        except Habit.DoesNotExist:
            raise ValueError(f"Habit {habit_id} not found")

    def set_entry(self, habit_id: int, day: date, is_done: bool, today: Optional[date] = None) -> EntryEntity:
        habit = self._get_habit(habit_id)

        with transaction.atomic():
            # 1. Zapis wpisu (jeden na dzień)
            entry, _ = HabitEntry.objects.update_or_create(
                habit=habit, date=day, defaults={'is_done': is_done}
            )
            # 2. Przelicz serie z historii (nie z poprzedniej wartości)
            self.recompute_streaks(habit, today=today)

        return EntryEntity(habit_id=habit.id, date=entry.date, is_done=entry.is_done)

    def toggle_entry(self, habit_id: int, day: date, today: Optional[date] = None) -> EntryEntity:
        current = HabitEntry.objects.filter(habit_id=habit_id, date=day).values_list('is_done', flat=True).first()
        return self.set_entry(habit_id, day, not bool(current), today=today)

    def recompute_streaks(self, habit: Habit, today: Optional[date] = None) -> StreakSummary:
        today = today or timezone.localdate()

        # Tylko bieżący rok, tak jak statystyki roczne
        dates = self.completion_dates(habit.id, since=date(today.year, 1, 1))
        summary = summarize(dates, today)

        habit.current_streak = summary.current_streak
        habit.longest_streak = summary.longest_streak
        habit.longest_cold_streak = summary.longest_cold_streak
        habit.last_completed_date = summary.last_completed_date
        habit.save(update_fields=[
            'current_streak', 'longest_streak', 'longest_cold_streak', 'last_completed_date'
        ])
        return summary

    def completion_dates(self, habit_id: int, since: Optional[date] = None) -> List[date]:
        qs = HabitEntry.objects.filter(habit_id=habit_id, is_done=True)
        if since:
            qs = qs.filter(date__gte=since)
        return list(qs.values_list('date', flat=True))

    @safe_read(list)
    def entries_for_year(self, habit_id: int, year: int) -> List[EntryEntity]:
        qs = HabitEntry.objects.filter(habit_id=habit_id, date__year=year).order_by('date')
        return [EntryEntity(habit_id=e.habit_id, date=e.date, is_done=e.is_done) for e in qs]

    @safe_read(RollingStats)
    def calculate_rolling_stats(self, habit_id: int, window_days: int = 30, today: Optional[date] = None) -> RollingStats:
        today = today or timezone.localdate()
        since = today - timedelta(days=window_days - 1)
        return rolling_stats(self.completion_dates(habit_id, since=since), today, window_days)

    async def gather_rolling_stats(
        self, habit_ids: Iterable[int], window_days: int = 30, today: Optional[date] = None
    ) -> Dict[int, RollingStats]:
        """
        Zapytania dla wielu nawyków zebrane przez gather; wynik dopiero gdy wszystkie wrócą.
        sync_to_async(thread_sensitive=True) wykonuje je po kolei w wątku ORM,
        bo połączenie z bazą jest związane z wątkiem.
        """
        habit_ids = list(dict.fromkeys(habit_ids))
        fetch = sync_to_async(self.calculate_rolling_stats)
        results = await asyncio.gather(*(fetch(h_id, window_days, today) for h_id in habit_ids))
        return dict(zip(habit_ids, results))

    def rolling_stats_for(self, habit_ids: Iterable[int], window_days: int = 30, today: Optional[date] = None) -> Dict[int, RollingStats]:
        return async_to_sync(self.gather_rolling_stats)(habit_ids, window_days, today)

    @safe_read(list)
    def list_habits(self, today: Optional[date] = None, with_rolling: bool = False) -> List[HabitEntity]:
        """Aktywne nawyki z seriami wyliczonymi na dziś."""
        today = today or timezone.localdate()
        habits = list(Habit.objects.filter(is_active=True))

        done_today = set(HabitEntry.objects.filter(
            habit__in=habits, date=today, is_done=True
        ).values_list('habit_id', flat=True))

        rolling = self.rolling_stats_for([h.id for h in habits], today=today) if with_rolling else {}

        result = []
        for h in habits:
            dates = self.completion_dates(h.id, since=date(today.year, 1, 1))
            result.append(HabitEntity(
                id=h.id,
                name=h.name,
                rule=h.rule,
                display_order=h.display_order,
                weekly_goal=h.weekly_goal,
                streak=summarize(dates, today),
                rolling=rolling.get(h.id),
                done_today=h.id in done_today,
            ))
        return result

    def reorder(self, ordered_ids: List[int]) -> None:
        habits = {h.id: h for h in Habit.objects.filter(id__in=ordered_ids)}
        missing = set(ordered_ids) - set(habits)
        if missing:
            raise ValueError(f"Unknown habits: {sorted(missing)}")

        for position, habit_id in enumerate(ordered_ids):
            habits[habit_id].display_order = position
        Habit.objects.bulk_update(habits.values(), ['display_order'])
        logger.info("Reordered %d habits", len(habits))
