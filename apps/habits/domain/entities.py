# apps/habits/domain/entities.py
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from apps.habits.domain.streaks import RollingStats, StreakSummary, streak_badge


@dataclass
class HabitEntity:
    id: Optional[int]
    name: str
    rule: str = ""
    display_order: int = 0
    weekly_goal: int = 0
    streak: StreakSummary = field(default_factory=StreakSummary)
    rolling: Optional[RollingStats] = None
    done_today: bool = False

    @property
    def badge(self) -> str:
        return streak_badge(self.streak.current_streak, self.streak.cold_days)

    @property
    def is_slipping(self) -> bool:
        """Średnia tygodniowa poniżej celu (bez celu nigdy się nie "ześlizguje")."""
        if self.weekly_goal <= 0 or self.rolling is None:
            return False
        return self.rolling.weekly_average < self.weekly_goal

    def to_view_model(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'rule': self.rule,
            'display_order': self.display_order,
            'weekly_goal': self.weekly_goal,
            'done_today': self.done_today,
            'current_streak': self.streak.current_streak,
            'longest_streak': self.streak.longest_streak,
            'longest_cold_streak': self.streak.longest_cold_streak,
            'last_completed_date': self.streak.last_completed_date.isoformat() if self.streak.last_completed_date else None,
            'cold_days': self.streak.cold_days,
            'badge': self.badge,
            'rolling': None if self.rolling is None else {
                'weekly_average': self.rolling.weekly_average,
                'monthly_average': self.rolling.monthly_average,
            },
        }


@dataclass(frozen=True)
class EntryEntity:
    habit_id: int
    date: date
    is_done: bool
