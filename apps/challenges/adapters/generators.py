# apps/challenges/adapters/generators.py
import logging
import random
from datetime import date
from typing import Dict, Optional, Set

from django.db.models import Count, Q

from apps.challenges.domain.entities import ChallengeDraft, ProtocolKey, ProtocolSettings
from apps.challenges.domain.selection import eligible_key_results
from apps.habits.services import HabitService
from apps.okrs.adapters.orm_repositories import DjangoObjectiveRepository
from apps.priorities.models import Priority

logger = logging.getLogger(__name__)

PLACEHOLDER_PROMPTS = [
    "Do one thing this week you have been putting off",
    "Reach out to someone you have not talked to in a while",
    "Spend 30 minutes planning next week",
    "Try something new for one of your pillars",
    "Clear one small annoyance from your environment",
]


class ContentGenerators:
    """Generatory treści wyzwań, po jednym na protokół."""

    def __init__(self, rng: Optional[random.Random] = None, today: Optional[date] = None,
                 habit_service: Optional[HabitService] = None, okr_repository=None):
        self.rng = rng or random.Random()
        self.today = today
        self.habit_service = habit_service or HabitService()
        self.okr_repository = okr_repository or DjangoObjectiveRepository()

    def as_mapping(self) -> Dict[ProtocolKey, object]:
        return {
            ProtocolKey.HABITS_SLIPPING: self.habits_slipping,
            ProtocolKey.PRIORITIES_PROGRESS: self.priorities_progress,
            ProtocolKey.OKRS_PROGRESS: self.okrs_progress,
            ProtocolKey.PLACEHOLDER: self.placeholder,
        }

    def habits_slipping(self, settings: ProtocolSettings, exclude_ids: Set) -> Optional[ChallengeDraft]:
        enabled = settings.id_set('enabled_habit_ids')
        if not enabled:
            return None

        habits = [
            h for h in self.habit_service.list_habits(today=self.today, with_rolling=True)
            if h.id in enabled and h.id not in exclude_ids
        ]
        if not habits:
            return None

        # Najpierw te poniżej celu tygodniowego
        slipping = [h for h in habits if h.is_slipping]
        if not slipping:
            logger.debug("No slipping habits, picking from %d enabled", len(habits))
        habit = self.rng.choice(slipping or habits)

        return ChallengeDraft(
            protocol_key=ProtocolKey.HABITS_SLIPPING,
            action_text=f"Get back on track with {habit.name}",
            story_type='slipping_habit',
            story_data={
                'habit_id': habit.id,
                'habit_name': habit.name,
                'weekly_goal': habit.weekly_goal,
                'weekly_average': habit.rolling.weekly_average if habit.rolling else 0.0,
                'current_streak': habit.streak.current_streak,
            },
        )

    def priorities_progress(self, settings: ProtocolSettings, exclude_ids: Set) -> Optional[ChallengeDraft]:
        pillars = settings.str_list('enabled_pillars')
        if not pillars:
            return None

        candidates = list(
            Priority.objects.filter(pillar__in=pillars, is_completed=False)
            .exclude(id__in=exclude_ids)
            .annotate(
                milestones_total=Count('milestones'),
                milestones_done=Count('milestones', filter=Q(milestones__is_completed=True)),
            )
        )
        if not candidates:
            return None

        committed = [p for p in candidates if p.is_committed]
        priority = self.rng.choice(committed or candidates)

        return ChallengeDraft(
            protocol_key=ProtocolKey.PRIORITIES_PROGRESS,
            action_text=f"Make progress on {priority.title}",
            story_type='priority_progress',
            story_data={
                'priority_id': priority.id,
                'priority_title': priority.title,
                'pillar': priority.pillar,
                'milestones_done': priority.milestones_done,
                'milestones_total': priority.milestones_total,
            },
        )

    def okrs_progress(self, settings: ProtocolSettings, exclude_ids: Set) -> Optional[ChallengeDraft]:
        enabled = settings.id_set('enabled_kr_ids')
        if not enabled:
            return None

        candidates = eligible_key_results(self.okr_repository.selectable_key_results(), enabled, exclude_ids)
        if not candidates:
            return None

        kr = self.rng.choice(candidates)
        okr = self.okr_repository.get_by_id(kr.objective_id)

        return ChallengeDraft(
            protocol_key=ProtocolKey.OKRS_PROGRESS,
            action_text=f"Make progress on {kr.description} KR",
            story_type='okrs_progress',
            story_data={
                'kr_id': kr.id,
                'kr_description': kr.description,
                'kr_progress': kr.progress,
                'kr_current_value': kr.current_value,
                'kr_target_value': kr.target_value,
                'okr_id': kr.objective_id,
                'okr_objective': okr.objective if okr else '',
                'okr_pillar': okr.pillar.value if okr else '',
                'okr_quarter': okr.quarter if okr else '',
            },
        )

    def placeholder(self, settings: ProtocolSettings, exclude_ids: Set) -> ChallengeDraft:
        unused = [i for i in range(len(PLACEHOLDER_PROMPTS)) if i not in exclude_ids]
        index = self.rng.choice(unused or range(len(PLACEHOLDER_PROMPTS)))
        return ChallengeDraft(
            protocol_key=ProtocolKey.PLACEHOLDER,
            action_text=PLACEHOLDER_PROMPTS[index],
            story_type='placeholder',
            story_data={'prompt_index': index},
        )
