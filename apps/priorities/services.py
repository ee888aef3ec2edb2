# apps/priorities/services.py
import logging
from typing import List

from django.db import transaction
from django.utils import timezone

from apps.core.cache import ReadThroughCache
from .models import Milestone, Priority
from .signals import priorities_changed

logger = logging.getLogger(__name__)

OVERVIEW_CACHE_KEY = 'priorities-overview-cache'
COMMITTED_CACHE_KEY = 'priorities-committed-cache'


class PriorityService:
    def __init__(self):
        self.overview_cache = ReadThroughCache(OVERVIEW_CACHE_KEY, self._fetch_overview)
        self.committed_cache = ReadThroughCache(COMMITTED_CACHE_KEY, self._fetch_committed_milestones)

    def _fetch_overview(self) -> List[dict]:
        qs = Priority.objects.prefetch_related('milestones').order_by('pillar', 'position', 'id')
        overview = []
        for p in qs:
            milestones = list(p.milestones.all())
            overview.append({
                'id': p.id,
                'pillar': p.pillar,
                'title': p.title,
                'is_committed': p.is_committed,
                'is_completed': p.is_completed,
                'milestones_total': len(milestones),
                'milestones_done': sum(1 for m in milestones if m.is_completed),
                'milestones': [
                    {'id': m.id, 'title': m.title, 'is_committed': m.is_committed, 'is_completed': m.is_completed}
                    for m in milestones
                ],
            })
        return overview

    def _fetch_committed_milestones(self) -> List[dict]:
        qs = Milestone.objects.filter(is_committed=True, is_completed=False).select_related('priority')
        return [
            {'id': m.id, 'title': m.title, 'priority_id': m.priority_id,
             'priority_title': m.priority.title, 'pillar': m.priority.pillar}
            for m in qs
        ]

    def overview(self, refresh: bool = False) -> List[dict]:
        return self.overview_cache.revalidate() if refresh else self.overview_cache.get()

    def committed_milestones(self, refresh: bool = False) -> List[dict]:
        return self.committed_cache.revalidate() if refresh else self.committed_cache.get()

    def _changed(self, action: str, object_id: int):
        # Zapis -> kolejne odczyty muszą być świeże
        self.overview_cache.invalidate()
        self.committed_cache.invalidate()
        priorities_changed.send(sender=self.__class__, action=action, object_id=object_id)

    def _get_priority(self, priority_id: int) -> Priority:
        try:
            return Priority.objects.get(id=priority_id)
        except Priority.DoesNotExist:
            raise ValueError(f"Priority {priority_id} not found")

    def _get_milestone(self, milestone_id: int) -> Milestone:
        try:
            return Milestone.objects.get(id=milestone_id)
        except Milestone.DoesNotExist:
            raise ValueError(f"Milestone {milestone_id} not found")

    def toggle_priority_commit(self, priority_id: int) -> Priority:
        priority = self._get_priority(priority_id)
        priority.is_committed = not priority.is_committed
        priority.save(update_fields=['is_committed'])
        self._changed('commit', priority.id)
        return priority

    def toggle_priority_complete(self, priority_id: int) -> Priority:
        priority = self._get_priority(priority_id)
        priority.is_completed = not priority.is_completed
        priority.save(update_fields=['is_completed'])
        self._changed('complete', priority.id)
        return priority

    def toggle_milestone_commit(self, milestone_id: int) -> Milestone:
        milestone = self._get_milestone(milestone_id)
        milestone.is_committed = not milestone.is_committed
        milestone.save(update_fields=['is_committed'])
        self._changed('milestone_commit', milestone.id)
        return milestone

    def toggle_milestone_complete(self, milestone_id: int) -> Milestone:
        with transaction.atomic():
            milestone = self._get_milestone(milestone_id)
            milestone.is_completed = not milestone.is_completed
            milestone.completed_at = timezone.now() if milestone.is_completed else None
            milestone.save(update_fields=['is_completed', 'completed_at'])
        logger.info("Milestone %s completed=%s", milestone.id, milestone.is_completed)
        self._changed('milestone_complete', milestone.id)
        return milestone
