# apps/challenges/services.py
import logging
import random
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import pytz
from django.conf import settings as django_settings
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.core.store import safe_read
from apps.okrs.models import KeyResult
from apps.okrs.adapters.orm_repositories import DjangoObjectiveRepository
from apps.okrs.adapters.rows import parse_key_result_row
from .adapters.generators import ContentGenerators
from .domain.entities import (
    DEFAULT_TOTAL_CHALLENGES, PROTOCOL_PRIORITY, REROLLABLE, SUBJECT_KEYS,
    ChallengeDraft, ProtocolKey, ProtocolSettings, RandomizationStrategy, WeekInfo,
)
from .domain.selection import SlotSelector, reroll
from .models import ChallengeConfig, ChallengeProtocol, WeeklyChallenge, WeeklyChallengeSet

logger = logging.getLogger(__name__)

MAX_TOTAL_CHALLENGES = 10


def challenge_to_dict(c: WeeklyChallenge) -> dict:
    return {
        'id': c.id,
        'slot_index': c.slot_index,
        'protocol_key': c.protocol_key,
        'action_text': c.action_text,
        'story_type': c.story_type,
        'story_data': c.story_data,
        'title': c.title,
        'description': c.description,
        'completed': c.completed,
        'completed_at': c.completed_at.isoformat() if c.completed_at else None,
    }


class WeeklyChallengeService:
    def __init__(self, rng: Optional[random.Random] = None, generators: Optional[ContentGenerators] = None,
                 tz_name: Optional[str] = None):
        self.rng = rng or random.Random()
        self.generators = generators
        self.tz = pytz.timezone(tz_name or django_settings.CHALLENGES_TIME_ZONE)

    # --- Tydzień ---

    def current_week(self, now: Optional[datetime] = None) -> WeekInfo:
        """Tydzień ISO liczony w strefie wyzwań (nie w strefie serwera)."""
        now = now or timezone.now()
        local_day = now.astimezone(self.tz).date()
        year, week_number, _ = local_day.isocalendar()
        return WeekInfo(
            year=year,
            week_number=week_number,
            week_start_date=local_day - timedelta(days=local_day.weekday()),
        )

    def _response(self, challenge_set: WeeklyChallengeSet) -> dict:
        week = WeekInfo(
            year=challenge_set.year,
            week_number=challenge_set.week_number,
            week_start_date=challenge_set.week_start_date,
            generated_at=challenge_set.generated_at,
        )
        return {
            'week': week.to_view_model(),
            'challenges': [challenge_to_dict(c) for c in challenge_set.challenges.order_by('slot_index')],
            'config': self.fetch_config(),
        }

    def get_or_create_weekly_challenges(self, now: Optional[datetime] = None) -> dict:
        """Idempotentne: pierwsze wywołanie w tygodniu losuje, kolejne zwracają to samo."""
        now = now or timezone.now()
        week = self.current_week(now)

        existing = WeeklyChallengeSet.objects.filter(year=week.year, week_number=week.week_number).first()
        if existing:
            return self._response(existing)

        try:
            with transaction.atomic():
                challenge_set = WeeklyChallengeSet.objects.create(
                    year=week.year,
                    week_number=week.week_number,
                    week_start_date=week.week_start_date,
                    generated_at=now,
                )
                drafts = self._select(now)
                WeeklyChallenge.objects.bulk_create([
                    WeeklyChallenge(
                        challenge_set=challenge_set,
                        slot_index=d.slot_index,
                        protocol_key=d.protocol_key.value,
                        action_text=d.action_text,
                        story_type=d.story_type,
                        story_data=d.story_data,
                        title=d.title,
                        description=d.description,
                    )
                    for d in drafts
                ])
        except IntegrityError:
            # Równoległe wywołanie zdążyło pierwsze
            logger.info("Challenge set %s-W%s created concurrently", week.year, week.week_number)
            challenge_set = WeeklyChallengeSet.objects.get(year=week.year, week_number=week.week_number)
        else:
            logger.info("Generated %d challenges for %s-W%s", len(drafts), week.year, week.week_number)

        return self._response(challenge_set)

    def regenerate(self, now: Optional[datetime] = None) -> dict:
        """Usuwa zestaw bieżącego tygodnia i losuje od nowa."""
        now = now or timezone.now()
        week = self.current_week(now)
        deleted, _ = WeeklyChallengeSet.objects.filter(year=week.year, week_number=week.week_number).delete()
        logger.info("Regenerating %s-W%s (deleted %d rows)", week.year, week.week_number, deleted)
        return self.get_or_create_weekly_challenges(now)

    def _content(self, now: datetime) -> ContentGenerators:
        return self.generators or ContentGenerators(rng=self.rng, today=now.astimezone(self.tz).date())

    def _select(self, now: datetime) -> List[ChallengeDraft]:
        config = self.fetch_config()
        selector = SlotSelector(self._content(now).as_mapping(), rng=self.rng)
        return selector.select(
            config['total_challenges'],
            self.protocol_settings(),
            RandomizationStrategy(config['randomization_strategy']),
        )

    # --- Pojedyncze wyzwania ---

    def _get_challenge(self, challenge_id: int) -> WeeklyChallenge:
        try:
            return WeeklyChallenge.objects.get(id=challenge_id)
        except WeeklyChallenge.DoesNotExist:
            raise ValueError(f"Challenge {challenge_id} not found")

    def complete(self, challenge_id: int) -> dict:
        challenge = self._get_challenge(challenge_id)
        challenge.completed = True
        challenge.completed_at = timezone.now()
        challenge.save(update_fields=['completed', 'completed_at'])
        return challenge_to_dict(challenge)

    def uncomplete(self, challenge_id: int) -> dict:
        challenge = self._get_challenge(challenge_id)
        challenge.completed = False
        challenge.completed_at = None
        challenge.save(update_fields=['completed', 'completed_at'])
        return challenge_to_dict(challenge)

    def toggle(self, challenge_id: int) -> dict:
        challenge = self._get_challenge(challenge_id)
        if challenge.completed:
            return self.uncomplete(challenge_id)
        return self.complete(challenge_id)

    def reroll(self, challenge_id: int, now: Optional[datetime] = None) -> dict:
        """Nowa treść dla jednego wyzwania; slot i protokół bez zmian."""
        challenge = self._get_challenge(challenge_id)
        try:
            key = ProtocolKey(challenge.protocol_key)
        except ValueError:
            raise ValidationError(f"Unknown protocol: {challenge.protocol_key}")
        if key not in REROLLABLE:
            raise ValidationError(f"Challenges of type {key.value} cannot be rerolled")

        subject_key = SUBJECT_KEYS[key]
        # Tematy już użyte w tym tygodniu przez ten sam protokół
        used = {
            c.story_data.get(subject_key)
            for c in challenge.challenge_set.challenges.filter(protocol_key=key.value)
        }
        used.discard(None)

        current = ChallengeDraft(
            protocol_key=key,
            action_text=challenge.action_text,
            story_type=challenge.story_type,
            story_data=challenge.story_data,
            slot_index=challenge.slot_index,
        )
        generator = self._content(now or timezone.now()).as_mapping()[key]
        draft = reroll(current, generator, self.protocol_settings()[key], used)
        if draft is None:
            raise ValidationError("No other candidates available for this challenge")

        challenge.action_text = draft.action_text
        challenge.story_type = draft.story_type
        challenge.story_data = draft.story_data
        challenge.save(update_fields=['action_text', 'story_type', 'story_data'])
        logger.info("Rerolled challenge %s (%s)", challenge.id, key.value)
        return challenge_to_dict(challenge)

    # --- Ustawienia protokołów ---

    def protocol_settings(self) -> Dict[ProtocolKey, ProtocolSettings]:
        result = {key: ProtocolSettings.default(key) for key in PROTOCOL_PRIORITY}
        for row in ChallengeProtocol.objects.all():
            try:
                key = ProtocolKey(row.protocol_key)
            except ValueError:
                logger.warning("Ignoring unknown protocol %r", row.protocol_key)
                continue
            result[key] = ProtocolSettings(
                key=key,
                is_enabled=row.is_enabled,
                max_per_week=row.max_per_week,
                config=row.config if isinstance(row.config, dict) else {},
            )
        return result

    @safe_read(list)
    def fetch_protocols(self) -> List[dict]:
        settings = self.protocol_settings()
        return [settings[key].to_view_model() for key in PROTOCOL_PRIORITY]

    def update_protocol(self, protocol_key: str, is_enabled: Optional[bool] = None,
                        max_per_week: Optional[int] = None, config: Optional[dict] = None) -> dict:
        """Aktualizuje tylko podane pola; `config` jest scalany z istniejącym."""
        try:
            key = ProtocolKey(protocol_key)
        except ValueError:
            raise ValidationError(f"Unknown protocol: {protocol_key}")

        if max_per_week is not None and max_per_week < 0:
            raise ValidationError("max_per_week cannot be negative")
        if config is not None and not isinstance(config, dict):
            raise ValidationError("config must be an object")

        default = ProtocolSettings.default(key)
        with transaction.atomic():
            row, _ = ChallengeProtocol.objects.select_for_update().get_or_create(
                protocol_key=key.value,
                defaults={'is_enabled': default.is_enabled, 'max_per_week': default.max_per_week, 'config': {}},
            )
            if is_enabled is not None:
                row.is_enabled = is_enabled
            if max_per_week is not None:
                row.max_per_week = max_per_week
            if config:
                row.config = {**(row.config or {}), **config}
            row.save()

        return ProtocolSettings(key, row.is_enabled, row.max_per_week, row.config).to_view_model()

    def prune_enabled_key_results(self) -> List[int]:
        """Usuwa z konfiguracji okrs_progress KR-y ukończone, odłożone albo nieistniejące."""
        settings = self.protocol_settings()[ProtocolKey.OKRS_PROGRESS]
        enabled = settings.id_set('enabled_kr_ids')
        if not enabled:
            return []

        repo = DjangoObjectiveRepository()
        valid = set()
        for model in KeyResult.objects.filter(id__in=enabled):
            try:
                kr = parse_key_result_row(repo.kr_row(model))
            except ValidationError:
                continue
            if not kr.is_completed and not kr.punted:
                valid.add(kr.id)

        removed = sorted(enabled - valid)
        if removed:
            logger.info("Pruning %d key results from okrs_progress: %s", len(removed), removed)
            self.update_protocol(ProtocolKey.OKRS_PROGRESS.value, config={'enabled_kr_ids': sorted(valid)})
        return removed

    # --- Konfiguracja globalna ---

    def fetch_config(self) -> dict:
        values = dict(ChallengeConfig.objects.values_list('key', 'value'))
        total = values.get('total_challenges')
        strategy = values.get('randomization_strategy')
        try:
            total = int(total) if total is not None else DEFAULT_TOTAL_CHALLENGES
        except (TypeError, ValueError):
            total = DEFAULT_TOTAL_CHALLENGES
        if strategy not in {s.value for s in RandomizationStrategy}:
            strategy = RandomizationStrategy.GUARANTEED_DIVERSITY.value
        return {'total_challenges': total, 'randomization_strategy': strategy}

    def update_config(self, key: str, value) -> dict:
        if key == 'total_challenges':
            if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_TOTAL_CHALLENGES:
                raise ValidationError(f"total_challenges must be an integer between 1 and {MAX_TOTAL_CHALLENGES}")
        elif key == 'randomization_strategy':
            try:
                value = RandomizationStrategy(value).value
            except ValueError:
                raise ValidationError(f"Unknown randomization strategy: {value!r}")
        else:
            raise ValidationError(f"Unknown config key: {key}")

        ChallengeConfig.objects.update_or_create(key=key, defaults={'value': value})
        return self.fetch_config()

    def update_randomization_strategy(self, strategy: str) -> dict:
        return self.update_config('randomization_strategy', strategy)
