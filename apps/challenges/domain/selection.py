# apps/challenges/domain/selection.py
"""
Przydział protokołów do slotów tygodniowych wyzwań.

Czysta logika: generatory treści wstrzykiwane jako funkcje
`(settings, exclude_ids) -> ChallengeDraft | None`, losowość przez
`random.Random`, więc wynik jest powtarzalny w testach.
"""
import logging
import random
from collections import Counter, defaultdict
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Set

from apps.challenges.domain.entities import (
    PROTOCOL_PRIORITY, ChallengeDraft, ProtocolKey, ProtocolSettings, RandomizationStrategy,
)

logger = logging.getLogger(__name__)

Generator = Callable[[ProtocolSettings, Set], Optional[ChallengeDraft]]

# Limit kolejnych nieudanych prób w trybie slot_by_slot
MAX_CONSECUTIVE_FAILURES = 20


class SlotSelector:
    def __init__(self, generators: Mapping[ProtocolKey, Generator], rng: Optional[random.Random] = None):
        self.generators = generators
        self.rng = rng or random.Random()

    def select(
        self,
        total_slots: int,
        settings: Mapping[ProtocolKey, ProtocolSettings],
        strategy: RandomizationStrategy = RandomizationStrategy.GUARANTEED_DIVERSITY,
    ) -> List[ChallengeDraft]:
        settings = {key: settings.get(key) or ProtocolSettings.default(key) for key in PROTOCOL_PRIORITY}
        run = _SelectionRun(self, max(0, int(total_slots)), settings)

        if strategy == RandomizationStrategy.SLOT_BY_SLOT:
            run.slot_by_slot()
        else:
            run.guaranteed_diversity()

        logger.debug("Selected %d/%d slots (%s): %s",
                     len(run.drafts), run.total, strategy, dict(run.counts))
        return run.drafts


class _SelectionRun:
    """Stan jednego losowania: przydzielone sloty, liczniki i wykluczenia per protokół."""

    def __init__(self, selector: SlotSelector, total: int, settings: Dict[ProtocolKey, ProtocolSettings]):
        self.selector = selector
        self.total = total
        self.settings = settings
        self.drafts: List[ChallengeDraft] = []
        self.counts = Counter()
        self.excluded = defaultdict(set)

    @property
    def full(self) -> bool:
        return len(self.drafts) >= self.total

    def under_cap(self, key: ProtocolKey) -> bool:
        return self.counts[key] < self.settings[key].max_per_week

    def generate(self, key: ProtocolKey) -> Optional[ChallengeDraft]:
        generator = self.selector.generators.get(key)
        if generator is None:
            return None
        return generator(self.settings[key], set(self.excluded[key]))

    def accept(self, key: ProtocolKey, draft: ChallengeDraft):
        draft = replace(draft, protocol_key=key, slot_index=len(self.drafts))
        self.drafts.append(draft)
        self.counts[key] += 1
        if draft.subject_id is not None:
            self.excluded[key].add(draft.subject_id)

    def guaranteed_diversity(self):
        for key in PROTOCOL_PRIORITY[:-1]:
            if not self.settings[key].is_enabled:
                continue
            while self.under_cap(key) and not self.full:
                draft = self.generate(key)
                if draft is None:
                    break
                self.accept(key, draft)

        # Resztę wypełnia placeholder (bez limitu)
        while not self.full:
            draft = self.generate(ProtocolKey.PLACEHOLDER)
            if draft is None:
                break
            self.accept(ProtocolKey.PLACEHOLDER, draft)

    def slot_by_slot(self):
        failures = 0
        while not self.full and failures < MAX_CONSECUTIVE_FAILURES:
            available = [
                key for key in PROTOCOL_PRIORITY[:-1]
                if self.settings[key].is_enabled and self.under_cap(key)
            ]
            if self.under_cap(ProtocolKey.PLACEHOLDER):
                available.append(ProtocolKey.PLACEHOLDER)

            key = self.selector.rng.choice(available) if available else ProtocolKey.PLACEHOLDER

            draft = None
            if key != ProtocolKey.PLACEHOLDER:
                draft = self.generate(key)
            if draft is None:
                key = ProtocolKey.PLACEHOLDER
                draft = self.generate(key)

            if draft is None:
                failures += 1
                continue
            self.accept(key, draft)
            failures = 0


def reroll(
    current: ChallengeDraft,
    generator: Generator,
    settings: ProtocolSettings,
    exclude_ids: Iterable,
) -> Optional[ChallengeDraft]:
    """Nowa treść dla jednego slotu. Slot i protokół zostają bez zmian."""
    exclude = set(exclude_ids)
    if current.subject_id is not None:
        exclude.add(current.subject_id)
    draft = generator(settings, exclude)
    if draft is None:
        return None
    return replace(draft, protocol_key=current.protocol_key, slot_index=current.slot_index)


def eligible_key_results(
    key_results: Iterable,
    enabled_ids: Set[int],
    exclude_ids: Iterable = (),
    active_objective_ids: Optional[Set[int]] = None,
) -> List:
    """
    KR-y, które mogą trafić do losowania: włączone w konfiguracji, nie ukończone
    (postęp < 100), nie odłożone, nie wylosowane już w tym tygodniu.
    `active_objective_ids` (opcjonalnie) odcina KR-y celów zarchiwizowanych/nieaktywnych.
    """
    exclude = set(exclude_ids)
    result = []
    for kr in key_results:
        if kr.id not in enabled_ids or kr.id in exclude:
            continue
        if kr.is_completed or kr.punted:
            continue
        if active_objective_ids is not None and kr.objective_id not in active_objective_ids:
            continue
        result.append(kr)
    return result
