from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Set


class ProtocolKey(str, Enum):
    HABITS_SLIPPING = 'habits_slipping'
    PRIORITIES_PROGRESS = 'priorities_progress'
    OKRS_PROGRESS = 'okrs_progress'
    PLACEHOLDER = 'placeholder'


# Kolejność wypełniania przy "guaranteed_diversity"; placeholder zawsze na końcu
PROTOCOL_PRIORITY = [
    ProtocolKey.HABITS_SLIPPING,
    ProtocolKey.PRIORITIES_PROGRESS,
    ProtocolKey.OKRS_PROGRESS,
    ProtocolKey.PLACEHOLDER,
]

REROLLABLE = {ProtocolKey.HABITS_SLIPPING, ProtocolKey.PRIORITIES_PROGRESS, ProtocolKey.OKRS_PROGRESS}

DEFAULT_CAPS = {
    ProtocolKey.HABITS_SLIPPING: 2,
    ProtocolKey.PRIORITIES_PROGRESS: 1,
    ProtocolKey.OKRS_PROGRESS: 1,
    ProtocolKey.PLACEHOLDER: 3,
}

DEFAULT_TOTAL_CHALLENGES = 3

# Klucz w story_data identyfikujący "temat" wyzwania (do wykluczeń w tygodniu)
SUBJECT_KEYS = {
    ProtocolKey.HABITS_SLIPPING: 'habit_id',
    ProtocolKey.PRIORITIES_PROGRESS: 'priority_id',
    ProtocolKey.OKRS_PROGRESS: 'kr_id',
    ProtocolKey.PLACEHOLDER: 'prompt_index',
}


class RandomizationStrategy(str, Enum):
    GUARANTEED_DIVERSITY = 'guaranteed_diversity'
    SLOT_BY_SLOT = 'slot_by_slot'


@dataclass
class ProtocolSettings:
    key: ProtocolKey
    is_enabled: bool = True
    max_per_week: int = 1
    config: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def default(cls, key: ProtocolKey) -> 'ProtocolSettings':
        return cls(key=key, max_per_week=DEFAULT_CAPS[key])

    def id_set(self, name: str) -> Set[int]:
        """Identyfikatory z listy w konfiguracji; śmieci są pomijane."""
        result = set()
        for raw in self.config.get(name) or []:
            try:
                result.add(int(raw))
            except (TypeError, ValueError):
                continue
        return result

    def str_list(self, name: str) -> list:
        return [str(v) for v in self.config.get(name) or []]

    def to_view_model(self) -> dict:
        return {
            'protocol_key': self.key.value,
            'is_enabled': self.is_enabled,
            'max_per_week': self.max_per_week,
            'config': self.config,
        }


@dataclass(frozen=True)
class ChallengeDraft:
    protocol_key: ProtocolKey
    action_text: str
    story_type: str
    story_data: Dict[str, Any] = field(default_factory=dict)
    slot_index: Optional[int] = None
    title: str = ""
    description: str = ""

    @property
    def subject_id(self):
        return self.story_data.get(SUBJECT_KEYS[self.protocol_key])


@dataclass
class WeekInfo:
    year: int
    week_number: int
    week_start_date: date
    generated_at: Optional[datetime] = None

    def to_view_model(self) -> dict:
        return {
            'year': self.year,
            'week_number': self.week_number,
            'week_start_date': self.week_start_date.isoformat(),
            'generated_at': self.generated_at.isoformat() if self.generated_at else None,
        }
