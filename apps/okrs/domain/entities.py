# apps/okrs/domain/entities.py
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class Pillar(str, Enum):
    POWER = 'Power'
    PASSION = 'Passion'
    PURPOSE = 'Purpose'
    PRODUCTION = 'Production'


# Stała kolejność wyświetlania filarów
PILLAR_ORDER = [Pillar.POWER, Pillar.PASSION, Pillar.PURPOSE, Pillar.PRODUCTION]


class KeyResultKind(str, Enum):
    BOOLEAN = 'boolean'
    PERCENT = 'percent'
    NUMERIC = 'numeric'


class Direction(str, Enum):
    UP = 'up'  # maksymalizacja: 0 -> target (i dalej)
    DOWN = 'down'  # minimalizacja: baseline -> target (np. waga)


class ObjectiveStatus(str, Enum):
    ACTIVE = 'active'
    DRAFT = 'draft'
    COMPLETED = 'completed'
    ARCHIVED = 'archived'


@dataclass
class KeyResultEntity:
    id: Optional[int]
    description: str
    kind: KeyResultKind = KeyResultKind.NUMERIC
    direction: Direction = Direction.UP
    current_value: float = 0.0
    target_value: float = 0.0
    baseline_value: Optional[float] = None
    # Postęp w procentach; może przekroczyć 100 (nadwyżka)
    progress: int = 0
    punted: bool = False
    objective_id: Optional[int] = None

    @property
    def is_completed(self) -> bool:
        return self.progress >= 100

    def to_view_model(self) -> dict:
        return {
            'id': self.id,
            'objective_id': self.objective_id,
            'description': self.description,
            'kind': self.kind.value,
            'direction': self.direction.value,
            'current_value': self.current_value,
            'target_value': self.target_value,
            'baseline_value': self.baseline_value,
            'progress': self.progress,
            'punted': self.punted,
            'completed': self.is_completed,
        }


@dataclass
class ObjectiveEntity:
    id: Optional[int]
    pillar: Pillar
    objective: str
    key_results: List[KeyResultEntity] = field(default_factory=list)
    progress: int = 0
    quarter: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: ObjectiveStatus = ObjectiveStatus.ACTIVE
    archived: bool = False

    @property
    def is_selectable(self) -> bool:
        """Czy KR-y tego celu mogą trafić do wyzwań tygodniowych."""
        return self.status == ObjectiveStatus.ACTIVE and not self.archived

    def to_view_model(self) -> dict:
        return {
            'id': self.id,
            'pillar': self.pillar.value,
            'objective': self.objective,
            'progress': self.progress,
            'quarter': self.quarter,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'status': self.status.value,
            'key_results': [kr.to_view_model() for kr in self.key_results],
        }
