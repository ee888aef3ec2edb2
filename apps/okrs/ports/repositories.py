# apps/okrs/ports/repositories.py
from abc import ABC, abstractmethod
from typing import List, Optional
from apps.okrs.domain.entities import KeyResultEntity, ObjectiveEntity


class IObjectiveRepository(ABC):
    @abstractmethod
    def list_with_progress(self) -> List[ObjectiveEntity]:
        """Aktywne (nie szkice, nie zarchiwizowane) cele z przeliczonym postępem."""
        pass

    @abstractmethod
    def get_by_id(self, okr_id: int) -> Optional[ObjectiveEntity]:
        pass

    @abstractmethod
    def get_key_result(self, kr_id: int) -> Optional[KeyResultEntity]:
        pass

    @abstractmethod
    def update_key_result(self, kr_id: int, **fields) -> KeyResultEntity:
        pass

    @abstractmethod
    def update_objective(self, okr_id: int, **fields) -> ObjectiveEntity:
        pass

    @abstractmethod
    def save(self, okr: ObjectiveEntity) -> ObjectiveEntity:
        """Tworzy cel razem z KR-ami i zwraca encję z ID."""
        pass

    @abstractmethod
    def selectable_key_results(self) -> List[KeyResultEntity]:
        """KR-y celów aktywnych i niezarchiwizowanych (filtr ukończonych/odłożonych robi domena)."""
        pass
