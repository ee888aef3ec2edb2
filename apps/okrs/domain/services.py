# apps/okrs/domain/services.py
import logging
from datetime import date
from typing import Iterable, List, Mapping

from django.core.exceptions import ValidationError

from apps.core.store import safe_read
from apps.okrs.adapters.rows import parse_key_result_row
from apps.okrs.domain.entities import (
    KeyResultEntity, KeyResultKind, ObjectiveEntity, ObjectiveStatus, Pillar,
)
from apps.okrs.domain.quarters import quarter_label, quarter_window
from apps.okrs.ports.repositories import IObjectiveRepository

logger = logging.getLogger(__name__)


class OkrService:
    def __init__(self, repository: IObjectiveRepository):
        self.repository = repository

    @safe_read(list)
    def list_okrs(self) -> List[ObjectiveEntity]:
        """Cele posortowane wg filarów: Power, Passion, Purpose, Production."""
        return self.repository.list_with_progress()

    def get(self, okr_id: int) -> ObjectiveEntity:
        okr = self.repository.get_by_id(okr_id)
        if not okr:
            raise ValueError(f"Objective {okr_id} not found")
        return okr

    def get_key_result(self, kr_id: int) -> KeyResultEntity:
        kr = self.repository.get_key_result(kr_id)
        if not kr:
            raise ValueError(f"Key result {kr_id} not found")
        return kr

    def update_kr_value(self, kr_id: int, value) -> KeyResultEntity:
        kr = self.get_key_result(kr_id)
        if kr.kind == KeyResultKind.BOOLEAN:
            value = 1.0 if value else 0.0
        return self.repository.update_key_result(kr_id, current_value=value)

    def update_kr_description(self, kr_id: int, description: str) -> KeyResultEntity:
        if not description or not description.strip():
            raise ValidationError("Key result description cannot be empty")
        return self.repository.update_key_result(kr_id, description=description.strip())

    def update_kr_target(self, kr_id: int, target_value: float) -> KeyResultEntity:
        return self.repository.update_key_result(kr_id, target_value=target_value)

    def update_objective(self, okr_id: int, objective: str) -> ObjectiveEntity:
        if not objective or not objective.strip():
            raise ValidationError("Objective cannot be empty")
        return self.repository.update_objective(okr_id, objective=objective.strip())

    def punt(self, kr_id: int) -> KeyResultEntity:
        """Odkłada KR: wypada z losowania wyzwań, postęp zostaje nietknięty."""
        kr = self.repository.update_key_result(kr_id, punted=True)
        logger.info("Punted key result %s (progress %s%%)", kr_id, kr.progress)
        return kr

    def unpunt(self, kr_id: int) -> KeyResultEntity:
        return self.repository.update_key_result(kr_id, punted=False)

    def toggle_punt(self, kr_id: int) -> KeyResultEntity:
        kr = self.get_key_result(kr_id)
        return self.unpunt(kr_id) if kr.punted else self.punt(kr_id)

    def archive(self, okr_id: int) -> ObjectiveEntity:
        """Miękkie usunięcie celu."""
        okr = self.repository.update_objective(
            okr_id, archived=True, status=ObjectiveStatus.ARCHIVED.value
        )
        logger.info("Archived objective %s", okr_id)
        return okr

    def create_for_quarter(
        self,
        pillar: str,
        objective: str,
        key_results: Iterable[Mapping],
        today: date,
        draft: bool = False,
    ) -> ObjectiveEntity:
        if not objective or not objective.strip():
            raise ValidationError("Objective cannot be empty")
        try:
            pillar = Pillar(pillar)
        except ValueError:
            raise ValidationError(f"Unknown pillar: {pillar!r}")

        krs = [parse_key_result_row(row) for row in key_results]
        if not krs:
            raise ValidationError("An objective needs at least one key result")

        start, end = quarter_window(today)
        okr = ObjectiveEntity(
            id=None,
            pillar=pillar,
            objective=objective.strip(),
            key_results=krs,
            quarter=quarter_label(today),
            start_date=start,
            end_date=end,
            status=ObjectiveStatus.DRAFT if draft else ObjectiveStatus.ACTIVE,
        )
        saved = self.repository.save(okr)
        logger.info("Created objective %s for %s (%s)", saved.id, saved.quarter, saved.status.value)
        return saved

    def commit_draft(self, okr_id: int) -> ObjectiveEntity:
        okr = self.get(okr_id)
        if okr.status != ObjectiveStatus.DRAFT:
            raise ValueError(f"Objective {okr_id} is not a draft")
        return self.repository.update_objective(okr_id, status=ObjectiveStatus.ACTIVE.value)
