# apps/okrs/adapters/orm_repositories.py
import logging
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.okrs.adapters.rows import parse_key_result_row, parse_objective_row
from apps.okrs.domain.entities import PILLAR_ORDER, KeyResultEntity, ObjectiveEntity
from apps.okrs.models import KeyResult as KeyResultModel
from apps.okrs.models import Objective as ObjectiveModel
from apps.okrs.ports.repositories import IObjectiveRepository

logger = logging.getLogger(__name__)

KR_FIELDS = (
    'id', 'okr_id', 'description', 'kind', 'direction', 'current_value',
    'target_value', 'baseline_value', 'punted',
)


class DjangoObjectiveRepository(IObjectiveRepository):
    def kr_row(self, model: KeyResultModel) -> dict:
        return {name: getattr(model, name) for name in KR_FIELDS}

    def objective_row(self, model: ObjectiveModel) -> dict:
        """Model Django -> wiersz w kształcie widoku 'okrs_with_progress'."""
        return {
            'id': model.id,
            'pillar': model.pillar,
            'objective': model.objective,
            'quarter': model.quarter,
            'start_date': model.start_date,
            'end_date': model.end_date,
            'status': model.status,
            'archived': model.archived,
            # prefetch_related -> bez dodatkowych zapytań
            'key_results': [self.kr_row(kr) for kr in model.key_results.all()],
        }

    def to_entity(self, model: ObjectiveModel) -> ObjectiveEntity:
        return parse_objective_row(self.objective_row(model))

    def list_with_progress(self) -> List[ObjectiveEntity]:
        qs = ObjectiveModel.objects.filter(archived=False).exclude(
            status__in=[ObjectiveModel.StatusChoices.DRAFT, ObjectiveModel.StatusChoices.ARCHIVED]
        ).prefetch_related('key_results').order_by('created_at', 'id')

        result = []
        for model in qs:
            try:
                result.append(self.to_entity(model))
            except ValidationError as exc:
                # Zły wiersz nie wchodzi do modelu domenowego
                logger.warning("Skipping malformed objective %s: %s", model.id, exc.messages)

        order = {p: i for i, p in enumerate(PILLAR_ORDER)}
        return sorted(result, key=lambda o: order[o.pillar])

    def get_by_id(self, okr_id: int) -> Optional[ObjectiveEntity]:
        try:
            model = ObjectiveModel.objects.prefetch_related('key_results').get(id=okr_id)
        except ObjectiveModel.DoesNotExist:
            return None
        return self.to_entity(model)

    def get_key_result(self, kr_id: int) -> Optional[KeyResultEntity]:
        try:
            model = KeyResultModel.objects.get(id=kr_id)
        except KeyResultModel.DoesNotExist:
            return None
        return parse_key_result_row(self.kr_row(model))

    def update_key_result(self, kr_id: int, **fields) -> KeyResultEntity:
        try:
            model = KeyResultModel.objects.get(id=kr_id)
        except KeyResultModel.DoesNotExist:
            raise ValueError(f"Key result {kr_id} not found")

        punted = fields.pop('punted', None)
        if punted is True and not model.punted:
            model.punt()
        elif punted is False and model.punted:
            model.unpunt()

        for name, value in fields.items():
            setattr(model, name, value)
        model.full_clean(exclude=['okr'])
        model.save()
        return parse_key_result_row(self.kr_row(model))

    def update_objective(self, okr_id: int, **fields) -> ObjectiveEntity:
        try:
            model = ObjectiveModel.objects.get(id=okr_id)
        except ObjectiveModel.DoesNotExist:
            raise ValueError(f"Objective {okr_id} not found")

        for name, value in fields.items():
            setattr(model, name, value)
        model.full_clean()
        model.save()
        return self.get_by_id(okr_id)

    def save(self, okr: ObjectiveEntity) -> ObjectiveEntity:
        with transaction.atomic():
            model = ObjectiveModel.objects.create(
                pillar=okr.pillar.value,
                objective=okr.objective,
                quarter=okr.quarter,
                start_date=okr.start_date,
                end_date=okr.end_date,
                status=okr.status.value,
                archived=okr.archived,
            )
            KeyResultModel.objects.bulk_create([
                KeyResultModel(
                    okr=model,
                    description=kr.description,
                    kind=kr.kind.value,
                    direction=kr.direction.value,
                    current_value=kr.current_value,
                    target_value=kr.target_value,
                    baseline_value=kr.baseline_value,
                    punted=kr.punted,
                    position=position,
                )
                for position, kr in enumerate(okr.key_results)
            ])
        return self.get_by_id(model.id)

    def selectable_key_results(self) -> List[KeyResultEntity]:
        return self.parse_key_results(KeyResultModel.objects.filter(
            okr__archived=False,
            okr__status=ObjectiveModel.StatusChoices.ACTIVE,
        ))

    def parse_key_results(self, queryset) -> List[KeyResultEntity]:
        """Wiersze KR z querysetu; błędne są pomijane i logowane."""
        result = []
        for model in queryset:
            try:
                result.append(parse_key_result_row(self.kr_row(model)))
            except ValidationError as exc:
                logger.warning("Skipping malformed key result %s: %s", model.id, exc.messages)
        return result
