# apps/okrs/adapters/rows.py
"""
Granica "sklep -> domena": luźno typowane wiersze (dict z ORM .values(),
JSON z agregacji, import) są walidowane i normalizowane tutaj, zanim
trafią do encji. Błędny wiersz -> ValidationError.
"""
from datetime import date
from typing import Any, Mapping, Optional

from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_date

from apps.core.store import ensure_list, to_number
from apps.okrs.domain.entities import (
    Direction, KeyResultEntity, KeyResultKind, ObjectiveEntity, ObjectiveStatus, Pillar,
)
from apps.okrs.domain.progress import normalize_kr_progress, normalize_progress, objective_progress

KEY_RESULT_ALIASES = ('key_results', 'keyResults', 'krs')


def _enum(enum_cls, value, field: str, default=None):
    if value is None or value == '':
        if default is None:
            raise ValidationError(f"{field} is required", code='required')
        return default
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"{field}: {value!r} is not one of {allowed}", code='invalid_choice')


def _optional_id(value, field: str) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field}: expected an integer id, got {value!r}", code='invalid')


def _date(value, field: str) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    parsed = parse_date(str(value))
    if parsed is None:
        raise ValidationError(f"{field}: expected YYYY-MM-DD, got {value!r}", code='invalid')
    return parsed


def parse_key_result_row(row: Mapping[str, Any]) -> KeyResultEntity:
    if not isinstance(row, Mapping):
        raise ValidationError(f"Key result row must be an object, got {type(row).__name__}", code='invalid')

    description = row.get('description')
    if not isinstance(description, str) or not description.strip():
        raise ValidationError("description is required", code='required')

    # Kolumna w bazie historycznie nazywała się "type"
    kind = _enum(KeyResultKind, row.get('kind', row.get('type')), 'kind', default=KeyResultKind.NUMERIC)
    direction = _enum(Direction, row.get('direction'), 'direction', default=Direction.UP)

    entity = KeyResultEntity(
        id=_optional_id(row.get('id'), 'id'),
        description=description.strip(),
        kind=kind,
        direction=direction,
        current_value=to_number(row.get('current_value'), 'current_value', default=0.0),
        target_value=to_number(row.get('target_value'), 'target_value', default=0.0),
        baseline_value=to_number(row.get('baseline_value'), 'baseline_value'),
        punted=bool(row.get('punted') or False),
        objective_id=_optional_id(row.get('okr_id', row.get('objective_id')), 'okr_id'),
    )

    # Postęp zawsze liczony od nowa przy odczycie
    entity.progress = normalize_kr_progress({
        'progress': row.get('progress'),
        'kind': entity.kind,
        'direction': entity.direction,
        'current_value': entity.current_value,
        'target_value': entity.target_value,
        'baseline_value': entity.baseline_value,
    })
    return entity


def parse_objective_row(row: Mapping[str, Any]) -> ObjectiveEntity:
    if not isinstance(row, Mapping):
        raise ValidationError(f"Objective row must be an object, got {type(row).__name__}", code='invalid')

    raw_krs = next((row[k] for k in KEY_RESULT_ALIASES if row.get(k) is not None), None)
    key_results = [parse_key_result_row(kr) for kr in ensure_list(raw_krs)]

    objective = row.get('objective') or row.get('title') or ''
    if not isinstance(objective, str):
        raise ValidationError("objective must be text", code='invalid')

    explicit = row.get('progress')
    progress = normalize_progress(explicit) if explicit is not None else objective_progress(key_results)

    return ObjectiveEntity(
        id=_optional_id(row.get('id'), 'id'),
        pillar=_enum(Pillar, row.get('pillar'), 'pillar'),
        objective=objective.strip(),
        key_results=key_results,
        progress=progress,
        quarter=row.get('quarter') or '',
        start_date=_date(row.get('start_date'), 'start_date'),
        end_date=_date(row.get('end_date'), 'end_date'),
        status=_enum(ObjectiveStatus, row.get('status'), 'status', default=ObjectiveStatus.ACTIVE),
        archived=bool(row.get('archived') or False),
    )
