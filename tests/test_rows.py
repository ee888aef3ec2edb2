import pytest
from django.core.exceptions import ValidationError

from apps.okrs.adapters.rows import parse_key_result_row, parse_objective_row
from apps.okrs.domain.entities import Direction, KeyResultKind, ObjectiveStatus, Pillar


def test_key_result_row_is_normalized():
    kr = parse_key_result_row({
        'id': '7', 'description': ' Run 100 km ', 'type': 'numeric',
        'current_value': '25', 'target_value': 100, 'okr_id': 3,
    })
    assert kr.id == 7
    assert kr.description == 'Run 100 km'
    assert kr.kind == KeyResultKind.NUMERIC
    assert kr.direction == Direction.UP
    assert kr.progress == 25
    assert kr.objective_id == 3


def test_progress_is_recomputed_from_values():
    kr = parse_key_result_row({'description': 'x', 'kind': 'boolean', 'current_value': 1})
    assert kr.progress == 100
    assert kr.is_completed


@pytest.mark.parametrize('row', [
    {'kind': 'numeric'},
    {'description': 'x', 'kind': 'weird'},
    {'description': 'x', 'current_value': 'lots'},
    {'description': 'x', 'id': 'abc'},
    'not a row',
])
def test_malformed_key_result_rows_are_rejected(row):
    with pytest.raises(ValidationError):
        parse_key_result_row(row)


@pytest.mark.parametrize('alias', ['key_results', 'keyResults', 'krs'])
def test_objective_row_key_result_aliases(alias):
    okr = parse_objective_row({
        'id': 1, 'pillar': 'Power', 'objective': 'Get strong',
        alias: [{'description': 'a', 'progress': 1}, {'description': 'b', 'progress': 0}],
    })
    assert okr.pillar == Pillar.POWER
    assert [kr.description for kr in okr.key_results] == ['a', 'b']
    assert okr.progress == 50
    assert okr.status == ObjectiveStatus.ACTIVE


def test_objective_row_with_json_string_key_results():
    okr = parse_objective_row({
        'pillar': 'Purpose', 'title': 'Write',
        'krs': '[{"description": "chapter", "kind": "percent", "current_value": 40}]',
        'start_date': '2026-10-01',
    })
    assert okr.objective == 'Write'
    assert okr.key_results[0].progress == 40
    assert okr.start_date.isoformat() == '2026-10-01'


@pytest.mark.parametrize('row', [
    {'objective': 'No pillar'},
    {'pillar': 'Leisure', 'objective': 'x'},
    {'pillar': 'Power', 'objective': 'x', 'start_date': '16/10/2026'},
    {'pillar': 'Power', 'objective': 'x', 'krs': [{'kind': 'numeric'}]},
])
def test_malformed_objective_rows_are_rejected(row):
    with pytest.raises(ValidationError):
        parse_objective_row(row)
