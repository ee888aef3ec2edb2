import json
from datetime import date

import pytest
from django.core.exceptions import ValidationError
from django.urls import reverse

from apps.okrs.adapters.orm_repositories import DjangoObjectiveRepository
from apps.okrs.domain.entities import ObjectiveStatus, Pillar
from apps.okrs.domain.quarters import next_quarter_window, quarter_label, quarter_window
from apps.okrs.domain.services import OkrService
from apps.okrs.models import KeyResult, Objective

pytestmark = pytest.mark.django_db

TODAY = date(2026, 10, 16)


def make_okr(pillar='Power', objective='Get strong', status='active', archived=False, krs=None):
    okr = Objective.objects.create(pillar=pillar, objective=objective, status=status, archived=archived)
    for position, kr in enumerate(krs or [{'description': 'Squat 100 kg', 'current_value': 50, 'target_value': 100}]):
        KeyResult.objects.create(okr=okr, position=position, **kr)
    return okr


@pytest.fixture
def service():
    return OkrService(DjangoObjectiveRepository())


def test_quarter_helpers():
    assert quarter_label(TODAY) == '2026-Q4'
    assert quarter_window(TODAY) == (date(2026, 10, 1), date(2026, 12, 31))
    assert quarter_window(date(2026, 2, 28)) == (date(2026, 1, 1), date(2026, 3, 31))
    assert next_quarter_window(TODAY) == (date(2027, 1, 1), date(2027, 3, 31))


class TestOkrService:
    def test_list_sorted_by_pillar_without_drafts_and_archived(self, service):
        make_okr('Production', 'Ship')
        make_okr('Power', 'Lift')
        make_okr('Passion', 'Draft one', status='draft')
        make_okr('Purpose', 'Old', archived=True)

        okrs = service.list_okrs()

        assert [o.pillar for o in okrs] == [Pillar.POWER, Pillar.PRODUCTION]
        assert okrs[0].progress == 50

    def test_malformed_rows_are_skipped(self, service):
        make_okr('Power', 'Good')
        broken = make_okr('Passion', 'Broken')
        Objective.objects.filter(id=broken.id).update(pillar='Leisure')

        assert [o.objective for o in service.list_okrs()] == ['Good']

    def test_update_boolean_value_is_coerced(self, service):
        okr = make_okr(krs=[{'description': 'Sign up', 'kind': 'boolean'}])
        kr = okr.key_results.get()

        updated = service.update_kr_value(kr.id, True)

        assert updated.current_value == 1.0
        assert updated.progress == 100

    def test_update_numeric_value(self, service):
        kr = make_okr().key_results.get()
        assert service.update_kr_value(kr.id, 75.0).progress == 75

    def test_update_missing_key_result(self, service):
        with pytest.raises(ValueError):
            service.update_kr_value(999, 1.0)

    def test_empty_description_rejected(self, service):
        kr = make_okr().key_results.get()
        with pytest.raises(ValidationError):
            service.update_kr_description(kr.id, '   ')

    def test_punt_preserves_progress(self, service):
        kr = make_okr().key_results.get()

        punted = service.punt(kr.id)
        assert punted.punted
        assert punted.progress == 50
        assert KeyResult.objects.get(id=kr.id).punted_at is not None

        restored = service.toggle_punt(kr.id)
        assert not restored.punted
        assert KeyResult.objects.get(id=kr.id).punted_at is None

    def test_archive_is_soft_delete(self, service):
        okr = make_okr()
        archived = service.archive(okr.id)

        assert archived.archived
        assert archived.status == ObjectiveStatus.ARCHIVED
        assert Objective.objects.filter(id=okr.id).exists()
        assert service.list_okrs() == []

    def test_update_objective_runs_model_validation(self, service):
        okr = make_okr()

        with pytest.raises(ValidationError):
            service.update_objective(okr.id, 'x' * 301)
        assert Objective.objects.get(id=okr.id).objective == 'Get strong'

        assert service.update_objective(okr.id, '  Get stronger ').objective == 'Get stronger'

    def test_update_missing_objective(self, service):
        with pytest.raises(ValueError):
            service.update_objective(999, 'Anything')

    def test_create_for_quarter(self, service):
        okr = service.create_for_quarter(
            'Purpose', 'Write a book',
            [{'description': 'Chapters', 'current_value': 0, 'target_value': 12},
             {'description': 'Weight', 'direction': 'down', 'baseline_value': 90, 'current_value': 90, 'target_value': 80}],
            today=TODAY,
        )
        assert okr.quarter == '2026-Q4'
        assert okr.start_date == date(2026, 10, 1)
        assert okr.end_date == date(2026, 12, 31)
        assert [kr.description for kr in okr.key_results] == ['Chapters', 'Weight']
        assert okr.status == ObjectiveStatus.ACTIVE

    @pytest.mark.parametrize('pillar, objective, krs', [
        ('Leisure', 'x', [{'description': 'a'}]),
        ('Power', ' ', [{'description': 'a'}]),
        ('Power', 'x', []),
        ('Power', 'x', [{'kind': 'boolean'}]),
    ])
    def test_create_for_quarter_validation(self, service, pillar, objective, krs):
        with pytest.raises(ValidationError):
            service.create_for_quarter(pillar, objective, krs, today=TODAY)

    def test_draft_commit(self, service):
        draft = service.create_for_quarter('Power', 'Lift', [{'description': 'a'}], today=TODAY, draft=True)
        assert service.list_okrs() == []

        committed = service.commit_draft(draft.id)
        assert committed.status == ObjectiveStatus.ACTIVE
        with pytest.raises(ValueError):
            service.commit_draft(draft.id)

    def test_selectable_key_results_only_from_active_objectives(self):
        active = make_okr('Power', 'Active')
        make_okr('Passion', 'Archived', archived=True)
        make_okr('Purpose', 'Draft', status='draft')

        krs = DjangoObjectiveRepository().selectable_key_results()
        assert [kr.objective_id for kr in krs] == [active.id]


class TestOkrViews:
    def test_list(self, auth_client):
        make_okr()
        response = auth_client.get(reverse('okr_list'))
        assert response.status_code == 200
        assert response.json()['okrs'][0]['key_results'][0]['progress'] == 50

    def test_detail_not_found(self, auth_client):
        response = auth_client.get(reverse('okr_detail', args=[999]))
        assert response.status_code == 404
        assert 'error' in response.json()

    def test_update_value(self, auth_client):
        kr = make_okr().key_results.get()
        response = auth_client.post(
            reverse('key_result_value', args=[kr.id]), json.dumps({'value': 100}), content_type='application/json'
        )
        assert response.status_code == 200
        assert response.json()['completed'] is True

    def test_update_value_rejects_text(self, auth_client):
        kr = make_okr().key_results.get()
        response = auth_client.post(
            reverse('key_result_value', args=[kr.id]), json.dumps({'value': 'lots'}), content_type='application/json'
        )
        assert response.status_code == 400

    def test_create(self, auth_client):
        body = {'pillar': 'Passion', 'objective': 'Play guitar', 'key_results': [{'description': 'Learn 5 songs', 'target_value': 5}]}
        response = auth_client.post(reverse('okr_create'), json.dumps(body), content_type='application/json')
        assert response.status_code == 201
        assert response.json()['pillar'] == 'Passion'

    def test_punt_toggle(self, auth_client):
        kr = make_okr().key_results.get()
        response = auth_client.post(reverse('key_result_punt', args=[kr.id]))
        assert response.json()['punted'] is True

    def test_key_result_filter(self, auth_client):
        make_okr('Power', 'A')
        make_okr('Passion', 'B', krs=[{'description': 'Paint', 'kind': 'boolean'}])
        response = auth_client.get(reverse('key_result_list'), {'pillar': 'Passion'})
        assert [kr['description'] for kr in response.json()['key_results']] == ['Paint']

    def test_key_result_list_skips_malformed_rows(self, auth_client):
        okr = make_okr('Power', 'A')
        KeyResult.objects.create(okr=okr, description='   ', position=1)

        response = auth_client.get(reverse('key_result_list'))

        assert response.status_code == 200
        assert [kr['description'] for kr in response.json()['key_results']] == ['Squat 100 kg']
