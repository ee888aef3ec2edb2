import json
import random
from datetime import datetime
from io import StringIO

import pytest
import pytz
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.db import DatabaseError
from django.urls import reverse

from apps.challenges.models import WeeklyChallenge, WeeklyChallengeSet
from apps.challenges.services import WeeklyChallengeService
from apps.core.notifications import ToastVariant, default_bus
from apps.habits.models import Habit
from apps.okrs.models import KeyResult, Objective
from apps.priorities.models import Priority

pytestmark = pytest.mark.django_db

# piątek, 42. tydzień ISO 2026
NOW = pytz.utc.localize(datetime(2026, 10, 16, 12, 0))


@pytest.fixture
def service():
    return WeeklyChallengeService(rng=random.Random(0), tz_name='America/Chicago')


@pytest.fixture
def content(service):
    habit = Habit.objects.create(name='Read', weekly_goal=5)
    priority = Priority.objects.create(pillar='Production', title='Launch site')
    okr = Objective.objects.create(pillar='Power', objective='Get strong', quarter='2026-Q4')
    kr = KeyResult.objects.create(okr=okr, description='Squat 100 kg', current_value=50, target_value=100)
    done = KeyResult.objects.create(okr=okr, description='Deadlift', current_value=120, target_value=100)
    punted = KeyResult.objects.create(okr=okr, description='Bench', current_value=10, target_value=100, punted=True)

    service.update_protocol('habits_slipping', config={'enabled_habit_ids': [habit.id]})
    service.update_protocol('priorities_progress', config={'enabled_pillars': ['Production']})
    service.update_protocol('okrs_progress', config={'enabled_kr_ids': [kr.id, done.id, punted.id]})
    return {'habit': habit, 'priority': priority, 'kr': kr, 'done': done, 'punted': punted}


class TestWeek:
    def test_iso_week_in_challenge_time_zone(self, service):
        week = service.current_week(NOW)
        assert (week.year, week.week_number) == (2026, 42)
        assert week.week_start_date.isoformat() == '2026-10-12'

    def test_sunday_evening_in_chicago_is_still_previous_week(self, service):
        # poniedziałek 03:00 UTC = niedziela 22:00 w Chicago
        monday_utc = pytz.utc.localize(datetime(2026, 10, 19, 3, 0))
        assert service.current_week(monday_utc).week_number == 42
        assert WeeklyChallengeService(tz_name='UTC').current_week(monday_utc).week_number == 43


class TestGeneration:
    def test_guaranteed_diversity(self, service, content):
        data = service.get_or_create_weekly_challenges(NOW)

        assert data['week']['week_number'] == 42
        assert data['config'] == {'total_challenges': 3, 'randomization_strategy': 'guaranteed_diversity'}
        challenges = data['challenges']
        assert [c['slot_index'] for c in challenges] == [0, 1, 2]
        assert [c['protocol_key'] for c in challenges] == ['habits_slipping', 'priorities_progress', 'okrs_progress']
        assert challenges[0]['story_type'] == 'slipping_habit'
        assert challenges[0]['story_data']['habit_id'] == content['habit'].id
        assert challenges[1]['story_data']['priority_id'] == content['priority'].id
        assert challenges[2]['story_data']['kr_id'] == content['kr'].id
        assert challenges[2]['action_text'] == 'Make progress on Squat 100 kg KR'

    def test_is_idempotent_per_week(self, service, content):
        first = service.get_or_create_weekly_challenges(NOW)
        second = service.get_or_create_weekly_challenges(NOW)

        assert [c['id'] for c in first['challenges']] == [c['id'] for c in second['challenges']]
        assert WeeklyChallengeSet.objects.count() == 1
        assert WeeklyChallenge.objects.count() == 3

    def test_completed_and_punted_key_results_never_selected(self, service, content):
        service.update_protocol('okrs_progress', config={'enabled_kr_ids': [content['done'].id, content['punted'].id]})
        service.update_protocol('habits_slipping', is_enabled=False)
        service.update_protocol('priorities_progress', is_enabled=False)

        challenges = service.get_or_create_weekly_challenges(NOW)['challenges']

        assert {c['protocol_key'] for c in challenges} == {'placeholder'}

    def test_nothing_configured_gives_placeholders(self, service):
        challenges = service.get_or_create_weekly_challenges(NOW)['challenges']
        assert len(challenges) == 3
        assert {c['story_type'] for c in challenges} == {'placeholder'}

    def test_slot_by_slot_fills_every_slot(self, service, content):
        service.update_randomization_strategy('slot_by_slot')
        service.update_config('total_challenges', 4)

        data = service.get_or_create_weekly_challenges(NOW)

        assert data['config']['randomization_strategy'] == 'slot_by_slot'
        assert [c['slot_index'] for c in data['challenges']] == [0, 1, 2, 3]

    def test_regenerate_replaces_the_set(self, service, content):
        first = service.get_or_create_weekly_challenges(NOW)
        second = service.regenerate(NOW)

        assert not {c['id'] for c in first['challenges']} & {c['id'] for c in second['challenges']}
        assert WeeklyChallengeSet.objects.count() == 1


class TestChallengeActions:
    def test_complete_uncomplete_toggle(self, service, content):
        challenge_id = service.get_or_create_weekly_challenges(NOW)['challenges'][0]['id']

        completed = service.complete(challenge_id)
        assert completed['completed'] is True
        assert completed['completed_at'] is not None

        assert service.uncomplete(challenge_id)['completed_at'] is None
        assert service.toggle(challenge_id)['completed'] is True

    def test_missing_challenge(self, service):
        with pytest.raises(ValueError):
            service.complete(999)

    def test_reroll_changes_only_content(self, service, content):
        challenge = service.get_or_create_weekly_challenges(NOW)['challenges'][1]
        other = Priority.objects.create(pillar='Production', title='Write docs')

        rerolled = service.reroll(challenge['id'], NOW)

        assert rerolled['slot_index'] == challenge['slot_index']
        assert rerolled['protocol_key'] == 'priorities_progress'
        assert rerolled['story_data']['priority_id'] != challenge['story_data']['priority_id']
        assert rerolled['story_data']['priority_id'] == other.id

    def test_reroll_without_alternatives(self, service, content):
        challenge = service.get_or_create_weekly_challenges(NOW)['challenges'][0]
        with pytest.raises(ValidationError):
            service.reroll(challenge['id'], NOW)

    def test_placeholder_cannot_be_rerolled(self, service):
        challenge = service.get_or_create_weekly_challenges(NOW)['challenges'][0]
        with pytest.raises(ValidationError):
            service.reroll(challenge['id'], NOW)


class TestSettings:
    def test_protocols_with_defaults(self, service):
        protocols = service.fetch_protocols()
        assert [(p['protocol_key'], p['max_per_week']) for p in protocols] == [
            ('habits_slipping', 2), ('priorities_progress', 1), ('okrs_progress', 1), ('placeholder', 3),
        ]

    def test_update_protocol_merges_config(self, service):
        service.update_protocol('priorities_progress', config={'enabled_pillars': ['Power']})
        updated = service.update_protocol('priorities_progress', max_per_week=2, config={'note': 'x'})

        assert updated['max_per_week'] == 2
        assert updated['config'] == {'enabled_pillars': ['Power'], 'note': 'x'}
        assert updated['is_enabled'] is True

    @pytest.mark.parametrize('key, kwargs', [
        ('unknown', {}),
        ('placeholder', {'max_per_week': -1}),
        ('placeholder', {'config': ['not', 'a', 'dict']}),
    ])
    def test_update_protocol_validation(self, service, key, kwargs):
        with pytest.raises(ValidationError):
            service.update_protocol(key, **kwargs)

    @pytest.mark.parametrize('key, value', [
        ('total_challenges', 0),
        ('total_challenges', '3'),
        ('total_challenges', True),
        ('randomization_strategy', 'chaos'),
        ('colour', 'blue'),
    ])
    def test_update_config_validation(self, service, key, value):
        with pytest.raises(ValidationError):
            service.update_config(key, value)

    def test_prune_enabled_key_results(self, service, content):
        removed = service.prune_enabled_key_results()

        assert removed == sorted([content['done'].id, content['punted'].id])
        okrs = [p for p in service.fetch_protocols() if p['protocol_key'] == 'okrs_progress'][0]
        assert okrs['config']['enabled_kr_ids'] == [content['kr'].id]
        assert service.prune_enabled_key_results() == []


class TestViews:
    def test_weekly_challenges(self, auth_client, content):
        response = auth_client.get(reverse('weekly_challenges'))
        assert response.status_code == 200
        assert len(response.json()['challenges']) == 3

    def test_toggle(self, auth_client, content):
        challenge_id = auth_client.get(reverse('weekly_challenges')).json()['challenges'][0]['id']
        response = auth_client.post(reverse('challenge_toggle', args=[challenge_id]))
        assert response.json()['completed'] is True

    def test_toggle_missing(self, auth_client):
        assert auth_client.post(reverse('challenge_toggle', args=[999])).status_code == 404

    def test_protocol_update(self, auth_client):
        response = auth_client.post(
            reverse('challenge_protocol_update', args=['okrs_progress']),
            json.dumps({'is_enabled': False}),
            content_type='application/json',
        )
        assert response.status_code == 200
        assert response.json()['is_enabled'] is False
        assert response.json()['max_per_week'] == 1

    def test_config(self, auth_client):
        response = auth_client.post(
            reverse('challenge_config'),
            json.dumps({'key': 'total_challenges', 'value': 5}),
            content_type='application/json',
        )
        assert response.json()['total_challenges'] == 5
        assert auth_client.get(reverse('challenge_config')).json()['total_challenges'] == 5

    def test_strategy(self, auth_client):
        response = auth_client.post(
            reverse('challenge_strategy'), json.dumps({'strategy': 'nope'}), content_type='application/json'
        )
        assert response.status_code == 400

    def test_reroll_placeholder(self, auth_client):
        challenge_id = auth_client.get(reverse('weekly_challenges')).json()['challenges'][0]['id']
        assert auth_client.post(reverse('challenge_reroll', args=[challenge_id])).status_code == 400

    @pytest.mark.parametrize('method, url', [
        ('complete', 'challenge_complete'),
        ('regenerate', 'challenges_regenerate'),
        ('prune_enabled_key_results', 'challenge_protocols_prune'),
    ])
    def test_store_failure_returns_503_and_notifies(self, auth_client, monkeypatch, method, url):
        challenge_id = auth_client.get(reverse('weekly_challenges')).json()['challenges'][0]['id']

        def fail(*args, **kwargs):
            raise DatabaseError("connection refused")

        monkeypatch.setattr(WeeklyChallengeService, method, fail)
        received = []
        unsubscribe = default_bus.subscribe(received.append)
        try:
            args = [challenge_id] if method == 'complete' else []
            response = auth_client.post(reverse(url, args=args))
        finally:
            unsubscribe()

        assert response.status_code == 503
        assert response.json() == {'error': 'connection refused'}
        assert [t.variant for t in received] == [ToastVariant.ERROR]


def test_management_command(content):
    out = StringIO()
    call_command('generate_weekly_challenges', '--seed', '1', stdout=out)

    assert WeeklyChallenge.objects.count() == 3
    assert 'Squat 100 kg' in out.getvalue()
