from datetime import date, timedelta

import pytest
from django.core.exceptions import ValidationError
from django.urls import reverse
from django.utils import timezone

from apps.intentions.models import DailyIntention
from apps.intentions.services import IntentionService

pytestmark = pytest.mark.django_db

TODAY = date(2026, 10, 16)
ALL = {'Power': ' Gym ', 'Passion': 'Guitar', 'Purpose': 'Write', 'Production': 'Ship'}


def test_current_before_lock_in():
    data = IntentionService().current(TODAY)
    assert data['locked'] is False
    assert [i['pillar'] for i in data['intentions']] == ['Power', 'Passion', 'Purpose', 'Production']


def test_lock_in_trims_and_locks():
    data = IntentionService().lock_in(ALL, today=TODAY)
    assert data['locked'] is True
    assert data['intentions'][0] == {'pillar': 'Power', 'intention': 'Gym'}


def test_lock_in_accepts_list_payload():
    entries = [{'pillar': p, 'intention': t} for p, t in ALL.items()]
    assert IntentionService().lock_in(entries, today=TODAY)['locked']


def test_every_pillar_required():
    with pytest.raises(ValidationError):
        IntentionService().lock_in({**ALL, 'Purpose': '  '}, today=TODAY)
    assert not DailyIntention.objects.exists()


def test_unknown_pillar():
    with pytest.raises(ValidationError):
        IntentionService().lock_in({**ALL, 'Leisure': 'Nap'}, today=TODAY)


def test_cannot_lock_twice():
    service = IntentionService()
    service.lock_in(ALL, today=TODAY)
    with pytest.raises(ValidationError):
        service.lock_in(ALL, today=TODAY)


def test_stats_streak():
    service = IntentionService()
    for offset in (3, 1, 0):
        service.lock_in(ALL, today=TODAY - timedelta(days=offset))

    assert service.stats(TODAY) == {'current_streak': 2, 'longest_streak': 2}


def test_views(auth_client):
    response = auth_client.post(
        reverse('intentions_lock'), {'intentions': ALL}, content_type='application/json'
    )
    assert response.status_code == 200
    assert response.json()['date'] == timezone.localdate().isoformat()

    assert auth_client.get(reverse('intentions_stats')).json()['current_streak'] == 1

    response = auth_client.post(reverse('intentions_lock'), {}, content_type='application/json')
    assert response.status_code == 400
