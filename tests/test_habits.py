import json
from datetime import date, timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from apps.habits.models import Habit, HabitEntry
from apps.habits.services import HabitService

pytestmark = pytest.mark.django_db

TODAY = date(2026, 10, 16)


@pytest.fixture
def habit():
    return Habit.objects.create(name='Read', weekly_goal=5)


class TestHabitService:
    def test_entry_round_trip(self, habit):
        service = HabitService()
        service.set_entry(habit.id, TODAY, True, today=TODAY)

        entries = service.entries_for_year(habit.id, 2026)
        assert len(entries) == 1
        assert entries[0].date == TODAY
        assert entries[0].is_done is True

    def test_one_entry_per_day(self, habit):
        service = HabitService()
        service.set_entry(habit.id, TODAY, True, today=TODAY)
        service.set_entry(habit.id, TODAY, False, today=TODAY)
        assert HabitEntry.objects.filter(habit=habit).count() == 1
        assert service.entries_for_year(habit.id, 2026)[0].is_done is False

    def test_streak_fields_recomputed_from_history(self, habit):
        service = HabitService()
        for offset in (2, 1, 0):
            service.set_entry(habit.id, TODAY - timedelta(days=offset), True, today=TODAY)

        habit.refresh_from_db()
        assert habit.current_streak == 3
        assert habit.longest_streak == 3
        assert habit.last_completed_date == TODAY

        service.set_entry(habit.id, TODAY - timedelta(days=1), False, today=TODAY)
        habit.refresh_from_db()
        assert habit.current_streak == 1
        assert habit.longest_streak == 1

    def test_toggle_entry(self, habit):
        service = HabitService()
        assert service.toggle_entry(habit.id, TODAY, today=TODAY).is_done is True
        assert service.toggle_entry(habit.id, TODAY, today=TODAY).is_done is False

    def test_unknown_habit(self):
        with pytest.raises(ValueError):
            HabitService().set_entry(999, TODAY, True)

    def test_rolling_stats_for_many_habits(self, habit):
        other = Habit.objects.create(name='Run')
        for offset in range(7):
            HabitEntry.objects.create(habit=habit, date=TODAY - timedelta(days=offset))

        stats = HabitService().rolling_stats_for([habit.id, other.id], window_days=7, today=TODAY)

        assert stats[habit.id].weekly_average == 7.0
        assert stats[other.id].weekly_average == 0.0

    def test_list_habits_marks_slipping(self, habit):
        HabitEntry.objects.create(habit=habit, date=TODAY)
        habits = HabitService().list_habits(today=TODAY, with_rolling=True)

        assert [h.name for h in habits] == ['Read']
        assert habits[0].done_today
        assert habits[0].is_slipping
        assert habits[0].to_view_model()['current_streak'] == 1

    def test_inactive_habits_are_hidden(self, habit):
        Habit.objects.create(name='Old', is_active=False)
        assert [h.name for h in HabitService().list_habits(today=TODAY)] == ['Read']

    def test_reorder(self, habit):
        other = Habit.objects.create(name='Aaa', display_order=5)
        HabitService().reorder([habit.id, other.id])
        assert list(Habit.objects.values_list('name', flat=True)) == ['Read', 'Aaa']

    def test_reorder_unknown_id(self, habit):
        with pytest.raises(ValueError):
            HabitService().reorder([habit.id, 12345])


class TestHabitViews:
    def test_requires_login(self, client):
        response = client.get(reverse('habit_list'))
        assert response.status_code == 302

    def test_list(self, auth_client, habit):
        response = auth_client.get(reverse('habit_list'))
        assert response.status_code == 200
        assert response.json()['habits'][0]['name'] == 'Read'

    def test_list_is_cached_until_invalidated(self, auth_client, habit):
        auth_client.get(reverse('habit_list'))
        Habit.objects.create(name='Walk')

        cached = auth_client.get(reverse('habit_list')).json()['habits']
        fresh = auth_client.get(reverse('habit_list'), {'refresh': 1}).json()['habits']

        assert len(cached) == 1
        assert len(fresh) == 2

    def test_toggle(self, auth_client, habit):
        day = timezone.localdate()
        url = reverse('habit_toggle', args=[habit.id])

        response = auth_client.post(url, json.dumps({'date': day.isoformat()}), content_type='application/json')
        assert response.status_code == 200
        assert response.json() == {'habit_id': habit.id, 'date': day.isoformat(), 'is_done': True}
        assert HabitEntry.objects.get(habit=habit, date=day).is_done

        response = auth_client.post(url, json.dumps({'date': day.isoformat()}), content_type='application/json')
        assert response.json()['is_done'] is False

    def test_toggle_unknown_habit_rolls_back(self, auth_client):
        response = auth_client.post(reverse('habit_toggle', args=[999]), '{}', content_type='application/json')
        assert response.status_code == 404
        assert response.json()['is_done'] is False

    def test_toggle_bad_date(self, auth_client, habit):
        response = auth_client.post(
            reverse('habit_toggle', args=[habit.id]),
            json.dumps({'date': '16.10.2026'}),
            content_type='application/json',
        )
        assert response.status_code == 400

    def test_entries_filtered_by_year(self, auth_client, habit):
        HabitEntry.objects.create(habit=habit, date=date(2025, 12, 31))
        HabitEntry.objects.create(habit=habit, date=date(2026, 1, 1))

        response = auth_client.get(reverse('habit_entries'), {'habit': habit.id, 'year': 2026})
        assert [e['date'] for e in response.json()['entries']] == ['2026-01-01']

    def test_rolling(self, auth_client, habit):
        response = auth_client.get(reverse('habit_rolling', args=[habit.id]), {'window': 7})
        assert response.status_code == 200
        assert response.json()['weekly_average'] == 0.0

    @pytest.mark.parametrize('window', ['abc', '0'])
    def test_rolling_bad_window(self, auth_client, habit, window):
        response = auth_client.get(reverse('habit_rolling', args=[habit.id]), {'window': window})
        assert response.status_code == 400

    def test_reorder(self, auth_client, habit):
        other = Habit.objects.create(name='Aaa')
        response = auth_client.post(
            reverse('habit_reorder'), json.dumps({'ids': [other.id, habit.id]}), content_type='application/json'
        )
        assert response.status_code == 200
        assert Habit.objects.get(id=other.id).display_order == 0

    def test_reorder_rejects_duplicates(self, auth_client, habit):
        response = auth_client.post(
            reverse('habit_reorder'), json.dumps({'ids': [habit.id, habit.id]}), content_type='application/json'
        )
        assert response.status_code == 400
