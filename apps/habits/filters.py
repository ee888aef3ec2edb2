import django_filters
from .models import Habit, HabitEntry


class HabitEntryFilter(django_filters.FilterSet):
    habit = django_filters.ModelChoiceFilter(queryset=Habit.objects.all())
    year = django_filters.NumberFilter(field_name='date', lookup_expr='year')
    month = django_filters.NumberFilter(field_name='date', lookup_expr='month')
    is_done = django_filters.BooleanFilter()

    class Meta:
        model = HabitEntry
        fields = ['habit', 'is_done']
