import django_filters
from .models import KeyResult, Objective


class KeyResultFilter(django_filters.FilterSet):
    pillar = django_filters.ChoiceFilter(field_name='okr__pillar', choices=Objective.PillarChoices.choices)
    punted = django_filters.BooleanFilter()
    kind = django_filters.ChoiceFilter(choices=KeyResult.KindChoices.choices)

    class Meta:
        model = KeyResult
        fields = ['okr', 'punted', 'kind']
