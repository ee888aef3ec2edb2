import logging

from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from apps.core.cache import ReadThroughCache
from apps.core.forms import validated
from apps.core.http import json_errors, parse_json_body
from apps.core.notifications import default_bus
from apps.core.optimistic import OptimisticUpdate
from .filters import HabitEntryFilter
from .forms import EntryDateForm, ReorderForm
from .models import HabitEntry
from .services import HabitService

logger = logging.getLogger(__name__)

HABITS_CACHE_KEY = 'habits-list-cache'


def habits_cache(service: HabitService) -> ReadThroughCache:
    return ReadThroughCache(HABITS_CACHE_KEY, lambda: [h.to_view_model() for h in service.list_habits()])


@login_required
@require_GET
def habit_list_view(request):
    """Lista nawyków z seriami. ?refresh=1 wymusza odświeżenie cache."""
    service = HabitService()

    if request.GET.get('rolling'):
        # Średnie kroczące zawsze świeże (osobne zapytania dla każdego nawyku)
        habits = [h.to_view_model() for h in service.list_habits(with_rolling=True)]
    else:
        cache = habits_cache(service)
        habits = cache.revalidate() if request.GET.get('refresh') else cache.get()

    return JsonResponse({'habits': habits})


@login_required
@require_GET
def habit_entries_view(request):
    """Wpisy przefiltrowane po nawyku / roku / miesiącu."""
    entries = HabitEntryFilter(request.GET, queryset=HabitEntry.objects.all()).qs
    return JsonResponse({'entries': [
        {'habit_id': e.habit_id, 'date': e.date.isoformat(), 'is_done': e.is_done}
        for e in entries.order_by('habit_id', 'date')
    ]})


@login_required
@require_POST
@json_errors
def habit_toggle_view(request, pk):
    data = validated(EntryDateForm(parse_json_body(request)))
    day = data['date'] or timezone.localdate()

    service = HabitService()
    state = {'is_done': HabitEntry.objects.filter(habit_id=pk, date=day, is_done=True).exists()}
    new_value = not state['is_done']

    tx = OptimisticUpdate(
        read_current=lambda: state['is_done'],
        apply_local=lambda value: state.update(is_done=value),
        refetch=lambda: state.update(
            is_done=HabitEntry.objects.filter(habit_id=pk, date=day, is_done=True).exists()
        ),
        error_message="Nie udało się zaktualizować nawyku",
    )
    tx.run(new_value, lambda: service.set_entry(pk, day, new_value))

    if tx.rolled_back:
        if isinstance(tx.error, ValidationError):
            status = 400
        elif isinstance(tx.error, DatabaseError):
            status = 503
        else:
            status = 404
        return JsonResponse({'error': str(tx.error), 'date': day.isoformat(), 'is_done': state['is_done']}, status=status)

    habits_cache(service).invalidate()
    return JsonResponse({'habit_id': pk, 'date': day.isoformat(), 'is_done': state['is_done']})


@login_required
@require_GET
def habit_rolling_view(request, pk):
    try:
        window = int(request.GET.get('window', 30))
    except ValueError:
        return JsonResponse({'error': 'window must be an integer'}, status=400)
    if window <= 0:
        return JsonResponse({'error': 'window must be positive'}, status=400)

    stats = HabitService().calculate_rolling_stats(pk, window)
    return JsonResponse({
        'habit_id': pk,
        'window_days': window,
        'weekly_average': stats.weekly_average,
        'monthly_average': stats.monthly_average,
    })


@login_required
@require_POST
@json_errors
def habit_reorder_view(request):
    data = validated(ReorderForm(parse_json_body(request)))
    service = HabitService()
    service.reorder(data['ids'])
    habits_cache(service).invalidate()
    default_bus.success("Kolejność nawyków zapisana")
    return JsonResponse({'ids': data['ids']})
