from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from apps.core.forms import validated
from apps.core.http import json_errors, parse_json_body
from apps.core.notifications import default_bus
from .domain.days import year_bounds
from .forms import DateRangeForm, EventForm, GenerateForm, PatternForm
from .services import CalendarService


def _range(request):
    data = validated(DateRangeForm(request.GET))
    if data['year'] is not None:
        return year_bounds(data['year'])
    return data['start'], data['end']


@login_required
@require_http_methods(['GET', 'POST'])
@json_errors
def events_view(request):
    """GET: wydarzenia z zakresu (?start&end albo ?year). POST: nowe wydarzenie."""
    service = CalendarService()
    if request.method == 'GET':
        return JsonResponse({'events': service.events_in_range(*_range(request))})

    data = validated(EventForm(parse_json_body(request)))
    event = service.create_event(**data)
    default_bus.success("Wydarzenie dodane")
    return JsonResponse(event, status=201)


@login_required
@require_POST
@json_errors
def event_update_view(request, pk):
    body = parse_json_body(request)
    data = validated(EventForm(body))
    # Tylko pola obecne w żądaniu
    changes = {k: v for k, v in data.items() if k in body}
    event = CalendarService().update_event(pk, **changes)
    default_bus.success("Wydarzenie zaktualizowane")
    return JsonResponse(event)


@login_required
@require_POST
@json_errors
def event_delete_view(request, pk):
    CalendarService().delete_event(pk)
    default_bus.info("Wydarzenie usunięte")
    return JsonResponse({'deleted': pk})


@login_required
@require_GET
@json_errors
def days_view(request):
    return JsonResponse({'days': CalendarService().days(*_range(request))})


@login_required
@require_GET
def upcoming_view(request):
    return JsonResponse({'events': CalendarService().upcoming()})


@login_required
@require_http_methods(['GET', 'POST'])
@json_errors
def patterns_view(request):
    service = CalendarService()
    if request.method == 'GET':
        return JsonResponse({'patterns': service.list_patterns()})

    data = validated(PatternForm(parse_json_body(request)))
    if data['default_priority'] is None:
        data.pop('default_priority')
    pattern = service.create_pattern(**data)
    default_bus.success(f"Wzorzec dodany: {pattern['name']}")
    return JsonResponse(pattern, status=201)


@login_required
@require_POST
@json_errors
def pattern_deactivate_view(request, pk):
    return JsonResponse(CalendarService().deactivate_pattern(pk))


@login_required
@require_POST
@json_errors
def pattern_generate_view(request, pk):
    data = validated(GenerateForm(parse_json_body(request)))
    events = CalendarService().generate_from_pattern(pk, data['until'])
    default_bus.info(f"Utworzono wydarzeń: {len(events)}")
    return JsonResponse({'events': events})
