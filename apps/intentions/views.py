from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from apps.core.http import json_errors, parse_json_body
from apps.core.notifications import default_bus
from .services import IntentionService


@login_required
@require_GET
def intentions_view(request):
    return JsonResponse(IntentionService().current())


@login_required
@require_POST
@json_errors
def intentions_lock_view(request):
    body = parse_json_body(request)
    entries = body.get('intentions')
    if entries is None:
        raise ValidationError("intentions: this field is required")
    data = IntentionService().lock_in(entries)
    default_bus.success("Intencje na dziś zatwierdzone")
    return JsonResponse(data)


@login_required
@require_GET
def intentions_stats_view(request):
    return JsonResponse(IntentionService().stats())
