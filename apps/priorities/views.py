from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from apps.core.http import json_errors
from .services import PriorityService


@login_required
@require_GET
def priority_overview_view(request):
    data = PriorityService().overview(refresh=bool(request.GET.get('refresh')))
    return JsonResponse({'priorities': data})


@login_required
@require_GET
def committed_milestones_view(request):
    data = PriorityService().committed_milestones(refresh=bool(request.GET.get('refresh')))
    return JsonResponse({'milestones': data})


@login_required
@require_POST
@json_errors
def priority_commit_view(request, pk):
    p = PriorityService().toggle_priority_commit(pk)
    return JsonResponse({'id': p.id, 'is_committed': p.is_committed})


@login_required
@require_POST
@json_errors
def priority_complete_view(request, pk):
    p = PriorityService().toggle_priority_complete(pk)
    return JsonResponse({'id': p.id, 'is_completed': p.is_completed})


@login_required
@require_POST
@json_errors
def milestone_commit_view(request, pk):
    m = PriorityService().toggle_milestone_commit(pk)
    return JsonResponse({'id': m.id, 'is_committed': m.is_committed})


@login_required
@require_POST
@json_errors
def milestone_complete_view(request, pk):
    m = PriorityService().toggle_milestone_complete(pk)
    return JsonResponse({'id': m.id, 'is_completed': m.is_completed})
