from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from apps.core.forms import validated
from apps.core.http import json_errors, parse_json_body
from apps.core.notifications import default_bus
from .adapters.orm_repositories import DjangoObjectiveRepository
from .domain.services import OkrService
from .filters import KeyResultFilter
from .forms import KeyResultEditForm, KeyResultValueForm, ObjectiveEditForm, QuarterlySetupForm
from .models import KeyResult


def _service() -> OkrService:
    return OkrService(DjangoObjectiveRepository())


@login_required
@require_GET
def okr_list_view(request):
    """Cele kwartalne z postępem, w stałej kolejności filarów."""
    return JsonResponse({'okrs': [okr.to_view_model() for okr in _service().list_okrs()]})


@login_required
@require_GET
@json_errors
def okr_detail_view(request, pk):
    return JsonResponse(_service().get(pk).to_view_model())


@login_required
@require_GET
def key_result_list_view(request):
    qs = KeyResultFilter(request.GET, queryset=KeyResult.objects.select_related('okr')).qs
    key_results = DjangoObjectiveRepository().parse_key_results(qs)
    return JsonResponse({'key_results': [kr.to_view_model() for kr in key_results]})


@login_required
@require_POST
@json_errors
def okr_create_view(request):
    data = validated(QuarterlySetupForm(parse_json_body(request)))
    okr = _service().create_for_quarter(
        data['pillar'], data['objective'], data['key_results'],
        today=timezone.localdate(), draft=data['draft'],
    )
    default_bus.success(f"Utworzono cel: {okr.objective}")
    return JsonResponse(okr.to_view_model(), status=201)


@login_required
@require_POST
@json_errors
def okr_edit_view(request, pk):
    data = validated(ObjectiveEditForm(parse_json_body(request)))
    return JsonResponse(_service().update_objective(pk, data['objective']).to_view_model())


@login_required
@require_POST
@json_errors
def okr_archive_view(request, pk):
    okr = _service().archive(pk)
    default_bus.info(f"Zarchiwizowano: {okr.objective}")
    return JsonResponse(okr.to_view_model())


@login_required
@require_POST
@json_errors
def okr_commit_view(request, pk):
    return JsonResponse(_service().commit_draft(pk).to_view_model())


@login_required
@require_POST
@json_errors
def key_result_value_view(request, pk):
    data = validated(KeyResultValueForm(parse_json_body(request)))
    return JsonResponse(_service().update_kr_value(pk, data['value']).to_view_model())


@login_required
@require_POST
@json_errors
def key_result_edit_view(request, pk):
    data = validated(KeyResultEditForm(parse_json_body(request)))
    service = _service()
    kr = service.get_key_result(pk)
    if data['description']:
        kr = service.update_kr_description(pk, data['description'])
    if data['target_value'] is not None:
        kr = service.update_kr_target(pk, data['target_value'])
    return JsonResponse(kr.to_view_model())


@login_required
@require_POST
@json_errors
def key_result_punt_view(request, pk):
    kr = _service().toggle_punt(pk)
    default_bus.info("KR odłożony" if kr.punted else "KR przywrócony")
    return JsonResponse(kr.to_view_model())
