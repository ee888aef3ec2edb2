from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from apps.core.forms import validated
from apps.core.http import json_errors, parse_json_body
from apps.core.notifications import default_bus
from .forms import ConfigUpdateForm, ProtocolUpdateForm, StrategyForm
from .services import WeeklyChallengeService


@login_required
@require_GET
@json_errors
def weekly_challenges_view(request):
    """Wyzwania bieżącego tygodnia; pierwsze wywołanie w tygodniu je losuje."""
    return JsonResponse(WeeklyChallengeService().get_or_create_weekly_challenges())


@login_required
@require_POST
@json_errors
def regenerate_view(request):
    data = WeeklyChallengeService().regenerate()
    default_bus.info("Wyzwania wylosowane ponownie")
    return JsonResponse(data)


@login_required
@require_POST
@json_errors
def challenge_toggle_view(request, pk):
    return JsonResponse(WeeklyChallengeService().toggle(pk))


@login_required
@require_POST
@json_errors
def challenge_complete_view(request, pk):
    return JsonResponse(WeeklyChallengeService().complete(pk))


@login_required
@require_POST
@json_errors
def challenge_uncomplete_view(request, pk):
    return JsonResponse(WeeklyChallengeService().uncomplete(pk))


@login_required
@require_POST
@json_errors
def challenge_reroll_view(request, pk):
    challenge = WeeklyChallengeService().reroll(pk)
    default_bus.success("Wyzwanie wylosowane ponownie")
    return JsonResponse(challenge)


@login_required
@require_GET
def protocol_list_view(request):
    return JsonResponse({'protocols': WeeklyChallengeService().fetch_protocols()})


@login_required
@require_POST
@json_errors
def protocol_update_view(request, key):
    data = validated(ProtocolUpdateForm(parse_json_body(request)))
    protocol = WeeklyChallengeService().update_protocol(
        key,
        is_enabled=data['is_enabled'],
        max_per_week=data['max_per_week'],
        config=data['config'],
    )
    return JsonResponse(protocol)


@login_required
@require_POST
@json_errors
def prune_key_results_view(request):
    removed = WeeklyChallengeService().prune_enabled_key_results()
    return JsonResponse({'removed': removed})


@login_required
@require_http_methods(['GET', 'POST'])
@json_errors
def config_view(request):
    service = WeeklyChallengeService()
    if request.method == 'GET':
        return JsonResponse(service.fetch_config())
    data = validated(ConfigUpdateForm(parse_json_body(request)))
    return JsonResponse(service.update_config(data['key'], data['value']))


@login_required
@require_POST
@json_errors
def strategy_update_view(request):
    data = validated(StrategyForm(parse_json_body(request)))
    return JsonResponse(WeeklyChallengeService().update_randomization_strategy(data['strategy']))
