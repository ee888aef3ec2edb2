from django.urls import path
from . import views

urlpatterns = [
    path('', views.weekly_challenges_view, name='weekly_challenges'),
    path('regenerate/', views.regenerate_view, name='challenges_regenerate'),
    path('<int:pk>/toggle/', views.challenge_toggle_view, name='challenge_toggle'),
    path('<int:pk>/complete/', views.challenge_complete_view, name='challenge_complete'),
    path('<int:pk>/uncomplete/', views.challenge_uncomplete_view, name='challenge_uncomplete'),
    path('<int:pk>/reroll/', views.challenge_reroll_view, name='challenge_reroll'),
    path('protocols/', views.protocol_list_view, name='challenge_protocols'),
    path('protocols/prune/', views.prune_key_results_view, name='challenge_protocols_prune'),
    path('protocols/<str:key>/', views.protocol_update_view, name='challenge_protocol_update'),
    path('config/', views.config_view, name='challenge_config'),
    path('config/strategy/', views.strategy_update_view, name='challenge_strategy'),
]
