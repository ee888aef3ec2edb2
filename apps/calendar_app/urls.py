from django.urls import path
from . import views

urlpatterns = [
    path('events/', views.events_view, name='calendar_events'),
    path('events/<int:pk>/', views.event_update_view, name='calendar_event_update'),
    path('events/<int:pk>/delete/', views.event_delete_view, name='calendar_event_delete'),
    path('days/', views.days_view, name='calendar_days'),
    path('upcoming/', views.upcoming_view, name='calendar_upcoming'),
    path('patterns/', views.patterns_view, name='calendar_patterns'),
    path('patterns/<int:pk>/deactivate/', views.pattern_deactivate_view, name='calendar_pattern_deactivate'),
    path('patterns/<int:pk>/generate/', views.pattern_generate_view, name='calendar_pattern_generate'),
]
