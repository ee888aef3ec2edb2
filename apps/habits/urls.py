from django.urls import path
from . import views

urlpatterns = [
    path('', views.habit_list_view, name='habit_list'),
    path('entries/', views.habit_entries_view, name='habit_entries'),
    path('reorder/', views.habit_reorder_view, name='habit_reorder'),
    path('<int:pk>/toggle/', views.habit_toggle_view, name='habit_toggle'),
    path('<int:pk>/rolling/', views.habit_rolling_view, name='habit_rolling'),
]
