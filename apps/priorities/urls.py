from django.urls import path
from . import views

urlpatterns = [
    path('', views.priority_overview_view, name='priority_overview'),
    path('committed/', views.committed_milestones_view, name='committed_milestones'),
    path('<int:pk>/commit/', views.priority_commit_view, name='priority_commit'),
    path('<int:pk>/complete/', views.priority_complete_view, name='priority_complete'),
    path('milestones/<int:pk>/commit/', views.milestone_commit_view, name='milestone_commit'),
    path('milestones/<int:pk>/complete/', views.milestone_complete_view, name='milestone_complete'),
]
