from django.urls import path
from . import views

urlpatterns = [
    path('', views.intentions_view, name='intentions'),
    path('lock/', views.intentions_lock_view, name='intentions_lock'),
    path('stats/', views.intentions_stats_view, name='intentions_stats'),
]
