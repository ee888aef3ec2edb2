from django.urls import path
from . import views

urlpatterns = [
    path('', views.okr_list_view, name='okr_list'),
    path('create/', views.okr_create_view, name='okr_create'),
    path('key-results/', views.key_result_list_view, name='key_result_list'),
    path('<int:pk>/', views.okr_detail_view, name='okr_detail'),
    path('<int:pk>/edit/', views.okr_edit_view, name='okr_edit'),
    path('<int:pk>/archive/', views.okr_archive_view, name='okr_archive'),
    path('<int:pk>/commit/', views.okr_commit_view, name='okr_commit'),
    path('key-results/<int:pk>/value/', views.key_result_value_view, name='key_result_value'),
    path('key-results/<int:pk>/edit/', views.key_result_edit_view, name='key_result_edit'),
    path('key-results/<int:pk>/punt/', views.key_result_punt_view, name='key_result_punt'),
]
