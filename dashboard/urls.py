# dashboard/urls.py
from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path('admin/', admin.site.urls),
    # Moduły dashboardu:
    path('habits/', include('apps.habits.urls')),
    path('okrs/', include('apps.okrs.urls')),
    path('priorities/', include('apps.priorities.urls')),
    path('challenges/', include('apps.challenges.urls')),
    path('intentions/', include('apps.intentions.urls')),
    path('calendar/', include('apps.calendar_app.urls')),
]
