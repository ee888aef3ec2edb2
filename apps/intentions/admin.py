from django.contrib import admin
from .models import DailyIntention


@admin.register(DailyIntention)
class DailyIntentionAdmin(admin.ModelAdmin):
    list_display = ('date', 'pillar', 'text', 'locked_at')
    list_filter = ('pillar',)
    date_hierarchy = 'date'
