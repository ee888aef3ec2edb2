from django.contrib import admin
from .models import CalendarEvent, CalendarPattern


@admin.register(CalendarEvent)
class CalendarEventAdmin(admin.ModelAdmin):
    list_display = ('title', 'category', 'start_date', 'end_date', 'all_day', 'is_pto', 'priority')
    list_filter = ('category', 'is_pto', 'all_day')
    search_fields = ('title', 'notes')
    date_hierarchy = 'start_date'


@admin.register(CalendarPattern)
class CalendarPatternAdmin(admin.ModelAdmin):
    list_display = ('name', 'pattern_type', 'category', 'is_active')
    list_filter = ('pattern_type', 'is_active')
