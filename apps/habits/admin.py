from django.contrib import admin
from .models import Habit, HabitEntry

@admin.register(Habit)
class HabitAdmin(admin.ModelAdmin):
    list_display = ('name', 'display_order', 'weekly_goal', 'current_streak', 'longest_streak', 'last_completed_date', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name',)

@admin.register(HabitEntry)
class HabitEntryAdmin(admin.ModelAdmin):
    list_display = ('habit', 'date', 'is_done')
    list_filter = ('date', 'habit', 'is_done')
