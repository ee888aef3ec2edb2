from django.contrib import admin
from .models import Milestone, Priority


class MilestoneInline(admin.TabularInline):
    model = Milestone
    extra = 1
    fields = ('title', 'is_committed', 'is_completed', 'position')


@admin.register(Priority)
class PriorityAdmin(admin.ModelAdmin):
    list_display = ('title', 'pillar', 'is_committed', 'is_completed')
    list_filter = ('pillar', 'is_committed', 'is_completed')
    search_fields = ('title',)
    inlines = [MilestoneInline]
