from django.contrib import admin
from .models import KeyResult, Objective


class KeyResultInline(admin.TabularInline):
    model = KeyResult
    extra = 1
    fields = ('description', 'kind', 'direction', 'baseline_value', 'current_value', 'target_value', 'punted', 'position')


@admin.register(Objective)
class ObjectiveAdmin(admin.ModelAdmin):
    list_display = ('objective', 'pillar', 'quarter', 'status', 'archived')
    list_filter = ('pillar', 'quarter', 'status', 'archived')
    search_fields = ('objective',)
    inlines = [KeyResultInline]


@admin.register(KeyResult)
class KeyResultAdmin(admin.ModelAdmin):
    list_display = ('description', 'okr', 'kind', 'direction', 'current_value', 'target_value', 'punted')
    list_filter = ('kind', 'direction', 'punted')
