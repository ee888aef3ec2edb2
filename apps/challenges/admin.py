from django.contrib import admin
from .models import ChallengeConfig, ChallengeProtocol, WeeklyChallenge, WeeklyChallengeSet


@admin.register(ChallengeProtocol)
class ChallengeProtocolAdmin(admin.ModelAdmin):
    list_display = ('protocol_key', 'is_enabled', 'max_per_week', 'updated_at')


@admin.register(ChallengeConfig)
class ChallengeConfigAdmin(admin.ModelAdmin):
    list_display = ('key', 'value')


class WeeklyChallengeInline(admin.TabularInline):
    model = WeeklyChallenge
    extra = 0
    fields = ('slot_index', 'protocol_key', 'action_text', 'completed', 'completed_at')
    readonly_fields = ('completed_at',)


@admin.register(WeeklyChallengeSet)
class WeeklyChallengeSetAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'week_start_date', 'generated_at')
    inlines = [WeeklyChallengeInline]
