from django.db import models


class ChallengeProtocol(models.Model):
    """Ustawienia jednego protokołu losowania (limit tygodniowy + konfiguracja JSON)."""
    protocol_key = models.CharField(max_length=50, unique=True)
    is_enabled = models.BooleanField(default=True)
    max_per_week = models.PositiveIntegerField(default=1)
    # np. {"enabled_habit_ids": [...]}, {"enabled_pillars": [...]}, {"enabled_kr_ids": [...]}
    config = models.JSONField(default=dict, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.protocol_key


class ChallengeConfig(models.Model):
    key = models.CharField(max_length=50, unique=True)
    value = models.JSONField(null=True)

    def __str__(self):
        return f"{self.key}={self.value!r}"


class WeeklyChallengeSet(models.Model):
    year = models.PositiveIntegerField()  # rok ISO
    week_number = models.PositiveIntegerField()
    week_start_date = models.DateField()
    generated_at = models.DateTimeField()

    class Meta:
        unique_together = ('year', 'week_number')
        ordering = ['-year', '-week_number']

    def __str__(self):
        return f"{self.year}-W{self.week_number:02d}"


class WeeklyChallenge(models.Model):
    challenge_set = models.ForeignKey(WeeklyChallengeSet, on_delete=models.CASCADE, related_name='challenges')
    slot_index = models.PositiveIntegerField()
    protocol_key = models.CharField(max_length=50)
    action_text = models.CharField(max_length=500)
    story_type = models.CharField(max_length=50)
    story_data = models.JSONField(default=dict, blank=True)
    title = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ('challenge_set', 'slot_index')
        ordering = ['slot_index']

    def __str__(self):
        return f"#{self.slot_index} {self.action_text}"
