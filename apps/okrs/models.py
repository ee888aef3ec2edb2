# apps/okrs/models.py
from django.db import models
from django.utils import timezone


class Objective(models.Model):
    class PillarChoices(models.TextChoices):
        POWER = 'Power', 'Power'
        PASSION = 'Passion', 'Passion'
        PURPOSE = 'Purpose', 'Purpose'
        PRODUCTION = 'Production', 'Production'

    class StatusChoices(models.TextChoices):
        ACTIVE = 'active', 'Active'
        DRAFT = 'draft', 'Draft'  # w trakcie tworzenia (setup kwartału)
        COMPLETED = 'completed', 'Completed'
        ARCHIVED = 'archived', 'Archived'

    pillar = models.CharField(max_length=20, choices=PillarChoices.choices)
    objective = models.CharField(max_length=300)

    # Okno kwartału
    quarter = models.CharField(max_length=10, blank=True, help_text="np. 2026-Q4")
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    status = models.CharField(max_length=20, choices=StatusChoices.choices, default=StatusChoices.ACTIVE)
    # Miękkie usunięcie
    archived = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"[{self.pillar}] {self.objective}"


class KeyResult(models.Model):
    class KindChoices(models.TextChoices):
        BOOLEAN = 'boolean', 'Yes / No'
        PERCENT = 'percent', 'Percent'
        NUMERIC = 'numeric', 'Number'

    class DirectionChoices(models.TextChoices):
        UP = 'up', 'Increase'
        DOWN = 'down', 'Decrease'

    okr = models.ForeignKey(Objective, on_delete=models.CASCADE, related_name='key_results')
    description = models.CharField(max_length=300)
    kind = models.CharField(max_length=10, choices=KindChoices.choices, default=KindChoices.NUMERIC)
    direction = models.CharField(max_length=4, choices=DirectionChoices.choices, default=DirectionChoices.UP)

    current_value = models.FloatField(default=0)
    target_value = models.FloatField(default=0)
    baseline_value = models.FloatField(null=True, blank=True, help_text="Wartość startowa dla KR-ów 'down'")

    # Odłożony: poza losowaniem, postęp zostaje
    punted = models.BooleanField(default=False)
    punted_at = models.DateTimeField(null=True, blank=True)

    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['position', 'id']

    def __str__(self):
        return self.description

    def punt(self):
        self.punted = True
        self.punted_at = timezone.now()

    def unpunt(self):
        self.punted = False
        self.punted_at = None
