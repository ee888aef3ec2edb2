# apps/calendar_app/models.py
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

PRIORITY_VALIDATORS = [MinValueValidator(1), MaxValueValidator(10)]


class CalendarPattern(models.Model):
    """Wzorzec, z którego powstają wydarzenia (cykliczne, cele, szablony)."""

    class PatternTypeChoices(models.TextChoices):
        RECURRING = 'recurring', 'Recurring'
        GOAL = 'goal', 'Goal'
        ONE_OFF_TEMPLATE = 'one_off_template', 'One-off template'

    name = models.CharField(max_length=200)
    pattern_type = models.CharField(max_length=30, choices=PatternTypeChoices.choices)
    category = models.CharField(max_length=50, blank=True)
    notes = models.TextField(blank=True)

    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    # Reguła w dowolnym kształcie, np. {"frequency": "weekly", "days": ["monday"]}
    rule_json = models.JSONField(default=dict, blank=True)

    # Domyślne wartości dla wygenerowanych wydarzeń
    default_affects_row_appearance = models.BooleanField(default=False)
    default_priority = models.PositiveSmallIntegerField(default=5, validators=PRIORITY_VALIDATORS)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': "end_date cannot be before start_date"})


class CalendarEvent(models.Model):
    title = models.CharField(max_length=200)
    category = models.CharField(max_length=50, blank=True)
    notes = models.TextField(blank=True)

    # Wydarzenia wielodniowe: end_date >= start_date, jednodniowe mają równe daty
    start_date = models.DateField()
    end_date = models.DateField()
    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    all_day = models.BooleanField(default=True)

    # Wygląd wiersza dnia w kalendarzu
    affects_row_appearance = models.BooleanField(default=False)
    priority = models.PositiveSmallIntegerField(default=5, validators=PRIORITY_VALIDATORS)
    is_pto = models.BooleanField(default=False)

    source_pattern = models.ForeignKey(
        CalendarPattern, null=True, blank=True, on_delete=models.SET_NULL, related_name='events'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['start_date', 'start_time', 'id']
        indexes = [models.Index(fields=['start_date', 'end_date'])]

    def __str__(self):
        return f"{self.title} ({self.start_date})"

    def clean(self):
        errors = {}
        if self.start_date and self.end_date and self.end_date < self.start_date:
            errors['end_date'] = "end_date cannot be before start_date"
        if not self.all_day:
            if self.start_time is None:
                errors['start_time'] = "start_time is required for timed events"
            elif self.end_time and self.start_date == self.end_date and self.end_time < self.start_time:
                errors['end_time'] = "end_time cannot be before start_time"
        if errors:
            raise ValidationError(errors)
