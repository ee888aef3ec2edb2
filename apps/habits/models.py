# apps/habits/models.py
from django.db import models
from django.utils import timezone


class Habit(models.Model):
    name = models.CharField(max_length=200)
    rule = models.TextField(blank=True, help_text="Opcjonalna reguła, np. 'min. 20 minut'")
    display_order = models.PositiveIntegerField(default=0)
    weekly_goal = models.PositiveIntegerField(default=0, help_text="Ile razy w tygodniu (0 = brak celu)")
    is_active = models.BooleanField(default=True)

    # Statystyki (przeliczane z historii po każdym zapisie wpisu)
    current_streak = models.PositiveIntegerField(default=0)
    longest_streak = models.PositiveIntegerField(default=0)
    longest_cold_streak = models.PositiveIntegerField(default=0)

    # Ostatnie wykonanie
    last_completed_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['display_order', 'name']

    def __str__(self):
        return self.name


class HabitEntry(models.Model):
    habit = models.ForeignKey(Habit, on_delete=models.CASCADE, related_name='entries')
    date = models.DateField()
    is_done = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('habit', 'date')  # Jeden wpis na dzień
        ordering = ['date']

    def __str__(self):
        return f"{self.habit} @ {self.date}: {'done' if self.is_done else 'missed'}"
