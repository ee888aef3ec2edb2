# apps/priorities/models.py
from django.db import models


class Priority(models.Model):
    class PillarChoices(models.TextChoices):
        POWER = 'Power', 'Power'
        PASSION = 'Passion', 'Passion'
        PURPOSE = 'Purpose', 'Purpose'
        PRODUCTION = 'Production', 'Production'

    pillar = models.CharField(max_length=20, choices=PillarChoices.choices)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    # Zaangażowanie (commit) = aktywne skupienie
    is_committed = models.BooleanField(default=False)
    is_completed = models.BooleanField(default=False)
    position = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['position', 'id']
        verbose_name_plural = 'priorities'

    def __str__(self):
        return self.title


class Milestone(models.Model):
    priority = models.ForeignKey(Priority, on_delete=models.CASCADE, related_name='milestones')
    title = models.CharField(max_length=200)
    is_committed = models.BooleanField(default=False)
    is_completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['position', 'id']

    def __str__(self):
        return self.title
