from django.db import models


class DailyIntention(models.Model):
    class PillarChoices(models.TextChoices):
        POWER = 'Power', 'Power'
        PASSION = 'Passion', 'Passion'
        PURPOSE = 'Purpose', 'Purpose'
        PRODUCTION = 'Production', 'Production'

    date = models.DateField()
    pillar = models.CharField(max_length=20, choices=PillarChoices.choices)
    text = models.CharField(max_length=500)
    locked_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ('date', 'pillar')
        ordering = ['-date', 'pillar']

    def __str__(self):
        return f"{self.date} {self.pillar}: {self.text}"
