# apps/goals/models.py
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from apps.goals.domain.entities import IntervalType


class GoalDefinition(models.Model):
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='goal_definitions')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    class IntervalChoices(models.TextChoices):
        DAILY = IntervalType.DAILY.value, 'Codziennie'
        WEEKLY = IntervalType.WEEKLY.value, 'Co tydzień'
        MONTHLY = IntervalType.MONTHLY.value, 'Co miesiąc'
        QUARTERLY = IntervalType.QUARTERLY.value, 'Co kwartał'
        YEARLY = IntervalType.YEARLY.value, 'Co rok'

    interval_type = models.CharField(max_length=20, choices=IntervalChoices.choices)

    # Cel bazowy kopiowany do każdej nowej instancji
    base_target = models.FloatField(default=0, validators=[MinValueValidator(0)])

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.get_interval_type_display()})"


class PeriodInstance(models.Model):
    definition = models.ForeignKey(GoalDefinition, on_delete=models.CASCADE, related_name='instances')
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()

    # Dzień kalendarzowy startu (lokalna strefa) - klucz unikalności
    start_day = models.DateField(editable=False)

    target = models.FloatField(default=0)
    completed_amount = models.FloatField(default=0, validators=[MinValueValidator(0)])

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-start_date']
        unique_together = ('definition', 'start_day')  # Jedna instancja na dzień
        indexes = [
            models.Index(fields=['definition', 'start_date'], name='goals_period_def_start_idx'),
        ]

    def __str__(self):
        return f"{self.definition.name}: {self.start_date:%Y-%m-%d} - {self.end_date:%Y-%m-%d}"

    def save(self, *args, **kwargs):
        self.start_day = calendar_day(self.start_date)
        super().save(*args, **kwargs)


def calendar_day(moment):
    if timezone.is_aware(moment):
        return timezone.localdate(moment)
    return moment.date()
