from django.db import models
from django.db.models import Q
from django.core.exceptions import ValidationError


# Choices defined at module level so they can be shared
EVENT_TYPE_CHOICES = [
    ('game_session', 'Game session'),
    ('tournament', 'Tournament'),
    ('coaching', 'Coaching'),
    ('training', 'Training'),
    ('practice', 'Practice'),
    ('other', 'Other'),
]

RECURRENCE_PATTERN_CHOICES = [
    ('daily', 'Daily'),
    ('weekly', 'Weekly'),
    ('monthly', 'Monthly'),
    ('yearly', 'Yearly'),
]

# Fields copied as-is into the template handed to the expander
TEMPLATE_FIELDS = [
    'id', 'title', 'event_type', 'description', 'start_time', 'end_time',
    'is_recurring', 'recurrence_pattern', 'recurrence_interval',
    'recurrence_days_of_week', 'recurrence_end_date', 'opponent_team',
    'maps_played', 'games_count',
]


class EventQuerySet(models.QuerySet):

    def in_window(self, window_start, window_end):
        """
        Templates able to produce an occurrence in [window_start, window_end).

        One-off events must start inside the window; recurring events must
        start before the window closes and keep recurring at least until
        it opens.
        """
        single = Q(is_recurring=False, start_time__gte=window_start, start_time__lt=window_end)
        recurring = Q(
            is_recurring=True,
            start_time__lt=window_end,
            recurrence_end_date__gte=window_start,
        )
        return self.filter(single | recurring)


class Event(models.Model):
    """
    A schedule entry for the team, possibly recurring.
    Stored once as a template; occurrences are computed on demand.
    """

    title = models.CharField(max_length=255)
    event_type = models.CharField(max_length=20, choices=EVENT_TYPE_CHOICES, default='other')
    description = models.TextField(blank=True)
    start_time = models.DateTimeField(help_text="Start of the first occurrence")
    end_time = models.DateTimeField(
        null=True,
        blank=True,
        help_text="End of the first occurrence. Empty = one hour long",
    )
    is_recurring = models.BooleanField(default=False)
    recurrence_pattern = models.CharField(
        max_length=10, choices=RECURRENCE_PATTERN_CHOICES, blank=True, default=''
    )
    recurrence_interval = models.PositiveIntegerField(default=1)
    recurrence_days_of_week = models.JSONField(
        default=list,
        blank=True,
        help_text="Weekday indices, 0=Sunday to 6=Saturday. Weekly pattern only",
    )
    recurrence_end_date = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Last possible occurrence start (inclusive)",
    )
    opponent_team = models.CharField(max_length=255, blank=True)
    maps_played = models.JSONField(default=list, blank=True)
    games_count = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = EventQuerySet.as_manager()

    class Meta:
        ordering = ['start_time']

    def __str__(self):
        if self.is_recurring and self.recurrence_pattern:
            return f"{self.title} ({self.get_recurrence_pattern_display()})"
        return self.title

    def clean(self):
        """Validate model constraints"""
        if self.end_time is not None and self.end_time <= self.start_time:
            raise ValidationError("End time must be after start time")

        if not self.is_recurring:
            return

        if not self.recurrence_pattern:
            raise ValidationError("Recurring events need a recurrence pattern")

        if self.recurrence_interval < 1:
            raise ValidationError("Recurrence interval must be at least 1")

        if self.recurrence_end_date is None:
            raise ValidationError("Recurring events need a recurrence end date")

        if self.recurrence_end_date < self.start_time:
            raise ValidationError("Recurrence end date must not be before the start time")

        if self.recurrence_pattern == 'weekly':
            days = self.recurrence_days_of_week or []
            if not days:
                raise ValidationError("Weekly events need at least one day of the week")
            if any(not isinstance(day, int) or not 0 <= day <= 6 for day in days):
                raise ValidationError("Days of the week must be integers from 0 (Sunday) to 6 (Saturday)")

    def as_template(self):
        """Plain dict view of this event, as consumed by the expander."""
        return {field: getattr(self, field) for field in TEMPLATE_FIELDS}
