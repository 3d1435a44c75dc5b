from rest_framework import serializers
from .models import Event, RECURRENCE_PATTERN_CHOICES


class EventSerializer(serializers.ModelSerializer):
    """Serializer for Event templates with recurrence validation"""

    class Meta:
        model = Event
        fields = '__all__'

    def validate_recurrence_interval(self, value):
        """Ensure interval is positive"""
        if value < 1:
            raise serializers.ValidationError("Recurrence interval must be at least 1")
        return value

    def validate_recurrence_days_of_week(self, value):
        """Days are Sunday-based indices 0..6"""
        if value is None:
            return []
        if not isinstance(value, list):
            raise serializers.ValidationError("Days of the week must be a list")
        for day in value:
            if not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6:
                raise serializers.ValidationError(
                    "Days of the week must be integers from 0 (Sunday) to 6 (Saturday)"
                )
        return sorted(set(value))

    def validate_maps_played(self, value):
        if value is None:
            return []
        if not isinstance(value, list):
            raise serializers.ValidationError("Maps played must be a list")
        return value

    def validate(self, data):
        """Cross-field validation"""
        instance = self.instance

        def current(field, default=None):
            if field in data:
                return data[field]
            return getattr(instance, field, default) if instance else default

        start_time = current('start_time')
        end_time = current('end_time')
        if start_time and end_time and end_time <= start_time:
            raise serializers.ValidationError("End time must be after start time")

        if not current('is_recurring', False):
            # Recurrence settings are meaningless on one-off events
            data['recurrence_pattern'] = ''
            data['recurrence_days_of_week'] = []
            data['recurrence_end_date'] = None
            return data

        pattern = current('recurrence_pattern', '')
        valid_patterns = [choice for choice, _ in RECURRENCE_PATTERN_CHOICES]
        if pattern not in valid_patterns:
            raise serializers.ValidationError(f"Recurrence pattern must be one of: {valid_patterns}")

        end_date = current('recurrence_end_date')
        if end_date is None:
            raise serializers.ValidationError("Recurring events need a recurrence end date")
        if start_time and end_date < start_time:
            raise serializers.ValidationError("Recurrence end date must not be before the start time")

        if pattern == 'weekly' and not current('recurrence_days_of_week', []):
            raise serializers.ValidationError("Weekly events need at least one day of the week")

        return data
