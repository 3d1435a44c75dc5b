from django.contrib import admin
from .models import Event


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['title', 'event_type', 'start_time', 'is_recurring', 'recurrence_pattern', 'created_at']
    list_filter = ['event_type', 'is_recurring', 'recurrence_pattern', 'created_at']
    search_fields = ['title', 'description', 'opponent_team']
    readonly_fields = ['created_at']
    ordering = ['-created_at']
