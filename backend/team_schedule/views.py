"""
Views for the schedule API.
Provides CRUD operations for event templates and the expanded week view.
"""

import logging
from datetime import datetime, time, timedelta
from datetime import timezone as dt_timezone

import pytz
from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.request import Request
from .models import Event, EVENT_TYPE_CHOICES
from .serializers import EventSerializer
from .services.expand import expand_events, group_by_day, summarize_by_type, week_start_for


logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 100


def parse_boundary(value, end_of_range=False):
    """
    Parse an ISO date or datetime query parameter into an aware UTC datetime.

    A bare date as the end of a range covers that whole day.
    Returns None when the value cannot be parsed.
    """
    try:
        parsed = parse_datetime(value)
        if parsed is None:
            parsed_date = parse_date(value)
            if parsed_date is None:
                return None
            if end_of_range:
                parsed_date += timedelta(days=1)
            parsed = datetime.combine(parsed_date, time())
    except ValueError:
        return None

    # Ensure it's timezone-aware
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def serialize_occurrence(occurrence):
    """Convert datetime values to ISO strings for JSON output"""
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in occurrence.items()
    }


class EventViewSet(viewsets.ModelViewSet):
    """
    ViewSet for CRUD operations on Event templates.

    Listing accepts optional `start`, `end` and `limit` query parameters and
    returns the templates able to produce occurrences in that range.
    """
    queryset = Event.objects.all()
    serializer_class = EventSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        start_str = self.request.query_params.get('start')
        end_str = self.request.query_params.get('end')
        if start_str and end_str:
            window_start = parse_boundary(start_str)
            window_end = parse_boundary(end_str, end_of_range=True)
            if window_start and window_end:
                queryset = queryset.in_window(window_start, window_end)
        return queryset

    def list(self, request: Request, *args, **kwargs):
        start_str = request.query_params.get('start')
        end_str = request.query_params.get('end')
        if bool(start_str) != bool(end_str):
            return Response({'error': 'start and end must be given together'}, status=400)
        if start_str and (parse_boundary(start_str) is None or parse_boundary(end_str) is None):
            return Response({'error': 'start and end must be valid ISO dates or datetimes'}, status=400)

        max_limit = getattr(settings, 'EVENTS_MAX_LIMIT', DEFAULT_LIST_LIMIT)
        try:
            limit = int(request.query_params.get('limit', max_limit))
        except ValueError:
            return Response({'error': 'limit must be an integer'}, status=400)
        limit = max(1, min(limit, max_limit))

        queryset = self.filter_queryset(self.get_queryset())[:limit]
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def types(self, request: Request):
        """List the available event types"""
        return Response([
            {'name': name, 'label': label} for name, label in EVENT_TYPE_CHOICES
        ])


def week_view(request):
    """
    Get the expanded occurrences of one display week, grouped by day.

    Query parameters:
    - start: ISO date of any day in the wanted week (required)
    - tz: Timezone name (optional, e.g., 'Europe/Paris')

    The week runs Monday to Sunday. Days are taken in `tz` when given,
    UTC otherwise.
    """
    start_str = request.GET.get('start')
    tz_name = request.GET.get('tz')

    if not start_str:
        return JsonResponse({'error': 'start query parameter is required'}, status=400)

    try:
        reference_day = parse_date(start_str)
    except ValueError:
        reference_day = None
    if reference_day is None:
        reference = parse_boundary(start_str)
        if reference is None:
            return JsonResponse({'error': 'start must be a valid ISO date'}, status=400)
        reference_day = reference.date()

    local_tz = pytz.utc
    if tz_name:
        try:
            local_tz = pytz.timezone(tz_name)
        except pytz.UnknownTimeZoneError:
            return JsonResponse({'error': f'Invalid timezone: {tz_name}'}, status=400)

    week_start = week_start_for(reference_day)
    window_start = local_tz.localize(datetime.combine(week_start, time()))
    window_end = local_tz.localize(datetime.combine(week_start + timedelta(days=7), time()))

    templates = [event.as_template() for event in Event.objects.in_window(window_start, window_end)]
    occurrences = expand_events(templates, window_start=window_start, window_end=window_end)
    grouped = group_by_day(occurrences, week_start, tz=local_tz)

    logger.debug("Week of %s: %d templates, %d occurrences", week_start, len(templates), len(occurrences))

    return JsonResponse({
        'week_start': week_start.isoformat(),
        'week_end': (week_start + timedelta(days=6)).isoformat(),
        'days': {
            day: [serialize_occurrence(occ) for occ in day_occurrences]
            for day, day_occurrences in grouped.items()
        },
        'summary': summarize_by_type(grouped),
    })
