"""
Print the expanded occurrences of one week, day by day
"""

from datetime import datetime, time, timedelta

import pytz
from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date
from team_schedule.models import Event
from team_schedule.services.expand import expand_events, group_by_day, summarize_by_type, week_start_for


class Command(BaseCommand):
    help = 'Show the occurrences of the week containing the given date'

    def add_arguments(self, parser):
        parser.add_argument('date', help='Any day of the week to show (YYYY-MM-DD)')
        parser.add_argument('--tz', default='UTC', help='Timezone used to pick calendar days')

    def handle(self, *args, **options):
        day = parse_date(options['date'])
        if day is None:
            raise CommandError(f"Invalid date: {options['date']}")

        try:
            local_tz = pytz.timezone(options['tz'])
        except pytz.UnknownTimeZoneError:
            raise CommandError(f"Invalid timezone: {options['tz']}")

        week_start = week_start_for(day)
        window_start = local_tz.localize(datetime.combine(week_start, time()))
        window_end = local_tz.localize(datetime.combine(week_start + timedelta(days=7), time()))

        templates = [event.as_template() for event in Event.objects.in_window(window_start, window_end)]
        occurrences = expand_events(templates, window_start=window_start, window_end=window_end)
        grouped = group_by_day(occurrences, week_start, tz=local_tz)

        self.stdout.write(f'=== Week of {week_start} ({local_tz.zone}) ===')
        for day_str, day_occurrences in grouped.items():
            self.stdout.write(f'\n{day_str}')
            if not day_occurrences:
                self.stdout.write('  (nothing scheduled)')
            for occ in day_occurrences:
                local_start = occ['start_time'].astimezone(local_tz)
                self.stdout.write(f"  {local_start:%H:%M} {occ['title']} [{occ['event_type']}] id={occ['id']}")

        summary = summarize_by_type(grouped)
        totals = ', '.join(f'{name}: {count}' for name, count in sorted(summary.items()))
        self.stdout.write(f'\nTotal occurrences: {sum(summary.values())} ({totals or "none"})')
