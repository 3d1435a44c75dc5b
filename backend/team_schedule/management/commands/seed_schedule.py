"""
Management command to seed the schedule with sample team events.
Creates one-off and recurring practices, scrims and tournaments.
"""

from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone
from team_schedule.models import Event


class Command(BaseCommand):
    help = 'Seed the schedule with sample team events'

    def add_arguments(self, parser):
        parser.add_argument(
            '--weeks',
            type=int,
            default=8,
            help='How many weeks the recurring events should run for',
        )

    def handle(self, *args, **options):
        # Check if data already exists
        if Event.objects.exists():
            self.stdout.write(
                self.style.WARNING(
                    f'Schedule already has {Event.objects.count()} events. '
                    'Skipping seed to avoid duplicates. Use clear_schedule command first if needed.'
                )
            )
            return

        self.stdout.write('Seeding schedule data...')

        now = timezone.now()
        today_19h = now.replace(hour=19, minute=0, second=0, microsecond=0)
        this_monday_19h = today_19h - timedelta(days=today_19h.weekday())
        series_end = this_monday_19h + timedelta(weeks=options['weeks'])

        # 1. Training every Monday and Wednesday 19:00 (2 hours)
        Event.objects.create(
            title="Team training",
            event_type='training',
            start_time=this_monday_19h,
            end_time=this_monday_19h + timedelta(hours=2),
            is_recurring=True,
            recurrence_pattern='weekly',
            recurrence_interval=1,
            recurrence_days_of_week=[1, 3],
            recurrence_end_date=series_end,
            description="Aim drills and utility practice",
        )
        self.stdout.write(f'Created weekly training starting {this_monday_19h}')

        # 2. Scrim every other Friday 20:00, no end time (one hour)
        friday_20h = this_monday_19h + timedelta(days=4, hours=1)
        Event.objects.create(
            title="Scrim",
            event_type='practice',
            start_time=friday_20h,
            is_recurring=True,
            recurrence_pattern='weekly',
            recurrence_interval=2,
            recurrence_days_of_week=[5],
            recurrence_end_date=series_end,
            opponent_team="Sparring Partners",
            maps_played=['Ascent', 'Bind'],
        )
        self.stdout.write(f'Created fortnightly scrim starting {friday_20h}')

        # 3. Daily warm-up session
        warmup_start = today_19h - timedelta(minutes=30)
        Event.objects.create(
            title="Warm-up",
            event_type='game_session',
            start_time=warmup_start,
            end_time=warmup_start + timedelta(minutes=30),
            is_recurring=True,
            recurrence_pattern='daily',
            recurrence_interval=1,
            recurrence_end_date=warmup_start + timedelta(weeks=options['weeks']),
        )
        self.stdout.write(f'Created daily warm-up starting {warmup_start}')

        # 4. Monthly coaching review
        Event.objects.create(
            title="Coaching review",
            event_type='coaching',
            start_time=this_monday_19h + timedelta(days=6),
            end_time=this_monday_19h + timedelta(days=6, hours=1, minutes=30),
            is_recurring=True,
            recurrence_pattern='monthly',
            recurrence_interval=1,
            recurrence_end_date=this_monday_19h + timedelta(days=365),
        )
        self.stdout.write('Created monthly coaching review')

        # 5. One-off tournament match next Saturday
        match_start = this_monday_19h + timedelta(days=12, hours=-4)
        Event.objects.create(
            title="Qualifier match",
            event_type='tournament',
            start_time=match_start,
            end_time=match_start + timedelta(hours=3),
            opponent_team="Rival Esports",
            games_count=3,
        )
        self.stdout.write(f'Created tournament match at {match_start}')

        # Summary
        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully seeded schedule with {Event.objects.count()} events'
            )
        )
