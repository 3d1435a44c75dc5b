"""
Management command to clear all schedule data
"""

from django.core.management.base import BaseCommand
from team_schedule.models import Event


class Command(BaseCommand):
    help = 'Clear all schedule data (one-off and recurring events)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--confirm',
            action='store_true',
            help='Confirm that you want to delete all data',
        )

    def handle(self, *args, **options):
        if not options['confirm']:
            self.stdout.write(
                self.style.WARNING(
                    'This will delete ALL schedule data. Use --confirm to proceed.'
                )
            )
            return

        recurring_count = Event.objects.filter(is_recurring=True).count()
        event_count, _ = Event.objects.all().delete()

        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully cleared {event_count} events ({recurring_count} recurring)'
            )
        )
