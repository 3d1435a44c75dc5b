from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Event',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('event_type', models.CharField(choices=[('game_session', 'Game session'), ('tournament', 'Tournament'), ('coaching', 'Coaching'), ('training', 'Training'), ('practice', 'Practice'), ('other', 'Other')], default='other', max_length=20)),
                ('description', models.TextField(blank=True)),
                ('start_time', models.DateTimeField(help_text='Start of the first occurrence')),
                ('end_time', models.DateTimeField(blank=True, help_text='End of the first occurrence. Empty = one hour long', null=True)),
                ('is_recurring', models.BooleanField(default=False)),
                ('recurrence_pattern', models.CharField(blank=True, choices=[('daily', 'Daily'), ('weekly', 'Weekly'), ('monthly', 'Monthly'), ('yearly', 'Yearly')], default='', max_length=10)),
                ('recurrence_interval', models.PositiveIntegerField(default=1)),
                ('recurrence_days_of_week', models.JSONField(blank=True, default=list, help_text='Weekday indices, 0=Sunday to 6=Saturday. Weekly pattern only')),
                ('recurrence_end_date', models.DateTimeField(blank=True, help_text='Last possible occurrence start (inclusive)', null=True)),
                ('opponent_team', models.CharField(blank=True, max_length=255)),
                ('maps_played', models.JSONField(blank=True, default=list)),
                ('games_count', models.PositiveIntegerField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['start_time'],
            },
        ),
    ]
