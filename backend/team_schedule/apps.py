from django.apps import AppConfig


class TeamScheduleConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'team_schedule'
    verbose_name = 'Team schedule'
