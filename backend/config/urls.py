"""
URL configuration for the team schedule backend.
"""

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('team_schedule.urls')),
]
