"""
URL configuration for team_schedule.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import EventViewSet, week_view

# Create router for viewsets
router = DefaultRouter()
router.register(r'events', EventViewSet)

urlpatterns = [
    # Expanded week, declared before the router so "week" is not read as an event id
    path('events/week/', week_view, name='events-week'),

    # Include viewset URLs
    path('', include(router.urls)),
]
