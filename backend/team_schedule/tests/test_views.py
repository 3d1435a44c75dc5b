"""
Test cases for schedule API views.
Tests CRUD operations on templates and the expanded week view.
"""

import json
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone

from django.test import TestCase, Client, override_settings
from team_schedule.models import Event
from team_schedule.services.expand import epoch_millis


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


class EventViewSetTest(TestCase):
    """Test Event CRUD operations"""

    def setUp(self):
        self.client = Client()
        self.monday_10am = utc(2024, 1, 1, 10, 0)

        self.training = Event.objects.create(
            title="Team training",
            event_type='training',
            start_time=self.monday_10am,
            end_time=self.monday_10am + timedelta(hours=2),
            is_recurring=True,
            recurrence_pattern='weekly',
            recurrence_days_of_week=[1, 3],
            recurrence_end_date=utc(2024, 1, 21),
        )
        self.match = Event.objects.create(
            title="Qualifier match",
            event_type='tournament',
            start_time=utc(2024, 1, 12, 18, 0),
        )
        self.later = Event.objects.create(
            title="Bootcamp",
            event_type='game_session',
            start_time=utc(2024, 3, 4, 9, 0),
        )

    def post_json(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')

    def test_list_events(self):
        """Test GET /api/events/"""
        response = self.client.get('/api/events/')
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(len(data), 3)
        self.assertEqual(data[0]['title'], "Team training")
        self.assertEqual(data[0]['recurrence_days_of_week'], [1, 3])

    def test_list_events_in_range(self):
        """Test GET /api/events/?start=...&end=..."""
        response = self.client.get('/api/events/', {'start': '2024-01-08', 'end': '2024-01-14'})
        self.assertEqual(response.status_code, 200)

        titles = {event['title'] for event in response.json()}
        self.assertEqual(titles, {"Team training", "Qualifier match"})

    def test_list_events_limit(self):
        response = self.client.get('/api/events/', {'limit': 1})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 1)

    @override_settings(EVENTS_MAX_LIMIT=2)
    def test_list_events_limit_capped(self):
        response = self.client.get('/api/events/', {'limit': 500})
        self.assertEqual(len(response.json()), 2)

    def test_list_events_bad_parameters(self):
        self.assertEqual(self.client.get('/api/events/', {'start': '2024-01-08'}).status_code, 400)
        self.assertEqual(
            self.client.get('/api/events/', {'start': 'yesterday', 'end': '2024-01-14'}).status_code, 400
        )
        self.assertEqual(self.client.get('/api/events/', {'limit': 'many'}).status_code, 400)

    def test_create_recurring_event(self):
        """Test POST /api/events/"""
        response = self.post_json('/api/events/', {
            'title': 'Scrim',
            'event_type': 'practice',
            'start_time': '2024-01-05T20:00:00Z',
            'is_recurring': True,
            'recurrence_pattern': 'weekly',
            'recurrence_interval': 2,
            'recurrence_days_of_week': [5, 5],
            'recurrence_end_date': '2024-03-01T00:00:00Z',
            'opponent_team': 'Sparring Partners',
            'maps_played': ['Ascent', 'Bind'],
        })

        self.assertEqual(response.status_code, 201)
        created = Event.objects.get(title='Scrim')
        self.assertEqual(created.recurrence_interval, 2)
        self.assertEqual(created.recurrence_days_of_week, [5])
        self.assertEqual(created.maps_played, ['Ascent', 'Bind'])

    def test_create_one_off_drops_recurrence(self):
        response = self.post_json('/api/events/', {
            'title': 'Coaching',
            'event_type': 'coaching',
            'start_time': '2024-01-06T15:00:00Z',
            'is_recurring': False,
            'recurrence_pattern': 'daily',
            'recurrence_end_date': '2024-03-01T00:00:00Z',
        })

        self.assertEqual(response.status_code, 201)
        created = Event.objects.get(title='Coaching')
        self.assertEqual(created.recurrence_pattern, '')
        self.assertIsNone(created.recurrence_end_date)

    def test_create_event_validation(self):
        """Test validation on event creation"""
        invalid_payloads = [
            # Weekly without days
            {'is_recurring': True, 'recurrence_pattern': 'weekly',
             'recurrence_end_date': '2024-03-01T00:00:00Z'},
            # Recurring without end date
            {'is_recurring': True, 'recurrence_pattern': 'daily'},
            # Recurring without pattern
            {'is_recurring': True, 'recurrence_end_date': '2024-03-01T00:00:00Z'},
            # Unknown pattern
            {'is_recurring': True, 'recurrence_pattern': 'hourly',
             'recurrence_end_date': '2024-03-01T00:00:00Z'},
            # Zero interval
            {'is_recurring': True, 'recurrence_pattern': 'daily', 'recurrence_interval': 0,
             'recurrence_end_date': '2024-03-01T00:00:00Z'},
            # Weekday out of range
            {'is_recurring': True, 'recurrence_pattern': 'weekly', 'recurrence_days_of_week': [7],
             'recurrence_end_date': '2024-03-01T00:00:00Z'},
            # End before start
            {'end_time': '2024-01-06T14:00:00Z'},
        ]

        for extra in invalid_payloads:
            payload = {'title': 'Invalid', 'start_time': '2024-01-06T15:00:00Z'}
            payload.update(extra)
            response = self.post_json('/api/events/', payload)
            self.assertEqual(response.status_code, 400, extra)

        self.assertFalse(Event.objects.filter(title='Invalid').exists())

    def test_update_event(self):
        """Test PATCH /api/events/{id}/"""
        response = self.client.patch(
            f'/api/events/{self.training.id}/',
            data=json.dumps({'title': 'Aim training', 'recurrence_days_of_week': [2]}),
            content_type='application/json'
        )

        self.assertEqual(response.status_code, 200)
        self.training.refresh_from_db()
        self.assertEqual(self.training.title, 'Aim training')
        self.assertEqual(self.training.recurrence_days_of_week, [2])
        self.assertEqual(self.training.recurrence_pattern, 'weekly')

    def test_delete_event(self):
        """Test DELETE /api/events/{id}/"""
        response = self.client.delete(f'/api/events/{self.match.id}/')
        self.assertEqual(response.status_code, 204)
        self.assertEqual(Event.objects.count(), 2)

    def test_event_types(self):
        response = self.client.get('/api/events/types/')
        self.assertEqual(response.status_code, 200)
        names = [event_type['name'] for event_type in response.json()]
        self.assertIn('tournament', names)
        self.assertIn('coaching', names)


class WeekViewTest(TestCase):
    """Test the expanded week endpoint"""

    def setUp(self):
        self.client = Client()
        self.training = Event.objects.create(
            title="Team training",
            event_type='training',
            start_time=utc(2024, 1, 1, 10, 0),
            end_time=utc(2024, 1, 1, 12, 0),
            is_recurring=True,
            recurrence_pattern='weekly',
            recurrence_days_of_week=[1, 3],
            recurrence_end_date=utc(2024, 1, 21),
        )
        self.match = Event.objects.create(
            title="Qualifier match",
            event_type='tournament',
            start_time=utc(2024, 1, 12, 18, 0),
        )

    def test_week_grouped_by_day(self):
        """Test GET /api/events/week/"""
        response = self.client.get('/api/events/week/', {'start': '2024-01-10'})
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data['week_start'], '2024-01-08')
        self.assertEqual(data['week_end'], '2024-01-14')
        self.assertEqual(len(data['days']), 7)

        monday = data['days']['2024-01-08']
        self.assertEqual(len(monday), 1)
        self.assertEqual(monday[0]['id'], f"{self.training.id}_{epoch_millis(utc(2024, 1, 8, 10))}")
        self.assertEqual(monday[0]['original_event_id'], self.training.id)
        self.assertTrue(monday[0]['is_recurring_instance'])
        self.assertTrue(monday[0]['start_time'].startswith('2024-01-08T10:00:00'))
        self.assertTrue(monday[0]['end_time'].startswith('2024-01-08T12:00:00'))

        self.assertEqual(len(data['days']['2024-01-10']), 1)

        friday = data['days']['2024-01-12']
        self.assertEqual(len(friday), 1)
        self.assertEqual(friday[0]['id'], self.match.id)
        self.assertNotIn('is_recurring_instance', friday[0])

        for empty_day in ('2024-01-09', '2024-01-11', '2024-01-13', '2024-01-14'):
            self.assertEqual(data['days'][empty_day], [])

        self.assertEqual(data['summary'], {'training': 2, 'tournament': 1})

    def test_week_after_series_end(self):
        response = self.client.get('/api/events/week/', {'start': '2024-01-22'})
        data = response.json()
        self.assertEqual(len(data['days']), 7)
        self.assertEqual(sum(len(day) for day in data['days'].values()), 0)
        self.assertEqual(data['summary'], {})

    def test_week_repeatable(self):
        first = self.client.get('/api/events/week/', {'start': '2024-01-15'}).json()
        second = self.client.get('/api/events/week/', {'start': '2024-01-15'}).json()
        self.assertEqual(first, second)

    def test_week_with_timezone(self):
        late_session = Event.objects.create(
            title="Late session",
            event_type='game_session',
            start_time=utc(2024, 1, 7, 23, 30),
        )

        utc_week = self.client.get('/api/events/week/', {'start': '2024-01-08'}).json()
        utc_ids = [occ['id'] for day in utc_week['days'].values() for occ in day]
        self.assertNotIn(late_session.id, utc_ids)

        paris_week = self.client.get('/api/events/week/', {'start': '2024-01-08', 'tz': 'Europe/Paris'}).json()
        self.assertIn(late_session.id, [occ['id'] for occ in paris_week['days']['2024-01-08']])

    def test_week_requires_start(self):
        response = self.client.get('/api/events/week/')
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.json())

    def test_week_invalid_start(self):
        response = self.client.get('/api/events/week/', {'start': 'next week'})
        self.assertEqual(response.status_code, 400)

    def test_week_invalid_timezone(self):
        response = self.client.get('/api/events/week/', {'start': '2024-01-08', 'tz': 'Mars/Olympus'})
        self.assertEqual(response.status_code, 400)
