"""
Service for expanding recurring event templates into individual occurrences.
Handles daily, weekly, monthly and yearly patterns and buckets the result
into the days of a display week.
"""

import logging
from datetime import date, datetime, time, timedelta
from datetime import timezone as dt_timezone
from typing import Any, Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from dateutil import rrule
from dateutil.relativedelta import relativedelta
from django.conf import settings


logger = logging.getLogger(__name__)

DEFAULT_DURATION = timedelta(hours=1)
DEFAULT_MAX_OCCURRENCES = 1000
PATTERNS = ('daily', 'weekly', 'monthly', 'yearly')

EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


class Recurrence(NamedTuple):
    """Normalised recurrence settings of one template."""
    pattern: str
    interval: int
    days_of_week: Tuple[int, ...]
    until: Optional[datetime]


def get_max_occurrences() -> int:
    return getattr(settings, 'EVENT_EXPANSION_MAX_OCCURRENCES', DEFAULT_MAX_OCCURRENCES)


def to_python_weekday(day: int) -> int:
    """Convert a Sunday-based weekday index (0=Sunday) to datetime.weekday() (0=Monday)"""
    return (day + 6) % 7


def epoch_millis(dt: datetime) -> int:
    """Milliseconds since the Unix epoch. Naive datetimes are read as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=dt_timezone.utc)
    return (dt - EPOCH) // timedelta(milliseconds=1)


def _align_until(until, start: datetime) -> Optional[datetime]:
    # rrule refuses to mix naive and aware datetimes
    if until is None:
        return None
    if not isinstance(until, datetime):
        until = datetime.combine(until, time(), tzinfo=start.tzinfo)
    if start.tzinfo is not None and until.tzinfo is None:
        return until.replace(tzinfo=start.tzinfo)
    if start.tzinfo is None and until.tzinfo is not None:
        return until.astimezone(dt_timezone.utc).replace(tzinfo=None)
    return until


def parse_recurrence(template: Dict[str, Any]) -> Optional[Recurrence]:
    """
    Read the recurrence fields of a template.

    Returns None when the template is a one-off event (not recurring, or
    recurring without a pattern). Interval is clamped to at least 1 and
    weekday selectors are deduplicated and sorted.
    """
    if not template.get('is_recurring') or not template.get('recurrence_pattern'):
        return None

    interval = template.get('recurrence_interval') or 1
    days = template.get('recurrence_days_of_week') or []
    valid_days = sorted({
        day for day in days
        if isinstance(day, int) and not isinstance(day, bool) and 0 <= day <= 6
    })

    return Recurrence(
        pattern=str(template['recurrence_pattern']).lower(),
        interval=max(1, int(interval)),
        days_of_week=tuple(valid_days),
        until=_align_until(template.get('recurrence_end_date'), template['start_time']),
    )


def get_duration(template: Dict[str, Any]) -> timedelta:
    end_time = template.get('end_time')
    if end_time is None:
        return DEFAULT_DURATION
    return end_time - template['start_time']


def create_rrule(start: datetime, recurrence: Recurrence) -> rrule.rrule:
    """
    Create a dateutil rrule for the daily and weekly patterns.

    Weekly rules start their week on the weekday of the template start, so
    each rule week runs from a cursor position to the six days after it.
    """
    rule_params = {
        'dtstart': start,
        'interval': recurrence.interval,
        'until': recurrence.until,
    }
    if recurrence.pattern == 'weekly':
        rule_params['freq'] = rrule.WEEKLY
        rule_params['byweekday'] = [to_python_weekday(day) for day in recurrence.days_of_week]
        rule_params['wkst'] = start.weekday()
    else:
        rule_params['freq'] = rrule.DAILY
    return rrule.rrule(**rule_params)


def iter_calendar_steps(start: datetime, recurrence: Recurrence) -> Iterator[datetime]:
    """
    Monthly and yearly starts, anchored on the template start.

    relativedelta clamps to the last day of the target month, so a series
    starting on the 31st lands on Feb 28/29, Mar 31, Apr 30 and so on.
    """
    unit = 'months' if recurrence.pattern == 'monthly' else 'years'
    step = 0
    while True:
        current = start + relativedelta(**{unit: step * recurrence.interval})
        if current > recurrence.until:
            return
        yield current
        step += 1


def iter_starts(start: datetime, recurrence: Recurrence) -> Iterator[datetime]:
    """Chronological occurrence starts for a recurring template"""
    if recurrence.pattern in ('monthly', 'yearly'):
        yield from iter_calendar_steps(start, recurrence)
        return

    for occurrence_dt in create_rrule(start, recurrence):
        # rrule drops microseconds from dtstart
        occurrence_dt = occurrence_dt.replace(microsecond=start.microsecond)
        if occurrence_dt > recurrence.until:
            return
        yield occurrence_dt


def build_occurrence(template: Dict[str, Any], start: datetime, duration: timedelta) -> Dict[str, Any]:
    occurrence = dict(template)
    occurrence.update({
        'id': f"{template['id']}_{epoch_millis(start)}",
        'start_time': start,
        'end_time': start + duration,
        'is_recurring_instance': True,
        'original_event_id': template['id'],
    })
    return occurrence


def expand_event(template: Dict[str, Any], window_start: Optional[datetime] = None,
                 window_end: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """
    Expand one template into its occurrences.

    Args:
        template: Event template dict (see Event.as_template)
        window_start: Optional bound; earlier occurrences are skipped and not counted
            against the occurrence cap
        window_end: Optional bound; occurrences starting after it are not generated

    Returns:
        The template itself in a one-item list for one-off events, otherwise
        the generated occurrences in chronological order. Malformed recurrence
        settings yield an empty list.
    """
    recurrence = parse_recurrence(template)
    if recurrence is None:
        return [template]

    if recurrence.pattern not in PATTERNS:
        logger.warning("Event %s has unknown recurrence pattern %r, skipping",
                       template.get('id'), recurrence.pattern)
        return []

    if recurrence.until is None:
        logger.warning("Recurring event %s has no recurrence end date, skipping", template.get('id'))
        return []

    if recurrence.pattern == 'weekly' and not recurrence.days_of_week:
        logger.debug("Weekly event %s has no days of the week selected", template.get('id'))
        return []

    start = template['start_time']
    duration = get_duration(template)
    limit = get_max_occurrences()
    occurrences = []

    for occurrence_start in iter_starts(start, recurrence):
        if window_end is not None and occurrence_start > window_end:
            break
        if window_start is not None and occurrence_start < window_start:
            continue
        if len(occurrences) >= limit:
            logger.warning("Event %s expansion truncated at %d occurrences", template.get('id'), limit)
            break
        occurrences.append(build_occurrence(template, occurrence_start, duration))

    return occurrences


def expand_events(templates: Iterable[Dict[str, Any]], window_start: Optional[datetime] = None,
                  window_end: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """
    Expand every template, keeping the input order of templates and the
    chronological order within each one.
    """
    all_occurrences = []
    for template in templates:
        all_occurrences.extend(expand_event(template, window_start=window_start, window_end=window_end))
    return all_occurrences


def week_start_for(day: date) -> date:
    """Monday of the week containing the given day"""
    return day - timedelta(days=day.weekday())


def group_by_day(occurrences: Iterable[Dict[str, Any]], week_start: date, days: int = 7, tz=None) -> Dict[str, List[Dict[str, Any]]]:
    """
    Group occurrences by the calendar day they start on.

    Args:
        occurrences: Expanded occurrences
        week_start: First day of the display window
        days: Length of the window
        tz: Optional pytz timezone used to pick the local calendar day

    Returns:
        Mapping of ISO date string to occurrences for every day of the window,
        empty days included. Occurrences outside the window are dropped.
    """
    grouped = {
        (week_start + timedelta(days=offset)).isoformat(): []
        for offset in range(days)
    }

    for occurrence in occurrences:
        start = occurrence['start_time']
        if tz is not None and start.tzinfo is not None:
            start = start.astimezone(tz)
        bucket = grouped.get(start.date().isoformat())
        if bucket is not None:
            bucket.append(occurrence)

    return grouped


def summarize_by_type(grouped: Dict[str, List[Dict[str, Any]]]) -> Dict[str, int]:
    """Count the occurrences of a bucketed week per event type"""
    summary = {}
    for day_occurrences in grouped.values():
        for occurrence in day_occurrences:
            event_type = occurrence.get('event_type') or 'other'
            summary[event_type] = summary.get(event_type, 0) + 1
    return summary
