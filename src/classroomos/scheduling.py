"""
Batch planner: activity generation and rescheduling.

Generated activities are only a preview until the planner confirms them with
``database.replace_activities``.
"""

from datetime import date, timedelta
from typing import Iterable, List, Optional

from . import time_blocks
from .config import get_settings
from .errors import NotFoundError
from .logging_config import get_logger
from .models import WEEK_DAYS, Activity, Batch, normalize_time

logger = get_logger(__name__)

# Walk limit when a batch has no usable end date
MAX_PLANNING_DAYS = 366


def format_time(time24: str) -> str:
    """Format "HH:MM" as a 12-hour label: "10:00" -> "10 am", "13:30" -> "1:30 pm"."""
    hours, minutes = (int(part) for part in time24.split(":")[:2])
    hour = (hours + 11) % 12 + 1
    suffix = "pm" if hours >= 12 else "am"
    if minutes:
        return f"{hour}:{minutes:02d} {suffix}"
    return f"{hour} {suffix}"


def format_time_range(start_time: str, end_time: str) -> str:
    return f"{format_time(start_time)} - {format_time(end_time)}"


def format_date(date_str: str) -> str:
    """Format an ISO date as "1 Sep 25"."""
    d = date.fromisoformat(date_str)
    return f"{d.day} {d.strftime('%b')} {d.strftime('%y')}"


def weekday_name(d: date) -> str:
    """Sun-first weekday name of a date."""
    return WEEK_DAYS[(d.weekday() + 1) % 7]


def activity_tag(index: int) -> str:
    """Tag of the activity at zero-based ``index`` in a generated run."""
    if index == 1:
        return "Exam"
    if index == 3:
        return "Play Day"
    if index == 5:
        return "Rating"
    return "Lecture"


def meeting_dates(batch: Batch, count: int, blocked_dates: Iterable[str] = ()) -> List[str]:
    """Up to ``count`` meeting dates from the batch start, skipping blocked dates.

    Dates fall on the batch's weekdays (every day when none are set) and never
    past the batch end date.
    """
    blocked = set(blocked_dates)
    current = date.fromisoformat(batch.start_date)
    try:
        last = date.fromisoformat(batch.end_date)
    except (TypeError, ValueError):
        last = current + timedelta(days=MAX_PLANNING_DAYS)

    dates = []
    while current <= last and len(dates) < count:
        iso = current.isoformat()
        if (not batch.days or weekday_name(current) in batch.days) and iso not in blocked:
            dates.append(iso)
        current += timedelta(days=1)
    return dates


def generate_activities(batch: Batch, start_time: Optional[str] = None,
                        end_time: Optional[str] = None, room: Optional[str] = None,
                        teachers: Optional[str] = None, count: Optional[int] = None,
                        blocked_dates: Optional[Iterable[str]] = None) -> List[Activity]:
    """Build a preview of ``count`` activities for a batch.

    Missing inputs fall back to the batch times and the configured default room,
    teachers and activity count. When ``blocked_dates`` is None the holidays and
    full-day time blocks of the batch's branch are skipped.
    """
    settings = get_settings()
    start_time = normalize_time(start_time or batch.start_time)
    end_time = normalize_time(end_time or batch.end_time)
    room = room if room is not None else settings.default_room
    teachers = teachers if teachers is not None else settings.default_teachers
    count = count or settings.activity_count
    if blocked_dates is None:
        blocked_dates = time_blocks.blocked_dates(batch.branch_id)

    activities = []
    for i, day in enumerate(meeting_dates(batch, count, blocked_dates)):
        n = i + 1
        activities.append(Activity(
            f"{batch.id}-act-{n}",
            batch.id,
            f"Class {n}",
            f"IRL{n:02d}",
            activity_tag(i),
            day,
            start_time,
            end_time,
            room,
            teachers,
        ))

    if len(activities) < count:
        logger.warning("activity_generation_short", batch_id=batch.id,
                       requested=count, generated=len(activities))
    logger.info("activities_generated", batch_id=batch.id, count=len(activities))
    return activities


def _find(activities: List[Activity], activity_id: str) -> Activity:
    for activity in activities:
        if activity.id == activity_id:
            return activity
    raise NotFoundError(f"Activity {activity_id} not found")


def sort_activities(activities: List[Activity]) -> List[Activity]:
    return sorted(activities, key=lambda a: (a.date, normalize_time(a.start_time)))


def reschedule_activity(activities: List[Activity], activity_id: str,
                        new_date: str) -> List[Activity]:
    """Move an activity to ``new_date`` and return the list re-sorted by date."""
    date.fromisoformat(new_date)
    activity = _find(activities, activity_id)
    activity.date = new_date
    logger.info("activity_rescheduled", activity_id=activity_id, date=new_date)
    return sort_activities(activities)


def change_activity_time(activities: List[Activity], activity_id: str,
                         new_time: str, is_start: bool) -> List[Activity]:
    """Replace the start (or end) time of one activity."""
    new_time = normalize_time(new_time)
    activity = _find(activities, activity_id)
    if is_start:
        activity.start_time = new_time
    else:
        activity.end_time = new_time
    logger.info("activity_time_changed", activity_id=activity_id,
                field="start_time" if is_start else "end_time", value=new_time)
    return activities
