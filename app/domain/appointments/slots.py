"""
Slot generation from a doctor's weekly availability.

Slots are fixed 30 minute intervals starting at the day's start time. The
day's end time is exclusive: a slot is offered only if it starts before end.
"""

import logging
from datetime import date, datetime
from typing import Optional, Union

from ...models import WEEKDAYS
from ...shared.validators import minutes_to_time, time_to_minutes, validate_time

logger = logging.getLogger(__name__)

SLOT_MINUTES = 30
MINUTES_PER_DAY = 24 * 60


def weekday_name(on_date: Union[date, datetime]) -> str:
    return WEEKDAYS[on_date.weekday()]


def generate_slots(timings: Optional[dict], on_date: Union[date, datetime]) -> list[str]:
    """
    Candidate start times for one date.

    Returns [] when the weekday is missing from timings, marked unavailable,
    lacks a start or end time, or holds a time that is not HH:MM.
    """
    if not timings:
        return []

    day = timings.get(weekday_name(on_date))
    if not day or not day.get("available") or not day.get("start") or not day.get("end"):
        return []

    try:
        start = time_to_minutes(validate_time(str(day["start"])))
        end = time_to_minutes(validate_time(str(day["end"])))
    except ValueError:
        logger.warning(f"⚠️ Ignoring malformed {weekday_name(on_date)} timings: {day}")
        return []

    slots = []
    current = start
    while current < end:
        slots.append(minutes_to_time(current))
        current += SLOT_MINUTES
    return slots


def slot_end(start_time: str) -> str:
    """End of the slot that starts at start_time"""
    end = time_to_minutes(start_time) + SLOT_MINUTES
    if end >= MINUTES_PER_DAY:
        raise ValueError("Time slot must end before midnight")
    return minutes_to_time(end)
