"""Business hours evaluation"""
from datetime import datetime
from typing import Optional, Tuple
from zoneinfo import ZoneInfo
import logging

from chatwidget.models.config import BusinessHours, WeeklySchedule, WEEKDAYS, DEFAULT_TIMEZONE, DEFAULT_OFFLINE_MESSAGE

logger = logging.getLogger(__name__)


def _clock(value: str) -> Tuple[int, int]:
    """Parse "H:MM" / "HH:MM" into (hour, minute)"""
    hour, minute = value.strip().split(":")
    hour, minute = int(hour), int(minute)
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time {value!r}")
    return hour, minute


def is_within_schedule(schedule: Optional[WeeklySchedule], timezone: Optional[str], now: datetime) -> bool:
    """
    Check a weekly schedule against an instant

    Args:
        schedule: Weekly open/close schedule
        timezone: IANA timezone name the schedule is expressed in
        now: Timezone-aware current instant

    Returns:
        True when open. An empty schedule means 24/7 and any
        resolution failure fails open.
    """
    if schedule is None or schedule.is_empty():
        return True

    try:
        local = now.astimezone(ZoneInfo(timezone or DEFAULT_TIMEZONE))
        weekday = WEEKDAYS[local.weekday()]
        current = (local.hour, local.minute)

        today = schedule.for_weekday(weekday)
        if today is None or today.closed:
            return False

        return _clock(today.open) <= current <= _clock(today.close)
    except Exception as e:
        logger.error(f"Error checking business hours: {e}")
        return True


def is_open(business_hours: Optional[BusinessHours], now: datetime) -> bool:
    """Open/closed status; disabled business hours are always open"""
    if business_hours is None or not business_hours.enabled:
        return True
    return is_within_schedule(business_hours.schedule, business_hours.timezone, now)


def offline_message(business_hours: Optional[BusinessHours]) -> str:
    if business_hours is None:
        return DEFAULT_OFFLINE_MESSAGE
    return business_hours.offline_message or DEFAULT_OFFLINE_MESSAGE
