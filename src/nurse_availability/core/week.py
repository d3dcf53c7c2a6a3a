'''
Week arithmetic for the displayed grid.

Python weekdays run 0=Monday..6=Sunday; the workforce API's day_of_week
runs 0=Sunday..6=Saturday. Everything here converts between the two.
'''
from datetime import date, timedelta

from ..common.config import settings

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def week_start_for(day: date, first_day_of_week: int | None = None) -> date:
    """
    Returns the first date of the week containing `day`.
    first_day_of_week is a Python weekday (0=Monday).
    """
    if first_day_of_week is None:
        first_day_of_week = settings.FIRST_DAY_OF_WEEK
    days_back = (day.weekday() - first_day_of_week) % DAYS_PER_WEEK
    return day - timedelta(days=days_back)


def week_dates(week_start: date) -> list[date]:
    return [week_start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


def api_day_of_week(day: date) -> int:
    """0=Sunday, 6=Saturday, matching the workforce API."""
    return day.isoweekday() % DAYS_PER_WEEK


def get_day_name(day_of_week: int) -> str:
    if 0 <= day_of_week < DAYS_PER_WEEK:
        return DAY_NAMES[day_of_week]
    raise ValueError("day_of_week must be between 0 and 6")
