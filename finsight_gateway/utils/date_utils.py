"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta


def days_ago(today: date, days: int) -> date:
    """Start of a trailing window of `days` days ending at `today`"""
    return today - timedelta(days=days)


def add_months(from_date: date, months: int) -> date:
    """Shift by whole calendar months, clamping the day to the target month's end"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_key(day: date) -> str:
    """Calendar bucket key, e.g. 2024-03"""
    return day.strftime("%Y-%m")


def short_month_label(day: date) -> str:
    """e.g. Mar 2024"""
    return day.strftime("%b %Y")


def long_month_label(day: date) -> str:
    """e.g. March 2024"""
    return day.strftime("%B %Y")
