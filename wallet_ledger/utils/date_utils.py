"""Date manipulation utilities"""

from datetime import date, datetime, timedelta
from typing import List, Tuple


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(moment: datetime, first_weekday: int = 0) -> datetime:
    """Midnight of the most recent `first_weekday` (0 = Monday) on or before `moment`"""
    offset = (moment.weekday() - first_weekday) % 7
    return start_of_day(moment) - timedelta(days=offset)


def start_of_month(year: int, month: int) -> datetime:
    return datetime(year, month, 1)


def add_months(year: int, month: int, months: int) -> Tuple[int, int]:
    """Shift a (year, month) pair by a signed number of months"""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """Half-open [first instant of month, first instant of next month)"""
    next_year, next_month = add_months(year, month, 1)
    return start_of_month(year, month), start_of_month(next_year, next_month)


def trailing_months(year: int, month: int, count: int) -> List[Tuple[int, int]]:
    """(year, month) pairs for the given month and the `count - 1` before it, newest first"""
    return [add_months(year, month, -i) for i in range(count)]


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end, ignoring time of day"""
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    return (end - start).days
