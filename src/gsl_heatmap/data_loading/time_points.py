"""
Year-month time point keys.

A time point is a 'YYYY-MM' string, which sorts chronologically as text.
"""

from datetime import date
from typing import Optional

MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June', 'July',
    'August', 'September', 'October', 'November', 'December',
)


def format_time_point(year: int, month: int) -> str:
    """
    Build a time point key.

    >>> format_time_point(2003, 7)
    '2003-07'
    """
    return f'{int(year):04d}-{int(month):02d}'


def parse_time_point(time_point: str) -> tuple[int, int]:
    """
    Split a time point key into (year, month).

    Raises:
        ValueError: If the key is not a valid 'YYYY-MM' string
    """
    year_str, month_str = time_point.split('-')
    year, month = int(year_str), int(month_str)
    if not 1 <= month <= 12:
        raise ValueError(f'Invalid month in time point {time_point!r}')
    return year, month


def month_range(
    start_year: int,
    end: Optional[date] = None
) -> list[str]:
    """
    Every month from January of start_year through the month of end.

    Args:
        start_year: First year
        end: Last date to include (defaults to today)

    Returns:
        Sorted list of time point keys
    """
    end = end or date.today()
    points = []
    for year in range(start_year, end.year + 1):
        last_month = end.month if year == end.year else 12
        for month in range(1, last_month + 1):
            points.append(format_time_point(year, month))
    return points


def time_point_label(time_point: str) -> str:
    """
    Human readable label for a time point.

    >>> time_point_label('2012-03')
    'March - 2012'
    """
    if not time_point:
        return ''
    year, month = parse_time_point(time_point)
    return f'{MONTH_NAMES[month - 1]} - {year}'


def year_start_index(time_points: list[str], year: int) -> int:
    """
    Index of the first time point in or after the given year.

    Returns the last index when every time point is earlier, and 0 for an
    empty list.
    """
    prefix = f'{int(year):04d}'
    for index, time_point in enumerate(time_points):
        if time_point[:4] >= prefix:
            return index
    return max(len(time_points) - 1, 0)
