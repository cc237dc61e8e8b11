from datetime import date, datetime, timedelta
from typing import Iterator, List, Tuple, TypeVar, Union

T = TypeVar("T")


def to_date(value: Union[date, datetime]) -> date:
    """Drop the time part of a datetime; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def date_range(start_date: date, end_date: date) -> Iterator[date]:
    """Every calendar day from start_date to end_date, both inclusive."""
    for offset in range((end_date - start_date).days + 1):
        yield start_date + timedelta(days=offset)


def month_start(value: date) -> date:
    return value.replace(day=1)


def previous_month_start(value: date) -> date:
    return (month_start(value) - timedelta(days=1)).replace(day=1)


def week_bounds(value: date) -> Tuple[date, date]:
    """Monday and Sunday of the week containing value."""
    monday = value - timedelta(days=value.weekday())
    return monday, monday + timedelta(days=6)


def split_list(items: List[T], chunk_size: int) -> List[List[T]]:
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")
    return [items[i:i + chunk_size] for i in range(0, len(items), chunk_size)]
