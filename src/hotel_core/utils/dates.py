from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Union


def from_iso_string(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        raise ValueError("Stored datetime must be timezone-aware")
    return dt.astimezone(timezone.utc)


def to_iso_string(dt: datetime) -> str:
    if dt.tzinfo is None:
        raise ValueError("Datetime must be timezone-aware")
    return dt.astimezone(timezone.utc).isoformat()


def parse_iso_date(value: Union[str, date]) -> date:
    """Accept a calendar date or a ``YYYY-MM-DD`` string.

    Datetimes are truncated to their date part; bookings never carry a
    time-of-day component.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError("Date must be a YYYY-MM-DD string")
    return date.fromisoformat(value[:10])


def nights_between(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def iter_nights(check_in: date, check_out: date) -> Iterator[date]:
    """Yield each calendar day in [check_in, check_out)."""
    day = check_in
    while day < check_out:
        yield day
        day += timedelta(days=1)


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    # half-open: a checkout on day X does not clash with a check-in on day X
    return start_a < end_b and end_a > start_b


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
