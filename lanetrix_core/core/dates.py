from __future__ import annotations

import datetime as dt
import re

DATE_FORMAT = "YYYY-MM-DD"

_DATE_TOKEN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")


class DateParseError(ValueError):
    """Raised when a calendar-date token is not a valid `YYYY-MM-DD` string."""

    def __init__(self, token: object, reason: str) -> None:
        super().__init__(f"invalid date token {token!r}: {reason}")
        self.token = token
        self.reason = reason


def parse_date(token: str) -> dt.date:
    if not isinstance(token, str):
        raise DateParseError(token, f"expected {DATE_FORMAT} string, got {type(token).__name__}")
    match = _DATE_TOKEN.fullmatch(token)
    if match is None:
        raise DateParseError(token, f"expected {DATE_FORMAT}")
    year, month, day = (int(part) for part in match.groups())
    try:
        return dt.date(year, month, day)
    except ValueError as exc:
        raise DateParseError(token, str(exc)) from exc


def format_date(value: dt.date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def coerce_date(value: dt.date | str) -> dt.date:
    # datetime is a date subclass; drop the time-of-day component.
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    return parse_date(value)


def days_between(start: dt.date | str, end: dt.date | str) -> int:
    """Whole days from `start` to `end` (negative when `end` precedes `start`)."""
    return coerce_date(end).toordinal() - coerce_date(start).toordinal()


def add_days(value: dt.date | str, days: int) -> dt.date:
    return coerce_date(value) + dt.timedelta(days=int(days))


def today() -> dt.date:
    return dt.date.today()
