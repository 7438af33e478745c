"""
Week arithmetic for the reward calendar.

Weeks run Sunday through Saturday and every comparison happens on UTC
calendar days, so a reward keyed by ``2022-02-10T00:00:00Z`` matches any
timestamp on that UTC date whatever its time of day.
"""
from datetime import date, datetime
from typing import List

import pendulum
from pendulum import DateTime

from core.constants import DAYS_IN_WEEK, REWARD_WINDOW
from core.exceptions import InvalidDateError


def utc_now() -> DateTime:
    return pendulum.now("UTC")


def as_utc(value: datetime | date) -> DateTime:
    # naive datetimes (e.g. read back from SQLite) are taken as UTC
    if isinstance(value, datetime):
        return pendulum.instance(value, tz="UTC").in_timezone("UTC")
    if isinstance(value, date):
        return pendulum.datetime(value.year, value.month, value.day, tz="UTC")
    raise InvalidDateError()


def _check_week_in_range(moment: DateTime) -> None:
    # the whole week and the last reward's expiry must fit in datetime's range
    try:
        week_days(moment)[-1] + REWARD_WINDOW
    except (OverflowError, ValueError) as exc:
        raise InvalidDateError() from exc


def parse_date(value) -> DateTime:
    """
    Parse an ISO-8601 string (or pass through a date/datetime) into a
    UTC-aware DateTime. Raises InvalidDateError for anything that is not a
    real calendar date, or whose reward week falls outside the supported
    date range (e.g. 9999-12-31, 0001-01-01).
    """
    if isinstance(value, (datetime, date)):
        parsed = value
    elif not isinstance(value, str) or not value.strip():
        raise InvalidDateError()
    else:
        try:
            parsed = pendulum.parse(value.strip())
        except (ValueError, TypeError, OverflowError) as exc:
            raise InvalidDateError() from exc

    # pendulum also parses durations and bare times
    if not isinstance(parsed, (datetime, date)):
        raise InvalidDateError()

    try:
        moment = as_utc(parsed)
    except (OverflowError, ValueError) as exc:
        raise InvalidDateError() from exc
    _check_week_in_range(moment)
    return moment


def is_valid_date(value) -> bool:
    try:
        parse_date(value)
    except InvalidDateError:
        return False
    return True


def to_calendar_day(value: datetime | date) -> DateTime:
    """Strip the time of day: UTC midnight of the value's UTC date."""
    moment = as_utc(value)
    return pendulum.datetime(moment.year, moment.month, moment.day, tz="UTC")


def days_equal(a: datetime | date, b: datetime | date) -> bool:
    return to_calendar_day(a) == to_calendar_day(b)


def week_start(value: datetime | date) -> DateTime:
    # isoweekday: Monday=1 .. Sunday=7, so % 7 gives Sunday=0 .. Saturday=6
    moment = as_utc(value)
    return moment.subtract(days=moment.isoweekday() % DAYS_IN_WEEK)


def week_end(value: datetime | date) -> DateTime:
    return week_start(value).add(days=DAYS_IN_WEEK - 1)


def week_days(value: datetime | date) -> List[DateTime]:
    start = week_start(value)
    return [start.add(days=offset) for offset in range(DAYS_IN_WEEK)]


def in_week(value: datetime | date, reference: datetime | date) -> bool:
    day = to_calendar_day(value)
    return (
        to_calendar_day(week_start(reference))
        <= day
        <= to_calendar_day(week_end(reference))
    )

