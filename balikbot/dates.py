from __future__ import annotations

import datetime as dt
from zoneinfo import ZoneInfo

ISO_FORMAT = "%Y-%m-%d"

# One booking week.
WEEK = dt.timedelta(hours=168)


def get_next_date(date_iso: str, tz_name: str = "Asia/Singapore") -> str:
    """Return the date one week after ``date_iso`` (both YYYY-MM-DD).

    The week is added as wall-clock time in ``tz_name``, so the result is
    always the same weekday seven calendar days later; the zone only has to
    exist. Raises ValueError for a malformed date.
    """
    tz = ZoneInfo(tz_name)
    start = dt.datetime.strptime(date_iso, ISO_FORMAT).replace(tzinfo=tz)
    return (start + WEEK).strftime(ISO_FORMAT)


def format_date(date_iso: str) -> str:
    # The booking site wants DD.MM.YYYY
    parsed = dt.datetime.strptime(date_iso, ISO_FORMAT).date()
    return parsed.strftime("%d.%m.%Y")
