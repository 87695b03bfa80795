from __future__ import annotations

import pytest

from balikbot.dates import format_date, get_next_date


def test_next_date_is_one_week_later() -> None:
    assert get_next_date("2023-01-01") == "2023-01-08"


def test_next_date_crosses_month_and_year() -> None:
    assert get_next_date("2023-12-28") == "2024-01-04"
    assert get_next_date("2024-02-26") == "2024-03-04"


def test_next_date_twice_advances_two_weeks() -> None:
    assert get_next_date(get_next_date("2023-01-01")) == "2023-01-15"


def test_next_date_in_dst_timezone_stays_on_same_weekday() -> None:
    # 168 hours of wall-clock time, even across a DST switch.
    assert get_next_date("2023-03-22", "Europe/Berlin") == "2023-03-29"


def test_next_date_rejects_malformed_input() -> None:
    with pytest.raises(ValueError):
        get_next_date("08.01.2023")


def test_format_date() -> None:
    assert format_date("2023-01-08") == "08.01.2023"
