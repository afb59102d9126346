"""Period resolver tests: token bounds, week start, custom no-op, filtering."""

from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from pokerlog.analytics.period import (
    UNBOUNDED,
    end_of_day,
    filter_by_period,
    get_week_start,
    resolve_period,
    start_of_day,
)
from pokerlog.errors import InputValidationError

# Wednesday
NOW = datetime(2024, 3, 13, 15, 30, tzinfo=timezone.utc)


def _s(day: date) -> SimpleNamespace:
    return SimpleNamespace(date=day)


class TestWeekStart:
    def test_sunday_is_its_own_week_start(self):
        assert get_week_start(date(2024, 3, 10)) == date(2024, 3, 10)

    def test_saturday_goes_back_six_days(self):
        assert get_week_start(date(2024, 3, 16)) == date(2024, 3, 10)

    def test_midweek(self):
        assert get_week_start(date(2024, 3, 13)) == date(2024, 3, 10)


class TestResolvePeriod:
    def test_today(self):
        bounds = resolve_period("today", now=NOW)
        assert bounds.start == start_of_day(date(2024, 3, 13))
        assert bounds.end == end_of_day(date(2024, 3, 13))

    def test_end_normalized_to_last_millisecond(self):
        bounds = resolve_period("today", now=NOW)
        assert (bounds.end.hour, bounds.end.minute, bounds.end.second) == (23, 59, 59)
        assert bounds.end.microsecond == 999000
        assert (bounds.start.hour, bounds.start.minute, bounds.start.microsecond) == (0, 0, 0)

    def test_week_starts_on_sunday(self):
        bounds = resolve_period("week", now=NOW)
        assert bounds.start.date() == date(2024, 3, 10)
        assert bounds.end.date() == date(2024, 3, 13)

    def test_month(self):
        bounds = resolve_period("month", now=NOW)
        assert bounds.start.date() == date(2024, 3, 1)

    def test_last30(self):
        bounds = resolve_period("last30", now=NOW)
        assert bounds.start.date() == date(2024, 2, 12)

    def test_all_is_unbounded(self):
        assert resolve_period("all", now=NOW) == UNBOUNDED

    def test_missing_token_means_all(self):
        assert resolve_period(None) == UNBOUNDED

    def test_custom_with_both_bounds(self):
        bounds = resolve_period("custom", date(2024, 1, 1), date(2024, 1, 31))
        assert bounds.start.date() == date(2024, 1, 1)
        assert bounds.end.date() == date(2024, 1, 31)

    def test_custom_with_only_start_is_noop(self):
        assert resolve_period("custom", date(2024, 1, 1), None) == UNBOUNDED

    def test_custom_with_only_end_is_noop(self):
        assert resolve_period("custom", None, date(2024, 1, 1)) == UNBOUNDED

    def test_custom_start_after_end_rejected(self):
        with pytest.raises(InputValidationError) as exc_info:
            resolve_period("custom", date(2024, 2, 1), date(2024, 1, 1))
        assert exc_info.value.field == "start_date"

    def test_unknown_token_rejected(self):
        with pytest.raises(InputValidationError) as exc_info:
            resolve_period("fortnight")
        assert exc_info.value.field == "period"

    def test_today_follows_calendar_timezone(self):
        # 23:30 UTC on the 13th is already the 14th in Seoul.
        late = datetime(2024, 3, 13, 23, 30, tzinfo=timezone.utc)
        bounds = resolve_period("today", now=late, tz="Asia/Seoul")
        assert bounds.start.date() == date(2024, 3, 14)


class TestFilterByPeriod:
    def test_bounds_are_inclusive_on_both_ends(self):
        sessions = [_s(date(2024, 1, 1)), _s(date(2024, 1, 15)), _s(date(2024, 1, 31)), _s(date(2024, 2, 1))]
        bounds = resolve_period("custom", date(2024, 1, 1), date(2024, 1, 31))
        assert [s.date.day for s in filter_by_period(sessions, bounds)] == [1, 15, 31]

    def test_custom_with_only_start_matches_everything(self):
        sessions = [_s(date(2023, 1, 1)), _s(date(2024, 6, 1))]
        bounds = resolve_period("custom", date(2024, 1, 1), None)
        assert len(filter_by_period(sessions, bounds)) == 2

    def test_week_excludes_previous_saturday(self):
        sessions = [_s(date(2024, 3, 9)), _s(date(2024, 3, 10)), _s(date(2024, 3, 13))]
        bounds = resolve_period("week", now=NOW)
        assert [s.date.day for s in filter_by_period(sessions, bounds)] == [10, 13]
