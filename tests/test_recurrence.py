"""반복 규칙 전개 및 시간 구간 유틸리티 테스트.

Recurrence expander and time-range helper tests — pure functions, no DB.
Calendar reference: 2025-06-04 is a Wednesday, 2025-06-02 a Monday.
"""

from datetime import date, time

import pytest

from care_scheduler.utils.exceptions import ValidationError
from care_scheduler.utils.recurrence import expand_dates, horizon_cap, occurs_on, validate_recurrence_type
from care_scheduler.utils.time_range import format_time, parse_time, ranges_overlap, validate_color


class TestExpandDates:
    """규칙별 날짜 전개 테스트."""

    def test_daily_starts_at_anchor(self):
        """DAILY — 기준일 이전 날짜는 포함되지 않음."""
        dates = expand_dates("DAILY", date(2025, 6, 4), date(2025, 6, 1), date(2025, 6, 6))
        assert dates == [date(2025, 6, 4), date(2025, 6, 5), date(2025, 6, 6)]

    def test_weekly_same_weekday(self):
        """WEEKLY — 기준 요일(수요일)만."""
        dates = expand_dates("WEEKLY", date(2025, 6, 4), date(2025, 6, 4), date(2025, 6, 30))
        assert dates == [date(2025, 6, 4), date(2025, 6, 11), date(2025, 6, 18), date(2025, 6, 25)]

    def test_biweekly_even_weeks(self):
        """BIWEEKLY — 기준일로부터 짝수 주만."""
        dates = expand_dates("BIWEEKLY", date(2025, 6, 4), date(2025, 6, 4), date(2025, 7, 16))
        assert dates == [date(2025, 6, 4), date(2025, 6, 18), date(2025, 7, 2), date(2025, 7, 16)]

    def test_biweekly_parity_kept_when_window_starts_later(self):
        """BIWEEKLY — 기간 시작이 늦어도 기준일 기준 주차 유지."""
        dates = expand_dates("BIWEEKLY", date(2025, 6, 4), date(2025, 6, 10), date(2025, 6, 30))
        assert dates == [date(2025, 6, 18)]

    def test_first_of_month(self):
        """FIRST_OF_MONTH — 매달 첫 월요일."""
        dates = expand_dates("FIRST_OF_MONTH", date(2025, 6, 2), date(2025, 6, 1), date(2025, 8, 31))
        assert dates == [date(2025, 6, 2), date(2025, 7, 7), date(2025, 8, 4)]

    def test_last_of_month(self):
        """LAST_OF_MONTH — 매달 마지막 월요일."""
        dates = expand_dates("LAST_OF_MONTH", date(2025, 6, 2), date(2025, 6, 1), date(2025, 8, 31))
        assert dates == [date(2025, 6, 30), date(2025, 7, 28), date(2025, 8, 25)]

    def test_empty_window(self):
        """기간이 비어 있으면 빈 목록."""
        assert expand_dates("DAILY", date(2025, 6, 4), date(2025, 6, 10), date(2025, 6, 9)) == []

    def test_window_ends_before_anchor(self):
        """기간이 기준일 전에 끝나면 빈 목록."""
        assert expand_dates("WEEKLY", date(2025, 6, 4), date(2025, 5, 1), date(2025, 6, 3)) == []

    def test_unknown_rule_rejected(self):
        """알 수 없는 규칙 — ValidationError."""
        with pytest.raises(ValidationError):
            expand_dates("HOURLY", date(2025, 6, 4), date(2025, 6, 4), date(2025, 6, 30))


class TestOccursOn:
    """단일 날짜 판정 테스트."""

    def test_other_weekday_never_matches(self):
        assert not occurs_on("WEEKLY", date(2025, 6, 4), date(2025, 6, 5))

    def test_before_anchor_never_matches(self):
        assert not occurs_on("DAILY", date(2025, 6, 4), date(2025, 6, 3))

    def test_odd_week_excluded_for_biweekly(self):
        assert not occurs_on("BIWEEKLY", date(2025, 6, 4), date(2025, 6, 11))

    def test_validate_recurrence_type(self):
        assert validate_recurrence_type("LAST_OF_MONTH") == "LAST_OF_MONTH"
        with pytest.raises(ValidationError):
            validate_recurrence_type("monthly")


class TestHorizonCap:
    """생성 상한 계산 테스트."""

    def test_one_year_ahead(self):
        assert horizon_cap(date(2025, 3, 15), 1) == date(2026, 12, 31)

    def test_zero_years_ahead(self):
        assert horizon_cap(date(2025, 3, 15), 0) == date(2025, 12, 31)


class TestTimeRanges:
    """시간 구간 겹침 및 형식 검사 테스트."""

    def test_overlapping_ranges(self):
        assert ranges_overlap(time(8), time(12), time(11), time(13))

    def test_touching_ranges_do_not_overlap(self):
        """반개구간 — 끝과 시작이 맞닿으면 겹치지 않음."""
        assert not ranges_overlap(time(10), time(14), time(14), time(18))

    def test_contained_range(self):
        assert ranges_overlap(time(8), time(18), time(10), time(11))

    def test_overnight_range_overlaps_late_evening(self):
        """자정을 넘는 구간 — 22:00–06:00 과 23:00–01:00 은 겹침."""
        assert ranges_overlap(time(22), time(6), time(23), time(1))

    def test_overnight_range_does_not_overlap_same_morning(self):
        """같은 날 아침 구간은 전날 밤 구간과 별개."""
        assert not ranges_overlap(time(22), time(6), time(5), time(7))

    def test_parse_and_format_time(self):
        assert parse_time("07:30") == time(7, 30)
        assert format_time(time(7, 30)) == "07:30"
        assert format_time(None) is None

    @pytest.mark.parametrize("value", ["7:30", "24:00", "12:60", "noon", ""])
    def test_parse_time_rejects_malformed(self, value):
        with pytest.raises(ValidationError):
            parse_time(value, "start_time")

    def test_validate_color(self):
        assert validate_color("#A1b2C3") == "#A1b2C3"
        with pytest.raises(ValidationError):
            validate_color("blue")
