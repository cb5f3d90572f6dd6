"""시각 파싱 및 시간 구간 겹침 계산 유틸리티.

Time parsing and time-range overlap helpers.
Wire format for times is "HH:MM" (24h). A range whose end is not after
its start runs past midnight (e.g. 22:00–06:00).
"""

import re
from datetime import time

from care_scheduler.utils.exceptions import ValidationError

# HH:MM 24시간 형식 — 00:00 ~ 23:59
_TIME_PATTERN: re.Pattern[str] = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_HEX_COLOR_PATTERN: re.Pattern[str] = re.compile(r"^#[0-9A-Fa-f]{6}$")

MINUTES_PER_DAY: int = 24 * 60


def parse_time(value: str, field: str = "time") -> time:
    """"HH:MM" 문자열을 time 객체로 변환합니다.

    Parse an "HH:MM" string into a time object.

    Args:
        value: 시각 문자열 (Time string)
        field: 오류 메시지에 쓰일 필드 이름 (Field name used in the error message)

    Returns:
        time: 파싱된 시각 (Parsed time)

    Raises:
        ValidationError: 형식이 잘못되었을 때 (When not HH:MM)
    """
    match = _TIME_PATTERN.match(value or "")
    if match is None:
        raise ValidationError(
            f"시각 형식이 올바르지 않습니다, HH:MM 필요 (Invalid {field}, expected HH:MM)"
        )
    return time(int(match.group(1)), int(match.group(2)))


def format_time(t: time | None) -> str | None:
    """time 객체를 "HH:MM" 문자열로 변환합니다 (Format a time as "HH:MM")."""
    if t is None:
        return None
    return t.strftime("%H:%M")


def validate_color(value: str) -> str:
    """#RRGGBB 색상 값을 검증합니다.

    Raises:
        ValidationError: 형식이 잘못되었을 때 (When not #RRGGBB)
    """
    if _HEX_COLOR_PATTERN.match(value or "") is None:
        raise ValidationError("색상 형식이 올바르지 않습니다 (Color must be #RRGGBB)")
    return value


def to_minutes(start: time, end: time) -> tuple[int, int]:
    """시간 구간을 자정 기준 분 단위로 변환합니다.

    Convert a time range to minutes since midnight. An end at or before
    the start is pushed to the following day.
    """
    start_minutes: int = start.hour * 60 + start.minute
    end_minutes: int = end.hour * 60 + end.minute
    if end_minutes <= start_minutes:
        end_minutes += MINUTES_PER_DAY
    return start_minutes, end_minutes


def ranges_overlap(start1: time, end1: time, start2: time, end2: time) -> bool:
    """두 시간 구간이 겹치는지 판단합니다 (반개구간).

    Half-open overlap test: ``start1 < end2 and start2 < end1``.
    Touching ranges (10:00–14:00 and 14:00–18:00) do not overlap.
    """
    a_start, a_end = to_minutes(start1, end1)
    b_start, b_end = to_minutes(start2, end2)
    return a_start < b_end and b_start < a_end
