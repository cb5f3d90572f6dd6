"""반복 규칙 전개 유틸리티 — 패턴을 달력 날짜로 변환.

Recurrence expansion utilities — Turns a recurrence rule anchored at a
start date into the concrete calendar dates it produces.
Pure functions with no I/O; the generation service and the assignment
cascade both build on them.

Rules (anchor = pattern start date):
    DAILY: 매일 (every date)
    WEEKLY: 기준 요일과 같은 날 (same weekday as the anchor)
    BIWEEKLY: 같은 요일 + 기준일로부터 짝수 주 (same weekday, even week count)
    FIRST_OF_MONTH: 그 달의 첫 번째 기준 요일 (first such weekday of the month)
    LAST_OF_MONTH: 그 달의 마지막 기준 요일 (last such weekday of the month)
"""

from datetime import date, timedelta

from care_scheduler.models.enums import RecurrenceType
from care_scheduler.utils.exceptions import ValidationError

# 허용되는 반복 규칙 값 — Accepted rule values
RECURRENCE_TYPES: frozenset[str] = frozenset(r.value for r in RecurrenceType)


def validate_recurrence_type(recurrence_type: str) -> str:
    """반복 규칙 값을 검증합니다.

    Validate a recurrence type string.

    Raises:
        ValidationError: 알 수 없는 규칙일 때 (Unknown rule)
    """
    if recurrence_type not in RECURRENCE_TYPES:
        raise ValidationError(
            f"알 수 없는 반복 규칙입니다 (Unknown recurrence type: {recurrence_type})"
        )
    return recurrence_type


def occurs_on(recurrence_type: str, anchor: date, day: date) -> bool:
    """주어진 날짜가 규칙에 해당하는지 판단합니다.

    Return whether ``day`` matches the rule anchored at ``anchor``.
    Dates before the anchor never match.

    Args:
        recurrence_type: 반복 규칙 (Recurrence rule)
        anchor: 기준일 — 요일과 격주 기준 (Anchor date for weekday and parity)
        day: 검사할 날짜 (Date to test)

    Returns:
        bool: 해당 여부 (Whether the rule produces a shift on ``day``)
    """
    if day < anchor:
        return False
    if recurrence_type == RecurrenceType.DAILY:
        return True
    if day.weekday() != anchor.weekday():
        return False
    if recurrence_type == RecurrenceType.WEEKLY:
        return True
    if recurrence_type == RecurrenceType.BIWEEKLY:
        return ((day - anchor).days // 7) % 2 == 0
    if recurrence_type == RecurrenceType.FIRST_OF_MONTH:
        return day.day <= 7
    if recurrence_type == RecurrenceType.LAST_OF_MONTH:
        # 일주일 뒤가 다음 달이면 마지막 해당 요일
        return (day + timedelta(days=7)).month != day.month
    raise ValidationError(
        f"알 수 없는 반복 규칙입니다 (Unknown recurrence type: {recurrence_type})"
    )


def expand_dates(
    recurrence_type: str,
    anchor: date,
    window_start: date,
    window_end: date,
) -> list[date]:
    """규칙을 기간 안의 날짜 목록으로 전개합니다.

    Expand a rule into the ordered, de-duplicated dates it produces within
    ``[max(anchor, window_start), window_end]`` (both ends inclusive).

    Args:
        recurrence_type: 반복 규칙 (Recurrence rule)
        anchor: 패턴 시작일 (Pattern start date, the rule's anchor)
        window_start: 기간 시작일 (Window start, inclusive)
        window_end: 기간 종료일 (Window end, inclusive)

    Returns:
        list[date]: 오름차순 날짜 목록, 기간이 비면 빈 목록
                    (Ascending dates; empty when the window is empty)
    """
    validate_recurrence_type(recurrence_type)
    current: date = max(anchor, window_start)
    dates: list[date] = []
    while current <= window_end:
        if occurs_on(recurrence_type, anchor, current):
            dates.append(current)
        current += timedelta(days=1)
    return dates


def horizon_cap(today: date, years_ahead: int) -> date:
    """생성 상한일을 계산합니다 (31 December of ``today.year + years_ahead``)."""
    return date(today.year + years_ahead, 12, 31)
