"""휴가 요청 Pydantic 스키마.

Time-off request/response schemas.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field


class TimeOffCreate(BaseModel):
    """휴가 요청 생성 스키마.

    Time-off submission. One request row is created per client; rows
    from one submission share a group_id.

    Attributes:
        client_ids: 대상자 UUID 목록, 1개 이상 (Clients to request from)
        request_type: 유형 (DAY_OFF | SICK_LEAVE | VACATION)
        start_date / end_date: 기간, 양 끝 포함 (Inclusive range)
        reason: 사유, 선택 (Optional reason)
        is_emergency: 긴급 여부, 병가는 항상 True (Forced true for sick leave)
    """

    client_ids: list[UUID] = Field(min_length=1)
    request_type: str
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=2000)
    is_emergency: bool = False


class TimeOffReview(BaseModel):
    status: str  # "APPROVED" | "DENIED"
    review_notes: str | None = Field(default=None, max_length=2000)


class TimeOffResponse(BaseModel):
    id: str
    group_id: str | None
    caregiver_id: str
    caregiver_name: str | None
    client_id: str
    client_name: str | None
    request_type: str
    start_date: date
    end_date: date
    reason: str | None
    status: str
    is_emergency: bool
    review_notes: str | None
    reviewed_at: datetime | None
    dismissed: bool
    created_at: datetime


class TimeOffSubmitResponse(BaseModel):
    """휴가 제출 결과 (Submission summary)."""

    count: int  # 생성된 요청 수 (Requests created)
    group_id: str | None
    auto_approved: bool  # 병가 자동 승인 여부 (Emergency sick leave approved at creation)
    affected_shifts: int  # 자동 승인으로 해제된 시프트 수 (Shifts cleared by auto-approval)
    requests: list[TimeOffResponse]


class TimeOffReviewResponse(BaseModel):
    request: TimeOffResponse
    affected_shifts: int
