"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the scheduling error
taxonomy. Services raise these directly so routers never map status codes.

Usage:
    from care_scheduler.utils.exceptions import NotFoundError, ValidationError
    raise NotFoundError("Shift not found")
    raise ValidationError("Review notes are required when denying")

Conflicts are not exceptions: double-booking is returned as data next to
a successful mutation.
"""

from typing import Any

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a referenced shift, pattern, shift type or time-off
    request does not exist.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    Raised when a shift already exists for the same
    client + shift type + date combination.
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    Raised when the caller's role or relationships do not grant rights
    over the target client, caregiver or shift.
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


# 권한 오류 별칭 — Authorization failures are plain 403s
AuthorizationError = ForbiddenError


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Raised when the bearer token is missing, invalid, or expired.
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 상태 전이 시 사용.

    Raised for business rule violations on otherwise well-formed input
    (e.g. editing a completed shift, reviewing an already decided request).
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ValidationError(HTTPException):
    """422 Unprocessable Entity 예외 — 입력값 검증 실패 시 사용.

    Raised for malformed input that Pydantic cannot catch on its own:
    inverted date ranges, unknown enum values, denying without notes.
    Always raised before any write.
    """

    def __init__(self, detail: str = "Invalid input") -> None:
        super().__init__(status_code=422, detail=detail)


class PartialFailureError(HTTPException):
    """207 Multi-Status 예외 — 복합 작업 중 일부 단계만 성공했을 때 사용.

    Raised after earlier steps of a compound operation were committed and
    a later step failed. The detail lists which steps completed so the
    caller does not assume nothing was persisted.

    Args:
        message: 사람이 읽을 수 있는 설명 (Human-readable summary)
        completed_steps: 완료된 단계 이름 목록 (Names of committed steps)
        failed_step: 실패한 단계 이름 (Name of the step that failed)
        data: 이미 저장된 엔티티 정보 (Identifiers of what was persisted)
    """

    def __init__(
        self,
        message: str,
        completed_steps: list[str],
        failed_step: str,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=status.HTTP_207_MULTI_STATUS,
            detail={
                "message": message,
                "completed_steps": completed_steps,
                "failed_step": failed_step,
                "data": data or {},
            },
        )
