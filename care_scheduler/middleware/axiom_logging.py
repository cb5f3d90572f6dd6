"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Sends one structured event per scheduling API call to Axiom: method, path,
caller-supplied params, status code, duration, request id and error reason.
Sensitive fields are masked; clinical free text (notes, reasons) is
truncated so the log never carries full care notes.
"""

import json
import re
import time
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from axiom_py import Client as AxiomClient

from care_scheduler.config import settings
from care_scheduler.logging import get_logger

logger = get_logger(__name__)

# 마스킹 대상 필드 패턴 — Fields masked entirely
_SENSITIVE_KEYS = re.compile(
    r"(password|secret|token|authorization|api_key|credential)",
    re.IGNORECASE,
)

# 자유 텍스트 필드 — Free-text fields cut down to a short preview
_FREE_TEXT_KEYS = re.compile(r"(notes?|reason)$", re.IGNORECASE)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def _scrub(data: Any, depth: int = 0) -> Any:
    """민감 필드 마스킹 및 자유 텍스트 축약 (Mask secrets, shorten free text)."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        scrubbed: dict[str, Any] = {}
        for key, value in data.items():
            if _SENSITIVE_KEYS.search(key):
                scrubbed[key] = "***"
            elif _FREE_TEXT_KEYS.search(key) and isinstance(value, str):
                scrubbed[key] = value[:40] + ("..." if len(value) > 40 else "")
            else:
                scrubbed[key] = _scrub(value, depth + 1)
        return scrubbed
    if isinstance(data, list):
        return [_scrub(item, depth + 1) for item in data[:20]]
    return data


async def _read_json_body(request: Request) -> Any:
    """요청 본문을 JSON으로 읽습니다. JSON이 아니면 표시 문자열 반환."""
    body_bytes = await request.body()
    if not body_bytes:
        return None
    try:
        return _scrub(json.loads(body_bytes))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 스케줄링 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Also stamps every response with an X-Request-ID header (echoing the
    caller's header when present) so Axiom events can be correlated with
    client-side reports.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id: str = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        # 제외 경로 또는 Axiom 미설정 — Pass through untouched apart from the request id
        if request.url.path in _SKIP_PATHS or self._client is None:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response

        started: float = time.time()
        request_body: Any = None
        if request.method in ("POST", "PUT", "PATCH"):
            request_body = await _read_json_body(request)

        status_code: int = 500
        error_detail: str | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 사유 추출 — Pull the error reason out of 4xx/5xx bodies
            if status_code >= 400:
                raw = b""
                async for chunk in response.body_iterator:
                    raw += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                try:
                    error_detail = str(json.loads(raw).get("detail"))[:500]
                except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
                    error_detail = raw.decode("utf-8", errors="replace")[:500]

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=raw,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event: dict[str, Any] = {
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": round((time.time() - started) * 1000, 2),
            }
            if request.query_params:
                event["query_params"] = _scrub(dict(request.query_params))
            if request_body is not None:
                event["request_body"] = request_body
            if error_detail:
                event["error"] = error_detail

            try:
                self._client.ingest_events(self._dataset, [event])
            except Exception as exc:
                # 로깅 실패가 요청 처리에 영향주지 않도록 — Logging failures never break the request
                logger.warning("axiom_ingest_failed", error=str(exc), path=request.url.path)

        response.headers["X-Request-ID"] = request_id
        return response
