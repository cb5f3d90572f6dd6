"""애플리케이션 로깅 설정 — structlog JSON 로그.

Application logging setup — structlog emitting JSON lines.
HTTP request logs go to Axiom through the middleware; this module covers
service-level events (generation runs, time-off cascades, delivery failures).
"""

import logging

import structlog

from care_scheduler.config import settings


def setup_logging() -> None:
    """structlog을 JSON 렌더러로 구성합니다.

    Configure stdlib logging and structlog once at startup.
    """
    level: int = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=level)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """모듈 이름으로 바인딩된 로거를 반환합니다 (Return a logger bound to a module name)."""
    return structlog.get_logger(name)
