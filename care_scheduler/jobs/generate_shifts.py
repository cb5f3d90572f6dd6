"""시프트 생성 배치 스크립트 — 외부 스케줄러(cron)용 엔트리포인트.

Generation batch script — Entry point for external schedulers (cron).
Runs the generation job over every active pattern (or one client) and
prints the JSON summary.

Usage:
    python -m care_scheduler.jobs.generate_shifts
    python -m care_scheduler.jobs.generate_shifts --client-id <uuid> --horizon-end 2026-12-31
"""

import argparse
import asyncio
import json
from datetime import date
from uuid import UUID

from care_scheduler.database import job_session
from care_scheduler.logging import setup_logging
from care_scheduler.services.generation_service import generation_service


async def run(client_id: UUID | None = None, horizon_end: date | None = None) -> dict:
    """생성 작업을 한 번 실행합니다 (Run the generation job once)."""
    async with job_session() as db:
        summary: dict = await generation_service.run_generation(
            db, client_id=client_id, horizon_end=horizon_end
        )
    return summary


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate shifts from active recurrence patterns")
    parser.add_argument("--client-id", type=UUID, default=None, help="Only this client's patterns")
    parser.add_argument("--horizon-end", type=date.fromisoformat, default=None, help="Last date (YYYY-MM-DD), clamped to the cap")
    args = parser.parse_args()

    setup_logging()
    summary: dict = asyncio.run(run(args.client_id, args.horizon_end))
    print(json.dumps(summary, default=str))


if __name__ == "__main__":
    main()
