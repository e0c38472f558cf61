"""Cancellable scheduled tasks backed by APScheduler"""
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable
from apscheduler.jobstores.base import JobLookupError
import logging

logger = logging.getLogger(__name__)


class TimerService:
    """
    One-shot delayed callbacks on an AsyncIOScheduler

    Args:
        scheduler: A started apscheduler AsyncIOScheduler
    """

    def __init__(self, scheduler):
        self.scheduler = scheduler

    def schedule(self, job_id: str, delay: float, callback: Callable[[], Awaitable[None]]) -> None:
        run_date = datetime.now(timezone.utc) + timedelta(seconds=delay)
        self.scheduler.add_job(
            callback,
            "date",
            run_date=run_date,
            id=job_id,
            name=f"Widget timer {job_id}",
            replace_existing=True,
            misfire_grace_time=None
        )

    def cancel(self, job_id: str) -> None:
        """Cancel a pending job; already fired or unknown jobs are ignored"""
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            logger.debug(f"Timer {job_id} already fired or cancelled")
