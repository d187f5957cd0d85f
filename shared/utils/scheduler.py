from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def start_scheduler():
    if not scheduler.running:
        scheduler.start()
        logger.info("Background scheduler started")


def stop_scheduler():
    # The asyncio executor cancels running jobs here: drain them before calling
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped")


def add_interval_job(func, seconds: int, job_id: str):
    """Register a non-overlapping interval job; overrun ticks are coalesced."""
    return scheduler.add_job(
        func,
        "interval",
        seconds=seconds,
        id=job_id,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )


def remove_job(job_id: str):
    """Stop future runs of a job. A run already in progress is left alone."""
    try:
        scheduler.remove_job(job_id)
    except JobLookupError:
        pass
