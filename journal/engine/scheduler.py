"""APScheduler integration for FastAPI.

Runs the periodic balance audit when ``reconcile_interval_minutes`` is set.
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlmodel import Session

from journal.config import settings
from journal import database
from journal.services.reconciliation import audit_balances

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()

RECONCILE_JOB_ID = "balance_audit"


async def run_balance_audit():
    """One audit pass over every account; drift is recorded, not corrected."""
    try:
        with Session(database.engine) as session:
            drifts = audit_balances(session, fix=False, record=True)
    except Exception as e:
        logger.error(f"Balance audit failed: {e}")
        return []
    if drifts:
        logger.warning(f"Balance audit found {len(drifts)} drifted account(s)")
    return drifts


def add_audit_job(interval_minutes: int):
    """Add or replace the balance audit job."""
    scheduler.add_job(
        run_balance_audit,
        trigger=IntervalTrigger(minutes=interval_minutes),
        id=RECONCILE_JOB_ID,
        name="Balance audit",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=60,
    )
    logger.info(f"Scheduled balance audit every {interval_minutes}m")


def start_scheduler():
    """Start the scheduler if any periodic work is configured."""
    if settings.reconcile_interval_minutes <= 0:
        logger.info("Balance audit disabled (reconcile_interval_minutes=0)")
        return
    add_audit_job(settings.reconcile_interval_minutes)
    scheduler.start()
    logger.info(f"Scheduler started with {len(scheduler.get_jobs())} jobs")


def stop_scheduler():
    """Shut down the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")


def get_scheduler_status() -> dict:
    """Return current scheduler state for the API."""
    jobs = scheduler.get_jobs()
    return {
        "running": scheduler.running,
        "job_count": len(jobs),
        "jobs": [
            {
                "id": j.id,
                "name": j.name,
                "next_run": str(j.next_run_time) if j.next_run_time else None,
                "trigger": str(j.trigger),
            }
            for j in jobs
        ],
    }
