import logging
from datetime import datetime, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.core.database import SessionLocal
from app.services.test_session import TestSessionService

logger = logging.getLogger(__name__)


def abandon_expired_attempts():
    """
    Scheduled task that abandons attempts past their test's time limit.
    Attempts get ``abandon_grace_minutes`` on top of the limit.
    """
    db = SessionLocal()
    try:
        count = TestSessionService(db).abandon_expired_attempts(
            grace_minutes=settings.abandon_grace_minutes
        )
        logger.info(
            f"[{datetime.now(timezone.utc)}] Expiry sweep completed. "
            f"Abandoned {count} attempts."
        )
    except Exception as e:
        logger.error(f"Error during expiry sweep: {e}")
        db.rollback()
    finally:
        db.close()


def start_scheduler():
    """
    Initialize and start the APScheduler for the expiry sweep.
    """
    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        abandon_expired_attempts,
        trigger=IntervalTrigger(minutes=settings.abandon_sweep_interval_minutes),
        id="abandon_expired_attempts",
        name="Abandon expired test attempts",
        replace_existing=True,
    )

    scheduler.start()
    logger.info(
        "Attempt expiry scheduler started. Sweeping every "
        f"{settings.abandon_sweep_interval_minutes} minutes."
    )

    return scheduler


def shutdown_scheduler(scheduler: AsyncIOScheduler):
    """
    Gracefully shutdown the scheduler.
    """
    if scheduler:
        scheduler.shutdown()
        logger.info("Attempt expiry scheduler shut down.")
