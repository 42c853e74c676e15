# File: campcheck/core/scheduler.py
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from campcheck.core.config import settings
import logging

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()

def reconcile_current_event():
    """Heal roster pointers of the current event from its ledger"""
    from campcheck import crud
    from campcheck.core.exceptions import AttendanceError
    from campcheck.db.database import SessionLocal
    from campcheck.services.transition_processor import reconcile_roster

    db = SessionLocal()
    try:
        current = crud.event.get_current(db)
        if not current:
            return None
        report = reconcile_roster(db, event_id=current.id, repair=True)
        if report.divergences:
            logger.warning(f"Reconciliation repaired {len(report.divergences)} participants in event {current.id}")
        return report
    except AttendanceError as e:
        logger.error(f"Scheduled reconciliation failed: {e.message}")
        return None
    finally:
        db.close()

def start_scheduler():
    """Start all scheduled jobs"""
    from campcheck.services.snapshot_service import snapshot_service

    try:
        # Keep the dashboard snapshot of the current event fresh
        scheduler.add_job(
            snapshot_service.refresh_current_event,
            trigger=IntervalTrigger(seconds=settings.SNAPSHOT_REFRESH_INTERVAL_SECONDS),
            id='snapshot_refresh',
            name='Refresh current event attendance snapshot',
            replace_existing=True,
            max_instances=2
        )

        # Detect and heal roster/ledger divergence
        scheduler.add_job(
            reconcile_current_event,
            trigger=IntervalTrigger(seconds=settings.RECONCILE_INTERVAL_SECONDS),
            id='roster_reconciliation',
            name='Reconcile roster with attendance ledger',
            replace_existing=True
        )

        scheduler.start()
        logger.info("✅ Scheduler started successfully")
        logger.info(f"Active jobs: {len(scheduler.get_jobs())}")
    except Exception as e:
        logger.error(f"Failed to start scheduler: {e}")

def stop_scheduler():
    """Stop scheduler gracefully"""
    try:
        if scheduler.running:
            scheduler.shutdown()
        logger.info("Scheduler stopped")
    except Exception as e:
        logger.error(f"Error stopping scheduler: {e}")
