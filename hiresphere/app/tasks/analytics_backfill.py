"""
Backfill: create zeroed analytics rows for jobs that predate analytics tracking.
Run via cron or: python -c "from hiresphere.app.tasks.analytics_backfill import run_backfill; print(run_backfill())"
"""
from sqlalchemy.orm import Session

from hiresphere.app.core.logging_config import get_logger
from hiresphere.app.db import session as db_session
from hiresphere.app.models.job import Job
from hiresphere.app.models.job_analytics import JobAnalytics
from hiresphere.app.services.job_analytics import ensure_job_analytics

logger = get_logger("tasks.analytics_backfill")


def backfill_job_analytics(db: Session) -> dict:
    """Insert an analytics row for every job without one. Existing rows are untouched."""
    missing = [
        job_id
        for (job_id,) in db.query(Job.id)
        .outerjoin(JobAnalytics, JobAnalytics.job_id == Job.id)
        .filter(JobAnalytics.id.is_(None))
        .all()
    ]
    for job_id in missing:
        ensure_job_analytics(db, job_id)
    db.commit()
    logger.info("Analytics backfill created=%d", len(missing))
    return {"created": len(missing)}


def run_backfill() -> dict:
    """Run backfill using a new DB session."""
    db = db_session.SessionLocal()
    try:
        return backfill_job_analytics(db)
    except Exception as e:
        db.rollback()
        return {"error": str(e), "created": 0}
    finally:
        db.close()
