"""
Alert processor - one scheduled run over all active alerts of a frequency.

Each alert is handled on its own: a failure is logged, rolled back and counted,
and the batch carries on. last_sent_at only advances after a successful send.
"""
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hiresphere.app.core.config import ALERT_FREQUENCIES, settings
from hiresphere.app.core.logging_config import get_logger
from hiresphere.app.db import session as db_session
from hiresphere.app.models.job_alert import JobAlert
from hiresphere.app.models.user import User
from hiresphere.app.services.alert_notifier import AlertNotifier, get_alert_notifier
from hiresphere.app.services.alert_service import mark_alert_sent
from hiresphere.app.services.job_matcher import find_matching_jobs

logger = get_logger("services.alert_processor")


@dataclass
class AlertRunSummary:
    frequency: str
    total: int = 0
    sent: int = 0
    skipped: int = 0
    failed: int = 0


class AlertProcessor:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        notifier: AlertNotifier,
        match_limit: int | None = None,
    ):
        self.session_factory = session_factory
        self.notifier = notifier
        self.match_limit = match_limit or settings.alert_match_limit

    def process_alerts(self, frequency: str) -> AlertRunSummary:
        if frequency not in ALERT_FREQUENCIES:
            raise ValueError(f"Unknown alert frequency: {frequency!r}")

        summary = AlertRunSummary(frequency=frequency)
        logger.info("Starting alert processing frequency=%s", frequency)
        db = self.session_factory()
        try:
            try:
                alert_ids = [
                    row.id
                    for row in db.query(JobAlert.id)
                    .filter(JobAlert.is_active.is_(True), JobAlert.frequency == frequency)
                    .order_by(JobAlert.id)
                    .all()
                ]
            except SQLAlchemyError:
                logger.exception("Failed to load alerts frequency=%s", frequency)
                return summary

            summary.total = len(alert_ids)
            logger.info("Found %d active alerts frequency=%s", summary.total, frequency)

            for alert_id in alert_ids:
                try:
                    sent = self._process_alert(db, alert_id)
                except Exception:
                    db.rollback()
                    summary.failed += 1
                    logger.exception("Error processing alert_id=%s", alert_id)
                    continue
                if sent:
                    summary.sent += 1
                else:
                    summary.skipped += 1
        finally:
            db.close()

        logger.info(
            "Completed alert processing frequency=%s total=%d sent=%d skipped=%d failed=%d",
            frequency,
            summary.total,
            summary.sent,
            summary.skipped,
            summary.failed,
        )
        return summary

    def _process_alert(self, db: Session, alert_id: int) -> bool:
        alert = db.get(JobAlert, alert_id)
        if alert is None:
            return False

        job_seeker = db.get(User, alert.job_seeker_id)
        if job_seeker is None:
            logger.info("Skipping alert_id=%s - job seeker %s not found", alert.id, alert.job_seeker_id)
            return False
        if not job_seeker.alerts_enabled:
            logger.info("Skipping alert_id=%s for %s - alerts disabled in profile", alert.id, job_seeker.email)
            return False

        jobs = find_matching_jobs(db, alert, alert.last_sent_at, limit=self.match_limit)
        if not jobs:
            return False

        if not self.notifier.send_alert(job_seeker, alert, jobs):
            return False

        # Advance to the newest job emailed
        mark_alert_sent(db, alert.id, max(job.created_at for job in jobs))
        logger.info("Alert processed alert_id=%s to=%s jobs=%d", alert.id, job_seeker.email, len(jobs))
        return True


def process_job_alerts(
    frequency: str,
    session_factory: Callable[[], Session] | None = None,
    notifier: AlertNotifier | None = None,
) -> AlertRunSummary:
    """Run one batch for frequency with the process-wide session factory and notifier."""
    processor = AlertProcessor(
        session_factory=session_factory or db_session.SessionLocal,
        notifier=notifier or get_alert_notifier(),
    )
    return processor.process_alerts(frequency)
