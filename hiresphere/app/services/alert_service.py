"""
Alert store service - owner CRUD over job alerts plus the last-sent bookkeeping
the alert processor relies on.
"""
from datetime import datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.orm import Session

from hiresphere.app.core.config import ALERT_NAME_KEYWORDS_CHARS, USER_TYPE_JOBSEEKER, settings
from hiresphere.app.core.exceptions import NotFoundError, PermissionDeniedError, ValidationFailedError
from hiresphere.app.core.logging_config import get_logger
from hiresphere.app.models.job_alert import JobAlert
from hiresphere.app.models.user import User
from hiresphere.app.schemas.job_alert import JobAlertCreate, JobAlertUpdate
from hiresphere.app.services.alert_notifier import AlertNotifier, send_alert_email
from hiresphere.app.services.job_matcher import find_matching_jobs

logger = get_logger("services.alert")


def _require_jobseeker(user: User, action: str) -> None:
    if user.type != USER_TYPE_JOBSEEKER:
        raise PermissionDeniedError(f"Access denied. Only job seekers can {action} alerts.")


def default_alert_name(keywords: list[str]) -> str:
    return f"Alert: {', '.join(keywords)[:ALERT_NAME_KEYWORDS_CHARS]}..."


def create_alert(db: Session, user: User, payload: JobAlertCreate) -> JobAlert:
    """Create an alert for the seeker and switch their alert emails on if they were off."""
    _require_jobseeker(user, "create")
    if not payload.keywords:
        raise ValidationFailedError("Keywords are required")

    alert = JobAlert(
        job_seeker_id=user.id,
        name=(payload.name or "").strip() or default_alert_name(payload.keywords),
        keywords=payload.keywords,
        locations=payload.locations,
        job_types=list(payload.job_types),
        salary_min=payload.salary.min,
        salary_max=payload.salary.max,
        salary_currency=payload.salary.currency,
        frequency=payload.frequency,
        is_active=payload.is_active,
    )
    db.add(alert)
    if not user.alerts_enabled:
        logger.info("Enabling alert emails for user_id=%s", user.id)
        db.query(User).filter(User.id == user.id).update(
            {User.alerts_enabled: True}, synchronize_session=False
        )
    db.commit()
    db.refresh(alert)
    logger.info("Alert created alert_id=%s user_id=%s frequency=%s", alert.id, user.id, alert.frequency)
    return alert


def list_alerts(db: Session, user: User) -> list[JobAlert]:
    _require_jobseeker(user, "access")
    return (
        db.query(JobAlert)
        .filter(JobAlert.job_seeker_id == user.id)
        .order_by(JobAlert.created_at.desc(), JobAlert.id.desc())
        .all()
    )


def get_owned_alert(db: Session, user: User, alert_id: int) -> JobAlert:
    alert = db.get(JobAlert, alert_id)
    if alert is None:
        raise NotFoundError("Alert not found")
    if alert.job_seeker_id != user.id:
        raise PermissionDeniedError("Access denied. You can only manage your own alerts.")
    return alert


def update_alert(db: Session, user: User, alert_id: int, payload: JobAlertUpdate) -> JobAlert:
    """Apply the provided fields. last_sent_at is not owner-editable."""
    _require_jobseeker(user, "update")
    alert = get_owned_alert(db, user, alert_id)

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "keywords" in data and not data["keywords"]:
        raise ValidationFailedError("Keywords are required")
    salary = data.pop("salary", None)
    if salary is not None:
        alert.salary_min = salary["min"]
        alert.salary_max = salary["max"]
        alert.salary_currency = salary["currency"]
    for key, value in data.items():
        setattr(alert, key, value)

    db.commit()
    db.refresh(alert)
    return alert


def delete_alert(db: Session, user: User, alert_id: int) -> None:
    _require_jobseeker(user, "delete")
    alert = get_owned_alert(db, user, alert_id)
    db.delete(alert)
    db.commit()
    logger.info("Alert deleted alert_id=%s user_id=%s", alert_id, user.id)


def mark_alert_sent(db: Session, alert_id: int, sent_at: datetime | None = None) -> bool:
    """
    Advance last_sent_at in a single conditional UPDATE.
    Returns False (and leaves the row alone) when sent_at is not newer than the stored value.
    """
    sent_at = sent_at or datetime.utcnow()
    updated = (
        db.query(JobAlert)
        .filter(
            JobAlert.id == alert_id,
            or_(JobAlert.last_sent_at.is_(None), JobAlert.last_sent_at < sent_at),
        )
        .update({JobAlert.last_sent_at: sent_at}, synchronize_session=False)
    )
    db.commit()
    return updated == 1


def send_test_alert(
    db: Session,
    user: User,
    alert_id: int,
    notifier: AlertNotifier | None = None,
) -> dict:
    """Send the alert now using the last 30 days of jobs. Does not touch last_sent_at."""
    _require_jobseeker(user, "test")
    alert = get_owned_alert(db, user, alert_id)
    since = datetime.utcnow() - timedelta(days=settings.alert_test_lookback_days)
    jobs = find_matching_jobs(db, alert, since)
    if not jobs:
        return {
            "success": False,
            "message": (
                f"No matching jobs found in the last {settings.alert_test_lookback_days} days. "
                "Try broadening your alert criteria."
            ),
            "matches": 0,
        }
    if not send_alert_email(user, alert, jobs, notifier=notifier):
        return {
            "success": False,
            "message": "Failed to send test alert email. Please try again later.",
            "matches": len(jobs),
        }
    return {
        "success": True,
        "message": f"Test alert sent to {user.email} with {len(jobs)} matches.",
        "matches": len(jobs),
    }
