"""
Job matcher - turns a saved alert into a filter over open jobs.
Read-only. Query errors are logged and treated as zero matches.
"""
from datetime import datetime, timedelta

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from hiresphere.app.core.config import JOB_STATUS_OPEN, settings
from hiresphere.app.core.logging_config import get_logger
from hiresphere.app.models.job import Job
from hiresphere.app.models.job_alert import JobAlert

logger = get_logger("services.job_matcher")


def _terms(values) -> list[str]:
    return [str(v).strip() for v in (values or []) if v and str(v).strip()]


def _criteria_filters(keywords: list[str], locations: list[str], job_types: list[str]) -> list:
    filters = []
    if keywords:
        filters.append(or_(*[
            column.icontains(keyword, autoescape=True)
            for keyword in keywords
            for column in (Job.title, Job.description, Job.requirements)
        ]))
    if locations:
        filters.append(or_(*[Job.location.icontains(loc, autoescape=True) for loc in locations]))
    if job_types:
        filters.append(func.lower(Job.type).in_([t.lower() for t in job_types]))
    return filters


def build_match_filters(alert: JobAlert, since: datetime | None = None) -> list:
    """
    Filter clauses for an alert, combined with AND by the caller.
    Keywords hit title, description or requirements; locations hit location.
    Both are case-insensitive literal substrings, OR'ed within their dimension.
    An empty dimension adds no clause.
    """
    filters = [Job.status == JOB_STATUS_OPEN]

    if since is not None:
        filters.append(Job.created_at > since)

    filters.extend(
        _criteria_filters(_terms(alert.keywords), _terms(alert.locations), _terms(alert.job_types))
    )

    salary_min = alert.salary_min or 0
    salary_max = alert.salary_max or 0
    if salary_min > 0 or salary_max > 0:
        filters.append(Job.salary_min >= salary_min)
        if salary_max > 0:
            filters.append(Job.salary_max <= salary_max)

    return filters


def find_matching_jobs(
    db: Session,
    alert: JobAlert,
    since: datetime | None = None,
    limit: int | None = None,
) -> list[Job]:
    """Open jobs matching the alert, created after since (if given), newest first."""
    limit_val = limit or settings.alert_match_limit
    logger.info(
        "Matching jobs alert_id=%s seeker_id=%s since=%s keywords=%s locations=%s job_types=%s",
        alert.id,
        alert.job_seeker_id,
        since.isoformat() if since else "the beginning",
        alert.keywords,
        alert.locations,
        alert.job_types,
    )
    try:
        jobs = (
            db.query(Job)
            .options(joinedload(Job.employer))
            .filter(*build_match_filters(alert, since))
            .order_by(Job.created_at.desc(), Job.id.desc())
            .limit(limit_val)
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Job matching failed alert_id=%s: %s", alert.id, e)
        return []
    logger.info("Found %d matching jobs for alert_id=%s", len(jobs), alert.id)
    return jobs


def find_recent_matches(db: Session, job_seeker_id: int, days: int | None = None) -> dict:
    """
    Jobs from the last N days matching any of the seeker's active alerts.
    Deduplicated by job, newest first, capped at the alert match limit.
    """
    days_val = days if days is not None else settings.alert_recent_matches_days
    since = datetime.utcnow() - timedelta(days=days_val)
    alerts = (
        db.query(JobAlert)
        .filter(JobAlert.job_seeker_id == job_seeker_id, JobAlert.is_active.is_(True))
        .all()
    )
    unique: dict[int, Job] = {}
    for alert in alerts:
        for job in find_matching_jobs(db, alert, since):
            unique.setdefault(job.id, job)
    matches = sorted(unique.values(), key=lambda j: (j.created_at, j.id), reverse=True)
    return {
        "matches": [j.to_dict() for j in matches[: settings.alert_match_limit]],
        "total_matches": len(matches),
    }


def find_jobs_for_seeker(db: Session, job_seeker_id: int, limit: int | None = None) -> list[Job]:
    """
    Open jobs matching the seeker's active alerts taken together.

    Keywords, locations and job types are pooled across alerts (deduplicated),
    then applied as one filter with no time window. Salary criteria are not
    pooled. No active alerts means no jobs.
    """
    limit_val = limit or settings.seeker_match_limit
    alerts = (
        db.query(JobAlert)
        .filter(JobAlert.job_seeker_id == job_seeker_id, JobAlert.is_active.is_(True))
        .all()
    )
    if not alerts:
        return []

    keywords = list(dict.fromkeys(t for a in alerts for t in _terms(a.keywords)))
    locations = list(dict.fromkeys(t for a in alerts for t in _terms(a.locations)))
    job_types = list(dict.fromkeys(t.lower() for a in alerts for t in _terms(a.job_types)))

    try:
        jobs = (
            db.query(Job)
            .options(joinedload(Job.employer))
            .filter(Job.status == JOB_STATUS_OPEN, *_criteria_filters(keywords, locations, job_types))
            .order_by(Job.created_at.desc(), Job.id.desc())
            .limit(limit_val)
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Seeker job matching failed seeker_id=%s: %s", job_seeker_id, e)
        return []
    logger.info("Found %d jobs for seeker_id=%s across %d alerts", len(jobs), job_seeker_id, len(alerts))
    return jobs
