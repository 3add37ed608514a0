"""
Job analytics aggregator: view / application / click-through counters per job.

Every mutation is a single SQL statement (UPDATE col = col + n, or an
INSERT ... ON CONFLICT upsert), so concurrent events on the same job never
lose increments. The per-source view columns are bumped in the same UPDATE as
views, keeping their sum equal to the total.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hiresphere.app.core.config import (
    DEFAULT_VIEW_SOURCE,
    JOB_STATUS_CLOSED,
    JOB_STATUS_OPEN,
    VIEW_SOURCES,
)
from hiresphere.app.core.logging_config import get_logger
from hiresphere.app.db.upsert import dialect_insert
from hiresphere.app.models.job import Job
from hiresphere.app.models.job_analytics import (
    JobAnalytics,
    JobAnalyticsDaily,
    JobAnalyticsDemographic,
    JobAnalyticsViewer,
)
from hiresphere.app.models.user import User
from hiresphere.app.utils.fingerprint import compute_viewer_fingerprint

logger = get_logger("services.job_analytics")

DEMOGRAPHIC_LOCATION = "location"
DEMOGRAPHIC_SKILL = "skill"


def _today() -> date:
    """Buckets are keyed by UTC calendar date."""
    return datetime.utcnow().date()


def normalize_source(source: str | None) -> str:
    s = (source or "").strip().lower()
    return s if s in VIEW_SOURCES else DEFAULT_VIEW_SOURCE


def ensure_job_analytics(db: Session, job_id: int) -> None:
    """Find-or-create the job's analytics row (all counters zero on create)."""
    stmt = (
        dialect_insert(db, JobAnalytics)
        .values(job_id=job_id, last_updated=datetime.utcnow())
        .on_conflict_do_nothing(index_elements=["job_id"])
    )
    db.execute(stmt)


def _increment(db: Session, job_id: int, **amounts: int) -> None:
    values: dict[Any, Any] = {
        getattr(JobAnalytics, column): getattr(JobAnalytics, column) + amount
        for column, amount in amounts.items()
    }
    values[JobAnalytics.last_updated] = datetime.utcnow()
    db.query(JobAnalytics).filter(JobAnalytics.job_id == job_id).update(
        values, synchronize_session=False
    )


def _increment_daily(db: Session, job_id: int, views: int = 0, applications: int = 0) -> None:
    stmt = dialect_insert(db, JobAnalyticsDaily).values(
        job_id=job_id, date=_today(), views=views, applications=applications
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["job_id", "date"],
        set_={
            "views": JobAnalyticsDaily.views + stmt.excluded.views,
            "applications": JobAnalyticsDaily.applications + stmt.excluded.applications,
        },
    )
    db.execute(stmt)


def _increment_demographic(db: Session, job_id: int, kind: str, value: str) -> None:
    stmt = dialect_insert(db, JobAnalyticsDemographic).values(
        job_id=job_id, kind=kind, value=value, count=1
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["job_id", "kind", "value"],
        set_={"count": JobAnalyticsDemographic.count + 1},
    )
    db.execute(stmt)


def _mark_viewer_seen(db: Session, job_id: int, viewer_id: str) -> bool:
    """True when this viewer had not been seen for the job before."""
    stmt = (
        dialect_insert(db, JobAnalyticsViewer)
        .values(
            job_id=job_id,
            viewer_hash=compute_viewer_fingerprint(job_id, viewer_id),
            first_seen=datetime.utcnow(),
        )
        .on_conflict_do_nothing(index_elements=["job_id", "viewer_hash"])
    )
    return db.execute(stmt).rowcount == 1


def record_view(
    db: Session,
    job_id: int,
    source: str | None = None,
    viewer_id: str | None = None,
) -> dict:
    """
    Count one view of a job.

    source: direct, search, recommendation, email or other (anything else counts as other).
    viewer_id: IP or user id; unique_views only grows the first time a viewer is seen.
    """
    source_key = normalize_source(source)
    try:
        ensure_job_analytics(db, job_id)
        is_unique = bool(viewer_id) and _mark_viewer_seen(db, job_id, viewer_id)
        amounts = {"views": 1, source_key: 1}
        if is_unique:
            amounts["unique_views"] = 1
        _increment(db, job_id, **amounts)
        _increment_daily(db, job_id, views=1)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.debug("View recorded job_id=%s source=%s unique=%s", job_id, source_key, is_unique)
    return {"job_id": job_id, "source": source_key, "unique": is_unique}


def record_click_through(db: Session, job_id: int) -> None:
    try:
        ensure_job_analytics(db, job_id)
        _increment(db, job_id, click_throughs=1)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def record_demographics(
    db: Session,
    job_id: int,
    location: str | None = None,
    skills: Iterable[str] = (),
) -> None:
    """Append-or-increment the applicant's location and each distinct skill."""
    try:
        ensure_job_analytics(db, job_id)
        location = (location or "").strip()
        if location:
            _increment_demographic(db, job_id, DEMOGRAPHIC_LOCATION, location)
        for skill in dict.fromkeys(s.strip() for s in skills if s and s.strip()):
            _increment_demographic(db, job_id, DEMOGRAPHIC_SKILL, skill)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def record_application(db: Session, job_id: int, applicant: User | None = None) -> None:
    """
    Count one completed application. When the applicant is given, their location
    and skills are folded into the demographics; a failure there is logged only.
    """
    try:
        ensure_job_analytics(db, job_id)
        _increment(db, job_id, applications=1)
        _increment_daily(db, job_id, applications=1)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info("Application recorded job_id=%s", job_id)

    if applicant is None:
        return
    try:
        record_demographics(db, job_id, location=applicant.location, skills=applicant.skills or [])
    except SQLAlchemyError as e:
        logger.error("Error tracking application demographics job_id=%s: %s", job_id, e)


def _empty_analytics(job_id: int) -> dict:
    return {
        "job_id": job_id,
        "views": 0,
        "unique_views": 0,
        "click_throughs": 0,
        "applications": 0,
        "view_sources": {s: 0 for s in VIEW_SOURCES},
        "demographics": {"locations": [], "skills": []},
        "daily_stats": [],
        "last_updated": None,
    }


def get_job_analytics(db: Session, job_id: int) -> dict:
    """Analytics for one job; zeroed defaults when nothing was recorded yet."""
    analytics = db.query(JobAnalytics).filter(JobAnalytics.job_id == job_id).first()
    if analytics is None:
        return _empty_analytics(job_id)

    demographics: dict[str, list[dict]] = {"locations": [], "skills": []}
    rows = (
        db.query(JobAnalyticsDemographic)
        .filter(JobAnalyticsDemographic.job_id == job_id)
        .order_by(JobAnalyticsDemographic.count.desc(), JobAnalyticsDemographic.value)
        .all()
    )
    for row in rows:
        if row.kind == DEMOGRAPHIC_LOCATION:
            demographics["locations"].append({"location": row.value, "count": row.count})
        elif row.kind == DEMOGRAPHIC_SKILL:
            demographics["skills"].append({"skill": row.value, "count": row.count})

    daily = (
        db.query(JobAnalyticsDaily)
        .filter(JobAnalyticsDaily.job_id == job_id)
        .order_by(JobAnalyticsDaily.date)
        .all()
    )
    return {
        "job_id": job_id,
        "views": analytics.views,
        "unique_views": analytics.unique_views,
        "click_throughs": analytics.click_throughs,
        "applications": analytics.applications,
        "view_sources": {s: getattr(analytics, s) for s in VIEW_SOURCES},
        "demographics": demographics,
        "daily_stats": [
            {"date": d.date.isoformat(), "views": d.views, "applications": d.applications}
            for d in daily
        ],
        "last_updated": analytics.last_updated.isoformat() if analytics.last_updated else None,
    }


def summarize_employer_analytics(db: Session, employer_id: int) -> dict:
    """Job counts and view/application totals across an employer's postings."""
    status_counts = dict(
        db.query(Job.status, func.count(Job.id))
        .filter(Job.employer_id == employer_id)
        .group_by(Job.status)
        .all()
    )
    total_jobs = sum(status_counts.values())
    total_views, total_applications = (
        db.query(
            func.coalesce(func.sum(JobAnalytics.views), 0),
            func.coalesce(func.sum(JobAnalytics.applications), 0),
        )
        .join(Job, Job.id == JobAnalytics.job_id)
        .filter(Job.employer_id == employer_id)
        .one()
    )
    return {
        "jobs": {
            "total": total_jobs,
            "active": status_counts.get(JOB_STATUS_OPEN, 0),
            "closed": status_counts.get(JOB_STATUS_CLOSED, 0),
        },
        "analytics": {
            "total_views": int(total_views),
            "total_applications": int(total_applications),
            "views_per_job": round(total_views / total_jobs, 2) if total_jobs else 0,
            "applications_per_job": round(total_applications / total_jobs, 2) if total_jobs else 0,
        },
    }
