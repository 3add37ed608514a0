"""
Job applications and interview ratings
"""
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hiresphere.app.core.config import JOB_STATUS_OPEN, USER_TYPE_EMPLOYER, USER_TYPE_JOBSEEKER
from hiresphere.app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from hiresphere.app.core.logging_config import get_logger
from hiresphere.app.models.job import Job
from hiresphere.app.models.job_application import InterviewRating, JobApplication
from hiresphere.app.models.user import User
from hiresphere.app.schemas.interview_rating import InterviewRatingCreate
from hiresphere.app.services.job_analytics import record_application

logger = get_logger("services.application")

RATING_CATEGORIES = ("rating", "technical_skills", "communication", "cultural_fit", "problem_solving")


def apply_to_job(db: Session, user: User, job_id: int, cover_letter: str | None = None) -> JobApplication:
    """Submit an application and count it in the job's analytics."""
    if user.type != USER_TYPE_JOBSEEKER:
        raise PermissionDeniedError("Only job seekers can apply to jobs")
    job = db.get(Job, job_id)
    if job is None:
        raise NotFoundError("Job not found")
    if job.status != JOB_STATUS_OPEN:
        raise ValidationFailedError("This job is no longer accepting applications")

    existing = (
        db.query(JobApplication)
        .filter(JobApplication.job_id == job_id, JobApplication.job_seeker_id == user.id)
        .first()
    )
    if existing:
        raise ConflictError("You have already applied for this job")

    application = JobApplication(job_id=job_id, job_seeker_id=user.id, cover_letter=cover_letter)
    db.add(application)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("You have already applied for this job")
    db.refresh(application)
    logger.info("Application submitted application_id=%s job_id=%s user_id=%s", application.id, job_id, user.id)

    try:
        record_application(db, job_id, applicant=user)
    except SQLAlchemyError:
        logger.exception("Failed to update analytics for job_id=%s", job_id)
    return application


def add_interview_rating(
    db: Session,
    user: User,
    application_id: int,
    payload: InterviewRatingCreate,
) -> InterviewRating:
    """Append a rating. Earlier ratings are kept as they are."""
    application = db.get(JobApplication, application_id)
    if application is None:
        raise NotFoundError("Application not found")
    if user.type != USER_TYPE_EMPLOYER or application.job.employer_id != user.id:
        raise PermissionDeniedError("Only the employer who posted this job can rate its candidates")

    rating = InterviewRating(
        application_id=application.id,
        interviewer_id=user.id,
        **payload.model_dump(),
    )
    db.add(rating)
    db.commit()
    db.refresh(rating)
    logger.info("Interview rating added application_id=%s rating_id=%s", application.id, rating.id)
    return rating


def list_interview_ratings(db: Session, application_id: int) -> dict:
    """Ratings in the order they were given, plus per-category averages."""
    ratings = (
        db.query(InterviewRating)
        .filter(InterviewRating.application_id == application_id)
        .order_by(InterviewRating.id)
        .all()
    )
    averages = {}
    for category in RATING_CATEGORIES:
        scores = [getattr(r, category) for r in ratings if getattr(r, category) is not None]
        averages[category] = round(sum(scores) / len(scores), 2) if scores else None
    return {
        "ratings": [r.to_dict() for r in ratings],
        "averages": averages,
        "count": len(ratings),
    }
