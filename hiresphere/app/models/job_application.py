"""
JobApplication - one per (job, job seeker); carries accumulated interview ratings
"""
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from hiresphere.app.db.base import Base


class JobApplication(Base):
    __tablename__ = "job_applications"
    __table_args__ = (UniqueConstraint("job_id", "job_seeker_id", name="uq_job_application_job_seeker"),)

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    job_seeker_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default="pending")
    cover_letter = Column(Text, nullable=True)

    applied_at = Column(DateTime, default=datetime.utcnow)
    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    job = relationship("Job")
    job_seeker = relationship("User")
    interview_ratings = relationship(
        "InterviewRating",
        back_populates="application",
        order_by="InterviewRating.id",
        cascade="all, delete-orphan",
    )


class InterviewRating(Base):
    __tablename__ = "interview_ratings"

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("job_applications.id", ondelete="CASCADE"), nullable=False, index=True)
    interviewer_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Scores 1-5; rating is the overall score
    rating = Column(Integer, nullable=False)
    technical_skills = Column(Integer, nullable=True)
    communication = Column(Integer, nullable=True)
    cultural_fit = Column(Integer, nullable=True)
    problem_solving = Column(Integer, nullable=True)
    strengths = Column(JSON, default=list)
    weaknesses = Column(JSON, default=list)
    feedback = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    application = relationship("JobApplication", back_populates="interview_ratings")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "application_id": self.application_id,
            "interviewer_id": self.interviewer_id,
            "rating": self.rating,
            "technical_skills": self.technical_skills,
            "communication": self.communication,
            "cultural_fit": self.cultural_fit,
            "problem_solving": self.problem_solving,
            "strengths": list(self.strengths or []),
            "weaknesses": list(self.weaknesses or []),
            "feedback": self.feedback,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
