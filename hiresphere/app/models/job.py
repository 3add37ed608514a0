"""
Job - a posting owned by an employer. Only open jobs are matched and listed.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from hiresphere.app.db.base import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(100), nullable=False)
    company = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # full-time, part-time, contract, internship
    salary_min = Column(Float, nullable=False, default=0)
    salary_max = Column(Float, nullable=False, default=0)
    salary_currency = Column(String(10), default="USD")
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="open", index=True)  # open, closed

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employer = relationship("User")

    @property
    def employer_display_name(self) -> str:
        if self.employer is not None:
            return self.employer.display_name
        return self.company

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.employer_display_name,
            "location": self.location,
            "type": self.type,
            "salary": {
                "min": self.salary_min,
                "max": self.salary_max,
                "currency": self.salary_currency or "USD",
            },
            "status": self.status,
            "employer_id": self.employer_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
