"""
JobAlert - a saved search a job seeker wants monitored on a cadence
"""
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String

from hiresphere.app.db.base import Base


class JobAlert(Base):
    __tablename__ = "job_alerts"

    id = Column(Integer, primary_key=True, index=True)
    job_seeker_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), default="")
    keywords = Column(JSON, default=list)
    locations = Column(JSON, default=list)
    job_types = Column(JSON, default=list)
    salary_min = Column(Float, default=0)
    salary_max = Column(Float, default=0)
    salary_currency = Column(String(10), default="USD")
    frequency = Column(String(20), nullable=False, default="daily")  # daily, weekly, immediate
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    # Only moves forward; jobs created after it count as new for the next run
    last_sent_at = Column(DateTime, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "job_seeker_id": self.job_seeker_id,
            "name": self.name,
            "keywords": list(self.keywords or []),
            "locations": list(self.locations or []),
            "job_types": list(self.job_types or []),
            "salary": {
                "min": self.salary_min or 0,
                "max": self.salary_max or 0,
                "currency": self.salary_currency or "USD",
            },
            "frequency": self.frequency,
            "is_active": bool(self.is_active),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_sent_at": self.last_sent_at.isoformat() if self.last_sent_at else None,
        }
