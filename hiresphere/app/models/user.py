"""
User - job seekers and employers share one table, discriminated by type
"""
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String

from hiresphere.app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    type = Column(String(20), nullable=False)  # jobseeker, employer

    # Job seeker fields
    first_name = Column(String(100), default="")
    last_name = Column(String(100), default="")
    location = Column(String(255), nullable=True)
    skills = Column(JSON, default=list)  # ["python", "react"]
    experience = Column(JSON, default=list)  # [{"title": ..., "company": ...}]
    education = Column(JSON, default=list)  # [{"degree": ..., "institution": ...}]
    alerts_enabled = Column(Boolean, default=False, nullable=False)

    # Employer fields
    company_name = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def display_name(self) -> str:
        """Company name for employers, person name otherwise."""
        return self.company_name or self.name

    @property
    def greeting_name(self) -> str:
        return self.first_name or self.name
