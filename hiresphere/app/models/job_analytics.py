"""Job analytics: one counter row per job plus daily buckets, demographic rollups and seen viewers."""
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint

from hiresphere.app.db.base import Base


class JobAnalytics(Base):
    """Counters for one job. Per-source view columns always sum to views."""
    __tablename__ = "job_analytics"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    views = Column(Integer, nullable=False, default=0)
    unique_views = Column(Integer, nullable=False, default=0)
    click_throughs = Column(Integer, nullable=False, default=0)
    applications = Column(Integer, nullable=False, default=0)

    # View sources
    direct = Column(Integer, nullable=False, default=0)
    search = Column(Integer, nullable=False, default=0)
    recommendation = Column(Integer, nullable=False, default=0)
    email = Column(Integer, nullable=False, default=0)
    other = Column(Integer, nullable=False, default=0)

    last_updated = Column(DateTime, default=datetime.utcnow)


class JobAnalyticsDaily(Base):
    """One bucket per job per calendar day."""
    __tablename__ = "job_analytics_daily"
    __table_args__ = (UniqueConstraint("job_id", "date", name="uq_job_analytics_daily_job_date"),)

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    views = Column(Integer, nullable=False, default=0)
    applications = Column(Integer, nullable=False, default=0)


class JobAnalyticsDemographic(Base):
    """Applicant rollup - kind is location or skill, value the counted key."""
    __tablename__ = "job_analytics_demographics"
    __table_args__ = (UniqueConstraint("job_id", "kind", "value", name="uq_job_analytics_demographic"),)

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    kind = Column(String(20), nullable=False)
    value = Column(String(255), nullable=False)
    count = Column(Integer, nullable=False, default=0)


class JobAnalyticsViewer(Base):
    """Seen viewers per job, for unique view counting. Never returned by reads."""
    __tablename__ = "job_analytics_viewers"
    __table_args__ = (UniqueConstraint("job_id", "viewer_hash", name="uq_job_analytics_viewer"),)

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    viewer_hash = Column(String(64), nullable=False)
    first_seen = Column(DateTime, default=datetime.utcnow)
