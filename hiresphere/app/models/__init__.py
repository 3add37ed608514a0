from hiresphere.app.models.user import User
from hiresphere.app.models.job import Job
from hiresphere.app.models.job_alert import JobAlert
from hiresphere.app.models.job_analytics import (
    JobAnalytics,
    JobAnalyticsDaily,
    JobAnalyticsDemographic,
    JobAnalyticsViewer,
)
from hiresphere.app.models.job_application import InterviewRating, JobApplication
