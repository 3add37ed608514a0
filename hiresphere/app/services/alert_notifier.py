"""
Job alert email: renders matched jobs (+ optional personalized block) and sends it.
Never raises - any failure is logged and reported as not sent.
"""
from html import escape

from hiresphere.app.core.config import ALERT_EMAIL_SUBJECT, settings
from hiresphere.app.core.logging_config import get_logger
from hiresphere.app.models.job import Job
from hiresphere.app.models.job_alert import JobAlert
from hiresphere.app.models.user import User
from hiresphere.app.services.mail import MailMessage, MailTransport, SmtpMailTransport
from hiresphere.app.services.personalizer import Personalizer, build_personalizer

logger = get_logger("services.alert_notifier")

_default_notifier: "AlertNotifier | None" = None


def _format_amount(value) -> str:
    if value is None:
        return "0"
    value = float(value)
    return f"{value:,.0f}" if value.is_integer() else f"{value:,.2f}"


def _render_job(job: Job, frontend_url: str) -> str:
    salary = (
        f"{_format_amount(job.salary_min)} - {_format_amount(job.salary_max)} "
        f"{escape(job.salary_currency or 'USD')}"
    )
    link = f"{frontend_url}/jobs/{job.id}"
    return f"""
      <div style="margin-bottom: 20px; padding: 15px; border: 1px solid #e0e0e0; border-radius: 5px;">
        <h3 style="margin-top: 0; color: #1976d2;">{escape(job.title or "")}</h3>
        <p><strong>Company:</strong> {escape(job.employer_display_name or "")}</p>
        <p><strong>Location:</strong> {escape(job.location or "")}</p>
        <p><strong>Type:</strong> {escape(job.type or "")}</p>
        <p><strong>Salary:</strong> {salary}</p>
        <p><a href="{escape(link)}" style="background-color: #1976d2; color: white; padding: 8px 16px; text-decoration: none; border-radius: 4px;">View Job</a></p>
      </div>"""


def render_alert_email(
    job_seeker: User,
    jobs: list[Job],
    personalized: str | None = None,
    frontend_url: str | None = None,
) -> tuple[str, str]:
    """Build (subject, html) for an alert email."""
    base_url = (frontend_url or settings.frontend_url).rstrip("/")
    count = len(jobs)
    plural = "s" if count > 1 else ""
    jobs_html = "".join(_render_job(job, base_url) for job in jobs)

    personalized_html = ""
    if personalized:
        personalized_html = f"""
        <div style="margin-top: 30px; padding: 15px; background-color: #f5f5f5; border-radius: 5px;">
          <h3 style="margin-top: 0; color: #1976d2;">Personalized Recommendations</h3>
          <div style="white-space: pre-line;">{escape(personalized)}</div>
        </div>"""

    html = f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #1976d2;">HireSphere Job Alerts</h2>
        <p>Hello {escape(job_seeker.greeting_name or "")},</p>
        <p>We've found {count} new job{plural} that match your alert criteria:</p>
        {jobs_html}
        {personalized_html}
        <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #e0e0e0;">
          <p>You can <a href="{escape(base_url)}/job-alerts" style="color: #1976d2;">manage your job alerts here</a>.</p>
          <p>Best regards,<br>The HireSphere Team</p>
        </div>
      </div>"""
    return ALERT_EMAIL_SUBJECT, html


class AlertNotifier:
    def __init__(
        self,
        transport: MailTransport,
        personalizer: Personalizer,
        frontend_url: str | None = None,
        sender: str | None = None,
    ):
        self.transport = transport
        self.personalizer = personalizer
        self.frontend_url = frontend_url or settings.frontend_url
        self.sender = sender or settings.email_from or settings.smtp_user

    def _personalize(self, job_seeker: User, jobs: list[Job]) -> str | None:
        try:
            return self.personalizer.describe(job_seeker, jobs)
        except Exception as e:
            logger.warning("Personalizer error seeker_id=%s: %s", job_seeker.id, e)
            return None

    def send_alert(self, job_seeker: User, alert: JobAlert, jobs: list[Job]) -> bool:
        """Email the matched jobs to the seeker. Returns whether the mail went out."""
        if not jobs:
            logger.info(
                "No matching jobs for alert_id=%s seeker_id=%s - skipping email",
                alert.id,
                job_seeker.id,
            )
            return False
        try:
            logger.info(
                "Preparing alert email alert_id=%s to=%s jobs=%d",
                alert.id,
                job_seeker.email,
                len(jobs),
            )
            personalized = self._personalize(job_seeker, jobs)
            subject, html = render_alert_email(job_seeker, jobs, personalized, self.frontend_url)
            sent = self.transport.send(
                MailMessage(sender=self.sender, to=job_seeker.email, subject=subject, html_body=html)
            )
        except Exception:
            logger.exception(
                "Error sending job alert email to=%s alert_id=%s",
                job_seeker.email,
                alert.id,
            )
            return False
        if sent:
            logger.info("Alert email sent to=%s alert_id=%s", job_seeker.email, alert.id)
        return bool(sent)


def build_alert_notifier() -> AlertNotifier:
    return AlertNotifier(
        transport=SmtpMailTransport.from_settings(settings),
        personalizer=build_personalizer(settings),
    )


def get_alert_notifier() -> AlertNotifier:
    """Process-wide notifier built from settings on first use."""
    global _default_notifier
    if _default_notifier is None:
        _default_notifier = build_alert_notifier()
    return _default_notifier


def send_alert_email(
    job_seeker: User,
    alert: JobAlert,
    jobs: list[Job],
    notifier: AlertNotifier | None = None,
) -> bool:
    return (notifier or get_alert_notifier()).send_alert(job_seeker, alert, jobs)
