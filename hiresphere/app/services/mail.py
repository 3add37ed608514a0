"""Outgoing email over SMTP (STARTTLS) with a bounded socket timeout."""
import smtplib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from hiresphere.app.core.config import Settings, settings
from hiresphere.app.core.logging_config import get_logger

logger = get_logger("services.mail")


@dataclass
class MailMessage:
    sender: str
    to: str
    subject: str
    html_body: str


class MailTransport(ABC):
    @abstractmethod
    def send(self, message: MailMessage) -> bool:
        """Deliver message. False when not deliverable; raises on transport errors."""


class SmtpMailTransport(MailTransport):
    def __init__(
        self,
        host: str,
        port: int = 587,
        user: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 20,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "SmtpMailTransport":
        return cls(
            host=config.smtp_host,
            port=config.smtp_port,
            user=config.smtp_user,
            password=config.smtp_password,
            use_tls=config.smtp_use_tls,
            timeout=config.mail_timeout,
        )

    def send(self, message: MailMessage) -> bool:
        if not self.host:
            logger.warning("SMTP not configured (set SMTP_HOST) - email to %s not sent", message.to)
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = message.sender
        msg["To"] = message.to
        msg.attach(MIMEText(message.html_body, "html", "utf-8"))

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.user:
                server.login(self.user, self.password)
            server.sendmail(message.sender, [message.to], msg.as_string())
        logger.info("Email sent to %s subject=%s", message.to, message.subject)
        return True
