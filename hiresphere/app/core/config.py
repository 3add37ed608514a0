"""
Application configuration settings.
Loads from .env file first (overrides shell env for local dev), then pydantic reads from environment.
Production: set env vars in the platform (Docker, K8s, etc.); .env is optional.

All backend-related configs and constants are centralized here.
"""
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env path: project root .env (absolute path, works regardless of cwd)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
_ENV_FILE = (_BASE_DIR / ".env").resolve()

# Load .env into environment BEFORE pydantic reads. override=True ensures .env
# values override any shell env.
# When .env doesn't exist (prod), this is a no-op; platform env vars are used.
if _ENV_FILE.exists():
    load_dotenv(_ENV_FILE, override=True)


class Settings(BaseSettings):
    """Application settings. Source: env vars (after dotenv load)."""

    # App
    app_name: str = "HireSphere"
    app_version: str = "1.0.0"
    frontend_url: str = "http://localhost:3000"

    # Database
    database_url: str = "sqlite:///./hiresphere.db"

    # Mail (SMTP)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    email_from: str = ""
    mail_timeout: int = 20

    # OpenAI (personalized alert recommendations; empty key disables them)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_timeout: int = 30
    personalization_description_chars: int = 100

    # Job alerts
    alert_match_limit: int = 10
    seeker_match_limit: int = 20
    alert_daily_cron: str = "0 9 * * *"
    alert_weekly_cron: str = "0 10 * * mon"
    alert_immediate_cron: str = "0 * * * *"
    alert_recent_matches_days: int = 7
    alert_test_lookback_days: int = 30
    scheduler_timezone: str = "UTC"
    scheduler_enabled: bool = True

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


# --- Constants (non-env, business config) ---

# Alert cadence. "immediate" is polled hourly by the scheduler.
ALERT_FREQUENCIES: tuple[str, ...] = ("daily", "weekly", "immediate")

JOB_TYPES: tuple[str, ...] = ("full-time", "part-time", "contract", "internship")
JOB_STATUS_OPEN: str = "open"
JOB_STATUS_CLOSED: str = "closed"

# Where a job view came from; anything else is attributed to "other"
VIEW_SOURCES: tuple[str, ...] = ("direct", "search", "recommendation", "email", "other")
DEFAULT_VIEW_SOURCE: str = "other"

APPLICATION_STATUSES: tuple[str, ...] = ("pending", "reviewed", "interview", "accepted", "rejected")

USER_TYPE_JOBSEEKER: str = "jobseeker"
USER_TYPE_EMPLOYER: str = "employer"

# Alert email
ALERT_EMAIL_SUBJECT: str = "New Job Matches Found - HireSphere Job Alert"
ALERT_NAME_KEYWORDS_CHARS: int = 30
