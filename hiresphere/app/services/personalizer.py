"""
Personalized job recommendations for alert emails.
Best-effort: with no OpenAI key configured the no-op implementation is used,
and any LLM failure yields None so the email is sent without the block.
"""
from abc import ABC, abstractmethod

from openai import OpenAI

from hiresphere.app.core.config import Settings, settings
from hiresphere.app.core.logging_config import get_logger
from hiresphere.app.models.job import Job
from hiresphere.app.models.user import User

logger = get_logger("services.personalizer")

PERSONALIZATION_PROMPT = """I have a job seeker with the following profile:
{profile_summary}

They have the following job matches:
{job_summaries}

For each job, give a very brief (max 2 sentences) explanation of why this job might be a good fit for the candidate based on their profile, or what skills they should highlight in their application.
Format as a bulleted list with the job title first, then your brief recommendation.
"""


def build_profile_summary(job_seeker: User) -> str:
    skills = ", ".join(s for s in (job_seeker.skills or []) if s)
    experience = ", ".join(
        f"{e.get('title', '')} at {e.get('company', '')}" for e in (job_seeker.experience or [])
    )
    education = ", ".join(
        f"{e.get('degree', '')} from {e.get('institution', '')}" for e in (job_seeker.education or [])
    )
    return f"Skills: {skills}\nExperience: {experience}\nEducation: {education}"


def build_job_summaries(jobs: list[Job], description_chars: int) -> str:
    parts = []
    for job in jobs:
        description = (job.description or "")[:description_chars]
        parts.append(
            f"Job Title: {job.title}\n"
            f"Company: {job.employer_display_name}\n"
            f"Description: {description}..."
        )
    return "\n\n".join(parts)


class Personalizer(ABC):
    """Explains why matched jobs fit a job seeker. None means nothing to add."""

    @abstractmethod
    def describe(self, job_seeker: User, jobs: list[Job]) -> str | None:
        pass


class NoopPersonalizer(Personalizer):
    def describe(self, job_seeker: User, jobs: list[Job]) -> str | None:
        return None


class OpenAIPersonalizer(Personalizer):
    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 30,
        description_chars: int = 100,
        client: OpenAI | None = None,
    ):
        self.model = model
        self.description_chars = description_chars
        self._client = client or OpenAI(api_key=api_key, timeout=timeout)

    def describe(self, job_seeker: User, jobs: list[Job]) -> str | None:
        if not jobs:
            return None
        try:
            prompt = PERSONALIZATION_PROMPT.format(
                profile_summary=build_profile_summary(job_seeker),
                job_summaries=build_job_summaries(jobs, self.description_chars),
            )
            resp = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.4,
                max_tokens=800,
            )
            content = (resp.choices[0].message.content or "").strip()
            return content or None
        except Exception as e:
            logger.warning("Personalized recommendations failed seeker_id=%s: %s", job_seeker.id, e)
            return None


def build_personalizer(config: Settings = settings) -> Personalizer:
    """Pick the implementation once, based on whether an OpenAI key is configured."""
    if not config.openai_api_key:
        logger.info("openai_api_key not set - alert personalization disabled")
        return NoopPersonalizer()
    return OpenAIPersonalizer(
        api_key=config.openai_api_key,
        model=config.openai_model or "gpt-4o-mini",
        timeout=config.openai_timeout,
        description_chars=config.personalization_description_chars,
    )
