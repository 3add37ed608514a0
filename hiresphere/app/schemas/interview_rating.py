"""
Interview rating schema - scores are 1-5, feedback is required
"""
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class InterviewRatingCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    technical_skills: Optional[int] = Field(default=None, ge=1, le=5)
    communication: Optional[int] = Field(default=None, ge=1, le=5)
    cultural_fit: Optional[int] = Field(default=None, ge=1, le=5)
    problem_solving: Optional[int] = Field(default=None, ge=1, le=5)
    strengths: list[str] = []
    weaknesses: list[str] = []
    feedback: str

    @field_validator("feedback")
    @classmethod
    def feedback_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("feedback is required")
        return v

    @field_validator("strengths", "weaknesses")
    @classmethod
    def drop_blank_tags(cls, v: list[str]) -> list[str]:
        return [t.strip() for t in v if t and t.strip()]
