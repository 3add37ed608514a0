"""
Job alert Pydantic schemas for create/update validation
"""
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

JobType = Literal["full-time", "part-time", "contract", "internship"]
Frequency = Literal["daily", "weekly", "immediate"]


def clean_terms(values: list[str] | None) -> list[str] | None:
    """Trim entries and drop blanks."""
    if values is None:
        return None
    return [v.strip() for v in values if v and v.strip()]


class SalaryBand(BaseModel):
    """Salary criteria; 0 means unbounded on that side."""
    min: float = Field(default=0, ge=0)
    max: float = Field(default=0, ge=0)
    currency: str = "USD"


class JobAlertCreate(BaseModel):
    """Schema for creating an alert. At least one keyword is required."""
    name: Optional[str] = None
    keywords: list[str]
    locations: list[str] = []
    job_types: list[JobType] = []
    salary: SalaryBand = SalaryBand()
    frequency: Frequency = "daily"
    is_active: bool = True

    @field_validator("keywords", "locations")
    @classmethod
    def strip_terms(cls, v: list[str]) -> list[str]:
        return clean_terms(v)


class JobAlertUpdate(BaseModel):
    """Schema for editing an alert. Omitted fields keep their current value."""
    name: Optional[str] = None
    keywords: Optional[list[str]] = None
    locations: Optional[list[str]] = None
    job_types: Optional[list[JobType]] = None
    salary: Optional[SalaryBand] = None
    frequency: Optional[Frequency] = None
    is_active: Optional[bool] = None

    @field_validator("keywords", "locations")
    @classmethod
    def strip_terms(cls, v: list[str] | None) -> list[str] | None:
        return clean_terms(v)
