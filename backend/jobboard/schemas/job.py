"""Job post Pydantic schemas."""
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobboard.models.company import CompanySize
from jobboard.models.job_post import ExperienceLevel, JobType, WorkMode
from jobboard.schemas.common import Pagination


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Columns hold naive UTC
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class JobPostFields(BaseModel):
    """Optional job post fields shared by create and update."""
    responsibilities: Optional[str] = None
    benefits: Optional[str] = None
    location: Optional[str] = None
    salary_min: Optional[int] = Field(default=None, ge=0)
    salary_max: Optional[int] = Field(default=None, ge=0)
    application_deadline: Optional[datetime] = None
    application_email: Optional[str] = None
    application_url: Optional[str] = None
    application_instructions: Optional[str] = None

    @field_validator("application_deadline")
    @classmethod
    def deadline_as_naive_utc(cls, value):
        return _naive_utc(value)


class JobCreateRequest(JobPostFields):
    """
    New job post.

    ``skills`` entries are ``{"skill_id": <id or name>, "is_required": bool}``
    (a bare name string also works). Unknown names create the skill;
    malformed entries are ignored. ``categories`` are ids or names.
    """
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    requirements: str = Field(min_length=1)
    job_type: JobType
    work_mode: WorkMode
    experience_level: ExperienceLevel
    company_id: UUID

    currency: str = "USD"
    salary_period: str = "YEARLY"
    show_salary: bool = True
    is_featured: bool = False

    skills: list[Any] = []
    categories: list[Any] = []


class JobUpdateRequest(JobPostFields):
    """Partial update. Supplied ``skills``/``categories`` replace the whole set."""
    title: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    job_type: Optional[JobType] = None
    work_mode: Optional[WorkMode] = None
    experience_level: Optional[ExperienceLevel] = None
    currency: Optional[str] = None
    salary_period: Optional[str] = None
    show_salary: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None

    skills: Optional[list[Any]] = None
    categories: Optional[list[Any]] = None


class JobActiveRequest(BaseModel):
    job_id: UUID
    is_active: bool


class JobCompanySummary(BaseModel):
    id: UUID
    name: str
    slug: str
    logo: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[CompanySize] = None
    is_verified: bool = False

    model_config = ConfigDict(from_attributes=True)


class JobPosterSummary(BaseModel):
    id: UUID
    full_name: str

    model_config = ConfigDict(from_attributes=True)


class JobSkillResponse(BaseModel):
    id: UUID
    name: str
    slug: str
    is_required: bool


class CategoryResponse(BaseModel):
    id: UUID
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class JobResponse(BaseModel):
    """Job post with company, poster, skills, categories and applicant count."""
    id: UUID
    title: str
    slug: str
    description: str
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None
    benefits: Optional[str] = None
    job_type: JobType
    work_mode: WorkMode
    experience_level: Optional[ExperienceLevel] = None
    location: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    currency: str
    salary_period: str
    show_salary: bool
    application_deadline: Optional[datetime] = None
    application_email: Optional[str] = None
    application_url: Optional[str] = None
    application_instructions: Optional[str] = None
    is_active: bool
    is_featured: bool
    published_at: Optional[datetime] = None
    poster_id: UUID
    company_id: UUID
    company: Optional[JobCompanySummary] = None
    poster: Optional[JobPosterSummary] = None
    skills: list[JobSkillResponse] = []
    categories: list[CategoryResponse] = []
    application_count: int = 0
    created_at: datetime
    updated_at: datetime


class JobListResponse(BaseModel):
    jobs: list[JobResponse]
    pagination: Pagination


class PosterJobStats(BaseModel):
    total_jobs: int
    active_jobs: int
    total_applications: int
    featured_jobs: int


class PosterJobsResponse(BaseModel):
    jobs: list[JobResponse]
    stats: PosterJobStats
