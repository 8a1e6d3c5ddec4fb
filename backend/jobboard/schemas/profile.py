"""Profile-related Pydantic schemas."""
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from jobboard.models.job_post import WorkMode
from jobboard.models.profile import EducationLevel
from jobboard.schemas.auth import UserResponse
from jobboard.schemas.company import CompanyResponse


class SeekerSkillInput(BaseModel):
    name: str
    level: Optional[str] = None


class EducationInput(BaseModel):
    """Rows without institution or degree are skipped."""
    institution: Optional[str] = None
    degree: Optional[str] = None
    field: Optional[str] = None
    start_date: Optional[date] = None  # Defaults to today
    end_date: Optional[date] = None
    current: bool = False
    grade: Optional[str] = None  # Stored as GPA when numeric


class ExperienceInput(BaseModel):
    """Rows without company or position are skipped."""
    company: Optional[str] = None
    position: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    current: bool = False
    description: Optional[str] = None


class InternshipInput(BaseModel):
    company: Optional[str] = None
    position: Optional[str] = None
    duration: Optional[str] = None
    description: Optional[str] = None


class LanguageInput(BaseModel):
    name: str
    proficiency: Optional[str] = None


class JobSeekerProfileRequest(BaseModel):
    """
    Request body for saving the job seeker profile.

    Only fields that are sent are written. A list that is sent (even empty)
    replaces what was stored before; a list that is left out is untouched.
    """
    # User fields
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    profile_picture: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    # Profile fields
    current_job_title: Optional[str] = None
    is_open_to_work: Optional[bool] = None
    years_of_experience: Optional[int] = None
    expected_salary_min: Optional[int] = None
    expected_salary_max: Optional[int] = None
    currency: Optional[str] = None
    preferred_work_mode: Optional[WorkMode] = None
    job_type: Optional[list[str]] = None  # "Full Time", "PART_TIME", ...
    date_of_birth: Optional[date] = None
    age: Optional[int] = None  # Used only when date_of_birth is absent
    gender: Optional[str] = None
    linkedin: Optional[str] = None
    resume_url: Optional[str] = None
    languages: Optional[list[LanguageInput]] = None

    # Child collections
    skills: Optional[list[SeekerSkillInput]] = None
    education: Optional[list[EducationInput]] = None
    experience: Optional[list[ExperienceInput]] = None
    internships: Optional[list[InternshipInput]] = None


class SeekerSkillResponse(BaseModel):
    id: UUID
    name: str
    slug: str
    proficiency_level: Optional[str] = None


class EducationResponse(BaseModel):
    id: UUID
    institution: str
    degree: str
    field_of_study: Optional[str] = None
    level: EducationLevel
    start_date: date
    end_date: Optional[date] = None
    is_current: bool
    gpa: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class ExperienceResponse(BaseModel):
    id: UUID
    job_title: str
    company_name: str
    location: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    is_current: bool
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class JobSeekerProfileSummary(BaseModel):
    """Profile columns without the child collections."""
    id: UUID
    current_job_title: Optional[str] = None
    is_open_to_work: bool
    years_of_experience: Optional[int] = None
    expected_salary_min: Optional[int] = None
    expected_salary_max: Optional[int] = None
    currency: str
    preferred_work_mode: Optional[WorkMode] = None
    preferred_job_types: list[str] = []
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    languages_spoken: list[str] = []
    resume_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class JobSeekerProfileDetail(JobSeekerProfileSummary):
    skills: list[SeekerSkillResponse] = []
    educations: list[EducationResponse] = []
    experiences: list[ExperienceResponse] = []


class JobSeekerProfileResponse(BaseModel):
    user: UserResponse
    profile: Optional[JobSeekerProfileDetail] = None


class JobPosterProfileResponse(BaseModel):
    id: UUID
    job_title: str
    can_post_jobs: bool
    company_id: Optional[UUID] = None

    model_config = ConfigDict(from_attributes=True)


class AccountResponse(BaseModel):
    """The signed-in user with whichever profile their role has."""
    user: UserResponse
    job_seeker_profile: Optional[JobSeekerProfileSummary] = None
    job_poster_profile: Optional[JobPosterProfileResponse] = None
    company: Optional[CompanyResponse] = None
