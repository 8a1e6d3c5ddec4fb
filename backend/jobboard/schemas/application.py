"""Application Pydantic schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from jobboard.models.application import ApplicationStatus
from jobboard.models.job_post import JobType, WorkMode


class ApplyRequest(BaseModel):
    """Apply to a job as the signed-in job seeker."""
    job_id: UUID
    notes: Optional[str] = None
    cover_letter: Optional[str] = None


class ApplicationUpdateRequest(BaseModel):
    """Partial update; fields left out keep their value. APPLIED is read as PENDING."""
    status: Optional[ApplicationStatus] = None
    notes: Optional[str] = None


class ApplicationJobSummary(BaseModel):
    id: UUID
    title: str
    company: Optional[str] = None
    location: Optional[str] = None
    job_type: JobType
    work_mode: WorkMode


class ApplicantSummary(BaseModel):
    id: UUID
    full_name: str
    email: str


class ApplicationResponse(BaseModel):
    id: UUID
    job: ApplicationJobSummary
    status: ApplicationStatus
    applied_date: datetime
    last_updated: datetime
    notes: Optional[str] = None
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    applicant: Optional[ApplicantSummary] = None
