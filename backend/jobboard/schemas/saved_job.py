"""Saved job Pydantic schemas."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from jobboard.schemas.job import JobResponse


class SaveJobRequest(BaseModel):
    job_id: UUID


class SavedJobResponse(BaseModel):
    id: UUID
    saved_at: datetime
    job: JobResponse
