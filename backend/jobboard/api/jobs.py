"""
Job post endpoints.

Browsing is public. Creating, editing and deleting require the job poster
role; edits and deletes of someone else's job answer 404.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.auth import require_job_poster
from jobboard.database import get_db
from jobboard.models import ExperienceLevel, JobType, User, WorkMode
from jobboard.schemas.common import MessageResponse, Pagination
from jobboard.schemas.job import (
    JobActiveRequest,
    JobCreateRequest,
    JobListResponse,
    JobResponse,
    JobUpdateRequest,
    PosterJobStats,
    PosterJobsResponse
)
from jobboard.services import job_posts
from jobboard.services.job_posts import build_job_response

logger = logging.getLogger(__name__)
router = APIRouter()

LINK_FIELDS = {"company_id", "skills", "categories"}


@router.get("", response_model=JobListResponse)
async def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[JobType] = None,
    work_mode: Optional[WorkMode] = None,
    experience_level: Optional[ExperienceLevel] = None,
    salary_min: Optional[int] = Query(None, ge=0),
    salary_max: Optional[int] = Query(None, ge=0),
    db: AsyncSession = Depends(get_db)
):
    """Search active jobs, newest first."""
    rows, total = await job_posts.list_jobs(
        db,
        page=page,
        limit=limit,
        search=search,
        location=location,
        job_type=job_type,
        work_mode=work_mode,
        experience_level=experience_level,
        salary_min=salary_min,
        salary_max=salary_max,
    )
    return JobListResponse(
        jobs=[build_job_response(job, count) for job, count in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    job_data: JobCreateRequest,
    current_user: User = Depends(require_job_poster),
    db: AsyncSession = Depends(get_db)
):
    """
    Publish a job post.

    Returns:
        201: Job created
        400: Missing or invalid fields
        403: Poster is not allowed to post jobs
        404: Company not found
    """
    job, count = await job_posts.create_job_post(
        db,
        poster_id=current_user.id,
        company_id=job_data.company_id,
        fields=job_data.model_dump(exclude=LINK_FIELDS),
        skills=job_data.skills,
        categories=job_data.categories,
    )
    return build_job_response(job, count)


# /my-jobs is declared before /{job_id} so it is not captured as an id
@router.get("/my-jobs", response_model=PosterJobsResponse)
async def list_my_jobs(
    current_user: User = Depends(require_job_poster),
    db: AsyncSession = Depends(get_db)
):
    """All of the poster's jobs with summary stats."""
    rows, stats = await job_posts.list_poster_jobs(db, current_user.id)
    return PosterJobsResponse(
        jobs=[build_job_response(job, count) for job, count in rows],
        stats=PosterJobStats(**stats),
    )


@router.patch("/my-jobs", response_model=JobResponse)
async def set_job_active(
    request: JobActiveRequest,
    current_user: User = Depends(require_job_poster),
    db: AsyncSession = Depends(get_db)
):
    """Open or close one of the poster's jobs."""
    job, count = await job_posts.set_job_active(db, request.job_id, current_user.id, request.is_active)
    return build_job_response(job, count)


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db)
):
    """Job detail."""
    job, count = await job_posts.get_job(db, job_id)
    return build_job_response(job, count)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: UUID,
    job_data: JobUpdateRequest,
    current_user: User = Depends(require_job_poster),
    db: AsyncSession = Depends(get_db)
):
    """Partially update a job the poster owns."""
    job, count = await job_posts.update_job_post(
        db,
        job_id,
        current_user.id,
        fields=job_data.model_dump(exclude_unset=True, exclude=LINK_FIELDS),
        skills=job_data.skills,
        categories=job_data.categories,
    )
    return build_job_response(job, count)


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: UUID,
    current_user: User = Depends(require_job_poster),
    db: AsyncSession = Depends(get_db)
):
    """Delete a job the poster owns, with its applications and bookmarks."""
    await job_posts.delete_job_post(db, job_id, current_user.id)
    return MessageResponse(message="Job deleted successfully")
