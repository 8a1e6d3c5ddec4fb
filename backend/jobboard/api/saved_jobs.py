"""Saved job endpoints for job seekers."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.auth import require_job_seeker
from jobboard.database import get_db
from jobboard.models import User
from jobboard.schemas.common import MessageResponse
from jobboard.schemas.saved_job import SavedJobResponse, SaveJobRequest
from jobboard.services import saved_jobs
from jobboard.services.saved_jobs import build_saved_job_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[SavedJobResponse])
async def list_saved_jobs(
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db)
):
    rows = await saved_jobs.list_saved_jobs(db, current_user.id)
    return [build_saved_job_response(saved) for saved in rows]


@router.post("", response_model=SavedJobResponse, status_code=201)
async def save_job(
    request: SaveJobRequest,
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db)
):
    """Bookmark a job. Saving it again is a no-op."""
    saved = await saved_jobs.save_job(db, current_user.id, request.job_id)
    return build_saved_job_response(saved)


@router.delete("/{job_id}", response_model=MessageResponse)
async def unsave_job(
    job_id: UUID,
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db)
):
    await saved_jobs.unsave_job(db, current_user.id, job_id)
    return MessageResponse(message="Job removed from saved jobs")
