"""
Job seeker profile endpoints.

GET returns the profile with skills, education and experience; POST saves
it (partial for scalar fields, whole-set replacement for supplied lists).
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.auth import require_job_seeker
from jobboard.database import get_db
from jobboard.models import User
from jobboard.schemas.profile import JobSeekerProfileRequest, JobSeekerProfileResponse
from jobboard.services.profiles import (
    build_seeker_profile_response,
    get_job_seeker_profile,
    save_job_seeker_profile
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=JobSeekerProfileResponse)
async def get_profile(
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db)
):
    """Get the signed-in seeker's profile."""
    user, profile = await get_job_seeker_profile(db, current_user.id)
    return build_seeker_profile_response(user, profile)


@router.post("", response_model=JobSeekerProfileResponse)
async def save_profile(
    profile_data: JobSeekerProfileRequest,
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db)
):
    """Create or update the signed-in seeker's profile."""
    user, profile = await save_job_seeker_profile(
        db, current_user.id, profile_data.model_dump(exclude_unset=True)
    )
    return build_seeker_profile_response(user, profile)
