"""
File upload endpoints: profile picture, resume and company logo.

The file is stored first and its URL saved afterwards; if saving the URL
fails the stored file is removed again.
"""
import logging

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.auth import get_current_user, require_job_poster, require_job_seeker
from jobboard.database import get_db
from jobboard.errors import NotFoundError
from jobboard.models import JobSeekerProfile, User
from jobboard.services.companies import company_for_owner
from jobboard.services.storage import (
    LocalObjectStorage,
    get_storage,
    max_upload_bytes,
    object_path,
    replace_attribute,
    upload_and_attach,
    validate_upload
)

logger = logging.getLogger(__name__)
router = APIRouter()

READ_CHUNK_SIZE = 64 * 1024


class UploadResponse(BaseModel):
    message: str
    url: str


async def _read_validated(file: UploadFile, kind: str) -> bytes:
    """Read an upload, stopping as soon as it passes the size limit for `kind`."""
    if file.size is not None:
        validate_upload(kind, file.content_type, file.size)

    limit = max_upload_bytes(kind)
    chunks, total = [], 0
    while chunk := await file.read(READ_CHUNK_SIZE):
        total += len(chunk)
        if total > limit:
            break
        chunks.append(chunk)

    validate_upload(kind, file.content_type, total)
    return b"".join(chunks)


@router.post("/profile-picture", response_model=UploadResponse)
async def upload_profile_picture(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """Upload a JPEG, PNG or WebP image (max 5MB) as the user's picture."""
    data = await _read_validated(file, "image")
    path = object_path("profile-pictures", current_user.id, file.content_type)

    url = await upload_and_attach(
        db, storage, data, file.content_type, path,
        replace_attribute(current_user, "profile_picture")
    )
    logger.info(f"Profile picture uploaded for user {current_user.id}")
    return UploadResponse(message="Profile picture uploaded successfully", url=url)


@router.post("/resume", response_model=UploadResponse)
async def upload_resume(
    file: UploadFile = File(...),
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """Upload a PDF resume (max 10MB) to the seeker's profile."""
    data = await _read_validated(file, "resume")
    user_id = current_user.id

    result = await db.execute(
        select(JobSeekerProfile).where(JobSeekerProfile.user_id == user_id)
    )
    profile = result.scalar_one_or_none()
    if profile is None:
        profile = JobSeekerProfile(user_id=user_id)
        db.add(profile)

    path = object_path("resumes", user_id, file.content_type)
    url = await upload_and_attach(
        db, storage, data, file.content_type, path,
        replace_attribute(profile, "resume_url")
    )
    logger.info(f"Resume uploaded for user {user_id}")
    return UploadResponse(message="Resume uploaded successfully", url=url)


@router.post("/company-logo", response_model=UploadResponse)
async def upload_company_logo(
    file: UploadFile = File(...),
    current_user: User = Depends(require_job_poster),
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage)
):
    """Upload an image (max 5MB) as the poster's company logo."""
    data = await _read_validated(file, "image")
    user_id = current_user.id

    company = await company_for_owner(db, user_id)
    if company is None:
        raise NotFoundError("Company not found")

    path = object_path("company-logos", company.id, file.content_type)
    url = await upload_and_attach(
        db, storage, data, file.content_type, path,
        replace_attribute(company, "logo")
    )
    logger.info(f"Company logo uploaded for company {company.id}")
    return UploadResponse(message="Company logo uploaded successfully", url=url)
