"""
Application endpoints.

Seekers apply, list and withdraw their applications; posters list what they
received and move applications through the status workflow.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.auth import get_current_user, require_job_poster, require_job_seeker
from jobboard.database import get_db
from jobboard.models import ApplicationStatus, User, UserRole
from jobboard.schemas.application import (
    ApplicationResponse,
    ApplicationUpdateRequest,
    ApplyRequest
)
from jobboard.schemas.common import MessageResponse
from jobboard.services import applications
from jobboard.services.applications import build_application_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[ApplicationResponse])
async def list_my_applications(
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db)
):
    """The signed-in seeker's applications, newest first."""
    rows = await applications.list_for_applicant(db, current_user.id)
    return [build_application_response(application) for application in rows]


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(
    request: ApplyRequest,
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db)
):
    """
    Apply to a job.

    Returns:
        201: Application submitted (status PENDING)
        400: Already applied to this job
        404: Job not found or closed
    """
    application = await applications.apply(
        db, request.job_id, current_user.id, notes=request.notes, cover_letter=request.cover_letter
    )
    return build_application_response(application)


# /received is declared before /{application_id}
@router.get("/received", response_model=list[ApplicationResponse])
async def list_received_applications(
    job_id: Optional[UUID] = None,
    status: Optional[ApplicationStatus] = None,
    current_user: User = Depends(require_job_poster),
    db: AsyncSession = Depends(get_db)
):
    """Applications to the poster's jobs, optionally for one job and/or one status."""
    if job_id is not None:
        rows = await applications.list_for_job(db, job_id, current_user.id)
        if status is not None:
            rows = [application for application in rows if application.status == status]
    else:
        rows = await applications.list_for_poster(db, current_user.id, status=status)
    return [build_application_response(application, include_applicant=True) for application in rows]


@router.patch("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: UUID,
    request: ApplicationUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update status and/or recruiter notes.

    A seeker may only use this to withdraw their own application.

    Returns:
        200: Updated
        403: Not the job's poster (or a seeker sending anything but WITHDRAWN)
        404: Application not found
        409: Status change not allowed
    """
    changes = request.model_dump(exclude_unset=True)

    if current_user.role == UserRole.JOB_SEEKER:
        if set(changes) != {"status"} or changes["status"] != ApplicationStatus.WITHDRAWN:
            logger.warning(f"Seeker {current_user.id} attempted to update application {application_id}")
            raise HTTPException(status_code=403, detail="Applicants can only withdraw their application")
        application = await applications.withdraw(db, application_id, current_user.id)
        return build_application_response(application)

    application = await applications.update_status(db, application_id, changes, actor_id=current_user.id)
    return build_application_response(application, include_applicant=True)


@router.post("/{application_id}/withdraw", response_model=ApplicationResponse)
async def withdraw_application(
    application_id: UUID,
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db)
):
    """Withdraw one of the seeker's applications, whatever its status."""
    application = await applications.withdraw(db, application_id, current_user.id)
    return build_application_response(application)


@router.delete("/{application_id}", response_model=MessageResponse)
async def delete_application(
    application_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete an application (its applicant or the job's poster)."""
    await applications.delete_application(db, application_id, current_user.id)
    return MessageResponse(message="Application deleted successfully")
