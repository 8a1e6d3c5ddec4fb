"""
Application workflow service.

Applying inserts a PENDING row; the UNIQUE (job_post_id, applicant_id)
constraint is what rejects a second application. Status changes go through
jobboard.services.state_machine.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.config import settings
from jobboard.errors import (
    AlreadyAppliedError, AuthorizationError, InternalError, NotFoundError
)
from jobboard.models import (
    Application, ApplicationStatus, JobPost, JobSeekerProfile, UserRole
)
from jobboard.schemas.application import (
    ApplicantSummary, ApplicationJobSummary, ApplicationResponse
)
from jobboard.services.access import require_role
from jobboard.services.state_machine import transition_application

logger = logging.getLogger(__name__)


def _with_relations(query):
    return query.options(
        selectinload(Application.job_post).selectinload(JobPost.company),
        selectinload(Application.applicant),
    ).execution_options(populate_existing=True)


def build_application_response(application: Application, include_applicant: bool = False) -> ApplicationResponse:
    job = application.job_post
    applicant = None
    if include_applicant and application.applicant is not None:
        applicant = ApplicantSummary(
            id=application.applicant.id,
            full_name=application.applicant.full_name,
            email=application.applicant.email,
        )
    return ApplicationResponse(
        id=application.id,
        job=ApplicationJobSummary(
            id=job.id,
            title=job.title,
            company=job.company.name if job.company else None,
            location=job.location,
            job_type=job.job_type,
            work_mode=job.work_mode,
        ),
        status=application.status,
        applied_date=application.applied_at,
        last_updated=application.updated_at,
        notes=application.recruiter_notes,
        cover_letter=application.cover_letter,
        resume_url=application.resume_url,
        applicant=applicant,
    )


async def get_application(db: AsyncSession, application_id) -> Application:
    result = await db.execute(
        _with_relations(select(Application).where(Application.id == application_id))
    )
    application = result.scalar_one_or_none()
    if not application:
        raise NotFoundError("Application not found")
    return application


async def _application_exists(db: AsyncSession, job_id, applicant_id) -> bool:
    result = await db.execute(
        select(Application.id).where(
            Application.job_post_id == job_id,
            Application.applicant_id == applicant_id,
        )
    )
    return result.first() is not None


async def apply(
    db: AsyncSession,
    job_id,
    applicant_id,
    notes: Optional[str] = None,
    cover_letter: Optional[str] = None
) -> Application:
    """
    Submit an application (status PENDING) for an active job.

    The seeker's current resume URL is copied onto the application.

    Raises:
        AuthorizationError: applicant is not a job seeker
        NotFoundError: job missing or no longer active
        AlreadyAppliedError: applicant already applied to this job
    """
    await require_role(db, applicant_id, UserRole.JOB_SEEKER, "Only job seekers can apply to jobs")

    result = await db.execute(
        select(JobPost.id).where(JobPost.id == job_id, JobPost.is_active.is_(True))
    )
    if result.first() is None:
        raise NotFoundError("Job not found")

    result = await db.execute(
        select(JobSeekerProfile.resume_url).where(JobSeekerProfile.user_id == applicant_id)
    )
    resume_url = result.scalar_one_or_none()

    application = Application(
        job_post_id=job_id,
        applicant_id=applicant_id,
        status=ApplicationStatus.PENDING,
        recruiter_notes=notes,
        cover_letter=cover_letter,
        resume_url=resume_url,
    )

    try:
        db.add(application)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if await _application_exists(db, job_id, applicant_id):
            logger.info(f"Duplicate application by {applicant_id} for job {job_id}")
            raise AlreadyAppliedError() from e
        logger.error(f"Failed to submit application for job {job_id}: {e}", exc_info=True)
        raise InternalError("Failed to submit application") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to submit application for job {job_id}: {e}", exc_info=True)
        raise InternalError("Failed to submit application") from e

    logger.info(
        f"Application submitted: {application.id}",
        extra={"job_id": str(job_id), "applicant_id": str(applicant_id)}
    )
    return await get_application(db, application.id)


async def update_status(db: AsyncSession, application_id, changes: dict, actor_id=None) -> Application:
    """
    Change status and/or recruiter notes. Keys missing from `changes` are kept.

    When `actor_id` is given (and owner checks are on) only the poster of the
    job may make the change.

    Raises:
        NotFoundError: unknown application
        AuthorizationError: actor does not own the job
        InvalidTransitionError: status change not in the transition table
    """
    application = await get_application(db, application_id)

    if (
        actor_id is not None
        and settings.restrict_status_updates_to_job_owner
        and not application.job_post.is_owned_by(actor_id)
    ):
        logger.warning(f"User {actor_id} denied status update on application {application_id}")
        raise AuthorizationError("Only the job's poster can update this application")

    target = changes.get("status")
    target = ApplicationStatus(target) if target is not None else ApplicationStatus(application.status)

    if "notes" in changes:
        return await transition_application(
            db, application, target, notes=changes["notes"], metadata={"actor_id": str(actor_id)}
        )
    return await transition_application(db, application, target, metadata={"actor_id": str(actor_id)})


async def withdraw(db: AsyncSession, application_id, applicant_id) -> Application:
    """Applicant pulls out. Allowed from any status."""
    application = await get_application(db, application_id)
    if str(application.applicant_id) != str(applicant_id):
        logger.warning(f"User {applicant_id} tried to withdraw application {application_id}")
        raise AuthorizationError("You can only withdraw your own applications")

    return await transition_application(
        db, application, ApplicationStatus.WITHDRAWN, force=True,
        metadata={"actor_id": str(applicant_id)}
    )


async def delete_application(db: AsyncSession, application_id, actor_id) -> None:
    """Remove an application. Only its applicant or the job's poster may."""
    application = await get_application(db, application_id)
    if (
        str(application.applicant_id) != str(actor_id)
        and not application.job_post.is_owned_by(actor_id)
    ):
        logger.warning(f"User {actor_id} tried to delete application {application_id}")
        raise AuthorizationError("Unauthorized to delete this application")

    try:
        await db.delete(application)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to delete application {application_id}: {e}", exc_info=True)
        raise InternalError("Failed to delete application") from e

    logger.info(f"Application deleted: {application_id} by {actor_id}")


async def list_for_applicant(db: AsyncSession, applicant_id) -> list[Application]:
    """The seeker's own applications, newest first."""
    result = await db.execute(
        _with_relations(
            select(Application)
            .where(Application.applicant_id == applicant_id)
            .order_by(Application.applied_at.desc())
        )
    )
    return list(result.scalars().all())


async def list_for_job(db: AsyncSession, job_id, poster_id) -> list[Application]:
    """Applications received for one job the poster owns."""
    result = await db.execute(
        select(JobPost.id).where(JobPost.id == job_id, JobPost.poster_id == poster_id)
    )
    if result.first() is None:
        raise NotFoundError("Job not found or unauthorized")

    result = await db.execute(
        _with_relations(
            select(Application)
            .where(Application.job_post_id == job_id)
            .order_by(Application.applied_at.desc())
        )
    )
    return list(result.scalars().all())


async def list_for_poster(
    db: AsyncSession,
    poster_id,
    status: Optional[ApplicationStatus] = None
) -> list[Application]:
    """Applications across all of the poster's jobs, optionally by status."""
    await require_role(db, poster_id, UserRole.JOB_POSTER, "Unauthorized: User must be a job poster")

    query = (
        select(Application)
        .join(JobPost, Application.job_post_id == JobPost.id)
        .where(JobPost.poster_id == poster_id)
    )
    if status is not None:
        query = query.where(Application.status == ApplicationStatus(status))

    result = await db.execute(_with_relations(query.order_by(Application.applied_at.desc())))
    return list(result.scalars().all())
