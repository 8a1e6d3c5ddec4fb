"""Job seekers' bookmarked jobs."""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.errors import InternalError, NotFoundError
from jobboard.models import JobPost, SavedJob, UserRole
from jobboard.schemas.saved_job import SavedJobResponse
from jobboard.services.access import require_role
from jobboard.services.job_posts import build_job_response, job_load_options

logger = logging.getLogger(__name__)

SEEKER_ONLY = "Only job seekers can save jobs"


def build_saved_job_response(saved: SavedJob) -> SavedJobResponse:
    return SavedJobResponse(
        id=saved.id,
        saved_at=saved.saved_at,
        job=build_job_response(saved.job_post),
    )


async def _saved_row(db: AsyncSession, user_id, job_id):
    result = await db.execute(
        select(SavedJob)
        .where(SavedJob.user_id == user_id, SavedJob.job_post_id == job_id)
        .options(*job_load_options(selectinload(SavedJob.job_post)))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def save_job(db: AsyncSession, user_id, job_id) -> SavedJob:
    """Bookmark a job. Saving the same job again returns the existing bookmark."""
    await require_role(db, user_id, UserRole.JOB_SEEKER, SEEKER_ONLY)

    result = await db.execute(select(JobPost.id).where(JobPost.id == job_id))
    if result.first() is None:
        raise NotFoundError("Job not found")

    try:
        db.add(SavedJob(user_id=user_id, job_post_id=job_id))
        await db.commit()
        logger.info(f"Job {job_id} saved by {user_id}")
    except IntegrityError as e:
        await db.rollback()
        saved = await _saved_row(db, user_id, job_id)
        if saved is None:
            # Not a duplicate: the job went away after the existence check
            logger.info(f"Job {job_id} removed before it could be saved by {user_id}")
            raise NotFoundError("Job not found") from e
        logger.debug(f"Job {job_id} already saved by {user_id}")
        return saved
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to save job {job_id} for {user_id}: {e}", exc_info=True)
        raise InternalError("Failed to save job") from e

    return await _saved_row(db, user_id, job_id)


async def unsave_job(db: AsyncSession, user_id, job_id) -> None:
    await require_role(db, user_id, UserRole.JOB_SEEKER, SEEKER_ONLY)

    result = await db.execute(
        select(SavedJob).where(SavedJob.user_id == user_id, SavedJob.job_post_id == job_id)
    )
    saved = result.scalar_one_or_none()
    if not saved:
        raise NotFoundError("Saved job not found")

    try:
        await db.delete(saved)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to remove saved job {job_id} for {user_id}: {e}", exc_info=True)
        raise InternalError("Failed to remove saved job") from e

    logger.info(f"Job {job_id} unsaved by {user_id}")


async def list_saved_jobs(db: AsyncSession, user_id) -> list[SavedJob]:
    """Saved jobs, most recently saved first."""
    await require_role(db, user_id, UserRole.JOB_SEEKER, SEEKER_ONLY)

    result = await db.execute(
        select(SavedJob)
        .where(SavedJob.user_id == user_id)
        .options(*job_load_options(selectinload(SavedJob.job_post)))
        .order_by(SavedJob.saved_at.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
