"""
Job posting service.

Only the poster who created a job may change or delete it; for anyone else
the job is reported as not found. Deleting a job removes its skill and
category links, applications and saved-job rows first, in one transaction.
"""
import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.errors import AuthorizationError, InternalError, NotFoundError, ValidationError
from jobboard.models import (
    Application, Company, ExperienceLevel, JobCategory, JobPost, JobPosterProfile,
    JobSkill, JobType, SavedJob, User, UserRole, WorkMode
)
from jobboard.schemas.job import (
    CategoryResponse, JobCompanySummary, JobPosterSummary, JobResponse, JobSkillResponse
)
from jobboard.services.access import require_role
from jobboard.services.children import delete_children, replace_children
from jobboard.services.skills import resolve_categories, resolve_skill_links
from jobboard.services.slugs import job_post_slug, suffixed

logger = logging.getLogger(__name__)

JOB_FIELDS = (
    "title", "description", "requirements", "responsibilities", "benefits",
    "job_type", "work_mode", "experience_level", "location",
    "salary_min", "salary_max", "currency", "salary_period", "show_salary",
    "application_deadline", "application_email", "application_url",
    "application_instructions", "is_featured", "is_active",
)

# NOT NULL columns that an update may change but never clear
REQUIRED_JOB_FIELDS = (
    "title", "description", "job_type", "work_mode",
    "currency", "salary_period", "show_salary", "is_featured", "is_active",
)

NOT_FOUND_OR_NOT_OWNER = "Job not found or unauthorized"


def job_load_options(prefix=None):
    """Eager loads needed by build_job_response (optionally below a relationship)."""
    def load(attr):
        return prefix.selectinload(attr) if prefix is not None else selectinload(attr)

    return (
        load(JobPost.company),
        load(JobPost.poster),
        load(JobPost.skills).selectinload(JobSkill.skill),
        load(JobPost.categories).selectinload(JobCategory.category),
    )


def build_job_response(job: JobPost, application_count: int = 0) -> JobResponse:
    """Build the public job projection from a job loaded with job_load_options()."""
    data = {key: getattr(job, key) for key in JobResponse.model_fields if hasattr(JobPost, key)}
    data.update(
        company=JobCompanySummary.model_validate(job.company) if job.company else None,
        poster=JobPosterSummary.model_validate(job.poster) if job.poster else None,
        skills=[
            JobSkillResponse(
                id=link.skill.id,
                name=link.skill.name,
                slug=link.skill.slug,
                is_required=link.is_required,
            )
            for link in job.skills
        ],
        categories=[CategoryResponse.model_validate(link.category) for link in job.categories],
        application_count=application_count,
    )
    return JobResponse(**data)


async def application_counts(db: AsyncSession, job_ids: list) -> dict:
    """job id -> number of applications."""
    if not job_ids:
        return {}
    result = await db.execute(
        select(Application.job_post_id, func.count(Application.id))
        .where(Application.job_post_id.in_(job_ids))
        .group_by(Application.job_post_id)
    )
    return {job_id: count for job_id, count in result.all()}


async def _load_job(db: AsyncSession, job_id) -> Optional[JobPost]:
    result = await db.execute(
        select(JobPost)
        .where(JobPost.id == job_id)
        .options(*job_load_options())
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _owned_job(db: AsyncSession, job_id, poster_id) -> JobPost:
    result = await db.execute(
        select(JobPost).where(JobPost.id == job_id, JobPost.poster_id == poster_id)
    )
    job = result.scalar_one_or_none()
    if not job:
        logger.warning(f"Job {job_id} not found or not owned by {poster_id}")
        raise NotFoundError(NOT_FOUND_OR_NOT_OWNER)
    return job


async def _allocate_job_slug(db: AsyncSession, title: str) -> str:
    base = job_post_slug(title)
    counter = 0
    while True:
        candidate = suffixed(base, counter)
        result = await db.execute(select(JobPost.id).where(JobPost.slug == candidate))
        if result.first() is None:
            return candidate
        counter += 1


def _check_salary_range(salary_min: Optional[int], salary_max: Optional[int]) -> None:
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise ValidationError("salary_min cannot exceed salary_max")


async def _link_skills(db: AsyncSession, job_id, skills: Iterable[Any]) -> list[JobSkill]:
    return [
        JobSkill(job_post_id=job_id, skill_id=skill.id, is_required=is_required)
        for skill, is_required in await resolve_skill_links(db, skills)
    ]


async def _link_categories(db: AsyncSession, job_id, categories: Iterable[Any]) -> list[JobCategory]:
    return [
        JobCategory(job_post_id=job_id, category_id=category.id)
        for category in await resolve_categories(db, categories)
    ]


async def get_job(db: AsyncSession, job_id) -> tuple[JobPost, int]:
    """Job with its projection relations and application count."""
    job = await _load_job(db, job_id)
    if not job:
        raise NotFoundError("Job not found")
    counts = await application_counts(db, [job.id])
    return job, counts.get(job.id, 0)


async def create_job_post(
    db: AsyncSession,
    poster_id,
    company_id,
    fields: dict,
    skills: Iterable[Any] = (),
    categories: Iterable[Any] = ()
) -> tuple[JobPost, int]:
    """
    Publish a job post for `company_id`.

    Raises:
        AuthorizationError: poster is not a job poster allowed to post
        NotFoundError: company does not exist
        ValidationError: salary range is inverted
    """
    result = await db.execute(
        select(JobPosterProfile)
        .join(User, User.id == JobPosterProfile.user_id)
        .where(JobPosterProfile.user_id == poster_id, User.role == UserRole.JOB_POSTER)
    )
    profile = result.scalar_one_or_none()
    if not profile or not profile.can_post_jobs:
        logger.warning(f"User {poster_id} attempted to post a job without permission")
        raise AuthorizationError("Unauthorized: User cannot post jobs")

    result = await db.execute(select(Company.id).where(Company.id == company_id))
    if result.first() is None:
        raise NotFoundError("Company not found")

    values = {key: value for key, value in fields.items() if key in JOB_FIELDS and value is not None}
    _check_salary_range(values.get("salary_min"), values.get("salary_max"))

    try:
        job = JobPost(
            slug=await _allocate_job_slug(db, values["title"]),
            poster_id=poster_id,
            company_id=company_id,
            published_at=datetime.utcnow(),
            **values
        )
        db.add(job)
        await db.flush()

        db.add_all(await _link_skills(db, job.id, skills))
        db.add_all(await _link_categories(db, job.id, categories))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to create job post for {poster_id}: {e}", exc_info=True)
        raise InternalError("Failed to create job post") from e

    logger.info(f"Job post created: {job.id} ({job.slug}) by {poster_id}")
    return await get_job(db, job.id)


async def update_job_post(
    db: AsyncSession,
    job_id,
    poster_id,
    fields: dict,
    skills: Optional[Iterable[Any]] = None,
    categories: Optional[Iterable[Any]] = None
) -> tuple[JobPost, int]:
    """
    Partially update a job the poster owns.

    Only keys present in `fields` are written. A `skills` or `categories`
    argument that is not None replaces the whole set.
    """
    job = await _owned_job(db, job_id, poster_id)

    for key in REQUIRED_JOB_FIELDS:
        if key in fields and fields[key] is None:
            raise ValidationError(f"{key} cannot be empty")
    _check_salary_range(
        fields.get("salary_min", job.salary_min),
        fields.get("salary_max", job.salary_max),
    )

    try:
        for key, value in fields.items():
            if key in JOB_FIELDS:
                setattr(job, key, value)
        job.updated_at = datetime.utcnow()

        if skills is not None:
            await replace_children(
                db, JobSkill, JobSkill.job_post_id == job_id, await _link_skills(db, job_id, skills)
            )
        if categories is not None:
            await replace_children(
                db, JobCategory, JobCategory.job_post_id == job_id,
                await _link_categories(db, job_id, categories)
            )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to update job post {job_id}: {e}", exc_info=True)
        raise InternalError("Failed to update job post") from e

    logger.info(f"Job post updated: {job_id}")
    return await get_job(db, job_id)


async def set_job_active(db: AsyncSession, job_id, poster_id, is_active: bool) -> tuple[JobPost, int]:
    """Open or close a job for applications."""
    return await update_job_post(db, job_id, poster_id, {"is_active": is_active})


async def delete_job_post(db: AsyncSession, job_id, poster_id) -> None:
    """Delete a job the poster owns along with everything that references it."""
    job = await _owned_job(db, job_id, poster_id)

    try:
        removed = {
            "skills": await delete_children(db, JobSkill, JobSkill.job_post_id == job_id),
            "categories": await delete_children(db, JobCategory, JobCategory.job_post_id == job_id),
            "applications": await delete_children(db, Application, Application.job_post_id == job_id),
            "saved": await delete_children(db, SavedJob, SavedJob.job_post_id == job_id),
        }
        await db.delete(job)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to delete job post {job_id}: {e}", exc_info=True)
        raise InternalError("Failed to delete job post") from e

    logger.info(f"Job post deleted: {job_id}", extra={"job_id": str(job_id), "removed": removed})


async def list_jobs(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[JobType] = None,
    work_mode: Optional[WorkMode] = None,
    experience_level: Optional[ExperienceLevel] = None,
    salary_min: Optional[int] = None,
    salary_max: Optional[int] = None
) -> tuple[list[tuple[JobPost, int]], int]:
    """
    Active jobs, newest first. Filters are AND-ed together.

    The salary bounds apply to each posting's own salary_min.
    Returns ``([(job, application_count), ...], total_count)``.
    """
    conditions = [JobPost.is_active.is_(True)]
    if search:
        pattern = f"%{search.strip()}%"
        conditions.append(or_(
            JobPost.title.ilike(pattern),
            JobPost.description.ilike(pattern),
            Company.name.ilike(pattern),
        ))
    if location:
        conditions.append(JobPost.location.ilike(f"%{location.strip()}%"))
    if job_type:
        conditions.append(JobPost.job_type == job_type)
    if work_mode:
        conditions.append(JobPost.work_mode == work_mode)
    if experience_level:
        conditions.append(JobPost.experience_level == experience_level)
    if salary_min is not None:
        conditions.append(JobPost.salary_min >= salary_min)
    if salary_max is not None:
        conditions.append(JobPost.salary_min <= salary_max)

    total = (await db.execute(
        select(func.count(JobPost.id))
        .join(Company, JobPost.company_id == Company.id)
        .where(*conditions)
    )).scalar_one()

    result = await db.execute(
        select(JobPost)
        .join(Company, JobPost.company_id == Company.id)
        .where(*conditions)
        .options(*job_load_options())
        .order_by(JobPost.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    jobs = result.scalars().all()
    counts = await application_counts(db, [job.id for job in jobs])
    return [(job, counts.get(job.id, 0)) for job in jobs], total


async def list_poster_jobs(db: AsyncSession, poster_id) -> tuple[list[tuple[JobPost, int]], dict]:
    """
    Every job the poster created (active or not), newest first, with stats.
    """
    await require_role(db, poster_id, UserRole.JOB_POSTER, "Unauthorized: User must be a job poster")

    result = await db.execute(
        select(JobPost)
        .where(JobPost.poster_id == poster_id)
        .options(*job_load_options())
        .order_by(JobPost.created_at.desc())
        .execution_options(populate_existing=True)
    )
    jobs = result.scalars().all()
    counts = await application_counts(db, [job.id for job in jobs])

    stats = {
        "total_jobs": len(jobs),
        "active_jobs": sum(1 for job in jobs if job.is_active),
        "total_applications": sum(counts.values()),
        "featured_jobs": sum(1 for job in jobs if job.is_featured),
    }
    return [(job, counts.get(job.id, 0)) for job in jobs], stats
