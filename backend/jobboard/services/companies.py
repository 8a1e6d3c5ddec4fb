"""
Company profile service.

A job poster owns at most one company (UNIQUE owner_id). Company slugs are
derived from the name once, deduplicated with a numeric suffix, and never
change on rename.
"""
import logging
from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.errors import ConflictError, InternalError, NotFoundError, ValidationError
from jobboard.models import Company, CompanySize, JobPost, JobPosterProfile, UserRole
from jobboard.services.access import require_role
from jobboard.services.slugs import slugify, suffixed

logger = logging.getLogger(__name__)

# Attempts at inserting a company when a concurrent insert takes our slug
SLUG_ATTEMPTS = 3

# Plain columns copied from request fields as given
COMPANY_FIELDS = (
    "description", "industry", "founded_year", "email", "phone", "website",
    "headquarters", "logo", "linkedin_url", "twitter_url", "facebook_url",
)

POSTER_ONLY = "Unauthorized: User must be a job poster"


def parse_company_size(value: Any, default: Optional[CompanySize] = None) -> Optional[CompanySize]:
    """'medium' -> CompanySize.MEDIUM; anything unrecognised gives `default`."""
    if isinstance(value, CompanySize):
        return value
    if not isinstance(value, str):
        return default
    try:
        return CompanySize(value.strip().upper())
    except ValueError:
        return default


def normalize_locations(locations: Any) -> list[dict]:
    """
    Store locations as ``{"name", "address", "map_link"}`` dicts.

    Plain strings become ``{"name": ...}``; entries without a name are dropped.
    """
    normalized = []
    for location in locations or []:
        if isinstance(location, str):
            location = {"name": location}
        if not isinstance(location, dict):
            continue
        name = (location.get("name") or "").strip()
        if not name:
            continue
        normalized.append({
            "name": name,
            "address": location.get("address") or None,
            "map_link": location.get("map_link") or location.get("mapLink") or None,
        })
    return normalized


def _apply_fields(company: Company, fields: dict) -> None:
    if "name" in fields:
        name = (fields["name"] or "").strip()
        if not name:
            raise ValidationError("Company name is required")
        company.name = name
    for key in COMPANY_FIELDS:
        if key in fields:
            setattr(company, key, fields[key])
    if "size" in fields:
        company.size = parse_company_size(fields["size"])
    if "locations" in fields:
        company.locations = normalize_locations(fields["locations"])
    if "benefits" in fields:
        company.benefits = [benefit for benefit in (fields["benefits"] or []) if benefit]


async def _slug_taken(db: AsyncSession, slug: str) -> bool:
    result = await db.execute(select(Company.id).where(Company.slug == slug))
    return result.first() is not None


async def allocate_company_slug(db: AsyncSession, name: str) -> str:
    """First free slug among base, base-1, base-2, ..."""
    base = slugify(name) or "company"
    counter = 0
    while await _slug_taken(db, suffixed(base, counter)):
        counter += 1
    return suffixed(base, counter)


async def new_company(db: AsyncSession, owner_id, name: str, **fields) -> Company:
    """Insert a company inside the caller's transaction (flushes, does not commit)."""
    company = Company(
        owner_id=owner_id,
        name=name,
        slug=await allocate_company_slug(db, name),
        **fields
    )
    db.add(company)
    await db.flush()
    return company


async def company_for_owner(db: AsyncSession, owner_id) -> Optional[Company]:
    result = await db.execute(select(Company).where(Company.owner_id == owner_id))
    return result.scalar_one_or_none()


async def _link_poster_profile(db: AsyncSession, owner_id, company_id) -> None:
    result = await db.execute(
        select(JobPosterProfile).where(JobPosterProfile.user_id == owner_id)
    )
    profile = result.scalar_one_or_none()
    if profile is None:
        profile = JobPosterProfile(user_id=owner_id, can_post_jobs=True)
        db.add(profile)
    profile.company_id = company_id


async def count_active_jobs(db: AsyncSession, company_ids: list) -> dict:
    """company id -> number of active job posts."""
    if not company_ids:
        return {}
    result = await db.execute(
        select(JobPost.company_id, func.count(JobPost.id))
        .where(JobPost.company_id.in_(company_ids), JobPost.is_active.is_(True))
        .group_by(JobPost.company_id)
    )
    return {company_id: count for company_id, count in result.all()}


async def _create(db: AsyncSession, owner_id, fields: dict) -> Company:
    name = (fields.get("name") or "").strip()
    if not name:
        raise ValidationError("Company name is required")

    for attempt in range(SLUG_ATTEMPTS):
        try:
            company = await new_company(db, owner_id, name)
            _apply_fields(company, {k: v for k, v in fields.items() if k != "name"})
            await _link_poster_profile(db, owner_id, company.id)
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if await company_for_owner(db, owner_id) is not None:
                raise ConflictError("User already has a company profile") from e
            if attempt + 1 == SLUG_ATTEMPTS:
                logger.error(f"Failed to create company '{name}': {e}", exc_info=True)
                raise InternalError("Failed to create company") from e
            logger.warning(f"Slug collision creating company '{name}', retrying")
            continue
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to create company '{name}': {e}", exc_info=True)
            raise InternalError("Failed to create company") from e

        logger.info(f"Company created: {company.slug} (owner {owner_id})")
        return company


async def _update(db: AsyncSession, company: Company, fields: dict) -> Company:
    company_id = company.id
    _apply_fields(company, fields)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to update company {company_id}: {e}", exc_info=True)
        raise InternalError("Failed to update company") from e

    logger.info(f"Company updated: {company.slug}")
    return company


async def create_company(db: AsyncSession, owner_id, fields: dict) -> Company:
    await require_role(db, owner_id, UserRole.JOB_POSTER, POSTER_ONLY)
    return await _create(db, owner_id, fields)


async def update_company(db: AsyncSession, owner_id, fields: dict) -> Company:
    await require_role(db, owner_id, UserRole.JOB_POSTER, POSTER_ONLY)
    company = await company_for_owner(db, owner_id)
    if not company:
        raise NotFoundError("Company not found")
    return await _update(db, company, fields)


async def get_company_profile(db: AsyncSession, owner_id) -> tuple[Company, int]:
    """The owner's company and its number of active job posts."""
    await require_role(db, owner_id, UserRole.JOB_POSTER, POSTER_ONLY)
    company = await company_for_owner(db, owner_id)
    if not company:
        raise NotFoundError("Company not found")
    counts = await count_active_jobs(db, [company.id])
    return company, counts.get(company.id, 0)


async def list_companies(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    industry: Optional[str] = None,
    size: Optional[str] = None
) -> tuple[list[tuple[Company, int]], int]:
    """
    Paginated company directory, verified companies first, then newest.

    Returns ``([(company, active_job_count), ...], total_count)``.
    """
    query = select(Company)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(Company.name.ilike(pattern), Company.description.ilike(pattern)))
    if industry:
        query = query.where(Company.industry.ilike(f"%{industry.strip()}%"))
    if size:
        parsed = parse_company_size(size)
        if parsed is None:
            raise ValidationError(f"Unknown company size: {size}")
        query = query.where(Company.size == parsed)

    total = (await db.execute(
        select(func.count()).select_from(query.subquery())
    )).scalar_one()

    result = await db.execute(
        query.order_by(Company.is_verified.desc(), Company.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    companies = result.scalars().all()
    counts = await count_active_jobs(db, [company.id for company in companies])
    return [(company, counts.get(company.id, 0)) for company in companies], total
