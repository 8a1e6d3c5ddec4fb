"""
Skill and category resolution.

Job posts and seeker profiles reference skills either by id or by free-text
name. Names are matched case-insensitively (or by slug) and created on first
use, so the skills table never holds two spellings of the same skill.
"""
import logging
import uuid
from typing import Any, Iterable, Optional, Type

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models import Category, Skill
from jobboard.services.slugs import slugify

logger = logging.getLogger(__name__)


def skill_slug(name: str) -> str:
    """Slug that keeps C, C++ and C# apart."""
    return slugify(name.replace("+", " plus ").replace("#", " sharp "))


def _as_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return None


async def _find_or_create(db: AsyncSession, model: Type, name: str, slug: str, **defaults):
    result = await db.execute(
        select(model).where(
            or_(func.lower(model.name) == name.lower(), model.slug == slug)
        ).limit(1)
    )
    row = result.scalars().first()
    if row:
        return row

    row = model(name=name, slug=slug, **defaults)
    db.add(row)
    await db.flush()
    logger.info(f"Created {model.__tablename__[:-1]} '{name}' ({slug})")
    return row


async def find_or_create_skill(db: AsyncSession, name: str) -> Optional[Skill]:
    """Return the skill matching name, creating it if needed. Blank names give None."""
    name = (name or "").strip()
    slug = skill_slug(name) if name else ""
    if not slug:
        return None
    return await _find_or_create(db, Skill, name, slug, category="General")


async def resolve_skill(db: AsyncSession, reference: Any) -> Optional[Skill]:
    """
    Resolve a skill reference (existing id or free-text name).

    Returns None for malformed references; callers drop those silently.
    """
    if not isinstance(reference, str) or not reference.strip():
        return None

    skill_id = _as_uuid(reference.strip())
    if skill_id is not None:
        skill = await db.get(Skill, skill_id)
        if skill:
            return skill

    return await find_or_create_skill(db, reference)


async def resolve_category(db: AsyncSession, reference: Any) -> Optional[Category]:
    """Resolve a category reference (existing id or name), same rules as skills."""
    if not isinstance(reference, str) or not reference.strip():
        return None

    category_id = _as_uuid(reference.strip())
    if category_id is not None:
        category = await db.get(Category, category_id)
        if category:
            return category

    name = reference.strip()
    slug = slugify(name)
    if not slug:
        return None
    return await _find_or_create(db, Category, name, slug)


async def resolve_skill_links(db: AsyncSession, entries: Iterable[Any]) -> list[tuple[Skill, bool]]:
    """
    Turn ``[{"skill_id": ..., "is_required": ...}]`` into (Skill, is_required)
    pairs, dropping malformed entries and merging duplicates.
    """
    resolved: dict[uuid.UUID, tuple[Skill, bool]] = {}
    for entry in entries or []:
        if isinstance(entry, str):
            reference, is_required = entry, False
        elif isinstance(entry, dict):
            reference = entry.get("skill_id")
            is_required = bool(entry.get("is_required", False))
        else:
            reference = getattr(entry, "skill_id", None)
            is_required = bool(getattr(entry, "is_required", False))

        skill = await resolve_skill(db, reference)
        if skill is None:
            logger.debug(f"Dropping malformed skill reference: {reference!r}")
            continue

        if skill.id in resolved:
            _, already_required = resolved[skill.id]
            is_required = is_required or already_required
        resolved[skill.id] = (skill, is_required)

    return list(resolved.values())


async def resolve_categories(db: AsyncSession, references: Iterable[Any]) -> list[Category]:
    resolved: dict[uuid.UUID, Category] = {}
    for reference in references or []:
        category = await resolve_category(db, reference)
        if category is not None:
            resolved.setdefault(category.id, category)
    return list(resolved.values())
