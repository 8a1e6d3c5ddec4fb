"""
Account service: sign-up, sign-in and the signed-in user's account view.

Sign-up writes the user, the role's profile row and (for posters) the
company in a single transaction; a duplicate email is detected by the UNIQUE
constraint on users.email rather than by a lookup beforehand.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.errors import AuthenticationError, ConflictError, InternalError, NotFoundError
from jobboard.models import (
    CompanySize, JobPosterProfile, JobSeekerProfile, User, UserRole
)
from jobboard.services.companies import new_company, parse_company_size
from jobboard.services.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

# Sign-up "work status" -> (current job title, open to work)
WORK_STATUS_DEFAULTS = {
    "employed": ("Professional", False),
}

# Sign-up experience bucket -> years of experience
EXPERIENCE_YEARS = {
    "entry": 1,
    "mid": 3,
    "senior": 7,
    "lead": 12,
}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def split_full_name(full_name: str) -> tuple[str, str]:
    """'Ada King Lovelace' -> ('Ada', 'King Lovelace')."""
    parts = full_name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def map_work_status(work_status: Optional[str]) -> tuple[Optional[str], bool]:
    return WORK_STATUS_DEFAULTS.get((work_status or "").strip().lower(), (None, True))


def map_experience_years(experience: Optional[str]) -> Optional[int]:
    return EXPERIENCE_YEARS.get((experience or "").strip().lower())


async def _email_taken(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(User.id).where(User.email == email))
    return result.first() is not None


async def sign_up(
    db: AsyncSession,
    role: UserRole,
    full_name: str,
    email: str,
    password: str,
    phone: Optional[str] = None,
    work_status: Optional[str] = None,
    experience: Optional[str] = None,
    company_name: Optional[str] = None,
    job_title: Optional[str] = None,
    company_size: Optional[str] = None
) -> User:
    """
    Create a user with the profile row for their role.

    Raises:
        ConflictError: email already registered
        InternalError: any other datastore failure (nothing is left behind)
    """
    email = normalize_email(email)
    first_name, last_name = split_full_name(full_name)

    user = User(
        email=email,
        password=hash_password(password),
        role=role,
        first_name=first_name,
        last_name=last_name,
        phone=phone or None,
    )

    try:
        db.add(user)
        await db.flush()

        if role == UserRole.JOB_SEEKER:
            current_job_title, is_open_to_work = map_work_status(work_status)
            db.add(JobSeekerProfile(
                user_id=user.id,
                current_job_title=current_job_title,
                is_open_to_work=is_open_to_work,
                years_of_experience=map_experience_years(experience),
            ))
        else:
            company_id = None
            if company_name and company_name.strip():
                company = await new_company(
                    db,
                    user.id,
                    company_name.strip(),
                    size=parse_company_size(company_size, default=CompanySize.SMALL),
                )
                company_id = company.id
            db.add(JobPosterProfile(
                user_id=user.id,
                job_title=(job_title or "").strip() or "Hiring Manager",
                can_post_jobs=True,
                company_id=company_id,
            ))

        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if await _email_taken(db, email):
            logger.info(f"Sign-up rejected, email already registered: {email}")
            raise ConflictError("User with this email already exists") from e
        logger.error(f"Sign-up failed for {email}: {e}", exc_info=True)
        raise InternalError("Failed to create account") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Sign-up failed for {email}: {e}", exc_info=True)
        raise InternalError("Failed to create account") from e

    logger.info(f"User signed up: {user.id} ({role.value})")
    return user


async def sign_in(db: AsyncSession, role: UserRole, email: str, password: str) -> tuple[User, str]:
    """
    Verify credentials for (email, role) and issue an access token.

    Unknown email, wrong role and wrong password are indistinguishable.
    """
    email = normalize_email(email)
    result = await db.execute(
        select(User).where(User.email == email, User.role == role)
    )
    user = result.scalar_one_or_none()

    if not verify_password(password, user.password if user else None):
        logger.warning(f"Failed sign-in for {email} as {role.value}")
        raise AuthenticationError("Invalid credentials")

    if not user.is_active:
        logger.warning(f"Sign-in attempt on disabled account {user.id}")
        raise AuthenticationError("Account is disabled")

    user_id = user.id
    user.last_login_at = datetime.utcnow()
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to record sign-in for {user_id}: {e}", exc_info=True)
        raise InternalError("Failed to sign in") from e

    logger.info(f"User signed in: {user_id}")
    return user, create_access_token(user_id, role.value)


async def get_account(db: AsyncSession, user_id) -> User:
    """User with both profile relations and the owned company loaded."""
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .options(
            selectinload(User.job_seeker_profile),
            selectinload(User.job_poster_profile).selectinload(JobPosterProfile.company),
            selectinload(User.company),
        )
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User not found")
    return user
