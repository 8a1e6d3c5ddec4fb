"""Job seeker profile business logic."""
import logging
import re
from datetime import date
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.errors import InternalError, ValidationError
from jobboard.models import (
    Education, EducationLevel, Experience, JobSeekerProfile, JobSeekerSkill,
    JobType, User, UserRole
)
from jobboard.schemas.auth import UserResponse
from jobboard.schemas.profile import (
    AccountResponse, EducationResponse, ExperienceResponse, JobPosterProfileResponse,
    JobSeekerProfileDetail, JobSeekerProfileResponse, JobSeekerProfileSummary,
    SeekerSkillResponse
)
from jobboard.schemas.company import CompanyResponse
from jobboard.services.access import load_user, require_role
from jobboard.services.children import replace_children
from jobboard.services.skills import find_or_create_skill

logger = logging.getLogger(__name__)

# Display label (lowercase, dashes/underscores as spaces) -> JobType
JOB_TYPE_LABELS = {
    "full time": JobType.FULL_TIME,
    "part time": JobType.PART_TIME,
    "contract": JobType.CONTRACT,
    "freelance": JobType.FREELANCE,
    "internship": JobType.INTERNSHIP,
    "temporary": JobType.TEMPORARY,
}

# Checked in order; first level whose keywords appear as whole words wins
EDUCATION_KEYWORDS = (
    (EducationLevel.DOCTORATE, {"phd", "doctorate", "doctoral", "dphil"}),
    (EducationLevel.MASTER, {"master", "masters", "mba", "ms", "msc", "ma", "mtech", "me", "mca", "mcom"}),
    (EducationLevel.BACHELOR, {"bachelor", "bachelors", "bs", "bsc", "ba", "btech", "be", "bca", "bcom", "bba"}),
    (EducationLevel.ASSOCIATE, {"associate", "associates"}),
    (EducationLevel.HIGH_SCHOOL, {"high school", "secondary", "hsc", "ssc", "12th", "10th"}),
)

# User columns a profile save may overwrite
USER_FIELDS = ("first_name", "last_name", "phone", "bio", "website", "profile_picture")

# Request key -> JobSeekerProfile column
PROFILE_FIELDS = {
    "current_job_title": "current_job_title",
    "is_open_to_work": "is_open_to_work",
    "years_of_experience": "years_of_experience",
    "expected_salary_min": "expected_salary_min",
    "expected_salary_max": "expected_salary_max",
    "currency": "currency",
    "preferred_work_mode": "preferred_work_mode",
    "date_of_birth": "date_of_birth",
    "gender": "gender",
    "linkedin": "linkedin_url",
    "website": "portfolio_url",
    "resume_url": "resume_url",
}

# Columns that must not be set to NULL
NOT_NULL_PROFILE_FIELDS = ("is_open_to_work", "currency")


def map_job_type(label: str) -> JobType:
    """'Full Time' / 'full-time' / 'FULL_TIME' -> JobType.FULL_TIME."""
    key = re.sub(r"[\s_-]+", " ", (label or "").strip().lower())
    if key not in JOB_TYPE_LABELS:
        raise ValidationError(f"Unknown job type: {label}")
    return JOB_TYPE_LABELS[key]


def map_education_level(degree: str) -> EducationLevel:
    """
    Guess the education level from a free-text degree.

    >>> map_education_level("M.Sc. Computer Science")
    <EducationLevel.MASTER: 'MASTER'>
    >>> map_education_level("Diploma in Design")
    <EducationLevel.CERTIFICATE: 'CERTIFICATE'>
    """
    text = (degree or "").lower().replace(".", "").replace("'", "")
    words = set(re.findall(r"[a-z0-9]+", text))
    phrase = " ".join(re.findall(r"[a-z0-9]+", text))
    for level, keywords in EDUCATION_KEYWORDS:
        for keyword in keywords:
            if (" " in keyword and f" {keyword} " in f" {phrase} ") or keyword in words:
                return level
    return EducationLevel.CERTIFICATE


def parse_gpa(grade: Optional[str]) -> Optional[float]:
    try:
        return float(grade)
    except (TypeError, ValueError):
        return None


def _as_dict(entry: Any) -> dict:
    return entry if isinstance(entry, dict) else entry.model_dump()


def _birth_date_from_age(age: int) -> date:
    return date(date.today().year - age, 1, 1)


async def _seeker_skill_rows(db: AsyncSession, profile_id, skills: list) -> list[JobSeekerSkill]:
    rows = {}
    for entry in map(_as_dict, skills):
        skill = await find_or_create_skill(db, entry.get("name"))
        if skill is not None and skill.id not in rows:
            rows[skill.id] = JobSeekerSkill(
                profile_id=profile_id,
                skill_id=skill.id,
                proficiency_level=entry.get("level"),
            )
    return list(rows.values())


def _education_rows(profile_id, education: list) -> list[Education]:
    rows = []
    for entry in map(_as_dict, education):
        if not entry.get("institution") or not entry.get("degree"):
            continue
        rows.append(Education(
            profile_id=profile_id,
            institution=entry["institution"],
            degree=entry["degree"],
            field_of_study=entry.get("field"),
            level=map_education_level(entry["degree"]),
            start_date=entry.get("start_date") or date.today(),
            end_date=entry.get("end_date"),
            is_current=bool(entry.get("current")),
            gpa=parse_gpa(entry.get("grade")),
        ))
    return rows


def _experience_rows(profile_id, experience: list) -> list[Experience]:
    rows = []
    for entry in map(_as_dict, experience):
        if not entry.get("company") or not entry.get("position"):
            continue
        rows.append(Experience(
            profile_id=profile_id,
            job_title=entry["position"],
            company_name=entry["company"],
            location=entry.get("location"),
            start_date=entry.get("start_date") or date.today(),
            end_date=entry.get("end_date"),
            is_current=bool(entry.get("current")),
            description=entry.get("description"),
        ))
    return rows


def _internship_rows(profile_id, internships: list) -> list[Experience]:
    rows = []
    for entry in map(_as_dict, internships):
        if not entry.get("company") or not entry.get("position"):
            continue
        description = entry.get("description") or ""
        if entry.get("duration"):
            description = f"{description}\nDuration: {entry['duration']}".strip()
        rows.append(Experience(
            profile_id=profile_id,
            job_title=f"{entry['position']} (Intern)",
            company_name=entry["company"],
            start_date=date.today(),
            is_current=False,
            description=description or None,
        ))
    return rows


def _profile_values(fields: dict) -> dict:
    """Column values for JobSeekerProfile derived from the request fields."""
    values = {column: fields[key] for key, column in PROFILE_FIELDS.items() if key in fields}

    for column in NOT_NULL_PROFILE_FIELDS:
        if column in values and values[column] is None:
            del values[column]

    if fields.get("job_type") is not None:
        values["preferred_job_types"] = list(dict.fromkeys(
            map_job_type(label).value for label in fields["job_type"]
        ))

    if fields.get("languages") is not None:
        spoken = []
        for language in map(_as_dict, fields["languages"]):
            if language.get("proficiency"):
                spoken.append(f"{language['name']} ({language['proficiency']})")
            else:
                spoken.append(language["name"])
        values["languages_spoken"] = spoken

    if fields.get("age") is not None and values.get("date_of_birth") is None:
        if fields["age"] <= 0:
            raise ValidationError("age must be positive")
        values["date_of_birth"] = _birth_date_from_age(fields["age"])

    return values


async def save_job_seeker_profile(db: AsyncSession, user_id, fields: dict) -> tuple[User, Optional[JobSeekerProfile]]:
    """
    Update the seeker's user fields and upsert their profile.

    Child collections (skills, education, experience) that appear in
    `fields` replace the stored set; internships become experience rows.
    Everything is written in one transaction.
    """
    user = await require_role(db, user_id, UserRole.JOB_SEEKER, "Only job seekers have a job seeker profile")

    # Validate and derive everything before the first write
    profile_values = _profile_values(fields)

    try:
        for key in USER_FIELDS:
            if key not in fields:
                continue
            value = fields[key]
            if key == "first_name" and not value:
                continue
            if key == "last_name":
                value = value or ""
            setattr(user, key, value)
        if fields.get("city") and fields.get("state"):
            user.location = f"{fields['city']}, {fields['state']}"

        result = await db.execute(
            select(JobSeekerProfile).where(JobSeekerProfile.user_id == user_id)
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            profile = JobSeekerProfile(user_id=user_id)
            db.add(profile)
        for column, value in profile_values.items():
            setattr(profile, column, value)
        await db.flush()
        profile_id = profile.id

        if fields.get("skills") is not None:
            await replace_children(
                db, JobSeekerSkill, JobSeekerSkill.profile_id == profile_id,
                await _seeker_skill_rows(db, profile_id, fields["skills"])
            )
        if fields.get("education") is not None:
            await replace_children(
                db, Education, Education.profile_id == profile_id,
                _education_rows(profile_id, fields["education"])
            )
        if fields.get("experience") is not None:
            await replace_children(
                db, Experience, Experience.profile_id == profile_id,
                _experience_rows(profile_id, fields["experience"])
                + _internship_rows(profile_id, fields.get("internships") or [])
            )
        elif fields.get("internships"):
            db.add_all(_internship_rows(profile_id, fields["internships"]))

        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to save profile for {user_id}: {e}", exc_info=True)
        raise InternalError("Failed to update profile") from e

    logger.info(f"Job seeker profile saved for {user_id}")
    return await get_job_seeker_profile(db, user_id)


async def get_job_seeker_profile(db: AsyncSession, user_id) -> tuple[User, Optional[JobSeekerProfile]]:
    """User plus profile with skills, education and experience (newest first)."""
    user = await load_user(db, user_id)
    result = await db.execute(
        select(JobSeekerProfile)
        .where(JobSeekerProfile.user_id == user_id)
        .options(
            selectinload(JobSeekerProfile.skills).selectinload(JobSeekerSkill.skill),
            selectinload(JobSeekerProfile.educations),
            selectinload(JobSeekerProfile.experiences),
        )
        .execution_options(populate_existing=True)
    )
    return user, result.scalar_one_or_none()


def build_seeker_profile_response(user: User, profile: Optional[JobSeekerProfile]) -> JobSeekerProfileResponse:
    """Build JobSeekerProfileResponse from a profile loaded by get_job_seeker_profile."""
    detail = None
    if profile is not None:
        summary = JobSeekerProfileSummary.model_validate(profile)
        detail = JobSeekerProfileDetail(
            **summary.model_dump(),
            skills=[
                SeekerSkillResponse(
                    id=link.skill.id,
                    name=link.skill.name,
                    slug=link.skill.slug,
                    proficiency_level=link.proficiency_level,
                )
                for link in profile.skills
            ],
            educations=[EducationResponse.model_validate(row) for row in profile.educations],
            experiences=[ExperienceResponse.model_validate(row) for row in profile.experiences],
        )
    return JobSeekerProfileResponse(user=UserResponse.model_validate(user), profile=detail)


def build_account_response(user: User, active_job_count: int = 0) -> AccountResponse:
    """Build AccountResponse from a user loaded by accounts.get_account."""
    company = None
    if user.company is not None:
        company = CompanyResponse.model_validate(user.company)
        company.active_job_count = active_job_count
    return AccountResponse(
        user=UserResponse.model_validate(user),
        job_seeker_profile=(
            JobSeekerProfileSummary.model_validate(user.job_seeker_profile)
            if user.job_seeker_profile else None
        ),
        job_poster_profile=(
            JobPosterProfileResponse.model_validate(user.job_poster_profile)
            if user.job_poster_profile else None
        ),
        company=company,
    )
