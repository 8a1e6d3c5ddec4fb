"""Database models"""
from jobboard.models.user import User, UserRole
from jobboard.models.company import Company, CompanySize
from jobboard.models.skill import Skill, Category
from jobboard.models.job_post import (
    JobPost,
    JobSkill,
    JobCategory,
    JobType,
    WorkMode,
    ExperienceLevel,
)
from jobboard.models.application import Application, ApplicationStatus
from jobboard.models.saved_job import SavedJob
from jobboard.models.profile import (
    JobSeekerProfile,
    JobSeekerSkill,
    JobPosterProfile,
    Education,
    Experience,
    EducationLevel,
)

__all__ = [
    "User",
    "UserRole",
    "Company",
    "CompanySize",
    "Skill",
    "Category",
    "JobPost",
    "JobSkill",
    "JobCategory",
    "JobType",
    "WorkMode",
    "ExperienceLevel",
    "Application",
    "ApplicationStatus",
    "SavedJob",
    "JobSeekerProfile",
    "JobSeekerSkill",
    "JobPosterProfile",
    "Education",
    "Experience",
    "EducationLevel",
]
