"""Role-specific profile extensions of User, plus seeker child collections."""
from datetime import datetime
from sqlalchemy import (
    Boolean, Column, Date, DateTime, Enum as SQLEnum, Float, ForeignKey, Integer, String, Text
)
from sqlalchemy.orm import relationship
import uuid
import enum

from jobboard.database import Base
from jobboard.database_types import GUID, JSONList
from jobboard.models.job_post import WorkMode


class EducationLevel(str, enum.Enum):
    HIGH_SCHOOL = "HIGH_SCHOOL"
    ASSOCIATE = "ASSOCIATE"
    BACHELOR = "BACHELOR"
    MASTER = "MASTER"
    DOCTORATE = "DOCTORATE"
    CERTIFICATE = "CERTIFICATE"


class JobSeekerProfile(Base):
    __tablename__ = "job_seeker_profiles"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id"), nullable=False, unique=True)

    # Career
    current_job_title = Column(String(255), nullable=True)
    is_open_to_work = Column(Boolean, nullable=False, default=True)
    years_of_experience = Column(Integer, nullable=True)

    # Expectations
    expected_salary_min = Column(Integer, nullable=True)
    expected_salary_max = Column(Integer, nullable=True)
    currency = Column(String(10), nullable=False, default="INR")
    preferred_work_mode = Column(SQLEnum(WorkMode, name="work_mode", create_type=False), nullable=True)
    preferred_job_types = Column(JSONList, nullable=False, default=list)  # JobType values

    # Personal
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(50), nullable=True)
    languages_spoken = Column(JSONList, nullable=False, default=list)  # "English (Fluent)"

    # Links
    resume_url = Column(String(500), nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    portfolio_url = Column(String(500), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="job_seeker_profile")
    skills = relationship("JobSeekerSkill", back_populates="profile")
    educations = relationship("Education", back_populates="profile", order_by="Education.start_date.desc()")
    experiences = relationship("Experience", back_populates="profile", order_by="Experience.start_date.desc()")


class JobSeekerSkill(Base):
    __tablename__ = "job_seeker_skills"

    profile_id = Column(GUID, ForeignKey("job_seeker_profiles.id"), primary_key=True)
    skill_id = Column(GUID, ForeignKey("skills.id"), primary_key=True)
    proficiency_level = Column(String(50), nullable=True)

    profile = relationship("JobSeekerProfile", back_populates="skills")
    skill = relationship("Skill")


class Education(Base):
    __tablename__ = "educations"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    profile_id = Column(GUID, ForeignKey("job_seeker_profiles.id"), nullable=False, index=True)
    institution = Column(String(255), nullable=False)
    degree = Column(String(255), nullable=False)
    field_of_study = Column(String(255), nullable=True)
    level = Column(SQLEnum(EducationLevel, name="education_level", create_type=True), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    is_current = Column(Boolean, nullable=False, default=False)
    gpa = Column(Float, nullable=True)

    profile = relationship("JobSeekerProfile", back_populates="educations")


class Experience(Base):
    __tablename__ = "experiences"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    profile_id = Column(GUID, ForeignKey("job_seeker_profiles.id"), nullable=False, index=True)
    job_title = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    is_current = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)

    profile = relationship("JobSeekerProfile", back_populates="experiences")


class JobPosterProfile(Base):
    __tablename__ = "job_poster_profiles"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id"), nullable=False, unique=True)
    job_title = Column(String(255), nullable=False, default="Hiring Manager")
    can_post_jobs = Column(Boolean, nullable=False, default=True)
    company_id = Column(GUID, ForeignKey("companies.id"), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="job_poster_profile")
    company = relationship("Company")
