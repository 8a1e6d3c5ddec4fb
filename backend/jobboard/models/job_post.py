from datetime import datetime
from sqlalchemy import (
    Boolean, Column, DateTime, Enum as SQLEnum, ForeignKey, Index, Integer, String, Text
)
from sqlalchemy.orm import relationship
import uuid
import enum

from jobboard.database import Base
from jobboard.database_types import GUID


class JobType(str, enum.Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    FREELANCE = "FREELANCE"
    INTERNSHIP = "INTERNSHIP"
    TEMPORARY = "TEMPORARY"


class WorkMode(str, enum.Enum):
    REMOTE = "REMOTE"
    ON_SITE = "ON_SITE"
    HYBRID = "HYBRID"


class ExperienceLevel(str, enum.Enum):
    ENTRY_LEVEL = "ENTRY_LEVEL"    # 0-2 years
    MID_LEVEL = "MID_LEVEL"        # 2-5 years
    SENIOR_LEVEL = "SENIOR_LEVEL"  # 5+ years
    EXECUTIVE = "EXECUTIVE"


class JobPost(Base):
    __tablename__ = "job_posts"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    # slugify(title) + "-" + creation epoch millis
    slug = Column(String(320), nullable=False, unique=True, index=True)

    # Content
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=True)
    responsibilities = Column(Text, nullable=True)
    benefits = Column(Text, nullable=True)

    # Classification
    job_type = Column(SQLEnum(JobType, name="job_type", create_type=True), nullable=False)
    work_mode = Column(SQLEnum(WorkMode, name="work_mode", create_type=True), nullable=False)
    experience_level = Column(
        SQLEnum(ExperienceLevel, name="experience_level", create_type=True),
        nullable=True
    )
    location = Column(String(255), nullable=True)

    # Compensation
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    currency = Column(String(10), nullable=False, default="USD")
    salary_period = Column(String(20), nullable=False, default="YEARLY")
    show_salary = Column(Boolean, nullable=False, default=True)

    # How to apply
    application_deadline = Column(DateTime, nullable=True)
    application_email = Column(String(255), nullable=True)
    application_url = Column(String(500), nullable=True)
    application_instructions = Column(Text, nullable=True)

    # Visibility
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime, nullable=True)

    # Ownership
    poster_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    company_id = Column(GUID, ForeignKey("companies.id"), nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    poster = relationship("User")
    company = relationship("Company", back_populates="job_posts")
    # Link rows are removed explicitly before the post itself
    skills = relationship("JobSkill", back_populates="job_post", passive_deletes="all")
    categories = relationship("JobCategory", back_populates="job_post", passive_deletes="all")

    def is_owned_by(self, user_id) -> bool:
        return str(self.poster_id) == str(user_id)


class JobSkill(Base):
    """Job post <-> skill link, tagged required or optional."""
    __tablename__ = "job_skills"

    job_post_id = Column(GUID, ForeignKey("job_posts.id"), primary_key=True)
    skill_id = Column(GUID, ForeignKey("skills.id"), primary_key=True)
    is_required = Column(Boolean, nullable=False, default=False)

    job_post = relationship("JobPost", back_populates="skills")
    skill = relationship("Skill")

    __table_args__ = (
        Index("idx_job_skills_skill", "skill_id"),
    )


class JobCategory(Base):
    """Job post <-> category link."""
    __tablename__ = "job_categories"

    job_post_id = Column(GUID, ForeignKey("job_posts.id"), primary_key=True)
    category_id = Column(GUID, ForeignKey("categories.id"), primary_key=True)

    job_post = relationship("JobPost", back_populates="categories")
    category = relationship("Category")
