from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Enum as SQLEnum, String, Text
from sqlalchemy.orm import relationship
import uuid
import enum

from jobboard.database import Base
from jobboard.database_types import GUID


class UserRole(str, enum.Enum):
    """Account role. Fixed at sign-up; decides which profile row exists."""
    JOB_SEEKER = "JOB_SEEKER"
    JOB_POSTER = "JOB_POSTER"


class User(Base):
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash, never the plain text

    role = Column(
        SQLEnum(UserRole, name="user_role", create_type=True),
        nullable=False,
        index=True
    )

    # Personal information
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    phone = Column(String(30), nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)  # "City, State"
    website = Column(String(500), nullable=True)
    profile_picture = Column(String(500), nullable=True)  # Public object-storage URL

    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships (role decides which one is populated)
    job_seeker_profile = relationship("JobSeekerProfile", back_populates="user", uselist=False)
    job_poster_profile = relationship("JobPosterProfile", back_populates="user", uselist=False)
    company = relationship("Company", back_populates="owner", uselist=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def is_job_seeker(self) -> bool:
        return self.role == UserRole.JOB_SEEKER

    def is_job_poster(self) -> bool:
        return self.role == UserRole.JOB_POSTER
