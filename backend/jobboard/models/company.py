"""Company model. Each job poster owns at most one company."""
from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Enum as SQLEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
import uuid
import enum

from jobboard.database import Base
from jobboard.database_types import GUID, JSONList


class CompanySize(str, enum.Enum):
    """Headcount bucket shown on the company profile."""
    STARTUP = "STARTUP"
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"
    ENTERPRISE = "ENTERPRISE"


class Company(Base):
    __tablename__ = "companies"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)

    description = Column(Text, nullable=True)
    industry = Column(String(255), nullable=True)
    size = Column(SQLEnum(CompanySize, name="company_size", create_type=True), nullable=True)
    founded_year = Column(Integer, nullable=True)

    # Contact
    email = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=True)
    website = Column(String(500), nullable=True)
    headquarters = Column(String(255), nullable=True)

    # Structure: [{"name": "Berlin", "address": "...", "map_link": "https://..."}]
    locations = Column(JSONList, nullable=False, default=list)
    # Structure: ["Health insurance", "Remote budget"]
    benefits = Column(JSONList, nullable=False, default=list)

    # Branding & social
    logo = Column(String(500), nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    twitter_url = Column(String(500), nullable=True)
    facebook_url = Column(String(500), nullable=True)

    is_verified = Column(Boolean, nullable=False, default=False)

    # One company per owner, enforced by the database
    owner_id = Column(GUID, ForeignKey("users.id"), nullable=False, unique=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="company")
    job_posts = relationship("JobPost", back_populates="company")
