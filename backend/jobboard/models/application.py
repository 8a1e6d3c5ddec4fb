from datetime import datetime
from enum import Enum
from sqlalchemy import Column, DateTime, Enum as SQLEnum, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid

from jobboard.database import Base
from jobboard.database_types import GUID


class ApplicationStatus(str, Enum):
    """Valid states for a job application"""
    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    SHORTLISTED = "SHORTLISTED"
    INTERVIEW = "INTERVIEW"
    OFFERED = "OFFERED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"

    @classmethod
    def _missing_(cls, value):
        # Older clients send APPLIED for a freshly submitted application
        if isinstance(value, str) and value.upper() == "APPLIED":
            return cls.PENDING
        return None


class Application(Base):
    __tablename__ = "applications"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    job_post_id = Column(GUID, ForeignKey("job_posts.id"), nullable=False)
    applicant_id = Column(GUID, ForeignKey("users.id"), nullable=False)

    status = Column(
        SQLEnum(ApplicationStatus, name="application_status", create_type=True),
        nullable=False,
        default=ApplicationStatus.PENDING
    )

    recruiter_notes = Column(Text, nullable=True)
    cover_letter = Column(Text, nullable=True)
    resume_url = Column(String(500), nullable=True)

    # Timestamps
    applied_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    job_post = relationship("JobPost")
    applicant = relationship("User")

    __table_args__ = (
        # One application per applicant per job
        UniqueConstraint("job_post_id", "applicant_id", name="uq_application_job_applicant"),

        Index("idx_applications_applicant", "applicant_id", "applied_at"),
    )
