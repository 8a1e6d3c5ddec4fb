from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid

from jobboard.database import Base
from jobboard.database_types import GUID


class SavedJob(Base):
    __tablename__ = "saved_jobs"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    job_post_id = Column(GUID, ForeignKey("job_posts.id"), nullable=False)
    saved_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    job_post = relationship("JobPost")

    __table_args__ = (
        UniqueConstraint("user_id", "job_post_id", name="uq_saved_job_user_job"),
    )
