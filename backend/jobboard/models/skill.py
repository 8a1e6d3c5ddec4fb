"""Skill and category lookup tables, auto-populated from free text."""
from datetime import datetime
from sqlalchemy import Column, DateTime, String, Text
import uuid

from jobboard.database import Base
from jobboard.database_types import GUID


class Skill(Base):
    __tablename__ = "skills"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    category = Column(String(100), nullable=False, default="General")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Category(Base):
    __tablename__ = "categories"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
