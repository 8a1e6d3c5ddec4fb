"""
Custom SQLAlchemy types shared by PostgreSQL (production) and SQLite (tests).
"""
import json
import uuid

from sqlalchemy import CHAR, Text, TypeDecorator
from sqlalchemy.dialects.postgresql import JSONB, UUID


class GUID(TypeDecorator):
    """
    UUID primary/foreign key column.

    Native UUID on PostgreSQL, CHAR(36) elsewhere. Accepts either uuid.UUID
    or its string form on the way in and always returns uuid.UUID.
    """
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(str(value))
        if dialect.name == "postgresql":
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


class JSONList(TypeDecorator):
    """
    List-valued JSON column (locations, benefits, preferred job types...).

    JSONB on PostgreSQL, JSON text elsewhere. NULL reads back as an empty list
    so callers never have to special-case missing collections.
    """
    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        if value is None:
            value = []
        value = list(value)
        if dialect.name == "postgresql":
            return value
        return json.dumps(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return []
        if dialect.name == "postgresql":
            return value
        return json.loads(value)
