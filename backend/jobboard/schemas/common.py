"""Shared response pieces."""
from pydantic import BaseModel


class Pagination(BaseModel):
    """Page metadata for list endpoints."""
    page: int
    limit: int
    total_count: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total_count: int) -> "Pagination":
        return cls(
            page=page,
            limit=limit,
            total_count=total_count,
            total_pages=-(-total_count // limit) if limit else 0,
            has_next=page * limit < total_count,
            has_prev=page > 1,
        )


class MessageResponse(BaseModel):
    message: str
