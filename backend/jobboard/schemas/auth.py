"""Authentication-related Pydantic schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from jobboard.models.user import UserRole
from jobboard.services.security import MAX_PASSWORD_BYTES, password_too_long


class SignUpRequest(BaseModel):
    """Request to create an account."""
    role: UserRole
    full_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    phone: Optional[str] = None
    accept_updates: bool = False

    # Job seeker onboarding
    work_status: Optional[str] = None  # fresher | employed | student | ...
    experience: Optional[str] = None   # entry | mid | senior | lead

    # Job poster onboarding
    company_name: Optional[str] = None
    job_title: Optional[str] = None
    company_size: Optional[str] = None

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """bcrypt cannot hash more than 72 bytes."""
        if password_too_long(v):
            raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
        return v


class SignInRequest(BaseModel):
    """Request to sign in with email and password."""
    role: UserRole
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    """Public view of a user (never includes the password hash)."""
    id: UUID
    email: str
    role: UserRole
    first_name: str
    last_name: str
    full_name: str
    phone: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    profile_picture: Optional[str] = None
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Response after successful sign-up or sign-in."""
    message: str
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    is_new_user: bool = False
    needs_profile_completion: bool = False
