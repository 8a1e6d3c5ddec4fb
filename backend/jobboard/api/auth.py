"""
Authentication endpoints and dependencies.

Sessions are signed access tokens (see jobboard.services.security), sent as
an ``Authorization: Bearer`` header or the httpOnly ``auth_token`` cookie
set at sign-in. The user is re-read from the database on every request.
"""
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import settings
from jobboard.database import get_db
from jobboard.errors import AuthenticationError
from jobboard.models import User, UserRole
from jobboard.schemas.auth import AuthResponse, SignInRequest, SignUpRequest, UserResponse
from jobboard.schemas.common import MessageResponse
from jobboard.schemas.profile import AccountResponse
from jobboard.services import accounts
from jobboard.services.companies import count_active_jobs
from jobboard.services.profiles import build_account_response
from jobboard.services.security import create_access_token, decode_access_token

logger = logging.getLogger(__name__)
router = APIRouter()

AUTH_COOKIE = "auth_token"

bearer_scheme = HTTPBearer(auto_error=False)


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,  # Prevents JavaScript access (XSS protection)
        samesite="lax",  # CSRF protection
        max_age=settings.access_token_ttl_minutes * 60,
        secure=not settings.debug,
    )


# Authentication Dependencies
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_token: Optional[str] = Cookie(None),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency to get the authenticated user from the bearer token or cookie.

    Raises:
        HTTPException 401: missing, invalid or expired token, or unknown/inactive user
    """
    token = credentials.credentials if credentials else auth_token
    if not token:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_access_token(token)
        user_id = uuid.UUID(payload["sub"])
    except (AuthenticationError, ValueError) as e:
        detail = e.message if isinstance(e, AuthenticationError) else "Invalid token."
        raise HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid token. User not found.")

    return user


async def require_job_seeker(current_user: User = Depends(get_current_user)) -> User:
    """Dependency to require the JOB_SEEKER role."""
    if current_user.role != UserRole.JOB_SEEKER:
        logger.warning(f"User {current_user.id} (role={current_user.role.value}) attempted a job seeker endpoint")
        raise HTTPException(status_code=403, detail="Job seeker access required")
    return current_user


async def require_job_poster(current_user: User = Depends(get_current_user)) -> User:
    """Dependency to require the JOB_POSTER role."""
    if current_user.role != UserRole.JOB_POSTER:
        logger.warning(f"User {current_user.id} (role={current_user.role.value}) attempted a job poster endpoint")
        raise HTTPException(status_code=403, detail="Job poster access required")
    return current_user


# Endpoints
@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
    request: SignUpRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Create an account and sign it in.

    Returns:
        201: Account created
        400: Missing or invalid fields
        409: Email already registered
    """
    user = await accounts.sign_up(
        db,
        role=request.role,
        full_name=request.full_name,
        email=request.email,
        password=request.password,
        phone=request.phone,
        work_status=request.work_status,
        experience=request.experience,
        company_name=request.company_name,
        job_title=request.job_title,
        company_size=request.company_size,
    )
    token = create_access_token(user.id, user.role.value)
    _set_auth_cookie(response, token)

    return AuthResponse(
        message="User created successfully",
        access_token=token,
        user=UserResponse.model_validate(user),
        is_new_user=True,
        needs_profile_completion=user.role == UserRole.JOB_SEEKER,
    )


@router.post("/signin", response_model=AuthResponse)
async def signin(
    request: SignInRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Sign in with email, password and role.

    Returns:
        200: Signed in, token in body and cookie
        401: Invalid credentials
    """
    user, token = await accounts.sign_in(db, request.role, request.email, request.password)
    _set_auth_cookie(response, token)

    return AuthResponse(
        message="Sign in successful",
        access_token=token,
        user=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    current_user: User = Depends(get_current_user)
):
    """Logout user by clearing the authentication cookie."""
    response.delete_cookie(
        key=AUTH_COOKIE,
        httponly=True,
        samesite="lax"
    )

    logger.info(f"User logged out: {current_user.id}")

    return MessageResponse(message="Successfully logged out")


@router.get("/profile", response_model=AccountResponse)
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """The signed-in user with their role's profile and company."""
    user = await accounts.get_account(db, current_user.id)
    active_jobs = 0
    if user.company is not None:
        active_jobs = (await count_active_jobs(db, [user.company.id])).get(user.company.id, 0)
    return build_account_response(user, active_jobs)
