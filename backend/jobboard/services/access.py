"""Role lookups shared by the service layer."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.errors import AuthorizationError, NotFoundError
from jobboard.models import User, UserRole

logger = logging.getLogger(__name__)


async def load_user(db: AsyncSession, user_id) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User not found")
    return user


async def require_role(db: AsyncSession, user_id, role: UserRole, message: str) -> User:
    """Load the user and make sure they hold `role`, else AuthorizationError(message)."""
    user = await load_user(db, user_id)
    if user.role != role:
        logger.warning(f"User {user_id} with role {user.role.value} denied: {message}")
        raise AuthorizationError(message)
    return user
