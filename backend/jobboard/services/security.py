"""Password hashing and signed session tokens."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from jobboard.config import settings
from jobboard.errors import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes and newer releases refuse anything longer
MAX_PASSWORD_BYTES = 72

# Checked against when the account does not exist so a miss costs the same
# as a wrong password.
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS))


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (salted, 12 rounds)."""
    if password_too_long(password):
        raise ValidationError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """
    Constant-time password check.

    A missing hash, or a password no stored hash can match, still runs one
    bcrypt comparison before returning False.
    """
    if not hashed or password_too_long(password):
        bcrypt.checkpw(password.encode("utf-8")[:MAX_PASSWORD_BYTES], _DUMMY_HASH)
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(user_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed access token for the given user."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_ttl_minutes))
    payload = {
        "sub": str(user_id),
        "role": role,
        "type": "access",
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry of an access token.

    Raises:
        AuthenticationError: token is malformed, tampered with or expired
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session expired. Please sign in again.")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token.")

    if payload.get("type") != "access" or not payload.get("sub"):
        raise AuthenticationError("Invalid token.")
    return payload
