"""
Temple Billing - Security
Password hashing, JWT access tokens and idle-expiring login sessions
"""

import uuid
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
import redis.asyncio as redis

from temple_billing.core.config import settings


# bcrypt password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SESSION_KEY_PREFIX = "temple:session:"

# Absolute token lifetime; the idle timeout is enforced by the Redis TTL
TOKEN_MAX_AGE = timedelta(hours=12)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Compare a plain password against a bcrypt hash

    Args:
        plain_password: password as typed
        hashed_password: stored hash

    Returns:
        True when they match
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt"""
    return pwd_context.hash(password)


def new_session_id() -> str:
    return uuid.uuid4().hex


def create_access_token(
    subject: str,
    role: str,
    session_id: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token

    Args:
        subject: username
        role: user role (admin/staff)
        session_id: Redis session id the token is bound to
        expires_delta: absolute lifetime (default TOKEN_MAX_AGE)

    Returns:
        encoded JWT
    """
    expire = datetime.utcnow() + (expires_delta or TOKEN_MAX_AGE)

    to_encode = {
        "sub": subject,
        "role": role,
        "sid": session_id,
        "exp": expire,
        "iat": datetime.utcnow(),
    }

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """
    Verify and decode a JWT access token

    Returns:
        payload, or None when the token is invalid or expired
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


# ============================================================================
# Login sessions (Redis, sliding idle expiry)
# ============================================================================

def _session_key(session_id: str) -> str:
    return f"{SESSION_KEY_PREFIX}{session_id}"


def session_ttl_seconds() -> int:
    return settings.SESSION_IDLE_MINUTES * 60


async def open_session(client: redis.Redis, session_id: str, username: str) -> None:
    """Register a new session that expires after SESSION_IDLE_MINUTES of inactivity"""
    await client.set(_session_key(session_id), username, ex=session_ttl_seconds())


async def touch_session(client: redis.Redis, session_id: str, username: str) -> bool:
    """
    Refresh an active session's idle timer

    Returns:
        False when the session has expired, was closed, or belongs to another user
    """
    key = _session_key(session_id)
    stored = await client.get(key)
    if stored is None:
        return False
    if isinstance(stored, bytes):
        stored = stored.decode()
    if stored != username:
        return False
    await client.expire(key, session_ttl_seconds())
    return True


async def close_session(client: redis.Redis, session_id: str) -> None:
    await client.delete(_session_key(session_id))
