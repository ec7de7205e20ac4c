"""Credential service: password hashing and bearer tokens.

Passwords are hashed with bcrypt. Tokens are HS256 JWTs carrying the user id
in ``sub`` and expire after ``JWT_EXPIRES_DAYS``.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from taskflow.config import settings
from taskflow.errors import AuthenticationError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long candidate
        return False


def issue_token(user_id: str, expires_in: Optional[timedelta] = None) -> str:
    """Sign a bearer token for ``user_id``."""
    now = datetime.now(timezone.utc)
    if expires_in is None:
        expires_in = timedelta(days=settings.JWT_EXPIRES_DAYS)
    payload = {"sub": user_id, "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> str:
    """Return the user id a token was issued for, or raise AuthenticationError."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Rejected expired token")
        raise AuthenticationError("Not authorized, token expired")
    except jwt.InvalidTokenError as e:
        logger.warning("Rejected invalid token: %s", e)
        raise AuthenticationError("Not authorized, token failed")

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise AuthenticationError("Not authorized, token failed")
    return user_id
