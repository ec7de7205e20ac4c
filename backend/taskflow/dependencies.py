"""Route dependencies: resolve the bearer token to the current user."""
import logging
from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.errors import AuthenticationError
from taskflow.models.user import User
from taskflow.security import verify_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header surfaces as our own 401 envelope.
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    db: Session = Depends(get_db),
) -> User:
    """Extract the current user from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authorized, no token")

    user_id = verify_token(credentials.credentials)
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        logger.warning("Token for unknown user %s", user_id)
        raise AuthenticationError()
    return user
