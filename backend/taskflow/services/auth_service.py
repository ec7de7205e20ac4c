"""Auth service: registration, login and profile lookup."""
import logging

from sqlalchemy.orm import Session

from taskflow.errors import AuthenticationError, DuplicateError
from taskflow.models.user import User
from taskflow.security import hash_password, issue_token, verify_password
from taskflow.services.transactions import commit

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def register(db: Session, name: str, email: str, password: str) -> tuple[User, str]:
    """Create a user and return it with a fresh bearer token."""
    email = _normalize_email(email)
    if db.query(User.user_id).filter(User.email == email).first():
        raise DuplicateError("User already exists with this email")

    user = User(name=name, email=email, password_hash=hash_password(password))
    db.add(user)
    # Two registrations racing on one email: the unique index decides.
    commit(db, on_integrity_error=lambda: DuplicateError("Email already exists"))
    db.refresh(user)
    logger.info("Registered user %s", user.user_id)
    return user, issue_token(user.user_id)


def login(db: Session, email: str, password: str) -> tuple[User, str]:
    user = db.query(User).filter(User.email == _normalize_email(email)).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise AuthenticationError(INVALID_CREDENTIALS)
    logger.info("User %s logged in", user.user_id)
    return user, issue_token(user.user_id)
