"""Invitation code generation.

Codes are 8 characters drawn from the base-36 alphabet, uppercase. A freshly
generated code is checked against existing groups and regenerated on
collision, up to ``INVITATION_CODE_ATTEMPTS`` tries.
"""
import logging
import secrets
import string
from typing import Callable, Optional

from sqlalchemy.orm import Session

from taskflow.config import settings
from taskflow.errors import ConflictError
from taskflow.models.group import Group

logger = logging.getLogger(__name__)

CODE_LENGTH = 8
ALPHABET = string.digits + string.ascii_uppercase


def generate_code() -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(CODE_LENGTH))


def normalize_code(code: str) -> str:
    return code.strip().upper()


def is_valid_code(code: str) -> bool:
    return len(code) == CODE_LENGTH and all(c in ALPHABET for c in code)


def unique_code(
    db: Session,
    generator: Callable[[], str] = generate_code,
    attempts: Optional[int] = None,
) -> str:
    """Return a code no existing group uses."""
    if attempts is None:
        attempts = settings.INVITATION_CODE_ATTEMPTS
    for attempt in range(1, attempts + 1):
        code = generator()
        taken = db.query(Group.group_id).filter(Group.invitation_code == code).first()
        if not taken:
            return code
        logger.warning("Invitation code collision on attempt %d", attempt)
    raise ConflictError("Could not generate a unique invitation code, please retry")
