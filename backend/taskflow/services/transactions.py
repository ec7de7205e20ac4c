"""Commit helper mapping store failures onto the error taxonomy."""
import logging
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from taskflow.errors import ConflictError, TaskFlowError, UnexpectedError

logger = logging.getLogger(__name__)


def commit(
    db: Session,
    on_integrity_error: Optional[Callable[[], TaskFlowError]] = None,
) -> None:
    """Commit the session, rolling back and raising a TaskFlowError on failure.

    ``on_integrity_error`` builds the error to raise when a unique or foreign
    key constraint rejects the write; without it a ConflictError is raised.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Integrity error on commit: %s", e.orig)
        if on_integrity_error is not None:
            raise on_integrity_error()
        raise ConflictError("The request conflicts with existing data")
    except StaleDataError:
        db.rollback()
        logger.warning("Concurrent modification detected on commit")
        raise ConflictError("The group was modified by another request, please retry")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database error on commit")
        raise UnexpectedError()
